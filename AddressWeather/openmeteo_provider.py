"""Open-Meteo forecast API provider implementation."""
import logging
import requests
from forecast_data import ForecastSnapshot
from weather_provider import ForecastProviderBase, WeatherProviderError


class OpenMeteoProvider(ForecastProviderBase):
    """
    Forecast provider using the Open-Meteo forecast API.

    Open-Meteo is free and needs no API key: https://open-meteo.com/en/docs
    Returns the current 2m temperature and the daily max/min series.
    """

    DEFAULT_BASE_URL = "https://api.open-meteo.com"
    FORECAST_PATH = "/v1/forecast"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        temperature_unit: str = "fahrenheit",
        timeout: int = 10
    ):
        """
        Initialize Open-Meteo provider.

        Args:
            base_url: API scheme and host, without a trailing path
            temperature_unit: "fahrenheit" or "celsius"
            timeout: HTTP request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.temperature_unit = temperature_unit
        self.timeout = timeout

    def get_forecast(self, latitude: float, longitude: float) -> ForecastSnapshot:
        """
        Fetch the forecast for a coordinate pair.

        Returns:
            ForecastSnapshot: Current temperature plus daily max/min series

        Raises:
            WeatherProviderError: If the API request fails or the payload is malformed
        """
        url = self.base_url + self.FORECAST_PATH
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": "temperature_2m",
            "daily": "temperature_2m_max,temperature_2m_min",
            "temperature_unit": self.temperature_unit,
            "wind_speed_unit": "mph",
            "precipitation_unit": "inch",
        }

        try:
            logging.info(f"Making Open-Meteo API request: {url}")
            logging.debug(f"Request parameters: lat={latitude}, lon={longitude}, unit={self.temperature_unit}")

            response = requests.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")
            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            if not isinstance(data, dict):
                raise WeatherProviderError(f"Unexpected response shape: {type(data).__name__}")

            current = data.get("current")
            if not isinstance(current, dict) or current.get("temperature_2m") is None:
                raise WeatherProviderError("Response missing 'current.temperature_2m'")

            daily = data.get("daily")
            if daily is None:
                raise WeatherProviderError("Response missing 'daily' block")
            if not isinstance(daily, dict):
                raise WeatherProviderError(f"Unexpected 'daily' shape: {type(daily).__name__}")

            snapshot = ForecastSnapshot.from_series(
                current["temperature_2m"],
                daily.get("time", []),
                daily.get("temperature_2m_max", []),
                daily.get("temperature_2m_min", []),
            )

            logging.info(
                f"Successfully parsed forecast: {snapshot.current_temperature} now, {len(snapshot.daily)} days"
            )
            return snapshot

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {str(e)}")
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from an Open-Meteo error response."""
        try:
            error_data = response.json()
            reason = error_data.get("reason", "Unknown error")
            logging.error(f"Open-Meteo API error response: {error_data}")
            raise WeatherProviderError(f"Open-Meteo API error {response.status_code}: {reason}")
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(
                f"HTTP {response.status_code}: {response.text[:200]}"
            )
