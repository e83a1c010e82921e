"""Google Geocoding API provider implementation."""
import logging
import requests
from weather_provider import GeocodeProviderBase, GeocodeResult, WeatherProviderError


class GoogleGeocodeProvider(GeocodeProviderBase):
    """
    Geocoder using the Google Geocoding API.

    https://developers.google.com/maps/documentation/geocoding
    The first result is taken as the best match for the address.
    """

    DEFAULT_BASE_URL = "https://maps.googleapis.com"
    GEOCODE_PATH = "/maps/api/geocode/json"

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL, timeout: int = 10):
        """
        Initialize Google geocode provider.

        Args:
            api_key: Google Maps API key
            base_url: API scheme and host, without a trailing path
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def geocode(self, address: str) -> GeocodeResult:
        """
        Resolve an address to its formatted form and coordinates.

        Returns:
            GeocodeResult: First (most relevant) match

        Raises:
            WeatherProviderError: If the request fails or no result is found
        """
        url = self.base_url + self.GEOCODE_PATH
        params = {"address": address, "key": self.api_key}

        try:
            logging.info(f"Making Google Geocoding API request: {url}")
            logging.debug(f"Geocoding address: {address!r}")

            response = requests.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")
            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                raise WeatherProviderError(f"received non-OK HTTP status: {response.status_code}")

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            if not isinstance(data, dict):
                raise WeatherProviderError(f"Unexpected response shape: {type(data).__name__}")

            results = data.get("results") or []
            if not results:
                status = data.get("status", "UNKNOWN")
                message = data.get("error_message")
                detail = f"{status}: {message}" if message else status
                raise WeatherProviderError(f"no results found for address: {address} ({detail})")

            result = results[0]
            location = result["geometry"]["location"]
            geocoded = GeocodeResult(
                formatted_address=result.get("formatted_address", ""),
                latitude=float(location["lat"]),
                longitude=float(location["lng"]),
            )

            logging.info(f"Geocoded {address!r} to {geocoded.formatted_address!r}")
            return geocoded

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {str(e)}")
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")
