"""Provider abstractions - allow swapping the geocoding and forecast APIs."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from forecast_data import ForecastSnapshot


@dataclass
class GeocodeResult:
    """Canonical address and coordinates returned by a geocoder."""
    formatted_address: str
    latitude: float
    longitude: float


class GeocodeProviderBase(ABC):
    """Abstract base class for address geocoders."""

    @abstractmethod
    def geocode(self, address: str) -> GeocodeResult:
        """
        Resolve a free-text address.

        Returns:
            GeocodeResult: Best match for the address

        Raises:
            WeatherProviderError: If the provider fails or finds nothing
        """
        pass


class ForecastProviderBase(ABC):
    """Abstract base class for forecast data providers."""

    @abstractmethod
    def get_forecast(self, latitude: float, longitude: float) -> ForecastSnapshot:
        """
        Fetch the current temperature and daily outlook for a location.

        Returns:
            ForecastSnapshot: Current reading plus daily min/max series

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a geocode or forecast provider fails."""
    pass
