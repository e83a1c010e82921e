"""Forecast service: geocode an address, then serve its forecast from cache or upstream."""
import logging
import re
from dataclasses import dataclass
from forecast_cache import ExpiringCache
from forecast_data import ForecastSnapshot
from weather_provider import ForecastProviderBase, GeocodeProviderBase, WeatherProviderError

# Two-letter state code, one space, five-digit ZIP, e.g. "TX 78758"
STATE_POSTAL_CODE = re.compile(r"\b[A-Z]{2}\s\d{5}\b", re.ASCII)


class ForecastServiceError(Exception):
    """Base class for errors raised by ForecastService."""
    pass


class CoordinatesUnresolved(ForecastServiceError):
    """Geocoding failed or returned no usable location."""
    pass


class ForecastUnavailable(ForecastServiceError):
    """The forecast provider failed after a cache miss."""
    pass


@dataclass
class ForecastResult:
    """Outcome of a lookup: the geocoder's address, the forecast and where it came from."""
    canonical_address: str
    snapshot: ForecastSnapshot
    served_from_cache: bool


def derive_cache_key(address: str) -> str:
    """
    Extract the ZIP code from a formatted address.

    "3001 Esperanza Crossing, Austin, TX 78758, USA" -> "78758". Returns an
    empty string when no state/ZIP pair is present; every such address then
    shares a single cache entry.
    """
    match = STATE_POSTAL_CODE.search(address)
    if match and len(match.group()) == 8:
        return match.group()[-5:]
    return ""


class ForecastService:
    """
    Resolve addresses to forecasts, reusing cached snapshots per ZIP code.

    Addresses that geocode into the same ZIP share one cache entry, so only
    the first lookup in a region hits the forecast API until the entry
    expires. Concurrent misses for the same key each fetch upstream; the
    last one to finish wins the cache slot.
    """

    def __init__(
        self,
        geocoder: GeocodeProviderBase,
        forecaster: ForecastProviderBase,
        cache: ExpiringCache,
    ):
        """
        Initialize forecast service.

        Args:
            geocoder: Provider resolving addresses to coordinates
            forecaster: Provider fetching forecasts for coordinates
            cache: Cache shared by every lookup made through this service
        """
        self.geocoder = geocoder
        self.forecaster = forecaster
        self.cache = cache

    def resolve_forecast(self, address: str) -> ForecastResult:
        """
        Get the forecast for a free-text address.

        Returns:
            ForecastResult: Canonical address, snapshot and whether it came
            from the cache

        Raises:
            CoordinatesUnresolved: If the address cannot be geocoded
            ForecastUnavailable: If the forecast fetch fails on a cache miss
        """
        try:
            location = self.geocoder.geocode(address)
        except WeatherProviderError as e:
            logging.warning(f"Geocoding failed for '{address}': {e}")
            raise CoordinatesUnresolved(f"error retrieving coordinates: {e}") from e

        # NOTE: a real location on the equator or prime meridian is rejected
        # here as well; kept for compatibility with existing behaviour.
        if not location.formatted_address or location.latitude == 0 or location.longitude == 0:
            logging.warning(f"Geocoder returned no usable location for '{address}': {location}")
            raise CoordinatesUnresolved(
                f"error retrieving coordinates: no usable result for address: {address}"
            )

        key = derive_cache_key(location.formatted_address)
        cached = self.cache.get(key)
        if cached is not None:
            logging.info(f"Cache hit for key '{key}' ({location.formatted_address})")
            return ForecastResult(location.formatted_address, cached, served_from_cache=True)

        logging.info(f"Cache miss for key '{key}', fetching forecast...")
        try:
            snapshot = self.forecaster.get_forecast(location.latitude, location.longitude)
        except WeatherProviderError as e:
            logging.error(f"Forecast fetch failed for {location.latitude},{location.longitude}: {e}")
            raise ForecastUnavailable(f"error retrieving forecast: {e}") from e

        self.cache.put(key, snapshot)
        logging.debug(f"Cached forecast under key '{key}'")
        return ForecastResult(location.formatted_address, snapshot, served_from_cache=False)
