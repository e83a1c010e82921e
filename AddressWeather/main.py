"""Interactive command-line weather lookup by street address."""
import argparse
import logging
import os
import sys
from typing import TextIO, Tuple

from dotenv import load_dotenv

from forecast_cache import DEFAULT_TTL_SECONDS, ExpiringCache
from forecast_data import ForecastSnapshot
from google_geocode_provider import GoogleGeocodeProvider
from openmeteo_provider import OpenMeteoProvider
from weather_service import ForecastService, ForecastServiceError

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LOG_FILE = os.path.join(BASE_DIR, "address-weather.log")
APP_NAME = "World's Best Weather App"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Weather forecast by address")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--units", choices=["fahrenheit", "celsius"], default="fahrenheit")
    parser.add_argument("--cache-ttl", type=float, default=DEFAULT_TTL_SECONDS, help="Seconds a forecast stays cached")
    parser.add_argument("--purge-interval", type=float, default=3600.0, help="Seconds between cache sweeps")
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    # stdout belongs to the prompt; only echo logs to stderr when asked
    handlers = [logging.FileHandler(log_file)]
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def load_config() -> Tuple[str, str, str]:
    load_dotenv()
    api_key = os.getenv("GEOCODE_API_KEY")
    geocode_url = os.getenv("GEOCODE_BASE_URL", GoogleGeocodeProvider.DEFAULT_BASE_URL)
    forecast_url = os.getenv("FORECAST_BASE_URL", OpenMeteoProvider.DEFAULT_BASE_URL)

    if not api_key:
        raise SystemExit("GEOCODE_API_KEY environment variable is not set.")

    logging.info("Configuration loaded: geocode=%s forecast=%s", geocode_url, forecast_url)
    return api_key, geocode_url, forecast_url


def build_forecast_service(
    api_key: str, geocode_url: str, forecast_url: str, cache: ExpiringCache, args: argparse.Namespace
) -> ForecastService:
    geocoder = GoogleGeocodeProvider(api_key=api_key, base_url=geocode_url, timeout=args.timeout)
    forecaster = OpenMeteoProvider(base_url=forecast_url, temperature_unit=args.units, timeout=args.timeout)
    service = ForecastService(geocoder=geocoder, forecaster=forecaster, cache=cache)
    logging.info("Forecast service ready (cache ttl=%ss)", cache.ttl)
    return service


def unit_symbol(units: str) -> str:
    return "C" if units == "celsius" else "F"


def display_prompt(out: TextIO) -> None:
    out.write("To exit please enter q\n")
    out.write("Otherwise, please enter your address\n")
    out.write("-> ")
    out.flush()


def display_current_forecast(
    out: TextIO, address: str, snapshot: ForecastSnapshot, from_cache: bool, unit: str = "F"
) -> None:
    today = snapshot.today
    out.write("\n")
    if from_cache:
        out.write("***Retrieved forecast from cache***\n")
    out.write(f"Here is the weather for address: {address}\n")
    out.write("---------------------------\n")
    out.write(f"The current temperature is {snapshot.current_temperature:.1f} {unit}\n")
    out.write(f"The high for today is {today.max_temperature:.1f} {unit}\n")
    out.write(f"The low for today is {today.min_temperature:.1f} {unit}\n")
    out.write("\n")


def display_extended_forecast(out: TextIO, snapshot: ForecastSnapshot, unit: str = "F") -> None:
    out.write("Extended Forecast: \n")
    out.write("---------------------------\n")
    for day in snapshot.daily:
        out.write(f"{day.date}\n")
        out.write(f"Max Temp: {day.max_temperature:.1f} {unit}\n")
        out.write(f"Min Temp: {day.min_temperature:.1f} {unit}\n")
        out.write("--------------------\n")
    out.write("\n")


def run_shell(service: ForecastService, stdin: TextIO, stdout: TextIO, unit: str = "F") -> None:
    """Prompt for addresses until the user quits or input ends."""
    stdout.write(f"{APP_NAME}\n")
    stdout.write("---------------------------\n")

    while True:
        display_prompt(stdout)
        line = stdin.readline()
        if not line:
            logging.info("End of input, stopping")
            return

        address = line.strip()
        if address.lower() == "q":
            break
        if not address:
            continue

        try:
            result = service.resolve_forecast(address)
        except ForecastServiceError as err:
            logging.error("Lookup failed for %r: %s", address, err)
            stdout.write(f"{err}\n")
            continue
        except Exception as exc:
            logging.exception("Unexpected error: %s", exc)
            stdout.write("An unexpected error occurred. Please try again!\n")
            continue

        if result.snapshot.today is None:
            stdout.write("Forecast data is unavailable. Please try again!\n")
            continue

        display_current_forecast(stdout, result.canonical_address, result.snapshot, result.served_from_cache, unit)
        display_extended_forecast(stdout, result.snapshot, unit)

    stdout.write(f"Thanks for using the {APP_NAME}!\n")


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, geocode_url, forecast_url = load_config()

    cache = ExpiringCache(ttl_seconds=args.cache_ttl)
    purge = cache.start_auto_purge(args.purge_interval)
    service = build_forecast_service(api_key, geocode_url, forecast_url, cache, args)

    try:
        run_shell(service, sys.stdin, sys.stdout, unit_symbol(args.units))
    except KeyboardInterrupt:
        logging.info("Interrupted, stopping")
    finally:
        purge.stop(timeout=1.0)
        logging.info("Cache auto purge stopped")


if __name__ == "__main__":
    main()
