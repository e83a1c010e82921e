"""Tests for Google geocode provider."""
import pytest
import requests
from unittest.mock import Mock, patch
from google_geocode_provider import GoogleGeocodeProvider
from weather_provider import GeocodeResult, WeatherProviderError


@pytest.fixture
def sample_geocode_response():
    """Sample Google Geocoding API response."""
    return {
        "results": [
            {
                "address_components": [],
                "formatted_address": "3001 Esperanza Crossing, Austin, TX 78758, USA",
                "geometry": {
                    "location": {"lat": 30.3985991, "lng": -97.7196451},
                    "location_type": "ROOFTOP",
                },
                "place_id": "ChIJAZqSbXPMRIYRNYouzErXl_4",
                "types": ["street_address"],
            }
        ],
        "status": "OK",
    }


@pytest.fixture
def provider():
    """Create Google geocode provider instance."""
    return GoogleGeocodeProvider(api_key="test_key", base_url="https://example.test")


def _response(payload, ok=True, status_code=200):
    mock_response = Mock()
    mock_response.ok = ok
    mock_response.status_code = status_code
    mock_response.json.return_value = payload
    return mock_response


def test_geocode_success(provider, sample_geocode_response):
    """Test successful API call and parsing."""
    with patch('google_geocode_provider.requests.get') as mock_get:
        mock_get.return_value = _response(sample_geocode_response)

        result = provider.geocode("3001 Esperanza Crossing Austin")

        assert result == GeocodeResult(
            formatted_address="3001 Esperanza Crossing, Austin, TX 78758, USA",
            latitude=30.3985991,
            longitude=-97.7196451,
        )
        args, kwargs = mock_get.call_args
        assert args[0] == "https://example.test/maps/api/geocode/json"
        assert kwargs["params"] == {"address": "3001 Esperanza Crossing Austin", "key": "test_key"}
        assert kwargs["timeout"] == 10


def test_geocode_uses_first_result(provider, sample_geocode_response):
    """Test that only the first result is used."""
    second = {
        "formatted_address": "Somewhere Else, TX 70000, USA",
        "geometry": {"location": {"lat": 1.0, "lng": 2.0}},
    }
    sample_geocode_response["results"].append(second)
    with patch('google_geocode_provider.requests.get') as mock_get:
        mock_get.return_value = _response(sample_geocode_response)

        result = provider.geocode("Esperanza")

        assert result.latitude == 30.3985991


def test_geocode_no_results(provider):
    """Test handling of an empty result list."""
    with patch('google_geocode_provider.requests.get') as mock_get:
        mock_get.return_value = _response({"results": [], "status": "ZERO_RESULTS"})

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.geocode("asdfghjkl")

        assert "no results found for address: asdfghjkl" in str(exc_info.value)
        assert "ZERO_RESULTS" in str(exc_info.value)


def test_geocode_request_denied(provider):
    """Test that Google's error message is surfaced."""
    with patch('google_geocode_provider.requests.get') as mock_get:
        mock_get.return_value = _response({
            "results": [],
            "status": "REQUEST_DENIED",
            "error_message": "The provided API key is invalid.",
        })

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.geocode("Austin")

        assert "The provided API key is invalid." in str(exc_info.value)


def test_geocode_http_error(provider):
    """Test handling of HTTP errors."""
    with patch('google_geocode_provider.requests.get') as mock_get:
        mock_get.return_value = _response({}, ok=False, status_code=500)

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.geocode("Austin")

        assert "non-OK HTTP status: 500" in str(exc_info.value)


def test_geocode_network_error(provider):
    """Test handling of network errors."""
    with patch('google_geocode_provider.requests.get') as mock_get:
        mock_get.side_effect = requests.exceptions.Timeout("timed out")

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.geocode("Austin")

        assert "Network error" in str(exc_info.value)


def test_geocode_malformed_result(provider):
    """Test handling of a result without geometry."""
    with patch('google_geocode_provider.requests.get') as mock_get:
        mock_get.return_value = _response({"results": [{"formatted_address": "Austin, TX 78758, USA"}]})

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.geocode("Austin")

        assert "Failed to parse response" in str(exc_info.value)


@pytest.mark.parametrize("payload", [[], "oops", None])
def test_geocode_unexpected_shape(provider, payload):
    """Test that a non-object payload becomes a provider error."""
    with patch('google_geocode_provider.requests.get') as mock_get:
        mock_get.return_value = _response(payload)

        with pytest.raises(WeatherProviderError) as exc_info:
            provider.geocode("Austin")

        assert "Unexpected response shape" in str(exc_info.value)
