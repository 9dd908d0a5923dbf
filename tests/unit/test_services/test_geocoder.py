"""Tests for the Google Geocoding adapter."""

import httpx
import pytest
from src.services.geocoder import GoogleGeocoder, parse_geocode_response
from tests.fixtures.listings import GEOCODE_OK_RESPONSE, GEOCODE_ZERO_RESULTS


@pytest.mark.unit
def test_parse_geocode_response():
    result = parse_geocode_response(GEOCODE_OK_RESPONSE)

    assert result.lat == 34.0901
    assert result.lng == -118.4065
    assert result.city == "Beverly Hills"
    assert result.state == "CA"
    assert result.zip == "90210"


@pytest.mark.unit
def test_parse_geocode_response_uses_sublocality():
    data = {
        "status": "OK",
        "results": [{
            "geometry": {"location": {"lat": 40.7, "lng": -73.9}},
            "address_components": [
                {"long_name": "Brooklyn", "short_name": "Brooklyn", "types": ["sublocality", "political"]},
            ],
        }],
    }
    result = parse_geocode_response(data)
    assert result.city == "Brooklyn"
    assert result.state == ""
    assert result.zip == ""


@pytest.mark.unit
def test_parse_geocode_response_no_match():
    assert parse_geocode_response(GEOCODE_ZERO_RESULTS) is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_geocode_success():
    seen = {}

    def respond(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=GEOCODE_OK_RESPONSE)

    geocoder = GoogleGeocoder("test-maps-key", transport=httpx.MockTransport(respond))
    result = await geocoder.geocode("123 Main St, Beverly Hills, CA")

    assert result.city == "Beverly Hills"
    assert seen["params"]["address"] == "123 Main St, Beverly Hills, CA"
    assert seen["params"]["key"] == "test-maps-key"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_geocode_without_key_is_skipped():
    def respond(request):
        raise AssertionError("no request expected")

    geocoder = GoogleGeocoder(None, transport=httpx.MockTransport(respond))
    assert not geocoder.enabled
    assert await geocoder.geocode("123 Main St") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_geocode_http_error_returns_none():
    geocoder = GoogleGeocoder("k", transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    assert await geocoder.geocode("123 Main St") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_geocode_transport_failure_returns_none():
    def respond(request):
        raise httpx.ConnectError("connection refused")

    geocoder = GoogleGeocoder("k", transport=httpx.MockTransport(respond))
    assert await geocoder.geocode("123 Main St") is None
