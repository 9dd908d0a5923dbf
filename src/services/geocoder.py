"""Google Geocoding adapter - resolve an address to coordinates and locality."""

from typing import Optional
import httpx
from pydantic import BaseModel
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GeocodeResult(BaseModel):
    lat: float
    lng: float
    city: str = ""
    state: str = ""
    zip: str = ""


def _component(result: dict, component_type: str, name: str = "long_name") -> Optional[str]:
    for component in result.get("address_components", []):
        if component_type in component.get("types", []):
            return component.get(name)
    return None


def parse_geocode_response(data: dict) -> Optional[GeocodeResult]:
    """Turn a Geocoding API response into a GeocodeResult, or None when nothing matched."""
    if data.get("status") != "OK" or not data.get("results"):
        return None

    result = data["results"][0]
    location = result["geometry"]["location"]
    return GeocodeResult(
        lat=location["lat"],
        lng=location["lng"],
        city=_component(result, "locality") or _component(result, "sublocality") or "",
        state=_component(result, "administrative_area_level_1", "short_name") or "",
        zip=_component(result, "postal_code") or "",
    )


class GoogleGeocoder:
    """Best-effort geocoder: any failure or missing key yields None."""

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def geocode(self, address: str) -> Optional[GeocodeResult]:
        if not self.api_key or not address:
            logger.debug("Geocoding skipped", has_key=bool(self.api_key))
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(GEOCODE_URL, params={"address": address, "key": self.api_key})
                response.raise_for_status()
                result = parse_geocode_response(response.json())
        except Exception as e:
            logger.warning("Geocoding failed", error=str(e))
            return None

        if result is None:
            logger.info("Geocoding returned no match")
        return result
