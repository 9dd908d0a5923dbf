"""Google Places + Distance Matrix adapter - walking minutes to the nearest amenity."""

from typing import Optional
import httpx
from src.utils.errors import AdapterError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"


class GoogleWalkingDistanceProvider:
    """Nearest place of a Google Places type, measured as walking minutes."""

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

    async def _nearest_place_id(self, client: httpx.AsyncClient, lat: float, lng: float, place_type: str) -> Optional[str]:
        response = await client.get(NEARBY_SEARCH_URL, params={
            "location": f"{lat},{lng}",
            "rankby": "distance",
            "type": place_type,
            "key": self.api_key,
        })
        response.raise_for_status()
        data = response.json()
        if data.get("status") not in ("OK", "ZERO_RESULTS"):
            raise AdapterError(f"Nearby search status {data.get('status')}")
        results = data.get("results") or []
        return results[0].get("place_id") if results else None

    async def _walking_seconds(self, client: httpx.AsyncClient, lat: float, lng: float, place_id: str) -> Optional[int]:
        response = await client.get(DISTANCE_MATRIX_URL, params={
            "origins": f"{lat},{lng}",
            "destinations": f"place_id:{place_id}",
            "mode": "walking",
            "key": self.api_key,
        })
        response.raise_for_status()
        rows = response.json().get("rows") or [{}]
        elements = rows[0].get("elements") or [{}]
        return (elements[0].get("duration") or {}).get("value")

    async def nearest_walking_minutes(self, lat: float, lng: float, place_type: str) -> Optional[int]:
        """Walking minutes to the closest `place_type`, or None when unavailable."""
        if not self.api_key:
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                place_id = await self._nearest_place_id(client, lat, lng, place_type)
                if not place_id:
                    return None
                seconds = await self._walking_seconds(client, lat, lng, place_id)
        except Exception as e:
            logger.warning(
                "Walking distance lookup failed",
                place_type=place_type,
                error=str(e)
            )
            return None

        if not seconds:
            return None
        return int(seconds / 60 + 0.5)
