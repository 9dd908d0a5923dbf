"""Location insights - amenity walking minutes and the categorical scores derived from them."""

import asyncio
import math
from typing import Optional
from src.models.location_insight import AmenityMinutes, LocationInsight
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

# amenity field -> Google Places type
AMENITY_PLACE_TYPES = {
    "supermarket_min": "supermarket",
    "metro_min": "subway_station",
    "cafe_min": "cafe",
    "park_min": "park",
    "gym_min": "gym",
    "pharmacy_min": "pharmacy",
}


def _js_round(value: float) -> int:
    return math.floor(value + 0.5)


def derive_location_insight(amenities: AmenityMinutes, property_id: Optional[str] = None) -> LocationInsight:
    """Pure derivation of the location scores from six walking-minute values."""
    average = amenities.average

    if average <= 6:
        walkability = "high"
    elif average <= 12:
        walkability = "moderate"
    else:
        walkability = "low"

    if amenities.supermarket_min <= 5:
        daily_convenience = "strong"
    elif amenities.supermarket_min <= 10:
        daily_convenience = "moderate"
    else:
        daily_convenience = "weak"

    if average <= 5:
        neighbourhood_energy = "vibrant"
    elif average <= 10:
        neighbourhood_energy = "balanced"
    else:
        neighbourhood_energy = "calm"

    if amenities.metro_min <= 3:
        traffic_exposure = "high"
    elif average <= 7:
        traffic_exposure = "moderate"
    else:
        traffic_exposure = "low"

    proximity_score = max(20, min(100, _js_round(100 - average * 3)))

    return LocationInsight(
        property_id=property_id,
        walkability=walkability,
        daily_convenience=daily_convenience,
        traffic_exposure=traffic_exposure,
        neighbourhood_energy=neighbourhood_energy,
        proximity_score=proximity_score,
        average_minutes=round(average, 2),
        amenities_json=amenities,
    )


async def gather_amenity_minutes(lat: float, lng: float, provider=None) -> AmenityMinutes:
    """Query all six categories concurrently; each failure keeps its default."""
    amenities = AmenityMinutes()
    if provider is None or not getattr(provider, "enabled", True):
        logger.info("Amenity lookups skipped: no distance provider")
        return amenities

    fields = list(AMENITY_PLACE_TYPES)
    results = await asyncio.gather(
        *(provider.nearest_walking_minutes(lat, lng, AMENITY_PLACE_TYPES[field]) for field in fields),
        return_exceptions=True,
    )

    resolved = {}
    for field, minutes in zip(fields, results):
        if isinstance(minutes, Exception):
            logger.warning("Amenity lookup failed", amenity=field, error=str(minutes))
            continue
        if minutes is not None:
            resolved[field] = minutes

    logger.info("Amenity lookups completed", resolved_count=len(resolved), total=len(fields))
    return amenities.model_copy(update=resolved)


async def generate_location_insights(lat: float, lng: float, provider=None, property_id: Optional[str] = None) -> LocationInsight:
    amenities = await gather_amenity_minutes(lat, lng, provider)
    return derive_location_insight(amenities, property_id=property_id)
