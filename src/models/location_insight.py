"""Location insight models - neighbourhood-quality snapshot per property."""

from typing import Literal, Optional
from pydantic import BaseModel, Field


Walkability = Literal["high", "moderate", "low"]
DailyConvenience = Literal["strong", "moderate", "weak"]
TrafficExposure = Literal["high", "moderate", "low"]
NeighbourhoodEnergy = Literal["vibrant", "balanced", "calm"]


class AmenityMinutes(BaseModel):
    """Walking minutes to the nearest amenity of each category.

    Defaults are the values kept when a lookup is unavailable or fails.
    """
    supermarket_min: int = 10
    metro_min: int = 15
    cafe_min: int = 5
    park_min: int = 10
    gym_min: int = 12
    pharmacy_min: int = 8

    @property
    def average(self) -> float:
        values = list(self.model_dump().values())
        return sum(values) / len(values)


class SolarProfile(BaseModel):
    orientation: str = "unknown"
    morning_light: str = "moderate"
    afternoon_light: str = "moderate"
    seasonal_note: str = "Verify light during visit."


class NoiseProfile(BaseModel):
    daytime_db: int = 55
    nighttime_db: int = 45
    primary_sources: list[str] = Field(default_factory=lambda: ["street traffic"])
    sensitivity_note: str = "Estimate only, verify during visit."


class LifestyleProfile(BaseModel):
    neighbourhood_type: str = "urban residential"
    community_character: str = "urban mix"


class LocationInsight(BaseModel):
    """Row in the location_insights table (upserted on property_id)."""
    property_id: Optional[str] = None
    space_id: Optional[str] = None
    walkability: Walkability
    daily_convenience: DailyConvenience
    traffic_exposure: TrafficExposure
    neighbourhood_energy: NeighbourhoodEnergy
    proximity_score: int = Field(..., ge=20, le=100)
    average_minutes: float
    amenities_json: AmenityMinutes
    solar_json: SolarProfile = Field(default_factory=SolarProfile)
    noise_json: NoiseProfile = Field(default_factory=NoiseProfile)
    lifestyle_json: LifestyleProfile = Field(default_factory=LifestyleProfile)
