"""Photo insight models - structured vision assessment of listing photos."""

from typing import Literal, Optional
from pydantic import BaseModel, Field


class LightAssessment(BaseModel):
    quality: str = Field(..., description="poor, fair, good or excellent")
    natural_light_visible: bool = Field(True, description="Daylight visible in the photos")
    artificial_enhancement_suspected: bool = Field(False, description="HDR, staging lights or edits suspected")
    notes: Optional[str] = ""


class SpatialAssessment(BaseModel):
    size_impression: str = Field(..., description="cramped, compact, adequate or spacious")
    ceiling_height: Optional[str] = Field(None, description="low, standard or high")
    flow: Optional[str] = Field(None, description="poor, adequate or good")
    notes: Optional[str] = ""


class ConditionAssessment(BaseModel):
    overall: str = Field(..., description="poor, fair, good or excellent")
    finishes: Optional[str] = Field(None, description="basic, standard, premium or luxury")
    estimated_renovation_age: Optional[str] = Field(None, description="recent, 5-10yr, 10-20yr or dated")
    notes: Optional[str] = ""


class Atmosphere(BaseModel):
    dominant_feeling: str = ""
    calm_hectic_score: int = Field(50, ge=0, le=100)
    airy_dim_score: int = Field(50, ge=0, le=100)
    warm_cold_score: int = Field(50, ge=0, le=100)


class PhotoInsights(BaseModel):
    """Vision assessment stored on the property as photo_insights_json."""
    light_assessment: LightAssessment
    spatial_assessment: SpatialAssessment
    condition_assessment: ConditionAssessment
    atmosphere: Atmosphere = Field(default_factory=Atmosphere)
    red_flags: list[str] = Field(default_factory=list, description="Visible issues worth verifying in person")
    confidence: Literal["low", "medium", "high"] = "medium"

    @property
    def enhancement_suspected(self) -> bool:
        return self.light_assessment.artificial_enhancement_suspected
