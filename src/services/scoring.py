"""Deterministic scoring for ingested properties (location + photo attributes).

This is the canonical ScoringStrategy. The space-only alternate lives in
src/services/space_scoring.py and is selected through get_scoring_strategy().
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from pydantic import BaseModel
from src.models.certificate import ChecklistItem, ExperienceCapital, Signal
from src.models.location_insight import LocationInsight
from src.models.photo_insight import PhotoInsights
from src.models.property import Property


class ScoringResult(BaseModel):
    """State, trajectory, capital buckets and signals produced by a strategy."""
    state: str
    trajectory: str
    score: Optional[int] = None
    experience_capital: ExperienceCapital
    signals: list[Signal]


class ScoringStrategy(ABC):
    """Capability shared by both certificate engine generations."""
    name: str = ""

    @abstractmethod
    def evaluate(self, subject: Any) -> ScoringResult:
        """Score a fully resolved subject. Must not perform I/O."""


class PropertyScoringInput(BaseModel):
    property: Property
    location: LocationInsight
    photo: Optional[PhotoInsights] = None


def compute_experience_score(location: LocationInsight, sqft: Optional[float]) -> int:
    """Additive 0-100 score around a base of 50."""
    score = 50
    if location.walkability == "high":
        score += 8
    if location.traffic_exposure == "high":
        score -= 12
    if location.traffic_exposure == "low":
        score += 8
    if location.neighbourhood_energy == "calm":
        score += 5
    if location.proximity_score >= 80:
        score += 5
    if sqft and sqft >= 1500:
        score += 8
    if sqft and sqft < 600:
        score -= 10
    return score


def band_experience_state(score: int) -> str:
    if score >= 70:
        return "Strong"
    if score >= 50:
        return "Stable"
    if score >= 35:
        return "Fragile"
    return "Declining"


def compute_trajectory(location: LocationInsight) -> str:
    if location.neighbourhood_energy == "calm" and location.daily_convenience == "strong":
        return "Improving"
    return "Stable"


def photo_summary_line(photo: Optional[PhotoInsights]) -> str:
    if photo is None:
        return "Visit required to verify light and spatial conditions."
    line = (
        f"Photo analysis: {photo.light_assessment.quality} light quality, "
        f"{photo.spatial_assessment.size_impression} space impression."
    )
    if photo.enhancement_suspected:
        line += " Enhancement suspected."
    return line


def build_experience_capital(location: LocationInsight, photo: Optional[PhotoInsights]) -> ExperienceCapital:
    generating = [
        "High walkability: daily needs within walking distance"
        if location.walkability == "high" else "Accessible urban location"
    ]
    if location.daily_convenience == "strong":
        generating.append("Strong daily convenience infrastructure")
    if photo and photo.light_assessment.quality == "excellent":
        generating.append("Excellent natural light (photo-verified)")

    preserving = [
        "Standard residential layout",
        f"Proximity score {location.proximity_score}/100",
    ]

    draining = []
    if location.traffic_exposure == "high":
        draining.append("High traffic exposure: acoustic management required")
    if photo and photo.red_flags:
        draining.append(f"Photo flags: {', '.join(photo.red_flags[:2])}")

    return ExperienceCapital(generating=generating, preserving=preserving, draining=draining)


def build_signals(location: LocationInsight, photo: Optional[PhotoInsights]) -> list[Signal]:
    amenities = location.amenities_json
    traffic_state = {"high": "negative", "low": "positive"}.get(location.traffic_exposure, "neutral")

    signals = [
        Signal(
            name="Urban Convenience",
            state="positive" if location.walkability == "high" else "neutral",
            short_explanation=f"Metro ~{amenities.metro_min} min, supermarket ~{amenities.supermarket_min} min.",
        ),
        Signal(
            name="Traffic Exposure",
            state=traffic_state,
            short_explanation=f"{location.traffic_exposure.capitalize()} traffic exposure for this address.",
        ),
        Signal(
            name="Neighbourhood Energy",
            state="positive" if location.neighbourhood_energy == "calm" else "neutral",
            short_explanation=f"{location.neighbourhood_energy.capitalize()} neighbourhood character.",
        ),
    ]
    if photo is not None:
        signals.append(Signal(
            name="Photo Analysis",
            state="sensitive" if photo.enhancement_suspected else "neutral",
            short_explanation=photo_summary_line(photo),
        ))
    return signals


def build_verification_checklist(
    prop: Property,
    location: LocationInsight,
    photo: Optional[PhotoInsights],
) -> list[ChecklistItem]:
    enhancement = photo is not None and photo.enhancement_suspected
    items = [
        ChecklistItem(item="Visit during the day to confirm real natural light conditions", category="light"),
        ChecklistItem(item="Open all windows for 5 minutes and assess real ambient noise", category="noise"),
        ChecklistItem(
            item="Compare listing photos to reality: artificial lighting suspected"
            if enhancement else "Check glazing: single vs double pane",
            category="structure",
        ),
        ChecklistItem(item="Inspect walls and ceiling for damp, cracks, or water staining", category="structure"),
        ChecklistItem(item="Request full seller disclosure and HOA documents", category="legal"),
        ChecklistItem(item="Verify any pending special assessments or HOA disputes", category="legal"),
        ChecklistItem(
            item=f"Walk to nearest supermarket (~{location.amenities_json.supermarket_min} min) and check the route at night",
            category="neighbourhood",
        ),
        ChecklistItem(item="Check cell signal and internet provider options in the unit", category="lifestyle"),
    ]

    if prop.sqft and prop.sqft < 800:
        items.append(ChecklistItem(item="Bring a tape measure to verify key furniture fits", category="lifestyle"))
    if prop.year_built and prop.year_built < 1980:
        items.append(ChecklistItem(
            item="Request full inspection: older build warrants structural review",
            category="structure",
        ))
    if photo is not None:
        items.extend(ChecklistItem(item=f"Verify: {flag}", category="structure") for flag in photo.red_flags)
    return items


class PropertyScoringStrategy(ScoringStrategy):
    """Scores a property from its location insight, photo insight and size."""
    name = "property"

    def evaluate(self, subject: PropertyScoringInput) -> ScoringResult:
        score = compute_experience_score(subject.location, subject.property.sqft)
        return ScoringResult(
            state=band_experience_state(score),
            trajectory=compute_trajectory(subject.location),
            score=score,
            experience_capital=build_experience_capital(subject.location, subject.photo),
            signals=build_signals(subject.location, subject.photo),
        )


def get_scoring_strategy(name: str = "property") -> ScoringStrategy:
    """Look up a strategy by name ("property" is canonical, "space" is the alternate)."""
    if name == "property":
        return PropertyScoringStrategy()
    if name == "space":
        from src.services.space_scoring import SpaceScoringStrategy
        return SpaceScoringStrategy()
    raise ValueError(f"Unknown scoring strategy: {name}")
