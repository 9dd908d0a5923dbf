"""Certificate assembly for both certificate shapes.

Builders are pure: scoring comes from a ScoringStrategy, free text from an
EditorialTextGenerator, and the result is a plain dict ready for the
certificates.certificate_json column.
"""

from datetime import datetime, timezone
from typing import Optional
from src.models.certificate import (
    CERTIFICATE_VERSION,
    CertificateMeta,
    CertificateTier,
    ExperienceBarometer,
    LocationContext,
    PropertyCertificate,
    PropertyIdentity,
    ProPropertyCertificate,
    ProSpaceCertificate,
    RealfeelEnvironment,
    SilenceAndDrift,
    SpaceCertificate,
    SpaceIdentity,
    StrategicRisk,
    StrategicRisks,
    VisitStrategy,
)
from src.models.location_insight import LocationInsight
from src.models.photo_insight import PhotoInsights
from src.models.property import Property
from src.models.space import Space
from src.services.editorial import EditorialTextGenerator, TemplateEditorialGenerator
from src.services.scoring import (
    PropertyScoringInput,
    PropertyScoringStrategy,
    ScoringStrategy,
    build_verification_checklist,
    photo_summary_line,
)
from src.services.space_scoring import SpaceScoringStrategy, generate_pro_extensions

EVENING_VISIT_NIGHT_DB = 58


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _coerce_tier(tier) -> CertificateTier:
    return tier if isinstance(tier, CertificateTier) else CertificateTier(tier)


def build_realfeel_environment(location: LocationInsight, photo: Optional[PhotoInsights]) -> RealfeelEnvironment:
    if photo is not None:
        light = photo.light_assessment
        natural_light = f"{light.quality} light quality detected. " + (
            "Artificial enhancement suspected, verify in person."
            if light.artificial_enhancement_suspected else "Photos appear representative."
        )
    else:
        natural_light = "Verify natural light during visit."

    noise = location.noise_json
    lifestyle = location.lifestyle_json
    return RealfeelEnvironment(
        natural_light_summary=natural_light,
        noise_summary=f"Estimated ~{noise.daytime_db}dB daytime. {noise.sensitivity_note}",
        lifestyle_summary=f"{lifestyle.neighbourhood_type}. {lifestyle.community_character}.",
    )


def build_visit_strategy(location: LocationInsight) -> VisitStrategy:
    night_db = location.noise_json.nighttime_db
    if night_db >= EVENING_VISIT_NIGHT_DB:
        return VisitStrategy(
            best_visit_time="evening",
            why=(
                f"Estimated night noise (~{night_db}dB) is a primary risk factor. "
                "An evening visit confirms the real acoustic environment."
            ),
        )
    return VisitStrategy(
        best_visit_time="afternoon",
        why=(
            "Afternoon visit captures best natural light for assessment. "
            "Estimated noise is manageable, confirm during visit."
        ),
    )


def build_silence_and_drift(photo: Optional[PhotoInsights]) -> SilenceAndDrift:
    if photo is not None and photo.red_flags:
        condition_risk = f"Photo flags detected: {', '.join(photo.red_flags)}"
    else:
        condition_risk = "Condition details not visible from listing photos"

    return SilenceAndDrift(
        missing_elements=[
            "Real light conditions: listing photos may be enhanced",
            "Actual acoustic environment: estimates only",
            "HOA financial health and building history",
        ],
        hidden_risks=[
            condition_risk,
            "Traffic patterns across different times of day",
            "Neighbourhood trajectory over next 3-5 years",
        ],
        overlooked_opportunities=[
            "Renovation potential relative to year built",
            "Comparable sales momentum in this zip code",
            "Development plans for immediate area",
        ],
    )


def build_strategic_risks(location: LocationInsight, photo: Optional[PhotoInsights]) -> StrategicRisks:
    enhancement = photo is not None and photo.enhancement_suspected
    return StrategicRisks(risks=[
        StrategicRisk(
            risk="Listing photo accuracy",
            severity="medium" if enhancement else "low",
            mitigation="Verify all key claims in person before making offer.",
        ),
        StrategicRisk(
            risk="Noise environment",
            severity="high" if location.traffic_exposure == "high" else "medium",
            mitigation="Visit at multiple times of day and evening before committing.",
        ),
        StrategicRisk(
            risk="Market liquidity",
            severity="low",
            mitigation="Research recent comparable sales in the immediate area.",
        ),
    ])


class PropertyCertificateBuilder:
    """Builds the certificate for an ingested property."""

    def __init__(
        self,
        strategy: Optional[ScoringStrategy] = None,
        editorial: Optional[EditorialTextGenerator] = None,
    ):
        self.strategy = strategy or PropertyScoringStrategy()
        self.editorial = editorial or TemplateEditorialGenerator()

    def build(
        self,
        prop: Property,
        location: LocationInsight,
        photo: Optional[PhotoInsights] = None,
        tier=CertificateTier.NORMAL,
    ) -> dict:
        """Return the certificate document; meta.id stays empty until the record is stored."""
        tier = _coerce_tier(tier)
        result = self.strategy.evaluate(PropertyScoringInput(property=prop, location=location, photo=photo))
        photo_line = photo_summary_line(photo)

        fields = dict(
            meta=CertificateMeta(tier=tier, version=CERTIFICATE_VERSION, generated_at=_now_iso()),
            property_identity=PropertyIdentity(
                title=prop.title or prop.address,
                city=prop.city or "",
                property_type=prop.property_type or "Residential",
                sqft=prop.sqft,
                beds=prop.beds,
                baths=prop.baths,
            ),
            experience_barometer=ExperienceBarometer(
                state=result.state,
                trajectory=result.trajectory,
                one_sentence=self.editorial.property_one_sentence(prop, location),
            ),
            experience_capital=result.experience_capital,
            signals=result.signals,
            location_context=LocationContext(
                walkability=location.walkability,
                daily_convenience=location.daily_convenience,
                traffic_exposure=location.traffic_exposure,
                neighbourhood_energy=location.neighbourhood_energy,
            ),
            realfeel_environment=build_realfeel_environment(location, photo),
            verification_checklist=build_verification_checklist(prop, location, photo),
            editorial_summary=self.editorial.property_summary(prop, location, result.state, photo_line),
        )

        if tier != CertificateTier.PRO:
            return PropertyCertificate(**fields).model_dump(mode="json")

        return ProPropertyCertificate(
            **fields,
            visit_strategy=build_visit_strategy(location),
            silence_and_drift=build_silence_and_drift(photo),
            strategic_risks=build_strategic_risks(location, photo),
        ).model_dump(mode="json")


class SpaceCertificateBuilder:
    """Builds the certificate for a space from its static attributes."""

    def __init__(
        self,
        strategy: Optional[ScoringStrategy] = None,
        editorial: Optional[EditorialTextGenerator] = None,
    ):
        self.strategy = strategy or SpaceScoringStrategy()
        self.editorial = editorial or TemplateEditorialGenerator()

    def build(
        self,
        space: Space,
        tier=CertificateTier.NORMAL,
        certificate_id: str = "",
        overrides: Optional[dict] = None,
    ) -> dict:
        """Overrides may pin `state` and/or `trajectory` for manual review."""
        tier = _coerce_tier(tier)
        overrides = overrides or {}
        result = self.strategy.evaluate(space)
        state = overrides.get("state") or result.state
        trajectory = overrides.get("trajectory") or result.trajectory

        fields = dict(
            meta=CertificateMeta(id=certificate_id, tier=tier, version=CERTIFICATE_VERSION, generated_at=_now_iso()),
            property_identity=SpaceIdentity(
                title=f"{space.property_type} in {space.location_label}",
                city=space.city,
                property_type=space.property_type,
                area_m2=space.area_m2,
                floor=space.floor,
            ),
            experience_barometer=ExperienceBarometer(
                state=state,
                trajectory=trajectory,
                one_sentence=self.editorial.space_one_sentence(space, state, trajectory),
            ),
            experience_capital=result.experience_capital,
            signals=result.signals,
            editorial_summary=self.editorial.space_summary(space, state, result.signals),
        )

        if tier != CertificateTier.PRO:
            return SpaceCertificate(**fields).model_dump(mode="json")
        return ProSpaceCertificate(**fields, **generate_pro_extensions(space)).model_dump(mode="json")
