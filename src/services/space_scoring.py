"""Rule-based scoring for the space-only flow (static floor/area/neighborhood/type attributes)."""

from src.models.certificate import (
    Evidence,
    ExperienceCapital,
    ExperienceTension,
    PeerGravity,
    SilenceAndDrift,
    Signal,
    StrategicRisk,
    StrategicRisks,
)
from src.models.space import Space
from src.services.scoring import ScoringResult, ScoringStrategy
from src.utils.errors import ValidationError

CENTRAL_NEIGHBORHOODS = ("Baixa", "Chiado", "Santos", "Príncipe Real")
HIGH_FLOORS = ("4", "5", "6+", "attic")
TOP_FLOORS = ("6+", "attic")
MAX_SIGNALS = 6


def is_central(space: Space) -> bool:
    return (space.neighborhood or "") in CENTRAL_NEIGHBORHOODS


def calculate_experience_state(space: Space) -> str:
    """Fragile for basements and small high units, Strong for large or well-placed units."""
    is_ground = space.floor == "ground"
    is_large = space.area_m2 > 60

    if space.floor == "basement":
        return "Fragile"
    if space.area_m2 < 35 and space.floor in HIGH_FLOORS:
        return "Fragile"

    if is_ground and is_large:
        return "Strong"
    if is_central(space) and is_large:
        return "Strong"
    if is_ground and is_central(space):
        return "Strong"

    return "Balanced"


def calculate_trajectory(space: Space) -> str:
    is_modern = space.property_type in ("Loft", "Studio")
    is_ground_or_low = space.floor in ("ground", "1", "2")

    if is_modern and space.area_m2 > 50:
        return "Improving"
    if space.area_m2 < 35 and not is_ground_or_low:
        return "Declining"
    return "Stable"


def generate_experience_capital(space: Space) -> ExperienceCapital:
    generating = []
    preserving = []
    draining = []

    if space.floor == "ground":
        generating.append("Direct street access")
    if space.area_m2 > 60:
        generating.append("Generous living space")
    if space.property_type in ("Loft", "Duplex"):
        generating.append("Vertical living flexibility")
    if (space.neighborhood or "") in ("Baixa", "Chiado", "Santos"):
        generating.append("Central urban energy")

    if space.property_type in ("T1", "T2"):
        preserving.append("Standard layout familiarity")
    if 40 <= space.area_m2 <= 70:
        preserving.append("Manageable maintenance scale")
    if space.floor in ("1", "2", "3"):
        preserving.append("Mid-level privacy balance")

    if space.area_m2 < 35:
        draining.append("Spatial compression")
    if space.floor in TOP_FLOORS:
        draining.append("Vertical access dependency")
    if space.floor == "basement":
        draining.append("Natural light scarcity")

    # every bucket carries at least one entry
    if not generating:
        generating.append("Location accessibility")
    if not preserving:
        preserving.append("Established neighborhood character")
    if not draining:
        draining.append("Urban density trade-offs")

    return ExperienceCapital(generating=generating, preserving=preserving, draining=draining)


def generate_signals(space: Space) -> list[Signal]:
    signals = []

    if space.floor == "ground":
        signals.append(Signal(
            name="Ground-Level Living",
            state="positive",
            short_explanation="Direct access eliminates vertical dependency. Supports immediate street connection.",
        ))
    elif space.floor in TOP_FLOORS:
        signals.append(Signal(
            name="Elevated Access",
            state="sensitive",
            short_explanation="Requires consistent lift availability. Daily vertical navigation shapes routine.",
        ))
    else:
        signals.append(Signal(
            name="Mid-Floor Positioning",
            state="neutral",
            short_explanation="Balanced between ground accessibility and upper privacy. Standard urban experience.",
        ))

    if space.area_m2 > 70:
        signals.append(Signal(
            name="Room to Breathe",
            state="positive",
            short_explanation="Space permits functional separation and storage flexibility. Supports multi-activity living.",
        ))
    elif space.area_m2 < 35:
        signals.append(Signal(
            name="Compact Footprint",
            state="sensitive",
            short_explanation="Every square meter counts. Requires disciplined organization and selective furniture.",
        ))
    else:
        signals.append(Signal(
            name="Standard Dimensions",
            state="neutral",
            short_explanation="Typical urban scale. Supports basic living functions without excess.",
        ))

    if is_central(space):
        signals.append(Signal(
            name="Central Gravity",
            state="positive",
            short_explanation="Walking distance to cultural and commercial infrastructure. Urban energy proximity.",
        ))
    else:
        signals.append(Signal(
            name="Residential Calm",
            state="neutral",
            short_explanation="Quieter neighborhood positioning. Prioritizes residential rhythm over immediate amenity access.",
        ))

    if space.property_type == "Studio":
        signals.append(Signal(
            name="Open-Plan Living",
            state="neutral",
            short_explanation="Single-space lifestyle. Requires intentional zoning through furniture and lighting.",
        ))
    elif space.property_type in ("T3", "T4"):
        signals.append(Signal(
            name="Room Abundance",
            state="positive",
            short_explanation="Multiple private zones enable household flexibility. Supports work-from-home and guests.",
        ))

    if space.listing_price:
        price_per_m2 = space.listing_price / space.area_m2
        if price_per_m2 > 6000:
            signals.append(Signal(
                name="Premium Positioning",
                state="sensitive",
                short_explanation="Price signals high market expectations. Property must deliver exceptional fundamentals.",
            ))
        elif price_per_m2 < 3500:
            signals.append(Signal(
                name="Value Entry Point",
                state="positive",
                short_explanation="Below-median pricing creates opportunity. May indicate negotiation flexibility.",
            ))

    return signals[:MAX_SIGNALS]


def generate_pro_extensions(space: Space) -> dict:
    """Pro-tier sections for a space certificate."""
    is_ground = space.floor == "ground"

    if space.area_m2 > 60:
        perceived_position = "Premium positioned"
    elif space.area_m2 < 40:
        perceived_position = "Entry-level positioned"
    else:
        perceived_position = "Mid-market positioned"

    return {
        "silence_and_drift": SilenceAndDrift(
            missing_elements=[
                "Actual light conditions across seasons",
                "Neighbor proximity and soundproofing quality",
                "Building maintenance history and upcoming works",
            ],
            hidden_risks=[
                "Street-level noise and privacy exposure" if is_ground else "Lift dependency and breakdown response time",
                "Heating/cooling efficiency in actual use",
                "Storage limitations with typical furniture",
            ],
            overlooked_opportunities=[
                "Renovation potential within building regulations",
                "Comparable sales momentum in immediate area",
                "Neighborhood infrastructure development plans",
            ],
        ),
        "peer_gravity": PeerGravity(
            comparable_segment=f"{space.property_type} apartments in {space.city} central areas",
            perceived_position=perceived_position,
            explanation=(
                f"Property competes with similar {space.property_type} units. "
                + ("Ground access adds differentiation." if is_ground else "Floor position is typical for segment.")
            ),
        ),
        "experience_tension": ExperienceTension(
            compensations=[
                "Ground access traded for reduced privacy" if is_ground else "Upper-floor privacy traded for lift dependency",
                "Compact scale traded for maintenance simplicity" if space.area_m2 < 40
                else "Larger space traded for higher utility costs",
            ],
            dependencies=[
                "Building management responsiveness",
                "Immediate neighborhood evolution",
                "Street-level noise management" if is_ground else "Lift reliability and maintenance",
            ],
        ),
        "strategic_risks": StrategicRisks(risks=[
            StrategicRisk(
                risk="Resale liquidity in economic downturn",
                severity="medium" if space.area_m2 < 35 else "low",
                mitigation="Maintain property in competitive condition. Price aligned with comparable sales.",
            ),
            StrategicRisk(
                risk="Building aging and shared maintenance costs",
                severity="medium",
                mitigation="Review condominium reserves and maintenance history. Budget for collective works.",
            ),
        ]),
        "evidence": Evidence(
            photo_observations=[
                "Listing photos show staged furniture and enhanced lighting",
                "Room dimensions appear typical for property type",
                "Finishes suggest standard market positioning",
            ],
            listing_observations=[
                "Standard description language without unique differentiators",
                "Price positioning suggests normal market expectations",
                "Property type and location are primary value drivers",
            ],
        ),
    }


def validate_space(data: dict) -> list[str]:
    """Return the list of problems with raw space data (empty when valid)."""
    errors = []
    for field in ("name", "city", "property_type", "floor"):
        if not data.get(field):
            errors.append(f"{field} is required")
    area = data.get("area_m2")
    if not isinstance(area, (int, float)) or area <= 0:
        errors.append("area_m2 must be positive")
    return errors


def load_space(data: dict) -> Space:
    errors = validate_space(data)
    if errors:
        raise ValidationError("Invalid space", details={"errors": errors})
    return Space.model_validate(data)


class SpaceScoringStrategy(ScoringStrategy):
    """Alternate strategy scoring a Space purely from its static attributes."""
    name = "space"

    def evaluate(self, subject: Space) -> ScoringResult:
        return ScoringResult(
            state=calculate_experience_state(subject),
            trajectory=calculate_trajectory(subject),
            experience_capital=generate_experience_capital(subject),
            signals=generate_signals(subject),
        )
