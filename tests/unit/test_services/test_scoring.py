"""Tests for property scoring: experience state, trajectory, capital, signals and checklist."""

import pytest
from src.models.location_insight import AmenityMinutes
from src.models.property import Property
from src.services.location_insights import derive_location_insight
from src.services.scoring import (
    PropertyScoringInput,
    PropertyScoringStrategy,
    band_experience_state,
    build_experience_capital,
    build_signals,
    build_verification_checklist,
    compute_experience_score,
    compute_trajectory,
    get_scoring_strategy,
    photo_summary_line,
)
from src.services.space_scoring import SpaceScoringStrategy
from tests.fixtures.listings import photo_insights

WALKABLE = AmenityMinutes(supermarket_min=4, metro_min=5, cafe_min=3, park_min=6, gym_min=8, pharmacy_min=4)
BUSY_STREET = AmenityMinutes(supermarket_min=12, metro_min=2, cafe_min=10, park_min=10, gym_min=12, pharmacy_min=10)
QUIET_WITH_GROCER = AmenityMinutes(supermarket_min=3, metro_min=20, cafe_min=20, park_min=20, gym_min=20, pharmacy_min=20)


@pytest.mark.unit
@pytest.mark.parametrize("score,state", [
    (100, "Strong"), (70, "Strong"), (69, "Stable"), (50, "Stable"),
    (49, "Fragile"), (35, "Fragile"), (34, "Declining"), (0, "Declining"),
])
def test_band_experience_state(score, state):
    assert band_experience_state(score) == state


@pytest.mark.unit
def test_default_location_scores_stable(default_location):
    # base 50 plus 8 for low traffic
    assert compute_experience_score(default_location, 1000) == 58
    assert compute_experience_score(default_location, None) == 58


@pytest.mark.unit
def test_walkable_large_home_is_strong():
    location = derive_location_insight(WALKABLE)
    score = compute_experience_score(location, 1600)
    assert score == 71
    assert band_experience_state(score) == "Strong"


@pytest.mark.unit
@pytest.mark.parametrize("amenities", [AmenityMinutes(), WALKABLE, BUSY_STREET])
def test_score_never_drops_as_sqft_grows(amenities):
    location = derive_location_insight(amenities)
    scores = [compute_experience_score(location, sqft) for sqft in (500, 599, 600, 1499, 1500, 1600)]

    assert scores == sorted(scores)
    assert scores[0] < scores[-1]


@pytest.mark.unit
def test_busy_street_small_unit_is_declining():
    location = derive_location_insight(BUSY_STREET)
    assert location.traffic_exposure == "high"
    score = compute_experience_score(location, 500)
    assert score == 28
    assert band_experience_state(score) == "Declining"


@pytest.mark.unit
def test_trajectory_improves_only_when_calm_and_convenient(default_location):
    assert compute_trajectory(derive_location_insight(QUIET_WITH_GROCER)) == "Improving"
    assert compute_trajectory(default_location) == "Stable"
    assert compute_trajectory(derive_location_insight(WALKABLE)) == "Stable"


@pytest.mark.unit
def test_photo_summary_line():
    assert photo_summary_line(None) == "Visit required to verify light and spatial conditions."
    assert photo_summary_line(photo_insights()) == "Photo analysis: excellent light quality, spacious space impression."
    assert photo_summary_line(photo_insights(enhanced=True)).endswith(" Enhancement suspected.")


@pytest.mark.unit
def test_experience_capital_without_photos(default_location):
    capital = build_experience_capital(default_location, None)

    assert capital.generating == ["Accessible urban location"]
    assert capital.preserving == ["Standard residential layout", "Proximity score 70/100"]
    assert capital.draining == []


@pytest.mark.unit
def test_experience_capital_with_photos_and_traffic():
    location = derive_location_insight(BUSY_STREET)
    capital = build_experience_capital(location, photo_insights(enhanced=True))

    assert capital.draining[0].startswith("High traffic exposure")
    assert capital.draining[1] == "Photo flags: Water stain on ceiling, Cracked window frame"

    walkable = build_experience_capital(derive_location_insight(WALKABLE), photo_insights())
    assert walkable.generating == [
        "High walkability: daily needs within walking distance",
        "Strong daily convenience infrastructure",
        "Excellent natural light (photo-verified)",
    ]


@pytest.mark.unit
def test_signals_without_photo_analysis(default_location):
    signals = build_signals(default_location, None)

    assert [s.name for s in signals] == ["Urban Convenience", "Traffic Exposure", "Neighbourhood Energy"]
    assert signals[0].short_explanation == "Metro ~15 min, supermarket ~10 min."
    assert signals[1].state == "positive"
    assert signals[2].state == "neutral"


@pytest.mark.unit
def test_signals_include_photo_analysis_when_present():
    location = derive_location_insight(BUSY_STREET)
    signals = build_signals(location, photo_insights(enhanced=True))

    assert len(signals) == 4
    assert signals[1].state == "negative"
    assert signals[3].name == "Photo Analysis"
    assert signals[3].state == "sensitive"

    assert build_signals(location, photo_insights())[3].state == "neutral"


@pytest.mark.unit
def test_checklist_base_items(default_location):
    prop = Property(address="1 Main St", sqft=1200, year_built=2001)
    checklist = build_verification_checklist(prop, default_location, None)

    assert len(checklist) == 8
    assert [item.category for item in checklist] == [
        "light", "noise", "structure", "structure", "legal", "legal", "neighbourhood", "lifestyle",
    ]
    assert checklist[2].item == "Check glazing: single vs double pane"
    assert "~10 min" in checklist[6].item


@pytest.mark.unit
def test_checklist_conditional_items(default_location):
    prop = Property(address="1 Main St", sqft=650, year_built=1962)
    checklist = build_verification_checklist(prop, default_location, photo_insights(enhanced=True))
    items = [entry.item for entry in checklist]

    # 8 base + small space + older build + 3 photo flags
    assert len(checklist) == 13
    assert items[2].startswith("Compare listing photos to reality")
    assert "Bring a tape measure to verify key furniture fits" in items
    assert any(item.startswith("Request full inspection") for item in items)
    assert items[-3:] == [
        "Verify: Water stain on ceiling",
        "Verify: Cracked window frame",
        "Verify: Worn flooring",
    ]


@pytest.mark.unit
def test_property_strategy_evaluate(default_location):
    result = PropertyScoringStrategy().evaluate(
        PropertyScoringInput(property=Property(address="1 Main St", sqft=1000), location=default_location)
    )

    assert result.state == "Stable"
    assert result.trajectory == "Stable"
    assert result.score == 58
    assert len(result.signals) == 3


@pytest.mark.unit
def test_property_strategy_is_deterministic(default_location):
    subject = PropertyScoringInput(
        property=Property(address="1 Main St", sqft=1000),
        location=default_location,
        photo=photo_insights(enhanced=True),
    )
    strategy = PropertyScoringStrategy()
    assert strategy.evaluate(subject) == strategy.evaluate(subject)


@pytest.mark.unit
def test_get_scoring_strategy():
    assert isinstance(get_scoring_strategy(), PropertyScoringStrategy)
    assert isinstance(get_scoring_strategy("space"), SpaceScoringStrategy)
    with pytest.raises(ValueError):
        get_scoring_strategy("astrology")
