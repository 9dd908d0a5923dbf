"""Tests for listing, source and intake models."""

import pytest
from pydantic import ValidationError
from src.models.certificate import CertificateRecord, CertificateStatus, is_pro_certificate
from src.models.ingest_job import IngestJob
from src.models.location_insight import AmenityMinutes, LocationInsight
from src.models.payloads import IngestOutcome, ScrapedListing
from src.models.property import PENDING_ADDRESS, Property, PropertyStatus
from src.models.source import SourceProvider, detect_source, is_supported_listing_url
from src.models.space import Space


@pytest.mark.unit
def test_property_defaults():
    """A bare property is processing, unconfirmed and has the placeholder address."""
    prop = Property()
    assert prop.address == PENDING_ADDRESS
    assert prop.status == PropertyStatus.PROCESSING
    assert prop.image_urls == []
    assert prop.needs_confirmation is False
    assert prop.is_confirmed is False


@pytest.mark.unit
def test_property_from_row_ignores_unknown_columns():
    prop = Property.model_validate({"id": "p1", "address": "1 Main St", "status": "done", "extra_column": 1})
    assert prop.status == PropertyStatus.DONE
    assert not hasattr(prop, "extra_column")


@pytest.mark.unit
@pytest.mark.parametrize("url,expected", [
    ("https://www.zillow.com/homedetails/1_zpid/", SourceProvider.ZILLOW),
    ("https://www.redfin.com/CA/Los-Angeles/home/123", SourceProvider.REDFIN),
    ("https://www.realtor.com/realestateandhomes-detail/abc", SourceProvider.REALTOR),
    ("https://example.com/listing/1", SourceProvider.MANUAL),
    ("confirmation:A3F9C2B1", SourceProvider.MANUAL),
])
def test_detect_source(url, expected):
    assert detect_source(url) == expected


@pytest.mark.unit
def test_is_supported_listing_url():
    assert is_supported_listing_url("https://zillow.com/x")
    assert not is_supported_listing_url("https://craigslist.org/x")
    assert not is_supported_listing_url("")


@pytest.mark.unit
def test_amenity_minutes_defaults_and_average():
    amenities = AmenityMinutes()
    assert amenities.model_dump() == {
        "supermarket_min": 10,
        "metro_min": 15,
        "cafe_min": 5,
        "park_min": 10,
        "gym_min": 12,
        "pharmacy_min": 8,
    }
    assert amenities.average == 10


@pytest.mark.unit
def test_location_insight_proximity_bounds():
    with pytest.raises(ValidationError):
        LocationInsight(
            walkability="low",
            daily_convenience="weak",
            traffic_exposure="low",
            neighbourhood_energy="calm",
            proximity_score=10,
            average_minutes=40,
            amenities_json=AmenityMinutes(),
        )


@pytest.mark.unit
def test_scraped_listing_has_address():
    assert ScrapedListing(address="742 Evergreen Ter, Los Angeles").has_address
    assert not ScrapedListing(address="").has_address
    assert not ScrapedListing().has_address


@pytest.mark.unit
def test_ingest_outcome_body_excludes_status_code_and_empty_fields():
    outcome = IngestOutcome(
        status_code=201,
        mode="full_capture",
        property_id="p1",
        certificate_id="c1",
        redirect_url="https://rumoo-app.vercel.app/certificates/c1",
    )
    assert outcome.to_body() == {
        "mode": "full_capture",
        "property_id": "p1",
        "certificate_id": "c1",
        "redirect_url": "https://rumoo-app.vercel.app/certificates/c1",
    }
    assert outcome.needs_confirmation is False


@pytest.mark.unit
def test_ingest_job_terminal_states():
    assert not IngestJob(property_id="p1", geocode_done=True).is_terminal
    assert IngestJob(property_id="p1", certificate_done=True).is_terminal
    assert IngestJob(property_id="p1", error_message="boom").is_terminal


@pytest.mark.unit
def test_certificate_record_defaults():
    record = CertificateRecord(property_id="p1")
    assert record.status == CertificateStatus.PENDING
    assert record.version == "1.0.0"
    assert is_pro_certificate({"meta": {"tier": "pro"}})
    assert not is_pro_certificate({"meta": {"tier": "normal"}})
    assert not is_pro_certificate({})


@pytest.mark.unit
def test_space_requires_positive_area():
    with pytest.raises(ValidationError):
        Space(name="Flat", city="Lisboa", property_type="T1", floor="2", area_m2=0)

    space = Space(name="Flat", city="Lisboa", property_type="T1", floor="2", area_m2=40)
    assert space.location_label == "Lisboa"
