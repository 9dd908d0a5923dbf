"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("APP_URL", "https://rumoo-app.vercel.app")
os.environ.setdefault("LOG_FORMAT", "text")

from src.models.location_insight import AmenityMinutes  # noqa: E402
from src.services.certificate_builder import PropertyCertificateBuilder  # noqa: E402
from src.services.dependencies import build_services  # noqa: E402
from src.services.ingest_orchestrator import IngestionOrchestrator  # noqa: E402
from src.services.intake_router import IntakeRouter  # noqa: E402
from src.services.location_insights import derive_location_insight  # noqa: E402
from src.utils.config import AppConfig  # noqa: E402
from tests.utils.fakes import FakeAmenityProvider, FakeGeocoder, FakeScraper, FakeVision, InMemoryRecordStore  # noqa: E402


@pytest.fixture
def app_config():
    """Config with no optional integrations."""
    return AppConfig(app_url="https://rumoo-app.vercel.app")


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def default_location():
    """Location insight derived from the default amenity minutes."""
    return derive_location_insight(AmenityMinutes())


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder(result=None)


@pytest.fixture
def fake_amenities():
    return FakeAmenityProvider()


@pytest.fixture
def fake_vision():
    return FakeVision(insights=None)


@pytest.fixture
def fake_scraper():
    return FakeScraper(listing=None, provider_name="none")


@pytest.fixture
def orchestrator(store, fake_geocoder, fake_amenities, fake_vision):
    return IngestionOrchestrator(
        store,
        geocoder=fake_geocoder,
        amenity_provider=fake_amenities,
        vision=fake_vision,
        builder=PropertyCertificateBuilder(),
    )


@pytest.fixture
def router(store, orchestrator, fake_scraper, app_config):
    return IntakeRouter(store, orchestrator, scraper=fake_scraper, config=app_config)


@pytest.fixture
def services(app_config, store):
    """Composition root wired to the in-memory store; every integration is keyless."""
    return build_services(app_config, store=store)


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2026-02-09 12:00:00") as frozen_time:
        yield frozen_time
