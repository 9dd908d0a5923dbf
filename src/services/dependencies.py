"""Composition root: wires the record store, adapters and services for one handler invocation."""

from dataclasses import dataclass
from typing import Optional
from src.services.certificate_builder import PropertyCertificateBuilder, SpaceCertificateBuilder
from src.services.confirmation import ConfirmationService
from src.services.editorial import build_editorial_generator
from src.services.geocoder import GoogleGeocoder
from src.services.ingest_orchestrator import IngestionOrchestrator
from src.services.intake_router import IntakeRouter
from src.services.listing_scraper import ApifyListingScraper
from src.services.photo_vision import PhotoVisionAnalyzer
from src.services.places import GoogleWalkingDistanceProvider
from src.services.record_store import RecordStore, SupabaseRecordStore
from src.services.sms_intake import SmsIntakeService
from src.services.space_certificates import SpaceCertificateService
from src.utils.config import AppConfig


@dataclass
class Services:
    config: AppConfig
    store: RecordStore
    orchestrator: IngestionOrchestrator
    router: IntakeRouter
    confirmation: ConfirmationService
    sms: SmsIntakeService
    space_certificates: SpaceCertificateService


def build_services(config: Optional[AppConfig] = None, store: Optional[RecordStore] = None) -> Services:
    """Build every service from config; pass `store` to reuse an existing record store."""
    config = config or AppConfig.from_env()
    store = store or SupabaseRecordStore.from_config(config)
    editorial = build_editorial_generator(config)

    orchestrator = IngestionOrchestrator(
        store,
        geocoder=GoogleGeocoder(config.google_maps_api_key, timeout=config.http_timeout_seconds),
        amenity_provider=GoogleWalkingDistanceProvider(config.google_maps_api_key, timeout=config.http_timeout_seconds),
        vision=PhotoVisionAnalyzer.from_config(config),
        builder=PropertyCertificateBuilder(editorial=editorial),
        tier=config.certificate_tier,
    )
    router = IntakeRouter(
        store,
        orchestrator,
        scraper=ApifyListingScraper(config.apify_api_key, actor_id=config.apify_actor_id),
        config=config,
    )

    return Services(
        config=config,
        store=store,
        orchestrator=orchestrator,
        router=router,
        confirmation=ConfirmationService(store, orchestrator, config),
        sms=SmsIntakeService(store, router),
        space_certificates=SpaceCertificateService(store, SpaceCertificateBuilder(editorial=editorial)),
    )
