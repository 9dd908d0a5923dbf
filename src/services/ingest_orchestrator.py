"""Ingestion orchestrator - runs one property through geocode, enrichment and certificate stages."""

import asyncio
from datetime import datetime, timezone
from typing import Optional
from src.models.certificate import CERTIFICATE_VERSION, CertificateStatus, CertificateTier
from src.models.location_insight import LocationInsight
from src.models.photo_insight import PhotoInsights
from src.models.property import Property, PropertyStatus
from src.services.certificate_builder import PropertyCertificateBuilder
from src.services.location_insights import generate_location_insights
from src.services.record_store import RecordStore
from src.utils.errors import NotFoundError, PipelineError
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

# Downtown Los Angeles, used when geocoding is unavailable
FALLBACK_LAT = 34.0522
FALLBACK_LNG = -118.2437


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class IngestionOrchestrator:
    """Runs the staged pipeline for one property and records progress on an ingest job."""

    def __init__(
        self,
        store: RecordStore,
        geocoder=None,
        amenity_provider=None,
        vision=None,
        builder: Optional[PropertyCertificateBuilder] = None,
        tier: str = CertificateTier.NORMAL.value,
    ):
        self.store = store
        self.geocoder = geocoder
        self.amenity_provider = amenity_provider
        self.vision = vision
        self.builder = builder or PropertyCertificateBuilder()
        self.tier = tier

    def _load_property(self, property_id: str) -> Optional[Property]:
        row = self.store.get("properties", "id", property_id)
        return Property.model_validate(row) if row else None

    def _mark_job(self, job_id: str, **fields) -> None:
        self.store.update("ingest_jobs", "id", job_id, fields)

    async def _geocode_stage(self, prop: Property, job_id: str) -> tuple[float, float]:
        with log_timing("geocode", logger=logger, property_id=prop.id):
            geo = await self.geocoder.geocode(prop.address) if self.geocoder else None

        if geo:
            self.store.update("properties", "id", prop.id, {
                "lat": geo.lat,
                "lng": geo.lng,
                "city": geo.city,
                "state": geo.state,
                "zip": geo.zip,
            })
            lat, lng = geo.lat, geo.lng
        else:
            logger.info("Geocode unavailable, using fallback coordinate", property_id=prop.id)
            lat, lng = FALLBACK_LAT, FALLBACK_LNG

        self._mark_job(job_id, geocode_done=True)
        return lat, lng

    async def _location_stage(self, prop: Property, job_id: str, lat: float, lng: float) -> LocationInsight:
        with log_timing("location_insights", logger=logger, property_id=prop.id):
            insight = await generate_location_insights(lat, lng, self.amenity_provider, property_id=prop.id)

        # average_minutes is derived, not a column
        record = insight.model_dump(mode="json", exclude={"average_minutes"})
        record["space_id"] = None
        self.store.upsert("location_insights", record, on_conflict="property_id")
        self._mark_job(job_id, location_insights_done=True)
        return insight

    async def _photo_stage(self, prop: Property, job_id: str) -> Optional[PhotoInsights]:
        photo = None
        if self.vision is not None and prop.image_urls:
            with log_timing("photo_analysis_stage", logger=logger, property_id=prop.id):
                photo = await self.vision.analyze_photos(prop.image_urls)

        if photo is not None:
            self.store.update("properties", "id", prop.id, {
                "photo_insights_json": photo.model_dump(mode="json"),
                "photo_insights_at": _now_iso(),
            })
        self._mark_job(job_id, photo_analysis_done=True)
        return photo

    async def _certificate_stage(
        self,
        property_id: str,
        job_id: str,
        location: LocationInsight,
        photo: Optional[PhotoInsights],
        tier: str,
    ) -> str:
        prop = self._load_property(property_id)
        if prop is None:
            raise PipelineError("Property not found for certificate generation")

        # editorial generation may block on a chat model call
        with log_timing("certificate_build", logger=logger, property_id=property_id, tier=tier):
            certificate = await asyncio.to_thread(self.builder.build, prop, location, photo, tier)

        completed_at = _now_iso()
        record = self.store.insert("certificates", {
            "property_id": property_id,
            "space_id": None,
            "tier": tier,
            "status": CertificateStatus.DONE.value,
            "version": CERTIFICATE_VERSION,
            "certificate_json": certificate,
            "completed_at": completed_at,
        })
        certificate_id = record["id"]

        certificate["meta"]["id"] = certificate_id
        self.store.update("certificates", "id", certificate_id, {"certificate_json": certificate})
        self.store.update("properties", "id", property_id, {"status": PropertyStatus.DONE.value})
        self._mark_job(job_id, certificate_done=True, certificate_id=certificate_id, completed_at=completed_at)
        return certificate_id

    async def run(self, property_id: str, tier: Optional[str] = None) -> str:
        """Run all stages and return the new certificate ID.

        Failures after the job is created mark the property and the job with
        the error message and propagate. Completed writes are kept.
        """
        tier = CertificateTier(tier or self.tier).value
        prop = self._load_property(property_id)
        if prop is None:
            raise NotFoundError(f"Property not found: {property_id}")

        job = self.store.insert("ingest_jobs", {"property_id": property_id})
        job_id = job["id"]
        logger.info("Ingestion started", property_id=property_id, job_id=job_id, tier=tier)

        try:
            with log_timing("ingest_pipeline", logger=logger, property_id=property_id, job_id=job_id):
                lat, lng = await self._geocode_stage(prop, job_id)
                location = await self._location_stage(prop, job_id, lat, lng)
                photo = await self._photo_stage(prop, job_id)
                certificate_id = await self._certificate_stage(property_id, job_id, location, photo, tier)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.error("Ingestion failed", exc_info=True, property_id=property_id, job_id=job_id, error=message)
            self.store.update("properties", "id", property_id, {
                "status": PropertyStatus.ERROR.value,
                "error_message": message,
            })
            self._mark_job(job_id, error_message=message)
            raise

        logger.info(
            "Ingestion completed",
            property_id=property_id,
            job_id=job_id,
            certificate_id=certificate_id,
            has_photo_insights=photo is not None
        )
        return certificate_id
