"""Intake router - classifies an ingest request as full capture or URL only and creates the records."""

import secrets
from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import ValidationError as PydanticValidationError
from src.models.payloads import FullCapturePayload, IngestOutcome
from src.models.property import PENDING_ADDRESS, PropertyStatus
from src.models.source import IngestMode, detect_source, is_supported_listing_url
from src.services.ingest_orchestrator import IngestionOrchestrator
from src.services.record_store import RecordStore
from src.utils.config import AppConfig
from src.utils.errors import (
    InvalidRequestError,
    PipelineError,
    UnsupportedSourceError,
    ValidationError,
)
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

MIN_ADDRESS_LENGTH = 5
UNSUPPORTED_URL_MESSAGE = "Unsupported listing URL. Paste a Zillow, Redfin, or Realtor.com link."
INVALID_BODY_MESSAGE = 'Invalid request body. Send { listing: {...} } or { url: "..." }'
NEEDS_CONFIRMATION_MESSAGE = "Could not extract listing data. Please confirm the address via the link."

LISTING_FIELDS = (
    "title", "price", "beds", "baths", "sqft", "year_built", "property_type", "description",
)


def generate_confirmation_token() -> str:
    """Eight uppercase hex characters, e.g. 'A3F9C2B1'."""
    return secrets.token_hex(4).upper()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class IntakeRouter:
    """Accepts `{listing: {...}}` (full capture) or `{url: "..."}` (URL only)."""

    def __init__(
        self,
        store: RecordStore,
        orchestrator: IngestionOrchestrator,
        scraper=None,
        config: Optional[AppConfig] = None,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.scraper = scraper
        self.config = config or AppConfig()

    async def ingest(self, body: Any) -> IngestOutcome:
        if isinstance(body, dict) and isinstance(body.get("listing"), dict):
            return await self._ingest_full_capture(body["listing"])
        if isinstance(body, dict) and body.get("url"):
            return await self._ingest_url_only(str(body["url"]).strip())
        raise InvalidRequestError(INVALID_BODY_MESSAGE)

    async def _run_pipeline(self, property_id: str) -> str:
        try:
            return await self.orchestrator.run(property_id)
        except Exception as e:
            raise PipelineError(str(e) or e.__class__.__name__, details={"property_id": property_id})

    async def _ingest_full_capture(self, raw_listing: dict) -> IngestOutcome:
        try:
            listing = FullCapturePayload.model_validate(raw_listing)
        except PydanticValidationError as e:
            raise ValidationError("Invalid listing payload", details={"errors": e.errors(include_url=False)})

        if not listing.source_url:
            raise ValidationError("Missing source_url")
        if not listing.address or len(listing.address) < MIN_ADDRESS_LENGTH:
            raise ValidationError("Missing address")

        source = self.store.upsert("property_sources", {
            "source": detect_source(listing.source_url).value,
            "ingest_mode": IngestMode.FULL_CAPTURE.value,
            "source_url": listing.source_url,
            "external_id": listing.external_id,
            "raw_json": listing.model_dump(mode="json"),
        }, on_conflict="source_url")

        fields = {name: getattr(listing, name) for name in LISTING_FIELDS}
        prop = self.store.insert("properties", {
            "source_id": source.get("id"),
            "address": listing.address,
            "image_urls": listing.image_urls,
            "status": PropertyStatus.PROCESSING.value,
            "needs_confirmation": False,
            **fields,
        })
        logger.info(
            "Full capture received",
            property_id=prop["id"],
            source=source.get("source"),
            image_count=len(listing.image_urls)
        )

        certificate_id = await self._run_pipeline(prop["id"])
        return IngestOutcome(
            status_code=201,
            mode=IngestMode.FULL_CAPTURE.value,
            property_id=prop["id"],
            certificate_id=certificate_id,
            redirect_url=self.config.certificate_url(certificate_id),
        )

    async def _ingest_url_only(self, url: str) -> IngestOutcome:
        if not is_supported_listing_url(url):
            raise UnsupportedSourceError(UNSUPPORTED_URL_MESSAGE, details={"url": url})

        scraped = await self.scraper.scrape(url) if self.scraper is not None else None
        scrape_success = scraped is not None and scraped.has_address

        source = self.store.upsert("property_sources", {
            "source": detect_source(url).value,
            "ingest_mode": IngestMode.URL_ONLY.value,
            "source_url": url,
            "external_id": scraped.external_id if scraped else None,
            "raw_json": scraped.model_dump(mode="json") if scraped else {"source_url": url},
            "scrape_attempted_at": _now_iso(),
            "scrape_success": scrape_success,
            "scrape_provider": getattr(self.scraper, "provider_name", "none"),
        }, on_conflict="source_url")

        token = generate_confirmation_token()
        needs_confirmation = not scrape_success

        fields = {name: (getattr(scraped, name) or None) if scraped else None for name in LISTING_FIELDS}
        prop = self.store.insert("properties", {
            "source_id": source.get("id"),
            "address": scraped.address if scrape_success else PENDING_ADDRESS,
            "image_urls": scraped.image_urls if scraped else [],
            "needs_confirmation": needs_confirmation,
            "confirmation_token": token,
            "status": (PropertyStatus.NEEDS_CONFIRMATION if needs_confirmation else PropertyStatus.PROCESSING).value,
            **fields,
        })
        logger.info(
            "URL intake received",
            property_id=prop["id"],
            source=source.get("source"),
            scrape_success=scrape_success,
            needs_confirmation=needs_confirmation,
            confirmation_token=token
        )

        if needs_confirmation:
            return IngestOutcome(
                status_code=202,
                mode=IngestMode.URL_ONLY.value,
                property_id=prop["id"],
                status="needs_confirmation",
                confirmation_url=self.config.confirmation_url(token),
                confirmation_token=token,
                message=NEEDS_CONFIRMATION_MESSAGE,
            )

        certificate_id = await self._run_pipeline(prop["id"])
        return IngestOutcome(
            status_code=201,
            mode=IngestMode.URL_ONLY.value,
            property_id=prop["id"],
            certificate_id=certificate_id,
            redirect_url=self.config.certificate_url(certificate_id),
        )
