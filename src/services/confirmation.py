"""Confirmation flow - completes a URL-only intake once the user supplies the missing fields."""

from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import ValidationError as PydanticValidationError
from src.models.payloads import ConfirmationSubmission
from src.models.property import Property, PropertyStatus
from src.models.source import IngestMode, SourceProvider
from src.services.ingest_orchestrator import IngestionOrchestrator
from src.services.record_store import RecordStore
from src.utils.config import AppConfig
from src.utils.errors import AlreadyConfirmedError, NotFoundError, PipelineError, ValidationError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

MIN_ADDRESS_LENGTH = 5

PENDING_SUMMARY_FIELDS = (
    "id", "title", "address", "price", "beds", "baths", "sqft", "year_built",
    "property_type", "image_urls", "needs_confirmation", "confirmed_at",
)
MERGED_FIELDS = ("title", "price", "beds", "baths", "sqft", "year_built", "property_type")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConfirmationService:
    """Looks up pending properties by token and runs the pipeline on confirmation."""

    def __init__(
        self,
        store: RecordStore,
        orchestrator: IngestionOrchestrator,
        config: Optional[AppConfig] = None,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.config = config or AppConfig()

    def _find_pending(self, token: str, consumed_message: str) -> dict:
        row = self.store.get("properties", "confirmation_token", token) if token else None
        if not row:
            raise NotFoundError("Link not found or expired")
        if row.get("confirmed_at"):
            raise AlreadyConfirmedError(consumed_message)
        return row

    def get_pending(self, token: str) -> dict[str, Any]:
        """Summary shown on the confirmation form."""
        row = self._find_pending(token, "This link has already been used")
        return {field: row.get(field) for field in PENDING_SUMMARY_FIELDS}

    async def confirm(self, token: str, fields: dict) -> dict[str, Any]:
        """Apply the submitted fields, run ingestion, and return the certificate link."""
        row = self._find_pending(token, "Already confirmed")
        prop = Property.model_validate(row)

        address = fields.get("address") if isinstance(fields, dict) else None
        if not isinstance(address, str) or len(address.strip()) < MIN_ADDRESS_LENGTH:
            raise ValidationError("Address is required")

        try:
            submission = ConfirmationSubmission.model_validate(fields)
        except PydanticValidationError as e:
            raise ValidationError("Invalid confirmation fields", details={"errors": e.errors(include_url=False)})

        merged = {name: getattr(submission, name) or getattr(prop, name) for name in MERGED_FIELDS}
        self.store.update("properties", "id", prop.id, {
            "address": submission.address.strip(),
            **merged,
            "needs_confirmation": False,
            "confirmed_at": _now_iso(),
            "status": PropertyStatus.PROCESSING.value,
        })

        source_url = f"confirmation:{token}" if prop.source_id else f"manual:{prop.id}"
        source = self.store.upsert("property_sources", {
            "source": SourceProvider.MANUAL.value,
            "ingest_mode": IngestMode.FULL_CAPTURE.value,
            "source_url": source_url,
            "raw_json": {
                "address": submission.address.strip(),
                **merged,
                "description": prop.description,
                "image_urls": prop.image_urls,
                "previous_source_id": prop.source_id,
            },
        }, on_conflict="source_url")
        self.store.update("properties", "id", prop.id, {"source_id": source.get("id")})

        logger.info("Confirmation accepted", property_id=prop.id, confirmation_token=token)

        try:
            certificate_id = await self.orchestrator.run(prop.id)
        except Exception as e:
            raise PipelineError(str(e) or e.__class__.__name__, details={"property_id": prop.id})

        return {
            "certificate_id": certificate_id,
            "redirect_url": self.config.certificate_url(certificate_id),
        }
