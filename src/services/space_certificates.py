"""Space certificate generation - synchronous build and storage of a space certificate."""

from datetime import datetime, timezone
from typing import Any, Optional
from src.models.certificate import CERTIFICATE_VERSION, CertificateStatus, CertificateTier
from src.services.certificate_builder import SpaceCertificateBuilder
from src.services.record_store import RecordStore
from src.services.space_scoring import load_space
from src.utils.errors import ConflictError, NotFoundError, ValidationError
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_tier(tier: Any) -> CertificateTier:
    try:
        return CertificateTier(tier)
    except ValueError:
        raise ValidationError("Invalid tier", details={"details": "tier must be 'normal' or 'pro'"})


class SpaceCertificateService:
    """Generates certificates for stored spaces."""

    def __init__(self, store: RecordStore, builder: Optional[SpaceCertificateBuilder] = None):
        self.store = store
        self.builder = builder or SpaceCertificateBuilder()

    def _existing_done(self, space_id: str, tier: CertificateTier) -> Optional[dict]:
        for record in self.store.select("certificates", "space_id", space_id):
            if record.get("tier") == tier.value and record.get("status") == CertificateStatus.DONE.value:
                return record
        return None

    def generate(self, space_id: str, tier: Any = CertificateTier.NORMAL.value, force: bool = False) -> dict[str, Any]:
        """Build and store a certificate; returns `{certificate_id, status, certificate}`."""
        tier = parse_tier(tier)

        row = self.store.get("spaces", "id", space_id) if space_id else None
        if not row:
            raise NotFoundError("Space not found")
        space = load_space(row)

        if not force:
            existing = self._existing_done(space_id, tier)
            if existing:
                raise ConflictError(
                    "Certificate already exists",
                    details={"existing_certificate_id": existing["id"], "message": "Use force=true to regenerate"},
                )

        record = self.store.insert("certificates", {
            "space_id": space_id,
            "property_id": None,
            "tier": tier.value,
            "status": CertificateStatus.PROCESSING.value,
            "version": CERTIFICATE_VERSION,
        })
        certificate_id = record["id"]

        try:
            with log_timing("space_certificate_build", logger=logger, space_id=space_id, tier=tier.value):
                certificate = self.builder.build(space, tier, certificate_id=certificate_id)
            self.store.update("certificates", "id", certificate_id, {
                "status": CertificateStatus.DONE.value,
                "certificate_json": certificate,
                "source_inputs_json": {"space": space.model_dump(mode="json")},
                "completed_at": _now_iso(),
            })
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.error("Space certificate generation failed", exc_info=True, space_id=space_id, error=message)
            self.store.update("certificates", "id", certificate_id, {
                "status": CertificateStatus.ERROR.value,
                "error_message": message,
            })
            raise

        logger.info("Space certificate generated", space_id=space_id, certificate_id=certificate_id, tier=tier.value)
        return {
            "certificate_id": certificate_id,
            "status": CertificateStatus.DONE.value,
            "certificate": certificate,
        }

    def get_certificate(self, certificate_id: str) -> dict[str, Any]:
        """Stored certificate record (either shape)."""
        record = self.store.get("certificates", "id", certificate_id) if certificate_id else None
        if not record:
            raise NotFoundError("Certificate not found")
        return record
