"""Intake payload and outcome models."""

from typing import Optional, Any
from pydantic import BaseModel, Field


class FullCapturePayload(BaseModel):
    """Listing captured in the browser with all fields already known."""
    source_url: Optional[str] = Field(None, description="Listing URL (required)")
    external_id: Optional[str] = None
    title: Optional[str] = None
    price: Optional[float] = None
    address: Optional[str] = Field(None, description="Street address, at least 5 characters")
    beds: Optional[float] = None
    baths: Optional[float] = None
    sqft: Optional[float] = None
    year_built: Optional[int] = None
    property_type: Optional[str] = None
    description: Optional[str] = None
    image_urls: list[str] = Field(default_factory=list)


class ScrapedListing(FullCapturePayload):
    """Partial capture returned by the server-side scraper."""

    @property
    def has_address(self) -> bool:
        return bool(self.address)


class ConfirmationSubmission(BaseModel):
    """Fields a user corrects on the confirmation link."""
    address: Optional[str] = None
    title: Optional[str] = None
    price: Optional[float] = None
    beds: Optional[float] = None
    baths: Optional[float] = None
    sqft: Optional[float] = None
    year_built: Optional[int] = None
    property_type: Optional[str] = None


class IngestOutcome(BaseModel):
    """Result of an intake: created (201) or pending confirmation (202)."""
    status_code: int = Field(..., description="201 created, 202 needs confirmation")
    mode: str
    property_id: str
    certificate_id: Optional[str] = None
    redirect_url: Optional[str] = None
    status: Optional[str] = None
    confirmation_url: Optional[str] = None
    confirmation_token: Optional[str] = None
    message: Optional[str] = None

    @property
    def needs_confirmation(self) -> bool:
        return self.status == "needs_confirmation"

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude={"status_code"}, exclude_none=True)
