"""Property model - a real-world listing under analysis."""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


PENDING_ADDRESS = "Pending confirmation"


class PropertyStatus(str, Enum):
    """Workflow status of a property."""
    NEEDS_CONFIRMATION = "needs_confirmation"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


class Property(BaseModel):
    """Listing record as stored in the properties table."""
    id: Optional[str] = Field(None, description="Property ID (assigned by the store)")
    source_id: Optional[str] = Field(None, description="Property source ID (FK)")
    title: Optional[str] = None
    address: str = Field(PENDING_ADDRESS, description="Street address or placeholder")
    price: Optional[float] = None
    beds: Optional[float] = None
    baths: Optional[float] = None
    sqft: Optional[float] = None
    year_built: Optional[int] = None
    property_type: Optional[str] = None
    description: Optional[str] = None
    image_urls: list[str] = Field(default_factory=list, description="Ordered listing photo URLs")
    lat: Optional[float] = None
    lng: Optional[float] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    photo_insights_json: Optional[dict[str, Any]] = None
    photo_insights_at: Optional[str] = None
    status: PropertyStatus = PropertyStatus.PROCESSING
    needs_confirmation: bool = False
    confirmation_token: Optional[str] = Field(None, description="Single-use token, kept after confirmation")
    confirmed_at: Optional[str] = None
    error_message: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_confirmed(self) -> bool:
        return self.confirmed_at is not None
