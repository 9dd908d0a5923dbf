"""IngestJob model - per-run progress tracker."""

from typing import Optional
from pydantic import BaseModel, Field


class IngestJob(BaseModel):
    """Monotonic stage flags for one orchestrator run."""
    id: Optional[str] = None
    property_id: str = Field(..., description="Property ID (FK)")
    geocode_done: bool = False
    location_insights_done: bool = False
    photo_analysis_done: bool = False
    certificate_done: bool = False
    certificate_id: Optional[str] = None
    error_message: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.certificate_done or self.error_message is not None
