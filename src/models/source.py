"""Property source model - one deduplicated external listing URL."""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


class SourceProvider(str, Enum):
    """Listing provider detected from the URL."""
    ZILLOW = "zillow"
    REDFIN = "redfin"
    REALTOR = "realtor"
    MANUAL = "manual"


class IngestMode(str, Enum):
    """How the listing entered the system."""
    FULL_CAPTURE = "full_capture"
    URL_ONLY = "url_only"


PROVIDER_DOMAINS = {
    "zillow.com": SourceProvider.ZILLOW,
    "redfin.com": SourceProvider.REDFIN,
    "realtor.com": SourceProvider.REALTOR,
}


def detect_source(url: str) -> SourceProvider:
    """Detect the listing provider from a URL substring."""
    for domain, provider in PROVIDER_DOMAINS.items():
        if domain in (url or ""):
            return provider
    return SourceProvider.MANUAL


def is_supported_listing_url(url: str) -> bool:
    return detect_source(url) != SourceProvider.MANUAL


class PropertySource(BaseModel):
    """Row in the property_sources table (upserted on source_url)."""
    id: Optional[str] = None
    source_url: str = Field(..., description="Listing URL (unique key)")
    source: SourceProvider = Field(..., description="zillow, redfin, realtor or manual")
    ingest_mode: IngestMode = Field(..., description="full_capture or url_only")
    external_id: Optional[str] = Field(None, description="Provider listing ID (e.g. zpid)")
    raw_json: dict[str, Any] = Field(default_factory=dict, description="Raw payload snapshot")
    scrape_attempted_at: Optional[str] = None
    scrape_success: Optional[bool] = None
    scrape_provider: Optional[str] = Field(None, description="apify or none")
    created_at: Optional[str] = None
