"""Application configuration loaded from environment variables."""

import os
from typing import Literal, Optional
from pydantic import BaseModel, Field


DEFAULT_APP_URL = "https://rumoo-app.vercel.app"


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


class AppConfig(BaseModel):
    """Runtime settings shared by handlers and services."""
    supabase_url: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    app_url: str = DEFAULT_APP_URL

    google_maps_api_key: Optional[str] = Field(None, description="Geocoding, Places and Distance Matrix")
    apify_api_key: Optional[str] = Field(None, description="Server-side listing scrape")
    apify_actor_id: str = "maxcopell~zillow-scraper"

    vision_provider: Literal["anthropic", "openai"] = "anthropic"
    vision_model: str = "claude-sonnet-4-20250514"
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None

    editorial_backend: Literal["template", "llm"] = "template"
    certificate_tier: Literal["normal", "pro"] = "normal"
    http_timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build settings from the process environment."""
        return cls(
            supabase_url=_env("SUPABASE_URL"),
            supabase_service_role_key=_env("SUPABASE_SERVICE_ROLE_KEY"),
            app_url=(_env("APP_URL") or DEFAULT_APP_URL).rstrip("/"),
            google_maps_api_key=_env("GOOGLE_MAPS_API_KEY"),
            apify_api_key=_env("APIFY_API_KEY"),
            apify_actor_id=_env("APIFY_ACTOR_ID") or "maxcopell~zillow-scraper",
            vision_provider=(_env("VISION_PROVIDER") or "anthropic").lower(),
            vision_model=_env("VISION_MODEL") or "claude-sonnet-4-20250514",
            anthropic_api_key=_env("ANTHROPIC_API_KEY"),
            openai_api_key=_env("OPENAI_API_KEY"),
            editorial_backend=(_env("EDITORIAL_BACKEND") or "template").lower(),
            certificate_tier=(_env("CERTIFICATE_TIER") or "normal").lower(),
            http_timeout_seconds=float(_env("HTTP_TIMEOUT_SECONDS") or "30"),
        )

    @property
    def scrape_provider(self) -> str:
        return "apify" if self.apify_api_key else "none"

    @property
    def vision_api_key(self) -> Optional[str]:
        if self.vision_provider == "openai":
            return self.openai_api_key
        return self.anthropic_api_key

    def certificate_url(self, certificate_id: str) -> str:
        return f"{self.app_url}/certificates/{certificate_id}"

    def confirmation_url(self, token: str) -> str:
        return f"{self.app_url}/confirm/{token}"
