"""Listing photo analysis with a vision-capable chat model and structured output."""

import json
import re
from typing import Optional
from langchain_core.messages import HumanMessage
from pydantic import ValidationError as PydanticValidationError
from src.models.photo_insight import PhotoInsights
from src.services.llm import get_chat_model
from src.utils.config import AppConfig
from src.utils.errors import AdapterError
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

MAX_PHOTOS = 8


def build_photo_prompt(photo_count: int) -> str:
    return f"""Analyze these {photo_count} real estate listing photos. Return ONLY valid JSON, no markdown.

{{
  "light_assessment": {{ "quality": "poor|fair|good|excellent", "natural_light_visible": true, "artificial_enhancement_suspected": false, "notes": "" }},
  "spatial_assessment": {{ "size_impression": "cramped|compact|adequate|spacious", "ceiling_height": "low|standard|high", "flow": "poor|adequate|good", "notes": "" }},
  "condition_assessment": {{ "overall": "poor|fair|good|excellent", "finishes": "basic|standard|premium|luxury", "estimated_renovation_age": "recent|5-10yr|10-20yr|dated", "notes": "" }},
  "atmosphere": {{ "dominant_feeling": "", "calm_hectic_score": 50, "airy_dim_score": 50, "warm_cold_score": 50 }},
  "red_flags": [],
  "confidence": "low|medium|high"
}}"""


def parse_photo_insights(text: str) -> PhotoInsights:
    """Parse a raw model reply (possibly fenced) into PhotoInsights."""
    cleaned = re.sub(r"```json|```", "", text or "").strip()
    start_idx = cleaned.find("{")
    end_idx = cleaned.rfind("}") + 1
    if start_idx < 0 or end_idx <= start_idx:
        raise AdapterError("No JSON found in vision response")
    try:
        return PhotoInsights.model_validate(json.loads(cleaned[start_idx:end_idx]))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        raise AdapterError(f"Failed to parse vision response: {e}")


class PhotoVisionAnalyzer:
    """Best-effort analyzer: returns None when unconfigured, without photos, or on any failure."""

    def __init__(self, model=None, max_photos: int = MAX_PHOTOS):
        self.model = model
        self.max_photos = max_photos

    @classmethod
    def from_config(cls, config: AppConfig) -> "PhotoVisionAnalyzer":
        if not config.vision_api_key:
            logger.info("Photo analysis disabled: no vision credential", vision_provider=config.vision_provider)
            return cls(model=None)
        model = get_chat_model(config.vision_provider, config.vision_model, config.vision_api_key, max_tokens=600)
        return cls(model=model)

    @property
    def enabled(self) -> bool:
        return self.model is not None

    def _build_message(self, urls: list[str]) -> HumanMessage:
        content = [{"type": "text", "text": build_photo_prompt(len(urls))}]
        content.extend({"type": "image_url", "image_url": {"url": url}} for url in urls)
        return HumanMessage(content=content)

    async def _invoke(self, message: HumanMessage) -> PhotoInsights:
        try:
            structured = self.model.with_structured_output(PhotoInsights)
        except (AttributeError, NotImplementedError):
            response = await self.model.ainvoke([message])
            content = response.content if hasattr(response, "content") else str(response)
            return parse_photo_insights(content if isinstance(content, str) else json.dumps(content))

        result = await structured.ainvoke([message])
        if isinstance(result, PhotoInsights):
            return result
        return PhotoInsights.model_validate(result)

    async def analyze_photos(self, image_urls: list[str]) -> Optional[PhotoInsights]:
        urls = [url for url in (image_urls or []) if url][:self.max_photos]
        if not self.model or not urls:
            logger.debug("Photo analysis skipped", enabled=self.enabled, photo_count=len(urls))
            return None

        try:
            with log_timing("photo_analysis", logger=logger, photo_count=len(urls)):
                insights = await self._invoke(self._build_message(urls))
        except Exception as e:
            logger.warning("Photo analysis failed", photo_count=len(urls), error=str(e))
            return None

        logger.info(
            "Photo analysis completed",
            photo_count=len(urls),
            light_quality=insights.light_assessment.quality,
            red_flag_count=len(insights.red_flags),
            confidence=insights.confidence
        )
        return insights
