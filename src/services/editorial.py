"""Editorial text for certificates: the one-sentence barometer line and the summary paragraph.

Templates are the default backend and keep certificates fully deterministic.
The LangChain backend rewrites the same facts with a chat model and falls back
to the templates whenever the model is unavailable or fails.
"""

from abc import ABC, abstractmethod
from typing import Optional
from langchain_core.messages import HumanMessage, SystemMessage
from src.models.location_insight import LocationInsight
from src.models.property import Property
from src.models.space import Space
from src.services.llm import get_chat_model
from src.utils.config import AppConfig
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)


SPACE_ONE_SENTENCE_TEMPLATES = {
    "Strong-Improving": "{type} combines strong fundamentals with upward momentum.",
    "Strong-Stable": "{type} delivers consistent quality in established configuration.",
    "Strong-Declining": "{type} maintains core strengths despite market pressure.",
    "Balanced-Improving": "{type} shows promise as fundamentals strengthen.",
    "Balanced-Stable": "{type} offers typical urban living without extremes.",
    "Balanced-Declining": "{type} faces ordinary challenges in competitive segment.",
    "Fragile-Improving": "{type} requires attention as it develops from weak base.",
    "Fragile-Stable": "{type} maintains fragile equilibrium with ongoing dependencies.",
    "Fragile-Declining": "{type} shows compounding vulnerabilities requiring mitigation.",
}
SPACE_ONE_SENTENCE_FALLBACK = "{type} presents typical urban living characteristics."

EDITORIAL_SYSTEM_PROMPT = """You write short, sober editorial copy for a property livability certificate.
Use only the facts you are given. Do not invent amenities, prices or history.
Return plain text without markdown or quotes."""


def _js_round(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


class EditorialTextGenerator(ABC):
    """Produces the free-text fields of both certificate shapes."""

    @abstractmethod
    def property_one_sentence(self, prop: Property, location: LocationInsight) -> str:
        pass

    @abstractmethod
    def property_summary(self, prop: Property, location: LocationInsight, state: str, photo_line: str) -> str:
        pass

    @abstractmethod
    def space_one_sentence(self, space: Space, state: str, trajectory: str) -> str:
        pass

    @abstractmethod
    def space_summary(self, space: Space, state: str, signals: list) -> str:
        pass


class TemplateEditorialGenerator(EditorialTextGenerator):
    """Deterministic templates."""

    def property_one_sentence(self, prop: Property, location: LocationInsight) -> str:
        return (
            f"{prop.property_type or 'Property'} in {location.neighbourhood_energy} neighbourhood "
            f"with {location.daily_convenience} daily convenience."
        )

    def property_summary(self, prop: Property, location: LocationInsight, state: str, photo_line: str) -> str:
        if location.traffic_exposure == "high":
            acoustic = "Traffic noise requires investigation before committing."
        else:
            acoustic = "Acoustic conditions appear manageable from available data."
        return (
            f"This {prop.property_type or 'property'} at {prop.address} presents a {state.lower()} experience profile. "
            f"{photo_line} "
            f"The location offers {location.daily_convenience} daily convenience in a "
            f"{location.neighbourhood_energy} neighbourhood. "
            f"{acoustic} "
            "In-person verification is essential before any decision."
        )

    def space_one_sentence(self, space: Space, state: str, trajectory: str) -> str:
        template = SPACE_ONE_SENTENCE_TEMPLATES.get(f"{state}-{trajectory}", SPACE_ONE_SENTENCE_FALLBACK)
        return template.format(type=space.property_type)

    def space_summary(self, space: Space, state: str, signals: list) -> str:
        positive_count = sum(1 for s in signals if s.state == "positive")
        sensitive_count = sum(1 for s in signals if s.state == "sensitive")
        area = _js_round(space.area_m2)
        where = space.location_label

        if positive_count > sensitive_count:
            return (
                f"This {space.property_type} in {where} demonstrates balanced fundamentals. "
                f"The {area}m² layout on floor {space.floor} supports standard urban living patterns. "
                "Key strengths include spatial adequacy and neighborhood positioning. "
                "Standard urban trade-offs apply, requiring typical resident adaptations. "
                "Property functions within expected parameters for its category."
            )
        if sensitive_count > positive_count:
            return (
                f"This {space.property_type} requires careful evaluation of {sensitive_count} sensitive factors. "
                f"The {area}m² space on floor {space.floor} presents characteristic urban constraints. "
                "Residents should anticipate ongoing management of identified dependencies. "
                "Success here demands intentional lifestyle alignment with space limitations. "
                "Consider carefully before proceeding."
            )
        return (
            f"This {space.property_type} presents standard characteristics for its category in {where}. "
            f"The {area}m² configuration on floor {space.floor} neither excels nor disappoints significantly. "
            "Property delivers typical urban experience with predictable trade-offs. "
            "Suitable for buyers seeking conventional city living without distinctive features."
        )


class LangChainEditorialGenerator(EditorialTextGenerator):
    """Chat-model editorial copy seeded with the template text."""

    def __init__(self, model, fallback: Optional[EditorialTextGenerator] = None):
        self.model = model
        self.fallback = fallback or TemplateEditorialGenerator()

    def _rewrite(self, kind: str, draft: str, facts: dict) -> str:
        fact_lines = "\n".join(f"- {key}: {value}" for key, value in facts.items() if value is not None)
        prompt = (
            f"Rewrite this certificate {kind} in the same length and tone.\n\n"
            f"Facts:\n{fact_lines}\n\nDraft:\n{draft}"
        )
        try:
            with log_timing("editorial_generation", logger=logger, editorial_kind=kind):
                response = self.model.invoke([
                    SystemMessage(content=EDITORIAL_SYSTEM_PROMPT),
                    HumanMessage(content=prompt),
                ])
            text = response.content if hasattr(response, "content") else str(response)
            if isinstance(text, str) and text.strip():
                return text.strip()
            logger.warning("Editorial model returned no text", editorial_kind=kind)
        except Exception as e:
            logger.warning("Editorial generation failed, using template", editorial_kind=kind, error=str(e))
        return draft

    def property_one_sentence(self, prop: Property, location: LocationInsight) -> str:
        draft = self.fallback.property_one_sentence(prop, location)
        return self._rewrite("one-sentence line", draft, {
            "property_type": prop.property_type,
            "neighbourhood_energy": location.neighbourhood_energy,
            "daily_convenience": location.daily_convenience,
        })

    def property_summary(self, prop: Property, location: LocationInsight, state: str, photo_line: str) -> str:
        draft = self.fallback.property_summary(prop, location, state, photo_line)
        return self._rewrite("summary paragraph", draft, {
            "address": prop.address,
            "property_type": prop.property_type,
            "experience_state": state,
            "walkability": location.walkability,
            "traffic_exposure": location.traffic_exposure,
            "photo_analysis": photo_line,
        })

    def space_one_sentence(self, space: Space, state: str, trajectory: str) -> str:
        draft = self.fallback.space_one_sentence(space, state, trajectory)
        return self._rewrite("one-sentence line", draft, {
            "property_type": space.property_type,
            "experience_state": state,
            "trajectory": trajectory,
        })

    def space_summary(self, space: Space, state: str, signals: list) -> str:
        draft = self.fallback.space_summary(space, state, signals)
        return self._rewrite("summary paragraph", draft, {
            "property_type": space.property_type,
            "location": space.location_label,
            "area_m2": space.area_m2,
            "floor": space.floor,
            "signals": ", ".join(f"{s.name} ({s.state})" for s in signals),
        })


def build_editorial_generator(config: AppConfig) -> EditorialTextGenerator:
    """Template backend unless EDITORIAL_BACKEND=llm and a credential is present."""
    if config.editorial_backend != "llm":
        return TemplateEditorialGenerator()

    if not config.vision_api_key:
        logger.warning("EDITORIAL_BACKEND=llm without credentials, using templates")
        return TemplateEditorialGenerator()

    model = get_chat_model(config.vision_provider, config.vision_model, config.vision_api_key, temperature=0.4)
    return LangChainEditorialGenerator(model)
