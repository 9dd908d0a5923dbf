"""Chat model factory shared by photo analysis and editorial text generation."""

from typing import Optional
from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI
from src.utils.errors import ConfigurationError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


def get_chat_model(
    provider: str,
    model_name: str,
    api_key: Optional[str],
    temperature: float = 0.2,
    max_tokens: int = 800,
):
    """Build a LangChain chat model for the configured provider."""
    provider = (provider or "").lower()

    logger.debug(
        "Getting chat model",
        llm_provider=provider,
        llm_model=model_name
    )

    if not api_key:
        raise ConfigurationError(f"API key not set for LLM provider: {provider}")

    if provider == "anthropic":
        return ChatAnthropic(model=model_name, api_key=api_key, temperature=temperature, max_tokens=max_tokens)
    if provider == "openai":
        return ChatOpenAI(model=model_name, api_key=api_key, temperature=temperature, max_tokens=max_tokens)
    raise ConfigurationError(f"Unsupported LLM provider: {provider}")
