"""LLM model access for week plan narration."""

import os

from pydantic_ai.models.openai import OpenAIModel

from weekplanner.config.settings import settings

SUPPORTED_PROVIDERS = ("openai",)


def _api_key() -> str | None:
    return settings.openai_api_key or os.getenv("OPENAI_API_KEY") or None


def is_configured() -> bool:
    return _api_key() is not None


def get_model(provider: str, model_name: str) -> OpenAIModel:
    """Build the pydantic-ai model used for narration.

    Raises:
        ValueError: If the provider is not supported
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unsupported LLM provider: {provider}. Supported: {', '.join(SUPPORTED_PROVIDERS)}")

    key = _api_key()
    # OpenAIModel reads the key from the environment
    if key and not os.getenv("OPENAI_API_KEY"):
        os.environ["OPENAI_API_KEY"] = key
    return OpenAIModel(model_name)
