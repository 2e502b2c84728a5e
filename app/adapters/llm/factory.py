"""Factory pattern for creating LLM client instances."""

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.openai_client import OpenAIClient
from app.core.config import settings
from app.core.errors import ConfigurationAppError, ValidationAppError

# Providers speaking the OpenAI chat-completions protocol, with their endpoints
PROVIDER_BASE_URLS: dict[str, str | None] = {
    "groq": "https://api.groq.com/openai/v1",
    "openai": None,
}


def create_llm_client() -> AbstractLLMClient:
    """Instantiate the chat client configured by ``LLM_*`` settings.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ConfigurationAppError: If no API key is configured.
        ValidationAppError: If the provider is not supported.
    """
    provider = settings.llm.provider.lower()

    if provider not in PROVIDER_BASE_URLS:
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(sorted(PROVIDER_BASE_URLS))}"
            ),
        )

    if not settings.llm.api_key:
        raise ConfigurationAppError(
            code="llm_not_configured",
            message="AI not configured (set LLM_API_KEY)",
            details={"setting": "LLM_API_KEY"},
        )

    return OpenAIClient(
        api_key=settings.llm.api_key,
        model=settings.llm.model,
        base_url=settings.llm.base_url or PROVIDER_BASE_URLS[provider],
        timeout_seconds=settings.llm.timeout_seconds,
    )
