"""OpenAI-compatible chat-completion client (OpenAI, Groq)."""

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from app.adapters.llm.base import AbstractLLMClient, ChatCompletion, ChatMessage
from app.core.errors import LLMAppError

logger = logging.getLogger(__name__)


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI-protocol chat completions.

    Uses the official OpenAI Python SDK with async support; pointing
    ``base_url`` at Groq's OpenAI-compatible endpoint serves Groq models.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        """Initialize the async SDK client.

        Args:
            api_key: Provider API key.
            model: Default model name (e.g., "llama-3.1-70b-versatile").
            base_url: Optional custom base URL.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.default_model = model

    async def chat(
        self,
        messages: list[ChatMessage],
        *,
        model: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> ChatCompletion:
        model_name = model or self.default_model
        request_params: dict[str, Any] = {
            "model": model_name,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        try:
            response = await self.client.chat.completions.create(**request_params)
        except OpenAIError as exc:
            status_code = getattr(exc, "status_code", None)
            logger.warning(
                "llm.request_failed",
                extra={
                    "model": model_name,
                    "error_type": type(exc).__name__,
                    "http_status": status_code,
                },
            )
            details = {"model": model_name}
            if status_code is not None:
                details["http_status"] = status_code
            raise LLMAppError(
                code="llm_request_failed",
                message=f"LLM API error: {exc}",
                details=details,
            ) from exc

        content = ""
        if response.choices:
            content = (response.choices[0].message.content or "").strip()

        logger.info(
            "llm.request_completed",
            extra={"model": model_name, "completion_chars": len(content)},
        )
        return ChatCompletion(content=content, model=model_name)
