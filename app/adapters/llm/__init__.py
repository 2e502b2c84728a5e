"""LLM adapter layer - chat completions over OpenAI-compatible providers."""

from app.adapters.llm.base import AbstractLLMClient, ChatCompletion, ChatMessage
from app.adapters.llm.factory import create_llm_client
from app.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "ChatCompletion",
    "ChatMessage",
    "OpenAIClient",
    "create_llm_client",
]
