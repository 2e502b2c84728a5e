from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, TypedDict


Role = Literal["system", "user", "assistant"]


class ChatMessage(TypedDict):
	role: Role
	content: str


@dataclass(frozen=True)
class ChatCompletion:
	"""Text returned by a chat-completion call and the model that produced it."""

	content: str
	model: str


class AbstractLLMClient(ABC):
	"""Interface for chat-completion clients."""

	default_model: str

	@abstractmethod
	async def chat(
		self,
		messages: list[ChatMessage],
		*,
		model: str | None = None,
		temperature: float = 0.2,
		max_tokens: int = 1024,
	) -> ChatCompletion:
		"""Send a conversation to the model and return its reply.

		Args:
			messages: Ordered conversation, system prompt first.
			model: Model override; the client's default model when omitted.
			temperature: Sampling temperature.
			max_tokens: Upper bound on generated tokens.

		Returns:
			ChatCompletion: Reply text ("" when the provider returned none).

		Raises:
			LLMAppError: If the provider call fails.
		"""
		...
