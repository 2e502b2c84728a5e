"""Clinician assistant features built on chat completions.

Every operation validates its input, builds a conversation around a fixed
system prompt, and returns the model's text unchanged. Content is educational
material for clinicians, never patient-facing advice.
"""

import json
import logging
from typing import Any, Iterable

from app.adapters.llm.base import AbstractLLMClient, ChatMessage
from app.core.errors import ValidationAppError
from app.schemas.assistant import (
    ChatResponse,
    ConditionDraftResponse,
    ContentResponse,
    MessageIn,
)

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("ro", "en")

CHAT_SYSTEM_PROMPT = (
    "You are a helpful, careful medical assistant for Romanian clinicians. "
    "You provide educational guidance, not medical advice for patients. "
    "Always remind to consult clinical guidelines and use clinical judgment."
)

TRANSLATE_SYSTEM_PROMPT = (
    "You are a professional medical translator for clinicians. "
    "Translate between Romanian (ro) and English (en) carefully while keeping the "
    "original Markdown structure, lists, headings and references unchanged. "
    "Do not add extra content. Preserve clinical meaning and terminology. "
)

CONDITION_DRAFT_PROMPT = "\n".join(
    [
        "Ești un asistent pentru conținut medical pentru clinicieni (limba română).",
        "Generează un draft concis și educațional pentru afecțiunea dată, "
        "cu următoarele secțiuni în format Markdown:",
        "1) Rezumat",
        "2) Manifestări clinice",
        "3) Diagnostic",
        "4) Management",
        "5) Tratamente",
        "6) Referințe (max 5, din ghiduri sau resurse recunoscute)",
        "Important: Conținut educațional pentru medici; nu este recomandare medicală pentru pacienți.",
    ]
)

DRAFT_TRANSLATION_PROMPT = (
    "Translate the following Romanian medical draft to clear professional English "
    "while keeping the Markdown structure intact. Keep references intact and do not hallucinate."
)

DIFFERENTIAL_PROMPT = "\n".join(
    [
        "Ești un asistent pentru diagnostic diferențial. "
        "Primești simptome, vârstă, sex și opțional context.",
        "Returnează:",
        "1) 5-8 diagnostice diferențiale probabile (cu probabilitate aproximativă)",
        "2) Red flags / criterii de gravitate",
        "3) Întrebări suplimentare utile",
        "4) Investigații inițiale recomandate (de clasă generală, nu branduri)",
        "5) Trimiteri / când este indicată",
        "",
        "Important: Acesta este conținut educațional, nu recomandare medicală pentru pacienți.",
    ]
)

CHAT_DEFAULT_TEMPERATURE = 0.2
CHAT_DEFAULT_MAX_TOKENS = 800
TRANSLATE_MAX_TOKENS = 1200
DRAFT_MAX_TOKENS = 900


def normalize_messages(messages: Iterable[MessageIn]) -> list[ChatMessage]:
    """Map client turns onto the three chat roles.

    ``assistant`` and ``system`` are kept; anything else is sent as ``user``.
    Content is coerced to text (``None`` becomes "").
    """
    normalized: list[ChatMessage] = []
    for message in messages:
        role = str(message.role)
        if role not in ("assistant", "system"):
            role = "user"
        content = "" if message.content is None else str(message.content)
        normalized.append({"role": role, "content": content})
    return normalized


def _as_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


class AssistantService:
    """Chat, translation, drafting and differential-diagnosis helpers.

    Attributes:
        llm: Chat-completion client.
    """

    def __init__(self, llm: AbstractLLMClient) -> None:
        self.llm = llm

    async def message(
        self,
        messages: list[MessageIn],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> ChatResponse:
        """Continue a clinician conversation.

        Raises:
            ValidationAppError: If ``messages`` is empty.
        """
        if not messages:
            raise ValidationAppError(
                code="messages_required",
                message="messages[] is required",
            )

        conversation: list[ChatMessage] = [
            {"role": "system", "content": CHAT_SYSTEM_PROMPT},
            *normalize_messages(messages),
        ]

        logger.info(
            "assistant.chat",
            extra={"turns": len(messages), "model_override": bool(model)},
        )
        result = await self.llm.chat(
            conversation,
            model=model or None,
            temperature=CHAT_DEFAULT_TEMPERATURE if temperature is None else temperature,
            max_tokens=max_tokens or CHAT_DEFAULT_MAX_TOKENS,
        )
        return ChatResponse(content=result.content, model=result.model)

    async def translate(
        self,
        source: str,
        target: str,
        markdown: str,
        instruction: str = "",
    ) -> ContentResponse:
        """Translate a markdown document between Romanian and English.

        Identical source and target languages return the input untouched
        without calling the model.

        Raises:
            ValidationAppError: If markdown is blank or a language is unsupported.
        """
        if (
            not markdown
            or not markdown.strip()
            or source not in SUPPORTED_LANGUAGES
            or target not in SUPPORTED_LANGUAGES
        ):
            raise ValidationAppError(
                code="invalid_translation_request",
                message="invalid input",
                details={"hint": "Provide markdown and from/to among: ro, en."},
            )

        if source == target:
            return ContentResponse(content=markdown)

        system_prompt = TRANSLATE_SYSTEM_PROMPT
        if instruction:
            system_prompt += f"Additional instruction: {instruction}"

        logger.info(
            "assistant.translate",
            extra={"source": source, "target": target, "chars": len(markdown)},
        )
        result = await self.llm.chat(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": markdown},
            ],
            max_tokens=TRANSLATE_MAX_TOKENS,
        )
        return ContentResponse(content=result.content)

    async def condition_draft(self, name: str | None, context: Any = None) -> ConditionDraftResponse:
        """Draft an educational condition page in Romanian, then English.

        Raises:
            ValidationAppError: If ``name`` is missing.
        """
        if not name or not str(name).strip():
            raise ValidationAppError(code="name_required", message="name is required")

        logger.info("assistant.condition_draft", extra={"has_context": context is not None})
        ro = await self.llm.chat(
            [
                {"role": "system", "content": CONDITION_DRAFT_PROMPT},
                {"role": "user", "content": _as_json({"name": name, "context": context})},
            ],
            max_tokens=DRAFT_MAX_TOKENS,
        )
        en = await self.llm.chat(
            [
                {"role": "system", "content": DRAFT_TRANSLATION_PROMPT},
                {"role": "user", "content": ro.content},
            ],
            max_tokens=DRAFT_MAX_TOKENS,
        )
        return ConditionDraftResponse(ro=ro.content, en=en.content)

    async def differential_diagnosis(
        self,
        symptoms: list[Any],
        *,
        age: Any = None,
        gender: str | None = None,
        context: Any = None,
    ) -> ContentResponse:
        """List differential diagnoses, red flags and next investigations.

        Raises:
            ValidationAppError: If ``symptoms`` is empty.
        """
        if not symptoms:
            raise ValidationAppError(
                code="symptoms_required",
                message="symptoms[] is required",
            )

        logger.info("assistant.differential_diagnosis", extra={"symptom_count": len(symptoms)})
        result = await self.llm.chat(
            [
                {"role": "system", "content": DIFFERENTIAL_PROMPT},
                {
                    "role": "user",
                    "content": _as_json(
                        {"symptoms": symptoms, "age": age, "gender": gender, "context": context}
                    ),
                },
            ],
            max_tokens=DRAFT_MAX_TOKENS,
        )
        return ContentResponse(content=result.content)
