"""Unit tests for AssistantService."""

import json

import pytest

from app.core.errors import ValidationAppError
from app.schemas.assistant import MessageIn
from app.services.assistant_service import (
    CHAT_SYSTEM_PROMPT,
    CONDITION_DRAFT_PROMPT,
    AssistantService,
    normalize_messages,
)


class TestNormalizeMessages:
    def test_unknown_roles_become_user(self) -> None:
        result = normalize_messages(
            [
                MessageIn(role="assistant", content="hi"),
                MessageIn(role="system", content="be brief"),
                MessageIn(role="doctor", content="dose?"),
            ]
        )

        assert [m["role"] for m in result] == ["assistant", "system", "user"]

    def test_content_is_coerced_to_text(self) -> None:
        result = normalize_messages([MessageIn(content=12), MessageIn(content=None)])

        assert [m["content"] for m in result] == ["12", ""]


class TestMessage:
    @pytest.mark.asyncio
    async def test_prepends_system_prompt_and_uses_defaults(self, make_llm_client) -> None:
        llm = make_llm_client(["Consider guideline X."])
        service = AssistantService(llm=llm)

        result = await service.message([MessageIn(role="user", content="Management of CAP?")])

        assert result.content == "Consider guideline X."
        assert result.model == "fake-model"
        call = llm.calls[0]
        assert call["messages"][0] == {"role": "system", "content": CHAT_SYSTEM_PROMPT}
        assert call["messages"][1] == {"role": "user", "content": "Management of CAP?"}
        assert call["temperature"] == 0.2
        assert call["max_tokens"] == 800
        assert call["model"] is None

    @pytest.mark.asyncio
    async def test_overrides_are_forwarded(self, fake_llm) -> None:
        service = AssistantService(llm=fake_llm)

        result = await service.message(
            [MessageIn(content="q")], temperature=0.0, max_tokens=50, model="llama-3.1-8b-instant"
        )

        call = fake_llm.calls[0]
        assert call["temperature"] == 0.0
        assert call["max_tokens"] == 50
        assert result.model == "llama-3.1-8b-instant"

    @pytest.mark.asyncio
    async def test_empty_conversation_rejected(self, fake_llm) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await AssistantService(llm=fake_llm).message([])

        assert exc_info.value.code == "messages_required"
        assert fake_llm.calls == []


class TestTranslate:
    @pytest.mark.asyncio
    async def test_same_language_returns_input_without_llm_call(self, fake_llm) -> None:
        result = await AssistantService(llm=fake_llm).translate("en", "en", "# Title")

        assert result.content == "# Title"
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_translation_call_includes_instruction(self, make_llm_client) -> None:
        llm = make_llm_client(["# Pneumonie"])

        result = await AssistantService(llm=llm).translate(
            "en", "ro", "# Pneumonia", instruction="Use formal register."
        )

        assert result.content == "# Pneumonie"
        system, user = llm.calls[0]["messages"]
        assert system["content"].endswith("Additional instruction: Use formal register.")
        assert user == {"role": "user", "content": "# Pneumonia"}
        assert llm.calls[0]["max_tokens"] == 1200

    @pytest.mark.parametrize(
        "source,target,markdown",
        [("ro", "en", ""), ("ro", "en", "   "), ("fr", "en", "text"), ("ro", "de", "text")],
    )
    @pytest.mark.asyncio
    async def test_invalid_requests_rejected(self, fake_llm, source, target, markdown) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await AssistantService(llm=fake_llm).translate(source, target, markdown)

        assert exc_info.value.code == "invalid_translation_request"


class TestConditionDraft:
    @pytest.mark.asyncio
    async def test_drafts_in_romanian_then_translates(self, make_llm_client) -> None:
        llm = make_llm_client(["## Rezumat", "## Summary"])

        result = await AssistantService(llm=llm).condition_draft("Pneumonie", {"audience": "rezidenți"})

        assert result.ro == "## Rezumat"
        assert result.en == "## Summary"
        first, second = llm.calls
        assert first["messages"][0]["content"] == CONDITION_DRAFT_PROMPT
        assert json.loads(first["messages"][1]["content"]) == {
            "name": "Pneumonie",
            "context": {"audience": "rezidenți"},
        }
        assert second["messages"][1]["content"] == "## Rezumat"
        assert first["max_tokens"] == second["max_tokens"] == 900

    @pytest.mark.parametrize("name", [None, "", "  "])
    @pytest.mark.asyncio
    async def test_name_required(self, fake_llm, name) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await AssistantService(llm=fake_llm).condition_draft(name)

        assert exc_info.value.code == "name_required"


class TestDifferentialDiagnosis:
    @pytest.mark.asyncio
    async def test_sends_case_as_json(self, fake_llm) -> None:
        await AssistantService(llm=fake_llm).differential_diagnosis(
            ["febră", "tuse"], age=54, gender="M"
        )

        payload = json.loads(fake_llm.calls[0]["messages"][1]["content"])
        assert payload == {"symptoms": ["febră", "tuse"], "age": 54, "gender": "M", "context": None}

    @pytest.mark.asyncio
    async def test_symptoms_required(self, fake_llm) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await AssistantService(llm=fake_llm).differential_diagnosis([])

        assert exc_info.value.code == "symptoms_required"
