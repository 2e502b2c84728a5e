"""Pydantic schemas for the clinician assistant endpoints.

Request models accept the field names used by the web client; emptiness
checks live in the services so they report the domain error codes.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageIn(BaseModel):
    """One conversation turn as sent by the client.

    Roles other than ``assistant``/``system`` are treated as ``user``.
    """

    role: Any = "user"
    content: Any = ""


class ChatRequest(BaseModel):
    messages: list[MessageIn] = Field(
        default_factory=list,
        description="Conversation so far, oldest first. Must not be empty.",
    )
    temperature: float | None = None
    max_tokens: int | None = None
    model: str | None = Field(None, description="Model override")


class ChatResponse(BaseModel):
    content: str
    model: str


class TranslateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field("ro", alias="from", description="Source language: ro or en")
    target: str = Field("en", alias="to", description="Target language: ro or en")
    markdown: str = Field("", description="Markdown document to translate")
    instruction: str = Field("", description="Extra instruction appended to the system prompt")


class ContentResponse(BaseModel):
    content: str


class ConditionDraftRequest(BaseModel):
    name: str | None = Field(None, description="Condition name")
    context: Any = Field(None, description="Optional free-form context")


class ConditionDraftResponse(BaseModel):
    ro: str = Field(..., description="Romanian markdown draft")
    en: str = Field(..., description="English translation of the draft")


class DifferentialDiagnosisRequest(BaseModel):
    symptoms: list[Any] = Field(default_factory=list)
    age: int | str | None = None
    gender: str | None = None
    context: Any = None
