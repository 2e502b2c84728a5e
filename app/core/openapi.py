"""OpenAPI customization utilities.

Adds tag descriptions and documents the 429 response shared by every
rate-limited operation, keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "AI Assistant",
        "description": "Clinician-facing chat, translation, drafting and image analysis.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]

RATE_LIMITED_RESPONSE = {
    "description": "Rate limit exceeded for this route and client IP.",
    "headers": {
        "Retry-After": {"schema": {"type": "integer"}, "description": "Seconds until the window resets."},
        "X-RateLimit-Limit": {"schema": {"type": "integer"}},
        "X-RateLimit-Remaining": {"schema": {"type": "integer"}},
        "X-RateLimit-Reset": {"schema": {"type": "integer"}, "description": "Epoch seconds."},
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and 429 documentation."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            if path.endswith("/health"):
                continue
            for method_obj in methods.values():
                if isinstance(method_obj, dict):
                    method_obj.setdefault("responses", {}).setdefault("429", RATE_LIMITED_RESPONSE)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
