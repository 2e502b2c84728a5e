from __future__ import annotations

from app.api.routes.assistant import router as assistant_router
from app.api.routes.health import router as health_router

__all__ = ["assistant_router", "health_router"]
