"""
FastAPI Routes for the MikrodTech Gateway
=========================================

- Health endpoints (/, /_health/live)
- Chat relay (/chat)
- Speed-test probes (/api/speedtest/download, /upload, /ping)

Usage:
    from mikrod_gateway.routes import health_router, chat_router, speedtest_router

    app.include_router(health_router)
    app.include_router(chat_router)
    app.include_router(speedtest_router)

Handlers read the startup-time :class:`GatewaySettings` and
:class:`ChatRelay` from ``app.state`` through the dependencies below.
"""

from fastapi import APIRouter, Request

from ..chat import ChatRelay
from ..config import GatewaySettings

# ---- Router definitions (must be defined BEFORE sub-module imports) ----

health_router = APIRouter(tags=["health"])

chat_router = APIRouter(tags=["chat"])

speedtest_router = APIRouter(prefix="/api/speedtest", tags=["speedtest"])


# ---- Dependencies ----


def get_settings(request: Request) -> GatewaySettings:
    return request.app.state.settings


def get_chat_relay(request: Request) -> ChatRelay:
    return request.app.state.chat_relay


# ---- Import sub-modules (registers routes on the routers above) ----

from . import health as _health_routes  # noqa: E402, F401
from . import chat as _chat_routes  # noqa: E402, F401
from . import speedtest as _speedtest_routes  # noqa: E402, F401

from .models import (  # noqa: E402
    ChatRequest,
    ChatResponse,
    PingResult,
    UploadFailure,
    UploadResult,
)

__all__ = [
    "health_router",
    "chat_router",
    "speedtest_router",
    "get_settings",
    "get_chat_relay",
    # Pydantic models
    "ChatRequest",
    "ChatResponse",
    "PingResult",
    "UploadFailure",
    "UploadResult",
]
