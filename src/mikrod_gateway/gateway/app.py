"""
Gateway Application Factory (Composition Root)
==============================================

This module provides the FastAPI application factory for the MikrodTech
gateway. It configures middleware, startup-time state and routers in a
single place.

Load Order:
1. Resolve settings (explicit argument, or environment + .env)
2. Load the knowledge base once and build the chat relay
3. Create the FastAPI app and attach settings/relay to ``app.state``
4. Add CORS middleware
5. Register routes (health, chat, speedtest)

Usage:
    from mikrod_gateway.gateway import create_app

    app = create_app()
"""

import logging
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from .. import __version__
from ..chat import ChatRelay, CompletionFn
from ..config import GatewaySettings, load_settings
from ..knowledge import KnowledgeBase, load_knowledge_base_or_empty

logger = logging.getLogger(__name__)


def _configure_middleware(app: FastAPI, settings: GatewaySettings) -> None:
    """
    Configure all middleware for the application.

    Args:
        app: The FastAPI application instance
        settings: Gateway settings (CORS origins and credentials flag)
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=settings.cors_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.debug(f"Added CORSMiddleware (origins={list(settings.cors_origins)})")


def _register_routes(app: FastAPI) -> None:
    """Register all gateway routers with the application."""
    from ..routes import chat_router, health_router, speedtest_router

    app.include_router(health_router, prefix="")
    logger.debug("Registered health_router")

    app.include_router(chat_router, prefix="")
    logger.debug("Registered chat_router")

    app.include_router(speedtest_router)
    logger.debug("Registered speedtest_router (/api/speedtest/*)")


def create_app(
    settings: Optional[GatewaySettings] = None,
    *,
    knowledge_base: Optional[KnowledgeBase] = None,
    completion_fn: Optional[CompletionFn] = None,
    title: str = "MikrodTech Gateway",
) -> FastAPI:
    """
    Create the gateway FastAPI application.

    Args:
        settings: Settings to use; read from the environment when omitted
        knowledge_base: Pre-loaded knowledge base; loaded from
            ``settings.knowledge_base_path`` when omitted
        completion_fn: Override for the completion call (defaults to LiteLLM)
        title: FastAPI app title

    Returns:
        The configured FastAPI application instance
    """
    if settings is None:
        settings = load_settings()

    if knowledge_base is None:
        knowledge_base = load_knowledge_base_or_empty(settings.knowledge_base_path)

    app = FastAPI(title=title, version=__version__)

    app.state.settings = settings
    app.state.knowledge_base = knowledge_base
    app.state.chat_relay = ChatRelay(settings, knowledge_base, completion_fn)

    _configure_middleware(app, settings)
    _register_routes(app)

    logger.info("Gateway app created and configured")
    return app
