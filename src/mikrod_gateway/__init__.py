"""
MikrodTech Gateway
==================

A small HTTP backend with two capabilities on one listener:

- Chat relay: forwards a user message plus a knowledge-base system prompt
  to an OpenRouter-hosted model through LiteLLM
- Throughput probe: download/upload/ping endpoints for a browser speed test

Usage:
    from mikrod_gateway.gateway import create_app

    app = create_app()

Or run the server directly:
    python -m mikrod_gateway.startup --port 3000
"""

__version__ = "1.0.0"

from .config import GatewaySettings, load_settings, settings_from_env
from .exceptions import (
    ChatConfigurationError,
    GatewayError,
    KnowledgeBaseError,
    UpstreamCompletionError,
)
from .knowledge import KnowledgeBase, load_knowledge_base
from .speedtest import RandomByteStream, UploadSink, simulate_ping

__all__ = [
    "__version__",
    "GatewaySettings",
    "load_settings",
    "settings_from_env",
    "GatewayError",
    "KnowledgeBaseError",
    "ChatConfigurationError",
    "UpstreamCompletionError",
    "KnowledgeBase",
    "load_knowledge_base",
    "RandomByteStream",
    "UploadSink",
    "simulate_ping",
]
