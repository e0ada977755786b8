"""
Gateway Settings
================

Process-wide settings are read once at startup and frozen. The app factory
stores the resulting :class:`GatewaySettings` on ``app.state`` and route
handlers receive it through a FastAPI dependency, so nothing here is
mutated after the server starts accepting requests.

Usage::

    from mikrod_gateway.config import load_settings

    settings = load_settings(env_file=".env")
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "openrouter/openai/gpt-4o-mini"
DEFAULT_API_BASE = "https://openrouter.ai/api/v1"
DEFAULT_KNOWLEDGE_BASE_PATH = "./knowledge.json"
DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"

_TRUE_VALUES = ("true", "1", "yes")


def _parse_bool(raw: Optional[str], default: bool = False) -> bool:
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _parse_cors_origins(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated origin list, dropping empty entries."""
    if not raw:
        return ("*",)
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or ("*",)


def _parse_port(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid PORT value '{raw}', using {DEFAULT_PORT}")
        return DEFAULT_PORT


@dataclass(frozen=True)
class GatewaySettings:
    """Immutable runtime configuration for the gateway."""

    api_key: Optional[str] = None
    chat_model: str = DEFAULT_CHAT_MODEL
    api_base: str = DEFAULT_API_BASE
    knowledge_base_path: str = DEFAULT_KNOWLEDGE_BASE_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origins: tuple[str, ...] = ("*",)
    cors_credentials: bool = False
    otel_enabled: bool = False

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> GatewaySettings:
    """Build settings from a mapping (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ

    return GatewaySettings(
        api_key=env.get("OPENROUTER_API_KEY") or None,
        chat_model=env.get("MIKROD_CHAT_MODEL") or DEFAULT_CHAT_MODEL,
        api_base=env.get("MIKROD_API_BASE") or DEFAULT_API_BASE,
        knowledge_base_path=env.get("KNOWLEDGE_BASE_PATH")
        or DEFAULT_KNOWLEDGE_BASE_PATH,
        host=env.get("HOST") or DEFAULT_HOST,
        port=_parse_port(env.get("PORT")),
        cors_origins=_parse_cors_origins(env.get("MIKROD_CORS_ORIGINS")),
        cors_credentials=_parse_bool(env.get("MIKROD_CORS_CREDENTIALS")),
        otel_enabled=_parse_bool(env.get("OTEL_ENABLED")),
    )


def load_settings(env_file: Optional[str] = ".env") -> GatewaySettings:
    """
    Load settings from an optional dotenv file plus the process environment.

    Variables already present in the environment take precedence over the
    dotenv file. A missing API key is logged as a warning only; the chat
    route fails at call time instead.
    """
    if env_file:
        loaded = load_dotenv(env_file, override=False)
        logger.debug(f"Dotenv file '{env_file}' loaded: {loaded}")

    settings = settings_from_env()

    logger.info(f"OpenRouter API key loaded? {settings.has_api_key}")
    if not settings.has_api_key:
        logger.warning(
            "OPENROUTER_API_KEY is not set; /chat will fail until it is configured"
        )

    return settings
