"""
Environment Variable Validation
================================

Validates environment variables on startup to catch misconfigurations early.
This module is advisory only: it logs warnings and errors but never raises
exceptions or prevents the gateway from starting.

Usage::

    from mikrod_gateway.env_validation import validate_environment

    result = validate_environment()
    # result.errors  -> list[str]
    # result.warnings -> list[str]
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass
class ValidationResult:
    """Holds errors and warnings produced by environment validation."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Known env vars by type
# ---------------------------------------------------------------------------

_BOOLEAN_ENV_VARS: tuple[str, ...] = (
    "OTEL_ENABLED",
    "MIKROD_CORS_CREDENTIALS",
)

_VALID_BOOLEAN_VALUES: frozenset[str] = frozenset(
    {"true", "false", "1", "0", "yes", "no", ""}
)

_PORT_ENV_VARS: tuple[str, ...] = ("PORT",)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_environment() -> ValidationResult:
    """Validate known environment variables and return a summary.

    Returns a :class:`ValidationResult` with ``errors`` (critical issues like
    a configured knowledge file that does not exist) and ``warnings``
    (potential problems like a missing API key).

    Set ``MIKROD_SKIP_ENV_VALIDATION=true`` to skip all checks.
    """
    result = ValidationResult()

    if os.environ.get("MIKROD_SKIP_ENV_VALIDATION", "").lower() in (
        "true",
        "1",
        "yes",
    ):
        logger.info("Environment validation skipped (MIKROD_SKIP_ENV_VALIDATION)")
        return result

    _validate_api_key(result)
    _validate_knowledge_base_path(result)
    _validate_api_base(result)
    _validate_cors_origins(result)
    _validate_boolean_vars(result)
    _validate_port_vars(result)

    for message in result.errors:
        logger.error(message)
    for message in result.warnings:
        logger.warning(message)

    logger.info(
        "Environment validation complete: %d error(s), %d warning(s)",
        len(result.errors),
        len(result.warnings),
    )

    return result


# ---------------------------------------------------------------------------
# Individual validators (private)
# ---------------------------------------------------------------------------


def _validate_api_key(result: ValidationResult) -> None:
    """Warn if OPENROUTER_API_KEY is not set (chat relay will fail)."""
    if not os.environ.get("OPENROUTER_API_KEY"):
        result.warnings.append(
            "OPENROUTER_API_KEY is not set: /chat requests will fail at call time"
        )


def _validate_knowledge_base_path(result: ValidationResult) -> None:
    """Error if KNOWLEDGE_BASE_PATH is set but the file does not exist."""
    path = os.environ.get("KNOWLEDGE_BASE_PATH")
    if path and not Path(path).is_file():
        result.errors.append(
            f"KNOWLEDGE_BASE_PATH is set to '{path}' but the file does not exist"
        )


def _validate_api_base(result: ValidationResult) -> None:
    """Warn if MIKROD_API_BASE does not look like an HTTP URL."""
    url = os.environ.get("MIKROD_API_BASE")
    if url is None:
        return
    valid_prefixes = ("http://", "https://")
    if not url.startswith(valid_prefixes):
        result.warnings.append(
            f"MIKROD_API_BASE ('{url}') does not start with "
            f"a recognised scheme (expected one of {', '.join(valid_prefixes)})"
        )


def _validate_cors_origins(result: ValidationResult) -> None:
    """Warn if credentials are allowed together with a wildcard origin."""
    origins = os.environ.get("MIKROD_CORS_ORIGINS", "*")
    credentials = os.environ.get("MIKROD_CORS_CREDENTIALS", "false").lower()
    wildcard = any(o.strip() == "*" for o in origins.split(","))
    if wildcard and credentials in ("true", "1", "yes"):
        result.warnings.append(
            "MIKROD_CORS_CREDENTIALS is enabled with a wildcard origin; "
            "browsers will reject credentialed requests"
        )


def _validate_boolean_vars(result: ValidationResult) -> None:
    """Warn for boolean env vars whose value is not recognisable."""
    for var in _BOOLEAN_ENV_VARS:
        value = os.environ.get(var)
        if value is not None and value.lower() not in _VALID_BOOLEAN_VALUES:
            result.warnings.append(
                f"{var} has unexpected value '{value}' "
                f"(expected one of: true, false, 1, 0, yes, no)"
            )


def _validate_port_vars(result: ValidationResult) -> None:
    """Warn for port env vars that are not valid integers."""
    for var in _PORT_ENV_VARS:
        value = os.environ.get(var)
        if value is None:
            continue
        try:
            port = int(value)
            if not (1 <= port <= 65535):
                result.warnings.append(
                    f"{var} value '{value}' is outside the valid port range (1-65535)"
                )
        except ValueError:
            result.warnings.append(f"{var} value '{value}' is not a valid integer")
