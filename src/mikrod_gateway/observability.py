"""
Tracing - OpenTelemetry Instrumentation for the Gateway
=======================================================

Provides OTel spans for:
- Chat completions (chat.completion) with model, reply length and errors
- Speed-test probes (speedtest.download / speedtest.upload) with byte counts

Spans go through the global tracer provider. Without a configured SDK
provider the OTel API is a no-op, so the helpers are always safe to call.
``init_observability()`` installs an SDK provider when ``OTEL_ENABLED`` is
set.

Usage:
    from mikrod_gateway.observability import get_tracer, trace_chat_completion

    with trace_chat_completion(get_tracer(), model="openrouter/openai/gpt-4o-mini") as span:
        ...
"""

import contextlib
import logging
import time
from typing import Any, Generator, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode

logger = logging.getLogger(__name__)

TRACER_NAME = "mikrod_gateway"

# Span attribute names
ATTR_CHAT_MODEL = "chat.model"
ATTR_CHAT_MESSAGE_LENGTH = "chat.message_length"
ATTR_CHAT_REPLY_LENGTH = "chat.reply_length"
ATTR_CHAT_SUCCESS = "chat.success"
ATTR_CHAT_ERROR = "chat.error"
ATTR_DURATION_MS = "gateway.duration_ms"
ATTR_SPEEDTEST_DIRECTION = "speedtest.direction"
ATTR_SPEEDTEST_REQUESTED_MB = "speedtest.requested_mb"
ATTR_SPEEDTEST_BYTES = "speedtest.bytes"

_provider: Optional[TracerProvider] = None


def get_tracer() -> trace.Tracer:
    """Return the gateway tracer from the current global provider."""
    return trace.get_tracer(TRACER_NAME)


@contextlib.contextmanager
def trace_chat_completion(
    tracer: trace.Tracer, model: str, message_length: int = 0
) -> Generator[Any, None, None]:
    """
    Context manager for tracing one chat completion call.

    The caller sets ``ATTR_CHAT_REPLY_LENGTH`` on the yielded span once the
    reply is known. Exceptions are recorded on the span and re-raised.
    """
    start_time = time.perf_counter()

    with tracer.start_as_current_span("chat.completion") as span:
        span.set_attribute(ATTR_CHAT_MODEL, model)
        span.set_attribute(ATTR_CHAT_MESSAGE_LENGTH, message_length)

        try:
            yield span
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            span.set_attribute(ATTR_DURATION_MS, round(duration_ms, 2))
            span.set_attribute(ATTR_CHAT_SUCCESS, False)
            span.set_attribute(ATTR_CHAT_ERROR, type(e).__name__)
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            raise
        else:
            duration_ms = (time.perf_counter() - start_time) * 1000
            span.set_attribute(ATTR_DURATION_MS, round(duration_ms, 2))
            span.set_attribute(ATTR_CHAT_SUCCESS, True)
            span.set_status(Status(StatusCode.OK))


def record_speedtest(
    tracer: trace.Tracer, direction: str, requested_mb: int, byte_count: int
) -> None:
    """Emit a completed ``speedtest.<direction>`` span."""
    with tracer.start_as_current_span(f"speedtest.{direction}") as span:
        span.set_attribute(ATTR_SPEEDTEST_DIRECTION, direction)
        span.set_attribute(ATTR_SPEEDTEST_REQUESTED_MB, requested_mb)
        span.set_attribute(ATTR_SPEEDTEST_BYTES, byte_count)


def init_observability(service_name: str = "mikrod-gateway") -> TracerProvider:
    """
    Install an SDK tracer provider that prints spans to stdout.

    Idempotent: a second call returns the provider installed by the first.
    """
    global _provider
    if _provider is not None:
        return _provider

    existing = trace.get_tracer_provider()
    if isinstance(existing, TracerProvider):
        logger.debug("Reusing existing OpenTelemetry tracer provider")
        _provider = existing
        return _provider

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info(f"OpenTelemetry tracing initialized for {service_name}")
    return provider


def reset_observability() -> None:
    """Forget the installed provider (for tests)."""
    global _provider
    _provider = None
