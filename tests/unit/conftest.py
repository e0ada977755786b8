"""
Pytest configuration for unit tests.

This conftest provides a shared OpenTelemetry tracer provider for tracing tests,
plus settings/knowledge/app fixtures for the route tests.
"""

import pytest
from fastapi.testclient import TestClient

# ============================================================================
# Shared OpenTelemetry configuration - set up once for all tracing tests
# ============================================================================

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

from mikrod_gateway.config import GatewaySettings
from mikrod_gateway.gateway import create_app
from mikrod_gateway.knowledge import KnowledgeBase

# Shared tracer provider and exporter for all tracing tests
_shared_exporter = InMemorySpanExporter()
_shared_provider = TracerProvider()
_shared_provider.add_span_processor(SimpleSpanProcessor(_shared_exporter))

# Set the global tracer provider once
trace.set_tracer_provider(_shared_provider)


SAMPLE_KNOWLEDGE = {
    "company": "MikrodTech",
    "tagline": "Connecting communities",
    "mission": "Reliable internet for everyone",
    "vision": "A connected region",
    "core_values": ["Reliability", "Integrity"],
    "services": {
        "internet": ["Home fibre", "Business broadband"],
        "it_solutions": ["CCTV setup"],
    },
    "contact_info": {"phone": "+254 700 000 000", "email": "info@mikrodtech.example"},
    "branding": {"tone": "Friendly"},
}


@pytest.fixture
def shared_span_exporter():
    """
    Provides the shared span exporter for tests that need to verify spans.

    Clears spans before and after each test.
    """
    _shared_exporter.clear()
    yield _shared_exporter
    _shared_exporter.clear()


@pytest.fixture(autouse=True)
def _reset_all_singletons():
    """Reset module-level state between tests to prevent cross-test contamination."""
    yield

    from mikrod_gateway.observability import reset_observability

    reset_observability()


@pytest.fixture
def knowledge_base():
    return KnowledgeBase(data=dict(SAMPLE_KNOWLEDGE))


@pytest.fixture
def settings():
    return GatewaySettings(api_key="sk-or-test-key")


@pytest.fixture
def make_client(settings, knowledge_base):
    """Factory building a TestClient around a fresh app."""

    def _make(completion_fn=None, **overrides):
        app_settings = overrides.pop("settings", settings)
        app = create_app(
            app_settings,
            knowledge_base=overrides.pop("knowledge_base", knowledge_base),
            completion_fn=completion_fn,
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
