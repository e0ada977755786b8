"""
Health endpoints.

- /: plain-text banner used by uptime checks
- /_health/live: JSON liveness probe, no dependency checks
"""

from fastapi.responses import PlainTextResponse

from . import health_router

HEALTH_BANNER = "✅ MikrodTech Chatbot Server is running with Knowledge Base!"


@health_router.get("/", response_class=PlainTextResponse)
async def root_health() -> str:
    return HEALTH_BANNER


@health_router.get("/_health/live")
async def liveness_probe():
    """
    Liveness probe endpoint.

    Verifies the process is alive and responsive. It does NOT check the
    completion provider.
    """
    return {"status": "alive", "service": "mikrod-gateway"}
