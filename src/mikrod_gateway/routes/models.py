"""
Pydantic request/response models for route endpoints.
"""

from typing import Literal, Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    """Request body for POST /chat."""

    message: Optional[str] = None


class ChatResponse(BaseModel):
    reply: str


class UploadResult(BaseModel):
    """Response for POST /api/speedtest/upload."""

    status: Literal["ok"] = "ok"
    receivedMB: str


class UploadFailure(BaseModel):
    status: Literal["error"] = "error"
    message: str = "Upload failed"


class PingResult(BaseModel):
    """Response for GET /api/speedtest/ping; latency is in milliseconds."""

    message: Literal["pong"] = "pong"
    latency: str
