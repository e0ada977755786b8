"""
Gateway Exceptions
==================

Errors raised by the chat relay and knowledge base loader. Route handlers
translate these into generic client-facing replies; the exception text is
only ever written to the server log.
"""

from typing import Optional


class GatewayError(Exception):
    """Base class for all gateway errors."""


class KnowledgeBaseError(GatewayError):
    """Raised when the knowledge base file cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load knowledge base '{path}': {reason}")


class ChatConfigurationError(GatewayError):
    """Raised when the chat relay is called without a configured API key."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} is not configured")


class UpstreamCompletionError(GatewayError):
    """Raised when the completion provider call fails."""

    def __init__(
        self,
        reason: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.reason = reason
        self.status_code = status_code
        self.body = body
        super().__init__(f"Completion request failed: {reason}")
