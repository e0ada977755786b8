"""
Chat relay endpoint (/chat).

The body is parsed leniently: a missing, malformed or empty ``message``
is a 400 with a ``reply`` field rather than FastAPI's default 422.
"""

import json
import logging

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..chat import DEGRADED_REPLY, EMPTY_MESSAGE_REPLY, ChatRelay
from ..exceptions import ChatConfigurationError, UpstreamCompletionError
from . import chat_router, get_chat_relay
from .models import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


async def _read_chat_request(request: Request) -> ChatRequest:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = {}
    if not isinstance(body, dict):
        body = {}
    return ChatRequest.model_validate(body)


@chat_router.post("/chat", response_model=ChatResponse)
async def chat(request: Request, relay: ChatRelay = Depends(get_chat_relay)):
    """
    Relay one user message to the completion provider.

    Returns:
        200 ``{"reply": ...}`` on success
        400 ``{"reply": "Please provide a valid message."}`` for an empty message
        500 ``{"reply": <generic apology>}`` on any provider or configuration failure
    """
    try:
        chat_request = await _read_chat_request(request)
    except ValidationError:
        chat_request = ChatRequest()

    message = chat_request.message
    if not message or not message.strip():
        return JSONResponse(status_code=400, content={"reply": EMPTY_MESSAGE_REPLY})

    logger.info(f"User: {message}")

    try:
        reply = await relay.reply(message)
    except ChatConfigurationError as e:
        logger.error(f"Chat relay misconfigured: {e}")
        return JSONResponse(status_code=500, content={"reply": DEGRADED_REPLY})
    except UpstreamCompletionError as e:
        logger.error(f"Error generating response: {e}")
        return JSONResponse(status_code=500, content={"reply": DEGRADED_REPLY})
    except Exception:
        logger.exception("Unexpected error generating response")
        return JSONResponse(status_code=500, content={"reply": DEGRADED_REPLY})

    logger.info(f"Reply: {reply}")
    return ChatResponse(reply=reply)
