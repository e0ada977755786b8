"""
Chat Relay
==========

Forwards a single user message, together with the knowledge-base system
prompt, to the completion provider through LiteLLM and returns the cleaned
text reply.

Failure modes:
- no API key configured -> :class:`ChatConfigurationError` (no network call)
- any provider/transport failure -> :class:`UpstreamCompletionError`
"""

import logging
import re
from typing import Any, Awaitable, Callable, Optional

import litellm

from .config import GatewaySettings
from .exceptions import ChatConfigurationError, UpstreamCompletionError
from .knowledge import KnowledgeBase
from .observability import ATTR_CHAT_REPLY_LENGTH, get_tracer, trace_chat_completion

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 250

EMPTY_MESSAGE_REPLY = "Please provide a valid message."
FALLBACK_REPLY = "Sorry, I didn’t quite catch that."
DEGRADED_REPLY = (
    "⚠️ Sorry, I'm having trouble responding right now. Please try again shortly."
)

_SENTENCE_TAGS = re.compile(r"</?s>", re.IGNORECASE)

CompletionFn = Callable[..., Awaitable[Any]]


def _content_text(content: Any) -> str:
    """Flatten string or content-part list (``[{"type": "text", "text": ...}]``) output."""
    if isinstance(content, str):
        return content
    if isinstance(content, (list, tuple)):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return ""


def clean_reply(content: Any) -> str:
    """Trim the model output, fall back when empty, and strip ``<s>`` tags."""
    reply = _content_text(content).strip() or FALLBACK_REPLY
    return _SENTENCE_TAGS.sub("", reply).strip()


def _first_choice_content(response: Any) -> Any:
    """Pull ``choices[0].message.content`` from a LiteLLM/OpenAI-style response."""
    try:
        choices = response["choices"] if isinstance(response, dict) else response.choices
        if not choices:
            return None
        choice = choices[0]
        message = choice["message"] if isinstance(choice, dict) else choice.message
        if isinstance(message, dict):
            return message.get("content")
        return getattr(message, "content", None)
    except (AttributeError, KeyError, IndexError, TypeError):
        return None


def _describe_upstream_error(e: Exception) -> UpstreamCompletionError:
    status_code = getattr(e, "status_code", None)
    body = None
    response = getattr(e, "response", None)
    if response is not None:
        try:
            body = response.text
        except (AttributeError, RuntimeError, ValueError):
            body = None
        if status_code is None:
            status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int):
        status_code = None
    if body is not None and not isinstance(body, str):
        body = None
    return UpstreamCompletionError(type(e).__name__, status_code=status_code, body=body)


class ChatRelay:
    """
    Stateless relay between the ``/chat`` route and the completion provider.

    Args:
        settings: Gateway settings (API key, model, API base).
        knowledge_base: Source of the fixed system prompt.
        completion_fn: Async completion callable; defaults to
            ``litellm.acompletion`` resolved at call time.
    """

    def __init__(
        self,
        settings: GatewaySettings,
        knowledge_base: KnowledgeBase,
        completion_fn: Optional[CompletionFn] = None,
    ):
        self.settings = settings
        self.knowledge_base = knowledge_base
        self._completion_fn = completion_fn
        self._system_prompt = knowledge_base.build_system_prompt()

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    def build_messages(self, message: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self._system_prompt},
            {"role": "user", "content": message},
        ]

    async def reply(self, message: str) -> str:
        """
        Return the assistant reply for ``message``.

        Raises:
            ChatConfigurationError: if no API key is configured.
            UpstreamCompletionError: if the provider call fails.
        """
        if not self.settings.has_api_key:
            logger.error(
                "Chat request rejected: OPENROUTER_API_KEY is not configured"
            )
            raise ChatConfigurationError("OPENROUTER_API_KEY")

        completion = self._completion_fn or litellm.acompletion

        with trace_chat_completion(
            get_tracer(), self.settings.chat_model, len(message)
        ) as span:
            try:
                response = await completion(
                    model=self.settings.chat_model,
                    messages=self.build_messages(message),
                    api_key=self.settings.api_key,
                    api_base=self.settings.api_base,
                    temperature=TEMPERATURE,
                    max_tokens=MAX_TOKENS,
                )
            except Exception as e:
                error = _describe_upstream_error(e)
                logger.error(
                    f"Completion request failed: {error.reason} "
                    f"(status={error.status_code}, body={error.body!r})"
                )
                raise error from e

            reply = clean_reply(_first_choice_content(response))
            span.set_attribute(ATTR_CHAT_REPLY_LENGTH, len(reply))

        return reply
