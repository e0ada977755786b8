"""
Knowledge Base
==============

Loads the static company knowledge file and renders the fixed system prompt
the chat relay sends with every completion request.

The file is JSON with (all optional) keys::

    {
      "company": "...", "tagline": "...", "mission": "...", "vision": "...",
      "core_values": ["..."],
      "services": {"category": ["service", ...]},
      "contact_info": {"phone": "...", "email": "..."},
      "branding": {"tone": "..."}
    }
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import KnowledgeBaseError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = """
You are MikrodTech's official AI assistant.
Use the following company information to answer user questions accurately and professionally.

Company name: {company}
Tagline: {tagline}
Mission: {mission}
Vision: {vision}
Core values: {core_values}
Services offered: {services}
Contact: {phone}, {email}
Tone: {tone}

If the question is unrelated to MikrodTech, respond politely but briefly.
Never make up information. Keep replies concise and professional.
"""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _flatten_services(services: Any) -> list[str]:
    """Flatten ``{category: [service, ...]}`` into one list, keeping order."""
    if not isinstance(services, dict):
        return []
    flat: list[str] = []
    for entries in services.values():
        if isinstance(entries, (list, tuple)):
            flat.extend(_text(e) for e in entries)
        elif entries is not None:
            flat.append(_text(entries))
    return flat


@dataclass(frozen=True)
class KnowledgeBase:
    """Read-only view of the company knowledge file."""

    data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.data

    def _section(self, key: str) -> dict[str, Any]:
        value = self.data.get(key)
        return value if isinstance(value, dict) else {}

    def build_system_prompt(self) -> str:
        """Render the assistant system prompt; missing fields render empty."""
        core_values = self.data.get("core_values")
        if not isinstance(core_values, (list, tuple)):
            core_values = []
        contact = self._section("contact_info")
        branding = self._section("branding")

        return SYSTEM_PROMPT_TEMPLATE.format(
            company=_text(self.data.get("company")),
            tagline=_text(self.data.get("tagline")),
            mission=_text(self.data.get("mission")),
            vision=_text(self.data.get("vision")),
            core_values=", ".join(_text(v) for v in core_values),
            services=", ".join(_flatten_services(self.data.get("services"))),
            phone=_text(contact.get("phone")),
            email=_text(contact.get("email")),
            tone=_text(branding.get("tone")),
        )


def load_knowledge_base(path: str) -> KnowledgeBase:
    """Read and parse the knowledge file.

    Raises:
        KnowledgeBaseError: if the file is missing, unreadable, not valid
            JSON, or does not hold a JSON object.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise KnowledgeBaseError(path, e.strerror or str(e)) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise KnowledgeBaseError(path, f"invalid JSON ({e.msg})") from e

    if not isinstance(data, dict):
        raise KnowledgeBaseError(path, "top-level value must be an object")

    return KnowledgeBase(data=data)


def load_knowledge_base_or_empty(path: str) -> KnowledgeBase:
    """Startup variant: log load failures and continue with an empty base."""
    try:
        kb = load_knowledge_base(path)
    except KnowledgeBaseError as e:
        logger.error(f"Could not load knowledge base: {e}")
        return KnowledgeBase()

    logger.info(f"Knowledge base loaded from {path} ({len(kb.data)} keys)")
    return kb
