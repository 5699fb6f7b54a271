"""Render conversation history into the transcript embedded in prompts."""
from __future__ import annotations

from typing import Iterable

from agent_matcher.models.schemas import ConversationMessage, ParticipantRole


def _role_label(role: ParticipantRole | str) -> str:
    return role.value if isinstance(role, ParticipantRole) else str(role)


def format_messages(messages: Iterable[ConversationMessage]) -> str:
    """Return one ``<role>: <text>`` line per message, oldest first."""

    lines = []
    for message in messages:
        texts = " ".join(block.text for block in message.content)
        lines.append(f"{_role_label(message.role)}: {texts}")
    return "\n".join(lines)
