"""Pydantic models describing conversation payloads and engine output."""
from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ParticipantRole(str, Enum):
    """Author of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"


class ContentBlock(BaseModel):
    """Single text part of a conversation message."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Text carried by this content part")


class ConversationMessage(BaseModel):
    """One turn of the conversation history, oldest first."""

    model_config = ConfigDict(frozen=True)

    role: ParticipantRole = Field(..., description="Who authored the message")
    content: List[ContentBlock] = Field(default_factory=list, description="Ordered content parts")


class AgentSelection(BaseModel):
    """Structured answer expected from a reasoning engine."""

    userinput: str = Field(default="", description="The original user input, echoed back")
    selected_agent: str = Field(..., description="Identifier of the agent best suited to the request")
    confidence: float = Field(..., description="Confidence in the selection, between 0 and 1")
