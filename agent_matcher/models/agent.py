"""Agent shapes the classifier reads from the registry."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Protocol, Union


BlockedFlags = Union[Mapping[str, Any], Iterable[str]]


class RoutableAgent(Protocol):
    """Anything the registry hands to a classifier.

    ``blocked`` names context flags that hide the agent while any of them is
    active. Agents without the attribute are always visible.
    """

    id: str
    description: str


@dataclass(slots=True, frozen=True)
class AgentProfile:
    """Plain agent description for registries without their own agent type."""

    id: str
    description: str
    blocked: Optional[BlockedFlags] = field(default=None)
