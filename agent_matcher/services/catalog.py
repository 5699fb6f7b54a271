"""Visibility filtering and prompt rendering for the agent roster.

An agent may declare ``blocked`` context flags. While the caller's context
has any of those flags active, the agent is left out of the prompt, so the
engine cannot pick it. The filter runs on every classification, which lets
visibility change turn to turn without re-registering agents.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from agent_matcher.models.agent import RoutableAgent

Context = Union[Mapping[str, Any], Iterable[str]]


def active_flags(value: Optional[Context]) -> frozenset[str]:
    """Normalise a flag container into the set of active flag names.

    Mappings contribute the keys whose values are truthy; any other iterable
    is taken as a collection of flag names.
    """
    if not value:
        return frozenset()
    if isinstance(value, Mapping):
        return frozenset(str(key) for key, flag in value.items() if flag)
    if isinstance(value, str):
        return frozenset({value})
    return frozenset(str(name) for name in value)


def blocked_flags(agent: RoutableAgent) -> frozenset[str]:
    """Flag names an agent declares as blocking.

    Every key of a ``blocked`` mapping counts, whatever its value.
    """
    declared = getattr(agent, "blocked", None)
    if not declared:
        return frozenset()
    if isinstance(declared, Mapping):
        return frozenset(map(str, declared))
    return active_flags(declared)


def is_visible(agent: RoutableAgent, context: Optional[Context] = None) -> bool:
    if context is None:
        return True
    blocked = blocked_flags(agent)
    if not blocked:
        return True
    return blocked.isdisjoint(active_flags(context))


def visible_agents(
    agents: Mapping[str, RoutableAgent], context: Optional[Context] = None
) -> list[RoutableAgent]:
    """Return the agents that survive the context filter, in roster order."""

    return [agent for agent in agents.values() if is_visible(agent, context)]


def describe_agents(
    agents: Optional[Mapping[str, RoutableAgent]], context: Optional[Context] = None
) -> str:
    """Render ``<id>:<description>`` blocks separated by a blank line."""

    if not agents:
        return ""
    return "\n\n".join(
        f"{agent.id}:{agent.description}" for agent in visible_agents(agents, context)
    )
