"""Abstract agent classifier.

A classifier turns user input plus conversation history into the choice of
one registered agent. The base class owns prompt assembly: on every call it
re-renders the transcript, filters the roster against the caller's context
and fills the prompt template. Concrete strategies only implement
``process_request``, which hands the rendered prompt to a reasoning engine
and maps its answer back onto an agent.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence

from agent_matcher.config import settings
from agent_matcher.models.agent import RoutableAgent
from agent_matcher.models.schemas import ConversationMessage
from agent_matcher.services.catalog import Context, describe_agents
from agent_matcher.services.history import format_messages
from agent_matcher.services.prompting import (
    PromptConfig,
    RenderedPrompt,
    build_system_prompt,
)
from agent_matcher.services.templating import TemplateVariables

logger = logging.getLogger(__name__)


class ClassificationOutcome(str, Enum):
    """Why a result does or does not carry an agent."""

    SELECTED = "selected"
    # The engine answer was empty or named no registered agent
    UNRESOLVED = "unresolved"
    # An agent was named but its confidence is under the configured floor
    LOW_CONFIDENCE = "low_confidence"


@dataclass
class ClassifierResult:
    selected_agent: Optional[RoutableAgent]
    confidence: float
    outcome: Optional[ClassificationOutcome] = None
    system_prompt: str = ""
    raw_answer: Optional[str] = None

    def __post_init__(self) -> None:
        if self.outcome is None:
            self.outcome = (
                ClassificationOutcome.UNRESOLVED
                if self.selected_agent is None
                else ClassificationOutcome.SELECTED
            )


def resolve_agent(
    agents: Optional[Mapping[str, RoutableAgent]], raw: Optional[str]
) -> Optional[RoutableAgent]:
    """Map a raw engine answer such as ``"billing - high"`` onto an agent.

    Only the first whitespace-delimited token counts and the lookup ignores
    case. Returns ``None`` for blank answers and unknown identifiers.
    """
    if not raw or not agents:
        return None
    tokens = raw.split()
    if not tokens:
        return None

    agent_id = tokens[0].lower()
    matched = agents.get(agent_id)
    if matched is not None:
        return matched
    for key, agent in agents.items():
        if key.lower() == agent_id:
            return agent
    return None


class Classifier(ABC):
    """Base class for all classification strategies.

    Instances are single-owner: use one per concurrent request, or serialise
    ``set_agents``/``set_system_prompt`` against ``classify`` externally.
    """

    def __init__(
        self,
        agents: Optional[Mapping[str, RoutableAgent]] = None,
        *,
        prompt_template: Optional[str] = None,
        variables: Optional[TemplateVariables] = None,
        min_confidence: Optional[float] = None,
    ) -> None:
        self.agents: dict[str, RoutableAgent] = {}
        self.agent_descriptions = ""
        self.history = ""
        self.system_prompt = ""
        self.min_confidence = settings.min_confidence if min_confidence is None else min_confidence
        self._prompt_config = PromptConfig().override(prompt_template, variables)
        if agents is not None:
            self.set_agents(agents)

    @property
    def prompt_template(self) -> str:
        return self._prompt_config.template

    @property
    def custom_variables(self) -> Mapping[str, object]:
        return self._prompt_config.variables

    def set_agents(self, agents: Mapping[str, RoutableAgent]) -> None:
        """Replace the roster. Agents are referenced, never copied or mutated."""
        self.agents = dict(agents)
        self.agent_descriptions = describe_agents(self.agents)

    def set_history(self, messages: Sequence[ConversationMessage]) -> None:
        self.history = format_messages(messages)

    def set_system_prompt(
        self,
        template: Optional[str] = None,
        variables: Optional[TemplateVariables] = None,
    ) -> RenderedPrompt:
        """Swap the template and/or caller variables and re-render the prompt."""
        self._prompt_config = self._prompt_config.override(template, variables)
        return self._update_system_prompt()

    def _update_system_prompt(self, context: Optional[Context] = None) -> RenderedPrompt:
        rendered = build_system_prompt(self._prompt_config, self.agents, self.history, context)
        self.agent_descriptions = rendered.agent_descriptions
        self.system_prompt = rendered.system_prompt
        return rendered

    async def classify(
        self,
        input_text: str,
        chat_history: Sequence[ConversationMessage],
        context: Optional[Context] = None,
    ) -> ClassifierResult:
        """Classify ``input_text`` against the agents visible under ``context``.

        Args:
            input_text: The user request to route.
            chat_history: Prior conversation messages, oldest first.
            context: Active context flags, either a mapping checked for
                truthy values or an iterable of flag names. Agents blocked
                by any active flag are hidden from the engine.

        Returns:
            The strategy's ``ClassifierResult``, carrying the exact system
            prompt that was used.
        """
        self.set_history(chat_history)
        prompt = self._update_system_prompt(context)
        result = await self.process_request(prompt, input_text, chat_history)
        if not result.system_prompt:
            result.system_prompt = prompt.system_prompt
        return result

    @abstractmethod
    async def process_request(
        self,
        prompt: RenderedPrompt,
        input_text: str,
        chat_history: Sequence[ConversationMessage],
    ) -> ClassifierResult:
        """Run the strategy against a freshly rendered prompt.

        Engine errors must propagate; a result is either complete or the
        whole call fails.
        """
        ...

    def get_agent_by_id(self, agent_id: Optional[str]) -> Optional[RoutableAgent]:
        return resolve_agent(self.agents, agent_id)

    def build_result(
        self,
        agent_id: Optional[str],
        confidence: float,
        prompt: Optional[RenderedPrompt] = None,
        raw_answer: Optional[str] = None,
    ) -> ClassifierResult:
        """Resolve ``agent_id`` and apply the confidence floor."""
        system_prompt = prompt.system_prompt if prompt is not None else ""
        agent = self.get_agent_by_id(agent_id)
        if agent is None:
            logger.debug("Engine answer %r matched no registered agent", agent_id)
            return ClassifierResult(
                selected_agent=None,
                confidence=confidence,
                outcome=ClassificationOutcome.UNRESOLVED,
                system_prompt=system_prompt,
                raw_answer=raw_answer,
            )
        if confidence < self.min_confidence:
            logger.debug(
                "Dropping agent '%s': confidence %.2f below floor %.2f",
                agent.id,
                confidence,
                self.min_confidence,
            )
            return ClassifierResult(
                selected_agent=None,
                confidence=confidence,
                outcome=ClassificationOutcome.LOW_CONFIDENCE,
                system_prompt=system_prompt,
                raw_answer=raw_answer,
            )
        return ClassifierResult(
            selected_agent=agent,
            confidence=confidence,
            outcome=ClassificationOutcome.SELECTED,
            system_prompt=system_prompt,
            raw_answer=raw_answer,
        )
