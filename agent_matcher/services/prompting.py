"""System prompt assembly for agent classification."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional

from agent_matcher.config import settings
from agent_matcher.models.agent import RoutableAgent
from agent_matcher.services.catalog import Context, describe_agents
from agent_matcher.services.templating import TemplateVariables, replace_placeholders

logger = logging.getLogger(__name__)

AGENT_DESCRIPTIONS_KEY = "AGENT_DESCRIPTIONS"
HISTORY_KEY = "HISTORY"

DEFAULT_PROMPT_TEMPLATE = """
You are AgentMatcher, an intelligent assistant designed to analyze user queries and match them with the most suitable agent or department. Your task is to understand the user's request, identify key entities and intents, and determine which agent or department would be best equipped to handle the query.

Analyze the user's input and history and categorize it into one of the following agent types:
<agents>
{{AGENT_DESCRIPTIONS}}
</agents>

Guidelines for classification:

    Agent Type: Select the most appropriate agent type from the following agent list, depending on the nature of the request. The following agent list of agents may change, keep an eye on it. If the previous agent has disappeared from the following agent list, then you need to classify the agent that is on the following agent list.
    Priority: Assign based on urgency and impact.
        High: Issues affecting service, billing problems, or urgent technical issues
        Medium: Non-urgent product inquiries, sales questions
        Low: General information requests, feedback
    Key Entities: Extract important nouns, product names, or specific issues mentioned. For follow-up responses, include relevant entities from the previous interaction if applicable.
    For follow-ups, relate the intent to the ongoing conversation.
    Confidence: Indicate how confident you are in the classification.
        High: Clear, straightforward requests or clear follow-ups
        Medium: Requests with some ambiguity but likely classification
        Low: Vague or multi-faceted requests that could fit multiple categories
    Is Followup: Indicate whether the input is a follow-up to a previous interaction.

Handle variations in user input, including different phrasings, synonyms, and potential spelling errors. For short responses like "yes", "ok", "I want to know more", or numerical answers, treat them as follow-ups and maintain the previous agent selection.

Here is the conversation history that you need to take into account before answering:
<history>
{{HISTORY}}
</history>

Skip any preamble and provide only the response in the specified format.
"""


@dataclass(frozen=True, slots=True)
class PromptConfig:
    """Template plus caller variables; replaced wholesale, never mutated."""

    template: str = DEFAULT_PROMPT_TEMPLATE
    variables: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    def override(
        self,
        template: Optional[str] = None,
        variables: Optional[TemplateVariables] = None,
    ) -> "PromptConfig":
        """Return a copy with the given pieces swapped in.

        A blank template keeps the current one. ``variables=None`` keeps the
        current variables; any mapping, even an empty one, replaces them.
        """
        changes: dict[str, object] = {}
        if template:
            changes["template"] = template
        if variables is not None:
            changes["variables"] = MappingProxyType(dict(variables))
        return replace(self, **changes) if changes else self


@dataclass(frozen=True, slots=True)
class RenderedPrompt:
    """A system prompt together with the sections that went into it."""

    system_prompt: str
    agent_descriptions: str = ""
    history: str = ""


def build_system_prompt(
    config: PromptConfig,
    agents: Optional[Mapping[str, RoutableAgent]],
    history: str,
    context: Optional[Context] = None,
) -> RenderedPrompt:
    """Render ``config`` against the visible agents and the transcript.

    The reserved ``AGENT_DESCRIPTIONS`` and ``HISTORY`` values always win over
    caller variables of the same name.
    """
    agent_descriptions = describe_agents(agents, context)
    all_variables = {
        **config.variables,
        AGENT_DESCRIPTIONS_KEY: agent_descriptions,
        HISTORY_KEY: history,
    }
    system_prompt = replace_placeholders(config.template, all_variables)

    if settings.log_prompts:
        logger.debug("Rendered classifier system prompt:\n%s", system_prompt)

    return RenderedPrompt(
        system_prompt=system_prompt,
        agent_descriptions=agent_descriptions,
        history=history,
    )
