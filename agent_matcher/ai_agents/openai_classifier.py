"""Agent classification through an openai-agents structured-output run."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from openai.types.shared import Reasoning

from agents import Agent, ModelSettings, Runner

from agent_matcher.ai_agents.classifier import Classifier, ClassifierResult
from agent_matcher.ai_agents.text_classifier import parse_confidence
from agent_matcher.config import settings
from agent_matcher.models.agent import AgentProfile
from agent_matcher.models.schemas import AgentSelection, ConversationMessage
from agent_matcher.services.prompting import RenderedPrompt


logger = logging.getLogger(__name__)


class OpenAIAgentsClassifier(Classifier):
    """Runs the rendered prompt as agent instructions and reads an ``AgentSelection``."""

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        reasoning_effort: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.model = model or settings.classifier_model
        self.reasoning_effort = reasoning_effort or settings.reasoning_effort

    def build_agent(self, system_prompt: str) -> Agent:
        return Agent(
            name="Agent Matcher",
            instructions=system_prompt,
            tools=[],
            model=self.model,
            model_settings=ModelSettings(
                reasoning=Reasoning(effort=self.reasoning_effort),
                verbosity="low",
            ),
            output_type=AgentSelection,
        )

    async def process_request(
        self,
        prompt: RenderedPrompt,
        input_text: str,
        chat_history: Sequence[ConversationMessage],
    ) -> ClassifierResult:
        agent = self.build_agent(prompt.system_prompt)
        try:
            result = await Runner.run(agent, input=input_text)
        except Exception as exc:
            logger.warning("Classifier agent call failed: %s", exc)
            raise

        selection = getattr(result, "final_output", None)
        if not isinstance(selection, AgentSelection):
            logger.debug("Agent returned non-structured classification output: %r", selection)
            if isinstance(selection, str) and selection.strip():
                raw = selection.strip()
                return self.build_result(raw, parse_confidence(raw), prompt, raw_answer=raw)
            return self.build_result(None, 0.0, prompt)

        return self.build_result(
            selection.selected_agent,
            selection.confidence,
            prompt,
            raw_answer=selection.selected_agent,
        )


async def main() -> None:  # pragma: no cover - manual utility
    logging.basicConfig(level=settings.log_level)
    classifier = OpenAIAgentsClassifier(
        agents={
            "billing": AgentProfile("billing", "Invoices, refunds and payment problems."),
            "tech_support": AgentProfile("tech_support", "Outages, bugs and product errors."),
        }
    )
    result = await classifier.classify("I was charged twice, please refund one", [])
    print(result.outcome.value, getattr(result.selected_agent, "id", None), result.confidence)


if __name__ == "__main__":  # pragma: no cover - manual utility
    asyncio.run(main())
