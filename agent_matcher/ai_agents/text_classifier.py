"""Classifier that reads the agent choice from a free-text engine answer."""
from __future__ import annotations

import re
from typing import Sequence

from agent_matcher.ai_agents.classifier import Classifier, ClassifierResult
from agent_matcher.models.schemas import ConversationMessage
from agent_matcher.services.prompting import RenderedPrompt
from agent_matcher.services.reasoning import ReasoningEngine

CONFIDENCE_LEVELS = {"high": 0.9, "medium": 0.6, "low": 0.3}
DEFAULT_CONFIDENCE = CONFIDENCE_LEVELS["medium"]

_NUMBER_PATTERN = re.compile(r"([+-]?)(\d*\.?\d+)(%?)")
_WORD_PATTERN = re.compile(r"[a-zA-Z]+")


def parse_confidence(answer: str) -> float:
    """Read a confidence from the words following the agent id.

    The first number in [0, 1] wins (``NN%`` reads as NN/100, negative
    numbers never count), then a high/medium/low level word.
    Answers carrying neither get ``DEFAULT_CONFIDENCE``.
    """
    trailing = " ".join(answer.split()[1:])

    for sign, digits, percent in _NUMBER_PATTERN.findall(trailing):
        if sign == "-":
            continue
        value = float(digits) / 100 if percent else float(digits)
        if 0.0 <= value <= 1.0:
            return value

    for word in _WORD_PATTERN.findall(trailing.lower()):
        if word in CONFIDENCE_LEVELS:
            return CONFIDENCE_LEVELS[word]

    return DEFAULT_CONFIDENCE


class TextClassifier(Classifier):
    """Sends the rendered prompt and input to an engine returning plain text.

    The engine is expected to answer with an agent id, optionally followed by
    words such as ``"- high confidence"`` or ``"0.85"``.
    """

    def __init__(self, engine: ReasoningEngine, **kwargs) -> None:
        super().__init__(**kwargs)
        self.engine = engine

    async def process_request(
        self,
        prompt: RenderedPrompt,
        input_text: str,
        chat_history: Sequence[ConversationMessage],
    ) -> ClassifierResult:
        answer = (await self.engine(prompt.system_prompt, input_text) or "").strip()
        if not answer:
            return self.build_result(None, 0.0, prompt, raw_answer=answer)
        return self.build_result(answer, parse_confidence(answer), prompt, raw_answer=answer)
