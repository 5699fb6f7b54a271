"""Text-in/text-out reasoning engines used by classification strategies."""
from __future__ import annotations

from typing import Awaitable, Callable, Optional

from openai import AsyncOpenAI

from agent_matcher.config import settings

# (system_prompt, input_text) -> raw answer
ReasoningEngine = Callable[[str, str], Awaitable[str]]


class OpenAIChatEngine:
    """Chat-completions engine returning the model's raw text answer."""

    def __init__(self, *, model: Optional[str] = None, client: Optional[AsyncOpenAI] = None):
        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        self.model = model or settings.classifier_model

    async def __call__(self, system_prompt: str, input_text: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": input_text},
        ]
        comp = await self.client.chat.completions.create(model=self.model, messages=messages)
        choice = comp.choices[0]
        content = choice.message.content or ""
        return content.strip()
