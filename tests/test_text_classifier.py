from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from agent_matcher.ai_agents.classifier import ClassificationOutcome
from agent_matcher.ai_agents.text_classifier import DEFAULT_CONFIDENCE, TextClassifier, parse_confidence
from agent_matcher.models.agent import AgentProfile
from agent_matcher.services.reasoning import OpenAIChatEngine


def _run(coro):  # noqa: ANN001
    return asyncio.run(coro)


class StubEngine:
    def __init__(self, answer: str | None):
        self.answer = answer
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, system_prompt: str, input_text: str) -> str | None:
        self.calls.append((system_prompt, input_text))
        return self.answer


AGENTS = {
    "a": AgentProfile("a", "Refunds and invoices"),
    "b": AgentProfile("b", "Outages and bugs"),
}


def test_engine_receives_exact_rendered_prompt():
    engine = StubEngine("a - high confidence")
    classifier = TextClassifier(engine, agents=AGENTS)

    result = _run(classifier.classify("refund please", []))

    system_prompt, input_text = engine.calls[0]
    assert input_text == "refund please"
    assert system_prompt == classifier.system_prompt == result.system_prompt
    assert "a:Refunds and invoices" in system_prompt
    assert "b:Outages and bugs" in system_prompt
    assert "<history>\n\n</history>" in system_prompt
    assert result.selected_agent is AGENTS["a"]
    assert result.confidence == 0.9


@pytest.mark.parametrize("answer", ["", "   ", None])
def test_blank_answer_is_unresolved(answer):
    result = _run(TextClassifier(StubEngine(answer), agents=AGENTS).classify("hi", []))

    assert result.selected_agent is None
    assert result.confidence == 0.0
    assert result.outcome is ClassificationOutcome.UNRESOLVED


def test_unknown_agent_is_unresolved():
    result = _run(TextClassifier(StubEngine("sales 0.95"), agents=AGENTS).classify("hi", []))

    assert result.selected_agent is None
    assert result.outcome is ClassificationOutcome.UNRESOLVED
    assert result.raw_answer == "sales 0.95"


def test_min_confidence_applies_to_parsed_levels():
    classifier = TextClassifier(StubEngine("B low"), agents=AGENTS, min_confidence=0.5)

    result = _run(classifier.classify("maybe broken?", []))

    assert result.selected_agent is None
    assert result.outcome is ClassificationOutcome.LOW_CONFIDENCE
    assert result.confidence == 0.3


def test_parse_confidence_variants():
    assert parse_confidence("billing 0.85") == 0.85
    assert parse_confidence("billing - confidence: 1") == 1.0
    assert parse_confidence("billing (Medium)") == 0.6
    assert parse_confidence("billing 85 high") == 0.9
    assert parse_confidence("billing") == DEFAULT_CONFIDENCE
    assert parse_confidence("0.2") == DEFAULT_CONFIDENCE


def test_openai_chat_engine_sends_system_and_user_messages():
    captured = {}

    async def fake_create(**kwargs):  # noqa: ANN003
        captured.update(kwargs)
        message = SimpleNamespace(content="  b 0.7\n")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=fake_create)))
    engine = OpenAIChatEngine(model="gpt-test", client=client)

    result = _run(TextClassifier(engine, agents=AGENTS).classify("site is down", []))

    assert captured["model"] == "gpt-test"
    assert captured["messages"][0]["role"] == "system"
    assert "b:Outages and bugs" in captured["messages"][0]["content"]
    assert captured["messages"][1] == {"role": "user", "content": "site is down"}
    assert result.selected_agent is AGENTS["b"]
    assert result.confidence == 0.7


def test_openai_chat_engine_returns_empty_string_without_content():
    async def fake_create(**kwargs):  # noqa: ANN003
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=None))])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=fake_create)))

    assert _run(OpenAIChatEngine(model="m", client=client)("prompt", "input")) == ""


def test_parse_confidence_reads_percentages():
    assert parse_confidence("billing 90%") == 0.9
    assert parse_confidence("billing (75% sure)") == 0.75
    assert parse_confidence("billing 250% low") == 0.3


def test_parse_confidence_ignores_negative_numbers():
    assert parse_confidence("billing -0.5") == DEFAULT_CONFIDENCE
    assert parse_confidence("billing -0.5 high") == 0.9
    assert parse_confidence("billing - 0.8") == 0.8
