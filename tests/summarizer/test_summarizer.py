"""Tests for the LLM week plan summarizer.

The pydantic-ai Agent is replaced by a fake; no network calls are made.
"""

import asyncio
from datetime import date
from types import SimpleNamespace

import pytest

from weekplanner.config.settings import settings
from weekplanner.planning.week_planner import build_week_plan
from weekplanner.summarizer import summarizer as summarizer_module
from weekplanner.summarizer.prompts import FALLBACK_MESSAGE, SYSTEM_PROMPT
from weekplanner.summarizer.summarizer import ChatMessage, LLMWeekPlanSummarizer

WEEK_START = date(2024, 1, 14)


class FakeAgent:
    """Agent stand-in that replays scripted outcomes."""

    def __init__(self, outcomes, **kwargs):
        self.outcomes = list(outcomes)
        self.kwargs = kwargs
        self.prompts: list[str] = []

    async def run(self, prompt: str):
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome == "hang":
            await asyncio.sleep(1)
        return SimpleNamespace(output=outcome)


@pytest.fixture
def configured(monkeypatch):
    """Pretend an API key is set and stub model construction."""
    monkeypatch.setattr(settings, "openai_api_key", "test-key")
    monkeypatch.setattr(summarizer_module, "get_model", lambda provider, name: f"{provider}:{name}")


@pytest.fixture
def fake_agent(monkeypatch):
    """Install a FakeAgent; call with the scripted outcomes."""
    created: list[FakeAgent] = []

    def _install(*outcomes):
        def _factory(**kwargs):
            agent = FakeAgent(outcomes, **kwargs)
            created.append(agent)
            return agent

        monkeypatch.setattr(summarizer_module, "Agent", _factory)
        return created

    return _install


@pytest.fixture
def week(make_event, preferences):
    events = [make_event("Work", "2024-01-15 09:00", "2024-01-15 17:00", "Rishon Lezion")]
    return build_week_plan(WEEK_START, events, preferences)


class TestNotConfigured:
    @pytest.mark.asyncio
    async def test_missing_key_returns_fallback(self, monkeypatch, week, preferences):
        """Test narration fails softly without an API key."""
        monkeypatch.setattr(settings, "openai_api_key", "")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        result = await LLMWeekPlanSummarizer().summarize(week, preferences)

        assert result.success is False
        assert "OPENAI_API_KEY" in result.error
        assert result.fallback == FALLBACK_MESSAGE
        assert result.attempts == 0


class TestSummarize:
    @pytest.mark.asyncio
    async def test_success(self, configured, fake_agent, week, preferences):
        """Test a narrative is returned with the week context in the prompt."""
        created = fake_agent("Sleep at home on Monday.")

        result = await LLMWeekPlanSummarizer(model_name="gpt-test").summarize(
            week,
            preferences,
            user_message="Where should I sleep?",
            conversation_history=[ChatMessage(role="user", content="Hi"), ChatMessage(role="assistant", content="Hello")],
        )

        assert result.success is True
        assert result.message == "Sleep at home on Monday."
        assert result.model == "gpt-test"
        assert result.attempts == 1

        (agent,) = created
        assert agent.kwargs["model"] == "openai:gpt-test"
        assert agent.kwargs["system_prompt"] == SYSTEM_PROMPT
        prompt = agent.prompts[0]
        assert '"week_of": "2024-01-14"' in prompt
        assert "user: Hi\nassistant: Hello" in prompt
        assert prompt.endswith("Where should I sleep?")

    @pytest.mark.asyncio
    async def test_retry_then_success(self, configured, fake_agent, week, preferences):
        """Test a failed attempt is retried."""
        fake_agent(RuntimeError("rate limited"), "Narrative")

        result = await LLMWeekPlanSummarizer(max_retries=1).summarize(week, preferences)

        assert result.success is True
        assert result.attempts == 2

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, configured, fake_agent, week, preferences):
        """Test the summarizer never raises once retries run out."""
        fake_agent(RuntimeError("down"), RuntimeError("still down"), RuntimeError("gone"))

        result = await LLMWeekPlanSummarizer(max_retries=2).summarize(week, preferences)

        assert result.success is False
        assert result.error == "gone"
        assert result.fallback == FALLBACK_MESSAGE
        assert result.attempts == 3

    @pytest.mark.asyncio
    async def test_timeout(self, configured, fake_agent, week, preferences):
        """Test slow calls are cut off by the per-call timeout."""
        fake_agent("hang")

        result = await LLMWeekPlanSummarizer(timeout_seconds=0.01, max_retries=0).summarize(week, preferences)

        assert result.success is False
        assert result.error == "TimeoutError"
        assert result.attempts == 1
