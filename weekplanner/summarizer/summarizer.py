"""Week plan narration via an LLM.

The planner never depends on this module: a WeekPlan is complete without a
narrative. Summarizers return a SummaryResult instead of raising, so callers
can always fall back to the plain plan.
"""

import asyncio
from typing import Literal, Protocol

from loguru import logger
from pydantic import BaseModel
from pydantic_ai import Agent

from weekplanner.config.settings import settings
from weekplanner.planning.preferences import PlannerPreferences
from weekplanner.planning.types import WeekPlan
from weekplanner.summarizer.context import build_week_context
from weekplanner.summarizer.model import get_model, is_configured
from weekplanner.summarizer.prompts import FALLBACK_MESSAGE, SYSTEM_PROMPT, build_summary_prompt


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class SummaryResult(BaseModel):
    """Outcome of a narration request.

    Attributes:
        success: Whether a narrative was produced
        message: Narrative text (success only)
        error: Error description (failure only)
        fallback: User-facing fallback note (failure only)
        model: Model name used
        attempts: Number of LLM calls made
    """

    success: bool
    message: str | None = None
    error: str | None = None
    fallback: str | None = None
    model: str | None = None
    attempts: int = 0


class WeekPlanSummarizer(Protocol):
    async def summarize(
        self,
        plan: WeekPlan,
        preferences: PlannerPreferences,
        user_message: str | None = None,
        conversation_history: list[ChatMessage] | None = None,
    ) -> SummaryResult: ...


class LLMWeekPlanSummarizer:
    """pydantic-ai backed summarizer with per-call timeout and bounded retries."""

    def __init__(
        self,
        model_name: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout_seconds: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        self.model_name = model_name or settings.summarizer_model
        self.temperature = settings.summarizer_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.summarizer_max_tokens
        self.timeout_seconds = timeout_seconds or settings.summarizer_timeout_seconds
        self.max_retries = settings.summarizer_max_retries if max_retries is None else max_retries

    def _get_agent(self) -> Agent:
        return Agent(
            model=get_model("openai", self.model_name),
            system_prompt=SYSTEM_PROMPT,
            output_type=str,
            model_settings={"temperature": self.temperature, "max_tokens": self.max_tokens},
        )

    async def _run(self, prompt: str) -> SummaryResult:
        if not is_configured():
            return SummaryResult(
                success=False,
                error="AI service not configured. Set OPENAI_API_KEY to enable week plan narration.",
                fallback=FALLBACK_MESSAGE,
                model=self.model_name,
            )

        agent = self._get_agent()
        last_error: Exception | None = None
        attempts = 0
        for attempt in range(1, self.max_retries + 2):
            attempts = attempt
            try:
                logger.debug(f"Calling LLM for week narration (attempt {attempt}/{self.max_retries + 1})")
                result = await asyncio.wait_for(agent.run(prompt), timeout=self.timeout_seconds)
            except Exception as e:
                last_error = e
                logger.warning(f"Week narration attempt {attempt} failed: {type(e).__name__}: {e}")
                continue

            logger.info(f"Week narration generated: model={self.model_name} length={len(result.output)}")
            return SummaryResult(success=True, message=result.output, model=self.model_name, attempts=attempt)

        logger.error(f"Week narration failed after {attempts} attempts: {last_error}")
        return SummaryResult(
            success=False,
            error=str(last_error) or type(last_error).__name__,
            fallback=FALLBACK_MESSAGE,
            model=self.model_name,
            attempts=attempts,
        )

    async def summarize(
        self,
        plan: WeekPlan,
        preferences: PlannerPreferences,
        user_message: str | None = None,
        conversation_history: list[ChatMessage] | None = None,
    ) -> SummaryResult:
        """Narrate a computed week plan.

        Args:
            plan: Week plan (source of truth, never modified)
            preferences: Preferences the plan was computed with
            user_message: Optional question; defaults to a full-week analysis
            conversation_history: Optional prior chat turns

        Returns:
            SummaryResult; failures carry an error and a fallback note
        """
        context = build_week_context(plan, preferences)
        history = [(message.role, message.content) for message in conversation_history or []]
        prompt = build_summary_prompt(context, user_message, history)
        return await self._run(prompt)
