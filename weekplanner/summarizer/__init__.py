"""Narration boundary for week plans (optional LLM collaborator)."""

from weekplanner.summarizer.context import build_week_context, conversation_starters
from weekplanner.summarizer.summarizer import (
    ChatMessage,
    LLMWeekPlanSummarizer,
    SummaryResult,
    WeekPlanSummarizer,
)

__all__ = [
    "ChatMessage",
    "LLMWeekPlanSummarizer",
    "SummaryResult",
    "WeekPlanSummarizer",
    "build_week_context",
    "conversation_starters",
]
