"""Prompts for week plan narration."""

import json

SYSTEM_PROMPT = """You are an intelligent week planner assistant for a couple living in Israel. You have deep knowledge of:

1. **Locations**: Kfar Saba, Beit Dagan, Rishon Lezion, Nir Tzvi (tennis club)
2. **Transportation**: Israeli roads, traffic patterns, rush hours (7:30-10:00, 15:00-19:00)
3. **Public Transport**: Israel Railways connections, bus routes
4. **Relationship dynamics**: Optimizing time together while respecting work schedules

Your role is to analyze weekly schedules and provide personalized recommendations for:
- Optimal sleep locations (home vs partner's place)
- Travel time optimization
- Public transport vs car decisions
- Rush hour avoidance
- Energy and stress management
- Relationship time prioritization

The week plan you receive was computed by a deterministic planner. Do not change
its numbers; explain them and add practical advice.

Always be practical, considerate of both partners' needs, and factor in real Israeli traffic conditions."""

DEFAULT_REQUEST = (
    "Please analyze this week and provide your best recommendations for optimizing "
    "my schedule, travel, and sleep locations."
)

FALLBACK_MESSAGE = "AI service is currently unavailable. Using basic planning algorithm instead."

CONVERSATION_STARTERS: tuple[str, ...] = (
    "How can I optimize my week for minimal driving?",
    "Where should I sleep each night for the best schedule?",
    "When should I use public transport vs driving?",
    "How can we maximize time together this week?",
    "What are the potential stress points in my schedule?",
)


def build_summary_prompt(
    context: dict,
    user_message: str | None = None,
    conversation_history: list[tuple[str, str]] | None = None,
) -> str:
    """Build the user prompt carrying the week context.

    Args:
        context: JSON-ready week context (see build_week_context)
        user_message: Optional question; defaults to a full-week analysis request
        conversation_history: Optional prior (role, content) turns, oldest first

    Returns:
        Prompt string
    """
    history_text = ""
    if conversation_history:
        turns = "\n".join(f"{role}: {content}" for role, content in conversation_history)
        history_text = f"Conversation so far:\n{turns}\n\n"

    return (
        f"Here's my week schedule and preferences:\n\n{json.dumps(context, indent=2, ensure_ascii=False)}\n\n"
        f"{history_text}{user_message or DEFAULT_REQUEST}"
    )
