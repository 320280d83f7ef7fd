"""Week plan context for the narration layer.

Flattens a WeekPlan plus preferences into the JSON payload the LLM receives.
Read-only: nothing here feeds back into planning decisions.
"""

from weekplanner.planning.events import to_local
from weekplanner.planning.preferences import PlannerPreferences
from weekplanner.planning.types import DayPlan, DayPlanFailure, WeekPlan
from weekplanner.summarizer.prompts import CONVERSATION_STARTERS

HEAVY_DRIVING_WEEK_MINUTES = 300
MAX_STARTERS = 5

PUBLIC_TRANSPORT_SUMMARY = {
    "train_available": True,
    "main_route": "Kfar Saba ↔ Kfar Chabad (45min)",
    "bus_routes": "Limited between cities, mainly local",
}


def _day_context(day: DayPlan, timezone: str) -> dict:
    return {
        "date": day.date.isoformat(),
        "day_name": day.date.strftime("%a, %b %d"),
        "status": day.status,
        "events": [
            {
                "title": event.title,
                "time": to_local(event.start, timezone).strftime("%H:%M"),
                "location": event.location,
                "duration": event.duration_minutes,
            }
            for event in day.events
        ],
        "travel_times": [
            {
                "from": leg.from_event.title,
                "to": leg.to_event.title,
                "from_location": leg.from_place.value,
                "to_location": leg.to_place.value,
                "duration": leg.duration_minutes,
                "departure": leg.departure.strftime("%H:%M"),
                "is_rush_hour": leg.is_rush_hour,
                "recommended_mode": leg.transport.recommended if leg.transport else None,
            }
            for leg in day.travel_legs
        ],
        "daily_driving_minutes": day.total_driving_minutes,
        "rush_hour_conflicts": [
            {
                "from": leg.from_event.title,
                "to": leg.to_event.title,
                "departure": leg.departure.strftime("%H:%M"),
            }
            for leg in day.travel_legs
            if leg.rush_conflict
        ],
        "current_sleep_suggestion": day.sleep_decision.location.value,
        "sleep_reason": day.sleep_decision.reason,
        "recommendations": [recommendation.title for recommendation in day.recommendations],
    }


def _failed_day_context(day: DayPlanFailure) -> dict:
    return {
        "date": day.date.isoformat(),
        "day_name": day.date.strftime("%a, %b %d"),
        "status": day.status,
        "error": day.error.message,
    }


def build_week_context(plan: WeekPlan, preferences: PlannerPreferences) -> dict:
    """Build the JSON-ready context payload for a week plan.

    Args:
        plan: Computed week plan
        preferences: Preferences the plan was computed with

    Returns:
        Dict with week_overview, user_preferences and public_transport sections
    """
    daily_plans = [
        _day_context(day, preferences.timezone) if isinstance(day, DayPlan) else _failed_day_context(day)
        for day in plan.days
    ]

    return {
        "week_overview": {
            "week_of": plan.week_start.isoformat(),
            "total_driving_minutes": plan.total_driving_minutes,
            "daily_plans": daily_plans,
            "suggestions": [suggestion.message for suggestion in plan.suggestions],
        },
        "user_preferences": {
            "max_daily_driving": preferences.max_daily_driving_minutes,
            "max_weekly_driving": preferences.weekly_driving_cap,
            "rush_hours": preferences.rush_hours.model_dump(),
            "preferred_sleep_location": preferences.preferred_sleep_location,
            "avoid_rush_hour": preferences.avoid_rush_hour,
        },
        "public_transport": dict(PUBLIC_TRANSPORT_SUMMARY),
    }


def conversation_starters(plan: WeekPlan | None) -> list[str]:
    """Suggested chat openers, week-specific ones first."""
    starters = list(CONVERSATION_STARTERS)
    if plan is not None:
        if any(leg.rush_conflict for day in plan.planned_days for leg in day.travel_legs):
            starters.insert(0, "I have rush hour conflicts - what are my best options?")
        if plan.total_driving_minutes > HEAVY_DRIVING_WEEK_MINUTES:
            starters.insert(0, "This looks like a heavy driving week - how can I optimize it?")
    return starters[:MAX_STARTERS]
