"""Week plan aggregation.

Drives the day planner over the 7-day window [week_start, week_start + 7d)
and derives week-level suggestions. A day with malformed events becomes a
DayPlanFailure; the rest of the week is still planned.
"""

from collections import Counter
from datetime import date, timedelta

from loguru import logger

from weekplanner.planning.day_planner import build_day_plan
from weekplanner.planning.errors import InvalidInputError
from weekplanner.planning.events import bucket_events_by_date, week_dates
from weekplanner.planning.locations import resolve_location
from weekplanner.planning.preferences import PlannerPreferences
from weekplanner.planning.travel_time import DEFAULT_MATRIX, TravelMatrix
from weekplanner.planning.types import DayPlan, DayPlanFailure, Event, Place, Suggestion, WeekPlan

LOCATION_CLUSTER_MIN_EVENTS = 3
BUSY_DAY_MIN_EVENTS = 3
REST_DAY_BUSY_DAYS_LIMIT = 5


def build_week_suggestions(
    days: list[DayPlan | DayPlanFailure],
    total_driving_minutes: int,
    preferences: PlannerPreferences,
) -> list[Suggestion]:
    """Derive week-level suggestions.

    Rules:
    - Weekly driving over the weekly cap -> warning
    - A resolved location used by more than 2 events -> consolidation suggestion
    - More than 5 days with more than 2 events -> rest day info

    Args:
        days: Day plans (failed days are ignored)
        total_driving_minutes: Week driving total
        preferences: Driving caps

    Returns:
        Suggestions in rule order
    """
    planned = [day for day in days if isinstance(day, DayPlan)]
    suggestions: list[Suggestion] = []

    if total_driving_minutes > preferences.weekly_driving_cap:
        total_hours = round(total_driving_minutes / 60, 1)
        suggestions.append(
            Suggestion(
                severity="warning",
                message=(
                    f"High weekly driving time ({total_hours}h). "
                    "Consider consolidating trips or working remotely some days."
                ),
            )
        )

    location_counts: Counter[Place] = Counter()
    for day in planned:
        for event in day.events:
            place = resolve_location(event.location)
            if place != Place.UNRESOLVED:
                location_counts[place] += 1

    for place, count in location_counts.items():
        if count >= LOCATION_CLUSTER_MIN_EVENTS:
            suggestions.append(
                Suggestion(
                    severity="suggestion",
                    message=f"You have {count} events at {place.value} this week. Consider grouping them on fewer days.",
                )
            )

    busy_days = sum(1 for day in planned if len(day.events) >= BUSY_DAY_MIN_EVENTS)
    if busy_days > REST_DAY_BUSY_DAYS_LIMIT:
        suggestions.append(
            Suggestion(
                severity="info",
                message="Consider keeping at least one day lighter for rest and unexpected tasks.",
            )
        )

    return suggestions


def build_week_plan(
    week_start: date,
    events: list[Event],
    preferences: PlannerPreferences,
    matrix: TravelMatrix = DEFAULT_MATRIX,
) -> WeekPlan:
    """Build the plan for one week.

    The last day gets no lookahead: events after the window never influence
    the plan.

    Args:
        week_start: First day of the window (normally the Sunday from week_start_for)
        events: Event snapshot; events outside the window are ignored
        preferences: Planner preferences
        matrix: Travel time tables

    Returns:
        WeekPlan with exactly 7 days
    """
    dates = week_dates(week_start)
    buckets = bucket_events_by_date(events, preferences.timezone)

    outside = sum(len(day_events) for day, day_events in buckets.items() if day not in dates)
    if outside:
        logger.debug(f"Ignoring {outside} events outside week of {week_start.isoformat()}")

    days: list[DayPlan | DayPlanFailure] = []
    for index, day in enumerate(dates):
        today_events = buckets.get(day, [])
        tomorrow_events = buckets.get(day + timedelta(days=1), []) if index < len(dates) - 1 else []
        try:
            days.append(build_day_plan(day, today_events, tomorrow_events, preferences, matrix))
        except InvalidInputError as e:
            logger.warning(
                f"Day {day.isoformat()} could not be planned: code={e.code} "
                f"event_id={e.detail.event_id} field={e.detail.field}"
            )
            days.append(DayPlanFailure(date=day, error=e.detail))

    total_driving = sum(day.total_driving_minutes for day in days if isinstance(day, DayPlan))

    logger.info(
        f"Week plan built: week_start={week_start.isoformat()} events={len(events)} "
        f"total_driving_minutes={total_driving}"
    )

    return WeekPlan(
        week_start=week_start,
        days=days,
        total_driving_minutes=total_driving,
        suggestions=build_week_suggestions(days, total_driving, preferences),
    )
