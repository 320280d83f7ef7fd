"""Single-day planning.

Sequences a day's events, estimates the drive between each consecutive pair
of resolvable locations, picks tonight's sleep location and attaches
rule-based recommendations.

Recommendation order is fixed:
1. Sleep location
2. Public transport per leg (when a public mode beats the car)
3. Rush hour warning
4. Heavy driving warning
5. Partner pickup opportunity
6. Long day note
"""

from datetime import date, timedelta

from loguru import logger

from weekplanner.planning.events import minute_of_day, sort_events, to_local, validate_event
from weekplanner.planning.locations import is_near_home, resolve_location
from weekplanner.planning.preferences import PlannerPreferences, parse_clock
from weekplanner.planning.sleep import optimize_sleep_location
from weekplanner.planning.transport import compare_transport
from weekplanner.planning.travel_time import DEFAULT_MATRIX, TravelMatrix, estimate_travel_minutes, is_rush_hour
from weekplanner.planning.types import (
    DayAnalysis,
    DayPlan,
    Event,
    Place,
    Recommendation,
    SleepDecision,
    TravelLeg,
)

# Legs longer than this are treated as hitting rush-hour traffic. This is a
# duration proxy, not a clock-window check (see TravelLeg.is_rush_hour).
RUSH_CONFLICT_THRESHOLD_MINUTES = 30


def build_travel_legs(
    events: list[Event],
    preferences: PlannerPreferences,
    matrix: TravelMatrix = DEFAULT_MATRIX,
) -> list[TravelLeg]:
    """Build legs between consecutive events; pairs with an unresolved location are skipped.

    Args:
        events: Time-ordered events of one day
        preferences: Buffer, rush windows and transport advice toggles
        matrix: Travel time tables

    Returns:
        TravelLeg list (at most len(events) - 1 entries)
    """
    legs: list[TravelLeg] = []
    for current, upcoming in zip(events, events[1:]):
        from_place = resolve_location(current.location)
        to_place = resolve_location(upcoming.location)
        if Place.UNRESOLVED in (from_place, to_place):
            logger.debug(f"Skipping leg '{current.title}' -> '{upcoming.title}': unresolved location")
            continue

        departure = to_local(current.effective_end, preferences.timezone) + timedelta(
            minutes=preferences.buffer_minutes
        )
        duration = estimate_travel_minutes(from_place, to_place, departure, preferences, matrix)
        rush_conflict = duration > RUSH_CONFLICT_THRESHOLD_MINUTES

        legs.append(
            TravelLeg(
                from_event=current,
                to_event=upcoming,
                from_place=from_place,
                to_place=to_place,
                departure=departure,
                duration_minutes=duration,
                is_rush_hour=is_rush_hour(departure, preferences),
                rush_conflict=rush_conflict,
                suggestion="Consider leaving earlier to avoid rush hour" if rush_conflict else None,
                transport=compare_transport(current.location, upcoming.location, departure, preferences, matrix),
            )
        )
    return legs


def _sleep_recommendation(decision: SleepDecision) -> Recommendation:
    label = "partner's place" if decision.location == Place.PARTNER_HOME else "your place"
    return Recommendation(severity="suggestion", title=f"Sleep at {label}", message=decision.reason)


def _public_transport_recommendations(legs: list[TravelLeg]) -> list[Recommendation]:
    recommendations: list[Recommendation] = []
    for leg in legs:
        comparison = leg.transport
        if comparison is None or comparison.recommended in (None, "car"):
            continue
        best = comparison.ranking[0]
        mode = "Train" if best.mode == "train" else "Bus"
        recommendations.append(
            Recommendation(
                severity="suggestion",
                title=f"Take the {mode}",
                message=(
                    f"{leg.from_event.title} → {leg.to_event.title}: {mode} is faster "
                    f"({best.minutes}min vs {comparison.car.duration_minutes}min by car)"
                ),
            )
        )
    return recommendations


def build_day_recommendations(
    events: list[Event],
    legs: list[TravelLeg],
    analysis: DayAnalysis,
    sleep_decision: SleepDecision,
    total_driving_minutes: int,
    preferences: PlannerPreferences,
) -> list[Recommendation]:
    tz = preferences.timezone
    recommendations = [_sleep_recommendation(sleep_decision)]
    recommendations.extend(_public_transport_recommendations(legs))

    if analysis.has_rush_hour_travel:
        recommendations.append(
            Recommendation(
                severity="warning",
                title="Rush Hour Travel",
                message="Consider leaving 15 minutes earlier or using train during peak hours",
            )
        )

    if analysis.is_long_driving_day:
        recommendations.append(
            Recommendation(
                severity="warning",
                title="Heavy Driving Day",
                message=(
                    f"{total_driving_minutes // 60}h+ of driving. "
                    "Consider staying overnight or grouping trips."
                ),
            )
        )

    pickup_after = parse_clock(preferences.pickup_after)
    afternoon_events = [event for event in events if minute_of_day(to_local(event.start, tz)) >= pickup_after]
    if afternoon_events and is_near_home(afternoon_events[0].location):
        recommendations.append(
            Recommendation(
                severity="info",
                title="Partner Pickup Opportunity",
                message=(
                    f"Partner finishes work at {preferences.partner_work_end}. "
                    f"Could pick them up for {afternoon_events[0].title}?"
                ),
            )
        )

    if events:
        span = to_local(events[-1].effective_end, tz) - to_local(events[0].start, tz)
        if span > timedelta(hours=preferences.long_day_hours):
            recommendations.append(
                Recommendation(
                    severity="info",
                    title="Long Day Ahead",
                    message="Consider scheduling meal breaks and rest time between events",
                )
            )

    return recommendations


def build_day_plan(
    day: date,
    events: list[Event],
    tomorrow_events: list[Event],
    preferences: PlannerPreferences,
    matrix: TravelMatrix = DEFAULT_MATRIX,
) -> DayPlan:
    """Plan one calendar day.

    Args:
        day: Local calendar date to plan
        events: Candidate events; only those starting on `day` (local time) are kept
        tomorrow_events: Next day's events, used only for the sleep decision
        preferences: Planner preferences
        matrix: Travel time tables

    Returns:
        DayPlan for the day

    Raises:
        InvalidInputError: If any of the day's events has malformed timestamps
    """
    tz = preferences.timezone
    day_events = [event for event in events if to_local(event.start, tz).date() == day]
    for event in day_events:
        validate_event(event)
    day_events = sort_events(day_events, tz)

    logger.debug(f"Planning {day.isoformat()}: {len(day_events)} events")

    legs = build_travel_legs(day_events, preferences, matrix)
    total_driving = sum(leg.duration_minutes for leg in legs)

    analysis = DayAnalysis(
        is_busy=len(day_events) > preferences.busy_day_event_count,
        is_long_driving_day=total_driving > preferences.max_daily_driving_minutes,
        has_rush_hour_travel=any(leg.rush_conflict for leg in legs),
        has_long_drives=any(leg.duration_minutes > preferences.long_drive_threshold_minutes for leg in legs),
        total_event_minutes=sum(event.duration_minutes for event in day_events),
    )

    sleep_decision = optimize_sleep_location(day_events, tomorrow_events, preferences, matrix)

    return DayPlan(
        date=day,
        events=day_events,
        travel_legs=legs,
        total_driving_minutes=total_driving,
        sleep_decision=sleep_decision,
        analysis=analysis,
        recommendations=build_day_recommendations(
            day_events, legs, analysis, sleep_decision, total_driving, preferences
        ),
        rush_hour_impact="high" if analysis.has_rush_hour_travel else "low",
    )
