"""Overnight location decision.

Rules are evaluated in order and the first match wins (ORDER MATTERS):
1. No events tomorrow -> default base
2. Tomorrow starts near home -> home
3. Early start tomorrow that is meaningfully closer from the partner's place -> partner
4. Today ends late near the partner's place -> partner
5. Light schedule tomorrow (at most one late-morning event) -> partner
6. Least total driving (tonight's drive + tomorrow's first drive), default base on a near-tie

Only today's and tomorrow's events are considered.
"""

from datetime import datetime

from loguru import logger

from weekplanner.planning.events import minute_of_day, sort_events, to_local
from weekplanner.planning.locations import is_near_home, is_near_partner, resolve_location
from weekplanner.planning.preferences import PlannerPreferences, parse_clock
from weekplanner.planning.travel_time import DEFAULT_MATRIX, TravelMatrix, estimate_travel_minutes
from weekplanner.planning.types import Event, Place, SleepDecision


def _place_label(place: Place) -> str:
    return "partner's place" if place == Place.PARTNER_HOME else "your place"


def _drive_to(
    origin: Place,
    location: str | None,
    departure: datetime,
    preferences: PlannerPreferences,
    matrix: TravelMatrix,
) -> int:
    # Events without a location add no driving
    if location is None:
        return 0
    return estimate_travel_minutes(origin, resolve_location(location), departure, preferences, matrix)


def _drive_from(
    location: str | None,
    destination: Place,
    departure: datetime,
    preferences: PlannerPreferences,
    matrix: TravelMatrix,
) -> int:
    if location is None:
        return 0
    return estimate_travel_minutes(resolve_location(location), destination, departure, preferences, matrix)


def optimize_sleep_location(
    today_events: list[Event],
    tomorrow_events: list[Event],
    preferences: PlannerPreferences,
    matrix: TravelMatrix = DEFAULT_MATRIX,
) -> SleepDecision:
    """Choose where to sleep tonight.

    Args:
        today_events: Today's events
        tomorrow_events: Tomorrow's events
        preferences: Thresholds, margins and the preferred default base
        matrix: Travel time tables

    Returns:
        SleepDecision with the chosen place, a justification and the rule that fired
    """
    tz = preferences.timezone
    default_base = Place.PARTNER_HOME if preferences.preferred_sleep_location == "partner" else Place.HOME

    if not tomorrow_events:
        return SleepDecision(
            location=default_base,
            reason=f"No events tomorrow, stay at {_place_label(default_base)}",
            rule="no_events_tomorrow",
        )

    today = sort_events(today_events, tz)
    tomorrow = sort_events(tomorrow_events, tz)
    first_tomorrow = tomorrow[0]
    first_start = to_local(first_tomorrow.start, tz)

    from_home = _drive_to(Place.HOME, first_tomorrow.location, first_start, preferences, matrix)
    from_partner = _drive_to(Place.PARTNER_HOME, first_tomorrow.location, first_start, preferences, matrix)

    if is_near_home(first_tomorrow.location):
        return SleepDecision(
            location=Place.HOME,
            reason=f"First event tomorrow is near your home ({from_home}min drive)",
            rule="near_home_tomorrow",
        )

    saving = from_home - from_partner
    if minute_of_day(first_start) <= parse_clock(preferences.early_start) and saving >= preferences.early_start_margin_minutes:
        return SleepDecision(
            location=Place.PARTNER_HOME,
            reason=f"Early start tomorrow - saves {saving}min from partner's place",
            rule="early_start_closer_to_partner",
        )

    last_today = today[-1] if today else None
    if last_today is not None:
        last_end = to_local(last_today.effective_end, tz)
        ends_after_midnight = last_end.date() > to_local(last_today.start, tz).date()
        ends_late = ends_after_midnight or minute_of_day(last_end) >= parse_clock(preferences.late_finish)
        if is_near_partner(last_today.location) and ends_late:
            return SleepDecision(
                location=Place.PARTNER_HOME,
                reason="Last event was in Kfar Saba area, convenient to stay",
                rule="late_finish_near_partner",
            )

    if len(tomorrow) <= 1 and minute_of_day(first_start) >= parse_clock(preferences.light_schedule_start):
        return SleepDecision(
            location=Place.PARTNER_HOME,
            reason="Light schedule tomorrow, good time to be together",
            rule="light_schedule",
        )

    home_total = from_home
    partner_total = from_partner
    if last_today is not None:
        last_end = to_local(last_today.effective_end, tz)
        home_total += _drive_from(last_today.location, Place.HOME, last_end, preferences, matrix)
        partner_total += _drive_from(last_today.location, Place.PARTNER_HOME, last_end, preferences, matrix)

    margin = preferences.sleep_margin_minutes
    logger.debug(f"Sleep fallback totals: home={home_total}min partner={partner_total}min margin={margin}min")

    if partner_total < home_total - margin:
        return SleepDecision(
            location=Place.PARTNER_HOME,
            reason=f"Minimizes total driving ({partner_total}min vs {home_total}min)",
            rule="least_total_driving",
        )
    if home_total < partner_total - margin:
        return SleepDecision(
            location=Place.HOME,
            reason=f"Minimizes total driving ({home_total}min vs {partner_total}min)",
            rule="least_total_driving",
        )
    default_total = partner_total if default_base == Place.PARTNER_HOME else home_total
    return SleepDecision(
        location=default_base,
        reason=f"Most convenient overall ({default_total}min total travel)",
        rule="least_total_driving",
    )
