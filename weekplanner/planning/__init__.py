"""Planning module - deterministic week travel and sleep advisor.

This module provides:
- Location normalization to canonical places
- Car travel time estimation with rush-hour handling
- Car/train/bus comparison per leg
- Overnight location decisions
- Day and week plan builders

All functions are pure: configuration is passed in explicitly and nothing
is fetched or cached.
"""

from weekplanner.planning.day_planner import RUSH_CONFLICT_THRESHOLD_MINUTES, build_day_plan
from weekplanner.planning.errors import InvalidInputDetail, InvalidInputError
from weekplanner.planning.events import parse_event, validate_event, week_start_for
from weekplanner.planning.locations import resolve_location
from weekplanner.planning.preferences import PlannerPreferences, load_preferences
from weekplanner.planning.sleep import optimize_sleep_location
from weekplanner.planning.transport import compare_transport
from weekplanner.planning.travel_time import TravelMatrix, estimate_travel_minutes, is_rush_hour
from weekplanner.planning.types import DayPlan, DayPlanFailure, Event, Place, SleepDecision, WeekPlan
from weekplanner.planning.week_planner import build_week_plan

__all__ = [
    "RUSH_CONFLICT_THRESHOLD_MINUTES",
    "DayPlan",
    "DayPlanFailure",
    "Event",
    "InvalidInputDetail",
    "InvalidInputError",
    "Place",
    "PlannerPreferences",
    "SleepDecision",
    "TravelMatrix",
    "WeekPlan",
    "build_day_plan",
    "build_week_plan",
    "compare_transport",
    "estimate_travel_minutes",
    "is_rush_hour",
    "load_preferences",
    "optimize_sleep_location",
    "parse_event",
    "resolve_location",
    "validate_event",
    "week_start_for",
]
