"""Car travel time estimation between canonical places.

Lookup order for a rush-hour departure:
1. Explicit rush table entry for the pair
2. Normal table entry x rush multiplier
3. DEFAULT_TRAVEL_MINUTES

Outside rush hour only the normal table is used. The estimate depends on
the departure's clock time only, never its date.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime

from weekplanner.planning.events import minute_of_day
from weekplanner.planning.preferences import PlannerPreferences
from weekplanner.planning.types import Place

DEFAULT_TRAVEL_MINUTES = 30

PlacePair = tuple[Place, Place]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (22.5 -> 23)."""
    return int(math.floor(value + 0.5))


def _mirrored(table: dict[PlacePair, int]) -> dict[PlacePair, int]:
    mirrored = dict(table)
    for (origin, destination), minutes in table.items():
        mirrored.setdefault((destination, origin), minutes)
    return mirrored


NORMAL_TRAVEL_MINUTES: dict[PlacePair, int] = _mirrored(
    {
        (Place.PARTNER_HOME, Place.HOME): 30,
        (Place.PARTNER_HOME, Place.WORK): 35,
        (Place.PARTNER_HOME, Place.TENNIS): 35,
        (Place.HOME, Place.WORK): 5,
        (Place.HOME, Place.TENNIS): 15,
        (Place.WORK, Place.TENNIS): 15,
    }
)

RUSH_TRAVEL_MINUTES: dict[PlacePair, int] = _mirrored(
    {
        (Place.PARTNER_HOME, Place.HOME): 45,
        (Place.PARTNER_HOME, Place.WORK): 50,
        (Place.PARTNER_HOME, Place.TENNIS): 45,
        (Place.HOME, Place.WORK): 5,
        (Place.HOME, Place.TENNIS): 15,
        (Place.WORK, Place.TENNIS): 15,
    }
)


@dataclass(frozen=True)
class TravelMatrix:
    """Directed travel time tables in minutes."""

    normal: dict[PlacePair, int] = field(default_factory=lambda: dict(NORMAL_TRAVEL_MINUTES))
    rush: dict[PlacePair, int] = field(default_factory=lambda: dict(RUSH_TRAVEL_MINUTES))
    default_minutes: int = DEFAULT_TRAVEL_MINUTES


DEFAULT_MATRIX = TravelMatrix()


def is_rush_hour(departure: datetime, preferences: PlannerPreferences) -> bool:
    """Check whether the departure's clock time falls in a rush window (bounds inclusive)."""
    return preferences.rush_hours.contains(minute_of_day(departure))


def estimate_travel_minutes(
    origin: Place,
    destination: Place,
    departure: datetime,
    preferences: PlannerPreferences,
    matrix: TravelMatrix = DEFAULT_MATRIX,
) -> int:
    """Estimate car travel time between two canonical places.

    Args:
        origin: Start place
        destination: End place
        departure: Departure instant, already in local time
        preferences: Rush windows and rush multiplier
        matrix: Travel time tables

    Returns:
        Travel time in whole minutes (0 for the same place, matrix default for
        unresolved endpoints and unknown pairs)
    """
    if Place.UNRESOLVED in (origin, destination):
        return matrix.default_minutes
    if origin == destination:
        return 0

    pair = (origin, destination)
    normal = matrix.normal.get(pair)

    if is_rush_hour(departure, preferences):
        if pair in matrix.rush:
            return matrix.rush[pair]
        if normal is not None:
            return round_half_up(normal * preferences.traffic_multipliers.rush)
        return matrix.default_minutes

    return normal if normal is not None else matrix.default_minutes
