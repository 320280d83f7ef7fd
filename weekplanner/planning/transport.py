"""Car / train / bus comparison for a single leg.

Static transport data (stations, line schedules, intercity bus routes).
Rail rules:
- A location maps to at most one nearby station by keyword
- Direct journeys need a scheduled line shared by both stations; the hub
  station serves every line
- Otherwise one transfer at the hub, with a fixed transfer penalty
- Rush frequency applies on weekdays only, inside the configured rush windows
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from weekplanner.planning.events import minute_of_day
from weekplanner.planning.locations import resolve_location
from weekplanner.planning.preferences import PlannerPreferences, format_clock, parse_clock
from weekplanner.planning.travel_time import (
    DEFAULT_MATRIX,
    TravelMatrix,
    estimate_travel_minutes,
    is_rush_hour,
    round_half_up,
)
from weekplanner.planning.types import (
    BusOption,
    CarOption,
    Place,
    RankedOption,
    TrainOption,
    TransportComparison,
    TransportMode,
    UnavailableMode,
)

TRANSFER_PENALTY_MINUTES = 10
RAIL_MINUTES_PER_DISTANCE_UNIT = 1.5
DEFAULT_RAIL_DISTANCE = 30
BUS_FARE = 5.90
WEEKEND_DAYS = frozenset({5, 6})  # Saturday, Sunday
RUSH_SAVING_NOTE_MINUTES = 10
NEXT_DEPARTURE_COUNT = 3

KFAR_SABA_LINE = "Tel Aviv - Kfar Saba/Hod Hasharon"
REHOVOT_LINE = "Tel Aviv - Rehovot/Ashkelon"
JERUSALEM_LINE = "Jerusalem - Tel Aviv"


@dataclass(frozen=True)
class Station:
    name: str
    keywords: tuple[str, ...]
    lines: tuple[str, ...] = ()
    is_hub: bool = False


@dataclass(frozen=True)
class LineSchedule:
    """Simplified timetable for one rail line (frequencies in minutes)."""

    weekday_frequency: int
    rush_frequency: int
    weekend_frequency: int
    first_train: str
    last_train: str
    weekend_first_train: str
    weekend_last_train: str


@dataclass(frozen=True)
class BusRoute:
    lines: tuple[str, ...]
    frequency: int
    duration: int


HUB_STATION = Station(name="Tel Aviv Center", keywords=("tel aviv",), is_hub=True)

# Keyword order matters: first station whose keyword matches wins
STATIONS: tuple[Station, ...] = (
    Station(name="Kfar Saba", keywords=("kfar saba",), lines=(KFAR_SABA_LINE,)),
    Station(name="Hod Hasharon", keywords=("hod hasharon",), lines=(KFAR_SABA_LINE,)),
    Station(name="Kfar Chabad", keywords=("beit dagan", "rishon", "kfar chabad"), lines=(REHOVOT_LINE, JERUSALEM_LINE)),
    HUB_STATION,
)

LINE_SCHEDULES: dict[str, LineSchedule] = {
    KFAR_SABA_LINE: LineSchedule(
        weekday_frequency=30,
        rush_frequency=15,
        weekend_frequency=60,
        first_train="05:30",
        last_train="23:30",
        weekend_first_train="06:00",
        weekend_last_train="23:00",
    ),
    REHOVOT_LINE: LineSchedule(
        weekday_frequency=20,
        rush_frequency=10,
        weekend_frequency=30,
        first_train="05:00",
        last_train="00:30",
        weekend_first_train="06:00",
        weekend_last_train="00:00",
    ),
}

RAIL_DISTANCES: dict[frozenset[str], int] = {
    frozenset({"Kfar Saba", "Kfar Chabad"}): 45,
    frozenset({"Kfar Saba", "Tel Aviv Center"}): 30,
    frozenset({"Kfar Chabad", "Tel Aviv Center"}): 20,
}

BUS_ROUTES: dict[str, BusRoute] = {
    "Kfar Saba - Tel Aviv": BusRoute(lines=("531", "142"), frequency=15, duration=45),
    "Rishon Lezion - Tel Aviv": BusRoute(lines=("201", "202", "203"), frequency=10, duration=30),
    "Beit Dagan - Tel Aviv": BusRoute(lines=("240",), frequency=20, duration=25),
}


def nearest_station(location: str | None) -> Station | None:
    """Find the station serving a free-text location, or None."""
    if not location:
        return None
    lowered = location.lower()
    for station in STATIONS:
        if any(keyword in lowered for keyword in station.keywords):
            return station
    return None


def rail_distance(origin: Station, destination: Station) -> int:
    return RAIL_DISTANCES.get(frozenset({origin.name, destination.name}), DEFAULT_RAIL_DISTANCE)


def train_fare(origin: Station, destination: Station) -> float:
    """Zone-based fare from rail distance."""
    distance = rail_distance(origin, destination)
    if distance <= 20:
        return 6.80
    if distance <= 40:
        return 10.50
    return 15.30


def _shared_lines(origin: Station, destination: Station) -> list[str]:
    if origin.is_hub:
        candidates = list(destination.lines)
    elif destination.is_hub:
        candidates = list(origin.lines)
    else:
        candidates = [line for line in origin.lines if line in destination.lines]
    return [line for line in candidates if line in LINE_SCHEDULES]


def next_departures(schedule: LineSchedule, departure: datetime, weekend: bool) -> list[str]:
    """Next scheduled departures (HH:MM) at base frequency, within service hours."""
    if weekend:
        frequency = schedule.weekend_frequency
        first = parse_clock(schedule.weekend_first_train)
        last = parse_clock(schedule.weekend_last_train)
    else:
        frequency = schedule.weekday_frequency
        first = parse_clock(schedule.first_train)
        last = parse_clock(schedule.last_train)
    if last < first:
        last += 24 * 60

    current = minute_of_day(departure)
    upcoming = max(first, math.ceil((current - first) / frequency) * frequency + first)

    departures: list[str] = []
    while upcoming <= last and len(departures) < NEXT_DEPARTURE_COUNT:
        departures.append(format_clock(upcoming))
        upcoming += frequency
    return departures


def _direct_train(
    origin: Station,
    destination: Station,
    departure: datetime,
    preferences: PlannerPreferences,
) -> TrainOption | None:
    lines = _shared_lines(origin, destination)
    if not lines:
        return None

    line = lines[0]
    schedule = LINE_SCHEDULES[line]
    weekend = departure.weekday() in WEEKEND_DAYS
    if weekend:
        frequency = schedule.weekend_frequency
    elif is_rush_hour(departure, preferences):
        frequency = schedule.rush_frequency
    else:
        frequency = schedule.weekday_frequency

    journey = rail_distance(origin, destination) * RAIL_MINUTES_PER_DISTANCE_UNIT
    wait = frequency / 2

    return TrainOption(
        from_station=origin.name,
        to_station=destination.name,
        line=line,
        journey_minutes=round_half_up(journey),
        wait_minutes=round_half_up(wait),
        total_minutes=round_half_up(journey + wait),
        frequency_minutes=frequency,
        cost_estimate=train_fare(origin, destination),
        next_departures=next_departures(schedule, departure, weekend),
    )


def train_option(
    origin: str | None,
    destination: str | None,
    departure: datetime,
    preferences: PlannerPreferences,
) -> TrainOption | UnavailableMode:
    """Plan a train journey between two free-text locations.

    Tries a direct line first, then a single transfer at the hub station.

    Returns:
        TrainOption, or UnavailableMode when no station or line connects the locations
    """
    from_station = nearest_station(origin)
    to_station = nearest_station(destination)
    if from_station is None or to_station is None:
        return UnavailableMode(reason="No train station near origin or destination")
    if from_station.name == to_station.name:
        return UnavailableMode(reason="No distinct stations")

    direct = _direct_train(from_station, to_station, departure, preferences)
    if direct is not None:
        return direct

    if from_station.is_hub or to_station.is_hub:
        return UnavailableMode(reason=f"No rail line connects {from_station.name} and {to_station.name}")

    first_leg = _direct_train(from_station, HUB_STATION, departure, preferences)
    if first_leg is None:
        return UnavailableMode(reason=f"No rail line from {from_station.name} to {HUB_STATION.name}")

    second_departure = departure + timedelta(minutes=first_leg.total_minutes + TRANSFER_PENALTY_MINUTES)
    second_leg = _direct_train(HUB_STATION, to_station, second_departure, preferences)
    if second_leg is None:
        return UnavailableMode(reason=f"No rail line from {HUB_STATION.name} to {to_station.name}")

    return TrainOption(
        from_station=from_station.name,
        to_station=to_station.name,
        journey_minutes=first_leg.journey_minutes + second_leg.journey_minutes,
        wait_minutes=first_leg.wait_minutes,
        transfer_minutes=TRANSFER_PENALTY_MINUTES,
        total_minutes=first_leg.total_minutes + TRANSFER_PENALTY_MINUTES + second_leg.journey_minutes,
        frequency_minutes=first_leg.frequency_minutes,
        cost_estimate=round(first_leg.cost_estimate + second_leg.cost_estimate, 2),
        next_departures=first_leg.next_departures,
        transfer=True,
        transfer_station=HUB_STATION.name,
        legs=[first_leg, second_leg],
    )


def _location_name(text: str | None) -> str:
    place = resolve_location(text)
    if place != Place.UNRESOLVED:
        return place.value
    return (text or "").strip()


def bus_option(origin: str | None, destination: str | None) -> BusOption | UnavailableMode:
    """Look up an intercity bus route for an unordered location pair.

    Exact route keys are tried in both directions, then any route key
    containing both location names.
    """
    origin_name = _location_name(origin)
    destination_name = _location_name(destination)
    if not origin_name or not destination_name:
        return UnavailableMode(reason="No direct bus route found")

    route = BUS_ROUTES.get(f"{origin_name} - {destination_name}") or BUS_ROUTES.get(
        f"{destination_name} - {origin_name}"
    )
    if route is None:
        for route_key, candidate in BUS_ROUTES.items():
            key = route_key.lower()
            if origin_name.lower() in key and destination_name.lower() in key:
                route = candidate
                break

    if route is None:
        return UnavailableMode(reason="No direct bus route found")

    return BusOption(
        lines=list(route.lines),
        frequency_minutes=route.frequency,
        duration_minutes=route.duration,
        cost_estimate=BUS_FARE,
    )


def fuel_cost(duration_minutes: int) -> int:
    # 60 km/h average, 1 liter per 10 km, 6 NIS per liter
    distance_km = duration_minutes
    return round_half_up(distance_km / 10 * 6)


def car_option(
    origin: str | None,
    destination: str | None,
    departure: datetime,
    preferences: PlannerPreferences,
    matrix: TravelMatrix = DEFAULT_MATRIX,
) -> CarOption:
    duration = estimate_travel_minutes(
        resolve_location(origin), resolve_location(destination), departure, preferences, matrix
    )
    return CarOption(duration_minutes=duration, cost_estimate=fuel_cost(duration))


def compare_transport(
    origin: str | None,
    destination: str | None,
    departure: datetime,
    preferences: PlannerPreferences,
    matrix: TravelMatrix = DEFAULT_MATRIX,
) -> TransportComparison:
    """Compare car, train and bus for one leg.

    Args:
        origin: Origin location text (free text or canonical place name)
        destination: Destination location text
        departure: Local departure time
        preferences: Rush windows and advice toggles
        matrix: Car travel time tables

    Returns:
        TransportComparison with available modes ranked fastest first
    """
    car = car_option(origin, destination, departure, preferences, matrix)
    train = train_option(origin, destination, departure, preferences)
    bus = bus_option(origin, destination)

    candidates: list[tuple[TransportMode, int, float]] = [("car", car.duration_minutes, car.cost_estimate)]
    if isinstance(train, TrainOption):
        candidates.append(("train", train.total_minutes, train.cost_estimate))
    if isinstance(bus, BusOption):
        candidates.append(("bus", bus.duration_minutes, bus.cost_estimate))

    ranking = [
        RankedOption(mode=mode, minutes=minutes, cost_estimate=cost)
        for mode, minutes, cost in sorted(candidates, key=lambda candidate: candidate[1])
    ]

    rush = is_rush_hour(departure, preferences)
    analysis: list[str] = []
    if isinstance(train, TrainOption):
        if rush:
            saving = car.duration_minutes - train.total_minutes
            if saving > RUSH_SAVING_NOTE_MINUTES:
                analysis.append(f"Train saves {saving} minutes during rush hour")
        if train.transfer:
            analysis.append("Train requires transfer - factor in extra time")
    if isinstance(bus, BusOption):
        analysis.append("Bus is most economical but may take longer")
    if rush:
        analysis.append("Rush hour - public transport recommended")

    advice: list[str] = []
    if preferences.avoid_rush_hour and rush:
        advice.append("Consider departing earlier to avoid rush hour traffic")
    if isinstance(train, TrainOption):
        advice.append("Train offers predictable journey time and avoids traffic")

    logger.debug(
        f"Transport comparison {origin!r} -> {destination!r}: "
        f"{', '.join(f'{option.mode}={option.minutes}min' for option in ranking)}"
    )

    return TransportComparison(
        car=car,
        train=train,
        bus=bus,
        ranking=ranking,
        recommended=ranking[0].mode if ranking else None,
        analysis=analysis,
        advice=advice,
    )
