"""Week planning data model.

Events are read-only input owned by the event store. Everything else here is
derived on each planning request and never persisted:
- TravelLeg: one drive between consecutive same-day events
- SleepDecision: where to spend the night before the next day
- DayPlan / DayPlanFailure: one calendar day
- WeekPlan: seven days plus week-level suggestions
"""

from datetime import date as date_type
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from weekplanner.planning.errors import InvalidInputDetail


class Place(StrEnum):
    """Canonical places recognized by the planner."""

    HOME = "Beit Dagan"
    PARTNER_HOME = "Kfar Saba"
    WORK = "Rishon Lezion"
    TENNIS = "Nir Tzvi"
    UNRESOLVED = "Unresolved"


class EventCategory(StrEnum):
    WORK = "Work"
    PERSONAL = "Personal"
    STUDY = "Study"
    OTHER = "Other"


Severity = Literal["warning", "suggestion", "info"]
TransportMode = Literal["car", "train", "bus"]
SleepRule = Literal[
    "no_events_tomorrow",
    "near_home_tomorrow",
    "early_start_closer_to_partner",
    "late_finish_near_partner",
    "light_schedule",
    "least_total_driving",
]


class Event(BaseModel):
    """Calendar event as supplied by the event store.

    Attributes:
        id: Event identifier (used in error details)
        title: Event title
        start: Start instant
        end: End instant; effective end is start when absent
        location: Free-text location
        category: Event category
        created_by: Identity tag of the profile that created the event
    """

    id: str | None = None
    title: str
    start: datetime
    end: datetime | None = None
    location: str | None = None
    category: EventCategory = EventCategory.OTHER
    created_by: str | None = None

    @property
    def effective_end(self) -> datetime:
        return self.end if self.end is not None else self.start

    @property
    def duration_minutes(self) -> int:
        return int((self.effective_end - self.start).total_seconds() // 60)


class UnavailableMode(BaseModel):
    """A transport mode with no usable route (routine, not an error)."""

    available: Literal[False] = False
    reason: str


class CarOption(BaseModel):
    available: Literal[True] = True
    duration_minutes: int
    cost_estimate: float
    parking: str = "Consider parking availability and costs"


class TrainOption(BaseModel):
    """Train journey, direct or with one transfer at the hub station.

    For transfers, total_minutes = legs[0].total_minutes + transfer_minutes
    + legs[1].journey_minutes (the wait for the second train is absorbed by
    the transfer penalty).
    """

    available: Literal[True] = True
    from_station: str
    to_station: str
    line: str | None = None
    journey_minutes: int
    wait_minutes: int
    transfer_minutes: int = 0
    total_minutes: int
    frequency_minutes: int | None = None
    cost_estimate: float
    next_departures: list[str] = Field(default_factory=list)
    transfer: bool = False
    transfer_station: str | None = None
    legs: list["TrainOption"] = Field(default_factory=list)


class BusOption(BaseModel):
    available: Literal[True] = True
    lines: list[str]
    frequency_minutes: int
    duration_minutes: int
    cost_estimate: float


class RankedOption(BaseModel):
    mode: TransportMode
    minutes: int
    cost_estimate: float


class TransportComparison(BaseModel):
    """Car/train/bus comparison for a single leg.

    Attributes:
        car: Car option (always available)
        train: Train option or unavailable marker
        bus: Bus option or unavailable marker
        ranking: Available modes, fastest first
        recommended: Fastest available mode
        analysis: Advisory notes about the options
        advice: Contextual advice derived from preferences
    """

    car: CarOption
    train: TrainOption | UnavailableMode
    bus: BusOption | UnavailableMode
    ranking: list[RankedOption]
    recommended: TransportMode | None = None
    analysis: list[str] = Field(default_factory=list)
    advice: list[str] = Field(default_factory=list)


class TravelLeg(BaseModel):
    from_event: Event
    to_event: Event
    from_place: Place
    to_place: Place
    departure: datetime
    duration_minutes: int
    is_rush_hour: bool
    rush_conflict: bool
    suggestion: str | None = None
    transport: TransportComparison | None = None


class SleepDecision(BaseModel):
    location: Place
    reason: str
    rule: SleepRule


class Recommendation(BaseModel):
    severity: Severity
    title: str
    message: str


class DayAnalysis(BaseModel):
    is_busy: bool
    is_long_driving_day: bool
    has_rush_hour_travel: bool
    has_long_drives: bool
    total_event_minutes: int


class DayPlan(BaseModel):
    """Plan for one calendar day.

    Invariants:
    - events are sorted by start (stable)
    - travel_legs only cover consecutive pairs with both locations resolved
    - total_driving_minutes is the exact sum of travel_legs durations
    """

    status: Literal["planned"] = "planned"
    date: date_type
    events: list[Event]
    travel_legs: list[TravelLeg]
    total_driving_minutes: int
    sleep_decision: SleepDecision
    analysis: DayAnalysis
    recommendations: list[Recommendation]
    rush_hour_impact: Literal["high", "low"]


class DayPlanFailure(BaseModel):
    """Placeholder for a day whose events were malformed."""

    status: Literal["failed"] = "failed"
    date: date_type
    error: InvalidInputDetail


class Suggestion(BaseModel):
    severity: Severity
    message: str


class WeekPlan(BaseModel):
    week_start: date_type
    days: list[Annotated[DayPlan | DayPlanFailure, Field(discriminator="status")]]
    total_driving_minutes: int
    suggestions: list[Suggestion]

    @property
    def planned_days(self) -> list[DayPlan]:
        return [day for day in self.days if isinstance(day, DayPlan)]

