"""Planner preferences.

Mirrors the app-settings "preferences source": every option has a default so
a partial (or empty) preferences payload is always usable. Keys are accepted
in the app's camelCase form as well as snake_case.

Use load_preferences() at the boundary: it converts pydantic validation
errors into InvalidInputError with the offending field path.
"""

from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator, model_validator

from weekplanner.planning.errors import INVALID_PREFERENCE, InvalidInputError

MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> int:
    """Convert an HH:MM clock string to minute-of-day.

    Raises:
        ValueError: If value is not a valid HH:MM string
    """
    try:
        hours_str, minutes_str = value.split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid clock time: {value!r}. Expected HH:MM") from e
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid clock time: {value!r}. Expected HH:MM")
    return hours * 60 + minutes


def format_clock(minute_of_day: int) -> str:
    minute_of_day %= MINUTES_PER_DAY
    return f"{minute_of_day // 60:02d}:{minute_of_day % 60:02d}"


class ClockWindow(BaseModel):
    """Clock-time interval, inclusive of both bounds."""

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        parse_clock(value)
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "ClockWindow":
        if parse_clock(self.end) < parse_clock(self.start):
            raise ValueError(f"Window end {self.end} is before start {self.start}")
        return self

    def contains(self, minute_of_day: int) -> bool:
        return parse_clock(self.start) <= minute_of_day <= parse_clock(self.end)


class RushHours(BaseModel):
    morning: ClockWindow = Field(default_factory=lambda: ClockWindow(start="07:30", end="10:00"))
    evening: ClockWindow = Field(default_factory=lambda: ClockWindow(start="15:00", end="19:00"))

    def contains(self, minute_of_day: int) -> bool:
        return self.morning.contains(minute_of_day) or self.evening.contains(minute_of_day)


class TrafficMultipliers(BaseModel):
    normal: float = Field(default=1.0, gt=0)
    light: float = Field(default=0.8, gt=0)
    heavy: float = Field(default=1.5, gt=0)
    rush: float = Field(default=1.5, gt=0)


class PlannerPreferences(BaseModel):
    """Configuration consumed by the planning engine.

    Attributes:
        rush_hours: Morning/evening rush windows
        traffic_multipliers: Travel time multipliers; rush applies to pairs without a rush table entry
        max_daily_driving_minutes: Daily cap used for the heavy-driving warning
        max_weekly_driving_minutes: Weekly cap; defaults to 5x the daily cap
        buffer_minutes: Gap between an event's end and the departure to the next one
        long_drive_threshold_minutes: Single leg duration flagged as a long drive
        preferred_sleep_location: Default overnight base ("optimal" and "home" both default to home)
        avoid_rush_hour: Add "depart earlier" advice to rush-hour legs
        early_start: Tomorrow's first event at or before this time counts as early
        early_start_margin_minutes: Minimum saving from the partner's place for an early start
        late_finish: Today's last event ending at or after this time counts as late
        light_schedule_start: A single event at or after this time counts as a light day
        sleep_margin_minutes: Minimum total-driving difference to leave the default base
        partner_work_end: When the partner finishes work (pickup note)
        pickup_after: Afternoon events considered for the pickup note start at or after this time
        long_day_hours: First-start to last-end span flagged as a long day
        busy_day_event_count: Days with more events than this are busy
        timezone: IANA zone used to localize timezone-aware timestamps
    """

    rush_hours: RushHours = Field(
        default_factory=RushHours, validation_alias=AliasChoices("rush_hours", "rushHours")
    )
    traffic_multipliers: TrafficMultipliers = Field(
        default_factory=TrafficMultipliers,
        validation_alias=AliasChoices("traffic_multipliers", "trafficMultipliers"),
    )
    max_daily_driving_minutes: int = Field(
        default=180,
        ge=0,
        validation_alias=AliasChoices("max_daily_driving_minutes", "maxDailyDrivingMinutes", "maxDailyDriving"),
    )
    max_weekly_driving_minutes: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("max_weekly_driving_minutes", "maxWeeklyDrivingMinutes", "maxWeeklyDriving"),
    )
    buffer_minutes: int = Field(
        default=15,
        ge=0,
        validation_alias=AliasChoices("buffer_minutes", "bufferMinutes", "bufferTime"),
    )
    long_drive_threshold_minutes: int = Field(
        default=90,
        ge=0,
        validation_alias=AliasChoices(
            "long_drive_threshold_minutes", "longDriveThresholdMinutes", "longDriveThreshold"
        ),
    )
    preferred_sleep_location: Literal["home", "partner", "optimal"] = Field(
        default="optimal",
        validation_alias=AliasChoices("preferred_sleep_location", "preferredSleepLocation"),
    )
    avoid_rush_hour: bool = Field(
        default=True, validation_alias=AliasChoices("avoid_rush_hour", "avoidRushHour")
    )
    early_start: str = "08:00"
    early_start_margin_minutes: int = Field(default=10, ge=0)
    late_finish: str = "18:00"
    light_schedule_start: str = "10:00"
    sleep_margin_minutes: int = Field(default=15, ge=0)
    partner_work_end: str = "15:30"
    pickup_after: str = "15:00"
    long_day_hours: float = Field(default=10, ge=0)
    busy_day_event_count: int = Field(default=3, ge=0)
    timezone: str = "Asia/Jerusalem"

    @field_validator("early_start", "late_finish", "light_schedule_start", "partner_work_end", "pickup_after")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        parse_clock(value)
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {value!r}") from e
        return value

    @property
    def weekly_driving_cap(self) -> int:
        if self.max_weekly_driving_minutes is not None:
            return self.max_weekly_driving_minutes
        return 5 * self.max_daily_driving_minutes


def load_preferences(raw: dict[str, Any] | None) -> PlannerPreferences:
    """Build preferences from a preferences-source payload.

    Missing keys fall back to defaults; unknown keys are ignored.

    Args:
        raw: Preferences payload (camelCase or snake_case keys), or None

    Returns:
        Validated PlannerPreferences

    Raises:
        InvalidInputError: If any value is malformed (negative duration, bad HH:MM, reversed window, unknown time zone)
    """
    try:
        return PlannerPreferences.model_validate(raw or {})
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        logger.warning(f"Rejected planner preferences: field={field} error={first['msg']}")
        raise InvalidInputError(INVALID_PREFERENCE, first["msg"], field=field) from e
