"""Pydantic models for admin-defined booking restriction rules."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.models.extras import RateScope, RoomScope


class RestrictionType(str, Enum):
    CLOSE_TO_STAY = "CLOSE_TO_STAY"
    CLOSE_TO_ARRIVAL = "CLOSE_TO_ARRIVAL"
    CLOSE_TO_DEPARTURE = "CLOSE_TO_DEPARTURE"
    MIN_LENGTH = "MIN_LENGTH"
    MAX_LENGTH = "MAX_LENGTH"
    ADVANCE_BOOKING = "ADVANCE_BOOKING"


def _date_only(value):
    if isinstance(value, str):
        return value[:10] if value else None
    return value


class _Scoped(BaseModel):
    """Room/rate scope shared by rules and their exceptions."""

    rate_scope: RateScope = Field(default=RateScope.ALL_RATES, alias="rateScope")
    rate_policy_ids: list[str] = Field(default_factory=list, alias="ratePolicyIds")
    room_scope: RoomScope = Field(default=RoomScope.ALL_ROOMS, alias="roomScope")
    room_ids: list[str] = Field(default_factory=list, alias="roomIds")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("rate_policy_ids", "room_ids", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value

    def covers_room(self, room_id: Optional[str]) -> bool:
        if self.room_scope == RoomScope.ALL_ROOMS or room_id is None:
            return True
        return room_id in self.room_ids

    def covers_rate(self, rate_policy_id: Optional[str]) -> bool:
        # BASE_RATE rules apply when no specific rate is being priced
        if self.rate_scope == RateScope.ALL_RATES:
            return True
        if self.rate_scope == RateScope.BASE_RATE:
            return rate_policy_id is None
        return rate_policy_id is None or rate_policy_id in self.rate_policy_ids


def weekday_index(day: date) -> int:
    """Day of week with 0 = Sunday, as stored by the admin console."""
    return (day.weekday() + 1) % 7


class RestrictionException(_Scoped):
    """Carve-out from a rule: overrides its length or suppresses it."""

    id: Optional[str] = None
    min_length_override: Optional[int] = Field(None, alias="minLengthOverride")
    max_length_override: Optional[int] = Field(None, alias="maxLengthOverride")
    exception_start_date: Optional[date] = Field(None, alias="exceptionStartDate")
    exception_end_date: Optional[date] = Field(None, alias="exceptionEndDate")
    exception_days_of_week: list[int] = Field(default_factory=list, alias="exceptionDaysOfWeek")
    is_active: bool = Field(default=True, alias="isActive")

    @field_validator("exception_start_date", "exception_end_date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return _date_only(value)

    def matches(self, day: date, room_id: Optional[str], rate_policy_id: Optional[str]) -> bool:
        if not self.is_active:
            return False
        if self.exception_start_date and day < self.exception_start_date:
            return False
        if self.exception_end_date and day > self.exception_end_date:
            return False
        if self.exception_days_of_week and weekday_index(day) not in self.exception_days_of_week:
            return False
        return self.covers_room(room_id) and self.covers_rate(rate_policy_id)


class RestrictionRule(_Scoped):
    """Booking restriction configured in the admin console."""

    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    type: RestrictionType
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    days_of_week: list[int] = Field(default_factory=list, alias="daysOfWeek")
    min_length: Optional[int] = Field(None, alias="minLength")
    max_length: Optional[int] = Field(None, alias="maxLength")
    min_advance: Optional[int] = Field(None, alias="minAdvance")
    max_advance: Optional[int] = Field(None, alias="maxAdvance")
    priority: int = 0
    is_active: bool = Field(default=True, alias="isActive")
    exceptions: list[RestrictionException] = Field(default_factory=list)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return _date_only(value)

    def applies_on(self, day: date, room_id: Optional[str], rate_policy_id: Optional[str]) -> bool:
        """Whether the rule's window, weekday filter and scopes cover this date."""
        if not self.is_active:
            return False
        if day < self.start_date or day > self.end_date:
            return False
        if self.days_of_week and weekday_index(day) not in self.days_of_week:
            return False
        return self.covers_room(room_id) and self.covers_rate(rate_policy_id)

    def matching_exception(
        self, day: date, room_id: Optional[str], rate_policy_id: Optional[str]
    ) -> Optional[RestrictionException]:
        for exception in self.exceptions:
            if exception.matches(day, room_id, rate_policy_id):
                return exception
        return None
