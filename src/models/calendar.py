"""Pydantic models for availability calendar snapshots."""

from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from src.models.room import Room


class BookingStatus(str, Enum):
    """Derived booking status of a calendar date."""

    AVAILABLE = "available"
    PARTIALLY_BOOKED = "partiallyBooked"
    FULLY_BOOKED = "fullyBooked"


class DateRestrictionInfo(BaseModel):
    """Arrival/departure/stay rules in force on one date."""

    can_check_in: bool = Field(default=True, alias="canCheckIn")
    can_check_out: bool = Field(default=True, alias="canCheckOut")
    can_stay: bool = Field(default=True, alias="canStay")
    minimum_stay: Optional[int] = Field(None, alias="minimumStay")
    maximum_stay: Optional[int] = Field(None, alias="maximumStay")
    # Ordered, first entry is the primary reason shown to guests
    restriction_reasons: list[str] = Field(default_factory=list, alias="restrictionReasons")
    applicable_rate_ids: list[str] = Field(default_factory=list, alias="applicableRates")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @property
    def primary_reason(self) -> Optional[str]:
        return self.restriction_reasons[0] if self.restriction_reasons else None

    @property
    def is_unrestricted(self) -> bool:
        return (
            self.can_check_in
            and self.can_check_out
            and self.can_stay
            and self.minimum_stay is None
            and self.maximum_stay is None
        )


UNRESTRICTED = DateRestrictionInfo()


class GeneralSettings(BaseModel):
    """Property-wide booking settings."""

    min_stay_days: int = Field(default=0, alias="minStayDays")
    # Fraction: 0.10 means prices include 10% tax
    tax_percentage: Decimal = Field(default=Decimal("0"), alias="taxPercentage")
    daily_booking_start_time: Optional[time] = Field(None, alias="dailyBookingStartTime")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("daily_booking_start_time", mode="before")
    @classmethod
    def _parse_cutoff(cls, value):
        if value in ("", None):
            return None
        return value

    @property
    def tax_rate(self) -> Decimal:
        return self.tax_percentage


class CalendarSnapshot(BaseModel):
    """Availability service response for one date window.

    Immutable for its lifetime; the engine reads it and never mutates it.
    """

    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    fully_booked_dates: frozenset[date] = Field(
        default_factory=frozenset, alias="fullyBookedDates"
    )
    partially_booked_dates: frozenset[date] = Field(
        default_factory=frozenset, alias="partiallyBookedDates"
    )
    available_dates: frozenset[date] = Field(default_factory=frozenset, alias="availableDates")
    restricted_dates: frozenset[date] = Field(
        default_factory=frozenset, alias="restrictedDates"
    )
    date_restrictions: dict[date, DateRestrictionInfo] = Field(
        default_factory=dict, alias="dateRestrictions"
    )
    available_rooms: list[Room] = Field(default_factory=list, alias="availableRooms")
    unavailable_rooms: list[Room] = Field(default_factory=list, alias="unavailableRooms")
    general_settings: GeneralSettings = Field(
        default_factory=GeneralSettings, alias="generalSettings"
    )

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("general_settings", mode="before")
    @classmethod
    def _unwrap_settings_list(cls, value: Any) -> Any:
        # The service returns generalSettings as a one-element array
        if isinstance(value, list):
            return value[0] if value else {}
        return value

    @classmethod
    def empty(
        cls,
        start_date: date,
        end_date: date,
        general_settings: Optional[GeneralSettings] = None,
    ) -> "CalendarSnapshot":
        """Snapshot with no rooms and no restrictions, used when the fetch failed."""
        return cls(
            start_date=start_date,
            end_date=end_date,
            general_settings=general_settings or GeneralSettings(),
        )

    @property
    def window_key(self) -> tuple[date, date]:
        return (self.start_date, self.end_date)

    @property
    def rooms(self) -> list[Room]:
        """All rooms, available first."""
        return [*self.available_rooms, *self.unavailable_rooms]

    @property
    def is_empty(self) -> bool:
        return not self.available_rooms and not self.unavailable_rooms

    def room(self, room_id: str) -> Optional[Room]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def restriction_for(self, day: date) -> DateRestrictionInfo:
        return self.date_restrictions.get(day, UNRESTRICTED)

    def booking_status(self, day: date, room: Optional[Room] = None) -> BookingStatus:
        """Status of a date overall, or for one room when given."""
        if day in self.fully_booked_dates:
            return BookingStatus.FULLY_BOOKED
        if room is not None and room.is_booked_on(day):
            return BookingStatus.FULLY_BOOKED
        if day in self.partially_booked_dates:
            return BookingStatus.PARTIALLY_BOOKED
        return BookingStatus.AVAILABLE

    def dates(self) -> list[date]:
        """Every date of the window, inclusive of both ends."""
        span = (self.end_date - self.start_date).days
        return [self.start_date + timedelta(days=offset) for offset in range(span + 1)]
