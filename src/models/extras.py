"""Pydantic models for enhancements, events and vouchers."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PricingType(str, Enum):
    """How an enhancement is charged."""

    PER_GUEST = "PER_GUEST"
    PER_DAY = "PER_DAY"
    PER_BOOKING = "PER_BOOKING"


class AvailabilityType(str, Enum):
    """When an enhancement can be offered."""

    ALWAYS = "ALWAYS"
    WEEKLY = "WEEKLY"
    SPECIFIC_DATES = "SPECIFIC_DATES"
    SEASONAL = "SEASONAL"


class RoomScope(str, Enum):
    ALL_ROOMS = "ALL_ROOMS"
    SPECIFIC_ROOMS = "SPECIFIC_ROOMS"


class RateScope(str, Enum):
    ALL_RATES = "ALL_RATES"
    SPECIFIC_RATES = "SPECIFIC_RATES"
    BASE_RATE = "BASE_RATE"


def _date_only(value):
    # "2025-06-11T00:00:00.000Z" -> "2025-06-11", "" -> None
    if isinstance(value, str):
        if not value:
            return None
        return value[:10]
    return value


class Enhancement(BaseModel):
    """Optional extra a guest can add to a stay (breakfast, transfer, ...)."""

    id: str
    title: str = Field(default="", alias="name")
    description: str = ""
    price: Decimal = Decimal("0")
    pricing_type: PricingType = Field(default=PricingType.PER_BOOKING, alias="pricingType")
    max_quantity: Optional[int] = Field(None, alias="maxQuantity")
    is_active: bool = Field(default=True, alias="isActive")

    # Availability rule
    availability_type: AvailabilityType = Field(
        default=AvailabilityType.ALWAYS, alias="availabilityType"
    )
    available_days: list[str] = Field(default_factory=list, alias="availableDays")
    specific_dates: list[date] = Field(default_factory=list, alias="specificDates")
    season_start: Optional[date] = Field(None, alias="seasonStart")
    season_end: Optional[date] = Field(None, alias="seasonEnd")
    valid_from: Optional[date] = Field(None, alias="validFrom")
    valid_until: Optional[date] = Field(None, alias="validUntil")
    room_scope: RoomScope = Field(default=RoomScope.ALL_ROOMS, alias="roomScope")
    room_ids: list[str] = Field(default_factory=list, alias="roomIds")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("season_start", "season_end", "valid_from", "valid_until", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return _date_only(value)

    @field_validator("specific_dates", mode="before")
    @classmethod
    def _parse_specific_dates(cls, value):
        if value is None:
            return []
        return [_date_only(item) for item in value]

    @field_validator("available_days", "room_ids", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value


class Event(Enhancement):
    """Enhancement bound to a single date with a planned attendee count."""

    event_date: date = Field(alias="eventDate")
    planned_attendees: int = Field(default=0, alias="plannedAttendees")

    @field_validator("event_date", mode="before")
    @classmethod
    def _parse_event_date(cls, value):
        return _date_only(value)


class SelectedEnhancement(BaseModel):
    """An enhancement in the guest's selection, with an optional explicit quantity."""

    enhancement: Enhancement
    quantity: Optional[int] = None

    class Config:
        populate_by_name = True


class VoucherType(str, Enum):
    DISCOUNT = "DISCOUNT"
    FIXED = "FIXED"
    PRODUCT = "PRODUCT"


class VoucherProduct(BaseModel):
    """Free item granted by a PRODUCT voucher."""

    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    value: Decimal = Decimal("0")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True


class Voucher(BaseModel):
    """Validated voucher as returned by the voucher service."""

    code: str
    type: VoucherType
    discount_percent: Optional[Decimal] = Field(None, alias="discountPercent")
    fixed_amount: Optional[Decimal] = Field(None, alias="fixedAmount")
    products: list[VoucherProduct] = Field(default_factory=list)
    is_active: bool = Field(default=True, alias="isActive")
    valid_from: Optional[date] = Field(None, alias="validFrom")
    valid_till: Optional[date] = Field(None, alias="validTill")
    room_scope: RoomScope = Field(default=RoomScope.ALL_ROOMS, alias="roomScope")
    room_ids: list[str] = Field(default_factory=list, alias="roomIds")
    rate_scope: RateScope = Field(default=RateScope.ALL_RATES, alias="rateScope")
    rate_policy_ids: list[str] = Field(default_factory=list, alias="ratePolicyIds")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("valid_from", "valid_till", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return _date_only(value)

    @field_validator("room_ids", "rate_policy_ids", "products", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value

    def inapplicable_reason(
        self, room_id: Optional[str], rate_policy_id: Optional[str], on: date
    ) -> Optional[str]:
        """Why the voucher cannot be used for this stay, or None if it can."""
        if not self.is_active:
            return f"Voucher {self.code} is no longer active"
        if self.valid_from and on < self.valid_from:
            return f"Voucher {self.code} is not valid before {self.valid_from.isoformat()}"
        if self.valid_till and on > self.valid_till:
            return f"Voucher {self.code} expired on {self.valid_till.isoformat()}"
        if self.room_scope == RoomScope.SPECIFIC_ROOMS and room_id not in self.room_ids:
            return f"Voucher {self.code} does not apply to the selected room"
        if self.rate_scope == RateScope.SPECIFIC_RATES and rate_policy_id not in self.rate_policy_ids:
            return f"Voucher {self.code} does not apply to the selected rate"
        return None
