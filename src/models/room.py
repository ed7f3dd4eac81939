"""Pydantic models for rooms, rate policies and price overrides."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PaymentStructure(str, Enum):
    """How a rate policy collects payment."""

    FULL = "FULL_PAYMENT"
    SPLIT = "SPLIT_PAYMENT"


class RateDatePrice(BaseModel):
    """Explicit per-date price for a room under a rate policy.

    Highest priority price source when active.
    """

    room_id: str = Field(alias="roomId")
    date: date
    price: Decimal
    rate_policy_id: Optional[str] = Field(None, alias="ratePolicyId")
    is_active: bool = Field(default=True, alias="isActive")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time(cls, value):
        # Upstream sends either "2025-06-11" or "2025-06-11T00:00:00.000Z"
        if isinstance(value, str) and "T" in value:
            return value.split("T")[0]
        return value


class RatePolicy(BaseModel):
    """Named pricing and cancellation plan (e.g. Flexible, Non-refundable)."""

    id: str
    name: str = ""
    base_price: Optional[Decimal] = Field(None, alias="basePrice")
    # Uniform +/- percentage applied to the summed stay total
    adjustment_percentage: Decimal = Field(default=Decimal("0"), alias="adjustmentPercentage")
    prepay_percentage: Optional[Decimal] = Field(None, alias="prepayPercentage")
    payment_structure: PaymentStructure = Field(
        default=PaymentStructure.FULL, alias="paymentStructure"
    )
    refundable: bool = True
    full_payment_days: Optional[int] = Field(None, alias="fullPaymentDays")
    change_allowed_days: Optional[int] = Field(None, alias="changeAllowedDays")
    rebook_validity_days: Optional[int] = Field(None, alias="rebookValidityDays")
    is_active: bool = Field(default=True, alias="isActive")
    rate_date_prices: list[RateDatePrice] = Field(
        default_factory=list, alias="rateDatePrices"
    )

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("adjustment_percentage", mode="before")
    @classmethod
    def _none_is_zero(cls, value):
        return Decimal("0") if value is None else value

    def date_price_for(self, room_id: str, day: date) -> Optional[RateDatePrice]:
        """Return the active override for a room on a date, if any."""
        for override in self.rate_date_prices:
            if override.room_id != room_id or override.date != day:
                continue
            if override.rate_policy_id not in (None, self.id):
                continue
            if override.is_active:
                return override
        return None


class RoomRate(BaseModel):
    """Association between a room and a rate policy."""

    rate_policy: RatePolicy = Field(alias="ratePolicy")
    percentage_adjustment: Decimal = Field(
        default=Decimal("0"), alias="percentageAdjustment"
    )
    is_active: bool = Field(default=True, alias="isActive")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("percentage_adjustment", mode="before")
    @classmethod
    def _none_is_zero(cls, value):
        return Decimal("0") if value is None else value


class Room(BaseModel):
    """Bookable room (or room category) as returned by the availability service."""

    id: str
    name: str = ""
    price: Decimal = Decimal("0")  # Flat nightly price, lowest priority source
    capacity: int = 0
    allows_extra_bed: bool = Field(default=False, alias="allowsExtraBed")
    max_capacity_with_extra_bed: Optional[int] = Field(
        None, alias="maxCapacityWithExtraBed"
    )
    extra_bed_price: Decimal = Field(default=Decimal("0"), alias="extraBedPrice")
    date_prices: dict[date, Decimal] = Field(default_factory=dict, alias="datePrices")
    booked_dates: frozenset[date] = Field(default_factory=frozenset, alias="bookedDates")
    restricted_dates: frozenset[date] = Field(
        default_factory=frozenset, alias="restrictedDates"
    )
    room_rates: list[RoomRate] = Field(default_factory=list, alias="RoomRate")

    class Config:
        extra = "allow"
        populate_by_name = True
        frozen = True

    @field_validator("price", "extra_bed_price", mode="before")
    @classmethod
    def _none_is_zero(cls, value):
        return Decimal("0") if value is None else value

    def room_rate_for(self, rate_policy_id: str) -> Optional[RoomRate]:
        """Find the active link to a rate policy."""
        for room_rate in self.room_rates:
            if room_rate.rate_policy.id == rate_policy_id and room_rate.is_active:
                return room_rate
        return None

    def is_booked_on(self, day: date) -> bool:
        return day in self.booked_dates
