"""Result records produced by the booking engine."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from src.models.calendar import BookingStatus, DateRestrictionInfo
from src.models.extras import PricingType, VoucherProduct
from src.models.room import PaymentStructure, Room
from src.models.selection import ExtraBedSelection


class DateClassification(BaseModel):
    """Whether a calendar date can be picked, and why not."""

    date: date
    booking_status: BookingStatus
    restriction: DateRestrictionInfo
    clickable: bool
    reason: Optional[str] = None

    class Config:
        frozen = True


class StayValidation(BaseModel):
    """Outcome of validating an arrival/departure pair."""

    valid: bool
    reason: Optional[str] = None
    nights: int = 0

    class Config:
        frozen = True


class CandidateRange(BaseModel):
    """Bookable sub-range [start, end) inside a partially booked window."""

    start: date
    end: date

    class Config:
        frozen = True

    @property
    def nights(self) -> int:
        return (self.end - self.start).days


class AlternativeRoom(BaseModel):
    """Another room that fits the party, with its implied extra-bed cost."""

    room: Room
    extra_beds_needed: int = 0
    extra_bed_cost: Decimal = Decimal("0")

    class Config:
        frozen = True


class CapacityResolution(BaseModel):
    """How the requested party fits the selected room and which rooms also fit."""

    room_id: str
    adults: int
    fits_standard_capacity: bool
    via_extra_bed: ExtraBedSelection = Field(default_factory=ExtraBedSelection)
    extra_bed_cost: Decimal = Decimal("0")
    alternatives: list[AlternativeRoom] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def extra_beds_needed(self) -> int:
        return self.via_extra_bed.count if self.via_extra_bed.enabled else 0

    @property
    def fits_current_room(self) -> bool:
        return self.fits_standard_capacity or self.via_extra_bed.enabled


class PriceSource(str, Enum):
    """Which tier produced a nightly price."""

    RATE_DATE_PRICE = "RATE_DATE_PRICE"
    RATE_BASE_PRICE = "RATE_BASE_PRICE"
    ROOM_DATE_PRICE = "ROOM_DATE_PRICE"
    ROOM_PRICE = "ROOM_PRICE"


class NightlyPrice(BaseModel):
    date: date
    price: Decimal
    source: PriceSource

    class Config:
        frozen = True


class StayPrice(BaseModel):
    """Room cost of a stay, before extras and vouchers."""

    nights: int
    breakdown: list[NightlyPrice] = Field(default_factory=list)
    nightly_total: Decimal = Decimal("0")
    average_nightly: Decimal = Decimal("0")
    adjustment_percentage: Decimal = Decimal("0")
    adjusted_total: Decimal = Decimal("0")
    room_count: int = 1
    room_total: Decimal = Decimal("0")
    extra_bed_count: int = 0
    extra_bed_cost: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    class Config:
        frozen = True


class ExtraCharge(BaseModel):
    """Line item for a selected enhancement or event."""

    id: str
    title: str
    pricing_type: Optional[PricingType] = None
    unit_price: Decimal
    quantity: int
    total: Decimal
    is_event: bool = False

    class Config:
        frozen = True


class PriceQuote(BaseModel):
    """Full tax-inclusive price breakdown handed to checkout."""

    currency: str = "eur"
    stay: StayPrice
    extras: list[ExtraCharge] = Field(default_factory=list)
    extras_total: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("0")
    subtotal_excl_tax: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    voucher_code: Optional[str] = None
    discount: Decimal = Decimal("0")
    free_products: list[VoucherProduct] = Field(default_factory=list)
    final_total: Decimal = Decimal("0")
    payment_structure: PaymentStructure = PaymentStructure.FULL
    current_charge: Decimal = Decimal("0")
    data_gaps: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

    def to_checkout_dict(self) -> dict[str, Any]:
        """Convert to the checkout service payload with camelCase keys.

        Returns:
            Dictionary with amounts as floats rounded to cents
        """
        line_items = [
            {
                "name": "Room",
                "amount": float(self.stay.total),
                "quantity": self.stay.room_count,
            }
        ]
        for extra in self.extras:
            line_items.append(
                {
                    "id": extra.id,
                    "name": extra.title,
                    "unitAmount": float(extra.unit_price),
                    "quantity": extra.quantity,
                    "amount": float(extra.total),
                }
            )
        for product in self.free_products:
            line_items.append(
                {"name": f"{product.name} (Voucher Bonus)", "unitAmount": 0.0, "quantity": 1, "amount": 0.0}
            )

        payload: dict[str, Any] = {
            "currency": self.currency,
            "subtotal": float(self.subtotal_excl_tax),
            "taxAmount": float(self.tax),
            "discount": float(self.discount),
            "totalAmount": float(self.final_total),
            "originalAmount": float(self.grand_total),
            "currentCharge": float(self.current_charge),
            "paymentStructure": self.payment_structure.value,
            "freeProducts": [product.name for product in self.free_products],
            "lineItems": line_items,
        }
        if self.voucher_code:
            payload["voucherCode"] = self.voucher_code
        return payload
