"""Booking engine data models."""

from src.models.calendar import (
    BookingStatus,
    CalendarSnapshot,
    DateRestrictionInfo,
    GeneralSettings,
)
from src.models.extras import (
    AvailabilityType,
    Enhancement,
    Event,
    PricingType,
    RateScope,
    RoomScope,
    SelectedEnhancement,
    Voucher,
    VoucherProduct,
    VoucherType,
)
from src.models.restriction_rule import (
    RestrictionException,
    RestrictionRule,
    RestrictionType,
)
from src.models.results import (
    AlternativeRoom,
    CandidateRange,
    CapacityResolution,
    DateClassification,
    ExtraCharge,
    NightlyPrice,
    PriceQuote,
    PriceSource,
    StayPrice,
    StayValidation,
)
from src.models.room import PaymentStructure, RateDatePrice, RatePolicy, Room, RoomRate
from src.models.selection import (
    ArrivalStage,
    BookingSelection,
    DepartureStage,
    ExtraBedSelection,
    SelectionStage,
)

__all__ = [
    "Room",
    "RatePolicy",
    "RoomRate",
    "RateDatePrice",
    "PaymentStructure",
    "BookingStatus",
    "CalendarSnapshot",
    "DateRestrictionInfo",
    "GeneralSettings",
    "AvailabilityType",
    "Enhancement",
    "Event",
    "PricingType",
    "RateScope",
    "RoomScope",
    "SelectedEnhancement",
    "Voucher",
    "VoucherProduct",
    "VoucherType",
    "RestrictionRule",
    "RestrictionException",
    "RestrictionType",
    "ArrivalStage",
    "DepartureStage",
    "SelectionStage",
    "BookingSelection",
    "ExtraBedSelection",
    "AlternativeRoom",
    "CandidateRange",
    "CapacityResolution",
    "DateClassification",
    "ExtraCharge",
    "NightlyPrice",
    "PriceQuote",
    "PriceSource",
    "StayPrice",
    "StayValidation",
]
