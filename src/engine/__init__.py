"""Booking availability, restriction and pricing engine."""

from src.engine.capacity import CapacityResolver
from src.engine.catalog import filter_available_enhancements, stay_weekdays
from src.engine.date_picker import PickerState, advance_selection, initial_state
from src.engine.errors import BookingEngineError, UnresolvedCapacityError, ValidationError
from src.engine.pricing import PricingEngine
from src.engine.ranges import PartialAvailabilityFinder
from src.engine.restriction_rules import RestrictionRuleCompiler
from src.engine.restrictions import RestrictionEvaluator

__all__ = [
    "BookingEngineError",
    "ValidationError",
    "UnresolvedCapacityError",
    "RestrictionEvaluator",
    "RestrictionRuleCompiler",
    "PickerState",
    "advance_selection",
    "initial_state",
    "PartialAvailabilityFinder",
    "CapacityResolver",
    "PricingEngine",
    "filter_available_enhancements",
    "stay_weekdays",
]
