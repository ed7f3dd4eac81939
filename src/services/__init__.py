"""Business services package."""

from src.services.booking_engine_service import BookingEngineService

__all__ = [
    "BookingEngineService",
]
