"""Booking engine exceptions."""

from typing import Optional


class BookingEngineError(Exception):
    """Base exception for booking engine errors."""

    pass


class ValidationError(BookingEngineError):
    """Raised when a date, stay or party selection breaks a rule.

    Always recoverable by prompting the guest for a new selection.
    """

    def __init__(self, reason: str, field: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.field = field


class UnresolvedCapacityError(BookingEngineError):
    """Raised when no room, with or without extra beds, fits the party."""

    def __init__(self, adults: int, room_id: Optional[str] = None):
        self.adults = adults
        self.room_id = room_id
        super().__init__(
            f"No room can accommodate {adults} guests, even with extra beds"
        )
