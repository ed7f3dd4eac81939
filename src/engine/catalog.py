"""Local availability filtering of the enhancement catalog for a stay."""

from datetime import date, timedelta
from typing import Iterable, Optional

from structlog import get_logger

from src.models.extras import AvailabilityType, Enhancement, RoomScope

logger = get_logger(__name__)

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def stay_nights(arrival: date, departure: date) -> list[date]:
    return [arrival + timedelta(days=offset) for offset in range((departure - arrival).days)]


def stay_weekdays(arrival: date, departure: date) -> list[str]:
    """Distinct weekday names of the nights of a stay, in stay order.

    Example:
        stay_weekdays(date(2025, 6, 13), date(2025, 6, 15)) -> ["Friday", "Saturday"]
    """
    names: list[str] = []
    for night in stay_nights(arrival, departure):
        name = WEEKDAY_NAMES[night.weekday()]
        if name not in names:
            names.append(name)
    return names


def _within(day: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def is_enhancement_available(
    enhancement: Enhancement,
    arrival: date,
    departure: date,
    room_id: Optional[str] = None,
) -> bool:
    """Whether an enhancement can be offered for a stay.

    Args:
        enhancement: Catalog entry
        arrival: Check-in date
        departure: Check-out date
        room_id: Selected room, None to skip the room scope check

    Returns:
        True if at least one night of the stay satisfies the availability rule
    """
    if not enhancement.is_active:
        return False

    if (
        room_id is not None
        and enhancement.room_scope == RoomScope.SPECIFIC_ROOMS
        and room_id not in enhancement.room_ids
    ):
        return False

    nights = [
        night
        for night in stay_nights(arrival, departure)
        if _within(night, enhancement.valid_from, enhancement.valid_until)
    ]
    if not nights:
        return False

    if enhancement.availability_type == AvailabilityType.WEEKLY:
        offered_days = {day.lower() for day in enhancement.available_days}
        return any(WEEKDAY_NAMES[night.weekday()].lower() in offered_days for night in nights)
    if enhancement.availability_type == AvailabilityType.SPECIFIC_DATES:
        return any(night in enhancement.specific_dates for night in nights)
    if enhancement.availability_type == AvailabilityType.SEASONAL:
        return any(
            _within(night, enhancement.season_start, enhancement.season_end) for night in nights
        )
    return True


def filter_available_enhancements(
    enhancements: Iterable[Enhancement],
    arrival: date,
    departure: date,
    room_id: Optional[str] = None,
) -> list[Enhancement]:
    """Keep only the enhancements that can be offered for the stay."""
    candidates = list(enhancements)
    available = [
        enhancement
        for enhancement in candidates
        if is_enhancement_available(enhancement, arrival, departure, room_id)
    ]
    logger.debug(
        "Filtered enhancement catalog",
        arrival=arrival.isoformat(),
        departure=departure.isoformat(),
        room_id=room_id,
        offered=len(candidates),
        available=len(available),
    )
    return available
