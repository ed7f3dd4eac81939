"""Find bookable sub-ranges of a partially booked stay window."""

from datetime import date, timedelta
from typing import Iterable, Optional

from structlog import get_logger

from src.engine.restrictions import RestrictionEvaluator
from src.models.results import CandidateRange
from src.models.room import Room

logger = get_logger(__name__)


class PartialAvailabilityFinder:
    """Gap finder over the blocked nights of a stay window."""

    @staticmethod
    def conflicting_nights(
        booked_dates: Iterable[date], arrival: date, departure: date
    ) -> list[date]:
        """Booked nights inside [arrival, departure), ascending."""
        return sorted(day for day in set(booked_dates) if arrival <= day < departure)

    @staticmethod
    def is_partial(
        evaluator: RestrictionEvaluator, room: Room, arrival: date, departure: date
    ) -> bool:
        """True when some, but not all, nights of the window are blocked for the room."""
        nights = (departure - arrival).days
        return 0 < len(evaluator.blocked_nights(arrival, departure, room)) < nights

    @staticmethod
    def find_ranges(
        booked_dates: Iterable[date],
        arrival: date,
        departure: date,
        min_stay: int,
    ) -> list[CandidateRange]:
        """Split [arrival, departure) into maximal free gaps long enough to book.

        Each candidate is half-open: its end is a departure date and may be
        a booked night, since the guest leaves that morning.

        Args:
            booked_dates: Blocked nights of the room
            arrival: Requested arrival
            departure: Requested departure
            min_stay: Effective minimum stay of the requested arrival date

        Returns:
            Ordered candidate ranges, possibly empty
        """
        conflicts = PartialAvailabilityFinder.conflicting_nights(
            booked_dates, arrival, departure
        )
        required = max(min_stay, 1)

        ranges: list[CandidateRange] = []
        gap_start = arrival
        for booked in conflicts:
            if (booked - gap_start).days >= required:
                ranges.append(CandidateRange(start=gap_start, end=booked))
            gap_start = booked + timedelta(days=1)

        if (departure - gap_start).days >= required:
            ranges.append(CandidateRange(start=gap_start, end=departure))

        logger.debug(
            "Computed partial availability ranges",
            arrival=arrival.isoformat(),
            departure=departure.isoformat(),
            conflicts=len(conflicts),
            candidates=len(ranges),
            min_stay=required,
        )
        return ranges

    @staticmethod
    def find_ranges_for_room(
        evaluator: RestrictionEvaluator,
        room: Room,
        arrival: date,
        departure: date,
        min_stay: Optional[int] = None,
    ) -> list[CandidateRange]:
        """Bookable sub-ranges of a stay for one room.

        Gaps are cut at every night the evaluator treats as blocked (booked
        for the room, fully booked property-wide, closed to stays), and a
        gap is kept only if the evaluator accepts it as a stay, so its
        arrival and departure days also allow check-in and check-out.

        Args:
            evaluator: Evaluator over the snapshot covering the stay
            room: Selected room
            arrival: Requested arrival
            departure: Requested departure
            min_stay: Minimum gap length, the arrival's effective minimum stay when omitted

        Returns:
            Ordered candidate ranges, possibly empty
        """
        if min_stay is None:
            min_stay = evaluator.effective_min_stay(arrival)
        gaps = PartialAvailabilityFinder.find_ranges(
            evaluator.blocked_nights(arrival, departure, room), arrival, departure, min_stay
        )
        return [
            gap for gap in gaps if evaluator.validate_stay(gap.start, gap.end, room).valid
        ]
