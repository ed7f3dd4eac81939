"""Date classification and stay validation against a calendar snapshot."""

from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from structlog import get_logger

from src.config import settings
from src.engine.errors import ValidationError
from src.models.calendar import BookingStatus, CalendarSnapshot, DateRestrictionInfo
from src.models.results import DateClassification, StayValidation
from src.models.room import Room
from src.models.selection import ArrivalStage, DepartureStage, SelectionStage

logger = get_logger(__name__)

PAST_DATE = "Cannot select dates in the past"
FULLY_BOOKED = "This date is fully booked"
ROOM_UNAVAILABLE = "This room is not available on this date"
CHECK_IN_CLOSED = "Check-in is not available on this date"
CHECK_OUT_CLOSED = "Check-out is not available on this date"
STAY_CLOSED = "Stays are not available on this date"
DEPARTURE_NOT_AFTER_ARRIVAL = "Check-out date must be after check-in date"


class RestrictionEvaluator:
    """Applies booking restrictions for one snapshot at one instant.

    Checks run in a fixed precedence and the first failure wins:

    1. dates before today
    2. fully booked dates (room or whole property), which beat every
       other rule including the same-day cutoff
    3. per-date check-in / check-out / stay flags
    4. same-day cutoff, only for today
    5. minimum / maximum stay of the arrival date
    6. every night inside the stay
    """

    def __init__(
        self,
        snapshot: CalendarSnapshot,
        now: datetime,
        reference_timezone: Optional[str] = None,
    ):
        """Initialize the evaluator.

        Args:
            snapshot: Calendar snapshot for the window being evaluated
            now: Caller's current instant; naive values are taken as
                already expressed in the reference timezone
            reference_timezone: IANA zone for "today" and the cutoff,
                defaults to settings.engine.reference_timezone
        """
        self.snapshot = snapshot
        self.timezone = ZoneInfo(reference_timezone or settings.engine.reference_timezone)
        self.now = now.astimezone(self.timezone) if now.tzinfo else now.replace(tzinfo=self.timezone)

    @property
    def today(self) -> date:
        return self.now.date()

    @property
    def cutoff(self) -> Optional[time]:
        return self.snapshot.general_settings.daily_booking_start_time

    def effective_min_stay(self, arrival: date) -> int:
        """Longest of the global minimum and the arrival date's own minimum."""
        restriction = self.snapshot.restriction_for(arrival)
        return max(
            self.snapshot.general_settings.min_stay_days,
            restriction.minimum_stay or 0,
        )

    def effective_max_stay(self, arrival: date) -> Optional[int]:
        return self.snapshot.restriction_for(arrival).maximum_stay

    def is_before_cutoff(self) -> bool:
        """Same-day bookings are allowed strictly before the cutoff time."""
        if self.cutoff is None:
            return True
        return self.now.time().replace(tzinfo=None) < self.cutoff

    def _cutoff_reason(self) -> str:
        return f"Same-day bookings close at {self.cutoff.strftime('%H:%M')}"

    def _is_fully_booked(self, day: date, room: Optional[Room]) -> bool:
        return self.snapshot.booking_status(day, room) == BookingStatus.FULLY_BOOKED

    def _stay_blocked_reason(
        self, day: date, restriction: DateRestrictionInfo, room: Optional[Room]
    ) -> Optional[str]:
        if not restriction.can_stay:
            return restriction.primary_reason or STAY_CLOSED
        if room is not None and day in room.restricted_dates:
            return ROOM_UNAVAILABLE
        return None

    def is_night_blocked(self, day: date, room: Optional[Room] = None) -> bool:
        """A night nobody can stay: fully booked for the room or closed to stays."""
        if self._is_fully_booked(day, room):
            return True
        return self._stay_blocked_reason(day, self.snapshot.restriction_for(day), room) is not None

    def blocked_nights(
        self, arrival: date, departure: date, room: Optional[Room] = None
    ) -> list[date]:
        """Blocked nights inside [arrival, departure), ascending."""
        nights = (departure - arrival).days
        return [
            arrival + timedelta(days=offset)
            for offset in range(max(nights, 0))
            if self.is_night_blocked(arrival + timedelta(days=offset), room)
        ]

    def classify_date(
        self,
        day: date,
        room: Optional[Room] = None,
        stage: Optional[SelectionStage] = None,
    ) -> DateClassification:
        """Decide whether a date can be clicked in the current picker stage.

        Args:
            day: Calendar date to classify
            room: Restrict booked-date checks to this room when given
            stage: Picker stage, arrival when omitted

        Returns:
            DateClassification with the booking status and the blocking reason
        """
        stage = stage or ArrivalStage()
        status = self.snapshot.booking_status(day, room)
        restriction = self.snapshot.restriction_for(day)

        def result(reason: Optional[str]) -> DateClassification:
            return DateClassification(
                date=day,
                booking_status=status,
                restriction=restriction,
                clickable=reason is None,
                reason=reason,
            )

        if day < self.today:
            return result(PAST_DATE)

        if status == BookingStatus.FULLY_BOOKED:
            return result(FULLY_BOOKED)

        if isinstance(stage, DepartureStage):
            if day <= stage.arrival:
                return result(DEPARTURE_NOT_AFTER_ARRIVAL)
            if not restriction.can_check_out:
                return result(restriction.primary_reason or CHECK_OUT_CLOSED)
            return result(None)

        if not restriction.can_check_in:
            return result(restriction.primary_reason or CHECK_IN_CLOSED)
        blocked = self._stay_blocked_reason(day, restriction, room)
        if blocked:
            return result(blocked)

        if day == self.today and not self.is_before_cutoff():
            return result(self._cutoff_reason())

        return result(None)

    def classify_window(
        self, room: Optional[Room] = None, stage: Optional[SelectionStage] = None
    ) -> list[DateClassification]:
        """Classify every date of the snapshot window."""
        return [self.classify_date(day, room, stage) for day in self.snapshot.dates()]

    def validate_stay(
        self, arrival: date, departure: date, room: Optional[Room] = None
    ) -> StayValidation:
        """Validate an arrival/departure pair, returning the first failing reason.

        Args:
            arrival: Check-in date
            departure: Check-out date (exclusive night)
            room: Selected room; its booked and restricted dates are checked

        Returns:
            StayValidation, valid=False carries a human-readable reason
        """
        nights = (departure - arrival).days

        def invalid(reason: str) -> StayValidation:
            logger.debug(
                "Stay rejected",
                arrival=arrival.isoformat(),
                departure=departure.isoformat(),
                room_id=room.id if room else None,
                reason=reason,
            )
            return StayValidation(valid=False, reason=reason, nights=max(nights, 0))

        if nights <= 0:
            return invalid(DEPARTURE_NOT_AFTER_ARRIVAL)

        if arrival < self.today:
            return invalid(PAST_DATE)

        if self._is_fully_booked(arrival, room):
            return invalid(FULLY_BOOKED)

        arrival_restriction = self.snapshot.restriction_for(arrival)
        if not arrival_restriction.can_check_in:
            return invalid(arrival_restriction.primary_reason or CHECK_IN_CLOSED)
        blocked = self._stay_blocked_reason(arrival, arrival_restriction, room)
        if blocked:
            return invalid(blocked)

        departure_restriction = self.snapshot.restriction_for(departure)
        if not departure_restriction.can_check_out:
            return invalid(departure_restriction.primary_reason or CHECK_OUT_CLOSED)

        if arrival == self.today and not self.is_before_cutoff():
            return invalid(self._cutoff_reason())

        min_stay = self.effective_min_stay(arrival)
        if nights < min_stay:
            return invalid(
                f"Minimum stay for arrival on {arrival.isoformat()} is {min_stay} nights"
            )
        max_stay = self.effective_max_stay(arrival)
        if max_stay is not None and nights > max_stay:
            return invalid(
                f"Maximum stay for arrival on {arrival.isoformat()} is {max_stay} nights"
            )

        for offset in range(1, nights):
            night = arrival + timedelta(days=offset)
            if self._is_fully_booked(night, room):
                return invalid(f"{night.isoformat()} is fully booked")
            blocked = self._stay_blocked_reason(night, self.snapshot.restriction_for(night), room)
            if blocked:
                return invalid(blocked)

        return StayValidation(valid=True, nights=nights)

    def require_valid_stay(
        self, arrival: date, departure: date, room: Optional[Room] = None
    ) -> StayValidation:
        """Like validate_stay but raises ValidationError on failure."""
        validation = self.validate_stay(arrival, departure, room)
        if not validation.valid:
            raise ValidationError(validation.reason, field="dates")
        return validation
