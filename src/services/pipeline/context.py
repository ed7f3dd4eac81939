"""Pipeline context for sharing data between quote steps."""

from datetime import datetime, timezone
from typing import Any, Optional

from src.engine.restrictions import RestrictionEvaluator
from src.models.calendar import CalendarSnapshot
from src.models.extras import Voucher
from src.models.results import CandidateRange, CapacityResolution, PriceQuote, StayValidation
from src.models.room import RatePolicy, Room
from src.models.selection import BookingSelection


class QuoteContext:
    """Context object passed through the quote pipeline.

    Holds the read-only inputs (snapshot, selection, evaluation instant) and
    accumulates what each step derives from them.
    """

    def __init__(self, snapshot: CalendarSnapshot, selection: BookingSelection, now: datetime):
        """Initialize quote context.

        Args:
            snapshot: Calendar snapshot covering the stay
            selection: Guest selection, never mutated by the pipeline
            now: Evaluation instant for past-date and cutoff checks
        """
        self.snapshot = snapshot
        self.selection = selection
        self.evaluator = RestrictionEvaluator(snapshot, now)
        self.start_time = datetime.now(timezone.utc)

        # Resolved selection
        self.room: Optional[Room] = None
        self.rate_policy: Optional[RatePolicy] = None

        # Derived results
        self.stay_validation: Optional[StayValidation] = None
        self.candidate_ranges: list[CandidateRange] = []
        self.capacity: Optional[CapacityResolution] = None
        self.voucher: Optional[Voucher] = None
        self.quote: Optional[PriceQuote] = None

        # Processing statistics
        self.stats: dict[str, Any] = {}

        # Errors encountered during processing
        self.errors: list[dict[str, str]] = []

        self.success: bool = False

    def add_error(self, step_name: str, error_message: str, field: Optional[str] = None) -> None:
        """Add an error to the context.

        Args:
            step_name: Name of the step where the error occurred
            error_message: Human-readable reason
            field: Selection field the reason refers to
        """
        self.errors.append({
            "step": step_name,
            "message": error_message,
            "field": field or "",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def reason(self) -> Optional[str]:
        """First recorded reason, the one shown to the guest."""
        return self.errors[0]["message"] if self.errors else None

    def get_results(self) -> dict[str, Any]:
        """Get final results dictionary.

        Returns:
            Dictionary containing outcome, reasons, alternatives and the checkout payload
        """
        end_time = datetime.now(timezone.utc)
        return {
            "success": self.success,
            "reason": self.reason,
            "errors": self.errors,
            "candidateRanges": [
                {"start": candidate.start.isoformat(), "end": candidate.end.isoformat()}
                for candidate in self.candidate_ranges
            ],
            "alternativeRooms": [
                alternative.room.id for alternative in (self.capacity.alternatives if self.capacity else [])
            ],
            "dataGaps": self.quote.data_gaps if self.quote else [],
            "checkout": self.quote.to_checkout_dict() if self.quote else None,
            "stats": self.stats,
            "durationSeconds": (end_time - self.start_time).total_seconds(),
        }
