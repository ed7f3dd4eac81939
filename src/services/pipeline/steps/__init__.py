"""Quote pipeline step implementations."""

from .apply_voucher_step import ApplyVoucherStep
from .candidate_ranges_step import CandidateRangesStep
from .price_quote_step import PriceQuoteStep
from .resolve_capacity_step import ResolveCapacityStep
from .resolve_selection_step import ResolveSelectionStep
from .validate_stay_step import ValidateStayStep

__all__ = [
    "ApplyVoucherStep",
    "CandidateRangesStep",
    "PriceQuoteStep",
    "ResolveCapacityStep",
    "ResolveSelectionStep",
    "ValidateStayStep",
]
