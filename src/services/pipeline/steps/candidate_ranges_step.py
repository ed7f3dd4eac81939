"""Step to offer bookable sub-ranges when the stay is partially blocked."""

from src.engine.ranges import PartialAvailabilityFinder
from src.services.pipeline import PipelineStep, QuoteContext


class CandidateRangesStep(PipelineStep):
    """Find bookable sub-ranges of the requested stay for the selected room.

    Runs before stay validation so the alternatives are available even
    when the full stay is rejected.
    """

    def __init__(self):
        super().__init__("CandidateRanges")

    async def execute(self, context: QuoteContext) -> bool:
        selection = context.selection
        room = context.room
        evaluator = context.evaluator
        if not PartialAvailabilityFinder.is_partial(
            evaluator, room, selection.check_in, selection.check_out
        ):
            return True

        context.candidate_ranges = PartialAvailabilityFinder.find_ranges_for_room(
            evaluator, room, selection.check_in, selection.check_out
        )
        context.stats["candidate_ranges"] = len(context.candidate_ranges)
        self.logger.info(
            "Stay partially blocked",
            room_id=room.id,
            candidates=len(context.candidate_ranges),
        )
        return True

    def is_required(self) -> bool:
        return False
