"""Step to resolve the selected room and rate policy from the snapshot."""

from src.engine.errors import ValidationError
from src.services.pipeline import PipelineStep, QuoteContext


class ResolveSelectionStep(PipelineStep):
    """Look up the selected room and its rate policy in the snapshot."""

    def __init__(self):
        super().__init__("ResolveSelection")

    async def execute(self, context: QuoteContext) -> bool:
        """Resolve room and rate.

        Args:
            context: Quote context

        Returns:
            True if the selection names a known room and an active linked rate

        Raises:
            ValidationError: If dates, room or rate are missing or unknown
        """
        selection = context.selection
        if not selection.has_dates:
            raise ValidationError("Select check-in and check-out dates first", field="dates")
        if selection.adults < 1:
            raise ValidationError("At least one adult is required", field="adults")
        if not selection.selected_room_id:
            raise ValidationError("Select a room", field="room")

        room = context.snapshot.room(selection.selected_room_id)
        if room is None:
            raise ValidationError("The selected room is not available", field="room")
        context.room = room

        if selection.selected_rate_id:
            room_rate = room.room_rate_for(selection.selected_rate_id)
            if room_rate is None or not room_rate.rate_policy.is_active:
                raise ValidationError(
                    "The selected rate is not available for this room", field="rate"
                )
            context.rate_policy = room_rate.rate_policy

        self.logger.debug(
            "Resolved selection",
            room_id=room.id,
            rate_policy_id=context.rate_policy.id if context.rate_policy else None,
        )
        return True
