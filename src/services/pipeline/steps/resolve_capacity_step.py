"""Step to fit the party into the selected room."""

from src.engine.capacity import CapacityResolver
from src.engine.errors import ValidationError
from src.services.pipeline import PipelineStep, QuoteContext


class ResolveCapacityStep(PipelineStep):
    """Check the party against room capacity and the extra-bed selection.

    UnresolvedCapacityError from the resolver is not caught: no room fits
    and the caller must stop.
    """

    def __init__(self):
        super().__init__("ResolveCapacity")

    async def execute(self, context: QuoteContext) -> bool:
        """Resolve capacity.

        Args:
            context: Quote context

        Returns:
            True if the party fits the room as selected

        Raises:
            ValidationError: If extra beds or another room are needed
        """
        selection = context.selection
        room = context.room
        resolution = CapacityResolver.resolve(
            room,
            selection.adults,
            context.snapshot.available_rooms,
            nights=selection.nights,
        )
        context.capacity = resolution

        self._check_extra_bed_selection(context)

        if resolution.fits_standard_capacity:
            return True

        if not resolution.via_extra_bed.enabled:
            raise ValidationError(
                f"{room.name or room.id} cannot host {selection.adults} guests, "
                "please choose another room",
                field="room",
            )

        needed = resolution.extra_beds_needed
        extra_bed = selection.extra_bed
        if not extra_bed.enabled or extra_bed.count < needed:
            raise ValidationError(
                f"{selection.adults} guests need {needed} extra bed(s) in {room.name or room.id}",
                field="extraBed",
            )
        return True

    @staticmethod
    def _check_extra_bed_selection(context: QuoteContext) -> None:
        """Reject extra beds the room cannot take, whatever the party size."""
        room = context.room
        extra_bed = context.selection.extra_bed
        if not extra_bed.enabled or extra_bed.count <= 0:
            return

        if not room.allows_extra_bed:
            raise ValidationError(
                f"{room.name or room.id} does not offer extra beds",
                field="extraBed",
            )
        max_beds = max((room.max_capacity_with_extra_bed or room.capacity) - room.capacity, 0)
        if extra_bed.count > max_beds:
            raise ValidationError(
                f"{room.name or room.id} takes at most {max_beds} extra bed(s)",
                field="extraBed",
            )
