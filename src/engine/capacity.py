"""Fit a party into the selected room, with extra beds or an alternative room."""

from decimal import Decimal

from structlog import get_logger

from src.engine.errors import UnresolvedCapacityError
from src.engine.money import round_cents
from src.models.results import AlternativeRoom, CapacityResolution
from src.models.room import Room
from src.models.selection import ExtraBedSelection

logger = get_logger(__name__)


class CapacityResolver:
    """Capacity and extra-bed constraint solving."""

    @staticmethod
    def extra_beds_needed(room: Room, adults: int) -> int:
        return max(0, adults - room.capacity)

    @staticmethod
    def extra_bed_cost(room: Room, extra_beds: int, nights: int) -> Decimal:
        return round_cents(Decimal(extra_beds) * room.extra_bed_price * Decimal(nights))

    @staticmethod
    def fits_with_extra_beds(room: Room, adults: int) -> bool:
        return (
            room.allows_extra_bed
            and room.max_capacity_with_extra_bed is not None
            and adults <= room.max_capacity_with_extra_bed
        )

    @staticmethod
    def resolve(
        room: Room,
        adults: int,
        all_rooms: list[Room],
        nights: int = 1,
    ) -> CapacityResolution:
        """Resolve how the party fits the selected room.

        When the party exceeds the standard capacity, the extra-bed option
        for the current room and the list of alternative rooms are both
        computed; the caller is offered them side by side.

        Args:
            room: Selected room
            adults: Party size
            all_rooms: Rooms that may be offered instead (the current one is skipped)
            nights: Stay length, for extra-bed cost estimates

        Returns:
            CapacityResolution

        Raises:
            UnresolvedCapacityError: If neither the room nor any alternative fits
        """
        if adults <= room.capacity:
            return CapacityResolution(
                room_id=room.id,
                adults=adults,
                fits_standard_capacity=True,
            )

        needed = CapacityResolver.extra_beds_needed(room, adults)
        via_extra_bed = ExtraBedSelection()
        extra_bed_cost = Decimal("0")
        if CapacityResolver.fits_with_extra_beds(room, adults):
            via_extra_bed = ExtraBedSelection(enabled=True, count=needed)
            extra_bed_cost = CapacityResolver.extra_bed_cost(room, needed, nights)

        alternatives: list[AlternativeRoom] = []
        for candidate in all_rooms:
            if candidate.id == room.id:
                continue
            if candidate.capacity >= adults:
                alternatives.append(AlternativeRoom(room=candidate))
            elif CapacityResolver.fits_with_extra_beds(candidate, adults):
                candidate_beds = CapacityResolver.extra_beds_needed(candidate, adults)
                alternatives.append(
                    AlternativeRoom(
                        room=candidate,
                        extra_beds_needed=candidate_beds,
                        extra_bed_cost=CapacityResolver.extra_bed_cost(
                            candidate, candidate_beds, nights
                        ),
                    )
                )

        if not via_extra_bed.enabled and not alternatives:
            logger.warning(
                "No room fits the party",
                room_id=room.id,
                adults=adults,
                rooms_checked=len(all_rooms),
            )
            raise UnresolvedCapacityError(adults, room.id)

        logger.debug(
            "Resolved capacity",
            room_id=room.id,
            adults=adults,
            extra_beds=via_extra_bed.count,
            alternatives=len(alternatives),
        )
        return CapacityResolution(
            room_id=room.id,
            adults=adults,
            fits_standard_capacity=False,
            via_extra_bed=via_extra_bed,
            extra_bed_cost=extra_bed_cost,
            alternatives=alternatives,
        )
