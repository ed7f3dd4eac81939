"""Dynamic pricing: nightly price resolution, stay totals, extras, tax and vouchers."""

from datetime import date, timedelta
from decimal import Decimal
from typing import NamedTuple, Optional

from structlog import get_logger

from src.config import settings
from src.engine.errors import ValidationError
from src.engine.money import HUNDRED, ZERO, percent_of, round_cents, to_decimal
from src.models.extras import Event, PricingType, SelectedEnhancement, Voucher, VoucherType
from src.models.results import (
    ExtraCharge,
    NightlyPrice,
    PriceQuote,
    PriceSource,
    StayPrice,
)
from src.models.room import PaymentStructure, RatePolicy, Room, RoomRate
from src.models.selection import BookingSelection, ExtraBedSelection

logger = get_logger(__name__)


class _StayAmounts(NamedTuple):
    """Unrounded stay amounts, rounded only when a result is built."""

    breakdown: list[NightlyPrice]
    nightly_total: Decimal
    adjusted_total: Decimal
    room_total: Decimal
    extra_bed_cost: Decimal
    total: Decimal
    data_gaps: list[str]


class PricingEngine:
    """Price resolution for a room, rate and stay.

    Nightly prices come from, in order of priority:

    1. an active RateDatePrice for (rate, room, date), used verbatim
    2. the rate's basePrice plus the room's percentage adjustment
    3. the room's own per-date price, else its flat nightly price

    All stored prices are tax-inclusive.
    """

    @staticmethod
    def _rate_base_price(rate_policy: RatePolicy, room: Room) -> Optional[Decimal]:
        base_price = rate_policy.base_price
        if base_price is None or base_price <= 0:
            return None
        room_rate = room.room_rate_for(rate_policy.id)
        percentage = room_rate.percentage_adjustment if room_rate else ZERO
        return round_cents(base_price + percent_of(base_price, percentage))

    @staticmethod
    def resolve_night(
        room: Room, rate_policy: Optional[RatePolicy], day: date
    ) -> NightlyPrice:
        """Resolve the price of one night together with the tier it came from."""
        if rate_policy is not None:
            override = rate_policy.date_price_for(room.id, day)
            if override is not None:
                return NightlyPrice(date=day, price=override.price, source=PriceSource.RATE_DATE_PRICE)

            base = PricingEngine._rate_base_price(rate_policy, room)
            if base is not None:
                return NightlyPrice(date=day, price=base, source=PriceSource.RATE_BASE_PRICE)

        if day in room.date_prices:
            return NightlyPrice(
                date=day, price=room.date_prices[day], source=PriceSource.ROOM_DATE_PRICE
            )
        return NightlyPrice(date=day, price=room.price, source=PriceSource.ROOM_PRICE)

    @staticmethod
    def price_night(room: Room, rate_policy: Optional[RatePolicy], day: date) -> Decimal:
        """Price of one night of a room under a rate policy."""
        return PricingEngine.resolve_night(room, rate_policy, day).price

    @staticmethod
    def rate_option_display_price(room: Room, room_rate: RoomRate) -> Decimal:
        """Headline nightly price shown for a rate option."""
        base = PricingEngine._rate_base_price(room_rate.rate_policy, room)
        return base if base is not None else round_cents(room.price)

    @staticmethod
    def _stay_amounts(
        room: Room,
        rate_policy: Optional[RatePolicy],
        arrival: date,
        departure: date,
        room_count: int,
        extra_bed: Optional[ExtraBedSelection],
    ) -> _StayAmounts:
        nights = (departure - arrival).days
        breakdown = [
            PricingEngine.resolve_night(room, rate_policy, arrival + timedelta(days=offset))
            for offset in range(max(nights, 0))
        ]
        nightly_total = sum((night.price for night in breakdown), ZERO)

        adjustment = rate_policy.adjustment_percentage if rate_policy else ZERO
        adjusted_total = nightly_total * (HUNDRED + adjustment) / HUNDRED
        room_total = adjusted_total * room_count

        extra_bed_cost = ZERO
        if extra_bed is not None and extra_bed.enabled and extra_bed.count > 0:
            extra_bed_cost = (
                Decimal(extra_bed.count) * room.extra_bed_price * Decimal(nights) * room_count
            )

        data_gaps: list[str] = []
        fallback_nights = [
            night
            for night in breakdown
            if night.source in (PriceSource.ROOM_DATE_PRICE, PriceSource.ROOM_PRICE)
        ]
        if rate_policy is not None and fallback_nights:
            data_gaps.append(
                f"Rate {rate_policy.id} has no price for room {room.id} on "
                f"{len(fallback_nights)} night(s); room price used"
            )
        if any(night.price <= 0 for night in breakdown):
            data_gaps.append(f"Room {room.id} has no price for some nights of the stay")
        if data_gaps:
            logger.warning(
                "Pricing data gap",
                room_id=room.id,
                rate_policy_id=rate_policy.id if rate_policy else None,
                gaps=data_gaps,
            )

        return _StayAmounts(
            breakdown=breakdown,
            nightly_total=nightly_total,
            adjusted_total=adjusted_total,
            room_total=room_total,
            extra_bed_cost=extra_bed_cost,
            total=room_total + extra_bed_cost,
            data_gaps=data_gaps,
        )

    @staticmethod
    def _stay_price(amounts: _StayAmounts, rate_policy: Optional[RatePolicy],
                    room_count: int, extra_bed: Optional[ExtraBedSelection]) -> StayPrice:
        nights = len(amounts.breakdown)
        return StayPrice(
            nights=nights,
            breakdown=amounts.breakdown,
            nightly_total=round_cents(amounts.nightly_total),
            average_nightly=round_cents(amounts.nightly_total / nights) if nights else ZERO,
            adjustment_percentage=rate_policy.adjustment_percentage if rate_policy else ZERO,
            adjusted_total=round_cents(amounts.adjusted_total),
            room_count=room_count,
            room_total=round_cents(amounts.room_total),
            extra_bed_count=extra_bed.count if extra_bed and extra_bed.enabled else 0,
            extra_bed_cost=round_cents(amounts.extra_bed_cost),
            total=round_cents(amounts.total),
        )

    @staticmethod
    def price_stay(
        room: Room,
        rate_policy: Optional[RatePolicy],
        arrival: date,
        departure: date,
        room_count: int = 1,
        extra_bed: Optional[ExtraBedSelection] = None,
    ) -> StayPrice:
        """Room cost of a stay.

        The rate's adjustmentPercentage is applied once to the summed
        nightly total, then multiplied by the number of rooms. Extra beds
        cost count x extraBedPrice x nights x rooms, on top.

        Args:
            room: Selected room
            rate_policy: Selected rate policy, None for the room's own price
            arrival: Check-in date
            departure: Check-out date
            room_count: Number of identical rooms
            extra_bed: Extra-bed selection for the room

        Returns:
            StayPrice with amounts rounded to cents
        """
        amounts = PricingEngine._stay_amounts(
            room, rate_policy, arrival, departure, room_count, extra_bed
        )
        return PricingEngine._stay_price(amounts, rate_policy, room_count, extra_bed)

    @staticmethod
    def _enhancement_line(
        selected: SelectedEnhancement, adults: int, nights: int
    ) -> tuple[ExtraCharge, Decimal]:
        enhancement = selected.enhancement
        if enhancement.pricing_type == PricingType.PER_GUEST:
            quantity = selected.quantity if selected.quantity is not None else adults
        elif enhancement.pricing_type == PricingType.PER_DAY:
            quantity = nights
        else:
            quantity = 1

        if (
            enhancement.max_quantity is not None
            and selected.quantity is not None
            and selected.quantity > enhancement.max_quantity
        ):
            raise ValidationError(
                f"{enhancement.title or enhancement.id} is limited to "
                f"{enhancement.max_quantity} per booking",
                field="enhancements",
            )

        total = enhancement.price * Decimal(quantity)
        line = ExtraCharge(
            id=enhancement.id,
            title=enhancement.title,
            pricing_type=enhancement.pricing_type,
            unit_price=round_cents(enhancement.price),
            quantity=quantity,
            total=round_cents(total),
        )
        return line, total

    @staticmethod
    def price_enhancement(selected: SelectedEnhancement, adults: int, nights: int) -> Decimal:
        """PER_GUEST: price x quantity (adults by default), PER_DAY: price x nights,
        PER_BOOKING: flat price."""
        _, total = PricingEngine._enhancement_line(selected, adults, nights)
        return round_cents(total)

    @staticmethod
    def _event_line(event: Event) -> tuple[ExtraCharge, Decimal]:
        total = event.price * Decimal(event.planned_attendees)
        line = ExtraCharge(
            id=event.id,
            title=event.title,
            pricing_type=event.pricing_type,
            unit_price=round_cents(event.price),
            quantity=event.planned_attendees,
            total=round_cents(total),
            is_event=True,
        )
        return line, total

    @staticmethod
    def price_event(event: Event) -> Decimal:
        """Events are charged per planned attendee."""
        _, total = PricingEngine._event_line(event)
        return round_cents(total)

    @staticmethod
    def back_calculate_tax(grand_total: Decimal, tax_rate: Decimal) -> tuple[Decimal, Decimal]:
        """Split a tax-inclusive total into (subtotal excluding tax, tax), unrounded."""
        subtotal = grand_total / (Decimal("1") + to_decimal(tax_rate))
        return subtotal, grand_total - subtotal

    @staticmethod
    def voucher_discount(grand_total: Decimal, voucher: Optional[Voucher]) -> Decimal:
        """Monetary discount of a voucher on the tax-inclusive grand total, unrounded."""
        if voucher is None:
            return ZERO
        if voucher.type == VoucherType.DISCOUNT:
            return min(percent_of(grand_total, voucher.discount_percent or ZERO), grand_total)
        if voucher.type == VoucherType.FIXED:
            return min(voucher.fixed_amount or ZERO, grand_total)
        return ZERO

    @staticmethod
    def current_charge(final_total: Decimal, rate_policy: Optional[RatePolicy]) -> Decimal:
        """Amount collected now: the prepay share for split payment, else everything."""
        if rate_policy is None or rate_policy.payment_structure != PaymentStructure.SPLIT:
            return final_total
        prepay = rate_policy.prepay_percentage
        if prepay is None:
            prepay = to_decimal(settings.engine.default_prepay_percentage)
        return percent_of(final_total, prepay)

    @staticmethod
    def quote(
        room: Room,
        rate_policy: Optional[RatePolicy],
        selection: BookingSelection,
        tax_rate: Decimal,
        voucher: Optional[Voucher] = None,
    ) -> PriceQuote:
        """Price a complete selection.

        Room cost, enhancements and events are summed into the
        tax-inclusive grand total. Tax is back-calculated from it and the
        voucher discount is taken off it. Amounts are rounded only when
        placed in the quote.

        Args:
            room: Selected room
            rate_policy: Selected rate policy
            selection: Guest selection with dates, party, extras
            tax_rate: Tax fraction included in prices (0.10 == 10%)
            voucher: Already validated voucher, if any

        Returns:
            PriceQuote ready for checkout

        Raises:
            ValidationError: If the selection has no dates or an extra exceeds its limit
        """
        if not selection.has_dates or selection.nights <= 0:
            raise ValidationError("Select check-in and check-out dates first", field="dates")

        room_count = max(selection.room_count, 1)
        amounts = PricingEngine._stay_amounts(
            room,
            rate_policy,
            selection.check_in,
            selection.check_out,
            room_count,
            selection.extra_bed,
        )
        stay = PricingEngine._stay_price(amounts, rate_policy, room_count, selection.extra_bed)

        extras: list[ExtraCharge] = []
        extras_raw = ZERO
        for selected in selection.selected_enhancements:
            line, total = PricingEngine._enhancement_line(
                selected, selection.adults, selection.nights
            )
            extras.append(line)
            extras_raw += total
        for event in selection.selected_events:
            line, total = PricingEngine._event_line(event)
            extras.append(line)
            extras_raw += total

        grand_total = amounts.total + extras_raw
        subtotal, tax = PricingEngine.back_calculate_tax(grand_total, tax_rate)
        discount = PricingEngine.voucher_discount(grand_total, voucher)
        final_total = grand_total - discount
        current_charge = PricingEngine.current_charge(final_total, rate_policy)

        quote = PriceQuote(
            currency=settings.engine.currency,
            stay=stay,
            extras=extras,
            extras_total=round_cents(extras_raw),
            grand_total=round_cents(grand_total),
            tax_rate=to_decimal(tax_rate),
            subtotal_excl_tax=round_cents(subtotal),
            tax=round_cents(tax),
            voucher_code=voucher.code if voucher else None,
            discount=round_cents(discount),
            free_products=list(voucher.products) if voucher and voucher.type == VoucherType.PRODUCT else [],
            final_total=round_cents(final_total),
            payment_structure=rate_policy.payment_structure if rate_policy else PaymentStructure.FULL,
            current_charge=round_cents(current_charge),
            data_gaps=amounts.data_gaps,
        )

        logger.info(
            "Priced selection",
            room_id=room.id,
            rate_policy_id=rate_policy.id if rate_policy else None,
            nights=stay.nights,
            grand_total=str(quote.grand_total),
            discount=str(quote.discount),
            final_total=str(quote.final_total),
        )
        return quote
