"""Tests for BookingEngineService with mocked clients."""

import asyncio
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.cache import InMemorySnapshotCache
from src.clients import UpstreamServerError, VoucherNotFoundError
from src.engine.errors import UnresolvedCapacityError, ValidationError
from src.models.extras import Voucher
from src.models.selection import BookingSelection, ExtraBedSelection
from src.services import BookingEngineService


@pytest.fixture
def availability_client(snapshot):
    client = AsyncMock()
    client.fetch_calendar.return_value = snapshot
    return client


@pytest.fixture
def voucher_client():
    return AsyncMock()


@pytest.fixture
def service(availability_client, voucher_client):
    return BookingEngineService(
        cache=InMemorySnapshotCache(ttl_seconds=300),
        availability_client=availability_client,
        catalog_client=AsyncMock(),
        voucher_client=voucher_client,
    )


def _selection(**values) -> BookingSelection:
    data = {
        "check_in": date(2025, 6, 2),
        "check_out": date(2025, 6, 5),
        "adults": 2,
        "selected_room_id": "room-1",
        "selected_rate_id": "rate-flex",
    }
    data.update(values)
    return BookingSelection(**data)


class TestLoadSnapshot:
    """Tests for snapshot loading through the cache."""

    @pytest.mark.asyncio
    async def test_second_load_is_served_from_cache(self, service, availability_client, snapshot):
        first = await service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30))
        second = await service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30))

        assert first is snapshot
        assert second is snapshot
        availability_client.fetch_calendar.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_loads_share_one_fetch(self, service, availability_client):
        results = await asyncio.gather(
            service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30)),
            service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30)),
            service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30)),
        )

        assert results[0] is results[1] is results[2]
        assert availability_client.fetch_calendar.await_count == 1

    @pytest.mark.asyncio
    async def test_fetch_failure_falls_back_to_empty_snapshot(self, service, availability_client):
        availability_client.fetch_calendar.side_effect = UpstreamServerError("down", status_code=503)

        result = await service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30))

        assert result.is_empty
        assert result.general_settings.min_stay_days == 2
        assert result.general_settings.tax_rate == Decimal("0.1")

    @pytest.mark.asyncio
    async def test_empty_fallback_is_not_cached(self, service, availability_client):
        availability_client.fetch_calendar.side_effect = UpstreamServerError("down", status_code=503)

        await service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30))
        await service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30))

        assert availability_client.fetch_calendar.await_count == 2

    @pytest.mark.asyncio
    async def test_fetch_failure_raises_without_fallback(self, service, availability_client):
        availability_client.fetch_calendar.side_effect = UpstreamServerError("down", status_code=503)

        with pytest.raises(UpstreamServerError):
            await service.load_snapshot(date(2025, 6, 1), date(2025, 6, 30), fallback_to_empty=False)


class TestCalendar:
    @pytest.mark.asyncio
    async def test_classifies_window(self, service, now):
        classifications = await service.calendar(date(2025, 6, 1), date(2025, 6, 30), now=now)

        by_date = {item.date: item for item in classifications}
        assert len(classifications) == 30
        assert by_date[date(2025, 6, 20)].clickable is False
        assert by_date[date(2025, 6, 15)].clickable is False
        assert by_date[date(2025, 6, 3)].clickable is True


class TestQuote:
    """Tests for the quote pipeline."""

    @pytest.mark.asyncio
    async def test_happy_path(self, service, now):
        context = await service.quote(_selection(), now=now)

        assert context.success is True
        assert context.reason is None
        assert context.quote.stay.nights == 3
        assert context.quote.grand_total == Decimal("396.00")
        assert context.stats["nights"] == 3

    @pytest.mark.asyncio
    async def test_selection_is_not_mutated(self, service, now):
        selection = _selection()
        before = selection.model_dump()

        await service.quote(selection, now=now)

        assert selection.model_dump() == before

    @pytest.mark.asyncio
    async def test_invalid_stay_offers_candidate_ranges(self, service, now):
        context = await service.quote(
            _selection(check_in=date(2025, 6, 9), check_out=date(2025, 6, 16)), now=now
        )

        assert context.success is False
        assert context.quote is None
        assert context.reason == "2025-06-12 is fully booked"
        assert [(r.start, r.end) for r in context.candidate_ranges] == [
            (date(2025, 6, 9), date(2025, 6, 12)),
        ]

    @pytest.mark.asyncio
    async def test_unknown_room_is_rejected(self, service, now):
        context = await service.quote(_selection(selected_room_id="room-9"), now=now)

        assert context.success is False
        assert context.errors[0]["field"] == "room"

    @pytest.mark.asyncio
    async def test_extra_bed_required(self, service, now):
        context = await service.quote(_selection(adults=3), now=now)

        assert context.success is False
        assert context.quote is None
        assert context.errors[0]["field"] == "extraBed"
        assert context.capacity.extra_beds_needed == 1

    @pytest.mark.asyncio
    async def test_extra_bed_selected(self, service, now):
        selection = _selection(adults=3, extra_bed=ExtraBedSelection(enabled=True, count=1))

        context = await service.quote(selection, now=now)

        assert context.success is True
        assert context.quote.stay.extra_bed_cost == Decimal("60.00")
        assert context.quote.grand_total == Decimal("456.00")

    @pytest.mark.asyncio
    async def test_extra_bed_rejected_for_room_without_extra_beds(self, service, now):
        selection = _selection(
            selected_room_id="room-2",
            selected_rate_id=None,
            extra_bed=ExtraBedSelection(enabled=True, count=2),
        )

        context = await service.quote(selection, now=now)

        assert context.success is False
        assert context.quote is None
        assert any(error["field"] == "extraBed" for error in context.errors)

    @pytest.mark.asyncio
    async def test_more_extra_beds_than_room_takes(self, service, now):
        selection = _selection(extra_bed=ExtraBedSelection(enabled=True, count=2))

        context = await service.quote(selection, now=now)

        assert context.success is False
        assert context.quote is None
        assert any(error["field"] == "extraBed" for error in context.errors)

    @pytest.mark.asyncio
    async def test_unresolved_capacity_propagates(self, service, now):
        with pytest.raises(UnresolvedCapacityError):
            await service.quote(_selection(adults=10), now=now)

    @pytest.mark.asyncio
    async def test_quote_without_dates(self, service):
        with pytest.raises(ValidationError):
            await service.quote(BookingSelection(adults=2))

    @pytest.mark.asyncio
    async def test_voucher_discount(self, service, voucher_client, now):
        voucher_client.validate.return_value = Voucher(
            code="SUMMER20", type="DISCOUNT", discount_percent=20
        )

        context = await service.quote(_selection(voucher_code="SUMMER20"), now=now)

        assert context.success is True
        assert context.quote.discount == Decimal("79.20")
        assert context.quote.final_total == Decimal("316.80")

    @pytest.mark.asyncio
    async def test_unknown_voucher_still_prices(self, service, voucher_client, now):
        voucher_client.validate.side_effect = VoucherNotFoundError("missing", status_code=404)

        context = await service.quote(_selection(voucher_code="NOPE"), now=now)

        assert context.success is False
        assert context.reason == "Voucher NOPE not found"
        assert context.quote.discount == Decimal("0")
        assert context.quote.final_total == Decimal("396.00")

    @pytest.mark.asyncio
    async def test_voucher_for_another_room(self, service, voucher_client, now):
        voucher_client.validate.return_value = Voucher(
            code="SUITE10",
            type="DISCOUNT",
            discount_percent=10,
            room_scope="SPECIFIC_ROOMS",
            room_ids=["room-2"],
        )

        context = await service.quote(_selection(voucher_code="SUITE10"), now=now)

        assert context.errors[0]["field"] == "voucherCode"
        assert "selected room" in context.reason
        assert context.quote.final_total == Decimal("396.00")

    @pytest.mark.asyncio
    async def test_results_dict(self, service, now):
        context = await service.quote(_selection(), now=now)

        results = context.get_results()

        assert results["success"] is True
        assert results["checkout"]["totalAmount"] == 396.0
        assert results["stats"]["pipeline"]["failed_steps"] == 0


class TestCheckoutPayload:
    @pytest.mark.asyncio
    async def test_payload_for_valid_selection(self, service, now):
        payload = await service.checkout_payload(_selection(), now=now)

        assert payload["originalAmount"] == 396.0
        assert payload["paymentStructure"] == "FULL_PAYMENT"

    @pytest.mark.asyncio
    async def test_invalid_selection_raises_with_reason(self, service, now):
        with pytest.raises(ValidationError) as exc_info:
            await service.checkout_payload(
                _selection(check_in=date(2025, 6, 9), check_out=date(2025, 6, 16)), now=now
            )

        assert exc_info.value.reason == "2025-06-12 is fully booked"
