"""Tests for parsing upstream payloads into models."""

from datetime import date, time
from decimal import Decimal

from src.config.settings import Settings
from src.models.calendar import BookingStatus, CalendarSnapshot, GeneralSettings
from src.models.extras import Voucher
from src.models.room import RateDatePrice, RatePolicy


class TestCalendarSnapshot:
    """Tests for CalendarSnapshot parsing and lookups."""

    def test_fixture_parses(self, snapshot):
        assert snapshot.start_date == date(2025, 6, 1)
        assert date(2025, 6, 20) in snapshot.fully_booked_dates
        assert snapshot.room("room-1").name == "Garden Room"

    def test_general_settings_list_is_unwrapped(self, snapshot):
        assert snapshot.general_settings.min_stay_days == 2
        assert snapshot.general_settings.daily_booking_start_time == time(18, 0)

    def test_general_settings_object_is_accepted(self):
        parsed = CalendarSnapshot.model_validate(
            {
                "startDate": "2025-06-01",
                "endDate": "2025-06-02",
                "generalSettings": {"minStayDays": 3, "taxPercentage": 0.22},
            }
        )

        assert parsed.general_settings.min_stay_days == 3
        assert parsed.general_settings.tax_rate == Decimal("0.22")

    def test_missing_restriction_is_unrestricted(self, snapshot):
        restriction = snapshot.restriction_for(date(2025, 6, 3))

        assert restriction.can_check_in is True
        assert restriction.can_stay is True
        assert restriction.minimum_stay is None

    def test_restriction_reasons(self, snapshot):
        restriction = snapshot.restriction_for(date(2025, 6, 15))

        assert restriction.primary_reason == "Closed for a private wedding"

    def test_booking_status_per_room(self, snapshot, garden_room):
        assert snapshot.booking_status(date(2025, 6, 12)) == BookingStatus.PARTIALLY_BOOKED
        assert snapshot.booking_status(date(2025, 6, 12), garden_room) == BookingStatus.FULLY_BOOKED
        assert snapshot.booking_status(date(2025, 6, 3), garden_room) == BookingStatus.AVAILABLE

    def test_empty_snapshot(self):
        empty = CalendarSnapshot.empty(date(2025, 6, 1), date(2025, 6, 3))

        assert empty.is_empty
        assert empty.dates() == [date(2025, 6, 1), date(2025, 6, 2), date(2025, 6, 3)]
        assert empty.general_settings == GeneralSettings()


class TestRatePolicy:
    def test_date_price_time_suffix_is_stripped(self):
        override = RateDatePrice.model_validate(
            {"roomId": "room-1", "date": "2025-06-11T00:00:00.000Z", "price": 140}
        )

        assert override.date == date(2025, 6, 11)

    def test_inactive_override_is_skipped(self, flexible_rate):
        assert flexible_rate.date_price_for("room-1", date(2025, 6, 5)).price == Decimal("150")
        assert flexible_rate.date_price_for("room-1", date(2025, 6, 6)) is None

    def test_override_for_other_room_is_ignored(self, flexible_rate):
        assert flexible_rate.date_price_for("room-2", date(2025, 6, 5)) is None

    def test_null_adjustment_is_zero(self):
        policy = RatePolicy.model_validate({"id": "r", "name": "R", "adjustmentPercentage": None})

        assert policy.adjustment_percentage == Decimal("0")


class TestVoucher:
    """Tests for Voucher.inapplicable_reason."""

    def _voucher(self, **values) -> Voucher:
        data = {"code": "SUMMER20", "type": "DISCOUNT", "discountPercent": 20}
        data.update(values)
        return Voucher.model_validate(data)

    def test_applicable(self):
        voucher = self._voucher(validFrom="2025-01-01", validTill="2025-12-31")

        assert voucher.inapplicable_reason("room-1", "rate-flex", date(2025, 6, 1)) is None

    def test_inactive(self):
        reason = self._voucher(isActive=False).inapplicable_reason("room-1", None, date(2025, 6, 1))

        assert "no longer active" in reason

    def test_expired(self):
        voucher = self._voucher(validTill="2025-05-31T00:00:00.000Z")

        assert voucher.inapplicable_reason("room-1", None, date(2025, 6, 1)) == (
            "Voucher SUMMER20 expired on 2025-05-31"
        )

    def test_not_yet_valid(self):
        voucher = self._voucher(validFrom="2025-07-01")

        assert "not valid before" in voucher.inapplicable_reason("room-1", None, date(2025, 6, 1))

    def test_rate_scope(self):
        voucher = self._voucher(rateScope="SPECIFIC_RATES", ratePolicyIds=["rate-nr"])

        assert voucher.inapplicable_reason("room-1", "rate-nr", date(2025, 6, 1)) is None
        assert "selected rate" in voucher.inapplicable_reason("room-1", "rate-flex", date(2025, 6, 1))

    def test_null_lists_are_empty(self):
        voucher = self._voucher(products=None, roomIds=None)

        assert voucher.products == []
        assert voucher.room_ids == []


class TestSettings:
    def test_defaults(self):
        config = Settings()

        assert config.engine.reference_timezone == "Europe/Rome"
        assert config.engine.default_min_stay_days == 2
        assert config.cache_backend in ("memory", "redis")
        assert not config.booking_api_base_url.endswith("/")
