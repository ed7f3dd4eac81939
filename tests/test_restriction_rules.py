"""Unit tests for compiling admin restriction rules."""

from datetime import date

from src.engine.restriction_rules import RestrictionRuleCompiler
from src.models.restriction_rule import RestrictionRule, RestrictionType, weekday_index

TODAY = date(2025, 6, 1)


def _rule(**values) -> RestrictionRule:
    data = {
        "name": "Rule",
        "startDate": "2025-06-01T00:00:00.000Z",
        "endDate": "2025-06-30T00:00:00.000Z",
    }
    data.update(values)
    return RestrictionRule.model_validate(data)


class TestWeekdayIndex:
    def test_sunday_is_zero(self):
        assert weekday_index(date(2025, 6, 1)) == 0  # Sunday
        assert weekday_index(date(2025, 6, 7)) == 6  # Saturday


class TestRestrictionRuleCompiler:
    """Tests for RestrictionRuleCompiler."""

    def test_no_rules_is_unrestricted(self):
        info = RestrictionRuleCompiler.compile_date([], date(2025, 6, 10), TODAY)

        assert info.is_unrestricted

    def test_close_to_arrival_on_saturdays(self):
        rule = _rule(
            name="No Saturday arrivals",
            type="CLOSE_TO_ARRIVAL",
            daysOfWeek=[6],
        )

        saturday = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 14), TODAY)
        friday = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 13), TODAY)

        assert saturday.can_check_in is False
        assert saturday.can_check_out is True
        assert saturday.restriction_reasons == ["No Saturday arrivals"]
        assert friday.is_unrestricted

    def test_close_to_stay_blocks_arrival_and_stay(self):
        rule = _rule(type=RestrictionType.CLOSE_TO_STAY, description="Closed for maintenance")

        info = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 10), TODAY)

        assert info.can_stay is False
        assert info.can_check_in is False
        assert info.primary_reason == "Closed for maintenance"

    def test_rule_outside_window_is_ignored(self):
        rule = _rule(type="CLOSE_TO_DEPARTURE", endDate="2025-06-05")

        info = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 10), TODAY)

        assert info.can_check_out is True

    def test_highest_priority_reason_first(self):
        low = _rule(name="Low", type="CLOSE_TO_ARRIVAL", priority=1)
        high = _rule(name="High", type="CLOSE_TO_DEPARTURE", priority=10)

        info = RestrictionRuleCompiler.compile_date([low, high], date(2025, 6, 10), TODAY)

        assert info.restriction_reasons == ["High", "Low"]

    def test_highest_priority_min_length_wins(self):
        low = _rule(name="Three nights", type="MIN_LENGTH", minLength=3, priority=1)
        high = _rule(name="Five nights", type="MIN_LENGTH", minLength=5, priority=5)

        info = RestrictionRuleCompiler.compile_date([low, high], date(2025, 6, 10), TODAY)

        assert info.minimum_stay == 5

    def test_exception_overrides_min_length(self):
        rule = _rule(
            type="MIN_LENGTH",
            minLength=4,
            exceptions=[
                {
                    "exceptionStartDate": "2025-06-20",
                    "exceptionEndDate": "2025-06-22",
                    "minLengthOverride": 2,
                }
            ],
        )

        regular = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 10), TODAY)
        excepted = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 21), TODAY)

        assert regular.minimum_stay == 4
        assert excepted.minimum_stay == 2

    def test_exception_suppresses_closing_rule(self):
        rule = _rule(
            type="CLOSE_TO_ARRIVAL",
            exceptions=[{"exceptionDaysOfWeek": [5]}],  # Fridays
        )

        friday = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 13), TODAY)
        thursday = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 12), TODAY)

        assert friday.can_check_in is True
        assert thursday.can_check_in is False

    def test_room_scope(self):
        rule = _rule(type="MAX_LENGTH", maxLength=3, roomScope="SPECIFIC_ROOMS", roomIds=["room-2"])

        for_room_1 = RestrictionRuleCompiler.compile_date(
            [rule], date(2025, 6, 10), TODAY, room_id="room-1"
        )
        for_room_2 = RestrictionRuleCompiler.compile_date(
            [rule], date(2025, 6, 10), TODAY, room_id="room-2"
        )

        assert for_room_1.maximum_stay is None
        assert for_room_2.maximum_stay == 3

    def test_specific_rate_scope_collects_rate_ids(self):
        rule = _rule(
            type="CLOSE_TO_ARRIVAL",
            rateScope="SPECIFIC_RATES",
            ratePolicyIds=["rate-nr"],
        )

        info = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 10), TODAY)
        other_rate = RestrictionRuleCompiler.compile_date(
            [rule], date(2025, 6, 10), TODAY, rate_policy_id="rate-flex"
        )

        assert info.applicable_rate_ids == ["rate-nr"]
        assert other_rate.is_unrestricted

    def test_advance_booking_window(self):
        rule = _rule(type="ADVANCE_BOOKING", minAdvance=3, maxAdvance=20)

        too_soon = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 2), TODAY)
        in_window = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 10), TODAY)
        too_far = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 25), TODAY)

        assert too_soon.can_check_in is False
        assert in_window.is_unrestricted
        assert too_far.can_check_in is False

    def test_inactive_rule_is_ignored(self):
        rule = _rule(type="CLOSE_TO_STAY", isActive=False)

        info = RestrictionRuleCompiler.compile_date([rule], date(2025, 6, 10), TODAY)

        assert info.is_unrestricted

    def test_compile_window_keeps_restricted_dates_only(self):
        rule = _rule(type="CLOSE_TO_ARRIVAL", daysOfWeek=[6])

        compiled = RestrictionRuleCompiler.compile_window(
            [rule], date(2025, 6, 1), date(2025, 6, 30), TODAY
        )

        assert sorted(compiled) == [
            date(2025, 6, 7),
            date(2025, 6, 14),
            date(2025, 6, 21),
            date(2025, 6, 28),
        ]
