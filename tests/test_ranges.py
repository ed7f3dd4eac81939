"""Unit tests for the partial-availability range finder."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from src.engine.ranges import PartialAvailabilityFinder
from src.engine.restrictions import RestrictionEvaluator
from src.models.calendar import CalendarSnapshot


def d(day: int) -> date:
    return date(2025, 6, day)


class TestPartialAvailabilityFinder:
    """Tests for PartialAvailabilityFinder."""

    def test_single_booked_night_splits_window(self):
        ranges = PartialAvailabilityFinder.find_ranges([d(5)], d(1), d(10), min_stay=2)

        assert [(r.start, r.end) for r in ranges] == [(d(1), d(5)), (d(6), d(10))]

    def test_short_gaps_are_dropped(self):
        ranges = PartialAvailabilityFinder.find_ranges([d(3), d(7)], d(1), d(10), min_stay=3)

        assert all(r.nights >= 3 for r in ranges)
        assert [(r.start, r.end) for r in ranges] == [(d(4), d(7))]

    def test_booked_window_start_truncates(self):
        ranges = PartialAvailabilityFinder.find_ranges([d(1)], d(1), d(5), min_stay=2)

        assert [(r.start, r.end) for r in ranges] == [(d(2), d(5))]

    def test_booked_last_night_truncates(self):
        ranges = PartialAvailabilityFinder.find_ranges([d(4)], d(1), d(5), min_stay=2)

        assert [(r.start, r.end) for r in ranges] == [(d(1), d(4))]

    def test_booked_departure_day_is_outside_window(self):
        ranges = PartialAvailabilityFinder.find_ranges([d(5)], d(1), d(5), min_stay=2)

        assert [(r.start, r.end) for r in ranges] == [(d(1), d(5))]

    def test_no_gap_long_enough(self):
        ranges = PartialAvailabilityFinder.find_ranges([d(2), d(4)], d(1), d(6), min_stay=2)

        assert ranges == []

    def test_ranges_contain_no_booked_night(self):
        booked = [d(3), d(4), d(9), d(15)]

        ranges = PartialAvailabilityFinder.find_ranges(booked, d(1), d(20), min_stay=2)

        assert ranges
        for candidate in ranges:
            assert candidate.nights >= 2
            nights = {candidate.start + timedelta(days=i) for i in range(candidate.nights)}
            assert nights.isdisjoint(booked)

    def test_zero_min_stay_still_needs_one_night(self):
        ranges = PartialAvailabilityFinder.find_ranges([d(2)], d(1), d(4), min_stay=0)

        assert [(r.start, r.end) for r in ranges] == [(d(1), d(2)), (d(3), d(4))]

    def test_is_partial_for_room(self, evaluator, garden_room):
        assert PartialAvailabilityFinder.is_partial(evaluator, garden_room, d(10), d(14)) is True
        assert PartialAvailabilityFinder.is_partial(evaluator, garden_room, d(2), d(5)) is False
        assert PartialAvailabilityFinder.is_partial(evaluator, garden_room, d(12), d(13)) is False

    def test_property_wide_full_night_makes_stay_partial(self, evaluator, garden_room):
        # 06-20 is fully booked for the whole property, not in the room's own bookings
        assert PartialAvailabilityFinder.is_partial(evaluator, garden_room, d(17), d(23)) is True

        ranges = PartialAvailabilityFinder.find_ranges_for_room(evaluator, garden_room, d(17), d(23))

        assert [(r.start, r.end) for r in ranges] == [(d(17), d(20)), (d(21), d(23))]

    def test_find_ranges_for_room(self, evaluator, garden_room):
        # 06-12 booked for the room, 06-15 closed to stays and check-out
        ranges = PartialAvailabilityFinder.find_ranges_for_room(evaluator, garden_room, d(9), d(16), 2)

        assert [(r.start, r.end) for r in ranges] == [(d(9), d(12))]

    def test_closed_night_is_not_offered(self, evaluator, garden_room):
        ranges = PartialAvailabilityFinder.find_ranges_for_room(evaluator, garden_room, d(13), d(17))

        assert ranges == []


class TestCandidateRangesAreBookable:
    """Every offered range passes stay validation for the same room."""

    def _evaluator(self, date_restrictions=None, fully_booked=("2025-06-11",)):
        snapshot = CalendarSnapshot.model_validate(
            {
                "startDate": "2025-06-01",
                "endDate": "2025-06-30",
                "fullyBookedDates": list(fully_booked),
                "dateRestrictions": date_restrictions or {},
                "availableRooms": [
                    {"id": "r1", "price": 100, "capacity": 2, "bookedDates": ["2025-06-13"]}
                ],
                "generalSettings": [{"minStayDays": 1, "taxPercentage": "0.10"}],
            }
        )
        now = datetime(2025, 6, 1, 9, 0, tzinfo=ZoneInfo("Europe/Rome"))
        return RestrictionEvaluator(snapshot, now, reference_timezone="Europe/Rome")

    def _assert_bookable(self, evaluator, ranges):
        room = evaluator.snapshot.room("r1")
        for candidate in ranges:
            validation = evaluator.validate_stay(candidate.start, candidate.end, room)
            assert validation.valid, (candidate, validation.reason)

    def test_property_wide_full_night_splits_ranges(self):
        evaluator = self._evaluator()
        room = evaluator.snapshot.room("r1")

        ranges = PartialAvailabilityFinder.find_ranges_for_room(evaluator, room, d(10), d(16))

        assert [(r.start, r.end) for r in ranges] == [(d(10), d(11)), (d(12), d(13)), (d(14), d(16))]
        self._assert_bookable(evaluator, ranges)

    def test_night_closed_to_stays_splits_ranges(self):
        evaluator = self._evaluator(
            date_restrictions={"2025-06-11": {"canStay": False, "restrictionReasons": ["Closed"]}},
            fully_booked=(),
        )
        room = evaluator.snapshot.room("r1")

        ranges = PartialAvailabilityFinder.find_ranges_for_room(evaluator, room, d(10), d(16))

        assert all(not (r.start <= d(11) < r.end) for r in ranges)
        assert (d(10), d(13)) not in [(r.start, r.end) for r in ranges]
        self._assert_bookable(evaluator, ranges)
