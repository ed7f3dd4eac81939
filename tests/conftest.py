import json
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from src.engine.restrictions import RestrictionEvaluator
from src.models.calendar import CalendarSnapshot

FIXTURES_DIR = Path(__file__).parent / "fixtures"
ROME = ZoneInfo("Europe/Rome")


@pytest.fixture
def calendar_response():
    """Load availability calendar response from fixture."""
    with open(FIXTURES_DIR / "availability" / "calendar_response.json") as f:
        return json.load(f)


@pytest.fixture
def enhancements_response():
    """Load enhancement catalog response from fixture."""
    with open(FIXTURES_DIR / "catalog" / "enhancements_response.json") as f:
        return json.load(f)


@pytest.fixture
def snapshot(calendar_response):
    """Calendar snapshot for June 2025."""
    return CalendarSnapshot.model_validate(calendar_response["data"])


@pytest.fixture
def now():
    """Morning of June 1st 2025, before the 18:00 same-day cutoff."""
    return datetime(2025, 6, 1, 9, 0, tzinfo=ROME)


@pytest.fixture
def evaluator(snapshot, now):
    return RestrictionEvaluator(snapshot, now, reference_timezone="Europe/Rome")


@pytest.fixture
def garden_room(snapshot):
    return snapshot.room("room-1")


@pytest.fixture
def family_suite(snapshot):
    return snapshot.room("room-2")


@pytest.fixture
def flexible_rate(garden_room):
    return garden_room.room_rate_for("rate-flex").rate_policy


@pytest.fixture
def non_refundable_rate(garden_room):
    return garden_room.room_rate_for("rate-nr").rate_policy


@pytest.fixture
def june():
    """Shorthand for a date in June 2025."""

    def _day(day: int) -> date:
        return date(2025, 6, day)

    return _day
