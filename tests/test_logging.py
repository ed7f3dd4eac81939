"""Tests for the logging processors."""

from datetime import date
from decimal import Decimal

from src.config.logging import prefix_property_code, stringify_domain_values


class TestLoggingProcessors:
    def test_property_code_prefix(self):
        event = prefix_property_code(None, "info", {"event": "Priced selection", "property_code": "AGRI01"})

        assert event["event"] == "[AGRI01] Priced selection"

    def test_no_prefix_without_property_code(self):
        event = prefix_property_code(None, "info", {"event": "Priced selection"})

        assert event["event"] == "Priced selection"

    def test_money_and_dates_become_strings(self):
        event = stringify_domain_values(
            None,
            "info",
            {"event": "x", "grand_total": Decimal("396.00"), "arrival": date(2025, 6, 2), "nights": 3},
        )

        assert event["grand_total"] == "396.00"
        assert event["arrival"] == "2025-06-02"
        assert event["nights"] == 3
