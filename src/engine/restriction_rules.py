"""Compile admin booking-restriction rules into per-date restriction info."""

from datetime import date, timedelta
from typing import Optional

from structlog import get_logger

from src.models.calendar import DateRestrictionInfo
from src.models.restriction_rule import RestrictionRule, RestrictionType

logger = get_logger(__name__)


class RestrictionRuleCompiler:
    """Turns RestrictionRule definitions into a date -> DateRestrictionInfo map."""

    @staticmethod
    def _reason(rule: RestrictionRule) -> str:
        return rule.description or rule.name

    @staticmethod
    def compile_date(
        rules: list[RestrictionRule],
        day: date,
        today: date,
        room_id: Optional[str] = None,
        rate_policy_id: Optional[str] = None,
    ) -> DateRestrictionInfo:
        """Fold every rule covering a date into one DateRestrictionInfo.

        Rules are visited by descending priority, so the first reason is
        the one from the highest-priority rule and, for minimum/maximum
        length, the highest-priority rule wins. A matching exception either
        overrides the rule's length or, for closing rules, suppresses it.

        Args:
            rules: All restriction rules
            day: Date being compiled
            today: Booking date used for ADVANCE_BOOKING windows
            room_id: Room the info is compiled for, None for property-wide
            rate_policy_id: Rate the info is compiled for, None for base rate

        Returns:
            DateRestrictionInfo for the date
        """
        can_check_in = True
        can_check_out = True
        can_stay = True
        minimum_stay: Optional[int] = None
        maximum_stay: Optional[int] = None
        reasons: list[str] = []
        applicable_rates: list[str] = []

        ordered = sorted(rules, key=lambda rule: rule.priority, reverse=True)
        for rule in ordered:
            if not rule.applies_on(day, room_id, rate_policy_id):
                continue

            exception = rule.matching_exception(day, room_id, rate_policy_id)

            if rule.type == RestrictionType.MIN_LENGTH:
                length = rule.min_length
                if exception and exception.min_length_override is not None:
                    length = exception.min_length_override
                if length is None or minimum_stay is not None:
                    continue
                minimum_stay = length
            elif rule.type == RestrictionType.MAX_LENGTH:
                length = rule.max_length
                if exception and exception.max_length_override is not None:
                    length = exception.max_length_override
                if length is None or maximum_stay is not None:
                    continue
                maximum_stay = length
            elif exception is not None:
                continue
            elif rule.type == RestrictionType.CLOSE_TO_ARRIVAL:
                can_check_in = False
            elif rule.type == RestrictionType.CLOSE_TO_DEPARTURE:
                can_check_out = False
            elif rule.type == RestrictionType.CLOSE_TO_STAY:
                can_check_in = False
                can_stay = False
            elif rule.type == RestrictionType.ADVANCE_BOOKING:
                lead_days = (day - today).days
                too_soon = rule.min_advance is not None and lead_days < rule.min_advance
                too_far = rule.max_advance is not None and lead_days > rule.max_advance
                if not (too_soon or too_far):
                    continue
                can_check_in = False

            reasons.append(RestrictionRuleCompiler._reason(rule))
            applicable_rates.extend(
                rate_id for rate_id in rule.rate_policy_ids if rate_id not in applicable_rates
            )

        return DateRestrictionInfo(
            can_check_in=can_check_in,
            can_check_out=can_check_out,
            can_stay=can_stay,
            minimum_stay=minimum_stay,
            maximum_stay=maximum_stay,
            restriction_reasons=reasons,
            applicable_rate_ids=applicable_rates,
        )

    @staticmethod
    def compile_window(
        rules: list[RestrictionRule],
        start_date: date,
        end_date: date,
        today: date,
        room_id: Optional[str] = None,
        rate_policy_id: Optional[str] = None,
    ) -> dict[date, DateRestrictionInfo]:
        """Compile every date in [start_date, end_date], keeping restricted dates only.

        Returns:
            Mapping of date to restriction info; unrestricted dates are omitted
        """
        compiled: dict[date, DateRestrictionInfo] = {}
        day = start_date
        while day <= end_date:
            info = RestrictionRuleCompiler.compile_date(
                rules, day, today, room_id, rate_policy_id
            )
            if not info.is_unrestricted:
                compiled[day] = info
            day += timedelta(days=1)

        logger.debug(
            "Compiled restriction rules",
            rule_count=len(rules),
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            restricted_dates=len(compiled),
        )
        return compiled
