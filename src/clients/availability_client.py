"""Availability Service client."""

from datetime import date
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError
from structlog import get_logger

from src.clients.base import BookingAPIClient, UpstreamFetchError
from src.config import settings
from src.models.calendar import CalendarSnapshot

logger = get_logger(__name__)


class AvailabilityServiceClient(BookingAPIClient):
    """Fetches calendar snapshots for a date window."""

    async def fetch_calendar(
        self,
        start_date: date,
        end_date: date,
        category_id: Optional[str] = None,
    ) -> CalendarSnapshot:
        """Fetch the availability calendar for [start_date, end_date].

        Args:
            start_date: First date of the window
            end_date: Last date of the window
            category_id: Optional room category filter

        Returns:
            CalendarSnapshot built from the response

        Raises:
            UpstreamFetchError: If the service is unreachable, answers non-2xx
                or returns a payload that is not a calendar
        """
        params: dict[str, Any] = {
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
        }
        if category_id:
            params["categoryId"] = category_id

        payload = await self._make_request(
            "GET", settings.booking_api.calendar_path, params=params
        )
        if not isinstance(payload, dict):
            raise UpstreamFetchError("Availability response is not an object")

        payload.setdefault("startDate", start_date.isoformat())
        payload.setdefault("endDate", end_date.isoformat())
        if not payload.get("generalSettings"):
            logger.warning(
                "Availability response without general settings, using defaults",
                start_date=start_date.isoformat(),
                end_date=end_date.isoformat(),
            )
            payload["generalSettings"] = {
                "minStayDays": settings.engine.default_min_stay_days,
                "taxPercentage": str(settings.engine.default_tax_percentage),
            }

        try:
            snapshot = CalendarSnapshot.model_validate(payload)
        except PydanticValidationError as e:
            logger.error(
                "Invalid availability response",
                start_date=start_date.isoformat(),
                end_date=end_date.isoformat(),
                errors=e.error_count(),
            )
            raise UpstreamFetchError(f"Invalid availability response: {e}") from e

        logger.info(
            "Fetched availability calendar",
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            available_rooms=len(snapshot.available_rooms),
            fully_booked_dates=len(snapshot.fully_booked_dates),
        )
        return snapshot
