"""Enhancement Catalog Service client."""

from datetime import date
from typing import Any, NamedTuple, Optional

from pydantic import ValidationError as PydanticValidationError
from structlog import get_logger

from src.clients.base import BookingAPIClient, UpstreamFetchError
from src.config import settings
from src.engine.catalog import filter_available_enhancements, stay_weekdays
from src.models.extras import Enhancement, Event

logger = get_logger(__name__)


class EnhancementCatalog(NamedTuple):
    enhancements: list[Enhancement]
    events: list[Event]


class EnhancementCatalogClient(BookingAPIClient):
    """Fetches the enhancements and events offered for a stay."""

    async def fetch_catalog(
        self,
        arrival: date,
        departure: date,
        room_id: Optional[str] = None,
        filter_locally: bool = False,
    ) -> EnhancementCatalog:
        """Fetch the catalog for a stay.

        The service filters by weekday; with filter_locally the full
        availability rule (type, validity window, room scope) is re-applied
        to the response.

        Args:
            arrival: Check-in date
            departure: Check-out date
            room_id: Selected room
            filter_locally: Re-check every entry against the stay

        Returns:
            EnhancementCatalog with enhancements and events

        Raises:
            UpstreamFetchError: If the request fails or the payload is malformed
        """
        body: dict[str, Any] = {
            "startDate": arrival.isoformat(),
            "endDate": departure.isoformat(),
            "days": stay_weekdays(arrival, departure),
        }
        if room_id:
            body["roomId"] = room_id

        payload = await self._make_request(
            "POST", settings.booking_api.enhancements_path, data=body
        )

        # Either a bare list of enhancements or {"enhancements": [...], "events": [...]}
        if isinstance(payload, list):
            raw_enhancements, raw_events = payload, []
        elif isinstance(payload, dict):
            raw_enhancements = payload.get("enhancements") or []
            raw_events = payload.get("events") or []
        else:
            raise UpstreamFetchError("Enhancement catalog response is not a list or object")

        try:
            enhancements = [Enhancement.model_validate(item) for item in raw_enhancements]
            events = [Event.model_validate(item) for item in raw_events]
        except PydanticValidationError as e:
            logger.error("Invalid enhancement catalog response", errors=e.error_count())
            raise UpstreamFetchError(f"Invalid enhancement catalog response: {e}") from e

        if filter_locally:
            enhancements = filter_available_enhancements(enhancements, arrival, departure, room_id)
            events = [event for event in events if arrival <= event.event_date < departure]

        logger.info(
            "Fetched enhancement catalog",
            arrival=arrival.isoformat(),
            departure=departure.isoformat(),
            room_id=room_id,
            enhancements=len(enhancements),
            events=len(events),
        )
        return EnhancementCatalog(enhancements=enhancements, events=events)
