"""Booking engine facade: snapshot loading, calendar classification and quotes."""

import asyncio
from datetime import date, datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

from structlog import get_logger

from src.cache import SnapshotCache, create_snapshot_cache, window_key
from src.clients import (
    AvailabilityServiceClient,
    EnhancementCatalog,
    EnhancementCatalogClient,
    UpstreamFetchError,
    VoucherValidationClient,
)
from src.config import settings
from src.engine.errors import ValidationError
from src.engine.restrictions import RestrictionEvaluator
from src.models.calendar import CalendarSnapshot, GeneralSettings
from src.models.results import DateClassification
from src.models.selection import BookingSelection, SelectionStage
from src.services.pipeline import Pipeline, QuoteContext
from src.services.pipeline.steps import (
    ApplyVoucherStep,
    CandidateRangesStep,
    PriceQuoteStep,
    ResolveCapacityStep,
    ResolveSelectionStep,
    ValidateStayStep,
)

logger = get_logger(__name__)


class BookingEngineService:
    """Entry point used by the CLI and by embedding applications."""

    def __init__(
        self,
        cache: Optional[SnapshotCache] = None,
        availability_client: Optional[AvailabilityServiceClient] = None,
        catalog_client: Optional[EnhancementCatalogClient] = None,
        voucher_client: Optional[VoucherValidationClient] = None,
    ):
        """Initialize the service with its cache and clients."""
        self.cache = cache if cache is not None else create_snapshot_cache()
        self.availability_client = availability_client or AvailabilityServiceClient()
        self.catalog_client = catalog_client or EnhancementCatalogClient()
        self.voucher_client = voucher_client or VoucherValidationClient()
        self._in_flight: dict[str, asyncio.Task] = {}

    def _now(self, now: Optional[datetime]) -> datetime:
        if now is not None:
            return now
        return datetime.now(ZoneInfo(settings.engine.reference_timezone))

    @staticmethod
    def _default_general_settings() -> GeneralSettings:
        return GeneralSettings(
            min_stay_days=settings.engine.default_min_stay_days,
            tax_percentage=str(settings.engine.default_tax_percentage),
        )

    async def _fetch_and_cache(self, start_date: date, end_date: date) -> CalendarSnapshot:
        snapshot = await self.availability_client.fetch_calendar(start_date, end_date)
        await self.cache.put(snapshot)
        return snapshot

    async def load_snapshot(
        self,
        start_date: date,
        end_date: date,
        fallback_to_empty: bool = True,
    ) -> CalendarSnapshot:
        """Load the calendar snapshot of a window, through the cache.

        Concurrent loads of the same window share one fetch.

        Args:
            start_date: First date of the window
            end_date: Last date of the window
            fallback_to_empty: Return an empty snapshot instead of raising
                when the availability service fails

        Returns:
            CalendarSnapshot for the window

        Raises:
            UpstreamFetchError: If the fetch fails and fallback_to_empty is False
        """
        cached = await self.cache.get(start_date, end_date)
        if cached is not None:
            logger.debug("Snapshot cache hit", window=window_key(start_date, end_date))
            return cached

        key = window_key(start_date, end_date)
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_cache(start_date, end_date))
            self._in_flight[key] = task
            task.add_done_callback(lambda _: self._in_flight.pop(key, None))

        try:
            return await asyncio.shield(task)
        except UpstreamFetchError as e:
            if not fallback_to_empty:
                raise
            logger.warning(
                "Availability fetch failed, using empty snapshot",
                window=key,
                error=str(e),
            )
            return CalendarSnapshot.empty(
                start_date, end_date, general_settings=self._default_general_settings()
            )

    async def calendar(
        self,
        start_date: date,
        end_date: date,
        room_id: Optional[str] = None,
        stage: Optional[SelectionStage] = None,
        now: Optional[datetime] = None,
    ) -> list[DateClassification]:
        """Classify every date of a window for the date picker.

        Args:
            start_date: First date of the window
            end_date: Last date of the window
            room_id: Narrow booked-date checks to one room
            stage: Picker stage, arrival when omitted
            now: Evaluation instant, the current time when omitted

        Returns:
            One DateClassification per date
        """
        snapshot = await self.load_snapshot(start_date, end_date)
        room = snapshot.room(room_id) if room_id else None
        evaluator = RestrictionEvaluator(snapshot, self._now(now))
        return evaluator.classify_window(room, stage)

    def build_quote_pipeline(self) -> Pipeline:
        return Pipeline(
            "quote",
            [
                ResolveSelectionStep(),
                CandidateRangesStep(),
                ValidateStayStep(),
                ResolveCapacityStep(),
                ApplyVoucherStep(self.voucher_client),
                PriceQuoteStep(),
            ],
        )

    async def quote(
        self,
        selection: BookingSelection,
        now: Optional[datetime] = None,
        snapshot: Optional[CalendarSnapshot] = None,
    ) -> QuoteContext:
        """Validate and price a selection.

        Args:
            selection: Guest selection with dates
            now: Evaluation instant, the current time when omitted
            snapshot: Snapshot to use instead of loading the stay window

        Returns:
            QuoteContext with the quote or the reason it could not be built

        Raises:
            ValidationError: If the selection has no dates
            UnresolvedCapacityError: If no room fits the party
        """
        if not selection.has_dates:
            raise ValidationError("Select check-in and check-out dates first", field="dates")

        if snapshot is None:
            snapshot = await self.load_snapshot(selection.check_in, selection.check_out)

        context = QuoteContext(snapshot, selection, self._now(now))
        await self.build_quote_pipeline().execute(context)
        return context

    async def checkout_payload(
        self, selection: BookingSelection, now: Optional[datetime] = None
    ) -> dict[str, Any]:
        """Checkout service payload for a selection.

        Raises:
            ValidationError: With the first reason when no quote could be built
        """
        context = await self.quote(selection, now)
        if context.quote is None:
            raise ValidationError(context.reason or "Unable to price the selection")
        return context.quote.to_checkout_dict()

    async def enhancements_for(self, selection: BookingSelection) -> EnhancementCatalog:
        """Catalog of enhancements and events offered for the selected stay."""
        if not selection.has_dates:
            raise ValidationError("Select check-in and check-out dates first", field="dates")
        return await self.catalog_client.fetch_catalog(
            selection.check_in,
            selection.check_out,
            selection.selected_room_id,
            filter_locally=True,
        )

    async def close(self) -> None:
        await self.cache.close()
