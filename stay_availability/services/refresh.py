"""Periodic availability refresh with staleness control."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Optional

from structlog import get_logger

from stay_availability.clients.base import AvailabilitySource, FetchError
from stay_availability.config import settings
from stay_availability.services.availability_index import AvailabilityIndex
from stay_availability.services.scheduler import Scheduler

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AvailabilityRefresher:
    """Keeps an AvailabilityIndex current.

    Refreshes once on start and then on a fixed interval. Data younger
    than ``stale_seconds`` is served from the index without a new fetch.
    Failed refreshes keep the previous data and mark it stale.
    At most one refresh is in flight; concurrent callers share it.
    """

    def __init__(
        self,
        index: AvailabilityIndex,
        source: AvailabilitySource,
        scheduler: Scheduler,
        interval_seconds: Optional[float] = None,
        stale_seconds: Optional[float] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the refresher.

        Args:
            index: Index to keep up to date
            source: Data source to fetch reservations from
            scheduler: Scheduler driving the repeating refresh
            interval_seconds: Override for REFRESH_INTERVAL_SECONDS
            stale_seconds: Override for REFRESH_STALE_SECONDS
            clock: Returns the current time
        """
        self.index = index
        self.source = source
        self.scheduler = scheduler
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.refresh.interval_seconds
        )
        self.stale_after = timedelta(
            seconds=stale_seconds if stale_seconds is not None else settings.refresh.stale_seconds
        )
        self.clock = clock
        self.job_id = f"availability_refresh:{index.property_id}"

        self.fetched_at: Optional[datetime] = None
        self.last_error: Optional[FetchError] = None
        self._in_flight: Optional[asyncio.Task] = None
        self.logger = logger.bind(property_id=index.property_id)

    @property
    def is_stale(self) -> bool:
        """True when there is no data yet, the last refresh failed, or data aged out."""
        if self.last_error is not None or self.fetched_at is None:
            return True
        return self.clock() - self.fetched_at >= self.stale_after

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    async def start(self) -> bool:
        """Refresh now and schedule the repeating refresh.

        Returns:
            Whether the initial refresh succeeded
        """
        success = await self.refresh()
        self.scheduler.schedule_repeating(self.refresh, self.interval_seconds, self.job_id)
        return success

    def stop(self) -> None:
        self.scheduler.cancel(self.job_id)

    async def refresh(self) -> bool:
        """Run one refresh, or join the one already in flight.

        Returns:
            True if the index now holds freshly fetched data
        """
        if self._in_flight is None or self._in_flight.done():
            self._in_flight = asyncio.ensure_future(self._refresh_once())
        # Shielded so one cancelled caller does not cancel the fetch for the others
        return await asyncio.shield(self._in_flight)

    async def _refresh_once(self) -> bool:
        try:
            await self.index.refresh(self.source)
        except FetchError as e:
            self.last_error = e
            self.logger.warning(
                "Serving stale availability",
                error=str(e),
                last_updated=self.index.last_updated.isoformat() if self.index.last_updated else None,
            )
            return False

        self.last_error = None
        self.fetched_at = self.clock()
        return True

    async def get(self, force: bool = False) -> AvailabilityIndex:
        """Return the index, refetching only if forced or stale.

        A failed refetch still returns the index with its previous data.
        """
        if force or self.is_stale:
            await self.refresh()
        return self.index
