"""Per-property availability index built from reservation intervals."""

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from structlog import get_logger

from stay_availability.clients.base import AvailabilitySource, FetchError
from stay_availability.config import settings
from stay_availability.models.reservation import ReservationInterval, overlaps

logger = get_logger(__name__)


def _days(start: date, end: date) -> Iterable[date]:
    """Yield every date in [start, end)."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


class AvailabilityIndex:
    """Holds every reservation interval of one property and answers date queries.

    The interval set is never merged or edited; refresh replaces it as a
    whole, and a failed refresh leaves it as it was.
    """

    def __init__(
        self,
        property_id: int,
        intervals: Iterable[ReservationInterval] = (),
        last_updated: Optional[datetime] = None,
        same_day_turnover: Optional[bool] = None,
    ):
        """Initialize the index.

        Args:
            property_id: Property identifier
            intervals: Initial reservation intervals
            last_updated: Timestamp of the data in ``intervals``
            same_day_turnover: Override for BOOKING_SAME_DAY_TURNOVER
        """
        self.property_id = property_id
        self.intervals: frozenset[ReservationInterval] = frozenset(intervals)
        self.last_updated = last_updated
        if same_day_turnover is None:
            same_day_turnover = settings.booking.same_day_turnover
        self.same_day_turnover = same_day_turnover
        self.logger = logger.bind(property_id=property_id)

    def __len__(self) -> int:
        return len(self.intervals)

    def is_blocked(self, day: date) -> bool:
        """Check whether any reservation touches the given day."""
        return any(
            overlaps(day, day, interval, self.same_day_turnover)
            for interval in self.intervals
        )

    def is_range_available(self, check_in: date, check_out: date) -> bool:
        """Check whether a stay from check_in to check_out can be booked.

        Both endpoints must be free, check_out must come after check_in, and
        no day strictly between them may be blocked.
        """
        if check_out <= check_in:
            return False
        if self.is_blocked(check_in) or self.is_blocked(check_out):
            return False
        return not any(
            self.is_blocked(day)
            for day in _days(check_in + timedelta(days=1), check_out)
        )

    def blocked_dates(self, start: date, end: date) -> list[date]:
        """List blocked dates in the closed window [start, end]."""
        return [day for day in _days(start, end + timedelta(days=1)) if self.is_blocked(day)]

    def replace(
        self,
        intervals: Iterable[ReservationInterval],
        last_updated: Optional[datetime] = None,
    ) -> "AvailabilityIndex":
        """Swap in a new interval set and update timestamp together.

        Args:
            intervals: The complete new set of reservations
            last_updated: Timestamp of the new data, defaults to now (UTC)

        Returns:
            Self for method chaining
        """
        self.intervals = frozenset(intervals)
        self.last_updated = last_updated or datetime.now(timezone.utc)
        return self

    async def refresh(self, source: AvailabilitySource) -> "AvailabilityIndex":
        """Reload the intervals from a data source.

        Args:
            source: Data source to fetch reservations from

        Returns:
            Self, with the new intervals and timestamp

        Raises:
            FetchError: If the source fails; the index is left untouched
        """
        try:
            intervals = await source.fetch_reservations(self.property_id)
        except FetchError:
            self.logger.warning("Availability refresh failed, keeping previous data")
            raise
        except Exception as e:
            self.logger.warning(
                "Availability refresh failed, keeping previous data",
                error=str(e),
            )
            raise FetchError(
                f"Failed to refresh availability for property {self.property_id}: {e}"
            ) from e

        self.replace(intervals)
        self.logger.info(
            "Availability refreshed",
            interval_count=len(self.intervals),
            last_updated=self.last_updated.isoformat(),
        )
        return self
