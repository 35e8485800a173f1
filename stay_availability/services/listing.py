"""Stay query parsing and listing availability filter."""

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict
from structlog import get_logger

from stay_availability.services.availability_index import AvailabilityIndex

logger = get_logger(__name__)


class StayQuery(BaseModel):
    """Validated check-in/check-out pair taken from page query parameters."""

    model_config = ConfigDict(frozen=True)

    check_in: Optional[date] = None
    check_out: Optional[date] = None

    @property
    def has_dates(self) -> bool:
        return self.check_in is not None and self.check_out is not None


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.debug("Ignoring malformed query date", value=value)
        return None


def parse_stay_query(params: Mapping[str, str], today: date) -> StayQuery:
    """Read checkIn/checkOut query parameters.

    A check-in that is malformed or in the past is dropped. A check-out is
    kept only when it is well-formed, not in the past and after a kept
    check-in.

    Args:
        params: Query parameters
        today: Current calendar date

    Returns:
        StayQuery with whichever dates survived validation
    """
    check_in = _parse_date(params.get("checkIn"))
    if check_in is not None and check_in < today:
        check_in = None

    check_out = _parse_date(params.get("checkOut"))
    if check_out is not None and (check_in is None or check_out < today or check_out <= check_in):
        check_out = None

    return StayQuery(check_in=check_in, check_out=check_out)


def filter_available(
    indexes: Iterable[AvailabilityIndex],
    check_in: date,
    check_out: date,
) -> list[int]:
    """Return ids of properties that can host the whole stay.

    Args:
        indexes: One availability index per property
        check_in: Arrival date
        check_out: Departure date

    Returns:
        Property ids whose index has the range free, in input order
    """
    available = [
        index.property_id
        for index in indexes
        if index.is_range_available(check_in, check_out)
    ]
    logger.info(
        "Filtered listing by availability",
        check_in=check_in.isoformat(),
        check_out=check_out.isoformat(),
        available_count=len(available),
    )
    return available
