"""Transformer for converting availability feed bookings to reservation intervals."""

from datetime import date, datetime
from typing import Any

from structlog import get_logger

from stay_availability.models.feed import AvailabilityResponse, FeedBooking
from stay_availability.models.reservation import ReservationInterval

logger = get_logger(__name__)


class IntervalTransformer:
    """Transforms feed bookings into ReservationInterval objects."""

    @staticmethod
    def _get_date(value: datetime | date | str) -> date:
        """Reduce a timestamp to its calendar date.

        Timestamps are taken in the timezone they were sent in; no
        conversion is applied.

        Args:
            value: datetime, date or ISO string

        Returns:
            Calendar date
        """
        if isinstance(value, str):
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        if isinstance(value, datetime):
            return value.date()
        return value

    @staticmethod
    def transform_booking(booking: FeedBooking) -> ReservationInterval:
        """Transform a single feed booking.

        Args:
            booking: Booking record from the feed

        Returns:
            ReservationInterval for the booking

        Raises:
            ValueError: If the booking ends before it starts
        """
        return ReservationInterval(
            start=IntervalTransformer._get_date(booking.start),
            end=IntervalTransformer._get_date(booking.end),
            status=booking.status,
            reservation_id=booking.booking_id,
            summary=booking.summary,
        )

    @staticmethod
    def transform(response_data: dict[str, Any] | AvailabilityResponse) -> list[ReservationInterval]:
        """Transform an availability response to reservation intervals.

        Bookings that end before they start are skipped with a warning;
        every other booking becomes one interval, verbatim and unmerged.

        Args:
            response_data: Raw JSON payload or parsed AvailabilityResponse

        Returns:
            List of reservation intervals

        Raises:
            pydantic.ValidationError: If the payload does not match the feed schema
        """
        if isinstance(response_data, AvailabilityResponse):
            response = response_data
        else:
            response = AvailabilityResponse.model_validate(response_data)

        intervals = []
        skipped = 0
        for booking in response.bookings:
            try:
                intervals.append(IntervalTransformer.transform_booking(booking))
            except ValueError as e:
                skipped += 1
                logger.warning(
                    "Skipping malformed booking",
                    property_id=response.property_id,
                    booking_id=booking.booking_id,
                    error=str(e),
                )

        logger.debug(
            "Transformed availability bookings",
            property_id=response.property_id,
            interval_count=len(intervals),
            skipped=skipped,
        )
        return intervals
