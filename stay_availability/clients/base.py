"""Protocol for reservation data sources."""

from typing import Protocol

from stay_availability.models.reservation import ReservationInterval


class FetchError(Exception):
    """Raised when reservation data for a property cannot be obtained."""

    pass


class AvailabilitySource(Protocol):
    """Anything that can supply the current reservation list for a property."""

    async def fetch_reservations(self, property_id: int) -> list[ReservationInterval]:
        """Fetch every current reservation for a property.

        Raises:
            FetchError: If the data cannot be obtained
        """
        ...
