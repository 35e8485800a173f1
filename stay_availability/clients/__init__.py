"""API clients package."""

from stay_availability.clients.availability_client import (
    AvailabilityAPIClient,
    AvailabilityAPIClientError,
    AvailabilityAPINotFoundError,
    AvailabilityAPIServerError,
)
from stay_availability.clients.base import AvailabilitySource, FetchError

__all__ = [
    "AvailabilityAPIClient",
    "AvailabilityAPIClientError",
    "AvailabilityAPINotFoundError",
    "AvailabilityAPIServerError",
    "AvailabilitySource",
    "FetchError",
]
