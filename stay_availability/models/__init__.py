"""Domain and feed data models."""

from stay_availability.models.feed import AvailabilityResponse, FeedBooking
from stay_availability.models.reservation import ReservationInterval, overlaps
from stay_availability.models.selection import (
    PickTarget,
    SelectionPhase,
    SelectionState,
)

__all__ = [
    "AvailabilityResponse",
    "FeedBooking",
    "ReservationInterval",
    "overlaps",
    "PickTarget",
    "SelectionPhase",
    "SelectionState",
]
