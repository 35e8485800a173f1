"""Business services package."""

from stay_availability.services.availability_index import AvailabilityIndex
from stay_availability.services.inquiry import (
    InquiryError,
    build_inquiry_link,
    format_inquiry,
    format_inquiry_for,
)
from stay_availability.services.listing import StayQuery, filter_available, parse_stay_query
from stay_availability.services.refresh import AvailabilityRefresher
from stay_availability.services.scheduler import ApschedulerScheduler, Scheduler
from stay_availability.services.selection import SelectionStateMachine

__all__ = [
    "AvailabilityIndex",
    "AvailabilityRefresher",
    "ApschedulerScheduler",
    "Scheduler",
    "SelectionStateMachine",
    "InquiryError",
    "build_inquiry_link",
    "format_inquiry",
    "format_inquiry_for",
    "StayQuery",
    "filter_available",
    "parse_stay_query",
]
