"""Booking inquiry message formatting."""

from datetime import date
from typing import Optional
from urllib.parse import quote

from stay_availability.config import settings
from stay_availability.models.selection import SelectionState
from stay_availability.services.availability_index import AvailabilityIndex

# Sub-delims left unescaped in addition to quote()'s defaults
URI_COMPONENT_SAFE = "!*'()"

# Fixed English names, independent of the process locale
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class InquiryError(Exception):
    """Raised when an inquiry is requested for an incomplete selection."""

    pass


def format_long_date(day: date) -> str:
    """Format a date as e.g. 'Friday, June 6, 2025'."""
    return f"{DAY_NAMES[day.weekday()]}, {MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"


def format_inquiry(
    property_name: str,
    check_in: date,
    check_out: date,
    guest_count: int,
) -> str:
    """Render a booking inquiry message.

    Args:
        property_name: Name of the property being inquired about
        check_in: Arrival date
        check_out: Departure date
        guest_count: Number of guests

    Returns:
        Human-readable inquiry message
    """
    return (
        f"Hello! I would like to book {property_name} for the following dates:\n"
        "\n"
        f"📅 Check-in: {format_long_date(check_in)}\n"
        f"📅 Check-out: {format_long_date(check_out)}\n"
        f"👥 Guests: {guest_count}\n"
        "\n"
        "Thanks!"
    )


def format_inquiry_for(
    state: SelectionState,
    property_name: str,
    index: Optional[AvailabilityIndex] = None,
) -> str:
    """Render the inquiry for a completed selection.

    When an index is given, the stay is checked against it first so a
    reservation added by a refresh after completion is caught.

    Raises:
        InquiryError: If the selection is not complete or no longer available
    """
    if not state.is_complete or state.check_in is None or state.check_out is None:
        raise InquiryError(f"Selection is not complete (phase={state.phase.value})")
    if index is not None and not index.is_range_available(state.check_in, state.check_out):
        raise InquiryError(
            f"Stay {state.check_in.isoformat()} to {state.check_out.isoformat()} is no longer available"
        )
    return format_inquiry(property_name, state.check_in, state.check_out, state.guest_count)


def build_inquiry_link(
    message: str,
    phone: Optional[str] = None,
    base_url: Optional[str] = None,
) -> str:
    """Append a URL-encoded message to the messaging deep link.

    Args:
        message: Inquiry message
        phone: Recipient number without '+' or spaces, defaults to BOOKING_INQUIRY_PHONE
        base_url: Deep link base, defaults to BOOKING_INQUIRY_BASE_URL

    Returns:
        Deep link URL carrying the message
    """
    phone = phone or settings.booking.inquiry_phone
    base_url = (base_url or settings.booking.inquiry_base_url).rstrip("/")
    return f"{base_url}/{phone}?text={quote(message, safe=URI_COMPONENT_SAFE)}"
