"""Reservation interval model and day-overlap predicate."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReservationInterval(BaseModel):
    """One source reservation, kept verbatim.

    Any interval present in an index makes its days unavailable, whatever
    the status tag says.
    """

    model_config = ConfigDict(frozen=True)

    start: date = Field(description="First reserved day (inclusive)")
    end: date = Field(description="Guest's checkout day")
    status: str = Field(default="confirmed", description="Source status tag, e.g. confirmed, blocked")
    reservation_id: str = Field(default="", description="Identifier in the source feed")
    summary: str = Field(default="", description="Display label from the source feed")

    @model_validator(mode="after")
    def check_order(self) -> "ReservationInterval":
        if self.start > self.end:
            raise ValueError(f"Interval start {self.start} is after end {self.end}")
        return self


def overlaps(
    day_start: date,
    day_end: date,
    interval: ReservationInterval,
    same_day_turnover: bool = False,
) -> bool:
    """Check whether the closed day span [day_start, day_end] touches an interval.

    By default both interval boundaries are inclusive, so a reservation's
    checkout day is blocked for a new arrival. With ``same_day_turnover``
    the interval is treated as [start, end) and the checkout day stays free.
    A zero-length interval still blocks its single day.

    Args:
        day_start: First day of the span
        day_end: Last day of the span (inclusive)
        interval: Reservation to test against
        same_day_turnover: Treat the interval end as exclusive

    Returns:
        True if the span intersects the interval
    """
    if same_day_turnover and interval.start < interval.end:
        return day_start < interval.end and interval.start <= day_end
    return day_start <= interval.end and interval.start <= day_end
