"""Pydantic models for the availability feed API responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeedBooking(BaseModel):
    """Booking record from the availability feed."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    booking_id: str = Field(alias="id")
    summary: str = Field(default="")
    start: datetime
    end: datetime
    status: str = Field(default="confirmed")

    @field_validator("booking_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Feed ids may arrive as integers."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_timestamp(cls, v):
        """Parse date-only strings and trailing 'Z' timestamps."""
        if isinstance(v, str) and v:
            if len(v) == 10:  # YYYY-MM-DD format
                try:
                    return datetime.strptime(v, "%Y-%m-%d")
                except ValueError:
                    pass
            if v.endswith("Z"):
                return v[:-1] + "+00:00"
        return v


class AvailabilityResponse(BaseModel):
    """Availability response for one property."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    property_id: int = Field(alias="propertyId")
    last_updated: Optional[datetime] = Field(None, alias="lastUpdated")
    bookings: list[FeedBooking] = Field(default_factory=list)
