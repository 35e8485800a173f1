"""Selection phase enums and state snapshot."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SelectionPhase(str, Enum):
    """Phases of the check-in/check-out picking flow.

    IDLE -> PICKING_CHECK_IN -> PICKING_CHECK_OUT -> COMPLETE
    """
    IDLE = "idle"
    PICKING_CHECK_IN = "picking_check_in"
    PICKING_CHECK_OUT = "picking_check_out"
    COMPLETE = "complete"


class PickTarget(str, Enum):
    """Which date the guest is about to pick."""
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class SelectionState(BaseModel):
    """Immutable snapshot of a guest's date selection."""

    model_config = ConfigDict(frozen=True)

    phase: SelectionPhase = SelectionPhase.IDLE
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guest_count: int = Field(default=1, ge=1)

    @property
    def nights(self) -> int:
        """Number of nights in a complete selection, 0 otherwise."""
        if self.check_in is None or self.check_out is None:
            return 0
        return (self.check_out - self.check_in).days

    @property
    def is_complete(self) -> bool:
        return self.phase == SelectionPhase.COMPLETE
