"""Check-in/check-out selection state machine."""

from collections.abc import Callable
from datetime import date, timedelta
from typing import Optional

from structlog import get_logger

from stay_availability.models.selection import PickTarget, SelectionPhase, SelectionState
from stay_availability.services.availability_index import AvailabilityIndex

logger = get_logger(__name__)


class SelectionStateMachine:
    """Tracks a guest's two-step date selection against an availability index.

    Every transition either swaps in a new SelectionState snapshot or leaves
    the current one untouched. Rejected selections are normal guidance and
    are never raised as errors.

    Phase is exposed as data; deciding which calendar to render from it is
    up to the caller.
    """

    def __init__(
        self,
        index: AvailabilityIndex,
        max_guests: int,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the state machine.

        Args:
            index: Availability index consulted on every candidate date
            max_guests: Property's maximum occupancy
            today: Clock returning the current calendar date
        """
        if max_guests < 1:
            raise ValueError(f"max_guests must be at least 1, got {max_guests}")
        self.index = index
        self.max_guests = max_guests
        self.today = today
        self.state = SelectionState()
        self.logger = logger.bind(property_id=index.property_id)

    @property
    def phase(self) -> SelectionPhase:
        return self.state.phase

    def _set(self, **changes) -> None:
        self.state = self.state.model_copy(update=changes)

    def _reject(self, reason: str, day: Optional[date] = None) -> bool:
        self.logger.debug(
            "Selection rejected",
            reason=reason,
            date=day.isoformat() if day else None,
            phase=self.state.phase.value,
        )
        return False

    def is_selectable(self, day: date) -> bool:
        """Check whether a day can be picked at all (not past, not blocked)."""
        return day >= self.today() and not self.index.is_blocked(day)

    def _stay_is_clear(self, check_in: date, check_out: date) -> bool:
        """No blocked day strictly between check_in and check_out."""
        day = check_in + timedelta(days=1)
        while day < check_out:
            if self.index.is_blocked(day):
                return False
            day += timedelta(days=1)
        return True

    def is_valid_check_out(self, day: date) -> bool:
        """Check whether a day would be accepted as check-out right now.

        Used to disable cells in a check-out calendar.
        """
        check_in = self.state.check_in
        if check_in is None or day <= check_in:
            return False
        return self.is_selectable(day) and self._stay_is_clear(check_in, day)

    def begin_picking(self, target: PickTarget) -> bool:
        """Open the picker for check-in or check-out.

        Dates are left as they are. Picking a check-out requires a check-in.

        Returns:
            True if the phase changed
        """
        if target == PickTarget.CHECK_OUT:
            if self.state.check_in is None:
                return self._reject("check-out picker needs a check-in")
            self._set(phase=SelectionPhase.PICKING_CHECK_OUT)
        else:
            self._set(phase=SelectionPhase.PICKING_CHECK_IN)
        return True

    def select_date(self, day: date) -> bool:
        """Offer a date to the picker that is currently open.

        Returns:
            True if the date was accepted
        """
        phase = self.state.phase

        if phase not in (SelectionPhase.PICKING_CHECK_IN, SelectionPhase.PICKING_CHECK_OUT):
            return self._reject("no picker open", day)
        if day < self.today():
            return self._reject("date in the past", day)
        if self.index.is_blocked(day):
            return self._reject("date blocked", day)

        if phase == SelectionPhase.PICKING_CHECK_IN:
            self._set(
                check_in=day,
                check_out=None,
                phase=SelectionPhase.PICKING_CHECK_OUT,
            )
            return True

        check_in = self.state.check_in
        if check_in is None:
            return self._reject("no check-in selected", day)
        if day <= check_in:
            return self._reject("check-out not after check-in", day)
        if not self._stay_is_clear(check_in, day):
            return self._reject("stay crosses a reservation", day)

        self._set(check_out=day, phase=SelectionPhase.COMPLETE)
        self.logger.info(
            "Selection complete",
            check_in=check_in.isoformat(),
            check_out=day.isoformat(),
        )
        return True

    def clear(self) -> None:
        """Drop both dates and return to IDLE."""
        self._set(check_in=None, check_out=None, phase=SelectionPhase.IDLE)

    def revalidate(self) -> bool:
        """Re-check the held dates after the index has been refreshed.

        A check-in that is now blocked is dropped along with the check-out.
        A check-out that is now blocked, or a stay that now crosses a
        reservation, drops only the check-out. An open picker stays open;
        a COMPLETE selection falls back to the picker for the dropped date.

        Returns:
            True if the held dates are still valid
        """
        check_in, check_out = self.state.check_in, self.state.check_out
        if check_in is None:
            return True

        phase = self.state.phase
        if self.index.is_blocked(check_in):
            if phase in (SelectionPhase.PICKING_CHECK_OUT, SelectionPhase.COMPLETE):
                phase = SelectionPhase.PICKING_CHECK_IN
            self._set(check_in=None, check_out=None, phase=phase)
            self.logger.info("Selection invalidated", dropped="check_in", check_in=check_in.isoformat())
            return False

        if check_out is None:
            return True
        if self.index.is_blocked(check_out) or not self._stay_is_clear(check_in, check_out):
            if phase == SelectionPhase.COMPLETE:
                phase = SelectionPhase.PICKING_CHECK_OUT
            self._set(check_out=None, phase=phase)
            self.logger.info(
                "Selection invalidated",
                dropped="check_out",
                check_in=check_in.isoformat(),
                check_out=check_out.isoformat(),
            )
            return False
        return True

    def increment(self) -> bool:
        """Add a guest. No-op unless COMPLETE and below max_guests."""
        if not self.state.is_complete or self.state.guest_count >= self.max_guests:
            return False
        self._set(guest_count=self.state.guest_count + 1)
        return True

    def decrement(self) -> bool:
        """Remove a guest. No-op unless COMPLETE and above one guest."""
        if not self.state.is_complete or self.state.guest_count <= 1:
            return False
        self._set(guest_count=self.state.guest_count - 1)
        return True

    def seed(self, check_in: Optional[date], check_out: Optional[date] = None) -> bool:
        """Apply a pre-selected stay through the normal transitions.

        A check-in without a check-out leaves the machine picking the
        check-out. Any rejected step restores the prior state.

        Returns:
            True if every provided date was accepted
        """
        if check_in is None:
            return False
        previous = self.state
        self.begin_picking(PickTarget.CHECK_IN)
        if not self.select_date(check_in):
            self.state = previous
            return False
        if check_out is not None and not self.select_date(check_out):
            self.state = previous
            return False
        return True
