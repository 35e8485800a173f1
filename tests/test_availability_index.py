"""Unit tests for AvailabilityIndex."""

from datetime import date, datetime, timedelta, timezone

import pytest

from stay_availability.clients.base import FetchError
from stay_availability.models.reservation import ReservationInterval
from stay_availability.services import AvailabilityIndex
from tests.conftest import StubSource


def _dates(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


class TestQueries:
    """Tests for point and range queries."""

    def test_every_day_of_reservation_blocked(self, june_index):
        for day in _dates(date(2025, 6, 10), date(2025, 6, 15)):
            assert june_index.is_blocked(day), day

    def test_days_outside_free(self, june_index):
        for day in _dates(date(2025, 5, 25), date(2025, 6, 9)):
            assert not june_index.is_blocked(day), day
        for day in _dates(date(2025, 6, 16), date(2025, 7, 5)):
            assert not june_index.is_blocked(day), day

    def test_empty_index_blocks_nothing(self, empty_index):
        assert not empty_index.is_blocked(date(2025, 6, 12))

    def test_status_does_not_matter(self):
        index = AvailabilityIndex(
            1,
            [ReservationInterval(start=date(2025, 6, 1), end=date(2025, 6, 2), status="cancelled")],
            same_day_turnover=False,
        )
        assert index.is_blocked(date(2025, 6, 1))

    def test_same_day_turnover(self, june_reservation):
        index = AvailabilityIndex(3, [june_reservation], same_day_turnover=True)

        assert index.is_blocked(date(2025, 6, 14))
        assert not index.is_blocked(date(2025, 6, 15))

    def test_range_before_reservation(self, june_index):
        assert june_index.is_range_available(date(2025, 6, 5), date(2025, 6, 9))

    def test_range_crossing_reservation(self, june_index):
        assert not june_index.is_range_available(date(2025, 6, 5), date(2025, 6, 16))
        assert not june_index.is_range_available(date(2025, 6, 5), date(2025, 6, 20))

    def test_range_ending_on_blocked_day(self, june_index):
        assert not june_index.is_range_available(date(2025, 6, 5), date(2025, 6, 10))

    def test_range_must_be_ordered(self, empty_index):
        assert not empty_index.is_range_available(date(2025, 6, 5), date(2025, 6, 5))
        assert not empty_index.is_range_available(date(2025, 6, 6), date(2025, 6, 5))

    def test_blocked_dates_window(self, june_index):
        blocked = june_index.blocked_dates(date(2025, 6, 8), date(2025, 6, 11))

        assert blocked == [date(2025, 6, 10), date(2025, 6, 11)]


class TestRefresh:
    """Tests for refresh()."""

    @pytest.mark.asyncio
    async def test_refresh_replaces_intervals(self, june_reservation):
        index = AvailabilityIndex(3, [], same_day_turnover=False)
        source = StubSource([june_reservation])

        result = await index.refresh(source)

        assert result is index
        assert index.intervals == frozenset([june_reservation])
        assert index.last_updated is not None

    @pytest.mark.asyncio
    async def test_refresh_replaces_not_merges(self, june_index):
        july = ReservationInterval(start=date(2025, 7, 1), end=date(2025, 7, 3))

        await june_index.refresh(StubSource([july]))

        assert june_index.intervals == frozenset([july])
        assert not june_index.is_blocked(date(2025, 6, 12))

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous_data(self, june_reservation, fetch_error):
        index = AvailabilityIndex(3, [], same_day_turnover=False)
        await index.refresh(StubSource([june_reservation]))
        intervals_before = index.intervals
        updated_before = index.last_updated

        with pytest.raises(FetchError):
            await index.refresh(StubSource(fetch_error))

        assert index.intervals == intervals_before
        assert index.last_updated == updated_before

    @pytest.mark.asyncio
    async def test_unexpected_source_error_wrapped(self, june_index):
        with pytest.raises(FetchError) as exc_info:
            await june_index.refresh(StubSource(RuntimeError("boom")))

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert len(june_index) == 1

    def test_replace_sets_timestamp(self, empty_index, june_reservation):
        stamp = datetime(2025, 6, 1, 8, 30, tzinfo=timezone.utc)

        empty_index.replace([june_reservation], stamp)

        assert empty_index.last_updated == stamp
        assert len(empty_index) == 1
