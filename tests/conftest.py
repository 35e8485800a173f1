import json
from datetime import date
from pathlib import Path

import pytest

from stay_availability.clients.base import FetchError
from stay_availability.models.reservation import ReservationInterval
from stay_availability.services import AvailabilityIndex


FIXTURES_DIR = Path(__file__).parent / "fixtures"

TODAY = date(2025, 6, 1)


class StubSource:
    """In-memory data source returning queued results in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def fetch_reservations(self, property_id: int) -> list[ReservationInterval]:
        self.calls += 1
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


class FakeScheduler:
    """Records scheduled jobs so tests can trigger them by hand."""

    def __init__(self):
        self.jobs = {}
        self.cancelled = []

    def schedule_repeating(self, func, interval_seconds, job_id):
        self.jobs[job_id] = (func, interval_seconds)

    def cancel(self, job_id):
        self.jobs.pop(job_id, None)
        self.cancelled.append(job_id)

    async def tick(self, job_id):
        func, _ = self.jobs[job_id]
        return await func()


@pytest.fixture
def availability_response():
    """Load availability feed response from fixture."""
    with open(FIXTURES_DIR / "availability_api" / "availability_response.json") as f:
        return json.load(f)


@pytest.fixture
def reversed_booking_response():
    """Load feed response containing a booking that ends before it starts."""
    with open(FIXTURES_DIR / "availability_api" / "reversed_booking_response.json") as f:
        return json.load(f)


@pytest.fixture
def empty_response():
    """Load feed response with no bookings."""
    with open(FIXTURES_DIR / "availability_api" / "empty_response.json") as f:
        return json.load(f)


@pytest.fixture
def june_reservation():
    """Single reservation from 2025-06-10 to 2025-06-15."""
    return ReservationInterval(
        start=date(2025, 6, 10),
        end=date(2025, 6, 15),
        status="confirmed",
        reservation_id="a1b2c3@hostex",
        summary="Reserved",
    )


@pytest.fixture
def june_index(june_reservation):
    """Index with the June reservation and inclusive boundary semantics."""
    return AvailabilityIndex(3, [june_reservation], same_day_turnover=False)


@pytest.fixture
def empty_index():
    return AvailabilityIndex(3, [], same_day_turnover=False)


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


@pytest.fixture
def fetch_error():
    return FetchError("feed unavailable")
