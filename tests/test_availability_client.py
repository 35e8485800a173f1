"""Tests for the availability API client with a mocked transport."""

from datetime import date
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from stay_availability.clients import (
    AvailabilityAPIClient,
    AvailabilityAPIClientError,
    AvailabilityAPINotFoundError,
    AvailabilityAPIServerError,
    FetchError,
)
from stay_availability.services import AvailabilityIndex


def _client(handler):
    return AvailabilityAPIClient(
        base_url="http://feed.test/",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(autouse=True)
def no_backoff():
    with patch.object(AvailabilityAPIClient, "_backoff", AsyncMock(return_value=0)) as mock:
        yield mock


class TestAvailabilityAPIClient:
    """Tests for AvailabilityAPIClient."""

    @pytest.mark.asyncio
    async def test_fetch_reservations(self, availability_response):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=availability_response)

        intervals = await _client(handler).fetch_reservations(3)

        assert len(intervals) == 3
        assert str(requests[0].url) == "http://feed.test/api/properties/3/availability"

    @pytest.mark.asyncio
    async def test_not_found_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        with pytest.raises(AvailabilityAPINotFoundError):
            await _client(handler).get_availability(3)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_server_error_retried_then_succeeds(self, availability_response, no_backoff):
        responses = [httpx.Response(503), httpx.Response(200, json=availability_response)]

        def handler(request):
            return responses.pop(0)

        payload = await _client(handler).get_availability(3)

        assert payload["propertyId"] == 3
        assert no_backoff.await_count == 1

    @pytest.mark.asyncio
    async def test_server_error_exhausts_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        client = _client(handler)
        with pytest.raises(AvailabilityAPIServerError):
            await client.get_availability(3)
        assert len(calls) == client.max_retries

    @pytest.mark.asyncio
    async def test_transport_error_becomes_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError):
            await _client(handler).get_availability(3)

    @pytest.mark.asyncio
    async def test_client_error(self):
        def handler(request):
            return httpx.Response(400, text="bad request")

        with pytest.raises(AvailabilityAPIClientError):
            await _client(handler).get_availability(3)

    @pytest.mark.asyncio
    async def test_malformed_payload(self):
        def handler(request):
            return httpx.Response(200, json={"bookings": [{"start": "2025-06-10"}]})

        with pytest.raises(AvailabilityAPIClientError):
            await _client(handler).fetch_reservations(3)

    @pytest.mark.asyncio
    async def test_non_object_payload(self):
        def handler(request):
            return httpx.Response(200, json=[])

        with pytest.raises(AvailabilityAPIClientError):
            await _client(handler).get_availability(3)

    @pytest.mark.asyncio
    async def test_index_refresh_through_client(self, availability_response):
        index = AvailabilityIndex(3, same_day_turnover=False)

        await index.refresh(_client(lambda request: httpx.Response(200, json=availability_response)))

        assert index.is_blocked(date(2025, 7, 2))
        assert not index.is_blocked(date(2025, 7, 10))
