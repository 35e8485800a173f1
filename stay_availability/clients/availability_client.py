"""Availability feed API client."""

import asyncio
from typing import Any, Optional

import httpx
from pydantic import ValidationError
from structlog import get_logger

from stay_availability.clients.base import FetchError
from stay_availability.config import settings
from stay_availability.models.reservation import ReservationInterval
from stay_availability.transformers import IntervalTransformer

logger = get_logger(__name__)


class AvailabilityAPIClientError(FetchError):
    """Base exception for availability API client errors."""

    pass


class AvailabilityAPINotFoundError(AvailabilityAPIClientError):
    """Raised when the property is unknown to the availability API."""

    pass


class AvailabilityAPIServerError(AvailabilityAPIClientError):
    """Raised when the availability API returns a server error."""

    pass


class AvailabilityAPIClient:
    """Client for the property availability endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the availability API client with settings.

        Args:
            base_url: Override for AVAILABILITY_API_BASE_URL
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.availability_api.base_url).rstrip("/")
        self.timeout = settings.availability_api.request_timeout
        self.max_retries = settings.availability_api.max_retries
        self.retry_backoff_base = 2  # Exponential backoff base
        self.transport = transport

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": "StayAvailability/1.0",
        }

    async def _backoff(self, attempt: int) -> float:
        wait_time = self.retry_backoff_base ** attempt
        await asyncio.sleep(wait_time)
        return wait_time

    async def _make_request(
        self,
        endpoint: str,
        property_id: Optional[int] = None,
    ) -> Any:
        """Make a GET request to the availability API with retry logic.

        Args:
            endpoint: API endpoint path (without base URL)
            property_id: Property being fetched, for logging context

        Returns:
            Decoded JSON response

        Raises:
            AvailabilityAPINotFoundError: If the property is not found
            AvailabilityAPIServerError: If server errors persist past retries
            AvailabilityAPIClientError: For other API errors
        """
        url = f"{self.base_url}{endpoint}"
        headers = self._get_headers()

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self.transport
                ) as client:
                    response = await client.get(url, headers=headers)

                if response.status_code == 404:
                    logger.warning(
                        "Availability API resource not found",
                        property_id=property_id,
                        endpoint=endpoint,
                        status_code=response.status_code,
                    )
                    raise AvailabilityAPINotFoundError(f"Resource not found: {endpoint}")

                if response.status_code >= 500:
                    if attempt < self.max_retries - 1:
                        logger.warning(
                            "Availability API server error, retrying",
                            property_id=property_id,
                            endpoint=endpoint,
                            status_code=response.status_code,
                            attempt=attempt + 1,
                            max_retries=self.max_retries,
                        )
                        await self._backoff(attempt)
                        continue
                    logger.error(
                        "Availability API server error, max retries exceeded",
                        property_id=property_id,
                        endpoint=endpoint,
                        status_code=response.status_code,
                    )
                    raise AvailabilityAPIServerError(
                        f"Server error at {endpoint}: {response.status_code}"
                    )

                if 400 <= response.status_code < 500:
                    logger.error(
                        "Availability API client error",
                        property_id=property_id,
                        endpoint=endpoint,
                        status_code=response.status_code,
                        response_text=response.text[:200],
                    )
                    raise AvailabilityAPIClientError(
                        f"Client error at {endpoint}: {response.status_code}"
                    )

                logger.debug(
                    "Availability API request successful",
                    property_id=property_id,
                    endpoint=endpoint,
                    status_code=response.status_code,
                )
                try:
                    return response.json()
                except ValueError as e:
                    raise AvailabilityAPIClientError(
                        f"Invalid JSON from {endpoint}"
                    ) from e

            except httpx.TimeoutException as e:
                if attempt < self.max_retries - 1:
                    logger.warning(
                        "Availability API request timeout, retrying",
                        property_id=property_id,
                        endpoint=endpoint,
                        attempt=attempt + 1,
                        max_retries=self.max_retries,
                    )
                    await self._backoff(attempt)
                    continue
                logger.error(
                    "Availability API request timeout, max retries exceeded",
                    property_id=property_id,
                    endpoint=endpoint,
                )
                raise AvailabilityAPIClientError(f"Request timeout for {endpoint}") from e

            except httpx.RequestError as e:
                if attempt < self.max_retries - 1:
                    logger.warning(
                        "Availability API request error, retrying",
                        property_id=property_id,
                        endpoint=endpoint,
                        error=str(e),
                        attempt=attempt + 1,
                        max_retries=self.max_retries,
                    )
                    await self._backoff(attempt)
                    continue
                logger.error(
                    "Availability API request error, max retries exceeded",
                    property_id=property_id,
                    endpoint=endpoint,
                    error=str(e),
                )
                raise AvailabilityAPIClientError(
                    f"Request failed for {endpoint}: {str(e)}"
                ) from e

        raise AvailabilityAPIClientError(f"Failed to complete request to {endpoint}")

    async def get_availability(self, property_id: int) -> dict[str, Any]:
        """Fetch the raw availability payload for a property.

        Args:
            property_id: Property identifier

        Returns:
            Availability payload with propertyId, lastUpdated and bookings

        Raises:
            AvailabilityAPIClientError: If the API request fails
        """
        logger.info("Fetching availability", property_id=property_id)
        response = await self._make_request(
            f"/api/properties/{property_id}/availability", property_id=property_id
        )
        if not isinstance(response, dict):
            raise AvailabilityAPIClientError(
                f"Unexpected availability payload type: {type(response).__name__}"
            )
        logger.info(
            "Successfully fetched availability",
            property_id=property_id,
            booking_count=len(response.get("bookings") or []),
        )
        return response

    async def fetch_reservations(self, property_id: int) -> list[ReservationInterval]:
        """Fetch and transform the current reservations for a property.

        Args:
            property_id: Property identifier

        Returns:
            Reservation intervals for the property

        Raises:
            AvailabilityAPIClientError: If the request fails or the payload is malformed
        """
        payload = await self.get_availability(property_id)
        try:
            return IntervalTransformer.transform(payload)
        except ValidationError as e:
            logger.error(
                "Malformed availability payload",
                property_id=property_id,
                error=str(e),
            )
            raise AvailabilityAPIClientError(
                f"Malformed availability payload for property {property_id}"
            ) from e
