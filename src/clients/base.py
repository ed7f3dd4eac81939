"""Shared HTTP plumbing for the booking backend services."""

from typing import Any, Optional

import httpx
from structlog import get_logger

from src.config import settings

logger = get_logger(__name__)


class UpstreamFetchError(Exception):
    """Base exception for availability, catalog and voucher service errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamNotFoundError(UpstreamFetchError):
    """Raised when a service resource is not found."""

    pass


class UpstreamServerError(UpstreamFetchError):
    """Raised when a service returns a server error."""

    pass


class BookingAPIClient:
    """Base client for the booking backend.

    Requests are single-shot: failures are raised to the caller, which
    decides whether to fall back to an empty snapshot or retry.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        self.base_url = (base_url or settings.booking_api_base_url).rstrip("/")
        self.timeout = timeout or settings.booking_api.request_timeout

    def _get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": "BookingEngine/1.0",
        }

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Service error text, taken from the {message, data} envelope when present."""
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text[:200]

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request to the booking backend.

        Args:
            method: HTTP method (GET, POST, ...)
            endpoint: API endpoint path (without base URL)
            data: JSON request body
            params: Query parameters

        Returns:
            The "data" member of the response envelope, or the whole body
            when the service does not wrap it

        Raises:
            UpstreamNotFoundError: If the resource is not found
            UpstreamServerError: If a server error occurs
            UpstreamFetchError: For transport errors and other non-2xx responses
        """
        url = f"{self.base_url}{endpoint}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    json=data,
                    params=params,
                )
        except httpx.TimeoutException as e:
            logger.error("Booking API request timeout", endpoint=endpoint, method=method)
            raise UpstreamFetchError(f"Request timeout for {endpoint}") from e
        except httpx.RequestError as e:
            logger.error(
                "Booking API request error",
                endpoint=endpoint,
                method=method,
                error=str(e),
            )
            raise UpstreamFetchError(f"Request failed for {endpoint}: {str(e)}") from e

        if response.status_code == 404:
            logger.warning(
                "Booking API resource not found",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise UpstreamNotFoundError(self._error_message(response), status_code=404)

        if response.status_code >= 500:
            logger.error(
                "Booking API server error",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise UpstreamServerError(
                f"Server error at {endpoint}: {self._error_message(response)}",
                status_code=response.status_code,
            )

        if 400 <= response.status_code < 500:
            message = self._error_message(response)
            logger.error(
                "Booking API client error",
                endpoint=endpoint,
                status_code=response.status_code,
                response_text=message,
            )
            raise UpstreamFetchError(message, status_code=response.status_code)

        if response.status_code in (200, 201, 204):
            logger.debug(
                "Booking API request successful",
                endpoint=endpoint,
                method=method,
                status_code=response.status_code,
            )
            if not response.text:
                return {}
            body = response.json()
            if isinstance(body, dict) and "data" in body:
                return body["data"]
            return body

        logger.error(
            "Unexpected Booking API response status",
            endpoint=endpoint,
            status_code=response.status_code,
        )
        raise UpstreamFetchError(
            f"Unexpected response from {endpoint}: {response.status_code}",
            status_code=response.status_code,
        )
