"""Voucher Validation Service client."""

from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError
from structlog import get_logger

from src.clients.base import BookingAPIClient, UpstreamFetchError, UpstreamNotFoundError
from src.config import settings
from src.models.extras import Voucher

logger = get_logger(__name__)


class VoucherNotFoundError(UpstreamNotFoundError):
    """Raised when a voucher code does not exist."""

    pass


class VoucherValidationClient(BookingAPIClient):
    """Looks up promotional codes."""

    async def validate(self, code: str) -> Voucher:
        """Validate a voucher code.

        Args:
            code: Code typed by the guest

        Returns:
            Voucher with its discount, amount or products

        Raises:
            VoucherNotFoundError: If the code does not exist
            UpstreamFetchError: If the service rejects the code (inactive,
                expired, used up) or cannot be reached
        """
        code = code.strip()
        endpoint = f"{settings.booking_api.voucher_path}/{quote(code, safe='')}"
        try:
            payload = await self._make_request("GET", endpoint)
        except UpstreamNotFoundError as e:
            logger.info("Voucher not found", code=code)
            raise VoucherNotFoundError(f"Voucher {code} not found", status_code=404) from e

        try:
            voucher = Voucher.model_validate(payload)
        except PydanticValidationError as e:
            logger.error("Invalid voucher response", code=code, errors=e.error_count())
            raise UpstreamFetchError(f"Invalid voucher response for {code}: {e}") from e

        logger.info("Validated voucher", code=voucher.code, type=voucher.type.value)
        return voucher
