"""API clients package."""

from src.clients.availability_client import AvailabilityServiceClient
from src.clients.base import (
    BookingAPIClient,
    UpstreamFetchError,
    UpstreamNotFoundError,
    UpstreamServerError,
)
from src.clients.catalog_client import EnhancementCatalog, EnhancementCatalogClient
from src.clients.voucher_client import VoucherNotFoundError, VoucherValidationClient

__all__ = [
    "BookingAPIClient",
    "AvailabilityServiceClient",
    "EnhancementCatalog",
    "EnhancementCatalogClient",
    "VoucherValidationClient",
    "UpstreamFetchError",
    "UpstreamNotFoundError",
    "UpstreamServerError",
    "VoucherNotFoundError",
]
