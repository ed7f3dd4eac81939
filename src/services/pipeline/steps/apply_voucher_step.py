"""Step to validate the guest's voucher code."""

from src.clients.base import UpstreamFetchError
from src.clients.voucher_client import VoucherNotFoundError, VoucherValidationClient
from src.services.pipeline import PipelineStep, QuoteContext


class ApplyVoucherStep(PipelineStep):
    """Fetch the voucher and check it applies to the selected room and rate.

    Optional: a rejected voucher is reported and the quote is priced
    without a discount.
    """

    def __init__(self, voucher_client: VoucherValidationClient):
        """Initialize the step.

        Args:
            voucher_client: Voucher validation service client
        """
        super().__init__("ApplyVoucher")
        self.voucher_client = voucher_client

    async def execute(self, context: QuoteContext) -> bool:
        code = context.selection.voucher_code
        if not code:
            return True

        try:
            voucher = await self.voucher_client.validate(code)
        except VoucherNotFoundError:
            context.add_error(self.name, f"Voucher {code} not found", "voucherCode")
            return False
        except UpstreamFetchError as e:
            context.add_error(self.name, str(e), "voucherCode")
            return False

        reason = voucher.inapplicable_reason(
            context.room.id if context.room else None,
            context.rate_policy.id if context.rate_policy else None,
            context.evaluator.today,
        )
        if reason:
            context.add_error(self.name, reason, "voucherCode")
            return False

        context.voucher = voucher
        return True

    def is_required(self) -> bool:
        return False
