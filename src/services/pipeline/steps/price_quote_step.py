"""Step to price the validated selection."""

from src.engine.pricing import PricingEngine
from src.services.pipeline import PipelineStep, QuoteContext


class PriceQuoteStep(PipelineStep):
    """Build the tax-inclusive PriceQuote for the selection."""

    def __init__(self):
        super().__init__("PriceQuote")

    async def execute(self, context: QuoteContext) -> bool:
        context.quote = PricingEngine.quote(
            context.room,
            context.rate_policy,
            context.selection,
            context.snapshot.general_settings.tax_rate,
            voucher=context.voucher,
        )
        context.stats["final_total"] = str(context.quote.final_total)
        return True
