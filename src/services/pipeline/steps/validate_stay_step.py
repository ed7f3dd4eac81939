"""Step to validate the stay dates against the restrictions."""

from src.services.pipeline import PipelineStep, QuoteContext


class ValidateStayStep(PipelineStep):
    """Validate arrival and departure for the selected room."""

    def __init__(self):
        super().__init__("ValidateStay")

    async def execute(self, context: QuoteContext) -> bool:
        """Validate the stay.

        Args:
            context: Quote context

        Returns:
            True if the stay is valid

        Raises:
            ValidationError: With the first failing reason
        """
        selection = context.selection
        context.stay_validation = context.evaluator.require_valid_stay(
            selection.check_in, selection.check_out, context.room
        )
        context.stats["nights"] = context.stay_validation.nights
        return True
