"""Pipeline executor for quote steps."""

from structlog import get_logger

from .base_step import PipelineStep
from .context import QuoteContext

logger = get_logger(__name__)


class Pipeline:
    """Executes a sequence of steps over a shared QuoteContext.

    A failed required step stops the pipeline; a failed optional step is
    recorded and the pipeline continues. Success means no step recorded
    an error.
    """

    def __init__(self, name: str, steps: list[PipelineStep]):
        """Initialize the pipeline.

        Args:
            name: Pipeline name for logging
            steps: List of pipeline steps to execute in order
        """
        self.name = name
        self.steps = steps
        self.logger = logger.bind(pipeline=name)

    async def execute(self, context: QuoteContext) -> QuoteContext:
        """Execute the pipeline.

        Args:
            context: Quote context

        Returns:
            Updated context with results

        Raises:
            UnresolvedCapacityError: If no room fits the party
        """
        self.logger.debug("Pipeline starting", step_count=len(self.steps))

        successful_steps = 0
        failed_steps = 0

        for step in self.steps:
            success = await step.run(context)

            if success:
                successful_steps += 1
                continue

            failed_steps += 1
            if step.is_required():
                self.logger.info(
                    "Required step failed, stopping pipeline",
                    step=step.get_name(),
                    reason=context.reason,
                )
                break
            self.logger.warning("Optional step failed, continuing pipeline", step=step.get_name())

        context.success = not context.has_errors()
        context.stats["pipeline"] = {
            "name": self.name,
            "total_steps": len(self.steps),
            "successful_steps": successful_steps,
            "failed_steps": failed_steps,
        }

        self.logger.info(
            "Pipeline completed",
            success=context.success,
            successful_steps=successful_steps,
            failed_steps=failed_steps,
        )
        return context

