"""Base class for quote pipeline steps."""

from abc import ABC, abstractmethod

from structlog import get_logger

from src.engine.errors import ValidationError

from .context import QuoteContext

logger = get_logger(__name__)


class PipelineStep(ABC):
    """Abstract base class for pipeline steps.

    Each step reads from the context, does its work, writes results back
    and returns a success boolean. A ValidationError raised by a step is
    recorded on the context as a failed step; any other exception
    propagates to the caller.
    """

    def __init__(self, name: str | None = None):
        """Initialize the pipeline step.

        Args:
            name: Optional custom name for the step. Defaults to class name.
        """
        self.name = name or self.__class__.__name__
        self.logger = logger.bind(step=self.name)

    @abstractmethod
    async def execute(self, context: QuoteContext) -> bool:
        """Execute the pipeline step.

        Args:
            context: Quote context containing shared data

        Returns:
            True if step succeeded, False if failed
        """
        pass

    async def run(self, context: QuoteContext) -> bool:
        """Run the step, turning validation failures into recorded reasons.

        Args:
            context: Quote context

        Returns:
            True if step succeeded, False if failed
        """
        self.logger.debug("Step starting", room_id=context.selection.selected_room_id)

        try:
            success = await self.execute(context)
        except ValidationError as e:
            self.logger.info("Step rejected selection", reason=e.reason, field=e.field)
            context.add_error(self.name, e.reason, e.field)
            return False

        if success:
            self.logger.debug("Step completed successfully")
        else:
            self.logger.info("Step completed with failure")
        return success

    def is_required(self) -> bool:
        """Check if this step is required for pipeline success.

        Returns:
            True if step failure should stop pipeline, False if optional
        """
        return True

    def get_name(self) -> str:
        return self.name
