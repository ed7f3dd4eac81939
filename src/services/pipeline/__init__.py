"""Pipeline infrastructure for quote computation."""

from .base_step import PipelineStep
from .context import QuoteContext
from .pipeline import Pipeline

__all__ = [
    "PipelineStep",
    "QuoteContext",
    "Pipeline",
]
