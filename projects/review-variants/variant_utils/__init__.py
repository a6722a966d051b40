# variant_utils package
# Group product reviews by the variant bought, plus the story stub generator

from .aggregate import VariantAggregator
from .pipeline import (
    PipelineOrchestrator,
    PipelineResult,
    PipelineState,
    format_report,
    run_pipeline,
    write_report_csv,
)
from .story import create_story

__all__ = [
    "VariantAggregator",
    "PipelineOrchestrator",
    "PipelineResult",
    "PipelineState",
    "format_report",
    "run_pipeline",
    "write_report_csv",
    "create_story",
]
