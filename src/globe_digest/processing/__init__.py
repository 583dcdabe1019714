"""Aggregation and enrichment pipeline.

Use `globe_digest.processing.pipeline` and related modules for new code.
"""

from globe_digest.processing.fallback import summarize_fallback
from globe_digest.processing.pipeline import NewsPipeline, build_default_pipeline
from globe_digest.processing.store import EnrichmentStore
from globe_digest.processing.summarizer import BatchSummarizer, summarize_batch
from globe_digest.processing.translator import SummaryTranslator, translate
from globe_digest.processing.types import CycleOutcome, LogFunc, PipelineState, PipelineStatus

__all__ = [
    "BatchSummarizer",
    "CycleOutcome",
    "EnrichmentStore",
    "LogFunc",
    "NewsPipeline",
    "PipelineState",
    "PipelineStatus",
    "SummaryTranslator",
    "build_default_pipeline",
    "summarize_batch",
    "summarize_fallback",
    "translate",
]
