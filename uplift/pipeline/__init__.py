"""Pipeline orchestration for the Uplift enrichment engine."""

from .pipeline import EnrichmentPipeline, PipelineResult

__all__ = ["EnrichmentPipeline", "PipelineResult"]
