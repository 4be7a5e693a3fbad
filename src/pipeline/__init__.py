"""PageLens analysis pipeline."""

from pipeline.orchestrator import AnalysisPipeline

__all__ = ["AnalysisPipeline"]
