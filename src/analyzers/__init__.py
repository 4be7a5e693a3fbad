"""PageLens analyzers package."""

from analyzers.extractor import extract
from analyzers.fetcher import Fetcher
from analyzers.geo import GEOScorer
from analyzers.keywords import extract_keywords
from analyzers.links import LinkAuditor
from analyzers.serp import SERPSimulator
from analyzers.technical import AuxiliarySignals, TechnicalScorer

__all__ = [
    "extract",
    "Fetcher",
    "GEOScorer",
    "extract_keywords",
    "LinkAuditor",
    "SERPSimulator",
    "AuxiliarySignals",
    "TechnicalScorer",
]
