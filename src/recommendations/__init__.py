"""PageLens aggregation package."""

from recommendations.engine import RecommendationEngine
from recommendations.rules import ALL_RULES, ISSUE_RULES, OPPORTUNITY_RULES, Rule

__all__ = [
    "RecommendationEngine",
    "ALL_RULES",
    "ISSUE_RULES",
    "OPPORTUNITY_RULES",
    "Rule",
]
