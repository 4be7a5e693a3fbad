"""Simulated SERP competition profile.

Nothing here queries a search engine. Feature presence is drawn at random
and every report is flagged ``simulated=True``; keep it out of any score
that claims to be a measurement.
"""

import logging
import random

from analyzers.models import SERPReport

logger = logging.getLogger(__name__)

# Probability that each feature shows up on a results page
FEATURE_PROBABILITIES = {
    "featuredSnippet": 0.3,
    "localPack": 0.4,
    "knowledgeGraph": 0.5,
    "peopleAlsoAsk": 0.7,
    "videoCarousel": 0.6,
    "imagesPack": 0.5,
    "shoppingResults": 0.2,
}
ADS_PROBABILITY = 0.8
MAX_ADS = 4

# (min score, serp type, opportunity, strategy), highest first
TIERS = [
    (70, "Very Crowded", "Low", "Long-tail Keywords + Niche Content"),
    (50, "Crowded", "Medium", "Featured Snippet Optimization"),
    (30, "Moderate", "Good", "Quality Content + Technical SEO"),
    (0, "Clean", "High", "Content Marketing"),
]


class SERPSimulator:
    """Generates a synthetic feature profile and pivot advice for a keyword."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def simulate(self, keyword: str, location: str = "United States") -> SERPReport:
        features = self.draw_features()

        complexity = sum(
            1
            for value in features.values()
            if (isinstance(value, bool) and value)
            or (not isinstance(value, bool) and value > 0)
        )
        score = min(100, complexity * 15 + features["ads"] * 10)
        serp_type, opportunity, strategy = self.classify(score)

        logger.info(f"Simulated SERP for '{keyword}' ({location}): {serp_type} ({score})")

        return SERPReport(
            keyword=keyword,
            location=location,
            serp_type=serp_type,
            competition_score=score,
            opportunity=opportunity,
            recommended_strategy=strategy,
            serp_features=features,
            pivot_recommendations=self.pivot_recommendations(features),
            analysis={
                "totalSerpFeatures": complexity,
                "adsCount": features["ads"],
                "organicSpots": 10 - features["ads"],
                "difficulty": serp_type,
            },
        )

    def draw_features(self) -> dict:
        """One independent draw per feature."""
        features = {
            name: self.rng.random() < probability
            for name, probability in FEATURE_PROBABILITIES.items()
        }
        features["ads"] = (
            self.rng.randint(1, MAX_ADS) if self.rng.random() < ADS_PROBABILITY else 0
        )
        return features

    @staticmethod
    def classify(score: int) -> tuple[str, str, str]:
        for threshold, serp_type, opportunity, strategy in TIERS:
            if score >= threshold:
                return serp_type, opportunity, strategy
        return TIERS[-1][1:]

    @staticmethod
    def pivot_recommendations(features: dict) -> list[dict[str, str]]:
        pivots = []

        if features["featuredSnippet"]:
            pivots.append(
                {
                    "type": "Featured Snippet Opportunity",
                    "action": "Create structured content with clear answers and bullet points",
                    "priority": "High",
                }
            )
        if features["peopleAlsoAsk"]:
            pivots.append(
                {
                    "type": "FAQ Content Strategy",
                    "action": "Create comprehensive FAQ sections targeting related questions",
                    "priority": "Medium",
                }
            )
        if features["localPack"]:
            pivots.append(
                {
                    "type": "Local SEO Focus",
                    "action": "Optimize for local search with Google My Business and local citations",
                    "priority": "High",
                }
            )
        if features["ads"] >= 3:
            pivots.append(
                {
                    "type": "Long-tail Alternative",
                    "action": "Target less competitive long-tail variations of this keyword",
                    "priority": "High",
                }
            )
        if features["videoCarousel"]:
            pivots.append(
                {
                    "type": "Video Content Opportunity",
                    "action": "Create video content to compete in video carousel results",
                    "priority": "Medium",
                }
            )

        if not pivots:
            pivots.append(
                {
                    "type": "Content Gap Analysis",
                    "action": "Analyze top 10 results and create more comprehensive content",
                    "priority": "Medium",
                }
            )

        return pivots
