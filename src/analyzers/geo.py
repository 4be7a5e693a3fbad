"""Generative-engine optimization (GEO) scoring."""

import logging
import re

from analyzers.extractor import extract
from analyzers.models import GEO_FACTORS, GEOReport, PageSignals

logger = logging.getLogger(__name__)

DIRECT_ANSWER_PATTERNS = [
    re.compile(r"^(yes|no|the answer is|simply|basically|essentially)\b", re.I),
    re.compile(r"\b(is|are|means|refers to|involves)\b", re.I),
    re.compile(r"^(to|in order to|you can|you should|you need)\b", re.I),
]

FAQ_PATTERNS = [
    re.compile(r"frequently\s+asked\s+questions", re.I),
    re.compile(r"faq", re.I),
    re.compile(r"\b(?:q|question):", re.I),
    re.compile(r"\b(?:a|answer):", re.I),
]

QUESTION_WORDS = ("what", "how", "why", "when", "where", "who")

MAX_RECOMMENDATIONS = 8


class GEOScorer:
    """
    Scores how easily an answer engine could quote or summarise a page.

    Factor budgets (sum to 100):
    - directAnswers: 25
    - structuredContent: 20
    - faqSections: 20
    - comprehensiveness: 15
    - readability: 10
    - questionFormat: 10
    """

    def score(self, markup: str, topic: str | None = None) -> GEOReport:
        """Score raw markup. ``topic`` adds one topic-specific recommendation."""
        return self.score_signals(extract(markup), topic)

    def score_signals(self, signals: PageSignals, topic: str | None = None) -> GEOReport:
        factors = dict.fromkeys(GEO_FACTORS, 0)
        recommendations = []
        clean = signals.clean_markup

        # 1. Direct answer in the opening paragraph
        first_paragraph = signals.first_paragraph
        if len(first_paragraph) > 50:
            factors["directAnswers"] = 15
            if contains_direct_answer(first_paragraph):
                factors["directAnswers"] = 25
        else:
            recommendations.append("Add a clear, direct answer in the first paragraph")

        # 2. Lists
        if signals.list_count > 0 and signals.bullet_item_count > 3:
            factors["structuredContent"] = 20
        elif signals.list_count > 0:
            factors["structuredContent"] = 10
        else:
            recommendations.append(
                "Add bullet points and numbered lists for better AI parsing"
            )

        # 3. FAQ markers
        faq_points = sum(5 for pattern in FAQ_PATTERNS if pattern.search(clean))
        factors["faqSections"] = min(faq_points, 20)
        if factors["faqSections"] < 10:
            recommendations.append(
                "Add an FAQ section with common questions and direct answers"
            )

        # 4. Length
        word_count = len(signals.visible_text.split())
        if word_count > 1000:
            factors["comprehensiveness"] = 15
        elif word_count > 500:
            factors["comprehensiveness"] = 10
        elif word_count > 200:
            factors["comprehensiveness"] = 5
        else:
            recommendations.append(
                "Expand content to provide more comprehensive coverage of the topic"
            )

        # 5. Headings and paragraphs
        heading_count = len(signals.headings)
        if heading_count >= 3 and signals.paragraph_count >= 5:
            factors["readability"] = 10
        elif heading_count >= 2:
            factors["readability"] = 5
        else:
            recommendations.append(
                "Improve content structure with more headings and shorter paragraphs"
            )

        # 6. Question-style headings
        question_headings = sum(
            1 for heading in signals.headings if is_question(heading.text)
        )
        if question_headings >= 2:
            factors["questionFormat"] = 10
        elif question_headings >= 1:
            factors["questionFormat"] = 5
        else:
            recommendations.append(
                "Use question-format headings (What is...? How to...?) "
                "for better AI understanding"
            )

        total = sum(factors.values())

        if topic:
            recommendations.append(
                f'Optimize content specifically for "{topic}" queries '
                "that AI users commonly ask"
            )
        if total < 70:
            recommendations.append(
                "Consider restructuring content to answer user questions more directly"
            )
        if not signals.has_schema_org_marker:
            recommendations.append(
                "Add FAQ schema markup to help AI engines understand your Q&A content"
            )

        return GEOReport(
            factor_scores=factors,
            recommendations=recommendations[:MAX_RECOMMENDATIONS],
            insights=build_insights(factors),
            analysis={
                "wordCount": word_count,
                "headingCount": heading_count,
                "listCount": signals.list_count,
                "bulletPoints": signals.bullet_item_count,
                "questionHeadings": question_headings,
                "hasDirectAnswer": factors["directAnswers"] > 15,
                "hasFAQ": factors["faqSections"] > 10,
                "isComprehensive": factors["comprehensiveness"] > 10,
            },
        )


def contains_direct_answer(text: str) -> bool:
    return any(pattern.search(text) for pattern in DIRECT_ANSWER_PATTERNS)


def is_question(heading: str) -> bool:
    heading = heading.lower()
    return "?" in heading or any(f"{word} " in heading for word in QUESTION_WORDS)


def build_insights(factors: dict[str, int]) -> list[str]:
    """Strong / partial / absent labels for the four headline factors."""
    insights = []

    if factors["directAnswers"] >= 20:
        insights.append(
            "Strong: excellent direct answer format, AI engines will easily "
            "extract key information"
        )
    elif factors["directAnswers"] >= 10:
        insights.append(
            "Partial: good start with direct answers, but could be more concise "
            "and clear"
        )
    else:
        insights.append(
            "Absent: missing direct answers, add clear and immediate responses "
            "to user questions"
        )

    if factors["structuredContent"] >= 15:
        insights.append(
            "Strong: well-structured content with good use of lists and bullet points"
        )
    elif factors["structuredContent"] >= 10:
        insights.append(
            "Partial: some lists found, expand them with more bullet points"
        )
    else:
        insights.append(
            "Absent: content needs structure, add bullet points and numbered lists"
        )

    if factors["faqSections"] >= 15:
        insights.append(
            "Strong: FAQ presence is well suited to AI question-answering"
        )
    elif factors["faqSections"] >= 5:
        insights.append(
            "Partial: some Q&A elements found, but FAQ sections could be expanded"
        )
    else:
        insights.append(
            "Absent: no FAQ sections detected, critical for GEO optimization"
        )

    if factors["comprehensiveness"] >= 12:
        insights.append("Strong: comprehensive content coverage")
    elif factors["comprehensiveness"] >= 5:
        insights.append(
            "Partial: content could be more comprehensive and detailed"
        )
    else:
        insights.append(
            "Absent: content is too thin to be cited as a complete answer"
        )

    return insights
