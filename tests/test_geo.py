import pytest

from analyzers.geo import GEOScorer, build_insights, is_question
from analyzers.models import GEO_FACTORS, GEOReport

THIN_PAGE = "<html><body><h2>Overview</h2><p>" + " ".join(["word"] * 99) + "</p></body></html>"

FAQ_PAGE = (
    "<html><head><script type='application/ld+json'>"
    '{"@context": "https://schema.org", "@type": "FAQPage"}</script></head><body>'
    "<h1>Espresso basics</h1>"
    "<p>Espresso is a concentrated coffee brewed by forcing hot water through fine grounds.</p>"
    "<h2>What is a ristretto?</h2><p>A shorter shot.</p>"
    "<h2>How to tamp evenly?</h2><p>Press level.</p>"
    "<h2>FAQ - Frequently Asked Questions</h2>"
    "<p>Q: Does roast matter?</p><p>A: Yes, a lot.</p>"
    "<ul><li>Dose</li><li>Yield</li><li>Time</li><li>Temperature</li></ul>"
    "</body></html>"
)


def test_thin_page_factors():
    report = GEOScorer().score(THIN_PAGE)

    assert report.factor_scores == {
        "directAnswers": 15,
        "structuredContent": 0,
        "faqSections": 0,
        "comprehensiveness": 0,
        "readability": 0,
        "questionFormat": 0,
    }
    assert report.score == 15
    assert report.analysis["wordCount"] == 100
    assert report.recommendations == [
        "Add bullet points and numbered lists for better AI parsing",
        "Add an FAQ section with common questions and direct answers",
        "Expand content to provide more comprehensive coverage of the topic",
        "Improve content structure with more headings and shorter paragraphs",
        "Use question-format headings (What is...? How to...?) for better AI understanding",
        "Consider restructuring content to answer user questions more directly",
        "Add FAQ schema markup to help AI engines understand your Q&A content",
    ]


def test_faq_page_factors():
    report = GEOScorer().score(FAQ_PAGE, topic="espresso")

    assert report.factor_scores["directAnswers"] == 25
    assert report.factor_scores["structuredContent"] == 20
    assert report.factor_scores["faqSections"] == 20
    assert report.factor_scores["readability"] == 10
    assert report.factor_scores["questionFormat"] == 10
    assert report.analysis["questionHeadings"] == 2
    assert report.analysis["hasFAQ"] is True
    assert (
        'Optimize content specifically for "espresso" queries that AI users commonly ask'
        in report.recommendations
    )
    assert not any("FAQ schema" in rec for rec in report.recommendations)


@pytest.mark.parametrize("markup", ["", THIN_PAGE, FAQ_PAGE, "<p>" + "lorem " * 1200 + "</p>"])
def test_factors_sum_to_score(markup):
    report = GEOScorer().score(markup)

    assert list(report.factor_scores) == list(GEO_FACTORS)
    assert sum(report.factor_scores.values()) == report.score
    assert 0 <= report.score <= 100
    assert len(report.recommendations) <= 8
    assert report.to_dict()["geoScore"] == report.score


def test_comprehensiveness_tiers():
    def words(n):
        return GEOScorer().score("<p>" + "lorem " * n + "</p>").factor_scores["comprehensiveness"]

    assert words(150) == 0
    assert words(300) == 5
    assert words(700) == 10
    assert words(1500) == 15


def test_insights_follow_factor_tiers():
    insights = build_insights(
        {"directAnswers": 25, "structuredContent": 10, "faqSections": 0, "comprehensiveness": 5}
    )

    assert [text.split(":")[0] for text in insights] == ["Strong", "Partial", "Absent", "Partial"]


def test_is_question():
    assert is_question("Does it work?")
    assert is_question("How to descale a machine")
    assert not is_question("Overview")


def test_unavailable_report():
    report = GEOReport.unavailable("Timeout fetching https://example.com/")

    assert report.score == 0
    assert report.recommendations == ["Unable to analyze website content for GEO optimization"]
    assert report.error
