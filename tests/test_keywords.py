from analyzers.keywords import extract_keywords, tokenize
from analyzers.models import KeywordRecord


def test_only_repeated_terms_survive():
    keywords, word_count = extract_keywords("", [], "", "the cat sat on the mat. the cat ran.")

    assert keywords == [KeywordRecord(keyword="cat", frequency=2)]
    # cat, sat, mat, cat, ran
    assert word_count == 5


def test_sources_are_pooled_before_counting():
    keywords, _ = extract_keywords(
        "Espresso Grinder Reviews",
        ["Best grinder for espresso"],
        "Compare burr grinders",
        "Our espresso picks.",
    )

    assert keywords == [
        KeywordRecord(keyword="espresso", frequency=3),
        KeywordRecord(keyword="grinder", frequency=2),
    ]


def test_ties_keep_first_seen_order():
    keywords, _ = extract_keywords("", [], "", "beta alpha gamma alpha beta gamma delta")

    assert [k.keyword for k in keywords] == ["beta", "alpha", "gamma"]


def test_extraction_is_deterministic():
    text = "tea kettle tea pot kettle tea leaf pot leaf cup cup cup " * 3

    first = extract_keywords("Tea", ["Kettles"], "tea", text)
    second = extract_keywords("Tea", ["Kettles"], "tea", text)

    assert first == second


def test_limit_and_text_limit():
    text = " ".join(f"word{i} word{i}" for i in range(30))

    keywords, _ = extract_keywords("", [], "", text, limit=20)
    assert len(keywords) == 20

    truncated, word_count = extract_keywords("", [], "", "repeat repeat " + "x" * 100, text_limit=14)
    assert truncated == [KeywordRecord(keyword="repeat", frequency=2)]
    assert word_count == 2


def test_custom_stop_words():
    keywords, _ = extract_keywords("", [], "", "coffee coffee beans beans", stop_words=["coffee"])

    assert keywords == [KeywordRecord(keyword="beans", frequency=2)]


def test_tokenize_strips_punctuation_and_short_words():
    assert tokenize("It's a well-known fact, OK?", {"the"}) == ["well", "known", "fact"]
