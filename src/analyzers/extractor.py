"""Text and markup signal extraction."""

import html
import re

from bs4 import BeautifulSoup

from analyzers.models import Heading, PageSignals

SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")
HEADING_RE = re.compile(r"^h([1-6])$")

OPEN_GRAPH_TAGS = ("og:title", "og:description", "og:image", "og:url")


def strip_scripts(markup: str) -> str:
    """Drop <script> and <style> blocks, keeping everything else."""
    return STYLE_RE.sub("", SCRIPT_RE.sub("", markup))


def visible_text(markup: str) -> str:
    """
    Plain text of a document.

    Script/style blocks go first so their contents never count as prose,
    then tags become single spaces and whitespace is collapsed.
    """
    text = TAG_RE.sub(" ", strip_scripts(markup))
    text = html.unescape(text)
    return WHITESPACE_RE.sub(" ", text).strip()


def _meta(soup: BeautifulSoup, key: str, value: str):
    return soup.find("meta", attrs={key: re.compile(f"^{re.escape(value)}$", re.I)})


def _body_text(soup: BeautifulSoup) -> str:
    if soup.body is None:
        return ""
    return WHITESPACE_RE.sub(" ", soup.body.get_text(" ")).strip()


def extract(markup: str) -> PageSignals:
    """
    Pull the structural signals the scorers need out of raw markup.

    This is a heuristic pass: presence checks are case-insensitive and
    malformed markup may produce false positives or negatives.
    """
    markup = markup or ""
    lowered = markup.lower()
    clean = strip_scripts(markup)
    soup = BeautifulSoup(clean, "lxml")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    description_tag = _meta(soup, "name", "description")
    meta_description = (
        description_tag.get("content", "").strip() if description_tag else ""
    )

    headings = []
    for tag in soup.find_all(HEADING_RE):
        level = int(HEADING_RE.match(tag.name).group(1))
        headings.append(Heading(level=level, text=tag.get_text(" ", strip=True)))

    first_paragraph = ""
    for paragraph in soup.find_all("p"):
        first_paragraph = paragraph.get_text(" ", strip=True)
        break

    viewport_tag = _meta(soup, "name", "viewport")
    robots_tag = _meta(soup, "name", "robots")

    og_present = set()
    for meta in soup.find_all("meta"):
        prop = (meta.get("property") or meta.get("name") or "").lower()
        if prop in OPEN_GRAPH_TAGS:
            og_present.add(prop)

    return PageSignals(
        title=title,
        meta_description=meta_description,
        headings=headings,
        images=[img.get("alt") is not None for img in soup.find_all("img")],
        visible_text=visible_text(markup),
        body_text=_body_text(soup),
        clean_markup=clean,
        first_paragraph=first_paragraph,
        paragraph_count=len(soup.find_all("p")),
        list_count=len(soup.find_all(["ul", "ol"])),
        bullet_item_count=len(soup.find_all("li")),
        has_h1=soup.find("h1") is not None,
        has_structured_data="application/ld+json" in lowered,
        has_canonical=soup.find("link", rel=re.compile("^canonical$", re.I)) is not None,
        has_viewport=viewport_tag is not None,
        has_device_width=(
            viewport_tag is not None
            and "width=device-width" in viewport_tag.get("content", "").lower()
        ),
        has_lang=soup.find(attrs={"lang": True}) is not None,
        has_charset="charset=" in lowered,
        robots_meta=robots_tag.get("content", "").lower() if robots_tag else None,
        og_tag_count=len(og_present),
        has_twitter_card=(
            _meta(soup, "name", "twitter:card") is not None
            or _meta(soup, "property", "twitter:card") is not None
        ),
        has_schema_org_marker="schema.org" in lowered,
    )
