"""Issue and opportunity rules evaluated over a merged analysis context."""

from dataclasses import dataclass
from typing import Any, Callable

LOW_DEEP_LINK_RATIO = 30
GOOD_PAGE_SPEED = 90
GOOD_GEO_SCORE = 70


@dataclass
class Rule:
    """A single aggregation rule."""

    id: str
    kind: str  # issue, opportunity
    message: str | Callable[[dict], str]
    condition: Callable[[dict], bool]

    def render(self, context: dict) -> str:
        if callable(self.message):
            return self.message(context)
        return self.message


def _get_nested(data: dict, path: str, default: Any = None) -> Any:
    """Get a nested value from a dict using dot notation."""
    keys = path.split(".")
    value = data
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key, default)
        else:
            return default
    return value


# =============================================================================
# Issues (things that are wrong)
# =============================================================================

ISSUE_RULES = [
    Rule(
        id="missing-title",
        kind="issue",
        message="Missing page title",
        condition=lambda ctx: not _get_nested(ctx, "technical.hasTitle", False),
    ),
    Rule(
        id="missing-meta-description",
        kind="issue",
        message="Missing meta description",
        condition=lambda ctx: not _get_nested(ctx, "technical.hasMetaDescription", False),
    ),
    Rule(
        id="missing-h1",
        kind="issue",
        message="Missing H1 heading",
        condition=lambda ctx: not _get_nested(ctx, "technical.hasH1", False),
    ),
    Rule(
        id="no-https",
        kind="issue",
        message="Website not using HTTPS",
        condition=lambda ctx: not _get_nested(ctx, "technical.hasHTTPS", False),
    ),
    Rule(
        id="broken-links",
        kind="issue",
        message=lambda ctx: f"{_get_nested(ctx, 'links.brokenCount')} broken links found",
        condition=lambda ctx: (_get_nested(ctx, "links.brokenCount") or 0) > 0,
    ),
]

# =============================================================================
# Opportunities (things that could be better)
# =============================================================================

OPPORTUNITY_RULES = [
    Rule(
        id="structured-data",
        kind="opportunity",
        message="Add structured data markup",
        condition=lambda ctx: not _get_nested(ctx, "technical.hasStructuredData", False),
    ),
    Rule(
        id="deep-links",
        kind="opportunity",
        message="Add more internal links to deeper pages of the site",
        condition=lambda ctx: (_get_nested(ctx, "links.totalLinks") or 0) > 0
        and (_get_nested(ctx, "links.deepLinkRatio") or 0) < LOW_DEEP_LINK_RATIO,
    ),
    Rule(
        id="page-speed",
        kind="opportunity",
        message="Improve page loading speed",
        condition=lambda ctx: _get_nested(ctx, "pageSpeed") is None
        or _get_nested(ctx, "pageSpeed") < GOOD_PAGE_SPEED,
    ),
    Rule(
        id="geo-readiness",
        kind="opportunity",
        message=lambda ctx: (
            f"Improve AI-readiness of content (GEO score {_get_nested(ctx, 'geo')}/100)"
        ),
        condition=lambda ctx: _get_nested(ctx, "geo") is not None
        and _get_nested(ctx, "geo") < GOOD_GEO_SCORE,
    ),
    Rule(
        id="target-keyword",
        kind="opportunity",
        message=lambda ctx: (
            f"Work the target keyword \"{_get_nested(ctx, 'targetKeyword')}\" "
            "into the title, headings and body copy"
        ),
        condition=lambda ctx: bool(_get_nested(ctx, "targetKeyword"))
        and not _get_nested(ctx, "targetKeywordFound", False),
    ),
]

ALL_RULES = ISSUE_RULES + OPPORTUNITY_RULES
