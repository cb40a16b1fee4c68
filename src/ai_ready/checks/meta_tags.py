"""Check meta tags for AI-readiness.

Key head elements for LLM visibility:
- og:* tags: previews and page summaries
- description: concise page summary
- canonical: avoid duplicate content
- feed links: content discovery
"""

from ..models import PageData, RuleResult
from ..rules import Rule, define_rule
from . import parse_html


CORE_OG_TAGS = ["og:title", "og:description", "og:image", "og:type"]
FEED_TYPES = {
    "application/rss+xml": "RSS",
    "application/atom+xml": "Atom",
}


@define_rule(
    "R05",
    "OpenGraph Tags",
    "Check for core OpenGraph meta tags (title, description, image, type)",
    category="structured-data",
    max_score=10,
)
def check_open_graph(rule: Rule, page: PageData) -> RuleResult:
    soup = parse_html(page)
    found: list[str] = []
    missing: list[str] = []

    for prop in CORE_OG_TAGS:
        tag = soup.find("meta", property=prop)
        if tag is not None and (tag.get("content") or "").strip():
            found.append(prop)
        else:
            missing.append(prop)

    details = {"found": found, "missing": missing}

    if not found:
        return rule.fail(
            "No OpenGraph tags found",
            "Add og:title, og:description, og:image, and og:type meta tags for better AI and social sharing.",
            details=details,
        )

    if missing:
        score = int(len(found) / len(CORE_OG_TAGS) * rule.max_score + 0.5)
        return rule.warn(
            score,
            f"Missing OpenGraph tags: {', '.join(missing)}",
            f"Add missing tags: {', '.join(missing)}",
            details=details,
        )

    return rule.passed(f"All {len(CORE_OG_TAGS)} core OpenGraph tags present", details={"found": found})


@define_rule(
    "R06",
    "Meta Description",
    "Check for meta description tag with appropriate length",
    category="structured-data",
    max_score=5,
)
def check_meta_description(rule: Rule, page: PageData) -> RuleResult:
    tag = parse_html(page).find("meta", attrs={"name": "description"})
    description = (tag.get("content") or "").strip() if tag else ""

    if not description:
        return rule.fail(
            "No meta description found",
            "Add a meta description (50-160 characters) to summarize your page content.",
        )

    length = len(description)
    if length < 50:
        return rule.warn(
            2,
            f"Meta description too short ({length} chars, min 50)",
            "Expand your meta description to at least 50 characters for better AI comprehension.",
            details={"length": length},
        )

    if length > 160:
        return rule.warn(
            3,
            f"Meta description too long ({length} chars, max 160)",
            "Shorten your meta description to 160 characters or less.",
            details={"length": length},
        )

    return rule.passed(f"Meta description present ({length} chars)", details={"length": length})


@define_rule(
    "R07",
    "Canonical URL",
    "Check for link rel=canonical with absolute URL",
    category="structured-data",
    max_score=5,
)
def check_canonical(rule: Rule, page: PageData) -> RuleResult:
    canonical = parse_html(page).find("link", rel="canonical")
    href = (canonical.get("href") or "").strip() if canonical else ""

    if not href:
        return rule.fail(
            "No canonical URL found",
            'Add <link rel="canonical" href="https://..."> to prevent duplicate content issues with AI crawlers.',
        )

    if not href.lower().startswith(("http://", "https://")):
        return rule.warn(
            2,
            "Canonical URL is relative, should be absolute",
            "Use an absolute URL (starting with https://) for the canonical link.",
            details={"canonical": href},
        )

    return rule.passed("Canonical URL present", details={"canonical": href})


@define_rule(
    "R18",
    "RSS/Atom Feed Detection",
    "Check for discoverable RSS or Atom feed links in HTML head",
    category="discoverability",
    max_score=5,
)
def check_feed_links(rule: Rule, page: PageData) -> RuleResult:
    links = parse_html(page).find_all("link", rel="alternate")

    if not links:
        return rule.fail(
            "No feed link found",
            'Add <link rel="alternate" type="application/rss+xml" href="/feed.xml"> to make your content '
            "discoverable via feeds.",
        )

    feeds: dict[str, list[str]] = {"RSS": [], "Atom": []}
    other: list[str] = []
    for link in links:
        href = link.get("href")
        if not href:
            continue
        kind = FEED_TYPES.get((link.get("type") or "").strip().lower())
        if kind:
            feeds[kind].append(href)
        else:
            other.append(href)

    if feeds["RSS"] or feeds["Atom"]:
        summary = ", ".join(f"{kind} ({len(hrefs)})" for kind, hrefs in feeds.items() if hrefs)
        return rule.passed(
            f"Feed link(s) found: {summary}",
            details={"rss_feeds": feeds["RSS"], "atom_feeds": feeds["Atom"]},
        )

    if other:
        return rule.warn(
            2,
            "Feed link found but missing or incorrect type attribute",
            'Set type="application/rss+xml" or type="application/atom+xml" on feed link elements.',
            details={"other_feeds": other},
        )

    return rule.fail(
        "No valid feed link found",
        'Add <link rel="alternate" type="application/rss+xml" href="/feed.xml"> for content discoverability.',
    )
