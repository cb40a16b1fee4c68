"""Technical checks for AI-readiness.

Key factors:
- robots.txt (explicit AI crawler rules)
- sitemap.xml
- Response time
- Content-Type and compression
- HTTPS
- Language declaration and mobile viewport
"""

import re
from dataclasses import dataclass, field

from ..models import PageData, RuleResult
from ..rules import Rule, define_rule
from . import parse_html


AI_BOTS = [
    "GPTBot",
    "ClaudeBot",
    "PerplexityBot",
    "Google-Extended",
    "Amazonbot",
    "anthropic-ai",
    "CCBot",
    "ChatGPT-User",
    "Bytespider",
    "cohere-ai",
]

EXTENDED_AI_BOTS = [
    "GPTBot",
    "ChatGPT-User",
    "Google-Extended",
    "ClaudeBot",
    "Claude-Web",
    "anthropic-ai",
    "PerplexityBot",
    "Amazonbot",
    "CCBot",
    "Bytespider",
    "cohere-ai",
    "Meta-ExternalAgent",
    "FacebookBot",
    "Applebot-Extended",
    "YouBot",
    "Omgilibot",
    "AI2Bot",
    "Diffbot",
]

SITEMAP_DIRECTIVE = re.compile(r"^sitemap:\s*https?://", re.IGNORECASE | re.MULTILINE)
LANG_PATTERN = re.compile(r"^[a-z]{2,3}(-[A-Z]{2})?$")


@dataclass
class RobotsGroup:
    """One User-agent group of a robots.txt file."""
    agents: list[str] = field(default_factory=list)
    disallow: list[str] = field(default_factory=list)

    @property
    def blocks_everything(self) -> bool:
        return "/" in self.disallow


def parse_robots_txt(text: str) -> list[RobotsGroup]:
    """Split robots.txt into groups; consecutive User-agent lines share a group."""
    groups: list[RobotsGroup] = []
    current: RobotsGroup | None = None
    in_rules = False

    for raw_line in text.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if ":" not in line:
            continue
        key, value = (part.strip() for part in line.split(":", 1))
        key = key.lower()

        if key == "user-agent":
            if current is None or in_rules:
                current = RobotsGroup()
                groups.append(current)
                in_rules = False
            current.agents.append(value.lower())
        elif key in ("allow", "disallow") and current is not None:
            in_rules = True
            if key == "disallow" and value:
                current.disallow.append(value)

    return groups


def _robots_found(page: PageData) -> bool:
    return page.robots_txt.ok and page.robots_txt.status == 200


@define_rule(
    "R02",
    "robots.txt AI Crawler Rules",
    "Check if robots.txt has explicit rules for AI crawlers",
    category="discoverability",
    max_score=10,
)
def check_robots_txt(rule: Rule, page: PageData) -> RuleResult:
    if not _robots_found(page):
        return rule.fail(
            "No robots.txt found",
            "Add a robots.txt file with explicit rules for AI crawlers (GPTBot, ClaudeBot, etc.)",
        )

    agents = {agent for group in parse_robots_txt(page.robots_txt.body) for agent in group.agents}
    found = [bot for bot in AI_BOTS if bot.lower() in agents]

    if not found:
        return rule.warn(
            5,
            "robots.txt exists but has no AI-specific crawler rules",
            "Add explicit User-agent rules for GPTBot, ClaudeBot, and PerplexityBot to control AI crawler access.",
            details={"found_bots": []},
        )

    return rule.passed(
        f"robots.txt has rules for {len(found)} AI crawler(s)",
        details={"found_bots": found},
    )


@define_rule(
    "R03",
    "Sitemap.xml Exists",
    "Check for XML sitemap for AI crawler discovery",
    category="discoverability",
    max_score=10,
)
def check_sitemap(rule: Rule, page: PageData) -> RuleResult:
    sitemap = page.sitemap_xml
    in_robots = page.robots_txt.ok and bool(SITEMAP_DIRECTIVE.search(page.robots_txt.body))

    is_xml = sitemap.ok and sitemap.status == 200 and any(
        marker in sitemap.body for marker in ("<?xml", "<urlset", "<sitemapindex")
    )

    if is_xml:
        return rule.passed("Valid XML sitemap found", details={"sitemap_in_robots": in_robots})

    if in_robots:
        return rule.warn(
            5,
            "Sitemap referenced in robots.txt but /sitemap.xml not directly accessible",
            "Ensure your sitemap.xml is accessible at the root URL for maximum crawler compatibility.",
        )

    return rule.fail(
        "No sitemap.xml found",
        "Add a sitemap.xml to help AI crawlers discover all your pages.",
    )


@define_rule(
    "R21",
    "AI Bot Coverage Breadth",
    "Check how many AI crawlers are explicitly addressed in robots.txt",
    category="discoverability",
    max_score=5,
)
def check_ai_bot_coverage(rule: Rule, page: PageData) -> RuleResult:
    # A missing robots.txt is already penalised by R02.
    if not _robots_found(page):
        return rule.skip("No robots.txt found (R02 handles basic check)", score=0)

    groups = parse_robots_txt(page.robots_txt.body)
    allowed: list[str] = []
    blocked: list[str] = []
    unmentioned: list[str] = []

    for bot in EXTENDED_AI_BOTS:
        matching = [g for g in groups if bot.lower() in g.agents]
        if not matching:
            unmentioned.append(bot)
        elif any(g.blocks_everything for g in matching):
            blocked.append(bot)
        else:
            allowed.append(bot)

    mentioned = len(allowed) + len(blocked)
    total = len(EXTENDED_AI_BOTS)
    details = {
        "mentioned": mentioned,
        "allowed": allowed,
        "blocked": blocked,
        "unmentioned": unmentioned,
    }

    if mentioned == 0:
        return rule.fail(
            "No AI bots explicitly addressed in robots.txt",
            "Add explicit User-agent rules for major AI crawlers (GPTBot, ClaudeBot, Google-Extended, etc.)",
            details=details,
        )

    if mentioned <= 3:
        return rule.warn(
            2,
            f"Only {mentioned} AI bot(s) addressed - limited coverage",
            f"Expand coverage to include more AI crawlers (currently {mentioned}/{total})",
            details=details,
        )

    if mentioned <= 6:
        return rule.warn(
            3,
            f"{mentioned} AI bots addressed - moderate coverage",
            f"Consider adding more AI crawlers for comprehensive coverage (currently {mentioned}/{total})",
            details=details,
        )

    return rule.passed(f"{mentioned} AI bots addressed - good coverage", details=details)


@define_rule(
    "R11",
    "Response Time",
    "Check Time to First Byte (TTFB); AI crawlers have strict timeouts",
    category="technical",
    max_score=10,
)
def check_response_time(rule: Rule, page: PageData) -> RuleResult:
    ttfb = int(page.ttfb + 0.5)

    if ttfb > 2000:
        return rule.fail(
            f"Slow TTFB: {ttfb}ms (should be <500ms)",
            "Improve server response time. AI crawlers may skip slow sites. "
            "Consider caching, CDN, or server optimization.",
            details={"ttfb": ttfb},
        )

    if ttfb > 500:
        score = max(2, int(10 - ((ttfb - 500) / 1500) * 8 + 0.5))
        return rule.warn(
            score,
            f"Moderate TTFB: {ttfb}ms (target <500ms)",
            "Consider improving server response time for better AI crawler compatibility.",
            details={"ttfb": ttfb},
        )

    return rule.passed(f"Fast TTFB: {ttfb}ms", details={"ttfb": ttfb})


@define_rule(
    "R12",
    "Content-Type & Encoding",
    "Verify proper content-type header and compression",
    category="technical",
    max_score=5,
)
def check_content_type(rule: Rule, page: PageData) -> RuleResult:
    content_type = page.header("content-type")
    encoding = page.header("content-encoding")
    details = {"content_type": content_type, "encoding": encoding}

    if "text/html" not in content_type:
        return rule.fail(
            f"Wrong content-type: {content_type or '(none)'}",
            "Ensure your server returns Content-Type: text/html; charset=utf-8",
            details=details,
        )

    has_charset = "charset=" in content_type or "utf-8" in content_type
    has_compression = any(c in encoding for c in ("gzip", "br", "deflate"))

    if has_charset and has_compression:
        return rule.passed("Proper content-type with compression", details=details)

    issues = []
    score = 5
    if not has_charset:
        issues.append("missing charset")
        score -= 1
    if not has_compression:
        issues.append("no compression (gzip/brotli)")
        score -= 2

    if not has_compression:
        recommendation = "Enable gzip or brotli compression to reduce payload size for AI crawlers."
    else:
        recommendation = "Add charset=utf-8 to your Content-Type header."

    return rule.warn(score, f"Content-type OK but {', '.join(issues)}", recommendation, details=details)


@define_rule(
    "R13",
    "Language Tag",
    "Check for lang attribute on <html> element for accessibility and i18n",
    category="content-quality",
    max_score=3,
)
def check_lang_tag(rule: Rule, page: PageData) -> RuleResult:
    soup = parse_html(page)
    html_tag = soup.find("html")
    lang = (html_tag.get("lang") or "").strip() if html_tag else ""

    if not lang:
        return rule.fail(
            "No lang attribute found on <html> element",
            'Add lang attribute to <html> element (e.g., <html lang="en">) for accessibility and search engines.',
        )

    if not LANG_PATTERN.match(lang):
        return rule.warn(
            1,
            f'Lang attribute present but may be invalid: "{lang}"',
            'Ensure lang attribute uses valid BCP-47 language code (e.g., "en", "en-US", "de").',
            details={"lang_code": lang},
        )

    return rule.passed(f'Valid lang attribute: "{lang}"', details={"lang_code": lang})


@define_rule(
    "R14",
    "HTTPS Enforcement",
    "Verify that the page is served over secure HTTPS",
    category="technical",
    max_score=3,
)
def check_https(rule: Rule, page: PageData) -> RuleResult:
    if not page.url.lower().startswith("https://"):
        return rule.fail(
            "Page is not served over HTTPS",
            "Enable HTTPS for your site. This is critical for security, SEO, and user trust.",
            details={"protocol": "http"},
        )

    return rule.passed("Page is served over HTTPS", details={"protocol": "https"})


@define_rule(
    "R20",
    "Mobile Viewport Meta Tag",
    "Check for proper viewport meta tag for mobile responsiveness",
    category="technical",
    max_score=3,
)
def check_viewport(rule: Rule, page: PageData) -> RuleResult:
    viewport = parse_html(page).find("meta", attrs={"name": "viewport"})

    if viewport is None:
        return rule.fail(
            "No viewport meta tag found",
            'Add <meta name="viewport" content="width=device-width, initial-scale=1"> for proper mobile rendering.',
        )

    content = viewport.get("content") or ""
    if "width=device-width" in content:
        return rule.passed("Viewport meta tag properly configured", details={"content": content})

    return rule.warn(
        1,
        "Viewport meta tag exists but missing width=device-width",
        'Update viewport meta tag to include "width=device-width" for proper mobile responsiveness.',
        details={"content": content},
    )
