"""Check content structure for AI-readiness.

LLMs prefer:
- Clear heading hierarchy
- Text present in the initial HTML
- FAQ sections backed by FAQPage schema
- Described images and semantic HTML5 landmarks
- Pages that open with a direct answer
"""

import re

from ..models import PageData, RuleResult
from ..rules import Rule, define_rule
from . import parse_html
from .structured_data import page_schema_types


FAQ_TEXT = re.compile(r"faq|frequently\s+asked|questions", re.IGNORECASE)
CLIENT_ROOT_SELECTOR = '[id="root"], [id="app"], [id="__next"]'

SEMANTIC_ELEMENTS = ["main", "article", "section", "nav", "aside", "header", "footer"]

# Chrome that should not count as the page's opening paragraph
SKIP_SELECTORS = ", ".join([
    "nav",
    "header",
    "footer",
    "[role='navigation']",
    "[role='banner']",
    "[role='contentinfo']",
    ".cookie-banner",
    ".cookie-consent",
    "#cookie-notice",
    ".nav",
    ".navbar",
    ".sidebar",
    "aside",
])

FILLER_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^welcome\s+to",
        r"^click\s+here",
        r"^sign\s+up",
        r"^subscribe",
        r"^cookie",
        r"^we\s+use\s+cookies",
        r"^this\s+website\s+uses",
        r"^accept\s+(all\s+)?cookies",
        r"^skip\s+to\s+(main\s+)?content",
        r"^toggle\s+navigation",
        r"^menu",
        r"^loading",
        r"^please\s+enable\s+javascript",
    )
]


@define_rule(
    "R08",
    "Heading Hierarchy",
    "Check for proper heading structure (single H1, no skipped levels)",
    category="content-quality",
    max_score=10,
)
def check_headings(rule: Rule, page: PageData) -> RuleResult:
    soup = parse_html(page)
    levels = [int(h.name[1]) for h in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"])]

    if not levels:
        return rule.fail(
            "No headings found on page",
            "Add an H1 heading and use proper heading hierarchy for AI content parsing.",
        )

    h1_count = levels.count(1)
    issues: list[str] = []

    if h1_count == 0:
        issues.append("No H1 heading found")
    elif h1_count > 1:
        issues.append(f"Multiple H1 headings ({h1_count})")

    for prev, curr in zip(levels, levels[1:]):
        if curr > prev + 1:
            issues.append(f"Skipped from H{prev} to H{curr}")
            break  # first skip is enough

    details = {"h1_count": h1_count, "total_headings": len(levels), "issues": issues}

    if h1_count == 0:
        return rule.fail(
            "; ".join(issues),
            "Add a single H1 heading that describes your page content.",
            score=2,
            details=details,
        )

    if issues:
        return rule.warn(
            5,
            "; ".join(issues),
            "Fix heading hierarchy: use a single H1 and don't skip levels (e.g., H1 to H3 without H2).",
            details=details,
        )

    return rule.passed(
        f"Proper heading hierarchy ({len(levels)} headings)",
        details={"h1_count": h1_count, "total_headings": len(levels)},
    )


@define_rule(
    "R09",
    "Content Accessibility (SSR)",
    "Check if meaningful content is available in initial HTML without JavaScript",
    category="content-quality",
    max_score=10,
)
def check_ssr_content(rule: Rule, page: PageData) -> RuleResult:
    soup = parse_html(page)
    has_client_root = bool(soup.select(CLIENT_ROOT_SELECTOR))

    for tag in soup.find_all(["script", "style", "noscript", "nav", "footer", "header", "svg", "iframe"]):
        if not tag.decomposed:
            tag.decompose()

    body = soup.body
    text = re.sub(r"\s+", " ", body.get_text() if body else "").strip()
    length = len(text)

    if length < 100:
        client_only = has_client_root or (".js" in page.html and length < 50)
        if client_only:
            message = "Page appears to be client-side rendered only; AI crawlers can't read JavaScript"
        else:
            message = f"Very little text content in initial HTML ({length} chars)"
        return rule.fail(
            message,
            "Use server-side rendering (SSR) or static generation (SSG) so AI crawlers can read your "
            "content without JavaScript.",
            details={"text_length": length, "is_client_only": client_only},
        )

    if length < 500:
        return rule.warn(
            5,
            f"Thin content in initial HTML ({length} chars)",
            "Consider adding more server-rendered content. AI crawlers prefer text-heavy pages.",
            details={"text_length": length},
        )

    return rule.passed(f"Good server-rendered content ({length} chars)", details={"text_length": length})


@define_rule(
    "R10",
    "FAQ Content Detection",
    "Check for FAQ content and corresponding FAQ schema markup",
    category="content-quality",
    max_score=5,
)
def check_faq(rule: Rule, page: PageData) -> RuleResult:
    soup = parse_html(page)

    has_faq_content = (
        bool(FAQ_TEXT.search(page.html))
        or len(soup.select("dl dt")) >= 2
        or len(soup.select("details summary")) >= 2
        or bool(soup.select('[class*="accordion"], [class*="faq"], [data-faq]'))
    )

    if not has_faq_content:
        # Pages without FAQs are not penalised.
        return rule.skip("No FAQ content detected (not penalized)", score=rule.max_score)

    types = page_schema_types(page)
    if "FAQPage" not in types and "FAQ" not in types:
        return rule.warn(
            2,
            "FAQ content detected but no FAQPage schema markup",
            "Add FAQPage JSON-LD schema to your FAQ section; FAQ schema is among the most cited "
            "structured data in AI-generated answers.",
        )

    return rule.passed("FAQ content with FAQPage schema markup detected")


@define_rule(
    "R15",
    "Image Alt Text Coverage",
    "Check that images have descriptive alt text for accessibility and AI parsing",
    category="content-quality",
    max_score=5,
)
def check_alt_text(rule: Rule, page: PageData) -> RuleResult:
    soup = parse_html(page)
    images = [img for img in soup.find_all("img") if img.get("role") != "presentation"]

    if not images:
        return rule.passed(
            "No images found on page",
            details={"total_images": 0, "images_with_alt": 0, "percentage": 100},
        )

    with_alt = sum(1 for img in images if (img.get("alt") or "").strip())
    percentage = int(with_alt / len(images) * 100 + 0.5)
    details = {"total_images": len(images), "images_with_alt": with_alt, "percentage": percentage}

    if percentage >= 90:
        return rule.passed(
            f"{with_alt} of {len(images)} images have alt text ({percentage}%)",
            details=details,
        )

    message = f"Only {with_alt} of {len(images)} images have alt text ({percentage}%)"
    if percentage >= 50:
        return rule.warn(
            3,
            message,
            "Add descriptive alt text to all images. Alt text helps screen readers, SEO, and AI systems "
            "understand your images.",
            details=details,
        )

    return rule.fail(
        message,
        "Add descriptive alt text to all images. This is critical for accessibility and helps AI systems "
        "understand your content.",
        details=details,
    )


@define_rule(
    "R16",
    "Semantic HTML",
    "Check for semantic HTML5 elements (main, article, section, nav, etc.)",
    category="content-quality",
    max_score=5,
)
def check_semantic_html(rule: Rule, page: PageData) -> RuleResult:
    soup = parse_html(page)
    found = sorted(tag for tag in SEMANTIC_ELEMENTS if soup.find(tag) is not None)
    details = {"semantic_elements": found, "count": len(found)}

    if len(found) >= 3:
        return rule.passed(f"Good use of semantic HTML: {', '.join(found)}", details=details)

    if found:
        return rule.warn(
            3,
            f"Limited semantic HTML: {', '.join(found)}",
            "Use more semantic HTML5 elements (main, article, section, nav, aside, header, footer) to improve "
            "content structure for AI parsing and accessibility.",
            details=details,
        )

    return rule.fail(
        "No semantic HTML5 elements found",
        "Replace generic <div> elements with semantic HTML5 elements like <main>, <article>, <section>, "
        "<nav>, <header>, and <footer> to help AI systems understand your content structure.",
        details=details,
    )


@define_rule(
    "R24",
    "BLUF / Answer Capsule",
    "Check if page leads with a direct answer",
    category="content-quality",
    max_score=8,
)
def check_bluf(rule: Rule, page: PageData) -> RuleResult:
    soup = parse_html(page)
    for tag in soup.select(SKIP_SELECTORS):
        if not tag.decomposed:
            tag.decompose()

    first_paragraph = ""
    for selector in ("main p", "article p", "[role='main'] p", "body p"):
        match = soup.select_one(selector)
        if match is not None:
            first_paragraph = match.get_text().strip()
            if first_paragraph:
                break

    if not first_paragraph:
        return rule.fail(
            "No content paragraphs found",
            "Add a direct answer or summary at the start of your main content",
        )

    preview = first_paragraph[:120]

    if any(p.search(first_paragraph) for p in FILLER_PATTERNS):
        return rule.warn(
            2,
            "First paragraph is filler content",
            "Replace filler/boilerplate with a direct answer to the user's likely question",
            details={"preview": preview},
        )

    word_count = len(first_paragraph.split())
    details = {"word_count": word_count, "preview": preview}

    if word_count < 15:
        return rule.warn(
            3,
            f"First paragraph is too short ({word_count} words)",
            "Expand the opening to a more substantive answer (15-300 words)",
            details=details,
        )

    if word_count > 300:
        return rule.warn(
            4,
            f"First paragraph is too long ({word_count} words)",
            "Shorten the opening to a more concise answer (15-300 words)",
            details=details,
        )

    return rule.passed(f"Page opens with substantive answer ({word_count} words)", details=details)
