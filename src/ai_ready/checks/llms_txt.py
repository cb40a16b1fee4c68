"""Checks for llms.txt, llms-full.txt and ai.txt.

The llms.txt specification: https://llmstxt.org/
- /llms.txt - markdown overview of the site, starting with an H1
- /llms-full.txt - extended version with the full documentation
"""

import re

from ..models import FetchResult, PageData, RuleResult
from ..rules import Rule, define_rule


H1_PATTERN = re.compile(r"^#\s+.+", re.MULTILINE)
H2_PATTERN = re.compile(r"^##\s+.+", re.MULTILINE)
LINK_PATTERN = re.compile(r"\[.+\]\(.+\)")


def _found(resource: FetchResult) -> bool:
    return resource.ok and resource.status == 200


@define_rule(
    "R01",
    "llms.txt Exists",
    "Check for /llms.txt file that helps AI systems understand your site",
    category="discoverability",
    max_score=10,
)
def check_llms_txt(rule: Rule, page: PageData) -> RuleResult:
    if not _found(page.llms_txt):
        return rule.fail(
            "No /llms.txt file found",
            "Add /llms.txt to help AI systems understand your site. See https://llmstxt.org for the format.",
        )

    body = page.llms_txt.body.strip()
    if not body:
        return rule.fail(
            "/llms.txt exists but is empty",
            "Add content to your /llms.txt. It should be markdown with an H1 heading.",
        )

    if not H1_PATTERN.search(body):
        return rule.warn(
            5,
            "/llms.txt exists but missing H1 heading",
            "Add a markdown H1 heading (# Your Site Name) to your /llms.txt for proper structure.",
        )

    return rule.passed("/llms.txt found with valid markdown structure")


@define_rule(
    "R19",
    "llms.txt Content Quality",
    "Analyze the quality and completeness of llms.txt content",
    category="discoverability",
    max_score=5,
)
def check_llms_quality(rule: Rule, page: PageData) -> RuleResult:
    # Existence is scored by R01; nothing to grade here.
    if not _found(page.llms_txt):
        return rule.skip("llms.txt does not exist (skipped)", score=rule.max_score)

    body = page.llms_txt.body.strip()
    if not body:
        return rule.skip("llms.txt is empty (skipped)", score=rule.max_score)

    signals: list[str] = []
    if H1_PATTERN.search(body):
        signals.append("H1 heading")
    if len(body) >= 100:
        signals.append("sufficient length")
    if LINK_PATTERN.search(body):
        signals.append("contains links")
    if len(H2_PATTERN.findall(body)) >= 2:
        signals.append("multiple sections")

    prose = [
        line for line in body.split("\n")
        if line.strip() and not line.strip().startswith("#")
    ]
    if len(prose) >= 3:
        signals.append("descriptive content")

    quality = len(signals)
    details = {"quality_score": quality, "signals": signals}

    if quality >= 4:
        return rule.passed(
            f"High-quality llms.txt ({quality}/5 signals): {', '.join(signals)}",
            details=details,
        )

    if quality >= 2:
        return rule.warn(
            3,
            f"llms.txt could be improved ({quality}/5 signals)",
            "Enhance llms.txt with: H1 heading, sufficient content (100+ chars), markdown links, "
            "multiple sections (## headings), and descriptive text.",
            details=details,
        )

    return rule.fail(
        f"Minimal llms.txt quality ({quality}/5 signals)",
        "Improve llms.txt with: H1 heading, more content, markdown links, multiple sections, "
        "and descriptive paragraphs.",
        score=1,
        details=details,
    )


@define_rule(
    "R22",
    "llms-full.txt Exists",
    "Check for /llms-full.txt companion file",
    category="discoverability",
    max_score=5,
)
def check_llms_full_txt(rule: Rule, page: PageData) -> RuleResult:
    resource = page.llms_full_txt

    if not _found(resource):
        return rule.fail(
            "No /llms-full.txt file found",
            "Add /llms-full.txt with comprehensive documentation for AI systems",
            details={"status": resource.status},
        )

    length = len(resource.body.strip())
    if length == 0:
        return rule.fail(
            "/llms-full.txt exists but is empty",
            "Populate /llms-full.txt with detailed site documentation",
            details={"length": 0},
        )

    if length < 500:
        return rule.warn(
            3,
            f"/llms-full.txt is too short ({length} chars)",
            "Expand /llms-full.txt with more comprehensive documentation (aim for 500+ characters)",
            details={"length": length},
        )

    return rule.passed(f"/llms-full.txt is substantial ({length} chars)", details={"length": length})


@define_rule(
    "R23",
    "ai.txt Exists",
    "Check for /ai.txt declaring AI interaction permissions",
    category="discoverability",
    max_score=3,
)
def check_ai_txt(rule: Rule, page: PageData) -> RuleResult:
    resource = page.ai_txt

    if not _found(resource):
        return rule.fail(
            "No /ai.txt file found",
            "Add /ai.txt to declare AI interaction permissions and policies",
            details={"status": resource.status, "error": resource.error},
        )

    length = len(resource.body.strip())
    if length == 0:
        return rule.fail(
            "/ai.txt exists but is empty",
            "Populate /ai.txt with AI interaction permissions and policies",
            details={"length": 0},
        )

    return rule.passed(f"/ai.txt exists with content ({length} chars)", details={"length": length})
