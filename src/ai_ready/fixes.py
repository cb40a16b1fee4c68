"""Machine-suggested fixes for failing rules."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FixSuggestion:
    """A remediation command for a rule.

    ``automatic`` is True when the command regenerates a well-known file
    without any user-authored input; otherwise the command is advisory.
    """
    command: str
    automatic: bool


FIX_MAP: dict[str, FixSuggestion] = {
    "R01": FixSuggestion("geo-seo generate --only llms-txt", automatic=True),
    "R02": FixSuggestion("geo-seo generate --only robots-txt", automatic=True),
    "R03": FixSuggestion("geo-seo generate --only sitemap", automatic=True),
    "R04": FixSuggestion("geo-seo generate", automatic=False),
    "R17": FixSuggestion("geo-seo generate", automatic=False),
}


def get_fix_suggestion(rule_id: str) -> Optional[FixSuggestion]:
    """Fix suggestion for a rule id, or None when no automated fix exists."""
    return FIX_MAP.get(rule_id)
