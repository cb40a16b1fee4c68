"""Embeddable score badges."""

import html
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from .models import AuditResult, Grade


SHIELDS_BASE = "https://img.shields.io/badge"
SHIELDS_ENDPOINT = "https://img.shields.io/endpoint"
# Serves shields.io endpoint JSON with the live score for a host
BADGE_API = "https://geo-badge.glincker.workers.dev"

GRADE_COLORS = {
    Grade.A: "brightgreen",
    Grade.B: "green",
    Grade.C: "yellow",
    Grade.D: "orange",
    Grade.F: "red",
}


@dataclass
class BadgeSnippets:
    """Badge URLs plus ready-to-paste markup.

    ``dynamic`` re-scores the host on each render; ``static`` freezes the
    current score.
    """
    dynamic: str
    static: str
    markdown: str
    html: str


def grade_to_color(grade: Grade) -> str:
    return GRADE_COLORS[grade]


def _hostname(url: str) -> str:
    try:
        return httpx.URL(url).host or url
    except httpx.InvalidURL:
        return url


def format_badge(result: AuditResult) -> BadgeSnippets:
    """Build shields.io badge snippets for an audit result."""
    color = grade_to_color(result.grade)
    # shields.io escapes: "--" is a literal dash in the label
    label = "AI--Ready"
    message = quote(f"{result.score} ({result.grade.value})")
    static_url = f"{SHIELDS_BASE}/{label}-{message}-{color}"
    hostname = _hostname(result.url)
    dynamic_url = f"{SHIELDS_ENDPOINT}?url={quote(f'{BADGE_API}/?url={hostname}', safe='')}"
    alt = f"AI-Ready: {result.score} ({result.grade.value})"

    href = html.escape(result.url, quote=True)
    return BadgeSnippets(
        dynamic=dynamic_url,
        static=static_url,
        markdown=f"[![{alt}]({static_url})]({result.url})",
        html=(
            f'<a href="{href}" title="{html.escape(hostname, quote=True)}">'
            f'<img alt="{html.escape(alt, quote=True)}" src="{html.escape(static_url, quote=True)}"></a>'
        ),
    )
