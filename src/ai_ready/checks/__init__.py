"""Audit checks for AI-readiness.

Each module groups rules by concern. Every rule is a pure function of the
PageData it receives and parses its own copy of the HTML.
"""

from bs4 import BeautifulSoup

from ..models import PageData


def parse_html(page: PageData) -> BeautifulSoup:
    """Parse the page HTML into a fresh tree the caller may modify."""
    return BeautifulSoup(page.html, "lxml")
