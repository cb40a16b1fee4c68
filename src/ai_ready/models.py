"""Data models for AI-readiness audit results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class RuleStatus(Enum):
    """Outcome of a single rule check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    SKIP = "skip"


class Grade(Enum):
    """Letter grade derived from the overall score."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching one auxiliary resource.

    A failed fetch always carries an empty body. ``status`` is 0 when the
    request never produced an HTTP response (blocked, timed out, DNS).
    """
    ok: bool
    status: int
    body: str = ""
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str, status: int = 0) -> "FetchResult":
        return cls(ok=False, status=status, body="", error=error)


def _not_fetched() -> FetchResult:
    return FetchResult.failure("not fetched")


@dataclass(frozen=True)
class PageData:
    """Snapshot of one page and its well-known companion files."""
    url: str
    html: str
    status_code: int
    headers: dict[str, str]
    ttfb: float
    total_time: float
    llms_txt: FetchResult
    robots_txt: FetchResult
    sitemap_xml: FetchResult
    llms_full_txt: FetchResult = field(default_factory=_not_fetched)
    ai_txt: FetchResult = field(default_factory=_not_fetched)
    final_url: Optional[str] = None

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)


@dataclass
class RuleResult:
    """Result of running one rule against a page."""
    id: str
    name: str
    description: str
    category: str
    status: RuleStatus
    score: float
    max_score: float
    message: str
    recommendation: Optional[str] = None
    details: Optional[dict[str, Any]] = None

    @property
    def impact(self) -> float:
        """Points left on the table by this rule."""
        return self.max_score - self.score

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "status": self.status.value,
            "score": self.score,
            "max_score": self.max_score,
            "message": self.message,
        }
        if self.recommendation is not None:
            data["recommendation"] = self.recommendation
        if self.details is not None:
            data["details"] = self.details
        return data


@dataclass
class Category:
    """Rule results grouped under one category with its point budget."""
    name: str
    slug: str
    max_points: float
    score: float
    rules: list[RuleResult] = field(default_factory=list)

    @property
    def percentage(self) -> int:
        if self.max_points <= 0:
            return 0
        return int((self.score / self.max_points) * 100 + 0.5)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "slug": self.slug,
            "max_points": self.max_points,
            "score": self.score,
            "rules": [r.to_dict() for r in self.rules],
        }


@dataclass
class Recommendation:
    """An actionable item derived from a non-passing rule."""
    rule: str
    message: str
    impact: float
    fix: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "rule": self.rule,
            "message": self.message,
            "impact": self.impact,
        }
        if self.fix is not None:
            data["fix"] = self.fix
        return data


@dataclass
class AuditResult:
    """Complete audit result for a URL."""
    url: str
    score: int
    grade: Grade
    categories: list[Category] = field(default_factory=list)
    rules: list[RuleResult] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    timestamp: str = ""
    duration: int = 0
    version: str = ""

    @property
    def quick_wins(self) -> list[Recommendation]:
        """Top recommendations by impact."""
        return self.recommendations[:5]

    def rule(self, rule_id: str) -> Optional[RuleResult]:
        for result in self.rules:
            if result.id == rule_id:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "score": self.score,
            "grade": self.grade.value,
            "categories": [c.to_dict() for c in self.categories],
            "rules": [r.to_dict() for r in self.rules],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "timestamp": self.timestamp,
            "duration": self.duration,
            "version": self.version,
        }
