"""Scoring, grading and recommendation ranking over rule results."""

import math
from typing import Sequence

from .fixes import get_fix_suggestion
from .models import Category, Grade, Recommendation, RuleResult, RuleStatus
from .registry import CATEGORIES, CategoryDef


GRADE_THRESHOLDS = [
    (90, Grade.A),
    (75, Grade.B),
    (60, Grade.C),
    (40, Grade.D),
]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_score(results: Sequence[RuleResult]) -> int:
    """Overall 0-100 score as a share of the points available."""
    total_max = sum(r.max_score for r in results)
    if total_max <= 0:
        return 0
    total = sum(r.score for r in results)
    return max(0, min(100, round_half_up(total * 100 / total_max)))


def get_grade(score: float) -> Grade:
    """Letter grade for a 0-100 score."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return Grade.F


def build_categories(
    results: Sequence[RuleResult],
    categories: Sequence[CategoryDef] = CATEGORIES,
) -> list[Category]:
    """Group results by category, capping each score at its budget."""
    grouped = []
    for definition in categories:
        members = [r for r in results if r.category == definition.slug]
        score = sum(r.score for r in members)
        grouped.append(Category(
            name=definition.name,
            slug=definition.slug,
            max_points=definition.max_points,
            score=min(score, definition.max_points),
            rules=members,
        ))
    return grouped


def build_recommendations(results: Sequence[RuleResult]) -> list[Recommendation]:
    """Recommendations from warned and failed rules, highest impact first."""
    recommendations = []
    for result in results:
        if result.status in (RuleStatus.PASS, RuleStatus.SKIP) or not result.recommendation:
            continue
        fix = get_fix_suggestion(result.id)
        recommendations.append(Recommendation(
            rule=result.id,
            message=result.recommendation,
            impact=result.max_score - result.score,
            fix=fix.command if fix else None,
        ))
    # sorted() is stable, ties keep rule order
    return sorted(recommendations, key=lambda r: r.impact, reverse=True)
