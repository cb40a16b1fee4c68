"""Ordered rule sets and the categories they roll up into."""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from .errors import RegistryError
from .rules import Rule
from .checks.content_structure import (
    check_alt_text,
    check_bluf,
    check_faq,
    check_headings,
    check_semantic_html,
    check_ssr_content,
)
from .checks.llms_txt import check_ai_txt, check_llms_full_txt, check_llms_quality, check_llms_txt
from .checks.meta_tags import check_canonical, check_feed_links, check_meta_description, check_open_graph
from .checks.structured_data import check_identity_schema, check_json_ld, check_schema_depth
from .checks.technical import (
    check_ai_bot_coverage,
    check_content_type,
    check_https,
    check_lang_tag,
    check_response_time,
    check_robots_txt,
    check_sitemap,
    check_viewport,
)


@dataclass(frozen=True)
class CategoryDef:
    """A category slug, its display name and its point budget."""
    slug: str
    name: str
    max_points: float


CATEGORIES: tuple[CategoryDef, ...] = (
    CategoryDef("discoverability", "AI Discoverability", 53),
    CategoryDef("structured-data", "Structured Data", 43),
    CategoryDef("content-quality", "Content Quality", 46),
    CategoryDef("technical", "Technical AI-Readiness", 21),
)

DEFAULT_RULES: tuple[Rule, ...] = (
    # AI Discoverability
    check_llms_txt,
    check_robots_txt,
    check_sitemap,
    check_feed_links,
    check_llms_quality,
    check_ai_bot_coverage,
    check_llms_full_txt,
    check_ai_txt,
    # Structured Data
    check_json_ld,
    check_open_graph,
    check_meta_description,
    check_canonical,
    check_identity_schema,
    check_schema_depth,
    # Content Quality
    check_headings,
    check_ssr_content,
    check_faq,
    check_lang_tag,
    check_alt_text,
    check_semantic_html,
    check_bluf,
    # Technical AI-Readiness
    check_response_time,
    check_content_type,
    check_https,
    check_viewport,
)


class RuleRegistry:
    """An ordered, read-only set of rules with validated category budgets.

    Raises RegistryError when rule ids repeat, a rule names an unknown
    category, or a category budget differs from its members' max scores.
    """

    def __init__(self, rules: Iterable[Rule], categories: Sequence[CategoryDef] = CATEGORIES):
        self._rules = tuple(rules)
        self._categories = tuple(categories)
        self._validate()

    def _validate(self) -> None:
        duplicates = [rid for rid, n in Counter(r.id for r in self._rules).items() if n > 1]
        if duplicates:
            raise RegistryError(f"Duplicate rule ids: {', '.join(sorted(duplicates))}")

        slugs = {c.slug for c in self._categories}
        for rule in self._rules:
            if rule.category not in slugs:
                raise RegistryError(f"{rule.id} has unknown category {rule.category!r}")

        for category in self._categories:
            budget = sum(r.max_score for r in self._rules if r.category == category.slug)
            if budget != category.max_points:
                raise RegistryError(
                    f"Category {category.slug!r} declares {category.max_points} points "
                    f"but its rules add up to {budget}"
                )

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def categories(self) -> tuple[CategoryDef, ...]:
        return self._categories

    @property
    def max_points(self) -> float:
        return sum(r.max_score for r in self._rules)

    def get(self, rule_id: str) -> Optional[Rule]:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def subset(self, rule_ids: Iterable[str]) -> "RuleRegistry":
        """Registry with only the given rules, budgets re-derived from them."""
        wanted = set(rule_ids)
        unknown = wanted - {r.id for r in self._rules}
        if unknown:
            raise RegistryError(f"Unknown rule ids: {', '.join(sorted(unknown))}")

        rules = [r for r in self._rules if r.id in wanted]
        categories = []
        for category in self._categories:
            members = [r for r in rules if r.category == category.slug]
            if members:
                categories.append(CategoryDef(category.slug, category.name, sum(r.max_score for r in members)))
        return RuleRegistry(rules, categories)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return any(r.id == rule_id for r in self._rules)


def default_registry() -> RuleRegistry:
    """The standard rule set."""
    return RuleRegistry(DEFAULT_RULES, CATEGORIES)
