"""ai-ready - audit a web page for AI crawler and answer-engine readiness."""

__version__ = "0.1.0"

from .auditor import audit, audit_url, evaluate
from .config import AuditOptions
from .errors import AuditError, BlockedHostError, FetchError, FetchTimeoutError, RegistryError
from .fetcher import fetch_page_data
from .fixes import FixSuggestion, get_fix_suggestion
from .models import (
    AuditResult,
    Category,
    FetchResult,
    Grade,
    PageData,
    Recommendation,
    RuleResult,
    RuleStatus,
)
from .registry import CATEGORIES, CategoryDef, RuleRegistry, default_registry
from .rules import Rule, define_rule
from .scoring import build_categories, build_recommendations, calculate_score, get_grade

__all__ = [
    "__version__",
    "audit",
    "audit_url",
    "evaluate",
    "fetch_page_data",
    "AuditOptions",
    "AuditError",
    "BlockedHostError",
    "FetchError",
    "FetchTimeoutError",
    "RegistryError",
    "FixSuggestion",
    "get_fix_suggestion",
    "AuditResult",
    "Category",
    "FetchResult",
    "Grade",
    "PageData",
    "Recommendation",
    "RuleResult",
    "RuleStatus",
    "CATEGORIES",
    "CategoryDef",
    "RuleRegistry",
    "default_registry",
    "Rule",
    "define_rule",
    "build_categories",
    "build_recommendations",
    "calculate_score",
    "get_grade",
]
