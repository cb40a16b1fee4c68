"""Main auditor that runs all rules."""

import asyncio
import inspect
import logging
import time
from datetime import datetime, timezone
from typing import Optional

import httpx

from . import __version__
from .config import AuditOptions
from .fetcher import fetch_page_data
from .models import AuditResult, PageData, RuleResult, RuleStatus
from .registry import RuleRegistry, default_registry
from .rules import Rule
from .scoring import (
    build_categories,
    build_recommendations,
    calculate_score,
    get_grade,
    round_half_up,
)


logger = logging.getLogger(__name__)


async def run_rule(rule: Rule, page: PageData) -> RuleResult:
    """Run one rule, turning an unexpected exception into a failed result."""
    try:
        outcome = rule.check(page)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome
    except Exception as e:
        logger.exception("Rule %s raised while checking %s", rule.id, page.url)
        return RuleResult(
            id=rule.id,
            name=rule.name,
            description=rule.description,
            category=rule.category,
            status=RuleStatus.FAIL,
            score=0,
            max_score=rule.max_score,
            message=f"Rule failed to run: {e}",
            recommendation=f"{rule.name} could not be evaluated; re-run the audit or report the error.",
            details={"error": f"{type(e).__name__}: {e}"},
        )


async def evaluate(page: PageData, registry: Optional[RuleRegistry] = None) -> AuditResult:
    """Score an already-fetched page.

    Rules share no state, so they are evaluated concurrently; results keep
    registry order. Timestamp, duration and version are left for the caller.
    """
    if registry is None:
        registry = default_registry()
    results = list(await asyncio.gather(*(run_rule(rule, page) for rule in registry)))

    score = calculate_score(results)
    return AuditResult(
        url=page.url,
        score=score,
        grade=get_grade(score),
        categories=build_categories(results, registry.categories),
        rules=results,
        recommendations=build_recommendations(results),
        version=__version__,
    )


async def audit(
    url: str,
    options: Optional[AuditOptions] = None,
    *,
    registry: Optional[RuleRegistry] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> AuditResult:
    """Run a complete AI-readiness audit on a URL.

    Args:
        url: The URL to audit
        options: Timeout, user agent and TLS settings
        registry: Rules to run (default: the standard rule set)
        client: Optional HTTP client to reuse

    Returns:
        AuditResult with score, grade, categories and recommendations

    Raises:
        BlockedHostError, FetchError: the page could not be fetched.
        No partial result is returned and nothing is retried.
    """
    started = time.perf_counter()
    logger.info("Auditing %s", url)

    page = await fetch_page_data(url, options, client=client)
    result = await evaluate(page, registry)

    result.timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    result.duration = round_half_up((time.perf_counter() - started) * 1000)

    logger.info("Audited %s: %s/100 (%s) in %sms", result.url, result.score, result.grade.value, result.duration)
    return result


def audit_url(url: str, options: Optional[AuditOptions] = None, **kwargs) -> AuditResult:
    """Blocking wrapper around audit() for scripts and the CLI."""
    return asyncio.run(audit(url, options, **kwargs))
