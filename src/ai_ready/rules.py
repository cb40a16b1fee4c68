"""The rule contract shared by every audit check."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from .models import PageData, RuleResult, RuleStatus


CheckOutcome = Union[RuleResult, Awaitable[RuleResult]]
CheckFunc = Callable[["Rule", PageData], CheckOutcome]


@dataclass(frozen=True)
class Rule:
    """A named, stateless inspection of a PageData.

    The check function receives the rule itself so it can build results with
    the rule's identity, plus the page. It may return a RuleResult or an
    awaitable that resolves to one.
    """
    id: str
    name: str
    description: str
    category: str
    max_score: float
    func: CheckFunc

    def check(self, page: PageData) -> CheckOutcome:
        return self.func(self, page)

    def result(
        self,
        status: RuleStatus,
        score: float,
        message: str,
        recommendation: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> RuleResult:
        if not 0 <= score <= self.max_score:
            raise ValueError(f"{self.id}: score {score} outside 0..{self.max_score}")
        if status is RuleStatus.PASS:
            recommendation = None
        return RuleResult(
            id=self.id,
            name=self.name,
            description=self.description,
            category=self.category,
            status=status,
            score=score,
            max_score=self.max_score,
            message=message,
            recommendation=recommendation,
            details=details,
        )

    def passed(self, message: str, score: Optional[float] = None, details: Optional[dict[str, Any]] = None) -> RuleResult:
        return self.result(RuleStatus.PASS, self.max_score if score is None else score, message, details=details)

    def warn(self, score: float, message: str, recommendation: str, details: Optional[dict[str, Any]] = None) -> RuleResult:
        return self.result(RuleStatus.WARN, score, message, recommendation, details)

    def fail(
        self,
        message: str,
        recommendation: str,
        score: float = 0,
        details: Optional[dict[str, Any]] = None,
    ) -> RuleResult:
        return self.result(RuleStatus.FAIL, score, message, recommendation, details)

    def skip(self, message: str, score: float, details: Optional[dict[str, Any]] = None) -> RuleResult:
        return self.result(RuleStatus.SKIP, score, message, details=details)


def define_rule(
    id: str,
    name: str,
    description: str,
    category: str,
    max_score: float,
) -> Callable[[CheckFunc], Rule]:
    """Turn a check function into a Rule.

    Example:
        @define_rule("R14", "HTTPS Enforcement", "...", category="technical", max_score=3)
        def r14_https(rule, page):
            ...
    """
    def wrap(func: CheckFunc) -> Rule:
        return Rule(
            id=id,
            name=name,
            description=description,
            category=category,
            max_score=max_score,
            func=func,
        )
    return wrap
