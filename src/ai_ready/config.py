"""Audit options and their environment overrides."""

import os
from dataclasses import dataclass

from . import __version__


DEFAULT_TIMEOUT_MS = 10_000
DEFAULT_USER_AGENT = f"AIReady/{__version__} (+https://github.com/unimakeit/ai-ready; AI-readiness audit)"
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,*/*"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AuditOptions:
    """Knobs for a single audit.

    Attributes:
        timeout_ms: Budget for each individual request (main page and each
            auxiliary resource), in milliseconds.
        user_agent: Value sent as the User-Agent header.
        insecure: Skip TLS certificate verification.
    """
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    user_agent: str = DEFAULT_USER_AGENT
    insecure: bool = False

    def __post_init__(self):
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def from_env(
        cls,
        timeout_ms: int | None = None,
        user_agent: str | None = None,
        insecure: bool | None = None,
    ) -> "AuditOptions":
        """Build options from explicit values, falling back to the environment.

        Reads AI_READY_TIMEOUT_MS, AI_READY_USER_AGENT and AI_READY_INSECURE.
        """
        if timeout_ms is None:
            raw = os.getenv("AI_READY_TIMEOUT_MS")
            if raw:
                try:
                    timeout_ms = int(raw)
                except ValueError:
                    raise ValueError(f"AI_READY_TIMEOUT_MS must be an integer, got {raw!r}") from None
            else:
                timeout_ms = DEFAULT_TIMEOUT_MS

        user_agent = user_agent or os.getenv("AI_READY_USER_AGENT") or DEFAULT_USER_AGENT

        if insecure is None:
            insecure = os.getenv("AI_READY_INSECURE", "").strip().lower() in _TRUTHY

        return cls(timeout_ms=timeout_ms, user_agent=user_agent, insecure=insecure)
