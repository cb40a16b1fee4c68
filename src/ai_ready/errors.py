"""Exceptions raised by the audit pipeline."""


class AuditError(Exception):
    """Base class for errors that abort an audit."""


class BlockedHostError(AuditError):
    """The target resolves to a private, loopback or unspecified host."""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"Blocked: {hostname} is a private/internal address")


class FetchError(AuditError):
    """The main page could not be fetched."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class FetchTimeoutError(FetchError):
    """A fetch exceeded its time budget and was aborted."""


class RegistryError(AuditError):
    """A rule registry failed its consistency checks."""
