"""Fetch a page and its well-known AI resources."""

import asyncio
import logging
import re
import time
from dataclasses import dataclass

import httpx

from .config import DEFAULT_ACCEPT, AuditOptions
from .errors import BlockedHostError, FetchError, FetchTimeoutError
from .models import FetchResult, PageData


logger = logging.getLogger(__name__)

MAX_REDIRECTS = 10

# Private, loopback and unspecified hosts are never fetched.
BLOCKED_PATTERNS = [
    re.compile(r"^127\."),
    re.compile(r"^10\."),
    re.compile(r"^172\.(1[6-9]|2\d|3[01])\."),
    re.compile(r"^192\.168\."),
    re.compile(r"^0\."),
    re.compile(r"^localhost$", re.IGNORECASE),
    re.compile(r"^\[?::1\]?$"),
]

AUXILIARY_PATHS = {
    "llms_txt": "/llms.txt",
    "robots_txt": "/robots.txt",
    "sitemap_xml": "/sitemap.xml",
    "llms_full_txt": "/llms-full.txt",
    "ai_txt": "/ai.txt",
}


@dataclass
class _Fetched:
    url: str
    status: int
    headers: dict[str, str]
    text: str
    ttfb: float
    total_time: float


def normalize_url(url: str) -> str:
    """Trim the URL and default its scheme to https."""
    url = url.strip()
    if not re.match(r"^https?://", url, re.IGNORECASE):
        url = "https://" + url
    return url


def is_blocked_host(hostname: str) -> bool:
    return any(p.search(hostname) for p in BLOCKED_PATTERNS)


def ensure_allowed(url: httpx.URL | str) -> None:
    """Raise BlockedHostError if the URL points at a private host."""
    if not isinstance(url, httpx.URL):
        url = httpx.URL(url)
    if is_blocked_host(url.host):
        raise BlockedHostError(url.host)


def _resource_url(page_url: str, path: str) -> str:
    """Same-origin URL for a well-known path; IPv6 hosts keep their brackets."""
    return str(httpx.URL(page_url).copy_with(path=path, query=None, fragment=None))


def _request_headers(options: AuditOptions) -> dict[str, str]:
    return {
        "User-Agent": options.user_agent,
        "Accept": DEFAULT_ACCEPT,
    }


async def _send(client: httpx.AsyncClient, url: str, options: AuditOptions) -> httpx.Response:
    """Send a GET, following redirects and checking every hop's host."""
    request = client.build_request("GET", url, headers=_request_headers(options))
    for _ in range(MAX_REDIRECTS + 1):
        ensure_allowed(request.url)
        logger.debug("GET %s", request.url)
        response = await client.send(request, stream=True, follow_redirects=False)
        if response.next_request is None:
            return response
        await response.aclose()
        request = response.next_request
    raise FetchError(f"Too many redirects fetching {url}", url=url)


async def _fetch(client: httpx.AsyncClient, url: str, options: AuditOptions) -> _Fetched:
    """Fetch one URL within the configured time budget.

    Raises BlockedHostError, FetchTimeoutError or FetchError.
    """
    try:
        ensure_allowed(url)
    except httpx.InvalidURL as e:
        raise FetchError(f"Invalid URL {url!r}: {e}", url=url) from e

    started = time.perf_counter()

    async def run() -> _Fetched:
        response = await _send(client, url, options)
        try:
            ttfb = (time.perf_counter() - started) * 1000
            await response.aread()
            total_time = (time.perf_counter() - started) * 1000
        finally:
            await response.aclose()
        return _Fetched(
            url=str(response.url),
            status=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            text=response.text,
            ttfb=ttfb,
            total_time=total_time,
        )

    try:
        return await asyncio.wait_for(run(), timeout=options.timeout_seconds)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise FetchTimeoutError(f"Timeout after {options.timeout_ms}ms fetching {url}", url=url) from e
    except httpx.ConnectError as e:
        raise FetchError(f"Could not connect to {httpx.URL(url).host}: {e}", url=url) from e
    except httpx.RequestError as e:
        raise FetchError(f"Request failed: {e}", url=url) from e


async def fetch_resource(client: httpx.AsyncClient, url: str, options: AuditOptions) -> FetchResult:
    """Fetch an auxiliary resource. Never raises; failures are captured."""
    try:
        fetched = await _fetch(client, url, options)
    except (BlockedHostError, FetchError) as e:
        logger.debug("Auxiliary fetch failed for %s: %s", url, e)
        return FetchResult.failure(str(e))

    if not 200 <= fetched.status < 300:
        logger.debug("Auxiliary fetch for %s returned HTTP %s", url, fetched.status)
        return FetchResult.failure(f"HTTP {fetched.status}", status=fetched.status)

    return FetchResult(ok=True, status=fetched.status, body=fetched.text)


async def fetch_page_data(
    url: str,
    options: AuditOptions | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> PageData:
    """Fetch everything the audit rules need for one URL.

    Args:
        url: Page to audit; the scheme defaults to https
        options: Timeout, user agent and TLS settings
        client: Optional shared client; one is created otherwise

    Returns:
        PageData snapshot of the page and its auxiliary resources

    Raises:
        BlockedHostError: the host is private or loopback
        FetchError: the main page could not be fetched
    """
    options = options or AuditOptions()
    url = normalize_url(url)

    if client is None:
        async with httpx.AsyncClient(
            verify=not options.insecure,
            timeout=options.timeout_seconds,
        ) as owned:
            return await _build_page_data(owned, url, options)
    return await _build_page_data(client, url, options)


async def _build_page_data(client: httpx.AsyncClient, url: str, options: AuditOptions) -> PageData:
    main = await _fetch(client, url, options)

    names = list(AUXILIARY_PATHS)
    resources = await asyncio.gather(
        *(fetch_resource(client, _resource_url(main.url, AUXILIARY_PATHS[name]), options) for name in names)
    )
    auxiliary = dict(zip(names, resources))

    return PageData(
        url=url,
        html=main.text,
        status_code=main.status,
        headers=main.headers,
        ttfb=main.ttfb,
        total_time=main.total_time,
        final_url=main.url,
        **auxiliary,
    )
