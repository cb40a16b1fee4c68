"""Tests for the resource fetcher, using httpx.MockTransport."""
import asyncio

import httpx
import pytest

from ai_ready.config import AuditOptions
from ai_ready.errors import BlockedHostError, FetchError, FetchTimeoutError
from ai_ready.fetcher import _resource_url, fetch_page_data, is_blocked_host, normalize_url


PAGE = "<html><body><h1>Hello</h1></body></html>"


class Recorder:
    """Mock transport handler that serves a routing table and records requests."""

    def __init__(self, routes=None, default=404):
        self.routes = routes or {}
        self.default = default
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        # Route on scheme, host and path so "https://h" and "https://h/" match alike
        url = request.url
        route = self.routes.get(f"{url.scheme}://{url.netloc.decode()}{url.path}")
        if route is None:
            return httpx.Response(self.default, text="not found")
        if callable(route):
            return await route(request)
        return route

    @property
    def paths(self):
        return [r.url.path for r in self.requests]


def client_for(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestNormalizeUrl:

    def test_adds_https_scheme(self):
        assert normalize_url("  example.com  ") == "https://example.com"

    def test_keeps_existing_scheme(self):
        assert normalize_url("http://example.com/a") == "http://example.com/a"
        assert normalize_url("HTTPS://Example.com") == "HTTPS://Example.com"


class TestBlockedHosts:

    @pytest.mark.parametrize("host", [
        "127.0.0.1",
        "localhost",
        "LOCALHOST",
        "10.1.2.3",
        "172.16.0.1",
        "172.31.255.255",
        "192.168.1.1",
        "0.0.0.0",
        "::1",
        "[::1]",
    ])
    def test_private_hosts_blocked(self, host):
        assert is_blocked_host(host)

    @pytest.mark.parametrize("host", ["example.com", "172.32.0.1", "8.8.8.8", "11.0.0.1"])
    def test_public_hosts_allowed(self, host):
        assert not is_blocked_host(host)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [
        "http://127.0.0.1/",
        "localhost:8080",
        "http://192.168.0.10/admin",
        "http://[::1]/",
    ])
    async def test_blocked_before_any_request(self, url):
        """No request is sent for a blocked target."""
        handler = Recorder()
        async with client_for(handler) as client:
            with pytest.raises(BlockedHostError, match="^Blocked"):
                await fetch_page_data(url, client=client)
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_redirect_to_private_host_is_blocked(self):
        handler = Recorder({
            "https://acme.example/": httpx.Response(302, headers={"Location": "http://10.0.0.5/"}),
        })
        async with client_for(handler) as client:
            with pytest.raises(BlockedHostError):
                await fetch_page_data("acme.example/", client=client)
        assert [str(r.url) for r in handler.requests] == ["https://acme.example/"]


class TestFetchPageData:

    @pytest.mark.asyncio
    async def test_fetches_page_and_auxiliary_resources(self):
        handler = Recorder({
            "https://acme.example/": httpx.Response(
                200, text=PAGE, headers={"Content-Type": "text/html; charset=utf-8", "X-Custom": "1"}
            ),
            "https://acme.example/llms.txt": httpx.Response(200, text="# Acme"),
            "https://acme.example/robots.txt": httpx.Response(200, text="User-agent: *\nAllow: /"),
        })
        async with client_for(handler) as client:
            page = await fetch_page_data("https://acme.example/", client=client)

        assert page.url == "https://acme.example/"
        assert page.status_code == 200
        assert page.html == PAGE
        assert page.headers["content-type"] == "text/html; charset=utf-8"
        assert page.header("X-Custom") == "1"
        assert page.ttfb >= 0
        assert page.total_time >= page.ttfb

        assert page.llms_txt.ok and page.llms_txt.body == "# Acme"
        assert page.robots_txt.ok
        assert sorted(handler.paths) == sorted(
            ["/", "/llms.txt", "/robots.txt", "/sitemap.xml", "/llms-full.txt", "/ai.txt"]
        )

    @pytest.mark.asyncio
    async def test_missing_auxiliary_resource_degrades(self):
        handler = Recorder({"https://acme.example/": httpx.Response(200, text=PAGE)})
        async with client_for(handler) as client:
            page = await fetch_page_data("https://acme.example/", client=client)

        for resource in (page.llms_txt, page.robots_txt, page.sitemap_xml, page.llms_full_txt, page.ai_txt):
            assert resource.ok is False
            assert resource.status == 404
            assert resource.body == ""
            assert resource.error == "HTTP 404"

    @pytest.mark.asyncio
    async def test_auxiliary_network_error_degrades(self):
        async def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        handler = Recorder({
            "https://acme.example/": httpx.Response(200, text=PAGE),
            "https://acme.example/sitemap.xml": boom,
        })
        async with client_for(handler) as client:
            page = await fetch_page_data("https://acme.example/", client=client)

        assert page.sitemap_xml.ok is False
        assert page.sitemap_xml.status == 0
        assert page.sitemap_xml.error

    @pytest.mark.asyncio
    async def test_auxiliary_resources_use_final_origin(self):
        handler = Recorder({
            "https://acme.example/": httpx.Response(301, headers={"Location": "https://www.acme.example/home"}),
            "https://www.acme.example/home": httpx.Response(200, text=PAGE),
            "https://www.acme.example/llms.txt": httpx.Response(200, text="# Acme"),
        })
        async with client_for(handler) as client:
            page = await fetch_page_data("acme.example", client=client)

        assert page.url == "https://acme.example"
        assert page.final_url == "https://www.acme.example/home"
        assert page.llms_txt.ok

    @pytest.mark.asyncio
    async def test_main_page_error_status_is_not_fatal(self):
        handler = Recorder({"https://acme.example/": httpx.Response(500, text="oops")})
        async with client_for(handler) as client:
            page = await fetch_page_data("https://acme.example/", client=client)
        assert page.status_code == 500
        assert page.html == "oops"

    @pytest.mark.asyncio
    async def test_main_page_connect_error_raises(self):
        async def boom(request):
            raise httpx.ConnectError("name resolution failed", request=request)

        handler = Recorder({"https://acme.example/": boom})
        async with client_for(handler) as client:
            with pytest.raises(FetchError, match="Could not connect"):
                await fetch_page_data("https://acme.example/", client=client)

    @pytest.mark.asyncio
    async def test_main_page_timeout_raises(self):
        async def slow(request):
            await asyncio.sleep(1)
            return httpx.Response(200, text=PAGE)

        handler = Recorder({"https://acme.example/": slow})
        async with client_for(handler) as client:
            with pytest.raises(FetchTimeoutError, match="Timeout after 50ms"):
                await fetch_page_data("https://acme.example/", AuditOptions(timeout_ms=50), client=client)

    @pytest.mark.asyncio
    async def test_auxiliary_timeout_degrades(self):
        async def slow(request):
            await asyncio.sleep(1)
            return httpx.Response(200, text="# late")

        handler = Recorder({
            "https://acme.example/": httpx.Response(200, text=PAGE),
            "https://acme.example/llms.txt": slow,
            "https://acme.example/ai.txt": httpx.Response(200, text="ok"),
        })
        async with client_for(handler) as client:
            page = await fetch_page_data("https://acme.example/", AuditOptions(timeout_ms=100), client=client)

        assert page.llms_txt.ok is False
        assert page.llms_txt.status == 0
        assert "Timeout" in page.llms_txt.error
        assert page.ai_txt.ok

    @pytest.mark.asyncio
    async def test_sends_user_agent_and_accept(self):
        handler = Recorder({"https://acme.example/": httpx.Response(200, text=PAGE)})
        options = AuditOptions(user_agent="TestAgent/1.0")
        async with client_for(handler) as client:
            await fetch_page_data("https://acme.example/", options, client=client)

        main = handler.requests[0]
        assert main.headers["User-Agent"] == "TestAgent/1.0"
        assert "text/html" in main.headers["Accept"]

    @pytest.mark.asyncio
    async def test_too_many_redirects(self):
        async def loop(request):
            return httpx.Response(302, headers={"Location": "https://acme.example/"})

        handler = Recorder({"https://acme.example/": loop})
        async with client_for(handler) as client:
            with pytest.raises(FetchError, match="Too many redirects"):
                await fetch_page_data("https://acme.example/", client=client)
        assert len(handler.requests) == 11


class TestResourceUrl:

    def test_replaces_path_and_drops_query(self):
        assert _resource_url("https://acme.example/a/b?x=1#top", "/robots.txt") == "https://acme.example/robots.txt"

    def test_ipv6_host_keeps_brackets_and_port(self):
        url = _resource_url("https://[2001:db8::1]:8443/page?q=1", "/llms.txt")
        assert url == "https://[2001:db8::1]:8443/llms.txt"
        assert httpx.URL(url).host == "2001:db8::1"

    @pytest.mark.asyncio
    async def test_ipv6_page_fetches_auxiliary_from_same_host(self):
        handler = Recorder({
            "https://[2001:db8::1]:8443/": httpx.Response(200, text=PAGE),
            "https://[2001:db8::1]:8443/llms.txt": httpx.Response(200, text="# Acme"),
        })
        async with client_for(handler) as client:
            page = await fetch_page_data("https://[2001:db8::1]:8443/", client=client)

        assert page.llms_txt.ok
        assert {r.url.host for r in handler.requests} == {"2001:db8::1"}
