"""Shared page builders for rule and aggregation tests."""
import pytest

from ai_ready.models import FetchResult, PageData


GOOD_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Acme Widgets</title>
  <meta name="description" content="Acme builds durable industrial widgets for factories and labs across Europe.">
  <meta property="og:title" content="Acme Widgets">
  <meta property="og:description" content="Durable industrial widgets">
  <meta property="og:image" content="https://acme.example/og.png">
  <meta property="og:type" content="website">
  <link rel="canonical" href="https://acme.example/">
  <link rel="alternate" type="application/rss+xml" href="/feed.xml">
  <script type="application/ld+json">
  {
    "@context": "https://schema.org",
    "@graph": [
      {
        "@type": "Organization",
        "name": "Acme",
        "description": "Industrial widget maker",
        "url": "https://acme.example/",
        "logo": "https://acme.example/logo.png",
        "sameAs": ["https://social.example/acme"],
        "contactPoint": {"@type": "ContactPoint", "telephone": "+1-555-0100"}
      },
      {"@type": "WebSite", "name": "Acme Widgets", "url": "https://acme.example/"},
      {"@type": "WebPage", "name": "Home", "description": "Acme home page"}
    ]
  }
  </script>
</head>
<body>
  <header><nav><a href="/">Home</a></nav></header>
  <main>
    <article>
      <h1>Acme Widgets</h1>
      <p>Acme designs and manufactures durable industrial widgets that keep production lines
      running, with a ten year warranty and same day shipping for every order in Europe.</p>
      <section>
        <h2>Products</h2>
        <p>Our catalogue covers precision gears, sealed bearings, torque couplings and custom
        assemblies. Every part is machined in our own plant and inspected twice before it
        leaves the building, so replacement rates stay below one in ten thousand units.</p>
        <img src="/gear.png" alt="A precision gear">
      </section>
      <section>
        <h2>Service</h2>
        <p>Engineers answer support requests within four hours on working days. On-site
        visits are available for installations larger than fifty units, and spare parts are
        stocked in three regional warehouses to keep delivery times short for all customers.</p>
      </section>
    </article>
  </main>
  <footer>Acme Ltd</footer>
</body>
</html>
"""

GOOD_LLMS_TXT = """# Acme Widgets

> Durable industrial widgets for factories and labs.

Acme builds gears, bearings and couplings.
Every part is machined and inspected in-house.
Orders ship the same day across Europe.

## Products

- [Gears](https://acme.example/gears): precision gears

## Support

- [Contact](https://acme.example/contact): reach an engineer
"""

GOOD_ROBOTS_TXT = """User-agent: GPTBot
User-agent: ChatGPT-User
User-agent: ClaudeBot
User-agent: anthropic-ai
User-agent: PerplexityBot
User-agent: Google-Extended
User-agent: CCBot
User-agent: Amazonbot
Allow: /

User-agent: *
Disallow: /admin

Sitemap: https://acme.example/sitemap.xml
"""

GOOD_SITEMAP = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url><loc>https://acme.example/</loc></url>
</urlset>
"""

GOOD_HEADERS = {
    "content-type": "text/html; charset=utf-8",
    "content-encoding": "gzip",
}


def make_fetch(body: str = "", status: int = 200) -> FetchResult:
    """A FetchResult as the fetcher would produce it for an HTTP response."""
    if 200 <= status < 300:
        return FetchResult(ok=True, status=status, body=body)
    return FetchResult.failure(f"HTTP {status}", status=status)


MISSING = make_fetch(status=404)


def make_page(html: str = "<html><body></body></html>", **overrides) -> PageData:
    """A minimal PageData; every auxiliary resource is a 404 unless overridden."""
    values = dict(
        url="https://acme.example/",
        html=html,
        status_code=200,
        headers=dict(GOOD_HEADERS),
        ttfb=150.0,
        total_time=300.0,
        llms_txt=MISSING,
        robots_txt=MISSING,
        sitemap_xml=MISSING,
        llms_full_txt=MISSING,
        ai_txt=MISSING,
    )
    values.update(overrides)
    return PageData(**values)


def make_good_page(**overrides) -> PageData:
    """A page that satisfies every default rule."""
    values = dict(
        llms_txt=make_fetch(GOOD_LLMS_TXT),
        robots_txt=make_fetch(GOOD_ROBOTS_TXT),
        sitemap_xml=make_fetch(GOOD_SITEMAP),
        llms_full_txt=make_fetch("# Acme Widgets full documentation\n\n" + "Gears and bearings. " * 40),
        ai_txt=make_fetch("User-Agent: *\nAllow: training\n"),
    )
    values.update(overrides)
    return make_page(GOOD_HTML, **values)


@pytest.fixture
def good_page() -> PageData:
    return make_good_page()


@pytest.fixture
def empty_page() -> PageData:
    return make_page()
