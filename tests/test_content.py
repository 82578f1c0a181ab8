"""
Content fetcher: extraction and fallbacks.
"""
import asyncio

import requests

from geotest.analysis.content import (
    MAX_CONTENT_CHARS,
    ContentFetcher,
    extract_structured_text,
    fallback_content,
    strip_tags,
)

LONG_PARAGRAPH = "Acme builds durable hand tools for professionals and hobbyists alike, since 1952."

HTML = f"""
<html>
  <head>
    <title>Acme Tools</title>
    <meta name="description" content="Durable hand tools">
    <script type="application/ld+json">{{"@type": "Organization", "name": "Acme"}}</script>
    <style>body {{ color: red; }}</style>
  </head>
  <body>
    <h1>Tools that last</h1>
    <h2>Hammers</h2>
    <p>Short.</p>
    <p>{LONG_PARAGRAPH}</p>
    <script>var tracking = 1;</script>
  </body>
</html>
"""


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.urls = []

    def get(self, url, headers=None, timeout=None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


def test_structured_extraction():
    text = extract_structured_text(HTML)

    assert "Title: Acme Tools" in text
    assert "Meta Description: Durable hand tools" in text
    assert "Main Headings: Tools that last" in text
    assert "Subheadings: Hammers" in text
    assert LONG_PARAGRAPH in text
    assert "Short." not in text
    assert '"@type": "Organization"' in text
    assert "tracking" not in text


def test_extraction_is_truncated():
    html = "<p>" + "word " * 5000 + "</p>"
    assert len(extract_structured_text(html)) == MAX_CONTENT_CHARS


def test_strip_tags():
    text = strip_tags("<div>Hello <b>world</b><script>x()</script></div>")
    assert text == "Website Content: Hello world"


def test_fallback_content_uses_domain():
    text = fallback_content("https://www.example.com/page")
    assert text.startswith("Website: example.com\nBrand: example\n")
    assert "Unable to fetch actual website content" in text


def test_fetch_normalizes_and_extracts():
    session = FakeSession(response=FakeResponse(HTML))
    text = ContentFetcher(session=session).fetch("acme.com")

    assert session.urls == ["https://acme.com"]
    assert text.startswith("Title: Acme Tools")


def test_fetch_failure_returns_fallback():
    session = FakeSession(error=requests.ConnectionError("refused"))
    text = asyncio.run(ContentFetcher(session=session).fetch_content("https://example.com"))
    assert text.startswith("Website: example.com")


def test_http_error_returns_fallback():
    session = FakeSession(response=FakeResponse("", status_code=404))
    text = ContentFetcher(session=session).fetch("https://example.com")
    assert "Brand: example" in text
