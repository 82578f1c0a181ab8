"""
Content Fetcher
===============

Best-effort plain-text extraction of a page for embedding in LLM prompts.
Never raises: any failure degrades to a raw tag-strip pass and finally
to a placeholder derived from the domain name.
"""

import asyncio
import json
import logging
import re
from typing import Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 5000
MAX_FALLBACK_CHARS = 3000
MIN_PARAGRAPH_CHARS = 50
MAX_PARAGRAPHS = 10

HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; GeoTestBot/1.0)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.8",
}


def normalize(url: str) -> str:
    url = url.strip()
    if not re.match(r"^https?://", url, re.IGNORECASE):
        url = f"https://{url}"
    return url


def extract_structured_text(html: str) -> str:
    """Title, meta description, headings, long paragraphs and JSON-LD blocks."""
    soup = BeautifulSoup(html, "html.parser")

    json_ld = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            json_ld.append(json.dumps(json.loads(script.string or "{}")))
        except ValueError:
            continue

    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    title = soup.title.get_text(strip=True) if soup.title else ""
    meta = soup.find("meta", attrs={"name": "description"})
    meta_description = meta.get("content", "") if meta else ""
    h1 = " ".join(h.get_text(" ", strip=True) for h in soup.find_all("h1"))
    h2 = " ".join(h.get_text(" ", strip=True) for h in soup.find_all("h2"))
    paragraphs = [
        p.get_text(" ", strip=True)
        for p in soup.find_all("p")
        if len(p.get_text(strip=True)) > MIN_PARAGRAPH_CHARS
    ][:MAX_PARAGRAPHS]

    parts = [
        f"Title: {title}",
        f"Meta Description: {meta_description}",
        f"Main Headings: {h1}",
        f"Subheadings: {h2}",
        f"Content: {' '.join(paragraphs)}",
    ]
    if json_ld:
        parts.append(f"Structured Data: {' '.join(json_ld)}")

    return "\n\n".join(parts)[:MAX_CONTENT_CHARS]


def strip_tags(html: str) -> str:
    text = re.sub(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", "", html, flags=re.IGNORECASE)
    text = re.sub(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", "", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", " ", text)
    text = re.sub(r"\s+", " ", text).strip()
    return f"Website Content: {text[:MAX_FALLBACK_CHARS]}"


def fallback_content(url: str) -> str:
    """Placeholder text built from the domain name."""
    host = urlparse(normalize(url)).hostname
    if not host:
        return f"Website: {url}\n\nUnable to fetch website content for detailed analysis."

    domain = host[4:] if host.startswith("www.") else host
    brand = domain.split(".")[0]
    return (
        f"Website: {domain}\n"
        f"Brand: {brand}\n"
        f"URL: {url}\n\n"
        "Note: Unable to fetch actual website content.\n"
        "Analysis will be based on the domain name and general web presence.\n\n"
        "For accurate analysis, consider:\n"
        "1. The website should have proper SEO meta tags\n"
        "2. Structured data (JSON-LD) helps AI understand content\n"
        "3. Clear headings and content structure improve analysis\n"
        "4. Fast loading times and mobile responsiveness are important"
    )


class ContentFetcher:
    """
    Fetches a page with requests and reduces it to prompt-sized text.

    Example:
        >>> fetcher = ContentFetcher(timeout=10)
        >>> text = await fetcher.fetch_content("example.com")
    """

    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str) -> str:
        """Synchronous fetch; never raises."""
        target = normalize(url)
        try:
            response = self.session.get(target, headers=HEADERS, timeout=self.timeout)
            response.raise_for_status()
            html = response.text
        except requests.RequestException as e:
            logger.warning(f"⚠️ [ContentFetcher] Fetch failed for {target}: {e}")
            return fallback_content(url)

        try:
            content = extract_structured_text(html)
            logger.info(f"✅ [ContentFetcher] Extracted {len(content)} characters from {target}")
            return content
        except Exception as e:
            logger.warning(f"⚠️ [ContentFetcher] Structured extraction failed, stripping tags: {e}")

        try:
            return strip_tags(html)
        except Exception as e:
            logger.error(f"❌ [ContentFetcher] Fallback extraction failed: {e}")
            return fallback_content(url)

    async def fetch_content(self, url: str) -> str:
        """Async wrapper running the blocking fetch in a worker thread."""
        return await asyncio.to_thread(self.fetch, url)
