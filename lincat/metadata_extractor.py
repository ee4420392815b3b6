"""
Page metadata extraction: fetch a URL and read its title and description
"""
import asyncio
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup

from .config import ExtractorConfig
from .content_processor import ContentProcessor
from .logging_config import get_logger
from .models import PageMetadata

logger = get_logger("metadata_extractor")


class MetadataExtractor:
    """Fetches a page once and derives a human-readable title and description.

    ``extract`` never raises: network errors, non-success statuses, timeouts
    and unparseable bodies all produce an empty ``PageMetadata``.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()

    async def extract(self, url: str) -> PageMetadata:
        """Fetch ``url`` and return its metadata, or empty metadata on failure."""
        try:
            html = await self._fetch(url)
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching %s after %.1fs", url, self.config.timeout)
            return PageMetadata()
        except (aiohttp.ClientError, ValueError) as e:
            logger.warning("Failed to fetch %s: %s", url, e)
            return PageMetadata()

        if html is None:
            return PageMetadata()

        try:
            return self.parse_html(html)
        except Exception as e:
            logger.warning("Failed to parse markup from %s: %s", url, e)
            return PageMetadata()

    async def _fetch(self, url: str) -> Optional[str]:
        """Single GET with a browser-like User-Agent. None on non-2xx."""
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        headers = {"User-Agent": self.config.user_agent}
        async with aiohttp.ClientSession(timeout=timeout, headers=headers) as session:
            async with session.get(url, allow_redirects=True) as response:
                if response.status < 200 or response.status >= 300:
                    logger.warning("HTTP %d fetching %s", response.status, url)
                    return None
                return await response.text(errors="replace")

    def parse_html(self, html: str) -> PageMetadata:
        """Read title and description from markup, first non-empty source wins."""
        soup = BeautifulSoup(html, "html.parser")

        title = self._first_non_empty(
            soup.title.get_text() if soup.title else None,
            self._meta_content(soup, property="og:title"),
            self._meta_content(soup, name="twitter:title"),
            self._tag_text(soup, "h1"),
        )

        description = self._first_non_empty(
            self._meta_content(soup, name="description"),
            self._meta_content(soup, property="og:description"),
            self._meta_content(soup, name="twitter:description"),
            ContentProcessor.truncate(self._first_paragraph(soup), self.config.paragraph_max_length),
        )

        return PageMetadata(
            title=ContentProcessor.truncate(title, self.config.title_max_length),
            description=ContentProcessor.truncate(description, self.config.description_max_length),
        )

    @staticmethod
    def _first_non_empty(*candidates: Optional[str]) -> str:
        for candidate in candidates:
            text = ContentProcessor.normalize_whitespace(candidate)
            if text:
                return text
        return ""

    @staticmethod
    def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
        # Some sites put og:* under name= instead of property=
        tag = soup.find("meta", attrs=attrs)
        if tag is None and "property" in attrs:
            tag = soup.find("meta", attrs={"name": attrs["property"]})
        if tag is None:
            return None
        return tag.get("content")

    @staticmethod
    def _tag_text(soup: BeautifulSoup, name: str) -> Optional[str]:
        tag = soup.find(name)
        return tag.get_text(" ") if tag else None

    @staticmethod
    def _first_paragraph(soup: BeautifulSoup) -> str:
        for paragraph in soup.find_all("p"):
            text = ContentProcessor.normalize_whitespace(paragraph.get_text(" "))
            if text:
                return text
        return ""
