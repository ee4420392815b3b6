"""
Text helpers for deriving display titles from URLs and free-text notes
"""
import re
from typing import Optional
from urllib.parse import parse_qs, unquote, urlparse

URL_TITLE_MAX_LENGTH = 100
TEXT_TITLE_MAX_LENGTH = 60
TEXT_TITLE_WORDS = 8

_WHITESPACE = re.compile(r"\s+")

CODE_HOSTS = {
    "github.com": "GitHub",
    "gitlab.com": "GitLab",
    "bitbucket.org": "Bitbucket",
    "codeberg.org": "Codeberg",
}


class ContentProcessor:
    """Normalizes and synthesizes titles and descriptions"""

    @staticmethod
    def normalize_whitespace(text: Optional[str]) -> str:
        """Collapse runs of whitespace into single spaces and strip the ends."""
        if not text:
            return ""
        return _WHITESPACE.sub(" ", text).strip()

    @staticmethod
    def truncate(text: str, max_length: int) -> str:
        """Cut text to max_length characters, ending in '...' when shortened."""
        if len(text) <= max_length:
            return text
        if max_length <= 3:
            return text[:max_length]
        return text[:max_length - 3].rstrip() + "..."

    @staticmethod
    def title_from_text(text: str) -> str:
        """Title for a free-text note: its first words, bounded in length."""
        words = text.split()
        title = " ".join(words[:TEXT_TITLE_WORDS])
        if len(words) > TEXT_TITLE_WORDS:
            title += "..."
        return ContentProcessor.truncate(title, TEXT_TITLE_MAX_LENGTH)

    @staticmethod
    def generate_title_from_url(url: str) -> str:
        """Generate a readable title from the URL alone.

        Used when the page itself yields no title. Code hosts and YouTube get
        dedicated formats; everything else is "host - last segment" or
        "host Homepage".
        """
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
        if host.startswith("www."):
            host = host[4:]
        segments = [unquote(s) for s in parsed.path.split("/") if s]

        if host in CODE_HOSTS:
            title = ContentProcessor._code_host_title(CODE_HOSTS[host], segments)
        elif host in ("youtube.com", "m.youtube.com", "youtu.be"):
            title = ContentProcessor._youtube_title(host, parsed.query, segments)
        elif not host:
            title = url
        elif segments:
            title = f"{host} - {segments[-1]}"
        else:
            title = f"{host} Homepage"

        title = ContentProcessor.normalize_whitespace(title) or url
        return ContentProcessor.truncate(title, URL_TITLE_MAX_LENGTH)

    @staticmethod
    def _code_host_title(site: str, segments: list) -> str:
        if len(segments) >= 2:
            return f"{segments[0]}/{segments[1]} - {site} Repository"
        if segments:
            return f"{segments[0]} - {site} Profile"
        return site

    @staticmethod
    def _youtube_title(host: str, query: str, segments: list) -> str:
        video_id = None
        if host == "youtu.be" and segments:
            video_id = segments[0]
        elif segments[:1] == ["watch"]:
            video_id = (parse_qs(query).get("v") or [None])[0]
        elif len(segments) >= 2 and segments[0] in ("shorts", "embed", "live"):
            video_id = segments[1]

        if video_id:
            return f"YouTube Video ({video_id})"
        return "YouTube Video"
