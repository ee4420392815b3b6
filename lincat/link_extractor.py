"""
URL detection for raw user submissions.
"""

import re
from typing import Optional


class LinkExtractor:
    """Find HTTP/HTTPS links inside submitted text."""

    URL_PATTERN = re.compile(r"https?://[^\s]+")

    @classmethod
    def find_url(cls, text: str) -> Optional[str]:
        """
        Return the first HTTP/HTTPS URL in the text.

        Args:
            text: Raw submission (a bare URL or free text containing one)

        Returns:
            The matched substring, or None when the text holds no URL
        """
        match = cls.URL_PATTERN.search(text)
        if match is None:
            return None
        return match.group(0)


def is_url(text: str) -> bool:
    """True when the text contains an HTTP/HTTPS URL."""
    return LinkExtractor.find_url(text) is not None
