"""Common utility functions for tika-metadata."""

import hashlib
import re
from pathlib import Path
from typing import Union
from urllib.parse import urlparse


class HashUtils:
    """SHA1 hashing of resource content and identifiers."""

    @staticmethod
    def calculate_hash(content: Union[str, bytes]) -> str:
        """Calculate the SHA1 hex digest of content.

        Text is hashed as UTF-8.
        """
        if isinstance(content, str):
            content = content.encode('utf-8')
        return hashlib.sha1(content).hexdigest()

    @staticmethod
    def calculate_file_hash(path: Union[str, Path], chunk_size: int = 1024 * 1024) -> str:
        """Calculate the SHA1 hex digest of a file's content, reading it in chunks."""
        digest = hashlib.sha1()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                digest.update(chunk)
        return digest.hexdigest()


class UrlUtils:
    """Utility functions for URL checks."""

    HTTP_PATTERN = re.compile(r'^https?://', re.IGNORECASE)

    @staticmethod
    def is_http_url(url: str) -> bool:
        """Check the URL uses the http or https scheme."""
        return bool(url) and bool(UrlUtils.HTTP_PATTERN.match(url))

    @staticmethod
    def appears_valid(url: str) -> bool:
        """Loose check that a string looks like an absolute URL with a host.

        Args:
            url: URL to check.

        Returns:
            True if the URL has a scheme and a network location and no whitespace.
        """
        if not url or re.search(r'\s', url):
            return False

        try:
            parsed = urlparse(url)
            parsed.port  # raises ValueError on a malformed port
        except ValueError:
            return False

        return bool(parsed.scheme) and bool(parsed.hostname)
