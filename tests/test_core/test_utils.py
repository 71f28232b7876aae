"""Tests for utilities and the error taxonomy."""

import hashlib

import pytest

from tika_metadata.core.enums import ExtractionErrorKind
from tika_metadata.core.exceptions import ExtractionError, TikaMetadataError
from tika_metadata.core.utils import HashUtils, UrlUtils


class TestHashUtils:
    """Test cases for HashUtils."""

    def test_calculate_hash(self):
        """Test text and bytes hash to the same SHA1 digest."""
        assert HashUtils.calculate_hash("abc") == hashlib.sha1(b"abc").hexdigest()
        assert HashUtils.calculate_hash(b"abc") == HashUtils.calculate_hash("abc")
        assert HashUtils.calculate_hash("Tyrell") != HashUtils.calculate_hash("tyrell")

    def test_calculate_file_hash(self, temp_dir):
        """Test hashing a file matches hashing its content."""
        path = temp_dir / "sheep.txt"
        path.write_bytes(b"electric sheep" * 1000)

        assert HashUtils.calculate_file_hash(path) == HashUtils.calculate_hash(b"electric sheep" * 1000)
        assert HashUtils.calculate_file_hash(path, chunk_size=7) == (
            hashlib.sha1(b"electric sheep" * 1000).hexdigest()
        )


class TestUrlUtils:
    """Test cases for UrlUtils."""

    @pytest.mark.parametrize("url", ["http://example.com", "HTTPS://example.com/page?q=1"])
    def test_http_urls(self, url):
        """Test http and https URLs are recognised."""
        assert UrlUtils.is_http_url(url)
        assert UrlUtils.appears_valid(url)

    @pytest.mark.parametrize("url", ["ftp://example.com/file", "example.com", ""])
    def test_non_http_urls(self, url):
        """Test other schemes and bare hosts are rejected."""
        assert not UrlUtils.is_http_url(url)

    @pytest.mark.parametrize(
        "url",
        ["http://", "http://exa mple.com", "http://example.com:port/", "not a url"],
    )
    def test_invalid_urls(self, url):
        """Test malformed URLs."""
        assert not UrlUtils.appears_valid(url)


class TestExtractionError:
    """Test cases for ExtractionError."""

    def test_is_tika_metadata_error(self):
        """Test all errors share a base class."""
        assert issubclass(ExtractionError, TikaMetadataError)

    def test_default_message(self):
        """Test the kind is the default message."""
        error = ExtractionError(ExtractionErrorKind.NOT_READY)

        assert error.kind == ExtractionErrorKind.NOT_READY
        assert str(error) == "not-ready"

    def test_http_status_in_message(self):
        """Test HTTP status and reason are part of the message."""
        error = ExtractionError(
            ExtractionErrorKind.SERVER_HTTP_ERROR,
            "Tika server request to /meta failed",
            status_code=404,
            reason="Not Found",
            debuginfo="Not Found",
        )

        assert str(error) == "Tika server request to /meta failed (HTTP 404 Not Found)"

    def test_debuginfo_in_message(self):
        """Test transport errors are appended as debug info."""
        error = ExtractionError(ExtractionErrorKind.CONNECTION_ERROR, "No connection", debuginfo="refused")

        assert str(error) == "No connection: refused"
