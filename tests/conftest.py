"""Pytest configuration and fixtures for tika-metadata tests."""

import json
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, Optional
from unittest.mock import Mock

import pytest
import requests

from tika_metadata.core.config import DatabaseConfig, ExtractionConfig
from tika_metadata.core.logging import LoggerManager
from tika_metadata.storage.pony_store import PonyRecordStore


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up logging for tests."""
    LoggerManager.setup_logging(level="DEBUG", force=True)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def store() -> PonyRecordStore:
    """Record store on a fresh in-memory sqlite database."""
    return PonyRecordStore(DatabaseConfig(provider="sqlite", filename=":memory:"))


@pytest.fixture
def pdf_rawdata() -> dict[str, Any]:
    """Flattened Tika metadata of a PDF file."""
    return {
        "Content-Type": "application/pdf",
        "dc:title": "Do Androids Dream of Electric Sheep?",
        "title": "Electric Sheep",
        "dc:creator": "Dr. Eldon Tyrell, Tyrell Corporation",
        "meta:author": "Eldon Tyrell",
        "dc:language": "en",
        "dcterms:created": "2019-11-20T03:14:15Z",
        "dcterms:modified": "2020-01-02T10:00:00Z",
        "xmpTPg:NPages": "42",
        "xmp:CreatorTool": "Microsoft Word",
        "pdf:PDFVersion": "1.7",
    }


@pytest.fixture
def document_rawdata() -> dict[str, Any]:
    """Flattened Tika metadata of a word processing document."""
    return {
        "Content-Type": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "dc:title": "Replicant Incept Dates",
        "meta:page-count": "3",
        "meta:paragraph-count": "12",
        "meta:line-count": "40",
        "meta:word-count": "512",
        "meta:character-count": "2800",
        "meta:character-count-with-spaces": "3300",
        "extended-properties:Company": "Tyrell Corporation",
        "extended-properties:Manager": "Eldon Tyrell",
    }


@pytest.fixture
def pdf_metadata_json(pdf_rawdata) -> str:
    """Tika server ``/meta`` response body for a PDF, with an array value."""
    body = dict(pdf_rawdata)
    body["dc:creator"] = ["Dr. Eldon Tyrell", "Tyrell Corporation"]
    return json.dumps(body)


@pytest.fixture
def server_config() -> ExtractionConfig:
    """Server mode configuration for a Tika server on localhost."""
    return ExtractionConfig(service_type="server", server={"host": "localhost:9998"})


@pytest.fixture
def make_response():
    """Factory for mock ``requests`` responses."""

    def _make_response(
        status_code: int = 200,
        text: str = "",
        reason: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Mock:
        response = Mock(spec=requests.Response)
        response.status_code = status_code
        response.text = text
        response.content = text.encode("utf-8")
        response.reason = reason or {200: "OK", 204: "No Content", 404: "Not Found"}.get(status_code, "")
        response.headers = {"Location": location} if location else {}
        response.is_redirect = location is not None and status_code in (301, 302, 303, 307, 308)
        return response

    return _make_response


@pytest.fixture
def mock_session(make_response) -> Mock:
    """Mock HTTP session whose hello endpoint answers 200."""
    session = Mock(spec=requests.Session)
    session.get.return_value = make_response(200, "This is Tika Server. Please PUT")
    return session
