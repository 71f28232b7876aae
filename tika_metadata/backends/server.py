"""Client for the Tika server REST API."""

from typing import BinaryIO, Optional
from urllib.parse import urljoin

import requests

from tika_metadata.backends.base import BackendBase
from tika_metadata.core.config import ExtractionConfig
from tika_metadata.core.enums import ExtractionErrorKind
from tika_metadata.core.exceptions import ConfigurationError, ExtractionError

HELLO_PATH = "/tika"
METADATA_PATH = "/meta"
CONTENT_PATH = "/tika"
MIMETYPE_PATH = "/detect/stream"


class TikaServer(BackendBase):
    """Tika server backend.

    Every extraction PUTs the resource body to one endpoint. A 200 response
    yields the body, a 204 yields None and anything else raises.
    """

    def __init__(self, config: ExtractionConfig, session: Optional[requests.Session] = None) -> None:
        """Initialize server client.

        Args:
            config: Extraction configuration, its server host must be set.
            session: HTTP session to send requests with.

        Raises:
            ConfigurationError: If no server host is configured.
        """
        super().__init__(config)

        self.base_uri = config.server.base_uri
        if not self.base_uri:
            raise ConfigurationError("Tika server host is not configured")

        self.timeout = config.server.timeout
        self.session = session or requests.Session()
        self.max_redirects = config.server.max_redirects

    def test_connection(self) -> requests.Response:
        """GET the server's hello endpoint.

        Raises:
            ExtractionError: Kind connection-error if the server cannot be reached.
        """
        url = f"{self.base_uri}{HELLO_PATH}"
        self.logger.debug(f"GET {url}")
        try:
            return self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Could not connect to Tika server at {self.base_uri}: {e}")
            raise ExtractionError(
                ExtractionErrorKind.CONNECTION_ERROR,
                f"Could not connect to Tika server at {self.base_uri}",
                debuginfo=str(e),
            )

    def is_ready(self) -> bool:
        try:
            return self.test_connection().status_code == 200
        except Exception as e:
            self.logger.warning(f"Tika server readiness check failed: {e}")
            return False

    def get_metadata(self, stream: BinaryIO) -> Optional[str]:
        """Get JSON encoded metadata of the stream's content."""
        return self._put(METADATA_PATH, stream, "application/json")

    def get_content(self, stream: BinaryIO) -> Optional[str]:
        """Get the plain text content of the stream's content."""
        return self._put(CONTENT_PATH, stream, "text/plain")

    def get_mimetype(self, stream: BinaryIO) -> Optional[str]:
        """Detect the mimetype of the stream's content."""
        return self._put(MIMETYPE_PATH, stream, "text/plain")

    def get_url_metadata(self, url: str) -> Optional[str]:
        """Fetch an external URL and get JSON encoded metadata of its body.

        Raises:
            ExtractionError: Kind server-http-error if fetching the URL or the
                metadata request fails.
        """
        upstream = self._fetch(url)

        if upstream.status_code != 200:
            raise ExtractionError(
                ExtractionErrorKind.SERVER_HTTP_ERROR,
                f"Could not fetch {url}",
                status_code=upstream.status_code,
                reason=upstream.reason,
                debuginfo=upstream.reason,
            )

        return self._put(METADATA_PATH, upstream.content, "application/json")

    def _fetch(self, url: str) -> requests.Response:
        """GET a URL, following at most ``max_redirects`` redirects."""
        target = url
        for _ in range(self.max_redirects + 1):
            self.logger.debug(f"GET {target}")
            try:
                response = self.session.get(target, timeout=self.timeout, allow_redirects=False)
            except requests.exceptions.RequestException as e:
                self.logger.error(f"Could not fetch {target}: {e}")
                raise ExtractionError(
                    ExtractionErrorKind.SERVER_HTTP_ERROR,
                    f"Could not fetch {url}",
                    debuginfo=str(e),
                )

            location = response.headers.get("Location")
            if not response.is_redirect or not location:
                return response
            target = urljoin(target, location)

        self.logger.error(f"Could not fetch {url}: more than {self.max_redirects} redirects")
        raise ExtractionError(
            ExtractionErrorKind.SERVER_HTTP_ERROR,
            f"Could not fetch {url}",
            debuginfo=f"Exceeded {self.max_redirects} redirects",
        )

    def _put(self, path: str, body, accept: str) -> Optional[str]:
        url = f"{self.base_uri}{path}"
        self.logger.debug(f"PUT {url}")

        try:
            response = self.session.put(
                url,
                data=body,
                headers={"Accept": accept},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Tika server request to {url} failed: {e}")
            raise ExtractionError(
                ExtractionErrorKind.SERVER_HTTP_ERROR,
                f"Tika server request to {path} failed",
                debuginfo=str(e),
            )

        if response.status_code == 200:
            return response.text
        if response.status_code == 204:
            return None

        self.logger.error(f"Tika server answered {response.status_code} {response.reason} for {url}")
        raise ExtractionError(
            ExtractionErrorKind.SERVER_HTTP_ERROR,
            f"Tika server request to {path} failed",
            status_code=response.status_code,
            reason=response.reason,
            debuginfo=response.reason,
        )
