"""Resources metadata can be extracted for, and access to their content."""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

import requests

from tika_metadata.core.enums import ResourceType
from tika_metadata.core.exceptions import UnsupportedResourceError
from tika_metadata.core.logging import LoggerManager
from tika_metadata.core.utils import HashUtils


@dataclass
class FileResource:
    """A stored file, identified by the hash of its content."""

    path: Optional[Path]
    filename: str
    contenthash: str
    is_directory: bool = False
    id: Optional[str] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileResource":
        """Describe a file on the local filesystem.

        Directories are described with an empty content hash.
        """
        path = Path(path)
        if path.is_dir():
            return cls(path=path, filename=path.name, contenthash="", is_directory=True)

        contenthash = HashUtils.calculate_file_hash(path) if path.exists() else ""
        return cls(path=path, filename=path.name, contenthash=contenthash)


@dataclass
class UrlResource:
    """A resource identified by an external URL."""

    url: str
    id: Optional[str] = None


Resource = Union[FileResource, UrlResource]


class ResourceProvider(ABC):
    """Supplies content streams and identities of resources."""

    @abstractmethod
    def get_stream(self, resource: Resource, resource_type: ResourceType) -> Optional[BinaryIO]:
        """Get a binary stream of the resource's content, or None if unavailable."""
        pass

    @abstractmethod
    def get_resource_id(self, resource: Resource, resource_type: ResourceType) -> str:
        """Get the host's identifier of a resource."""
        pass

    @abstractmethod
    def get_resource_hash(self, resource: Resource, resource_type: ResourceType) -> str:
        """Get the stable hash metadata of a resource is stored under."""
        pass


class LocalResourceProvider(ResourceProvider):
    """Provider reading files from the local filesystem and fetching URLs over HTTP."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize provider.

        Args:
            session: HTTP session used to fetch URL resources.
            timeout: URL fetch timeout in seconds.
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = LoggerManager.get_logger(self.__class__.__name__)

    def get_stream(self, resource: Resource, resource_type: ResourceType) -> Optional[BinaryIO]:
        if resource_type == ResourceType.FILE:
            return self._get_file_stream(self._as_file(resource))
        return self._get_url_stream(self._as_url(resource))

    def get_resource_id(self, resource: Resource, resource_type: ResourceType) -> str:
        if resource.id:
            return resource.id
        if resource_type == ResourceType.FILE:
            file = self._as_file(resource)
            return str(file.path) if file.path else file.filename
        return self._as_url(resource).url

    def get_resource_hash(self, resource: Resource, resource_type: ResourceType) -> str:
        if resource_type == ResourceType.FILE:
            return self._as_file(resource).contenthash
        return HashUtils.calculate_hash(self._as_url(resource).url)

    def _get_file_stream(self, file: FileResource) -> Optional[BinaryIO]:
        if file.is_directory or file.path is None or not file.path.is_file():
            return None
        return open(file.path, "rb")

    def _get_url_stream(self, url: UrlResource) -> Optional[BinaryIO]:
        try:
            response = self.session.get(url.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Could not fetch {url.url}: {e}")
            return None
        return io.BytesIO(response.content)

    @staticmethod
    def _as_file(resource: Resource) -> FileResource:
        if not isinstance(resource, FileResource):
            raise UnsupportedResourceError(f"Expected a file resource, got {type(resource).__name__}")
        return resource

    @staticmethod
    def _as_url(resource: Resource) -> UrlResource:
        if not isinstance(resource, UrlResource):
            raise UnsupportedResourceError(f"Expected a URL resource, got {type(resource).__name__}")
        return resource
