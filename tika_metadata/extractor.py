"""Extraction of metadata, content and mimetypes with Apache Tika."""

from typing import Any, Optional, Union

import requests

from tika_metadata.backends.base import (
    get_missing_dependencies,
    is_cli_option_supported,
    resolve_service_type,
)
from tika_metadata.backends.local import LocalBackend
from tika_metadata.backends.server import TikaServer
from tika_metadata.core.config import ExtractionConfig
from tika_metadata.core.enums import ExtractionErrorKind, ExtractionOption, ResourceType, ServiceType
from tika_metadata.core.exceptions import (
    ConfigurationError,
    ExtractionError,
    NotFoundError,
    UnsupportedResourceError,
)
from tika_metadata.core.logging import LoggerManager
from tika_metadata.core.utils import UrlUtils
from tika_metadata.filetypes import BASE_VARIANT, MIMETYPE_KEY, metadata_record_variant
from tika_metadata.metadata import raw
from tika_metadata.metadata.record import MetadataRecord
from tika_metadata.resources import (
    FileResource,
    LocalResourceProvider,
    Resource,
    ResourceProvider,
    UrlResource,
)
from tika_metadata.storage.base import RecordStore

Option = Union[str, ExtractionOption]


def _option_value(option: Option) -> str:
    return option.value if isinstance(option, ExtractionOption) else option


class TikaExtractor:
    """Extracts metadata from files and URLs with the configured Tika service.

    The service type is fixed by the configuration at construction. Local
    extraction runs tika-app once with every requested option, server
    extraction sends one request for exactly one option.
    """

    def __init__(
        self,
        config: ExtractionConfig,
        resources: Optional[ResourceProvider] = None,
        store: Optional[RecordStore] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize extractor.

        Args:
            config: Resolved extraction configuration.
            resources: Provider of resource streams and hashes.
            store: Store extracted metadata records are persisted in.
            session: HTTP session for Tika server requests.
        """
        self.config = config
        self.resources = resources or LocalResourceProvider(session=session, timeout=config.server.timeout)
        self.store = store
        self.session = session
        self.local = LocalBackend(config)
        self.logger = LoggerManager.get_logger(self.__class__.__name__)

    @property
    def service_type(self) -> Optional[ServiceType]:
        return self.config.service_type

    def get_server(self) -> TikaServer:
        """Get a Tika server client for the configured host.

        Raises:
            ConfigurationError: If no server host is configured.
        """
        return TikaServer(self.config, session=self.session)

    def validate_resource(self, resource: Resource, resource_type: ResourceType) -> bool:
        """Check metadata can be extracted from a resource.

        Files must not be directories. URLs must be valid http or https URLs.
        """
        if resource_type == ResourceType.FILE:
            return isinstance(resource, FileResource) and not resource.is_directory

        if resource_type == ResourceType.URL:
            return (
                isinstance(resource, UrlResource)
                and UrlUtils.is_http_url(resource.url)
                and UrlUtils.appears_valid(resource.url)
            )

        return False

    def extract(
        self,
        resource: Resource,
        resource_type: ResourceType,
        options: Union[Option, list[Option]],
    ) -> Optional[str]:
        """Extract data from a resource with Tika.

        Args:
            resource: The resource to extract from.
            resource_type: Type of the resource.
            options: One or more extraction options.

        Returns:
            Tika's raw output, None if it produced nothing.

        Raises:
            UnsupportedResourceError: If the resource fails validation.
            ExtractionError: If the resource has no content, the options are
                invalid for the service type, the server is not ready or a
                server request fails.
            ConfigurationError: If the configured backend is not set up.
        """
        if isinstance(options, (str, ExtractionOption)):
            options = [options]
        options = list(options)

        if not self.validate_resource(resource, resource_type):
            raise UnsupportedResourceError(
                f"Cannot extract from {resource_type.value} resource {resource!r}"
            )

        # URL metadata is fetched by the server client itself.
        fetches_upstream = (
            self.service_type == ServiceType.SERVER
            and resource_type == ResourceType.URL
            and [_option_value(option) for option in options] == [ExtractionOption.JSON_METADATA.value]
        )

        stream = None
        if not fetches_upstream:
            stream = self.resources.get_stream(resource, resource_type)
            if stream is None:
                resource_id = self.resources.get_resource_id(resource, resource_type)
                raise ExtractionError(
                    ExtractionErrorKind.RESOURCE_NOT_FOUND,
                    f"No content for {resource_type.value} resource {resource_id}",
                )

        try:
            if self.service_type == ServiceType.LOCAL:
                return self.local.extract(stream, options)
            if self.service_type == ServiceType.SERVER:
                url = resource.url if fetches_upstream else None
                return self._extract_server(stream, options, url)
            raise ExtractionError(
                ExtractionErrorKind.INVALID_SERVICE_TYPE,
                f"Invalid Tika service type: {self.service_type}",
            )
        finally:
            if stream is not None:
                stream.close()

    def _extract_server(self, stream, options: list[Option], url: Optional[str] = None) -> Optional[str]:
        if len(options) != 1:
            raise ExtractionError(
                ExtractionErrorKind.INVALID_OPTIONS,
                "Tika server extraction takes exactly one option",
            )

        server = self.get_server()
        if not server.is_ready():
            raise ExtractionError(ExtractionErrorKind.NOT_READY, "Tika server is not ready")

        option = _option_value(options[0])
        if option == ExtractionOption.TEXT_CONTENT.value:
            return server.get_content(stream)
        if option == ExtractionOption.JSON_METADATA.value:
            if url is not None:
                return server.get_url_metadata(url)
            return server.get_metadata(stream)
        if option == ExtractionOption.DETECT_TYPE.value:
            return server.get_mimetype(stream)

        raise ExtractionError(
            ExtractionErrorKind.UNSUPPORTED_OPTION,
            f"Unsupported Tika server option: {option}",
        )

    def extract_content(self, resource: Resource, resource_type: ResourceType) -> Optional[str]:
        return self.extract(resource, resource_type, ExtractionOption.TEXT_CONTENT)

    def extract_file_content(self, file: FileResource) -> Optional[str]:
        return self.extract_content(file, ResourceType.FILE)

    def extract_url_content(self, url: UrlResource) -> Optional[str]:
        return self.extract_content(url, ResourceType.URL)

    def extract_mimetype(self, resource: Resource, resource_type: ResourceType) -> Optional[str]:
        """Detect the mimetype of a resource's content.

        Returns:
            IANA mimetype, possibly with parameters, None if undetermined.
        """
        mimetype = self.extract(resource, resource_type, ExtractionOption.DETECT_TYPE)
        return mimetype.strip() if mimetype else None

    def extract_file_mimetype(self, file: FileResource) -> Optional[str]:
        return self.extract_mimetype(file, ResourceType.FILE)

    def extract_url_mimetype(self, url: UrlResource) -> Optional[str]:
        return self.extract_mimetype(url, ResourceType.URL)

    def extract_metadata(self, resource: Resource, resource_type: ResourceType) -> Optional[MetadataRecord]:
        """Extract a resource's metadata into an unpersisted record.

        The record variant is chosen from the extracted ``Content-Type``.

        Returns:
            The metadata record, None if Tika found no metadata.
        """
        raw_json = self.extract(resource, resource_type, ExtractionOption.JSON_METADATA)
        rawdata = self.clean_metadata(raw_json)
        if not rawdata:
            return None

        if MIMETYPE_KEY in rawdata:
            variant = metadata_record_variant(str(rawdata[MIMETYPE_KEY]))
        else:
            variant = BASE_VARIANT

        resourcehash = self.resources.get_resource_hash(resource, resource_type)
        self.logger.debug(f"Extracted {variant} metadata for {resourcehash}")
        return MetadataRecord(variant, resourcehash, rawdata, store=self.store)

    def extract_file_metadata(self, file: FileResource) -> Optional[MetadataRecord]:
        return self.extract_metadata(file, ResourceType.FILE)

    def extract_url_metadata(self, url: UrlResource) -> Optional[MetadataRecord]:
        return self.extract_metadata(url, ResourceType.URL)

    def read_metadata(self, resourcehash: str) -> Optional[MetadataRecord]:
        """Load stored metadata of a resource in the variant matching its format.

        Returns:
            The stored record, None if the resource has no stored metadata.
        """
        if self.store is None:
            raise ConfigurationError("No metadata store configured")
        try:
            return MetadataRecord.from_resourcehash(resourcehash, self.store)
        except NotFoundError:
            self.logger.debug(f"No stored metadata for {resourcehash}")
            return None

    def clean_metadata(self, raw_json: Optional[str]) -> Optional[dict[str, Any]]:
        return raw.clean_metadata(raw_json)

    def get_missing_dependencies(self, service_type: Union[str, ServiceType]) -> list[str]:
        return get_missing_dependencies(self.config.dependencies, service_type)

    def is_cli_option_supported(self, option: Option) -> bool:
        return is_cli_option_supported(option)

    def is_ready(self) -> bool:
        """Check the configured service can extract. Never raises."""
        try:
            if self.service_type is None:
                return False
            service_type = resolve_service_type(self.service_type)
            if service_type == ServiceType.LOCAL:
                return self.local.is_ready()
            return self.get_server().is_ready()
        except Exception as e:
            self.logger.warning(f"Tika readiness check failed: {e}")
            return False

    def service_status(self) -> dict[str, bool]:
        """Readiness payload for status widgets and health checks."""
        return {"ready": self.is_ready()}
