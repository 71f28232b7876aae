"""Base class for Tika backends."""

import importlib.util
import shutil
from abc import ABC, abstractmethod
from typing import Union

from tika_metadata.core.config import ExtractionConfig
from tika_metadata.core.enums import ExtractionErrorKind, ExtractionOption, ServiceType
from tika_metadata.core.exceptions import ExtractionError
from tika_metadata.core.logging import LoggerManager


def resolve_service_type(service_type: Union[str, ServiceType, None]) -> ServiceType:
    """Convert a service type name to a ``ServiceType``.

    Raises:
        ExtractionError: Kind invalid-service-type if the name is unknown.
    """
    if isinstance(service_type, ServiceType):
        return service_type
    try:
        return ServiceType(str(service_type).lower())
    except ValueError:
        raise ExtractionError(
            ExtractionErrorKind.INVALID_SERVICE_TYPE,
            f"Invalid Tika service type: {service_type}",
        )


def get_missing_dependencies(
    dependencies: dict[ServiceType, list[str]],
    service_type: Union[str, ServiceType],
) -> list[str]:
    """Get the names of a service type's dependencies which are not installed.

    Local dependencies are executables looked up on ``PATH``, server
    dependencies are importable modules.

    Raises:
        ExtractionError: Kind invalid-service-type if the service type is unknown.
    """
    service_type = resolve_service_type(service_type)

    missing = []
    for name in dependencies.get(service_type, []):
        if service_type == ServiceType.LOCAL:
            installed = shutil.which(name) is not None
        else:
            installed = importlib.util.find_spec(name) is not None
        if not installed:
            missing.append(name)

    return missing


def is_cli_option_supported(option: Union[str, ExtractionOption]) -> bool:
    """Check if a Tika CLI option is one of the supported extraction options."""
    if isinstance(option, ExtractionOption):
        return True
    return option in {supported.value for supported in ExtractionOption}


class BackendBase(ABC):
    """Base class for ways of invoking Tika."""

    def __init__(self, config: ExtractionConfig) -> None:
        self.config = config
        self.logger = LoggerManager.get_logger(self.__class__.__name__)

    @abstractmethod
    def is_ready(self) -> bool:
        """Check the backend can extract.

        Implementations never raise, every failure is reported as False.
        """
        pass
