"""Extraction configuration management."""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from tika_metadata.core.enums import LogLevel, ServiceType

PLUGIN_NAME = "metadataextractor_tika"


class SettingsStore(ABC):
    """Flat key/value plugin settings supplied by the host application."""

    @abstractmethod
    def get(self, plugin: str, key: str) -> Optional[str]:
        """Get a setting value, or None if it is unset."""
        pass


class DictSettingsStore(SettingsStore):
    """Settings store backed by a nested ``{plugin: {key: value}}`` dict."""

    def __init__(self, settings: Optional[dict[str, dict[str, Any]]] = None) -> None:
        self.settings = settings or {}

    def get(self, plugin: str, key: str) -> Optional[str]:
        value = self.settings.get(plugin, {}).get(key)
        return None if value is None else str(value)

    def set(self, plugin: str, key: str, value: Any) -> None:
        self.settings.setdefault(plugin, {})[key] = value


class LocalConfig(BaseModel):
    """Configuration for a locally installed tika-app jar."""

    tika_path: Optional[str] = Field(
        default="/usr/bin/tika-app-1.23.jar",
        description="Path to the installed tika-app java archive",
    )
    java_path: str = Field(default="java", description="Java executable used to run the jar")


class ServerConfig(BaseModel):
    """Configuration for a remote Tika server."""

    host: Optional[str] = None
    port: Optional[int] = Field(default=9998, gt=0, lt=65536)
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_redirects: int = Field(default=5, ge=0, description="Redirects followed when fetching URL resources")

    @field_validator("port", mode="before")
    @classmethod
    def empty_port_is_unset(cls, v):
        """Treat empty or zero ports from settings forms as unset."""
        if v in ("", 0, "0"):
            return None
        return v

    @property
    def base_uri(self) -> Optional[str]:
        """Base URI of the server, or None if no host is configured."""
        if not self.host:
            return None

        base_uri = self.host.rstrip("/")
        if "://" not in base_uri:
            base_uri = f"http://{base_uri}"

        # Host strings such as "localhost:9998" already carry their port.
        authority = base_uri.split("://", 1)[1]
        if self.port and not authority.rsplit("]", 1)[-1].count(":"):
            base_uri = f"{base_uri}:{self.port}"

        return base_uri


class DatabaseConfig(BaseModel):
    """Arguments for binding the pony ORM database."""

    provider: str = "sqlite"
    filename: Optional[str] = ":memory:"
    host: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None
    port: Optional[int] = None
    create_tables: bool = True

    def to_bind_kwargs(self) -> dict[str, Any]:
        """Convert to keyword arguments for ``Database.bind``."""
        if self.provider == "sqlite":
            return {"provider": "sqlite", "filename": self.filename, "create_db": True}

        kwargs = {
            "provider": self.provider,
            "host": self.host,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "port": self.port,
        }
        return {key: value for key, value in kwargs.items() if value is not None}


def _default_dependencies() -> dict[ServiceType, list[str]]:
    return {
        ServiceType.LOCAL: ["java"],
        ServiceType.SERVER: ["requests"],
    }


class ExtractionConfig(BaseModel):
    """Complete, resolved extraction configuration."""

    service_type: Optional[ServiceType] = Field(default=None, description="Active Tika service type")
    local: LocalConfig = Field(default_factory=LocalConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    log_level: LogLevel = Field(default=LogLevel.INFO)
    dependencies: dict[ServiceType, list[str]] = Field(
        default_factory=_default_dependencies,
        description="Executables (local) or importable modules (server) each service type requires",
    )

    @field_validator("service_type", mode="before")
    @classmethod
    def validate_service_type(cls, v):
        """Validate service type."""
        if v in (None, ""):
            return None
        if isinstance(v, str):
            try:
                return ServiceType(v.lower())
            except ValueError:
                raise ValueError(f"Invalid Tika service type: {v}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        if isinstance(v, str):
            try:
                return LogLevel(v.upper())
            except ValueError:
                raise ValueError(f"Invalid log level: {v}")
        return v

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ExtractionConfig":
        """Create config from dictionary."""
        return cls(**config_dict)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ExtractionConfig":
        """Load config from file (JSON/YAML)."""
        config_path = Path(config_path)

        if config_path.suffix.lower() == ".json":
            with open(config_path) as f:
                config_dict = json.load(f)
        elif config_path.suffix.lower() in [".yaml", ".yml"]:
            with open(config_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        return cls.from_dict(config_dict)

    @classmethod
    def from_settings(cls, settings: SettingsStore, plugin: str = PLUGIN_NAME) -> "ExtractionConfig":
        """Resolve config from the host's flat plugin settings.

        Args:
            settings: Host settings store.
            plugin: Plugin name the settings are stored under.

        Returns:
            Resolved configuration, unset keys keep their defaults.
        """
        server = {
            "host": settings.get(plugin, "tikaserverhost"),
            "port": settings.get(plugin, "tikaserverport"),
            "timeout": settings.get(plugin, "tikaservertimeout"),
        }
        local = {"tika_path": settings.get(plugin, "tikalocalpath")}

        return cls(
            service_type=settings.get(plugin, "tikaservicetype"),
            local={key: value for key, value in local.items() if value is not None},
            server={key: value for key, value in server.items() if value is not None},
        )

    @classmethod
    def from_env(cls, dotenv_path: Optional[Union[str, Path]] = None) -> "ExtractionConfig":
        """Resolve config from environment variables, loading a .env file first."""
        load_dotenv(dotenv_path)

        server = {
            "host": os.environ.get("TIKA_SERVER_HOST"),
            "port": os.environ.get("TIKA_SERVER_PORT"),
            "timeout": os.environ.get("TIKA_SERVER_TIMEOUT"),
        }
        local = {"tika_path": os.environ.get("TIKA_LOCAL_PATH")}

        return cls(
            service_type=os.environ.get("TIKA_SERVICE_TYPE"),
            local={key: value for key, value in local.items() if value is not None},
            server={key: value for key, value in server.items() if value is not None},
            log_level=os.environ.get("TIKA_LOG_LEVEL", LogLevel.INFO.value),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a serializable dictionary."""
        return self.model_dump(mode="json")

    def save(self, config_path: Union[str, Path]) -> None:
        """Save config to file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() == ".json":
            with open(config_path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
        elif config_path.suffix.lower() in [".yaml", ".yml"]:
            with open(config_path, "w") as f:
                yaml.dump(self.to_dict(), f, default_flow_style=False)
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")
