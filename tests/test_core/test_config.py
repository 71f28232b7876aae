"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from tika_metadata.core.config import (
    PLUGIN_NAME,
    DatabaseConfig,
    DictSettingsStore,
    ExtractionConfig,
    ServerConfig,
)
from tika_metadata.core.enums import LogLevel, ServiceType


class TestExtractionConfig:
    """Test cases for ExtractionConfig."""

    def test_default_config(self):
        """Test default configuration."""
        config = ExtractionConfig()

        assert config.service_type is None
        assert config.local.tika_path == "/usr/bin/tika-app-1.23.jar"
        assert config.local.java_path == "java"
        assert config.server.host is None
        assert config.server.port == 9998
        assert config.log_level == LogLevel.INFO
        assert config.dependencies[ServiceType.LOCAL] == ["java"]

    def test_service_type_conversion(self):
        """Test service type string conversion."""
        assert ExtractionConfig(service_type="server").service_type == ServiceType.SERVER
        assert ExtractionConfig(service_type="LOCAL").service_type == ServiceType.LOCAL
        assert ExtractionConfig(service_type="").service_type is None

    def test_invalid_service_type(self):
        """Test invalid service type."""
        with pytest.raises(ValidationError):
            ExtractionConfig(service_type="cloud")

    def test_log_level_validation(self):
        """Test log level validation."""
        config = ExtractionConfig(log_level="debug")
        assert config.log_level == LogLevel.DEBUG

        with pytest.raises(ValidationError):
            ExtractionConfig(log_level="verbose")

    def test_from_settings(self):
        """Test resolving config from flat plugin settings."""
        settings = DictSettingsStore({
            PLUGIN_NAME: {
                "tikaservicetype": "server",
                "tikaserverhost": "tika.example.com",
                "tikaserverport": "9999",
                "tikaservertimeout": "5",
                "tikalocalpath": "/opt/tika/tika-app.jar",
            }
        })

        config = ExtractionConfig.from_settings(settings)

        assert config.service_type == ServiceType.SERVER
        assert config.server.host == "tika.example.com"
        assert config.server.port == 9999
        assert config.server.timeout == 5.0
        assert config.local.tika_path == "/opt/tika/tika-app.jar"

    def test_from_settings_unset_keys_keep_defaults(self):
        """Test unset settings fall back to defaults."""
        config = ExtractionConfig.from_settings(DictSettingsStore())

        assert config.service_type is None
        assert config.server.port == 9998
        assert config.local.tika_path == "/usr/bin/tika-app-1.23.jar"

    def test_from_env(self, monkeypatch, temp_dir):
        """Test resolving config from environment variables."""
        monkeypatch.setenv("TIKA_SERVICE_TYPE", "local")
        monkeypatch.setenv("TIKA_LOCAL_PATH", "/opt/tika/tika-app.jar")
        monkeypatch.setenv("TIKA_SERVER_HOST", "tika")
        monkeypatch.delenv("TIKA_SERVER_PORT", raising=False)
        monkeypatch.delenv("TIKA_SERVER_TIMEOUT", raising=False)
        monkeypatch.delenv("TIKA_LOG_LEVEL", raising=False)

        config = ExtractionConfig.from_env(temp_dir / "missing.env")

        assert config.service_type == ServiceType.LOCAL
        assert config.local.tika_path == "/opt/tika/tika-app.jar"
        assert config.server.host == "tika"
        assert config.server.port == 9998

    def test_save_and_load_yaml(self, temp_dir):
        """Test saving and loading YAML configuration."""
        config = ExtractionConfig(service_type="server", server={"host": "localhost", "port": 9000})
        config_path = temp_dir / "config.yaml"

        config.save(config_path)
        loaded = ExtractionConfig.from_file(config_path)

        assert loaded == config

    def test_save_and_load_json(self, temp_dir):
        """Test saving and loading JSON configuration."""
        config = ExtractionConfig(service_type="local", log_level="WARNING")
        config_path = temp_dir / "config.json"

        config.save(config_path)
        loaded = ExtractionConfig.from_file(config_path)

        assert loaded.service_type == ServiceType.LOCAL
        assert loaded.log_level == LogLevel.WARNING

    def test_unsupported_file_format(self, temp_dir):
        """Test unsupported config file suffix."""
        with pytest.raises(ValueError):
            ExtractionConfig.from_file(temp_dir / "config.toml")


class TestServerConfig:
    """Test cases for ServerConfig."""

    def test_base_uri_host_with_port(self):
        """Test host strings which already carry a port."""
        assert ServerConfig(host="localhost:9998").base_uri == "http://localhost:9998"

    def test_base_uri_appends_port(self):
        """Test the configured port is appended to a bare host."""
        assert ServerConfig(host="tika.example.com", port=9000).base_uri == "http://tika.example.com:9000"

    def test_base_uri_keeps_scheme(self):
        """Test an explicit scheme is kept and trailing slashes dropped."""
        assert ServerConfig(host="https://tika.example.com/").base_uri == "https://tika.example.com:9998"

    def test_base_uri_without_host(self):
        """Test no base URI without a host."""
        assert ServerConfig().base_uri is None

    def test_empty_port_is_unset(self):
        """Test empty ports from settings forms."""
        config = ServerConfig(host="tika", port="")

        assert config.port is None
        assert config.base_uri == "http://tika"

    def test_invalid_port(self):
        """Test out of range port."""
        with pytest.raises(ValidationError):
            ServerConfig(port=70000)


class TestDatabaseConfig:
    """Test cases for DatabaseConfig."""

    def test_sqlite_bind_kwargs(self):
        """Test sqlite bind arguments."""
        assert DatabaseConfig().to_bind_kwargs() == {
            "provider": "sqlite",
            "filename": ":memory:",
            "create_db": True,
        }

    def test_server_bind_kwargs_skip_unset(self):
        """Test unset connection arguments are left out."""
        config = DatabaseConfig(provider="postgres", host="db", user="moodle", database="metadata")

        assert config.to_bind_kwargs() == {
            "provider": "postgres",
            "host": "db",
            "user": "moodle",
            "database": "metadata",
        }
