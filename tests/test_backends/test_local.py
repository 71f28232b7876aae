"""Tests for the local tika-app backend."""

import io
import os
import subprocess
from unittest.mock import patch

import pytest

from tika_metadata.backends.base import get_missing_dependencies, is_cli_option_supported
from tika_metadata.backends.local import LocalBackend
from tika_metadata.core.config import ExtractionConfig
from tika_metadata.core.enums import ExtractionErrorKind, ExtractionOption, ServiceType
from tika_metadata.core.exceptions import ConfigurationError, ExtractionError


@pytest.fixture
def tika_jar(temp_dir):
    """An existing file standing in for the tika-app jar."""
    jar = temp_dir / "tika-app.jar"
    jar.write_bytes(b"jar")
    return jar


@pytest.fixture
def backend(tika_jar) -> LocalBackend:
    """Local backend configured with an existing jar."""
    return LocalBackend(ExtractionConfig(service_type="local", local={"tika_path": str(tika_jar)}))


def completed(stdout: str, returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


class TestDependencies:
    """Test cases for dependency checks."""

    @patch("tika_metadata.backends.base.shutil.which", return_value=None)
    def test_missing_executable(self, mock_which):
        """Test missing local executables are reported."""
        assert get_missing_dependencies({ServiceType.LOCAL: ["java"]}, "local") == ["java"]
        mock_which.assert_called_once_with("java")

    @patch("tika_metadata.backends.base.shutil.which", return_value="/usr/bin/java")
    def test_installed_executable(self, _mock_which):
        """Test installed executables are not reported."""
        assert get_missing_dependencies({ServiceType.LOCAL: ["java"]}, ServiceType.LOCAL) == []

    def test_server_modules(self):
        """Test server dependencies are importable modules."""
        dependencies = {ServiceType.SERVER: ["requests", "no_such_module_for_tika"]}

        assert get_missing_dependencies(dependencies, "server") == ["no_such_module_for_tika"]

    def test_invalid_service_type(self):
        """Test unknown service types raise."""
        with pytest.raises(ExtractionError) as exc_info:
            get_missing_dependencies({}, "cloud")

        assert exc_info.value.kind == ExtractionErrorKind.INVALID_SERVICE_TYPE

    def test_cli_options(self):
        """Test supported CLI options."""
        assert is_cli_option_supported("--json")
        assert is_cli_option_supported(ExtractionOption.DETECT_TYPE)
        assert not is_cli_option_supported("--xml")


class TestReadiness:
    """Test cases for LocalBackend.is_ready."""

    def test_nonexistent_path(self):
        """Test a missing jar is not ready and extraction fails."""
        backend = LocalBackend(ExtractionConfig(service_type="local", local={"tika_path": "/nonexistent/tika.jar"}))

        assert backend.is_ready() is False
        with pytest.raises(ConfigurationError):
            backend.extract(io.BytesIO(b"data"), [ExtractionOption.TEXT_CONTENT])

    def test_empty_path(self):
        """Test an unset jar path is not ready."""
        backend = LocalBackend(ExtractionConfig(local={"tika_path": ""}))

        assert backend.is_ready() is False

    @patch("tika_metadata.backends.base.shutil.which", return_value=None)
    def test_missing_java(self, _mock_which, backend):
        """Test a missing java is not ready."""
        assert backend.is_ready() is False

    @patch("tika_metadata.backends.local.subprocess.run")
    @patch("tika_metadata.backends.base.shutil.which", return_value="/usr/bin/java")
    def test_ready(self, _mock_which, mock_run, backend, tika_jar):
        """Test a jar printing help is ready."""
        mock_run.return_value = completed("usage: java -jar tika-app.jar [option...] [file...]")

        assert backend.is_ready() is True
        mock_run.assert_called_once_with(
            ["java", "-jar", str(tika_jar), "--help"], capture_output=True, text=True
        )

    @patch("tika_metadata.backends.local.subprocess.run", side_effect=OSError("exec format error"))
    @patch("tika_metadata.backends.base.shutil.which", return_value="/usr/bin/java")
    def test_ready_never_raises(self, _mock_which, _mock_run, backend):
        """Test failures running java are reported as not ready."""
        assert backend.is_ready() is False


class TestExtract:
    """Test cases for LocalBackend.extract."""

    @pytest.fixture(autouse=True)
    def ready(self, backend):
        with patch.object(LocalBackend, "is_ready", return_value=True):
            yield

    @patch("tika_metadata.backends.local.subprocess.run")
    def test_extract_file_stream(self, mock_run, backend, tika_jar, temp_dir):
        """Test file streams are passed by path with every option."""
        path = temp_dir / "sheep.pdf"
        path.write_bytes(b"%PDF-1.7")
        mock_run.return_value = completed('{"Content-Type": "application/pdf"}')

        with open(path, "rb") as stream:
            result = backend.extract(stream, [ExtractionOption.JSON_METADATA, "--text"])

        assert result == '{"Content-Type": "application/pdf"}'
        mock_run.assert_called_once_with(
            ["java", "-jar", str(tika_jar), "--json", "--text", str(path)],
            capture_output=True,
            text=True,
        )

    @patch("tika_metadata.backends.local.subprocess.run")
    def test_extract_memory_stream(self, mock_run, backend):
        """Test in-memory streams are spooled to a temporary file."""
        seen = {}

        def run(command, **_kwargs):
            with open(command[-1], "rb") as f:
                seen["content"] = f.read()
            seen["path"] = command[-1]
            return completed("application/pdf\n")

        mock_run.side_effect = run

        result = backend.extract(io.BytesIO(b"%PDF-1.7"), ["--detect"])

        assert result == "application/pdf\n"
        assert seen["content"] == b"%PDF-1.7"
        assert not os.path.exists(seen["path"])

    @patch("tika_metadata.backends.local.subprocess.run", return_value=completed("  \n"))
    def test_empty_output_is_none(self, _mock_run, backend):
        """Test empty output means no result."""
        assert backend.extract(io.BytesIO(b"data"), ["--text"]) is None

    def test_unsupported_option(self, backend):
        """Test unsupported options raise."""
        with pytest.raises(ExtractionError) as exc_info:
            backend.extract(io.BytesIO(b"data"), ["--text", "--xml"])

        assert exc_info.value.kind == ExtractionErrorKind.UNSUPPORTED_OPTION

    def test_no_options(self, backend):
        """Test at least one option is required."""
        with pytest.raises(ExtractionError) as exc_info:
            backend.extract(io.BytesIO(b"data"), [])

        assert exc_info.value.kind == ExtractionErrorKind.INVALID_OPTIONS
