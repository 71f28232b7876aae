"""Tika invoked as a locally installed tika-app jar."""

import os
import subprocess
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Optional, Union

from tika_metadata.backends.base import BackendBase, get_missing_dependencies, is_cli_option_supported
from tika_metadata.core.config import ExtractionConfig
from tika_metadata.core.enums import ExtractionErrorKind, ExtractionOption, ServiceType
from tika_metadata.core.exceptions import ConfigurationError, ExtractionError


class LocalBackend(BackendBase):
    """Runs ``java -jar <tika-app> <options> <file>`` and captures stdout."""

    def __init__(self, config: ExtractionConfig) -> None:
        super().__init__(config)
        self.tika_path = config.local.tika_path
        self.java_path = config.local.java_path

    def get_missing_dependencies(self) -> list[str]:
        return get_missing_dependencies(self.config.dependencies, ServiceType.LOCAL)

    def is_ready(self) -> bool:
        """Check tika-app is configured, installed and runs.

        Returns:
            True if the jar path is set, java is installed, the jar exists and
            running it with ``--help`` prints something.
        """
        try:
            if not self.tika_path or self.get_missing_dependencies():
                return False
            if not Path(self.tika_path).exists():
                return False

            result = subprocess.run(
                [self.java_path, "-jar", self.tika_path, "--help"],
                capture_output=True,
                text=True,
            )
            return bool(result.stdout.strip())
        except Exception as e:
            self.logger.warning(f"Local Tika readiness check failed: {e}")
            return False

    def extract(
        self,
        stream: BinaryIO,
        options: list[Union[str, ExtractionOption]],
    ) -> Optional[str]:
        """Run tika-app over a stream's content.

        Args:
            stream: Binary stream, its file is used directly if it has one.
            options: Tika CLI options, all of which are passed in one run.

        Returns:
            Tika's standard output, None if it printed nothing.

        Raises:
            ConfigurationError: If the local install is not ready.
            ExtractionError: If no options are given, or an option is not supported.
        """
        if not self.is_ready():
            raise ConfigurationError("Local Tika install is not configured or not working")

        if not options:
            raise ExtractionError(ExtractionErrorKind.INVALID_OPTIONS, "No Tika CLI options given")

        flags = []
        for option in options:
            if not is_cli_option_supported(option):
                raise ExtractionError(
                    ExtractionErrorKind.UNSUPPORTED_OPTION,
                    f"Unsupported Tika CLI option: {option}",
                )
            flags.append(option.value if isinstance(option, ExtractionOption) else option)

        with self._local_path(stream) as path:
            command = [self.java_path, "-jar", self.tika_path, *flags, str(path)]
            self.logger.debug(f"Running {' '.join(command)}")
            result = subprocess.run(command, capture_output=True, text=True)

        if result.returncode != 0:
            self.logger.warning(f"tika-app exited with {result.returncode}: {result.stderr.strip()}")

        if not result.stdout.strip():
            return None
        return result.stdout

    @contextmanager
    def _local_path(self, stream: BinaryIO) -> Generator[Path, None, None]:
        """Yield a filesystem path holding the stream's content."""
        name = getattr(stream, "name", None)
        if isinstance(name, (str, Path)) and Path(name).is_file():
            yield Path(name)
            return

        fd, tmp_path = tempfile.mkstemp(prefix="tika_")
        try:
            with os.fdopen(fd, "wb") as f:
                for chunk in iter(lambda: stream.read(1024 * 1024), b""):
                    f.write(chunk)
            yield Path(tmp_path)
        finally:
            os.unlink(tmp_path)
