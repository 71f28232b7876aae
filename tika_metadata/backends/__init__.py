"""Tika extraction backends."""

from tika_metadata.backends.base import BackendBase, get_missing_dependencies
from tika_metadata.backends.local import LocalBackend
from tika_metadata.backends.server import TikaServer

__all__ = ["BackendBase", "LocalBackend", "TikaServer", "get_missing_dependencies"]
