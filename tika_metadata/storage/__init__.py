"""Persistence of metadata records."""

from tika_metadata.storage.base import RecordStore
from tika_metadata.storage.pony_store import PonyRecordStore

__all__ = ["RecordStore", "PonyRecordStore"]
