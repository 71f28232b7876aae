"""Tests for the pony ORM record store."""

import pytest

from tika_metadata.core.exceptions import ConfigurationError
from tika_metadata.metadata.schema import BASE_TABLE
from tika_metadata.storage.pony_store import PonyRecordStore


class TestPonyRecordStore:
    """Test cases for PonyRecordStore."""

    def test_tables(self, store):
        """Test one entity per base and supplementary table."""
        assert BASE_TABLE in store.entities
        assert "tika_pdf_metadata" in store.entities
        assert "tika_video_metadata" in store.entities
        assert "tika_archive_metadata" not in store.entities

    def test_insert_and_get_one(self, store):
        """Test inserted rows are returned as dicts."""
        id = store.insert(BASE_TABLE, {"id": 0, "resourcehash": "abc", "title": "Sheep", "unknown": "x"})

        row = store.get_one(BASE_TABLE, {"resourcehash": "abc"})

        assert id > 0
        assert row["id"] == id
        assert row["title"] == "Sheep"
        assert row["creator"] is None
        assert "unknown" not in row

    def test_get_field(self, store):
        """Test reading a single field."""
        store.insert("tika_image_metadata", {"resourcehash": "img", "width": "640 pixels"})

        assert store.get_field("tika_image_metadata", "width", {"resourcehash": "img"}) == "640 pixels"
        assert store.get_field("tika_image_metadata", "width", {"resourcehash": "none"}) is None

    def test_update(self, store):
        """Test updating by id."""
        id = store.insert(BASE_TABLE, {"resourcehash": "abc", "title": "Sheep"})

        assert store.update(BASE_TABLE, {"id": id, "title": "Electric Sheep"}) is True
        assert store.get_field(BASE_TABLE, "title", {"id": id}) == "Electric Sheep"
        assert store.update(BASE_TABLE, {"id": id + 1, "title": "Nothing"}) is False

    def test_delete(self, store):
        """Test deleting by conditions."""
        store.insert(BASE_TABLE, {"resourcehash": "abc"})

        assert store.delete(BASE_TABLE, {"resourcehash": "abc"}) is True
        assert store.delete(BASE_TABLE, {"resourcehash": "abc"}) is False

    def test_transaction_rolls_back(self, store):
        """Test an exception inside a transaction discards its writes."""
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.insert(BASE_TABLE, {"resourcehash": "abc"})
                raise RuntimeError("abort")

        assert not store.record_exists(BASE_TABLE, {"resourcehash": "abc"})

    def test_unknown_table(self, store):
        """Test unknown tables are rejected."""
        with pytest.raises(ConfigurationError):
            store.get_one("tika_archive_metadata", {"id": 1})

    def test_stores_are_independent(self, store):
        """Test each store has its own database."""
        other = PonyRecordStore()
        store.insert(BASE_TABLE, {"resourcehash": "abc"})

        assert other.get_one(BASE_TABLE, {"resourcehash": "abc"}) is None
