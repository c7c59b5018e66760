"""
Tests for the SQLite record store.
"""

from datetime import datetime

import pytest

from talentledger.errors import PersistenceError, RecordNotFoundError
from talentledger.storage import RecordStore


class TestReads:
    """Test store reads."""

    def test_select_all(self, seeded_store):
        """select_all returns every row."""
        rows = seeded_store.select_all("candidates")
        assert sorted(r["id"] for r in rows) == ["c1", "c2", "c3"]

    def test_select_by_owner(self, seeded_store):
        """select_by_owner filters on the table's owner column."""
        rows = seeded_store.select_by_owner("candidates", "acme")
        assert sorted(r["id"] for r in rows) == ["c1", "c2"]

    def test_select_by_owner_no_match(self, seeded_store):
        """No matching owner gives an empty list."""
        assert seeded_store.select_by_owner("candidates", "nobody") == []

    def test_get_by_id(self, seeded_store):
        """get_by_id returns the row as a dict."""
        row = seeded_store.get_by_id("candidates", "c2")
        assert row["name"] == "Ben Okafor"
        assert row["rate_per_hour"] == 12.5

    def test_get_missing(self, seeded_store):
        """Missing ids raise RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError) as exc:
            seeded_store.get_by_id("candidates", "zzz")
        assert exc.value.record_id == "zzz"

    def test_unknown_table(self, store):
        """Unknown tables raise PersistenceError."""
        with pytest.raises(PersistenceError, match="Unknown table"):
            store.select_all("jobs")


class TestWrites:
    """Test store writes."""

    def test_insert_assigns_id(self, store):
        """Inserts get a generated id and column defaults."""
        row = store.insert_one("work_records", {"employee_id": "e1", "date": datetime(2025, 1, 20)})
        assert row["id"]
        assert row["payment_status"] == "pending"

    def test_insert_ignores_unknown_fields(self, store):
        """Fields without a column are dropped."""
        row = store.insert_one("candidates", {"id": "c9", "name": "Dee", "favourite_colour": "teal"})
        assert "favourite_colour" not in row

    def test_insert_failure_wrapped(self, store, quiet_logger):
        """Database errors are wrapped and counted."""
        with pytest.raises(PersistenceError):
            store.insert_one("candidates", {"id": "c9"})
        assert quiet_logger.get_metrics()["writes_failed"] == 1

    def test_update_fields(self, seeded_store):
        """Updates are committed."""
        row = seeded_store.update_fields("candidates", "c1", {"active_hours": 12.5})
        assert row["active_hours"] == 12.5
        assert seeded_store.get_by_id("candidates", "c1")["active_hours"] == 12.5

    def test_update_missing(self, seeded_store):
        """Updating a missing id raises."""
        with pytest.raises(RecordNotFoundError):
            seeded_store.update_fields("candidates", "zzz", {"active_hours": 1})

    def test_delete(self, seeded_store):
        """Deleted rows are gone."""
        seeded_store.delete_by_id("candidates", "c3")
        with pytest.raises(RecordNotFoundError):
            seeded_store.get_by_id("candidates", "c3")

    def test_delete_missing(self, seeded_store):
        """Deleting a missing id raises."""
        with pytest.raises(RecordNotFoundError):
            seeded_store.delete_by_id("candidates", "zzz")

    def test_write_metrics(self, seeded_store, quiet_logger):
        """Every write is counted."""
        metrics = quiet_logger.get_metrics()
        assert metrics["writes_attempted"] == 3
        assert metrics["writes_failed"] == 0


def test_store_without_create_does_not_make_file(tmp_path):
    """create=False should not touch the filesystem."""
    db_path = tmp_path / "absent.db"
    RecordStore(db_path, create=False)
    assert not db_path.exists()
