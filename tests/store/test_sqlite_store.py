"""Tests for the SQLite row store."""

import pathlib as _pathlib
import sqlite3 as _sqlite3
import unittest.mock as _mock

import pytest as _pytest

import litekv.errors as errors
import litekv.store as store


class TestValidateTableName:
    """Table names are interpolated into SQL, so only identifiers pass."""

    @_pytest.mark.parametrize("name", ["data", "_private", "Users2", "a" * 64])
    def test_valid(self, name: str) -> None:
        assert store.validate_table_name(name) == name

    @_pytest.mark.parametrize(
        "name",
        ["", "1abc", "my-table", "a b", "users; DROP TABLE x", "data\n", "a" * 65, "tablé"],
    )
    def test_invalid(self, name: str) -> None:
        with _pytest.raises(errors.InvalidTableNameError):
            store.validate_table_name(name)

    def test_invalid_table_is_value_error(self) -> None:
        with _pytest.raises(ValueError):
            store.validate_table_name("x-y")


class TestSQLiteStoreSetup:
    """Opening databases and tables."""

    def test_creates_table_with_two_columns(self, tmp_path: _pathlib.Path) -> None:
        db = tmp_path / "kv.sqlite"
        store.SQLiteStore(db, "things").close()

        conn = _sqlite3.connect(db)
        try:
            columns = [row[1] for row in conn.execute("PRAGMA table_info(things)")]
        finally:
            conn.close()
        assert columns == ["key", "value"]

    def test_uses_wal_by_default(self, tmp_path: _pathlib.Path) -> None:
        db = tmp_path / "kv.sqlite"
        store.SQLiteStore(db).close()

        conn = _sqlite3.connect(db)
        try:
            mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        finally:
            conn.close()
        assert mode == "wal"

    def test_creates_parent_directories(self, tmp_path: _pathlib.Path) -> None:
        db = tmp_path / "nested" / "dir" / "kv.sqlite"
        with store.SQLiteStore(db):
            pass
        assert db.exists()

    def test_data_persists_across_connections(self, tmp_path: _pathlib.Path) -> None:
        db = tmp_path / "kv.sqlite"
        with store.SQLiteStore(db) as first:
            first.put_row("a", "1")
        with store.SQLiteStore(db) as second:
            assert second.get_row("a") == store.Row("a", "1")

    def test_tables_are_independent(self, tmp_path: _pathlib.Path) -> None:
        db = tmp_path / "kv.sqlite"
        with store.SQLiteStore(db, "one") as one, store.SQLiteStore(db, "two") as two:
            one.put_row("a", "1")
            assert two.get_row("a") is None

    def test_in_memory_database(self) -> None:
        with store.SQLiteStore(":memory:") as row_store:
            row_store.put_row("a", "1")
            assert row_store.count_rows() == 1

    def test_invalid_table_name_rejected(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(errors.InvalidTableNameError):
            store.SQLiteStore(tmp_path / "kv.sqlite", "bad name")

    def test_unknown_journal_mode_rejected(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(ValueError, match="journal mode"):
            store.SQLiteStore(tmp_path / "kv.sqlite", journal_mode="fast")

    def test_journal_mode_case_insensitive(self, tmp_path: _pathlib.Path) -> None:
        with store.SQLiteStore(tmp_path / "kv.sqlite", journal_mode="DELETE") as row_store:
            assert row_store.count_rows() == 0


class TestSQLiteStoreFailures:
    """Storage failures surface as StorageError."""

    def test_unopenable_path(self, tmp_path: _pathlib.Path) -> None:
        directory = tmp_path / "a-directory"
        directory.mkdir()
        with _pytest.raises(errors.StorageError):
            store.SQLiteStore(directory)

    def test_connection_closed_when_pragma_fails(self, tmp_path: _pathlib.Path) -> None:
        conn = _mock.MagicMock()
        conn.execute.side_effect = _sqlite3.OperationalError("database is locked")
        with _mock.patch.object(_sqlite3, "connect", return_value=conn):
            with _pytest.raises(errors.StorageError, match="locked"):
                store.SQLiteStore(tmp_path / "kv.sqlite")
        conn.close.assert_called_once_with()

    def test_connection_closed_when_create_fails(self, tmp_path: _pathlib.Path) -> None:
        conn = _mock.MagicMock()
        failure = _sqlite3.OperationalError("disk I/O error")
        with (
            _mock.patch.object(_sqlite3, "connect", return_value=conn),
            _mock.patch.object(store.SQLiteStore, "_init_table", side_effect=failure),
        ):
            with _pytest.raises(errors.StorageError, match="disk I/O"):
                store.SQLiteStore(tmp_path / "kv.sqlite")
        conn.close.assert_called_once_with()

    def test_use_after_close(self, tmp_path: _pathlib.Path) -> None:
        row_store = store.SQLiteStore(tmp_path / "kv.sqlite")
        row_store.close()
        with _pytest.raises(errors.StorageError, match="closed"):
            row_store.get_row("a")

    def test_close_twice(self, tmp_path: _pathlib.Path) -> None:
        row_store = store.SQLiteStore(tmp_path / "kv.sqlite")
        row_store.close()
        row_store.close()

    def test_storage_error_chains_cause(self, tmp_path: _pathlib.Path) -> None:
        db = tmp_path / "kv.sqlite"
        with store.SQLiteStore(db) as row_store:
            conn = _sqlite3.connect(db)
            try:
                conn.execute("DROP TABLE data")
                conn.commit()
            finally:
                conn.close()
            with _pytest.raises(errors.StorageError) as exc_info:
                row_store.get_row("a")
        assert isinstance(exc_info.value.__cause__, _sqlite3.Error)

    def test_repr(self, tmp_path: _pathlib.Path) -> None:
        with store.SQLiteStore(tmp_path / "kv.sqlite", "things") as row_store:
            assert "things" in repr(row_store)
