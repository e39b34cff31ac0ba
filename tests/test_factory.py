"""Tests for opening tables from configuration."""

import pathlib as _pathlib

import pytest as _pytest

import litekv
import litekv.config as config
import litekv.errors as errors
import litekv.factory as factory
import litekv.store as store


class TestOpenTable:
    """open_table() wiring."""

    def test_uses_configured_defaults(self, clean_settings: config.Settings) -> None:
        with factory.open_table(settings=clean_settings) as table:
            assert table.name == "data"
            assert isinstance(table.row_store, store.SQLiteStore)
            assert table.row_store.path == "litekv.sqlite"

    def test_db_path_override(
        self, clean_settings: config.Settings, tmp_path: _pathlib.Path
    ) -> None:
        db = tmp_path / "other.sqlite"
        with factory.open_table("users", settings=clean_settings, db_path=db) as table:
            table.set("a", 1)
        assert db.exists()

    def test_table_defaults_applied(
        self, clean_settings: config.Settings, tmp_path: _pathlib.Path
    ) -> None:
        settings = clean_settings.model_copy(
            update={"tables": {"users": config.TableConfig(auto_ensure={"coins": 0})}}
        )
        with factory.open_table("users", settings=settings, db_path=tmp_path / "kv.sqlite") as t:
            assert t.auto_ensure == {"coins": 0}
            assert t.inc("alice", "coins") == 1
            assert t.get("alice") == {"coins": 1}

    def test_autonum_settings_applied(
        self, clean_settings: config.Settings, tmp_path: _pathlib.Path
    ) -> None:
        settings = clean_settings.model_copy(
            update={"autonum": config.AutonumConfig(length=16, max_attempts=5)}
        )
        with factory.open_table(settings=settings, db_path=tmp_path / "kv.sqlite") as table:
            assert len(table.autonum()) == 16

    def test_values_persist_between_opens(
        self, clean_settings: config.Settings, tmp_path: _pathlib.Path
    ) -> None:
        db = tmp_path / "kv.sqlite"
        with factory.open_table(settings=clean_settings, db_path=db) as table:
            table.set("u", "bob", "profile.name")
        with factory.open_table(settings=clean_settings, db_path=db) as table:
            assert table.get("u") == {"profile": {"name": "bob"}}

    def test_invalid_table_name(
        self, clean_settings: config.Settings, tmp_path: _pathlib.Path
    ) -> None:
        with _pytest.raises(errors.InvalidTableNameError):
            factory.open_table("no spaces", settings=clean_settings, db_path=tmp_path / "kv.db")

    def test_loads_settings_when_not_given(self, isolated_config: _pathlib.Path) -> None:
        with factory.open_table() as table:
            table.set("k", "v")
        assert (isolated_config / "litekv.sqlite").exists()


class TestOpenMemoryTable:
    """open_memory_table() for throwaway tables."""

    def test_memory_table(self) -> None:
        table = factory.open_memory_table("scratch", auto_ensure={"n": 0})
        assert table.name == "scratch"
        assert table.inc("k", "n") == 1

    def test_exported_from_package(self) -> None:
        table = litekv.open_memory_table()
        table.set("k", [1])
        assert table.includes("k", 1)
