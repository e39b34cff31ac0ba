"""
Shared pytest fixtures for litekv tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import litekv.config as config
import litekv.store as store
import litekv.value_store as value_store

# =============================================================================
# Environment isolation
# =============================================================================


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """Return environment dict with all LITEKV_* keys removed."""
    return {k: v for k, v in _os.environ.items() if not k.startswith("LITEKV_")}


@_pytest.fixture
def isolated_config(
    tmp_path: _pathlib.Path,
    clean_env: dict[str, str],
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Iterator[_pathlib.Path]:
    """
    Isolate configuration from the real user and project config.

    Points LITEKV_CONFIG_DIR at an empty temp directory and changes into a
    temp project directory (containing .litekv/). Yields the project root.
    """
    user_dir = tmp_path / "user-config"
    user_dir.mkdir()
    project = tmp_path / "project"
    (project / ".litekv").mkdir(parents=True)

    env = dict(clean_env)
    env["LITEKV_CONFIG_DIR"] = str(user_dir)
    monkeypatch.chdir(project)
    with _mock.patch.dict(_os.environ, env, clear=True):
        yield project


@_pytest.fixture
def clean_settings(isolated_config: _pathlib.Path) -> config.Settings:  # noqa: ARG001
    """Settings built from built-in defaults only."""
    return config.Settings.construct_without_dotenv()


# =============================================================================
# Tables
# =============================================================================


@_pytest.fixture
def memory_store() -> store.MemoryStore:
    """An empty in-memory row store."""
    return store.MemoryStore("data")


@_pytest.fixture
def sqlite_store(tmp_path: _pathlib.Path) -> _typing.Iterator[store.SQLiteStore]:
    """An SQLite row store in a temp file, closed after the test."""
    row_store = store.SQLiteStore(tmp_path / "test.sqlite", "data")
    yield row_store
    row_store.close()


@_pytest.fixture(params=["memory", "sqlite"])
def row_store(request: _pytest.FixtureRequest) -> store.Store:
    """Each row store implementation in turn."""
    if request.param == "memory":
        return _typing.cast(store.Store, request.getfixturevalue("memory_store"))
    return _typing.cast(store.Store, request.getfixturevalue("sqlite_store"))


@_pytest.fixture
def table(row_store: store.Store) -> value_store.ValueStore:
    """A ValueStore without a default, over each row store."""
    return value_store.ValueStore(row_store)


@_pytest.fixture
def make_table(row_store: store.Store) -> _typing.Callable[..., value_store.ValueStore]:
    """Factory for ValueStores with custom options over the same row store."""

    def _make(**kwargs: _typing.Any) -> value_store.ValueStore:
        return value_store.ValueStore(row_store, **kwargs)

    return _make
