"""
Tests that enforce coding standards.

Import conventions:
- No 'from X import Y' outside __init__.py (except __future__).
- Third-party and stdlib modules are imported as 'import x as _x'.
- litekv modules are imported as 'import litekv.x as x'.

Modules that import logging get their logger from getLogger(__name__).
"""

import ast as _ast
import pathlib as _pathlib

import pytest as _pytest

SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "litekv"
TESTS_DIR = _pathlib.Path(__file__).parent


def _python_files(directory: _pathlib.Path) -> list[_pathlib.Path]:
    return sorted(directory.rglob("*.py"))


def _from_imports(tree: _ast.Module) -> list[tuple[int, str]]:
    """
    Find 'from X import Y' statements outside TYPE_CHECKING blocks.

    Returns list of (line_number, module) tuples.
    """
    skipped: set[int] = set()
    for node in _ast.walk(tree):
        if isinstance(node, _ast.If) and "TYPE_CHECKING" in _ast.unparse(node.test):
            for child in node.body:
                for inner in _ast.walk(child):
                    skipped.add(id(inner))

    found: list[tuple[int, str]] = []
    for node in _ast.walk(tree):
        if not isinstance(node, _ast.ImportFrom) or id(node) in skipped:
            continue
        if node.module == "__future__":
            continue
        found.append((node.lineno, node.module or "."))
    return found


def _badly_aliased_imports(tree: _ast.Module) -> list[tuple[int, str]]:
    """Find plain imports that do not follow the aliasing convention."""
    found: list[tuple[int, str]] = []
    for node in tree.body:
        if not isinstance(node, _ast.Import):
            continue
        for alias in node.names:
            if alias.name == "litekv":
                continue
            if alias.name.startswith("litekv."):
                expected = alias.name.rsplit(".", 1)[-1]
                if alias.asname != expected:
                    found.append((node.lineno, alias.name))
            elif alias.asname is None or not alias.asname.startswith("_"):
                found.append((node.lineno, alias.name))
    return found


def _parse(path: _pathlib.Path) -> _ast.Module:
    return _ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def _fail(title: str, violations: list[str], hint: str) -> None:
    msg = f"{title}:\n" + "\n".join(f"  {v}" for v in violations) + f"\n\n{hint}"
    _pytest.fail(msg)


class TestImportStyle:
    """Tests for import style compliance."""

    @_pytest.mark.parametrize("directory", [SRC_DIR, TESTS_DIR], ids=["src", "tests"])
    def test_no_from_imports(self, directory: _pathlib.Path) -> None:
        """Modules should not use the 'from X import Y' pattern."""
        violations = [
            f"{path}:{line}: from {module} import ..."
            for path in _python_files(directory)
            if path.name != "__init__.py"
            for line, module in _from_imports(_parse(path))
        ]
        if violations:
            _fail(
                "Found forbidden 'from X import Y' imports",
                violations,
                "Use 'import X as _x' (external) or 'import litekv.x as x' (internal).",
            )

    def test_src_import_aliases(self) -> None:
        """Source modules alias imports the same way everywhere."""
        violations = [
            f"{path}:{line}: import {name}"
            for path in _python_files(SRC_DIR)
            if path.name != "__init__.py"
            for line, name in _badly_aliased_imports(_parse(path))
        ]
        if violations:
            _fail(
                "Found imports without the expected alias",
                violations,
                "External modules: 'import x as _x'. litekv modules: 'import litekv.a.b as b'.",
            )


class TestLoggers:
    """Module loggers are named after the module."""

    def test_module_loggers(self) -> None:
        violations: list[str] = []
        for path in _python_files(SRC_DIR):
            source = path.read_text(encoding="utf-8")
            if "import logging as _logging" not in source:
                continue
            if "_logger = _logging.getLogger(__name__)" not in source and "getLogger(" in source:
                violations.append(str(path))
        if violations:
            _fail(
                "Found loggers not named after their module",
                violations,
                "Use '_logger = _logging.getLogger(__name__)'.",
            )


class TestCheckers:
    """Tests for the checkers themselves."""

    def test_detects_from_import(self) -> None:
        tree = _ast.parse("from pathlib import Path")
        assert _from_imports(tree) == [(1, "pathlib")]

    def test_allows_future_imports(self) -> None:
        tree = _ast.parse("from __future__ import annotations")
        assert _from_imports(tree) == []

    def test_ignores_type_checking_block(self) -> None:
        tree = _ast.parse(
            "import typing as _typing\n"
            "\n"
            "if _typing.TYPE_CHECKING:\n"
            "    from some_module import SomeType\n"
            "\n"
            "from forbidden import Other\n"
        )
        assert _from_imports(tree) == [(6, "forbidden")]

    def test_alias_rules(self) -> None:
        tree = _ast.parse(
            "import os as _os\n"
            "import json\n"
            "import litekv.codec as codec\n"
            "import litekv.paths as p\n"
        )
        assert _badly_aliased_imports(tree) == [(2, "json"), (4, "litekv.paths")]
