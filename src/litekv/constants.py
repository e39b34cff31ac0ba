"""
Shared constants for litekv.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Database defaults
DEFAULT_DB_PATH = "litekv.sqlite"
"""Default database file, relative to the working directory."""

DEFAULT_TABLE = "data"
"""Default table name when none is given."""

DEFAULT_JOURNAL_MODE = "wal"
"""Default SQLite journal mode."""

# Key generation defaults
DEFAULT_AUTONUM_LENGTH = 9
"""Length of generated keys from autonum()."""

DEFAULT_AUTONUM_MAX_ATTEMPTS = 100
"""Collisions tolerated by autonum() before giving up."""

# Paths
PATH_SEPARATOR = "."
"""Separator between segments of a nested field path."""

TABLE_NAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]{0,63}$"
"""Allowed table identifiers.

Table names are interpolated into SQL statements, so only plain
identifiers are accepted.
"""
