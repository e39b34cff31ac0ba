"""
litekv - JSON documents in a SQLite key-value table.

Stores arbitrary JSON values under string keys, with dotted-path access into
nested objects, defaults merged under existing records, list helpers and
arithmetic on stored numbers.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("litekv")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from litekv.errors import (  # noqa: E402
    DivisionByZeroError,
    EncodeError,
    ExhaustedRandomSpaceError,
    InvalidOperationError,
    InvalidTableNameError,
    LitekvError,
    NotNumericError,
    NotSequenceError,
    PathTypeMismatchError,
    StorageError,
)
from litekv.factory import open_memory_table, open_table  # noqa: E402
from litekv.store import MemoryStore, SQLiteStore  # noqa: E402
from litekv.value_store import ValueStore  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "DivisionByZeroError",
    "EncodeError",
    "ExhaustedRandomSpaceError",
    "InvalidOperationError",
    "InvalidTableNameError",
    "LitekvError",
    "MemoryStore",
    "NotNumericError",
    "NotSequenceError",
    "PathTypeMismatchError",
    "SQLiteStore",
    "StorageError",
    "ValueStore",
    "open_memory_table",
    "open_table",
]
