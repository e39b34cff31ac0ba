"""Section models for litekv settings.

Each YAML section maps to one model:

    database.*        DatabaseConfig
    tables.<name>.*   TableConfig
    autonum.*         AutonumConfig
    logging.*         LoggingConfig

Unknown keys are kept (extra="allow") so a misspelled option can be
reported instead of silently ignored.
"""

import re as _re
import typing as _typing

import pydantic as _pydantic

import litekv.codec as codec
import litekv.constants as constants

# =============================================================================
# Base class
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """Config section that remembers keys it does not define."""

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Keys given for this section that it does not define."""
        return dict(self.model_extra or {})

    def collect_all_extra_fields(self, prefix: str = "") -> dict[str, _typing.Any]:
        """
        Unknown keys of this section as dotted paths under prefix.

        Example:
            >>> AutonumConfig(lenght=12).collect_all_extra_fields("autonum")
            {'autonum.lenght': 12}
        """
        return {
            ".".join(filter(None, (prefix, key))): value
            for key, value in self.get_extra_fields().items()
        }


# =============================================================================
# Database Settings
# =============================================================================


class DatabaseConfig(ConfigBase):
    """
    Database file settings.

    YAML section: database.*
    """

    path: str = constants.DEFAULT_DB_PATH
    """Database file. Relative paths resolve against the working directory."""

    journal_mode: _typing.Literal["wal", "delete", "truncate", "persist", "memory", "off"] = (
        constants.DEFAULT_JOURNAL_MODE
    )
    """SQLite journal mode."""

    default_table: str = constants.DEFAULT_TABLE
    """Table used when none is named."""

    @_pydantic.field_validator("default_table")
    @classmethod
    def _check_table_name(cls, value: str) -> str:
        if not _re.fullmatch(constants.TABLE_NAME_PATTERN, value):
            raise ValueError(f"invalid table name: {value!r}")
        return value


# =============================================================================
# Table Settings
# =============================================================================


class TableConfig(ConfigBase):
    """
    Per-table settings.

    YAML section: tables.<name>.*

    Example:
        tables:
          users:
            auto_ensure:
              coins: 0
              inventory: []
    """

    auto_ensure: _typing.Any = None
    """Default merged under every record created or ensured. None = no default."""

    @_pydantic.field_validator("auto_ensure")
    @classmethod
    def _check_encodable(cls, value: _typing.Any) -> _typing.Any:
        # EncodeError is a ValueError, which pydantic reports as a validation error
        codec.encode(value)
        return value


# =============================================================================
# Autonum Settings
# =============================================================================


class AutonumConfig(ConfigBase):
    """
    Settings for generated keys.

    YAML section: autonum.*
    """

    length: int = _pydantic.Field(default=constants.DEFAULT_AUTONUM_LENGTH, ge=4, le=64)
    """Characters per generated key."""

    max_attempts: int = _pydantic.Field(default=constants.DEFAULT_AUTONUM_MAX_ATTEMPTS, ge=1)
    """Collisions tolerated before giving up."""


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["debug", "info", "warning", "error"] = "warning"
    """Log level for the litekv command line tool."""
