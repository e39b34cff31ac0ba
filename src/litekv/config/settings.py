"""
litekv settings.

Sources, highest precedence first:

    constructor keyword arguments
    LITEKV_* environment variables (nested with "__")
    the file named by LITEKV_ENV_FILE, if any
    .litekv/config.yaml in the project root
    the user config.yaml
    the bundled defaults

For example:

    LITEKV_DATABASE__PATH=/var/lib/app/data.sqlite
    LITEKV_AUTONUM__LENGTH=12
    LITEKV_LOGGING__LEVEL=debug
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import litekv.config.sources as sources
import litekv.config.types as types

_ROOT_MARKERS = ("pyproject.toml", ".git")


def _env_file() -> str | None:
    """The .env file to read: LITEKV_ENV_FILE when it names an existing file."""
    candidate = _os.environ.get("LITEKV_ENV_FILE")
    if candidate and _pathlib.Path(candidate).is_file():
        return candidate
    return None


def _walk_up(start: _pathlib.Path, markers: _typing.Iterable[str]) -> _pathlib.Path | None:
    names = tuple(markers)
    for directory in (start, *start.parents):
        if any((directory / name).exists() for name in names):
            return directory
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Locate the project a command is run from.

    The nearest directory holding .litekv/ wins; failing that, the nearest
    one with pyproject.toml or .git; failing that, start_path itself.

    Args:
        start_path: Where to start looking. Defaults to the working directory.
    """
    start = (start_path or _pathlib.Path.cwd()).resolve()
    return (
        _walk_up(start, [sources.PROJECT_CONFIG_DIR])
        or _walk_up(start, _ROOT_MARKERS)
        or start
    )


class Settings(_pydantic_settings.BaseSettings):
    """Effective litekv configuration. See the module docstring for sources."""

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="LITEKV_",
        env_file=_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        yaml_settings = sources.LayeredYamlSettingsSource(settings_cls, find_project_root())
        return (init_settings, env_settings, dotenv_settings, yaml_settings, file_secret_settings)

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Build settings while ignoring any .env file."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    version: int = _pydantic.Field(default=1, description="Config schema version")

    # =========================================================================
    # Sections
    # =========================================================================

    database: types.DatabaseConfig = _pydantic.Field(default_factory=types.DatabaseConfig)
    tables: dict[str, types.TableConfig] = _pydantic.Field(default_factory=dict)
    """Per-table options, keyed by table name."""
    autonum: types.AutonumConfig = _pydantic.Field(default_factory=types.AutonumConfig)
    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)

    # =========================================================================
    # Accessors
    # =========================================================================

    def table_config(self, name: str | None = None) -> types.TableConfig:
        """Options for a table (default table if name is None); empty if unconfigured."""
        return self.tables.get(name or self.database.default_table) or types.TableConfig()

    def resolve_db_path(self) -> str:
        """database.path with ~ expanded. ":memory:" passes through unchanged."""
        path = self.database.path
        if path == ":memory:":
            return path
        return str(_pathlib.Path(path).expanduser())

    # =========================================================================
    # Unknown keys
    # =========================================================================

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Top-level keys that are not settings fields."""
        return dict(self.model_extra or {})

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Unknown keys anywhere in the config, by dotted path.

        Catches typos such as {"databse": {...}, "autonum.lenght": 12}.
        """
        found = self.get_extra_fields()
        for section in ("database", "autonum", "logging"):
            found.update(getattr(self, section).collect_all_extra_fields(prefix=section))
        for name, table in self.tables.items():
            found.update(table.collect_all_extra_fields(prefix=f"tables.{name}"))
        return found

    def has_extra_fields(self) -> bool:
        return bool(self.collect_all_extra_fields())
