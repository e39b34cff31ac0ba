"""YAML configuration layers for litekv settings.

Three files feed the settings, lowest precedence first:

    built-in   src/litekv/config/defaults/config.yaml (must exist)
    user       $LITEKV_CONFIG_DIR/config.yaml, else ~/.config/litekv/config.yaml
    project    <project root>/.litekv/config.yaml

They are deep-merged with litekv.merge before pydantic sees them, so a
project file can change one table default without restating the rest.
Environment variables and constructor arguments sit above all three; that
part is handled by pydantic-settings itself.
"""

import collections.abc as _abc
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import litekv.merge as merge

ENV_CONFIG_DIR = "LITEKV_CONFIG_DIR"

PROJECT_CONFIG_DIR = ".litekv"

CONFIG_FILENAME = "config.yaml"


class ConfigFileError(Exception):
    """A configuration file could not be read or is not a YAML mapping."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


class ConfigLayer(_typing.NamedTuple):
    """One configuration file and whether it must be present."""

    name: str
    path: _pathlib.Path
    required: bool = False


# =============================================================================
# Locations
# =============================================================================


def get_builtin_defaults_path() -> _pathlib.Path:
    """Path of the defaults file shipped inside the package."""
    return _pathlib.Path(__file__).parent / "defaults" / CONFIG_FILENAME


def get_user_config_dir() -> _pathlib.Path:
    """User config directory: $LITEKV_CONFIG_DIR or ~/.config/litekv."""
    override = _os.environ.get(ENV_CONFIG_DIR)
    if override:
        return _pathlib.Path(override)
    return _pathlib.Path.home() / ".config" / "litekv"


def get_user_config_path() -> _pathlib.Path:
    return get_user_config_dir() / CONFIG_FILENAME


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    return project_root / PROJECT_CONFIG_DIR / CONFIG_FILENAME


def load_yaml_mapping(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Read a YAML file that must hold a mapping.

    Returns:
        The mapping, or None for an empty document.

    Raises:
        ConfigFileError: If the file is unreadable, malformed, or holds
            something other than a mapping at the top level.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        document = _yaml.safe_load(text)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if document is None:
        return None
    if not isinstance(document, dict):
        raise ConfigFileError(
            path, f"config must be a YAML mapping (dict), got {type(document).__name__}"
        )
    return document


# =============================================================================
# Settings source
# =============================================================================


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    pydantic-settings source that deep-merges the built-in, user and
    project YAML files.

    Args:
        settings_cls: The Settings class being populated.
        project_root: Directory holding .litekv/, or None to skip the
            project layer.
        user_config_path: Replaces the user config location (tests).
        builtin_config_path: Replaces the bundled defaults (tests).

    Raises:
        ConfigFileError: If the built-in defaults are missing or empty
            (a broken installation), or if any present file is invalid.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
        builtin_config_path: _pathlib.Path | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self._layers = [
            ConfigLayer("built-in", builtin_config_path or get_builtin_defaults_path(), True),
            ConfigLayer("user", user_config_path or get_user_config_path()),
        ]
        if project_root is not None:
            self._layers.append(ConfigLayer("project", get_project_config_path(project_root)))

        self._loaded: list[ConfigLayer] = []
        documents = [self._read_layer(layer) for layer in self._layers]
        self._merged: dict[str, _typing.Any] = merge.merge_layers(documents) or {}

    def _read_layer(self, layer: ConfigLayer) -> dict[str, _typing.Any] | None:
        if not layer.path.exists():
            if layer.required:
                raise ConfigFileError(
                    layer.path, f"{layer.name} defaults not found (possible installation problem)"
                )
            return None

        document = load_yaml_mapping(layer.path)
        if not document:
            if layer.required:
                raise ConfigFileError(
                    layer.path, f"{layer.name} defaults file is empty (possible installation problem)"
                )
            return None

        self._loaded.append(layer)
        return document

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """(name, path) of each file that contributed, highest precedence first."""
        return [(layer.name, layer.path) for layer in reversed(self._loaded)]

    def get_layer_paths(self) -> list[tuple[str, _pathlib.Path, bool]]:
        """(name, path, exists) of every layer, highest precedence first."""
        return [(layer.name, layer.path, layer.path.exists()) for layer in reversed(self._layers)]

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - part of the source interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._merged.get(field_name)
        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        # Unknown keys pass through; Settings keeps them in model_extra
        return merge.merge(self._merged) or {}
