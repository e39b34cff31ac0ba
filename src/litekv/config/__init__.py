"""
Configuration module for litekv.

Uses pydantic-settings for environment variable loading.
"""

from litekv.config.settings import Settings, find_project_root
from litekv.config.sources import ConfigFileError
from litekv.config.types import AutonumConfig, DatabaseConfig, LoggingConfig, TableConfig

__all__ = [
    "AutonumConfig",
    "ConfigFileError",
    "DatabaseConfig",
    "LoggingConfig",
    "Settings",
    "TableConfig",
    "find_project_root",
]
