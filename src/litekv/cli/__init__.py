"""
CLI module for litekv.

Provides the command-line interface using Click.
"""

from litekv.cli.main import cli, main

__all__ = ["main", "cli"]
