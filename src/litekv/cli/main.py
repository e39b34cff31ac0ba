"""
Main CLI entry point for litekv.

Provides a command-line interface, built with Click, for inspecting and
editing litekv tables. Values on the command line are decoded the same way
stored rows are: `5` is a number, `true` a boolean, `{"a": 1}` a mapping and
anything unparseable a plain string.
"""

import functools as _functools
import json as _json
import logging as _logging
import os as _os
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.logging as _rich_logging
import rich.syntax as _rich_syntax
import yaml as _yaml

import litekv
import litekv.codec as codec
import litekv.config as config
import litekv.config.sources as sources
import litekv.errors as errors
import litekv.factory as factory
import litekv.value_store as value_store

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_F = _typing.TypeVar("_F", bound=_typing.Callable[..., _typing.Any])


def _configure_logging(level: str) -> None:
    """Send log records to stderr through rich at the given level."""
    handler = _rich_logging.RichHandler(
        console=_rich_console.Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    _logging.basicConfig(level=level.upper(), handlers=[handler], format="%(message)s", force=True)


def _handle_errors(func: _F) -> _F:
    """Turn litekv errors into Click errors (message on stderr, exit code 1)."""

    @_functools.wraps(func)
    def wrapper(*args: _typing.Any, **kwargs: _typing.Any) -> _typing.Any:
        try:
            return func(*args, **kwargs)
        except errors.LitekvError as e:
            raise _click.ClickException(str(e)) from e

    return _typing.cast(_F, wrapper)


def _get_table(ctx: _click.Context) -> value_store.ValueStore:
    """Open the selected table once per invocation; closed when the CLI exits."""
    obj = ctx.find_root().obj
    if obj.get("table") is None:
        try:
            table = factory.open_table(
                obj["table_name"],
                settings=obj["settings"],
                db_path=obj["db_path"],
            )
        except errors.LitekvError as e:
            raise _click.ClickException(str(e)) from e
        obj["table"] = ctx.find_root().with_resource(table)
    return _typing.cast(value_store.ValueStore, obj["table"])


def _echo_value(value: _typing.Any) -> None:
    """Print a value as JSON."""
    _click.echo(_json.dumps(value, ensure_ascii=False))


def _should_use_color(cli_flag: bool | None) -> bool:
    """Explicit --color/--no-color wins, then NO_COLOR, then whether stdout is a TTY."""
    if cli_flag is not None:
        return cli_flag
    if _os.environ.get("NO_COLOR") is not None:
        return False
    return _sys.stdout.isatty()


def _print_yaml(data: _typing.Any, *, color: bool) -> None:
    """Print data as YAML, optionally with syntax highlighting."""
    yaml_text = _yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    if color:
        console = _rich_console.Console(force_terminal=True)
        console.print(_rich_syntax.Syntax(yaml_text, "yaml", theme="monokai", background_color="default"))
        return
    _click.echo(yaml_text, nl=False)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(litekv.__version__, "-v", "--version", prog_name="litekv")
@_click.option(
    "--db",
    "db_path",
    type=_click.Path(dir_okay=False),
    default=None,
    help="Database file (default: database.path from config)",
)
@_click.option(
    "--table",
    "table_name",
    type=str,
    default=None,
    help="Table name (default: database.default_table from config)",
)
@_click.option("--verbose", is_flag=True, help="Enable debug logging")
@_click.pass_context
def cli(
    ctx: _click.Context,
    db_path: str | None,
    table_name: str | None,
    verbose: bool,
) -> None:
    """
    litekv - JSON documents in a SQLite key-value table.

    \b
    Examples:
        litekv set alice '{"coins": 10}'
        litekv set alice Alice --path profile.name
        litekv get alice --path profile
        litekv math alice + 5 --path coins
        litekv --table sessions keys
    """
    try:
        settings = config.Settings()
    except (_pydantic.ValidationError, config.ConfigFileError) as e:
        raise _click.ClickException(f"Invalid configuration: {e}") from e

    _configure_logging("debug" if verbose else settings.logging.level)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["db_path"] = db_path
    ctx.obj["table_name"] = table_name
    ctx.obj["table"] = None


# =============================================================================
# Record commands
# =============================================================================


@cli.command()
@_click.argument("key")
@_click.option("--path", "path", default=None, help="Dotted path inside the record")
@_click.pass_context
@_handle_errors
def get(ctx: _click.Context, key: str, path: str | None) -> None:
    """Print the value stored under KEY (null if absent)."""
    _echo_value(_get_table(ctx).get(key, path))


@cli.command(name="set")
@_click.argument("key")
@_click.argument("value")
@_click.option("--path", "path", default=None, help="Dotted path inside the record")
@_click.pass_context
@_handle_errors
def set_cmd(ctx: _click.Context, key: str, value: str, path: str | None) -> None:
    """Store VALUE under KEY and print the full record."""
    _echo_value(_get_table(ctx).set(key, codec.decode(value), path))


@cli.command()
@_click.argument("key")
@_click.pass_context
@_handle_errors
def delete(ctx: _click.Context, key: str) -> None:
    """Delete KEY (no error if it does not exist)."""
    _get_table(ctx).delete(key)


@cli.command()
@_click.argument("key")
@_click.pass_context
@_handle_errors
def has(ctx: _click.Context, key: str) -> None:
    """Print whether KEY exists; exit code 1 if it does not."""
    exists = _get_table(ctx).has(key)
    _echo_value(exists)
    if not exists:
        ctx.exit(1)


@cli.command()
@_click.argument("key")
@_click.pass_context
@_handle_errors
def ensure(ctx: _click.Context, key: str) -> None:
    """Merge the table default under KEY and print the result."""
    _echo_value(_get_table(ctx).ensure(key))


@cli.command()
@_click.argument("key")
@_click.argument("value")
@_click.option("--path", "path", default=None, help="Dotted path inside the record")
@_click.pass_context
@_handle_errors
def push(ctx: _click.Context, key: str, value: str, path: str | None) -> None:
    """Append VALUE to the list at KEY and print the list."""
    _echo_value(_get_table(ctx).push(key, codec.decode(value), path))


@cli.command()
@_click.argument("key")
@_click.argument("value")
@_click.option("--path", "path", default=None, help="Dotted path inside the record")
@_click.pass_context
@_handle_errors
def includes(ctx: _click.Context, key: str, value: str, path: str | None) -> None:
    """Print whether the list (or string) at KEY contains VALUE."""
    _echo_value(_get_table(ctx).includes(key, codec.decode(value), path))


# =============================================================================
# Arithmetic commands
# =============================================================================


@cli.command()
@_click.argument("key")
@_click.option("--path", "path", default=None, help="Dotted path inside the record")
@_click.pass_context
@_handle_errors
def inc(ctx: _click.Context, key: str, path: str | None) -> None:
    """Add 1 to the number at KEY and print it."""
    _echo_value(_get_table(ctx).inc(key, path))


@cli.command()
@_click.argument("key")
@_click.option("--path", "path", default=None, help="Dotted path inside the record")
@_click.pass_context
@_handle_errors
def dec(ctx: _click.Context, key: str, path: str | None) -> None:
    """Subtract 1 from the number at KEY and print it."""
    _echo_value(_get_table(ctx).dec(key, path))


@cli.command(name="math")
@_click.argument("key")
@_click.argument("operation", type=_click.Choice(["+", "-", "*", "/", "%", "^"]))
@_click.argument("operand")
@_click.option("--path", "path", default=None, help="Dotted path inside the record")
@_click.pass_context
@_handle_errors
def math_cmd(ctx: _click.Context, key: str, operation: str, operand: str, path: str | None) -> None:
    """Apply OPERATION with OPERAND to the number at KEY and print the result.

    \b
    Examples:
        litekv math score + 5
        litekv math score / 2 --path stats.total
        litekv math score - -- -3     # negative operand after --
    """
    number = codec.parse_number(operand)
    if number is None:
        raise _click.BadParameter(f"not a number: {operand!r}", param_hint="OPERAND")
    _echo_value(_get_table(ctx).math(key, operation, number, path))


# =============================================================================
# Table commands
# =============================================================================


@cli.command()
@_click.pass_context
@_handle_errors
def keys(ctx: _click.Context) -> None:
    """List every key, one per line."""
    for key in _get_table(ctx).key_array():
        _click.echo(key)


@cli.command(name="all")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.pass_context
@_handle_errors
def all_cmd(ctx: _click.Context, as_json: bool, use_color: bool | None) -> None:
    """Print every record (YAML by default)."""
    records = _get_table(ctx).get_all()
    if as_json:
        _click.echo(_json.dumps(records, indent=2, ensure_ascii=False))
    else:
        _print_yaml(records, color=_should_use_color(use_color))


@cli.command()
@_click.pass_context
@_handle_errors
def length(ctx: _click.Context) -> None:
    """Print the number of records."""
    _click.echo(_get_table(ctx).length())


@cli.command(name="random")
@_click.pass_context
@_handle_errors
def random_cmd(ctx: _click.Context) -> None:
    """Print a randomly chosen record (null if the table is empty)."""
    _echo_value(_get_table(ctx).random())


@cli.command()
@_click.pass_context
@_handle_errors
def autonum(ctx: _click.Context) -> None:
    """Print a random key not yet used in the table."""
    _click.echo(_get_table(ctx).autonum())


# =============================================================================
# Config commands
# =============================================================================


@cli.group(name="config")
def config_cmd() -> None:
    """Configuration management commands."""


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option("--section", type=str, default=None, help="Show specific section only")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.pass_context
def config_show(
    ctx: _click.Context,
    as_json: bool,
    section: str | None,
    use_color: bool | None,
) -> None:
    """Show effective configuration from all sources.

    \b
    Examples:
        litekv config show                    # Show all config as YAML
        litekv config show --json             # Show as JSON
        litekv config show --section tables   # One section only
    """
    settings: config.Settings = ctx.find_root().obj["settings"]
    full_config = settings.model_dump(mode="json")

    if section:
        if section not in full_config:
            raise _click.ClickException(f"Unknown section: {section}")
        full_config = {section: full_config[section]}

    if as_json:
        _click.echo(_json.dumps(full_config, indent=2))
    else:
        _print_yaml(full_config, color=_should_use_color(use_color))


@config_cmd.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Also list files that do not exist")
def config_path(show_all: bool) -> None:
    """List config files, highest precedence first."""
    source = sources.LayeredYamlSettingsSource(config.Settings, config.find_project_root())
    for name, path, exists in source.get_layer_paths():
        if exists:
            _click.echo(f"✓ {name}: {path}")
        elif show_all:
            _click.echo(f"✗ {name}: {path} (not found)")


def main() -> None:
    """Console script entry point."""
    cli(prog_name="litekv")


if __name__ == "__main__":
    main()
