"""protostream CLI entrypoint.

Command-line host for protocol addresses: every command takes addresses of
the form protocol://path, splits them and runs them through the dispatcher
built from the merged configuration.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import click
import tomli_w

from protostream.core.operation_errors import format_error_message
from protostream.domain.exceptions import ProtostreamError
from protostream.version import __version__

if TYPE_CHECKING:
    from protostream.core.host import StreamHost
    from protostream.domain.config import ProtostreamConfig
    from protostream.domain.entities import OperationResult

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ProtostreamCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise ProtostreamCliError(
            "Protocol 'assets' is read-only",
            hint="Set writable = true in the [protocols.assets] table",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    ProtostreamCliError propagates unchanged; domain errors and invalid
    input are converted to ProtostreamCliError; anything else is reported
    as unexpected, with a traceback in verbose mode.

    Args:
        command_name: Name of the command for error messages.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (ProtostreamCliError, click.exceptions.Exit, click.Abort):
                raise
            except ProtostreamError as e:
                raise ProtostreamCliError(e.message, hint=e.hint) from e
            except ValueError as e:
                raise ProtostreamCliError(
                    str(e),
                    hint="Addresses look like protocol://relative/path",
                ) from e
            except OSError as e:
                raise ProtostreamCliError(format_error_message(e, command_name)) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise ProtostreamCliError(
                    format_error_message(e, command_name),
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _load_config(ctx: click.Context) -> ProtostreamConfig:
    """Load the merged configuration once per invocation."""
    if "config" not in ctx.obj:
        from protostream.adapters.factory import ConfigFactory

        config_path = ctx.obj.get("config_path")
        # Only the implicit ./protostream.toml may be absent
        if config_path is not None and not config_path.exists():
            raise ProtostreamCliError(
                f"Config file not found: {config_path}",
                hint="Create it with 'protostream config init' or check the --config path",
            )
        config = ConfigFactory().load(config_path)
        if not ctx.obj.get("verbose", False):
            logging.getLogger().setLevel(config.logging.numeric_level)
        ctx.obj["config"] = config
    return ctx.obj["config"]


def _get_host(ctx: click.Context) -> StreamHost:
    """Create the address host over the configured protocols."""
    if "host" not in ctx.obj:
        from protostream.adapters.factory import DispatcherFactory

        ctx.obj["host"] = DispatcherFactory(_load_config(ctx)).create_host()
    return ctx.obj["host"]


def _require(result: OperationResult) -> OperationResult:
    """Turn a failed operation result into a CLI error."""
    if not result:
        raise ProtostreamCliError(result.error or "Operation failed", hint=result.hint)
    return result


def _done(ctx: click.Context, message: str) -> None:
    if not ctx.obj.get("quiet", False):
        click.echo(message)


@click.group()
@click.version_option(version=__version__, prog_name="protostream")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ./protostream.toml).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool, quiet: bool) -> None:
    """protostream - sandboxed virtual protocols over local directories.

    Address files as protocol://path; paths never leave the roots the
    protocol is configured with.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


@cli.command()
@click.pass_context
@handle_cli_errors("protocols")
def protocols(ctx: click.Context) -> None:
    """List the configured protocols."""
    registry = _get_host(ctx).dispatcher.registry
    descriptors = registry.descriptors()
    if not descriptors:
        _done(ctx, "No protocols configured.")
        return
    for descriptor in descriptors:
        mode = "rw" if descriptor.writable else "ro"
        click.echo(f"{descriptor.name}\t{mode}\t{', '.join(descriptor.roots)}")


@cli.command(name="ls")
@click.argument("address")
@click.option("--all", "-a", "show_all", is_flag=True, help="Include '.' and '..'.")
@click.option(
    "--raw",
    is_flag=True,
    help="Keep the filesystem enumeration order instead of sorting.",
)
@click.pass_context
@handle_cli_errors("ls")
def list_command(ctx: click.Context, address: str, show_all: bool, raw: bool) -> None:
    """List the entries of a directory address."""
    host = _get_host(ctx)
    if raw:
        with _require(host.opendir(address)).value as session:
            entries = list(session)
    else:
        entries = _require(host.scandir(address)).value

    for entry in entries:
        if show_all or entry not in (".", ".."):
            click.echo(entry)


@cli.command()
@click.argument("address")
@click.pass_context
@handle_cli_errors("cat")
def cat(ctx: click.Context, address: str) -> None:
    """Print the contents of a file address."""
    data = _require(_get_host(ctx).file_get_contents(address)).value
    stdout = click.get_binary_stream("stdout")
    stdout.write(data)
    stdout.flush()


@cli.command()
@click.argument("address")
@click.option(
    "--input",
    "-i",
    "source",
    type=click.File("rb"),
    default="-",
    help="Read contents from FILE instead of stdin.",
)
@click.pass_context
@handle_cli_errors("write")
def write(ctx: click.Context, address: str, source) -> None:
    """Write stdin (or --input FILE) to a file address."""
    written = _require(_get_host(ctx).file_put_contents(address, source.read())).value
    _done(ctx, f"{written} bytes written to {address}")


@cli.command()
@click.argument("address")
@click.option("--parents", "-p", is_flag=True, help="Create missing parent directories.")
@click.pass_context
@handle_cli_errors("mkdir")
def mkdir(ctx: click.Context, address: str, parents: bool) -> None:
    """Create a directory."""
    _require(_get_host(ctx).mkdir(address, recursive=parents))
    _done(ctx, f"Created {address}")


@cli.command()
@click.argument("address")
@click.pass_context
@handle_cli_errors("rmdir")
def rmdir(ctx: click.Context, address: str) -> None:
    """Remove an empty directory."""
    _require(_get_host(ctx).rmdir(address))
    _done(ctx, f"Removed {address}")


@cli.command()
@click.argument("address")
@click.pass_context
@handle_cli_errors("touch")
def touch(ctx: click.Context, address: str) -> None:
    """Create an empty file or update its modification time."""
    _require(_get_host(ctx).touch(address))
    _done(ctx, f"Touched {address}")


@cli.command(name="rm")
@click.argument("address")
@click.pass_context
@handle_cli_errors("rm")
def remove(ctx: click.Context, address: str) -> None:
    """Remove a file."""
    _require(_get_host(ctx).unlink(address))
    _done(ctx, f"Removed {address}")


@cli.command(name="mv")
@click.argument("source")
@click.argument("target")
@click.pass_context
@handle_cli_errors("mv")
def move(ctx: click.Context, source: str, target: str) -> None:
    """Rename SOURCE to TARGET (both addresses)."""
    _require(_get_host(ctx).rename(source, target))
    _done(ctx, f"Renamed {source} -> {target}")


@cli.command()
@click.argument("address")
@click.pass_context
@handle_cli_errors("stat")
def stat(ctx: click.Context, address: str) -> None:
    """Show size, type and modification time of an entry."""
    entry = _require(_get_host(ctx).stat(address)).value
    kind = "directory" if entry.is_dir else "file" if entry.is_file else "other"
    modified = datetime.fromtimestamp(entry.mtime).isoformat(timespec="seconds")
    click.echo(f"address:  {address}")
    click.echo(f"type:     {kind}")
    click.echo(f"size:     {entry.size}")
    click.echo(f"modified: {modified}")


@cli.group()
def config() -> None:
    """Manage protostream configuration."""


@config.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Show config file locations and the effective configuration."""
    from protostream.shared.config_io import (
        config_to_data,
        get_global_config_path,
        get_local_config_path,
    )

    global_path = get_global_config_path()
    local_path = ctx.obj.get("config_path") or get_local_config_path()
    for label, path in (("Global config", global_path), ("Local config", local_path)):
        status = "" if path.exists() else " (not found)"
        click.echo(f"# {label}: {path}{status}")
    click.echo()
    click.echo(tomli_w.dumps(config_to_data(_load_config(ctx))), nl=False)


@config.command(name="init")
@click.argument(
    "path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
    default=None,
)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory the example protocols expose (default: ./data).",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file.")
@click.pass_context
@handle_cli_errors("config init")
def config_init(
    ctx: click.Context, path: Path | None, root: Path | None, force: bool
) -> None:
    """Create a starter config file (default: ./protostream.toml)."""
    from protostream.shared.config_io import (
        create_default_config_file,
        get_local_config_path,
    )

    path = path or ctx.obj.get("config_path") or get_local_config_path()
    if path.exists() and not force:
        raise ProtostreamCliError(
            f"Config file already exists: {path}",
            hint="Use --force to overwrite it",
        )
    create_default_config_file(path, root=root.resolve() if root else None)
    _done(ctx, f"Created {path}")


def main() -> None:
    """Run the CLI."""
    cli()


if __name__ == "__main__":
    main()
