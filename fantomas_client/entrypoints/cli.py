"""fantomas-client CLI entrypoint.

Command-line host for the formatting service: formats F# files through a
cached Fantomas daemon and reports its version and configuration.
"""

from __future__ import annotations

import functools
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from fantomas_client.core.formatting.service import FormattingService

from fantomas_client.core.errors import FantomasCliError, response_error
from fantomas_client.domain.exceptions import FantomasClientError
from fantomas_client.domain.messages import FormatSelectionRange, LineEnding
from fantomas_client.domain.responses import ResponseCode
from fantomas_client.version import __version__

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    FantomasCliError propagates unchanged to use its own formatting; domain
    errors and unexpected exceptions are converted to FantomasCliError.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except FantomasCliError:
                raise
            except FantomasClientError as e:
                raise FantomasCliError(e.message, hint=e.hint) from e
            except (OSError, ValueError) as e:
                raise FantomasCliError(
                    f"{command_name} failed: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _create_service(folder: Path) -> FormattingService:
    """Build a formatting service using the config that applies to a folder.

    Args:
        folder: Folder of the file being processed (for the local override file).

    Returns:
        FormattingService with an empty daemon cache.
    """
    from fantomas_client.adapters.factory import ConfigFactory, ServiceFactory

    config = ConfigFactory().create_config_provider().load(folder)
    return ServiceFactory(config).create_formatting_service()


def _absolute(file: Path) -> Path:
    return file if file.is_absolute() else file.absolute()


@click.group()
@click.version_option(version=__version__, prog_name="fantomas-client")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging).",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """fantomas-client - format F# code through the Fantomas daemon.

    Finds Fantomas (local tool, global tool, or PATH), keeps it running as a
    daemon and sends it formatting requests.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@cli.command(name="format")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--write", "-w", is_flag=True, help="Rewrite the file in place.")
@click.option(
    "--check",
    is_flag=True,
    help="Exit with status 1 if the file would be reformatted.",
)
@click.option(
    "--end-of-line",
    type=click.Choice([e.value for e in LineEnding]),
    default=None,
    help="Line endings of the formatted text (default from config).",
)
@click.pass_context
@handle_cli_errors("format")
def format_file(
    ctx: click.Context,
    file: Path,
    write: bool,
    check: bool,
    end_of_line: str | None,
) -> None:
    """Format FILE and print the result (or rewrite it with --write)."""
    if write and check:
        raise FantomasCliError("--write and --check cannot be combined")

    quiet = ctx.obj.get("quiet", False)
    path = _absolute(file)
    source = path.read_text(encoding="utf-8")

    with _create_service(path.parent) as service:
        response = service.format_document(
            str(path),
            source,
            LineEnding(end_of_line) if end_of_line else None,
        )

    if response.code is ResponseCode.FORMATTED:
        if check:
            raise FantomasCliError(f"{path} would be reformatted")
        if write:
            path.write_text(response.content or "", encoding="utf-8")
            if not quiet:
                click.echo(f"✓ Formatted {path}", err=True)
            return
        click.echo(response.content, nl=False)
        return

    if response.code in (ResponseCode.UNCHANGED, ResponseCode.IGNORED):
        if write or check:
            if not quiet:
                state = "unchanged" if response.code is ResponseCode.UNCHANGED else "ignored"
                click.echo(f"✓ {path} is {state}", err=True)
            return
        click.echo(source, nl=False)
        return

    response_error(response)


@cli.command(name="format-selection")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("start_line", type=int)
@click.argument("start_column", type=int)
@click.argument("end_line", type=int)
@click.argument("end_column", type=int)
@handle_cli_errors("format-selection")
def format_selection(
    file: Path,
    start_line: int,
    start_column: int,
    end_line: int,
    end_column: int,
) -> None:
    """Format a range of FILE and print the formatted fragment."""
    selection = FormatSelectionRange(start_line, start_column, end_line, end_column)
    path = _absolute(file)
    source = path.read_text(encoding="utf-8")

    with _create_service(path.parent) as service:
        response = service.format_selection(str(path), source, selection)

    if response.code is ResponseCode.FORMATTED:
        click.echo(response.content, nl=False)
        return
    response_error(response)


@cli.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@handle_cli_errors("version")
def version(file: Path) -> None:
    """Print the Fantomas version that serves FILE's folder."""
    path = _absolute(file)
    with _create_service(path.parent) as service:
        response = service.get_version(str(path))

    if response.code is ResponseCode.VERSION:
        click.echo(response.content)
        return
    response_error(response)


@cli.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@handle_cli_errors("configuration")
def configuration(file: Path) -> None:
    """Print the configuration description reported by the daemon for FILE."""
    path = _absolute(file)
    with _create_service(path.parent) as service:
        response = service.get_configuration(str(path))

    if response.code is ResponseCode.CONFIGURATION:
        click.echo(response.content)
        return
    response_error(response)


# Config management commands
@cli.group()
def config() -> None:
    """Manage fantomas-client configuration files."""
    pass


@config.command(name="init")
@click.option("--global", "-g", "global_", is_flag=True, help="Write the global config file.")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file.")
@handle_cli_errors("config init")
def config_init(global_: bool, force: bool) -> None:
    """Write a config file with default values."""
    from fantomas_client.domain.config import ClientConfig
    from fantomas_client.shared.config_io import (
        get_global_config_path,
        get_local_config_path,
        save_config,
    )

    path = get_global_config_path() if global_ else get_local_config_path(Path.cwd())
    if path.exists() and not force:
        raise FantomasCliError(
            f"Config file already exists: {path}",
            hint="Use --force to overwrite it",
        )
    save_config(ClientConfig.default(), path)
    click.echo(f"✓ Wrote {path}")


@config.command(name="path")
@handle_cli_errors("config path")
def config_path() -> None:
    """Print config file paths for use in scripts."""
    from fantomas_client.shared.config_io import get_global_config_path, get_local_config_path

    click.echo(f"global:{get_global_config_path()}")
    click.echo(f"local:{get_local_config_path(Path.cwd())}")


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
