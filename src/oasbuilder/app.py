"""Typer application and CLI entry point for oasbuilder.

This module wires together the top-level Typer application and registers the
built-in commands: document lifecycle (``new``, ``import``, ``export``,
``show``, ``validate``, ``reset``) plus the ``path``, ``schema`` and
``config`` groups.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It invokes the Typer app and maps
:class:`~oasbuilder.exceptions.OasBuilderError` to its exit code. Any other
unhandled exception is written to a crash log under the data directory.

See Also:
    :mod:`oasbuilder.config`: Workspace document resolution.
    :mod:`oasbuilder.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import sys
import traceback
from datetime import datetime
from typing import Optional

import typer

from oasbuilder import __version__
from oasbuilder.commands.config import config_app
from oasbuilder.commands.document import (
    export_command,
    import_command,
    new_command,
    reset_command,
    show_command,
)
from oasbuilder.commands.paths import path_app
from oasbuilder.commands.schemas import schema_app
from oasbuilder.commands.validate import validate_command
from oasbuilder.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="oasbuilder",
    help="Build, import, validate and export OpenAPI 3.0 documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("new")(new_command)
app.command("import")(import_command)
app.command("export")(export_command)
app.command("show")(show_command)
app.command("reset")(reset_command)
app.command("validate")(validate_command)
app.add_typer(path_app, name="path", help="Edit paths and operations.")
app.add_typer(schema_app, name="schema", help="Edit component schemas.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"oasbuilder {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route library log records to stderr through Rich when --verbose is set."""
    logger = logging.getLogger("oasbuilder")
    if not verbose:
        return
    from rich.console import Console
    from rich.logging import RichHandler

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(logging.DEBUG)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    document: Optional[str] = typer.Option(
        None, "--document", "-d", help="Workspace document file to edit."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~oasbuilder.output.OutputManager` from
    CLI flags and stores shared options (``document``, ``force``) in the
    Typer context so that sub-commands can read them via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        document: Workspace document override (highest precedence).
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output and library logging.
        force: Skip interactive confirmations.
    """
    from oasbuilder.config import load_global_config
    from oasbuilder.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat(load_global_config().output.format)
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["document"] = document
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from oasbuilder.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``oasbuilder`` console script.

    :class:`~oasbuilder.exceptions.OasBuilderError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from oasbuilder.exceptions import OasBuilderError
        from oasbuilder.output import error

        if isinstance(exc, OasBuilderError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
