"""Typer application and CLI entry point for specgraph.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``preprocess``, ``inspect``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`specgraph.config`: Option precedence resolution.
    :mod:`specgraph.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from specgraph import __version__
from specgraph.commands.inspect import inspect_app
from specgraph.commands.preprocess import preprocess_command
from specgraph.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specgraph",
    help="Preprocess OpenAPI 3.x specs for GraphQL type generation.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("preprocess")(preprocess_command)
app.add_typer(inspect_app, name="inspect", help="Inspect definitions and security schemes.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specgraph {__version__}")
        raise typer.Exit()


class OutputLogHandler(logging.Handler):
    """Forward log records to the global OutputManager's stderr console."""

    def emit(self, record: logging.LogRecord) -> None:
        from specgraph.output import error, info, warning

        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return

        if record.levelno >= logging.ERROR:
            error(message)
        elif record.levelno >= logging.WARNING:
            warning(message)
        else:
            info(message)


def configure_logging(verbose: bool) -> None:
    """Show records of the ``specgraph`` loggers on stderr.

    ``--verbose`` shows debug records (definition reuse, naming); otherwise
    only warnings such as dropped operations are shown.
    """
    logger = logging.getLogger("specgraph")
    for handler in list(logger.handlers):
        if isinstance(handler, OutputLogHandler):
            logger.removeHandler(handler)
    logger.addHandler(OutputLogHandler())
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
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
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~specgraph.output.OutputManager` and the
    logging configuration from CLI flags.
    """
    from specgraph.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet)
    )
    configure_logging(verbose)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specgraph.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specgraph`` console script.

    Unhandled :class:`~specgraph.exceptions.SpecgraphError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specgraph.exceptions import SpecgraphError
        from specgraph.output import error

        if isinstance(exc, SpecgraphError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
