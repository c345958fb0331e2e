"""Typer application and CLI entry point for directorctl.

This module builds the top-level Typer application, registers the
built-in sub-commands (``info``, ``get``, ``profile``) and provides
:func:`main`, the console-script entry point declared in
``pyproject.toml``.

:func:`main` installs a SIGINT handler, invokes the Typer app, maps
:class:`~directorctl.exceptions.DirectorError` to its exit code and writes
a crash log under the data directory for anything unexpected.

See Also:
    :mod:`directorctl.config`: Profile and global configuration resolution.
    :mod:`directorctl.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from directorctl import __version__
from directorctl.commands.profile import profile_app
from directorctl.commands.request import get_command, info_command
from directorctl.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="directorctl",
    help="Query a director management API with automatic auth negotiation.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("info")(info_command)
app.command("get")(get_command)
app.add_typer(profile_app, name="profile", help="Director profile management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"directorctl {__version__}")
        raise typer.Exit()


_verbose_handler: Optional[logging.Handler] = None
"""Stderr handler installed by ``--verbose``; replaced on every invocation."""


def _configure_logging(verbose: bool) -> None:
    """Send ``directorctl`` library logs to stderr at DEBUG level when *verbose*."""
    global _verbose_handler
    log = logging.getLogger("directorctl")
    if _verbose_handler is not None:
        log.removeHandler(_verbose_handler)
        _verbose_handler = None
    if not verbose:
        log.setLevel(logging.WARNING)
        return

    log.setLevel(logging.DEBUG)
    _verbose_handler = logging.StreamHandler(sys.stderr)
    _verbose_handler.setFormatter(logging.Formatter("[debug] %(name)s: %(message)s"))
    log.addHandler(_verbose_handler)


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
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help="Override the profile's director address."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~directorctl.output.OutputManager`,
    configures library logging, and stores shared options in ``ctx.obj``.
    """
    from directorctl.config import load_global_config
    from directorctl.exceptions import ConfigError
    from directorctl.output import OutputFormat, OutputManager, error, set_output

    try:
        fmt = OutputFormat(load_global_config().output.format)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["url"] = url
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from directorctl.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``directorctl`` console script.

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
        from directorctl.exceptions import DirectorError
        from directorctl.output import error

        if isinstance(exc, DirectorError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
