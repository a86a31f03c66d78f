"""Typer application and CLI entry point for specsamples.

The CLI is a single command::

    specsamples SOURCE OUTPUT [TARGETS]... [--verbose]

``SOURCE``, ``OUTPUT``, and ``TARGETS`` may also come from the environment
or ``./specsamples.json`` (see :func:`~specsamples.config.resolve_config`),
which lets CI jobs run ``specsamples`` with no arguments.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the Typer app.
Known errors exit with their ``exit_code``; unhandled exceptions are written
to a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specsamples import __version__
from specsamples.exceptions import InvalidUsageError, OutputFormatError, SpecSamplesError
from specsamples.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE

USAGE = "specsamples <swagger/openapi specification> <output destination> {[targets]} {options}"

app = typer.Typer(
    name="specsamples",
    help="Add generated client code samples (x-code-samples) to OpenAPI specs.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specsamples {__version__}")
        raise typer.Exit()


def _list_targets_callback(value: bool) -> None:
    """Print the supported targets (defaults marked) and exit."""
    if value:
        from specsamples.output import OutputManager
        from specsamples.targets import DEFAULT_TARGETS, TARGET_TITLES

        output = OutputManager()
        for target, title in TARGET_TITLES.items():
            marker = "*" if target in DEFAULT_TARGETS else " "
            output.print_data(f"{marker} {target}\t{title}")
        raise typer.Exit()


@app.command()
def enrich(
    source: Optional[str] = typer.Argument(
        None, help="OpenAPI/Swagger spec (.json, .yaml, .yml) or '-' for stdin."
    ),
    output_path: Optional[str] = typer.Argument(
        None,
        metavar="OUTPUT",
        help="Output JSON file; '[contenthash]' is replaced by a content fingerprint.",
    ),
    targets: Optional[list[str]] = typer.Argument(
        None, help="Targets to generate, or 'default'."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Report every operation and sample."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    indent: Optional[int] = typer.Option(
        None, "--indent", min=0, help="Pretty-print the output JSON."
    ),
    generator: Optional[str] = typer.Option(
        None, "--generator", "-g", help="Snippet generator to use."
    ),
    list_targets: bool = typer.Option(
        False,
        "--list-targets",
        callback=_list_targets_callback,
        is_eager=True,
        help="List supported targets and exit.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Add x-code-samples for every operation of SOURCE and write OUTPUT.

    Targets default to a common selection (see --list-targets, marked with
    '*'). Every fatal condition exits with code 1 and writes nothing.
    """
    from specsamples.config import resolve_config
    from specsamples.output import OutputManager
    from specsamples.pipeline import run

    output = OutputManager(no_color=no_color, quiet=quiet, verbose=verbose)
    if verbose:
        output.info("Switching to verbose logging")

    try:
        config = resolve_config(
            cli_source=source,
            cli_output=output_path,
            cli_targets=targets,
            cli_generator=generator,
            cli_indent=indent,
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
        )
        run(config, output)
    except SpecSamplesError as exc:
        output.error(str(exc))
        if isinstance(exc, (InvalidUsageError, OutputFormatError)):
            output.usage(USAGE)
        raise typer.Exit(code=exc.exit_code) from None


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specsamples.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specsamples`` console script.

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
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        from specsamples.output import OutputManager

        log_path = _write_crash_log(exc)
        OutputManager().error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
