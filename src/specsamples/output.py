"""Leveled diagnostics reporter with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (``--list-targets``). This is what
  downstream tools pipe and parse.
* **stderr** -- all diagnostics (progress, completion, warnings, errors,
  usage hints).
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

Every diagnostic is rendered as a bracketed level badge followed by the
message. A ``nest`` depth draws a small tree in front of the badge so that
per-operation details hang off their parent step::

    [Info] Adding samples for shell_curl...
    |-->[Info] Checking existence of 'x-code-samples' field in /pets path...
    | |-->[Completed] Added 'shell_curl' field.

An :class:`OutputManager` is created once by the CLI and handed explicitly to
the pipeline and the enrichment engine; there is no process-wide instance.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import IO, Optional

from rich.console import Console
from rich.markup import escape


class Level(str, Enum):
    """Diagnostic severity, with the badge text printed for each level."""

    INFO = "Info"
    SUCCESS = "Completed"
    WARNING = "Warning"
    ERROR = "Error!"
    USAGE = "Usage"


_BADGE_STYLES: dict[Level, str] = {
    Level.INFO: "bold white on blue",
    Level.SUCCESS: "bold white on green",
    Level.WARNING: "bold white on yellow",
    Level.ERROR: "bold white on red",
    Level.USAGE: "bold white on magenta",
}


def tree_prefix(nest: int) -> str:
    """Return the tree-drawing prefix for a message at depth *nest*.

    Depth 0 has no prefix, depth 1 is ``|-->``, and every further level adds
    one `` |`` segment.
    """
    if nest <= 0:
        return ""
    return "|" + " |" * (nest - 1) + "-->"


class OutputManager:
    """Central manager for diagnostics.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational, success, and usage messages.
            Warnings and errors are never suppressed.
        verbose: Show *detail* messages (per-operation and per-sample
            progress).
        stream: Diagnostics stream. Defaults to ``sys.stderr``.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        stream: Optional[IO[str]] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._stream = stream if stream is not None else sys.stderr
        self._console = Console(
            file=self._stream,
            no_color=self._no_color,
            stderr=stream is None,
            highlight=False,
            soft_wrap=True,
        )

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str, nest: int = 0, detail: bool = False) -> None:
        """Print an informational message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(Level.INFO, message, nest, detail)

    def success(self, message: str, nest: int = 0, detail: bool = False) -> None:
        """Print a completion message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(Level.SUCCESS, message, nest, detail)

    def warning(self, message: str, nest: int = 0, detail: bool = False) -> None:
        """Print a warning. NOT suppressed by ``--quiet``."""
        self._emit(Level.WARNING, message, nest, detail)

    def error(self, message: str, nest: int = 0) -> None:
        """Print an error. Never suppressed."""
        self._emit(Level.ERROR, message, nest, detail=False)

    def usage(self, message: str, nest: int = 0) -> None:
        """Print a usage hint. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(Level.USAGE, message, nest, detail=False)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _emit(self, level: Level, message: str, nest: int, detail: bool) -> None:
        """Render one diagnostic line, honouring the *detail* flag."""
        if detail and not self._verbose:
            return

        prefix = tree_prefix(nest)
        if self._no_color:
            print(f"{prefix}[{level.value}] {message}", file=self._stream, flush=True)
        else:
            style = _BADGE_STYLES[level]
            self._console.print(
                f"{escape(prefix)}\\[[{style}]{escape(level.value)}[/{style}]] {escape(message)}"
            )


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False
