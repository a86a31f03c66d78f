"""Configuration resolution with XDG paths and precedence rules.

This module handles all configuration for a specsamples run:

* **Directory layout** -- crash logs live under the XDG data directory on
  Linux/BSD and ``~/.specsamples/logs/`` elsewhere. See :func:`get_data_dir`.
* **Project config** -- an optional ``./specsamples.json`` pinning the
  source, output, and targets for a repository, so CI jobs can call
  ``specsamples`` without arguments.
* **Precedence resolution** -- :func:`resolve_config` merges CLI arguments,
  environment variables, the project config, and defaults into the final
  :class:`~specsamples.models.RunConfig`.
"""

from __future__ import annotations

import json
import os
import platform
import re
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from specsamples.exceptions import ConfigError, InvalidUsageError
from specsamples.models import RunConfig

_APP_NAME = "specsamples"
_PROJECT_CONFIG_FILENAME = "specsamples.json"

ENV_SOURCE = "SPECSAMPLES_SOURCE"
ENV_OUTPUT = "SPECSAMPLES_OUTPUT"
ENV_TARGETS = "SPECSAMPLES_TARGETS"
ENV_GENERATOR = "SPECSAMPLES_GENERATOR"

_PROJECT_KEYS = frozenset({"source", "output", "targets", "generator", "indent"})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specsamples/`` (default
    ``~/.local/share/specsamples/``). On macOS/Windows: ``~/.specsamples/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specsamples.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object, or
            contains unknown keys.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    unknown = sorted(set(data) - _PROJECT_KEYS)
    if unknown:
        raise ConfigError(
            f"Invalid project config at {path}: unknown keys {', '.join(unknown)}"
        )
    return data


def _split_targets(value: str) -> list[str]:
    """Split an env-var target list on whitespace and commas."""
    return [token for token in re.split(r"[\s,]+", value) if token]


# --- Precedence resolution ---


def resolve_config(
    cli_source: Optional[str] = None,
    cli_output: Optional[str] = None,
    cli_targets: Optional[Sequence[str]] = None,
    cli_generator: Optional[str] = None,
    cli_indent: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
    no_color: bool = False,
) -> RunConfig:
    """Resolve the run configuration with full precedence chain.

    Precedence (high to low):
        1. CLI arguments and options
        2. Environment variables (``SPECSAMPLES_SOURCE``,
           ``SPECSAMPLES_OUTPUT``, ``SPECSAMPLES_TARGETS``,
           ``SPECSAMPLES_GENERATOR``)
        3. Project config (``./specsamples.json``)
        4. Defaults

    Returns:
        The effective :class:`~specsamples.models.RunConfig`.

    Raises:
        InvalidUsageError: If no source or no output could be resolved.
        ConfigError: If the project config is invalid.
    """
    # 3. Project-local config
    settings: dict[str, Any] = dict(load_project_config() or {})

    # 2. Environment variables
    env_source = os.environ.get(ENV_SOURCE)
    if env_source:
        settings["source"] = env_source
    env_output = os.environ.get(ENV_OUTPUT)
    if env_output:
        settings["output"] = env_output
    env_targets = os.environ.get(ENV_TARGETS)
    if env_targets:
        settings["targets"] = _split_targets(env_targets)
    env_generator = os.environ.get(ENV_GENERATOR)
    if env_generator:
        settings["generator"] = env_generator

    # 1. CLI (highest precedence)
    if cli_source is not None:
        settings["source"] = cli_source
    if cli_output is not None:
        settings["output"] = cli_output
    if cli_targets:
        settings["targets"] = list(cli_targets)
    if cli_generator is not None:
        settings["generator"] = cli_generator
    if cli_indent is not None:
        settings["indent"] = cli_indent

    if not settings.get("source"):
        raise InvalidUsageError("Please pass the OpenAPI specification as argument.")
    if not settings.get("output"):
        raise InvalidUsageError("Please specify an output file.")

    try:
        return RunConfig(
            **settings,
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
