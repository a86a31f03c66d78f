"""Shared test fixtures for specsamples.

Provides fixture specs, a recording snippet generator, output managers that
capture diagnostics, and an isolated environment for config and CLI tests.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Sequence

import pytest
import yaml

from specsamples.models import Snippet
from specsamples.output import OutputManager
from specsamples.snippets.base import SnippetGenerator


FIXTURES_DIR = Path(__file__).parent / "fixtures"


class RecordingGenerator(SnippetGenerator):
    """Deterministic generator that records every call.

    Produces ``{title: target, content: "<target> <METHOD> <path>"}`` per
    target, so tests can predict exactly what the engine writes.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[str, ...]]] = []

    @property
    def name(self) -> str:
        return "recording"

    def generate(
        self,
        document: dict[str, Any],
        path: str,
        method: str,
        targets: Sequence[str],
    ) -> list[Snippet]:
        self.calls.append((path, method, tuple(targets)))
        return [
            Snippet(target=t, title=t, content=f"{t} {method.upper()} {path}")
            for t in targets
        ]


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from fixture files)
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_30_raw() -> dict[str, Any]:
    """Load raw petstore 3.0 spec dict."""
    with open(FIXTURES_DIR / "petstore_3.0.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_20_raw() -> dict[str, Any]:
    """Load raw petstore Swagger 2.0 spec dict."""
    with open(FIXTURES_DIR / "petstore_2.0.yaml") as f:
        return yaml.safe_load(f)


@pytest.fixture
def minimal_spec() -> dict[str, Any]:
    """The smallest document the engine accepts: one path, one operation."""
    return {"paths": {"/pets": {"get": {}}}}


# ---------------------------------------------------------------------------
# Generator and output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def recording_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def captured_output() -> tuple[OutputManager, io.StringIO]:
    """A verbose, colourless OutputManager writing into a StringIO buffer."""
    buffer = io.StringIO()
    return OutputManager(no_color=True, verbose=True, stream=buffer), buffer


@pytest.fixture
def quiet_output() -> OutputManager:
    """An OutputManager for tests that don't care about diagnostics."""
    return OutputManager(no_color=True, quiet=True, stream=io.StringIO())


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME into tmp_path, clears all SPECSAMPLES_* variables,
    disables colour, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("NO_COLOR", "1")
    for var in [
        "SPECSAMPLES_SOURCE",
        "SPECSAMPLES_OUTPUT",
        "SPECSAMPLES_TARGETS",
        "SPECSAMPLES_GENERATOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
