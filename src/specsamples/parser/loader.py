"""Load OpenAPI documents from a local file or stdin.

The parser is chosen by file extension: ``.yml`` and ``.yaml`` files are
read with PyYAML, everything else is parsed as JSON. No format sniffing is
done for files, so a JSON document saved as ``spec.yaml`` still parses (JSON
is valid YAML) while a YAML document saved as ``spec.json`` is rejected.

Stdin (``-``) has no extension to go by; it is tried as JSON first and then
as YAML.

The single public function is :func:`load_document`. Schema validation is
left to dedicated tools such as ``swagger-cli validate``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import yaml

from specsamples.exceptions import SpecParseError

YAML_SUFFIXES = (".yaml", ".yml")


def load_document(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from a file path or stdin ('-').

    Args:
        source: A file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be read or parsed, or is not
            a mapping at the top level.
    """
    if source == "-":
        return _load_from_stdin()
    return _load_from_file(source)


def is_yaml_source(source: str) -> bool:
    """Return ``True`` if *source* names a YAML file by its extension."""
    return Path(source).suffix.lower() in YAML_SUFFIXES


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin, trying JSON first and YAML second.

    Raises:
        SpecParseError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    try:
        return _parse_json(content, "stdin")
    except SpecParseError as json_error:
        try:
            return _parse_yaml(content, "stdin")
        except SpecParseError as yaml_error:
            raise SpecParseError(
                "Failed to parse stdin as JSON or YAML"
                f"\n  JSON error: {json_error}"
                f"\n  YAML error: {yaml_error}"
            ) from yaml_error


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Args:
        path: Path to the local file.

    Raises:
        SpecParseError: If the file is missing, unreadable, empty, or
            cannot be parsed in the format its extension implies.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    if is_yaml_source(path):
        return _parse_yaml(content, path)
    return _parse_json(content, path)


def _parse_json(content: str, origin: str) -> dict[str, Any]:
    try:
        result = json.loads(content)
    except json.JSONDecodeError as exc:
        raise SpecParseError(f"Invalid JSON in {origin}: {exc}") from exc
    return _require_mapping(result, origin)


def _parse_yaml(content: str, origin: str) -> dict[str, Any]:
    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise SpecParseError(f"Invalid YAML in {origin}: {exc}") from exc
    return _require_mapping(result, origin)


def _require_mapping(result: Any, origin: str) -> dict[str, Any]:
    """Reject documents whose top-level value is not an object."""
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind}) in {origin}")
    return result
