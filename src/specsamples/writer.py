"""Name and write the enriched document.

Output is always JSON. The output name may contain the ``[contenthash]``
token, replaced by a fingerprint of the enriched document so that published
specs can be cached forever under a content-addressed name::

    final.[contenthash].json  ->  final.5f1c0e...9a2b.json

The fingerprint is the SHA-1 of the compact JSON serialisation with keys in
document order. Identical documents always produce the same fingerprint;
the same content with keys in a different order produces a different one.

Writes are atomic (temp file + rename in the target directory) so a crash
during serialisation never leaves a truncated file behind.
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from datetime import date, time
from pathlib import Path
from typing import Any, Optional

from specsamples.exceptions import OutputFormatError, OutputWriteError

CONTENT_HASH_TOKEN = "[contenthash]"


def json_default(value: Any) -> str:
    """``json.dumps`` fallback: ISO 8601 for YAML timestamps, ``str()`` otherwise."""
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def check_output_name(name: str) -> None:
    """Reject output names that do not denote a JSON file.

    Raises:
        OutputFormatError: If *name* does not end in ``.json``.
    """
    if Path(name).suffix.lower() != ".json":
        raise OutputFormatError(
            f"Only JSON format is supported for output (got '{name}')."
        )


def fingerprint(document: Any) -> str:
    """Return the order-sensitive SHA-1 hex digest of *document*."""
    payload = json.dumps(
        document, ensure_ascii=False, separators=(",", ":"), default=json_default
    )
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def render_output_path(template: str, document: Any) -> Path:
    """Substitute the ``[contenthash]`` token in *template*, if present."""
    if CONTENT_HASH_TOKEN in template:
        template = template.replace(CONTENT_HASH_TOKEN, fingerprint(document))
    return Path(template)


def serialize(document: Any, indent: Optional[int] = None) -> str:
    """Serialise *document* to JSON text (compact unless *indent* is set)."""
    if indent is None:
        return json.dumps(
            document, ensure_ascii=False, separators=(",", ":"), default=json_default
        )
    text = json.dumps(document, ensure_ascii=False, indent=indent, default=json_default)
    return text + "\n"


def write_document(
    document: Any,
    template: str,
    indent: Optional[int] = None,
) -> Path:
    """Serialise *document* and write it atomically to the rendered output path.

    Args:
        document: The enriched document.
        template: Output file name, optionally containing ``[contenthash]``.
        indent: JSON indentation; compact output when ``None``.

    Returns:
        The path that was written.

    Raises:
        OutputFormatError: If the name does not denote JSON.
        OutputWriteError: If the file cannot be written.
    """
    check_output_name(template)
    path = render_output_path(template, document)
    try:
        atomic_write(path, serialize(document, indent))
    except OSError as exc:
        raise OutputWriteError(f"Failed to write {path}: {exc}") from exc
    return path


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* so readers only ever see the old or the new file.

    The enriched JSON is staged in a hidden ``.<name>.*.tmp`` sibling, synced,
    then renamed over *path*. A half-written document therefore never appears
    under the rendered output name, and an existing file is kept intact when the
    write fails. The staging file is removed on failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    staging = None
    staging_name: Optional[str] = None
    try:
        staging = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        staging_name = staging.name
        staging.write(data)
        staging.flush()
        os.fsync(staging.fileno())
        staging.close()
        staging = None
        os.replace(staging_name, path)
    except BaseException:
        if staging is not None:
            staging.close()
        if staging_name is not None and os.path.exists(staging_name):
            os.unlink(staging_name)
        raise
