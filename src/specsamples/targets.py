"""Supported snippet targets and validation of the requested target set.

A *target* names a language and client library pair, e.g. ``shell_curl`` or
``python_requests``. The vocabulary is fixed; a run works on an ordered,
de-duplicated selection from it (the *target set*), validated once before
any document is read.

The literal token ``default`` selects :data:`DEFAULT_TARGETS`, a common
selection across C-family languages, scripting languages, and shell tools.
"""

from __future__ import annotations

from typing import Optional, Sequence

from specsamples.exceptions import InvalidTargetError
from specsamples.output import OutputManager

DEFAULT_SENTINEL = "default"
"""Token that selects the default target set and bypasses validation."""

TARGET_TITLES: dict[str, str] = {
    "c_libcurl": "C + Libcurl",
    "csharp_restsharp": "C# + Restsharp",
    "go_native": "Go + Native",
    "java_okhttp": "Java + Okhttp",
    "java_unirest": "Java + Unirest",
    "javascript_jquery": "JavaScript + Jquery",
    "javascript_xhr": "JavaScript + Xhr",
    "node_native": "Node.js + Native",
    "node_request": "Node.js + Request",
    "node_unirest": "Node.js + Unirest",
    "objc_nsurlsession": "Objective-C + Nsurlsession",
    "ocaml_cohttp": "OCaml + Cohttp",
    "php_curl": "PHP + Curl",
    "php_http1": "PHP + Http1",
    "php_http2": "PHP + Http2",
    "python_python3": "Python + Python3",
    "python_requests": "Python + Requests",
    "ruby_native": "Ruby + Native",
    "shell_curl": "Shell + Curl",
    "shell_httpie": "Shell + Httpie",
    "shell_wget": "Shell + Wget",
    "swift_nsurlsession": "Swift + Nsurlsession",
}
"""Display title for every supported target, keyed by identifier."""

SUPPORTED_TARGETS: tuple[str, ...] = tuple(TARGET_TITLES)

DEFAULT_TARGETS: tuple[str, ...] = (
    "php_curl",
    "javascript_xhr",
    "java_okhttp",
    "python_requests",
    "python_python3",
    "go_native",
    "shell_curl",
)


def is_supported(target: str) -> bool:
    """Return ``True`` if *target* belongs to the supported vocabulary."""
    return target in TARGET_TITLES


def target_title(target: str) -> str:
    """Return the display title for *target* (the identifier itself if unknown)."""
    return TARGET_TITLES.get(target, target)


def resolve_targets(
    requested: Optional[Sequence[str]],
    output: OutputManager,
) -> tuple[str, ...]:
    """Validate *requested* and return the target set for the run.

    * No targets -> :data:`DEFAULT_TARGETS`, with a warning.
    * First token ``default`` -> :data:`DEFAULT_TARGETS`; any further
      tokens are ignored (with a warning) and never validated.
    * Otherwise every token must be supported. Duplicates are dropped,
      keeping the first occurrence.

    Args:
        requested: Target identifiers as given on the command line.
        output: Reporter for progress and warnings.

    Returns:
        The ordered target set.

    Raises:
        InvalidTargetError: On the first identifier outside the vocabulary.
    """
    if not requested:
        output.warning(
            "No targets specified, defaulting to internally specified: "
            + ", ".join(DEFAULT_TARGETS)
        )
        return DEFAULT_TARGETS

    output.info("Validating targets...")
    if requested[0] == DEFAULT_SENTINEL:
        output.success("Default specified, skipping.", nest=1)
        if len(requested) > 1:
            output.warning(
                "Ignoring targets after 'default': " + ", ".join(requested[1:]),
                nest=1,
            )
        return DEFAULT_TARGETS

    for target in requested:
        if not is_supported(target):
            raise InvalidTargetError(target)

    output.success("All specified targets are valid", nest=1)
    return tuple(dict.fromkeys(requested))
