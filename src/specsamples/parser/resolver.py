"""Resolve internal ``$ref`` pointers in OpenAPI documents.

The snippet generator needs concrete parameter, body, and security scheme
objects, while real documents keep most of them under ``components`` (v3) or
``definitions``/``parameters`` (v2) and point to them with
``{"$ref": "#/..."}``.

:func:`resolve_node` resolves one subtree against the document root and
returns new containers, so the live document the engine is mutating is never
touched. :func:`resolve_refs` does the same for a whole document.

Only internal references (``#/...``) are supported. Circular references are
left unresolved at the cycle point.
"""

from __future__ import annotations

from typing import Any

from specsamples.exceptions import SpecParseError


def resolve_refs(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *document* with every resolvable ``$ref`` inlined.

    Raises:
        SpecParseError: If a ``$ref`` is external or points nowhere.
    """
    return resolve_node(document, document)


def resolve_node(node: Any, root: dict[str, Any]) -> Any:
    """Resolve all ``$ref`` pointers within *node* against *root*.

    Dicts and lists in the result are new objects; scalars are shared.

    Example::

        params = resolve_node(operation.get("parameters", []), document)

    Raises:
        SpecParseError: If a ``$ref`` is external or points nowhere.
    """
    return _deep_resolve(node, root, frozenset())


def _resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Follow a single JSON Pointer reference (RFC 6901) from *root*."""
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
            )

    return current


def _deep_resolve(obj: Any, root: dict[str, Any], seen: frozenset[str]) -> Any:
    """Depth-first walk replacing ``$ref`` dicts with their targets.

    *seen* holds the references on the current resolution stack; each
    branch gets its own copy so sibling references to the same target are
    both resolved.
    """
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str):
            if ref in seen:
                return obj
            target = _resolve_pointer(ref, root)
            return _deep_resolve(target, root, seen | {ref})
        return {key: _deep_resolve(value, root, seen) for key, value in obj.items()}

    if isinstance(obj, list):
        return [_deep_resolve(item, root, seen) for item in obj]

    return obj
