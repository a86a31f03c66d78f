"""Build a concrete example HTTP request for one operation.

:func:`build_request` reads an operation of an OpenAPI 2.0 or 3.x document
and produces an :class:`~specsamples.models.HTTPRequest` with every
placeholder filled in, ready to be rendered by a target template:

* **Base URL** -- v3: the first ``servers`` entry of the operation, the path
  item, or the document (server variables replaced by their defaults);
  v2: ``schemes[0]://host`` + ``basePath``. Relative or missing servers fall
  back to ``http://localhost``.
* **Parameters** -- path-level parameters merged with operation-level ones
  (the operation wins on the same ``name`` and ``in``). Path parameters are
  substituted into the path; query, header, and cookie parameters are
  collected in declaration order.
* **Body** -- v3 ``requestBody`` (JSON media types preferred) or v2 ``in:
  body``/``formData`` parameters. Form media types produce form fields.
* **Security** -- the first security requirement of the operation (or the
  document) adds placeholder credentials.

Values come from ``example``, then ``examples``, ``schema.example``,
``schema.default``, the first ``enum`` entry, and finally a
``SOME_<TYPE>_VALUE`` placeholder. Bodies without an example are synthesised
from their schema.
"""

from __future__ import annotations

import json
import re
from datetime import date, time
from typing import Any, Optional
from urllib.parse import quote

from specsamples.exceptions import SnippetGenerationError, SpecParseError
from specsamples.models import HTTPRequest, RequestParameter
from specsamples.parser.resolver import resolve_node
from specsamples.writer import json_default

DEFAULT_BASE_URL = "http://localhost"

_FORM_MEDIA_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
_MAX_SCHEMA_DEPTH = 8


def build_request(document: dict[str, Any], path: str, method: str) -> HTTPRequest:
    """Describe an example request for ``method`` on ``path``.

    Args:
        document: The specification document. It is read, never mutated.
        path: Key under ``document["paths"]``.
        method: HTTP method key under the path item.

    Returns:
        The populated :class:`~specsamples.models.HTTPRequest`.

    Raises:
        SnippetGenerationError: If the path or operation does not exist, is
            not a mapping, or contains an unresolvable ``$ref``.
    """
    paths = document.get("paths")
    path_item = paths.get(path) if isinstance(paths, dict) else None
    if not isinstance(path_item, dict):
        raise SnippetGenerationError(f"Path '{path}' not found in specification")
    operation = path_item.get(method)
    if not isinstance(operation, dict):
        raise SnippetGenerationError(
            f"Operation {method.upper()} {path} not found in specification"
        )

    try:
        return _build(document, path, method, path_item, operation)
    except SpecParseError as exc:
        raise SnippetGenerationError(
            f"Cannot build request for {method.upper()} {path}: {exc}"
        ) from exc


def _build(
    document: dict[str, Any],
    path: str,
    method: str,
    path_item: dict[str, Any],
    operation: dict[str, Any],
) -> HTTPRequest:
    swagger2 = is_swagger2(document)
    params = merge_parameters(
        _as_list(resolve_node(path_item.get("parameters", []), document)),
        _as_list(resolve_node(operation.get("parameters", []), document)),
    )

    request = HTTPRequest(
        method=method.upper(),
        base_url=(
            _swagger2_base_url(document, operation)
            if swagger2
            else _openapi3_base_url(document, path_item, operation)
        ),
        path=path,
    )

    for param in params:
        location = param.get("in")
        name = str(param.get("name", ""))
        if location == "path":
            value = quote(parameter_value(param), safe="")
            request.path = request.path.replace("{" + name + "}", value)
        elif location == "query":
            request.query.append(RequestParameter(name=name, value=parameter_value(param)))
        elif location == "header":
            request.headers.append(RequestParameter(name=name, value=parameter_value(param)))
        elif location == "cookie":
            request.cookies.append(RequestParameter(name=name, value=parameter_value(param)))
        elif location == "body" and swagger2:
            request.content_type = _first_consumes(document, operation, "application/json")
            request.body = _body_example(param.get("schema"), param)
        elif location == "formData" and swagger2:
            request.content_type = _first_consumes(
                document, operation, "application/x-www-form-urlencoded"
            )
            request.form.append(RequestParameter(name=name, value=parameter_value(param)))

    if not swagger2 and "requestBody" in operation:
        _apply_request_body(request, resolve_node(operation["requestBody"], document))

    _apply_security(request, document, operation, swagger2)

    if request.has_body and request.content_type:
        request.headers.append(
            RequestParameter(name="Content-Type", value=request.content_type)
        )
    return request


def is_swagger2(document: dict[str, Any]) -> bool:
    """Return ``True`` for Swagger/OpenAPI 2.0 documents."""
    return str(document.get("swagger", "")).startswith("2")


def merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    ``name`` and ``in``.
    """
    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_params}
    merged = [p for p in path_params if (p.get("name", ""), p.get("in", "")) not in op_keys]
    merged.extend(op_params)
    return merged


def parameter_value(param: dict[str, Any]) -> str:
    """Return an example value for a parameter, rendered as a string."""
    schema = param.get("schema") if isinstance(param.get("schema"), dict) else param
    value = _pick_example(param)
    if value is None:
        value = _pick_example(schema)
    if value is None:
        return placeholder(_schema_type(schema))
    return _stringify(value)


def placeholder(schema_type: str) -> str:
    """Return the ``SOME_<TYPE>_VALUE`` placeholder for *schema_type*."""
    return f"SOME_{schema_type.upper()}_VALUE"


def example_from_schema(schema: Any, depth: int = 0) -> Any:
    """Synthesise an example value from a (resolved) JSON Schema.

    Objects recurse into ``properties``, arrays produce a single item,
    ``allOf`` members are merged, and ``oneOf``/``anyOf`` use their first
    member. Unresolved (circular) references and overly deep schemas yield
    an empty object.
    """
    if not isinstance(schema, dict) or "$ref" in schema or depth > _MAX_SCHEMA_DEPTH:
        return {}

    picked = _pick_example(schema)
    if picked is not None:
        return picked

    if "allOf" in schema:
        merged: dict[str, Any] = {}
        for member in schema["allOf"]:
            value = example_from_schema(member, depth + 1)
            if isinstance(value, dict):
                merged.update(value)
        return merged
    for key in ("oneOf", "anyOf"):
        if schema.get(key):
            return example_from_schema(schema[key][0], depth + 1)

    schema_type = _schema_type(schema)
    if schema_type == "object":
        return {
            name: example_from_schema(prop, depth + 1)
            for name, prop in schema.get("properties", {}).items()
        }
    if schema_type == "array":
        return [example_from_schema(schema.get("items", {}), depth + 1)]
    if schema_type in ("integer", "number"):
        return 0
    if schema_type == "boolean":
        return True
    return placeholder(schema_type)


# ------------------------------------------------------------------ #
# Private helpers
# ------------------------------------------------------------------ #


def _as_list(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _pick_example(obj: Any) -> Any:
    """Return the first explicit example-like value of *obj*, or ``None``.

    YAML timestamps in the picked value come back as ISO 8601 strings.
    """
    return _plain(_first_example(obj))


def _first_example(obj: Any) -> Any:
    if not isinstance(obj, dict):
        return None
    if obj.get("example") is not None:
        return obj["example"]
    examples = obj.get("examples")
    if isinstance(examples, dict) and examples:
        first = next(iter(examples.values()))
        return first.get("value") if isinstance(first, dict) else first
    if isinstance(examples, list) and examples:
        return examples[0]
    if obj.get("default") is not None:
        return obj["default"]
    enum_values = obj.get("enum")
    if isinstance(enum_values, list) and enum_values:
        return enum_values[0]
    return None


def _plain(value: Any) -> Any:
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _schema_type(schema: Any) -> str:
    """Return the schema type, taking the first non-null entry of 3.1 type arrays."""
    if not isinstance(schema, dict):
        return "string"
    type_value = schema.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        type_value = non_null[0] if non_null else None
    if type_value is None:
        return "object" if "properties" in schema else "string"
    return str(type_value)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, list):
        return ",".join(_stringify(item) for item in value)
    return json.dumps(value, ensure_ascii=False, default=json_default)


def _openapi3_base_url(
    document: dict[str, Any],
    path_item: dict[str, Any],
    operation: dict[str, Any],
) -> str:
    for owner in (operation, path_item, document):
        servers = owner.get("servers")
        if isinstance(servers, list) and servers and isinstance(servers[0], dict):
            return _server_url(servers[0])
    return DEFAULT_BASE_URL


def _server_url(server: dict[str, Any]) -> str:
    url = str(server.get("url") or "/")
    variables = server.get("variables") or {}

    def _substitute(match: re.Match[str]) -> str:
        variable = variables.get(match.group(1))
        if isinstance(variable, dict) and variable.get("default") is not None:
            return str(variable["default"])
        return match.group(0)

    url = re.sub(r"\{([^}]+)\}", _substitute, url)
    if url.startswith("//"):
        return "http:" + url
    if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", url):
        return DEFAULT_BASE_URL + "/" + url.lstrip("/")
    return url


def _swagger2_base_url(document: dict[str, Any], operation: dict[str, Any]) -> str:
    schemes = operation.get("schemes") or document.get("schemes") or ["http"]
    host = document.get("host") or "localhost"
    base_path = document.get("basePath") or ""
    return f"{schemes[0]}://{host}{base_path}".rstrip("/")


def _first_consumes(document: dict[str, Any], operation: dict[str, Any], default: str) -> str:
    consumes = operation.get("consumes") or document.get("consumes") or []
    if default in _FORM_MEDIA_TYPES:
        for media_type in consumes:
            if media_type in _FORM_MEDIA_TYPES:
                return media_type
        return default
    return consumes[0] if consumes else default


def _body_example(schema: Any, holder: Optional[dict[str, Any]] = None) -> Any:
    picked = _pick_example(holder) if holder is not None else None
    if picked is not None:
        return picked
    return example_from_schema(schema)


def _pick_media_type(content: dict[str, Any]) -> Optional[str]:
    if not content:
        return None
    for media_type in content:
        if media_type == "application/json":
            return media_type
    for media_type in content:
        if "json" in media_type:
            return media_type
    return next(iter(content))


def _apply_request_body(request: HTTPRequest, request_body: Any) -> None:
    if not isinstance(request_body, dict):
        return
    content = request_body.get("content")
    if not isinstance(content, dict):
        return
    media_type = _pick_media_type(content)
    if media_type is None:
        return

    media = content[media_type] if isinstance(content[media_type], dict) else {}
    body = _body_example(media.get("schema"), media)
    request.content_type = media_type

    if media_type in _FORM_MEDIA_TYPES and isinstance(body, dict):
        request.form = [
            RequestParameter(name=str(key), value=_stringify(value))
            for key, value in body.items()
        ]
    else:
        request.body = body


def _apply_security(
    request: HTTPRequest,
    document: dict[str, Any],
    operation: dict[str, Any],
    swagger2: bool,
) -> None:
    requirements = operation.get("security")
    if requirements is None:
        requirements = document.get("security")
    if not isinstance(requirements, list) or not requirements:
        return
    requirement = requirements[0]
    if not isinstance(requirement, dict):
        return

    if swagger2:
        schemes = document.get("securityDefinitions") or {}
    else:
        schemes = (document.get("components") or {}).get("securitySchemes") or {}
    schemes = resolve_node(schemes, document)

    for scheme_name in requirement:
        scheme = schemes.get(scheme_name)
        if not isinstance(scheme, dict):
            continue
        scheme_type = scheme.get("type")
        if scheme_type == "apiKey":
            param = RequestParameter(name=str(scheme.get("name", scheme_name)), value="REPLACE_KEY_VALUE")
            location = scheme.get("in")
            if location == "query":
                request.query.append(param)
            elif location == "cookie":
                request.cookies.append(param)
            else:
                request.headers.append(param)
        elif scheme_type == "basic" or (
            scheme_type == "http" and str(scheme.get("scheme", "")).lower() == "basic"
        ):
            request.headers.append(
                RequestParameter(name="Authorization", value="Basic REPLACE_BASIC_AUTH")
            )
        elif scheme_type in ("http", "oauth2", "openIdConnect"):
            request.headers.append(
                RequestParameter(name="Authorization", value="Bearer REPLACE_BEARER_TOKEN")
            )
