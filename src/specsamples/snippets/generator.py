"""Render code snippets from Jinja2 templates, one template per target.

:class:`TemplateSnippetGenerator` builds a single
:class:`~specsamples.models.HTTPRequest` per operation via
:func:`~specsamples.snippets.request.build_request` and renders it through
``templates/<target>.j2`` for every requested target.

Templates receive:

* ``request`` -- the :class:`~specsamples.models.HTTPRequest`.
* ``all_headers`` -- headers plus a ``Cookie`` header when cookies are set.
* ``headers_dict``, ``query_dict``, ``form_dict`` -- the same pairs as
  ordered dicts.
* ``body_text`` -- the body as sent on the wire (JSON text, the raw string,
  or the URL-encoded form), or ``None``.
* ``is_json`` -- whether the content type is a JSON media type.

Filters for string literals: ``json`` (double-quoted, JSON escaping),
``single_quote`` (PHP/Ruby single-quoted), ``shell_quote`` (POSIX shell),
``pyliteral`` (Python literal), ``pretty_json``, and ``php_array``.
"""

from __future__ import annotations

import json
import pprint
import shlex
from pathlib import Path
from typing import Any, Sequence
from urllib.parse import urlencode

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

from specsamples.exceptions import SnippetGenerationError
from specsamples.models import HTTPRequest, RequestParameter, Snippet
from specsamples.snippets.base import SnippetGenerator
from specsamples.snippets.request import build_request
from specsamples.targets import target_title
from specsamples.writer import json_default


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``snippets/templates/``)."""


def _json_literal(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=json_default)


def _pretty_json(value: Any, indent: int = 2) -> str:
    return json.dumps(value, ensure_ascii=False, indent=indent, default=json_default)


def _single_quote(value: Any) -> str:
    text = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


def _python_literal(value: Any) -> str:
    return pprint.pformat(value, sort_dicts=False)


def _php_array(mapping: dict[str, Any]) -> str:
    if not mapping:
        return "[]"
    lines = [f"  {_single_quote(key)} => {_single_quote(value)}," for key, value in mapping.items()]
    return "[\n" + "\n".join(lines) + "\n]"


def create_environment(template_dir: Path = TEMPLATE_DIR) -> Environment:
    """Return the Jinja2 environment used to render snippet templates."""
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
        undefined=StrictUndefined,
    )
    env.filters["json"] = _json_literal
    env.filters["pretty_json"] = _pretty_json
    env.filters["single_quote"] = _single_quote
    env.filters["shell_quote"] = lambda value: shlex.quote(str(value))
    env.filters["pyliteral"] = _python_literal
    env.filters["php_array"] = _php_array
    return env


def template_context(request: HTTPRequest) -> dict[str, Any]:
    """Assemble the variables every snippet template is rendered with."""
    all_headers = list(request.headers)
    if request.cookies:
        cookie = "; ".join(f"{c.name}={c.value}" for c in request.cookies)
        all_headers.append(RequestParameter(name="Cookie", value=cookie))

    if request.form:
        body_text = urlencode([(f.name, f.value) for f in request.form])
    elif request.body is None:
        body_text = None
    elif isinstance(request.body, str):
        body_text = request.body
    else:
        body_text = json.dumps(request.body, ensure_ascii=False, default=json_default)

    return {
        "request": request,
        "all_headers": all_headers,
        "headers_dict": {h.name: h.value for h in all_headers},
        "query_dict": {q.name: q.value for q in request.query},
        "form_dict": {f.name: f.value for f in request.form},
        "body_text": body_text,
        "is_json": "json" in (request.content_type or ""),
    }


class TemplateSnippetGenerator(SnippetGenerator):
    """Built-in generator rendering ``templates/<target>.j2`` per target.

    Args:
        template_dir: Directory holding the ``.j2`` templates. Defaults to
            the templates shipped with the package.
    """

    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        self._env = create_environment(template_dir)

    @property
    def name(self) -> str:
        return "templates"

    def generate(
        self,
        document: dict[str, Any],
        path: str,
        method: str,
        targets: Sequence[str],
    ) -> list[Snippet]:
        request = build_request(document, path, method)
        context = template_context(request)

        snippets: list[Snippet] = []
        for target in targets:
            try:
                template = self._env.get_template(f"{target}.j2")
            except TemplateNotFound as exc:
                raise SnippetGenerationError(f"No template for target '{target}'") from exc
            content = template.render(**context, target=target).strip("\n")
            snippets.append(Snippet(target=target, title=target_title(target), content=content))
        return snippets
