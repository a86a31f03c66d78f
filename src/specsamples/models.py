"""Canonical Pydantic models shared across specsamples modules.

The models fall into three groups:

**Run configuration** -- resolved from CLI flags, environment variables and
the project file: :class:`RunConfig`.

**Enrichment data** -- produced by the snippet generator and the engine:
:class:`Snippet`, :class:`CodeSample`, :class:`EnrichmentReport`, and
:class:`StructuralFailure`.

**Request description** -- the language-neutral HTTP request the built-in
generator renders into each target's template: :class:`HTTPMethod`,
:class:`RequestParameter`, and :class:`HTTPRequest`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional
from urllib.parse import urlencode, urlsplit

from pydantic import BaseModel, ConfigDict, Field


CODE_SAMPLES_KEY = "x-code-samples"
"""Operation field that holds the ordered list of code samples."""


# --- Run config ---


class RunConfig(BaseModel):
    """Effective configuration for one enrichment run.

    Example::

        RunConfig(
            source="openapi.yaml",
            output="final.[contenthash].json",
            targets=["shell_curl", "python_requests"],
        )
    """

    source: str = Field(description="Path to the source spec, or '-' for stdin")
    output: str = Field(
        description="Output file name; may contain the [contenthash] token"
    )
    targets: list[str] = Field(
        default_factory=list,
        description="Requested target identifiers, or ['default']",
    )
    generator: str = Field(
        default="templates", description="Snippet generator name"
    )
    indent: Optional[int] = Field(
        default=None, description="JSON indent for the output; compact when unset"
    )
    verbose: bool = False
    quiet: bool = False
    no_color: bool = False


# --- Enrichment data ---


class Snippet(BaseModel):
    """One generated code snippet for a single target."""

    target: str
    title: str
    content: str


class CodeSample(BaseModel):
    """An entry of an operation's ``x-code-samples`` array."""

    model_config = ConfigDict(frozen=True)

    lang: str
    source: str

    @classmethod
    def from_snippet(cls, snippet: Snippet) -> CodeSample:
        return cls(lang=snippet.title, source=snippet.content)


class EnrichmentReport(BaseModel):
    """Counters collected while enriching one document."""

    operations: int = 0
    fields_added: int = 0
    fields_skipped: int = 0
    samples_added: int = 0
    samples_skipped: int = 0


class StructuralFailure(BaseModel):
    """A document shape problem that makes enrichment impossible."""

    property_name: str
    message: str


# --- Request description ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods that may appear as operation keys of a path item."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class RequestParameter(BaseModel):
    """A name/value pair sent as a query parameter, header, cookie, or form field."""

    name: str
    value: str


class HTTPRequest(BaseModel):
    """A concrete example request for one operation.

    ``url`` is the full URL including the query string; ``base_url`` and
    ``path`` are kept separately for templates that build the URL
    themselves (e.g. OCaml's ``Uri``).
    """

    method: str
    base_url: str
    path: str
    query: list[RequestParameter] = Field(default_factory=list)
    headers: list[RequestParameter] = Field(default_factory=list)
    cookies: list[RequestParameter] = Field(default_factory=list)
    content_type: Optional[str] = None
    body: Any = None
    form: list[RequestParameter] = Field(default_factory=list)

    @property
    def query_string(self) -> str:
        return urlencode([(p.name, p.value) for p in self.query])

    @property
    def endpoint(self) -> str:
        """Full URL without the query string."""
        return f"{self.base_url.rstrip('/')}{self.path}"

    @property
    def url(self) -> str:
        qs = self.query_string
        return f"{self.endpoint}?{qs}" if qs else self.endpoint

    @property
    def scheme(self) -> str:
        return urlsplit(self.base_url).scheme or "http"

    @property
    def host(self) -> str:
        return urlsplit(self.base_url).netloc

    @property
    def hostname(self) -> str:
        return urlsplit(self.base_url).hostname or ""

    @property
    def port(self) -> Optional[int]:
        return urlsplit(self.base_url).port

    @property
    def request_target(self) -> str:
        """Path and query string as sent on the request line."""
        parts = urlsplit(self.url)
        return f"{parts.path or '/'}?{parts.query}" if parts.query else parts.path or "/"

    @property
    def has_body(self) -> bool:
        return self.body is not None or bool(self.form)
