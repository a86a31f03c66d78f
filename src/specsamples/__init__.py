"""specsamples -- Add generated client code samples to OpenAPI specs.

This package reads an OpenAPI 2.0 or 3.x document, generates an example
request for every operation in a set of target languages, and writes the
samples into each operation's ``x-code-samples`` array (the vendor extension
rendered by ReDoc and similar documentation tools).

Typical workflow::

    specsamples openapi.yaml final.[contenthash].json shell_curl python_requests

Modules:
    app: Typer application and CLI entry point.
    pipeline: One end-to-end run (validate, load, enrich, write).
    engine: Traversal and positional merge of ``x-code-samples``.
    targets: Supported target vocabulary and the default selection.
    snippets: Snippet generator protocol and the built-in Jinja2 generator.
    writer: Output naming, content fingerprint, and atomic writes.
    output: Leveled stderr reporter with verbosity control.
    exceptions: Exception hierarchy with exit-code mapping.
"""

__version__ = "1.0.0"
