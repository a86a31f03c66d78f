"""OpenAPI document loading and ``$ref`` resolution.

* :mod:`~specsamples.parser.loader` -- reads a document from a file or
  stdin, choosing YAML or JSON by file extension.
* :mod:`~specsamples.parser.resolver` -- resolves internal ``$ref``
  pointers for the parts of an operation the snippet generator reads.
"""

from specsamples.parser.loader import load_document
from specsamples.parser.resolver import resolve_node, resolve_refs

__all__ = ["load_document", "resolve_node", "resolve_refs"]
