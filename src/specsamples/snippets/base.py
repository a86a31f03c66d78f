"""Abstract base class for snippet generators.

A snippet generator turns one operation of a specification document into one
code snippet per requested target. The enrichment engine treats it as an
opaque collaborator: it only relies on the order and the ``title``/
``content`` of the returned snippets.

Generators are registered as entry points in the ``specsamples.generators``
group and looked up by :func:`~specsamples.snippets.registry.get_generator`.

Example:
    Minimal generator::

        class EchoGenerator(SnippetGenerator):
            @property
            def name(self) -> str:
                return "echo"

            def generate(self, document, path, method, targets):
                return [
                    Snippet(target=t, title=t, content=f"{method.upper()} {path}")
                    for t in targets
                ]
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from specsamples.models import Snippet


class SnippetGenerator(ABC):
    """Base class for all snippet generators."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the generator name used on the command line."""
        ...

    @abstractmethod
    def generate(
        self,
        document: dict[str, Any],
        path: str,
        method: str,
        targets: Sequence[str],
    ) -> list[Snippet]:
        """Generate one snippet per target for ``method`` on ``path``.

        Args:
            document: The whole specification document. Must not be mutated.
            path: Key under ``document["paths"]``.
            method: HTTP method key under the path item.
            targets: Ordered target set.

        Returns:
            Snippets in target order.

        Raises:
            SnippetGenerationError: If the operation cannot be turned into
                a request.
        """
        ...
