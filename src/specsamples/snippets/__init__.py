"""Snippet generation -- turn one operation into code for each target.

* :mod:`~specsamples.snippets.base` -- the :class:`SnippetGenerator`
  interface the enrichment engine calls.
* :mod:`~specsamples.snippets.request` -- builds a language-neutral
  example request from an operation.
* :mod:`~specsamples.snippets.generator` -- the built-in Jinja2 generator
  with one template per target.
* :mod:`~specsamples.snippets.registry` -- name and entry-point lookup.
"""

from specsamples.snippets.base import SnippetGenerator
from specsamples.snippets.generator import TemplateSnippetGenerator
from specsamples.snippets.registry import get_generator

__all__ = ["SnippetGenerator", "TemplateSnippetGenerator", "get_generator"]
