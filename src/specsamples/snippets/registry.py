"""Look up snippet generators by name.

The built-in :class:`~specsamples.snippets.generator.TemplateSnippetGenerator`
is registered as ``templates``. Third-party packages can provide their own
generator by declaring an entry point in the ``specsamples.generators``
group in their ``pyproject.toml``::

    [project.entry-points."specsamples.generators"]
    my-generator = "my_package.snippets:MyGenerator"

The entry point must resolve to a :class:`~specsamples.snippets.base.SnippetGenerator`
subclass with a no-argument constructor.
"""

from __future__ import annotations

import importlib.metadata
import logging

from specsamples.exceptions import PluginError
from specsamples.snippets.base import SnippetGenerator
from specsamples.snippets.generator import TemplateSnippetGenerator

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "specsamples.generators"
"""The entry-point group name used for generator discovery."""

BUILTIN_GENERATOR = "templates"


def available_generators() -> list[str]:
    """Return the names of all known generators, built-in first."""
    names = [BUILTIN_GENERATOR]
    for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
        if ep.name not in names:
            names.append(ep.name)
    return names


def get_generator(name: str = BUILTIN_GENERATOR) -> SnippetGenerator:
    """Instantiate the generator registered under *name*.

    Raises:
        PluginError: If no generator has that name, or the entry point
            cannot be loaded or does not produce a ``SnippetGenerator``.
    """
    if name == BUILTIN_GENERATOR:
        return TemplateSnippetGenerator()

    for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
        if ep.name != name:
            continue
        try:
            generator_cls = ep.load()
            generator = generator_cls()
        except Exception as exc:
            raise PluginError(f"Failed to load snippet generator '{name}': {exc}") from exc
        if not isinstance(generator, SnippetGenerator):
            raise PluginError(
                f"Entry point '{name}' does not provide a SnippetGenerator "
                f"(got {type(generator).__name__})"
            )
        logger.debug("Loaded snippet generator %s from %s", name, ep.value)
        return generator

    raise PluginError(
        f"Unknown snippet generator '{name}'. Available: {', '.join(available_generators())}"
    )
