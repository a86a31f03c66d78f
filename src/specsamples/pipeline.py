"""Run one enrichment job end to end.

:func:`run` performs every step of a job in the order that keeps failures
cheap: configuration problems (invalid targets, a non-JSON output name, an
unknown generator) are reported before the source is read, and nothing is
written unless enrichment completed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from specsamples.engine import enrich_document
from specsamples.exceptions import SpecStructureError
from specsamples.models import RunConfig
from specsamples.output import OutputManager
from specsamples.parser import load_document
from specsamples.parser.loader import is_yaml_source
from specsamples.snippets import SnippetGenerator, get_generator
from specsamples.targets import resolve_targets
from specsamples.writer import check_output_name, write_document


def run(
    config: RunConfig,
    output: OutputManager,
    generator: Optional[SnippetGenerator] = None,
) -> Path:
    """Validate, load, enrich, and write according to *config*.

    Args:
        config: The resolved run configuration.
        output: Reporter for all diagnostics.
        generator: Snippet generator override; looked up by
            ``config.generator`` when omitted.

    Returns:
        Path of the written JSON document.

    Raises:
        SpecSamplesError: Any subclass, for every fatal condition.
    """
    targets = resolve_targets(config.targets, output)
    check_output_name(config.output)
    if generator is None:
        generator = get_generator(config.generator)

    if config.source != "-" and is_yaml_source(config.source):
        output.info("Converting YAML file...")
    else:
        output.info("Parsing JSON file...")
    document = load_document(config.source)
    output.success(f"Loaded {config.source}", nest=1)

    output.info(f"Adding samples for {', '.join(targets)}...", nest=1)
    result = enrich_document(document, targets, generator, output)
    if not result.ok:
        assert result.failure is not None
        raise SpecStructureError(result.failure.property_name, result.failure.message)

    path = write_document(result.document, config.output, indent=config.indent)
    report = result.report
    output.success(
        f"Added {report.samples_added} samples to {report.operations} operations "
        f"({report.samples_skipped} skipped) and exported to: {path}",
        nest=2,
    )
    return path
