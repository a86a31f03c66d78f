"""Add generated code samples to every operation of an OpenAPI document.

:func:`enrich_document` walks ``paths`` in document order and, for each HTTP
method under each path, asks the snippet generator for one snippet per
target and merges them into the operation's ``x-code-samples`` array.

**Merge rule:** the merge is positional. The snippet at index ``i`` of the
generator output is written to ``x-code-samples[i]`` only when that slot is
empty; an occupied slot is left untouched whatever it contains, even a
sample for another language. Existing arrays are never cleared or
reordered. Running the engine again on its own output with the same target
set is therefore a no-op, while changing the order or size of the target set
shifts new samples by position instead of merging them by language.

Structural problems (no ``paths`` mapping, an ``x-code-samples`` value that
is not a list) are detected before anything is mutated and returned as a
:class:`~specsamples.models.StructuralFailure` on the result rather than
raised. Generator failures propagate.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

from specsamples.models import (
    CODE_SAMPLES_KEY,
    CodeSample,
    EnrichmentReport,
    HTTPMethod,
    Snippet,
    StructuralFailure,
)
from specsamples.output import OutputManager
from specsamples.snippets.base import SnippetGenerator

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


@dataclass
class OperationRecord:
    """One operation of the document, addressed by path and method.

    ``operation`` is the live mapping inside the document; all writes to
    ``x-code-samples`` go through this record.
    """

    path: str
    method: str
    operation: MutableMapping[str, Any]

    @property
    def has_samples_field(self) -> bool:
        return self.operation.get(CODE_SAMPLES_KEY) is not None

    @property
    def samples(self) -> list[Any]:
        return self.operation[CODE_SAMPLES_KEY]

    def ensure_samples_field(self) -> bool:
        """Create an empty ``x-code-samples`` list if missing.

        Returns:
            ``True`` if the field was added, ``False`` if it already existed.
        """
        if self.has_samples_field:
            return False
        self.operation[CODE_SAMPLES_KEY] = []
        return True

    def is_occupied(self, index: int) -> bool:
        samples = self.samples
        return index < len(samples) and samples[index] is not None

    def place_sample(self, index: int, sample: CodeSample) -> bool:
        """Write *sample* at *index* unless the slot is occupied.

        Slots between the current end and *index* are padded with ``None``.

        Returns:
            ``True`` if the sample was written.
        """
        if self.is_occupied(index):
            return False
        samples = self.samples
        while len(samples) < index:
            samples.append(None)
        entry = sample.model_dump()
        if index < len(samples):
            samples[index] = entry
        else:
            samples.append(entry)
        return True


@dataclass
class EnrichmentResult:
    """Outcome of :func:`enrich_document`.

    Exactly one of ``document`` and ``failure`` is set.
    """

    document: Optional[dict[str, Any]] = None
    failure: Optional[StructuralFailure] = None
    report: EnrichmentReport = field(default_factory=EnrichmentReport)

    @property
    def ok(self) -> bool:
        return self.failure is None


def iter_operations(document: Mapping[str, Any]) -> Iterator[OperationRecord]:
    """Yield an :class:`OperationRecord` per HTTP method, in document order.

    Path items that are not mappings, and path-item keys that are not HTTP
    methods (``parameters``, ``servers``, ``x-*`` ...), are skipped.
    """
    for path, path_item in document["paths"].items():
        if not isinstance(path_item, MutableMapping):
            continue
        for method, operation in path_item.items():
            if not isinstance(method, str) or method.lower() not in _HTTP_METHODS:
                continue
            if not isinstance(operation, MutableMapping):
                continue
            yield OperationRecord(path=path, method=method, operation=operation)


def check_structure(document: Any) -> Optional[StructuralFailure]:
    """Return the first structural problem of *document*, or ``None``."""
    if not isinstance(document, Mapping) or "paths" not in document:
        return StructuralFailure(
            property_name="paths",
            message="Specification is missing required property 'paths'",
        )
    if not isinstance(document["paths"], Mapping):
        return StructuralFailure(
            property_name="paths",
            message="Specification property 'paths' must be a mapping",
        )
    for record in iter_operations(document):
        value = record.operation.get(CODE_SAMPLES_KEY)
        if value is not None and not isinstance(value, list):
            return StructuralFailure(
                property_name=CODE_SAMPLES_KEY,
                message=(
                    f"'{CODE_SAMPLES_KEY}' of {record.method.upper()} {record.path} "
                    f"must be a list (got {type(value).__name__})"
                ),
            )
    return None


def enrich_document(
    document: dict[str, Any],
    targets: Sequence[str],
    generator: SnippetGenerator,
    output: OutputManager,
) -> EnrichmentResult:
    """Merge generated samples into every operation of *document* in place.

    Args:
        document: The loaded specification document (mutated in place).
        targets: Validated, ordered target set.
        generator: Produces one snippet per target for an operation.
        output: Reporter for progress notices and skip warnings.

    Returns:
        An :class:`EnrichmentResult` holding the mutated document and a
        report, or a structural failure with the document left untouched.

    Raises:
        SnippetGenerationError: If the generator rejects an operation.
    """
    failure = check_structure(document)
    if failure is not None:
        return EnrichmentResult(failure=failure)

    report = EnrichmentReport()
    for record in iter_operations(document):
        report.operations += 1
        snippets = generator.generate(document, record.path, record.method, targets)
        _merge_snippets(record, snippets, report, output)

    return EnrichmentResult(document=document, report=report)


def _merge_snippets(
    record: OperationRecord,
    snippets: Sequence[Snippet],
    report: EnrichmentReport,
    output: OutputManager,
) -> None:
    output.info(
        f"Checking existence of '{CODE_SAMPLES_KEY}' field in {record.path} path...",
        detail=True,
    )
    if record.ensure_samples_field():
        report.fields_added += 1
        output.success(f"Added '{CODE_SAMPLES_KEY}' field.", nest=1, detail=True)
    else:
        report.fields_skipped += 1
        output.warning(
            f"'{CODE_SAMPLES_KEY}' field already exists, skipping.", nest=1, detail=True
        )

    for index, snippet in enumerate(snippets):
        output.info(f"Checking existence of '{snippet.title}' field...", nest=1, detail=True)
        if record.place_sample(index, CodeSample.from_snippet(snippet)):
            report.samples_added += 1
            output.success(f"Added '{snippet.title}' field.", nest=2, detail=True)
        else:
            report.samples_skipped += 1
            output.warning(
                f"Field '{snippet.title}' already exists in '{record.path}' path, skipping.",
                nest=2,
            )
