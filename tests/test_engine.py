"""Tests for the enrichment engine (positional x-code-samples merge)."""

from __future__ import annotations

import copy
import io
from typing import Any

import pytest

from specsamples.engine import (
    OperationRecord,
    check_structure,
    enrich_document,
    iter_operations,
)
from specsamples.exceptions import SnippetGenerationError
from specsamples.models import CODE_SAMPLES_KEY, CodeSample, StructuralFailure
from specsamples.output import OutputManager
from specsamples.snippets.base import SnippetGenerator


class _FailingGenerator(SnippetGenerator):
    @property
    def name(self) -> str:
        return "failing"

    def generate(self, document, path, method, targets):
        raise SnippetGenerationError(f"cannot build {method} {path}")


# ---------------------------------------------------------------------------
# Structural checks
# ---------------------------------------------------------------------------


class TestCheckStructure:

    def test_valid_document(self, minimal_spec: dict) -> None:
        assert check_structure(minimal_spec) is None

    def test_missing_paths(self) -> None:
        failure = check_structure({"openapi": "3.0.0"})
        assert isinstance(failure, StructuralFailure)
        assert failure.property_name == "paths"
        assert "paths" in failure.message

    def test_paths_not_a_mapping(self) -> None:
        failure = check_structure({"paths": ["/pets"]})
        assert failure is not None
        assert failure.property_name == "paths"

    def test_non_list_code_samples(self) -> None:
        doc = {"paths": {"/pets": {"get": {CODE_SAMPLES_KEY: "curl"}}}}
        failure = check_structure(doc)
        assert failure is not None
        assert failure.property_name == CODE_SAMPLES_KEY
        assert "GET /pets" in failure.message

    def test_null_code_samples_is_allowed(self) -> None:
        doc = {"paths": {"/pets": {"get": {CODE_SAMPLES_KEY: None}}}}
        assert check_structure(doc) is None


# ---------------------------------------------------------------------------
# Operation traversal
# ---------------------------------------------------------------------------


class TestIterOperations:

    def test_document_order(self, petstore_30_raw: dict) -> None:
        ops = [(r.path, r.method) for r in iter_operations(petstore_30_raw)]
        assert ops == [
            ("/pets", "get"),
            ("/pets", "post"),
            ("/pets/{petId}", "get"),
            ("/pets/{petId}", "delete"),
        ]

    def test_skips_non_method_keys(self) -> None:
        doc = {
            "paths": {
                "/pets": {
                    "summary": "Pets",
                    "parameters": [],
                    "servers": [],
                    "x-internal": {"get": {}},
                    "get": {},
                }
            }
        }
        assert [r.method for r in iter_operations(doc)] == ["get"]

    def test_skips_non_mapping_path_items(self) -> None:
        doc = {"paths": {"/a": None, "/b": "ref", "/c": {"put": {}}}}
        assert [(r.path, r.method) for r in iter_operations(doc)] == [("/c", "put")]

    def test_skips_non_string_keys(self) -> None:
        # YAML 1.1 reads unquoted `on:` and `404:` as bool and int keys.
        doc = {"paths": {"/a": {True: {}, 404: {}, "get": {}, None: {}}}}
        assert [r.method for r in iter_operations(doc)] == ["get"]
        assert check_structure(doc) is None

    def test_all_methods_visited(self) -> None:
        methods = ["get", "put", "post", "delete", "options", "head", "patch", "trace"]
        doc = {"paths": {"/x": {m: {} for m in methods}}}
        assert [r.method for r in iter_operations(doc)] == methods


# ---------------------------------------------------------------------------
# OperationRecord
# ---------------------------------------------------------------------------


class TestOperationRecord:

    def _record(self, operation: dict[str, Any]) -> OperationRecord:
        return OperationRecord(path="/pets", method="get", operation=operation)

    def test_ensure_samples_field_adds_once(self) -> None:
        record = self._record({})
        assert record.ensure_samples_field() is True
        assert record.operation[CODE_SAMPLES_KEY] == []
        assert record.ensure_samples_field() is False

    def test_ensure_samples_field_replaces_null(self) -> None:
        record = self._record({CODE_SAMPLES_KEY: None})
        assert record.ensure_samples_field() is True
        assert record.samples == []

    def test_is_occupied(self) -> None:
        record = self._record({CODE_SAMPLES_KEY: [{"lang": "a", "source": "b"}, None]})
        assert record.is_occupied(0)
        assert not record.is_occupied(1)
        assert not record.is_occupied(2)

    def test_place_sample_pads_with_none(self) -> None:
        record = self._record({CODE_SAMPLES_KEY: []})
        assert record.place_sample(2, CodeSample(lang="Go", source="x"))
        assert record.samples == [None, None, {"lang": "Go", "source": "x"}]

    def test_place_sample_fills_null_slot(self) -> None:
        record = self._record({CODE_SAMPLES_KEY: [None]})
        assert record.place_sample(0, CodeSample(lang="Go", source="x"))
        assert record.samples == [{"lang": "Go", "source": "x"}]

    def test_place_sample_never_overwrites(self) -> None:
        existing = {"lang": "Hand written", "source": "custom"}
        record = self._record({CODE_SAMPLES_KEY: [existing]})
        assert not record.place_sample(0, CodeSample(lang="Go", source="x"))
        assert record.samples == [existing]


# ---------------------------------------------------------------------------
# enrich_document
# ---------------------------------------------------------------------------


class TestEnrichDocument:

    def test_adds_samples_in_target_order(
        self, minimal_spec: dict, recording_generator, quiet_output: OutputManager
    ) -> None:
        result = enrich_document(
            minimal_spec, ["shell_curl", "python_requests"], recording_generator, quiet_output
        )
        assert result.ok
        assert result.document is minimal_spec
        assert minimal_spec["paths"]["/pets"]["get"][CODE_SAMPLES_KEY] == [
            {"lang": "shell_curl", "source": "shell_curl GET /pets"},
            {"lang": "python_requests", "source": "python_requests GET /pets"},
        ]

    def test_report_counters(
        self, petstore_30_raw: dict, recording_generator, quiet_output: OutputManager
    ) -> None:
        result = enrich_document(
            petstore_30_raw, ["shell_curl", "go_native"], recording_generator, quiet_output
        )
        report = result.report
        assert report.operations == 4
        assert report.fields_added == 4
        assert report.fields_skipped == 0
        assert report.samples_added == 8
        assert report.samples_skipped == 0

    def test_generator_called_per_operation(
        self, petstore_30_raw: dict, recording_generator, quiet_output: OutputManager
    ) -> None:
        enrich_document(petstore_30_raw, ["shell_curl"], recording_generator, quiet_output)
        assert recording_generator.calls == [
            ("/pets", "get", ("shell_curl",)),
            ("/pets", "post", ("shell_curl",)),
            ("/pets/{petId}", "get", ("shell_curl",)),
            ("/pets/{petId}", "delete", ("shell_curl",)),
        ]

    def test_idempotent(
        self, petstore_30_raw: dict, recording_generator, quiet_output: OutputManager
    ) -> None:
        targets = ["shell_curl", "python_requests"]
        enrich_document(petstore_30_raw, targets, recording_generator, quiet_output)
        first = copy.deepcopy(petstore_30_raw)

        result = enrich_document(petstore_30_raw, targets, recording_generator, quiet_output)
        assert petstore_30_raw == first
        assert result.report.samples_added == 0
        assert result.report.samples_skipped == 8
        assert result.report.fields_skipped == 4

    def test_positional_conflict_keeps_existing(
        self, recording_generator, quiet_output: OutputManager
    ) -> None:
        existing = {"lang": "Ruby", "source": "Net::HTTP.get(uri)"}
        doc = {"paths": {"/pets": {"get": {CODE_SAMPLES_KEY: [existing]}}}}

        enrich_document(doc, ["shell_curl", "go_native"], recording_generator, quiet_output)

        # Index 0 was taken by a different language; shell_curl is not added.
        assert doc["paths"]["/pets"]["get"][CODE_SAMPLES_KEY] == [
            existing,
            {"lang": "go_native", "source": "go_native GET /pets"},
        ]

    def test_preserves_trailing_samples(
        self, recording_generator, quiet_output: OutputManager
    ) -> None:
        samples = [{"lang": "a", "source": "1"}, {"lang": "b", "source": "2"}]
        doc = {"paths": {"/pets": {"get": {CODE_SAMPLES_KEY: copy.deepcopy(samples)}}}}
        enrich_document(doc, ["shell_curl"], recording_generator, quiet_output)
        assert doc["paths"]["/pets"]["get"][CODE_SAMPLES_KEY] == samples

    def test_other_fields_untouched(
        self, petstore_30_raw: dict, recording_generator, quiet_output: OutputManager
    ) -> None:
        before = copy.deepcopy(petstore_30_raw)
        enrich_document(petstore_30_raw, ["shell_curl"], recording_generator, quiet_output)
        for path, item in petstore_30_raw["paths"].items():
            for method, operation in item.items():
                if method == "parameters":
                    assert operation == before["paths"][path][method]
                    continue
                stripped = {k: v for k, v in operation.items() if k != CODE_SAMPLES_KEY}
                assert stripped == before["paths"][path][method]
        assert petstore_30_raw["components"] == before["components"]

    def test_missing_paths_returns_failure_without_mutation(
        self, recording_generator, quiet_output: OutputManager
    ) -> None:
        doc = {"openapi": "3.0.0", "info": {"title": "x", "version": "1"}}
        before = copy.deepcopy(doc)
        result = enrich_document(doc, ["shell_curl"], recording_generator, quiet_output)
        assert not result.ok
        assert result.document is None
        assert result.failure is not None
        assert result.failure.property_name == "paths"
        assert doc == before
        assert recording_generator.calls == []

    def test_non_list_samples_fails_before_any_mutation(
        self, recording_generator, quiet_output: OutputManager
    ) -> None:
        doc = {
            "paths": {
                "/a": {"get": {}},
                "/b": {"get": {CODE_SAMPLES_KEY: {"lang": "x"}}},
            }
        }
        before = copy.deepcopy(doc)
        result = enrich_document(doc, ["shell_curl"], recording_generator, quiet_output)
        assert not result.ok
        assert result.failure.property_name == CODE_SAMPLES_KEY
        assert doc == before

    def test_generator_error_propagates(self, minimal_spec: dict, quiet_output) -> None:
        with pytest.raises(SnippetGenerationError, match="cannot build get /pets"):
            enrich_document(minimal_spec, ["shell_curl"], _FailingGenerator(), quiet_output)


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


class TestEnrichDiagnostics:

    def test_verbose_progress(self, minimal_spec: dict, recording_generator, captured_output) -> None:
        output, buffer = captured_output
        enrich_document(minimal_spec, ["shell_curl"], recording_generator, output)
        lines = buffer.getvalue().splitlines()
        assert lines == [
            "[Info] Checking existence of 'x-code-samples' field in /pets path...",
            "|-->[Completed] Added 'x-code-samples' field.",
            "|-->[Info] Checking existence of 'shell_curl' field...",
            "| |-->[Completed] Added 'shell_curl' field.",
        ]

    def test_skip_warning_shown_without_verbose(self, recording_generator) -> None:
        buffer = io.StringIO()
        output = OutputManager(no_color=True, stream=buffer)
        doc = {"paths": {"/pets": {"get": {CODE_SAMPLES_KEY: [{"lang": "x", "source": "y"}]}}}}

        enrich_document(doc, ["shell_curl"], recording_generator, output)

        assert buffer.getvalue().splitlines() == [
            "| |-->[Warning] Field 'shell_curl' already exists in '/pets' path, skipping.",
        ]

    def test_skip_warning_shown_when_quiet(self, recording_generator) -> None:
        buffer = io.StringIO()
        output = OutputManager(no_color=True, quiet=True, stream=buffer)
        doc = {"paths": {"/pets": {"get": {CODE_SAMPLES_KEY: [{"lang": "x", "source": "y"}]}}}}

        enrich_document(doc, ["shell_curl"], recording_generator, output)

        assert "already exists in '/pets' path" in buffer.getvalue()

    def test_non_verbose_is_silent_on_clean_run(
        self, minimal_spec: dict, recording_generator
    ) -> None:
        buffer = io.StringIO()
        output = OutputManager(no_color=True, stream=buffer)
        enrich_document(minimal_spec, ["shell_curl"], recording_generator, output)
        assert buffer.getvalue() == ""
