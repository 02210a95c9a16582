"""Tests for writing enrichment results into configuration files."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from conftest import LWC_META
from uplift.core.config import UpliftConfig
from uplift.core.exceptions import DocumentError
from uplift.documents.xml_config import ConfigDocument, ControlFields
from uplift.schemas.components import DiscoveredComponent
from uplift.schemas.enrichment import (
    ContentBundle,
    EnrichmentRequestBody,
    EnrichmentResult,
    EnrichMetadataResult,
)
from uplift.schemas.records import EnrichmentRequestRecord, Failed, Succeeded
from uplift.stages.merger import NO_RESULTS_NOTE, OPTED_OUT_NOTE, merge_results

LWC = "LightningComponentBundle"

OPTED_OUT_META = """<?xml version="1.0" encoding="UTF-8"?>
<LightningComponentBundle xmlns="http://soap.sforce.com/2006/04/metadata">
    <apiVersion>62.0</apiVersion>


    <ai>
        <skipUplift>{flag}</skipUplift>
        <description>hand written</description>
    </ai>
</LightningComponentBundle>
"""


def support_file(tmp_path: Path, name: str, text: str = LWC_META) -> Path:
    path = tmp_path / f"{name}.js-meta.xml"
    path.write_text(text, encoding="utf-8")
    return path


def component(name: str, support: Path | None) -> DiscoveredComponent:
    return DiscoveredComponent(kind=LWC, name=name, support_file=support)


def record(name: str, outcome) -> EnrichmentRequestRecord:
    return EnrichmentRequestRecord(
        component_name=name,
        component_kind=LWC,
        request_body=EnrichmentRequestBody(content_bundles=[ContentBundle(resource_name=name)]),
        outcome=outcome,
    )


def succeeded(*results: tuple[str, float]) -> Succeeded:
    return Succeeded(response=EnrichMetadataResult(results=[
        EnrichmentResult(resource_name="x", description=d, description_score=s) for d, s in results
    ]))


def control_of(path: Path) -> ControlFields:
    return ConfigDocument.parse(path.read_text(encoding="utf-8")).get_control("ai")


# ---------------------------------------------------------------------------
# Successful merges
# ---------------------------------------------------------------------------


class TestMerge:
    def test_writes_control_fields(self, tmp_path):
        path = support_file(tmp_path, "Alpha")

        [merged] = merge_results([component("Alpha", path)], [record("Alpha", succeeded(("d", 0.9)))])

        assert merged.succeeded
        assert merged.message is None
        assert control_of(path) == ControlFields(skip_uplift="false", description="d", score="0.9")

    def test_whole_number_score(self, tmp_path):
        path = support_file(tmp_path, "a")
        merge_results([component("a", path)], [record("a", succeeded(("d", 1.0)))])
        assert control_of(path).score == "1"

    def test_only_first_result_is_persisted(self, tmp_path):
        path = support_file(tmp_path, "a")
        merge_results([component("a", path)], [record("a", succeeded(("first", 0.5), ("second", 0.7)))])
        assert control_of(path).description == "first"

    def test_siblings_preserved(self, tmp_path):
        path = support_file(tmp_path, "a")
        merge_results([component("a", path)], [record("a", succeeded(("d", 0.9)))])
        text = path.read_text(encoding="utf-8")
        assert "<apiVersion>62.0</apiVersion>" in text
        assert "<isExposed>true</isExposed>" in text
        assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>\n')

    def test_merge_is_idempotent(self, tmp_path):
        path = support_file(tmp_path, "a")
        components = [component("a", path)]
        records = [record("a", succeeded(("d", 0.9)))]

        merge_results(components, records)
        once = path.read_bytes()
        merge_results(components, records)

        assert path.read_bytes() == once

    def test_custom_control_element(self, tmp_path):
        path = support_file(tmp_path, "a")
        merge_results([component("a", path)], [record("a", succeeded(("d", 0.9)))], UpliftConfig(control_element="genai"))
        assert "<genai>" in path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Files left untouched
# ---------------------------------------------------------------------------


class TestUntouched:
    @pytest.mark.parametrize("flag", ["true", "TRUE", "True"])
    def test_opt_out_is_byte_identical(self, tmp_path, flag):
        path = support_file(tmp_path, "a", OPTED_OUT_META.format(flag=flag))
        before = path.read_bytes()

        [merged] = merge_results([component("a", path)], [record("a", succeeded(("d", 0.9)))])

        assert path.read_bytes() == before
        assert merged.succeeded
        assert merged.message == OPTED_OUT_NOTE

    def test_opt_out_false_is_overwritten(self, tmp_path):
        path = support_file(tmp_path, "a", OPTED_OUT_META.format(flag="false"))
        merge_results([component("a", path)], [record("a", succeeded(("d", 0.9)))])
        assert control_of(path).description == "d"

    def test_empty_results_leave_file_alone(self, tmp_path):
        path = support_file(tmp_path, "a")
        before = path.read_bytes()

        [merged] = merge_results([component("a", path)], [record("a", succeeded())])

        assert path.read_bytes() == before
        assert merged.succeeded
        assert merged.message == NO_RESULTS_NOTE

    def test_failed_records_are_not_merged(self, tmp_path):
        path = support_file(tmp_path, "a")
        before = path.read_bytes()
        failed = record("a", Failed(message="Error sending request for component a: boom"))

        [merged] = merge_results([component("a", path)], [failed])

        assert path.read_bytes() == before
        assert merged is failed

    def test_component_without_support_file_is_ignored(self):
        original = record("a", succeeded(("d", 0.9)))
        assert merge_results([component("a", None)], [original]) == [original]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestMergeFailures:
    def test_malformed_document_keeps_response(self, tmp_path, caplog):
        path = support_file(tmp_path, "a", "<LightningComponentBundle>")
        original = record("a", succeeded(("d", 0.9)))

        with caplog.at_level(logging.WARNING, logger="uplift"):
            [merged] = merge_results([component("a", path)], [original])

        assert merged.succeeded
        assert merged.response is original.response
        assert merged.message.startswith("Failed to update configuration for component a:")
        assert isinstance(merged.outcome.error, DocumentError)
        assert path.read_text(encoding="utf-8") == "<LightningComponentBundle>"
        assert "Failed to update configuration" in caplog.text

    def test_missing_file_keeps_response(self, tmp_path):
        [merged] = merge_results(
            [component("a", tmp_path / "gone.js-meta.xml")],
            [record("a", succeeded(("d", 0.9)))],
        )
        assert merged.succeeded
        assert merged.message.startswith("Failed to update configuration for component a:")
        assert isinstance(merged.outcome.error, FileNotFoundError)

    def test_failure_is_isolated(self, tmp_path):
        bad = support_file(tmp_path, "bad", "not xml")
        good = support_file(tmp_path, "good")

        merged = merge_results(
            [component("bad", bad), component("good", good)],
            [record("bad", succeeded(("d", 0.9))), record("good", succeeded(("g", 0.8)))],
        )

        assert [r.succeeded for r in merged] == [True, True]
        assert merged[0].outcome.error is not None
        assert merged[1].outcome.error is None
        assert merged[1].message is None
        assert control_of(good).description == "g"


# ---------------------------------------------------------------------------
# Formatting outside the control element
# ---------------------------------------------------------------------------

HAND_EDITED_META = """<?xml version='1.0' encoding='UTF-8'?>
<!-- generated by the component scaffold -->
<LightningComponentBundle xmlns="http://soap.sforce.com/2006/04/metadata" fqn='card'>
    <apiVersion>62.0</apiVersion>
    <isExposed>true</isExposed>
    <targets/>
</LightningComponentBundle>
<!-- trailing note -->
"""


class TestFormattingPreserved:
    def test_only_control_element_changes(self, tmp_path):
        path = support_file(tmp_path, "card", HAND_EDITED_META)

        merge_results([component("card", path)], [record("card", succeeded(("d", 0.9)))])

        assert path.read_text(encoding="utf-8") == HAND_EDITED_META.replace(
            "    <targets/>\n",
            "    <targets/>\n"
            "    <ai>\n"
            "        <skipUplift>false</skipUplift>\n"
            "        <description>d</description>\n"
            "        <score>0.9</score>\n"
            "    </ai>\n",
        )

    def test_missing_score_leaves_existing_score(self, tmp_path):
        path = support_file(tmp_path, "a", OPTED_OUT_META.format(flag="false").replace(
            "<description>hand written</description>",
            "<description>hand written</description>\n        <score>0.4</score>",
        ))
        no_score = Succeeded(response=EnrichMetadataResult(results=[EnrichmentResult(resource_name="a", description="new")]))

        merge_results([component("a", path)], [record("a", no_score)])

        assert control_of(path) == ControlFields(skip_uplift="false", description="new", score="0.4")

    def test_missing_score_writes_no_score_element(self, tmp_path):
        path = support_file(tmp_path, "a")
        no_score = Succeeded(response=EnrichMetadataResult(results=[EnrichmentResult(resource_name="a", description="new")]))

        merge_results([component("a", path)], [record("a", no_score)])

        assert "<score>" not in path.read_text(encoding="utf-8")
        assert control_of(path).description == "new"
