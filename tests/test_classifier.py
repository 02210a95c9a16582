"""Tests for request classification (eligible / skipped / ignored)."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from uplift.core.config import UpliftConfig
from uplift.registry.base import StaticRegistry
from uplift.schemas.components import (
    DiscoveredComponent,
    IgnoreReason,
    SkipReason,
    SkipRecord,
)
from uplift.stages.classifier import classify, classify_requests, select_eligible

LWC = "LightningComponentBundle"


def lwc(name: str, support: bool = True) -> DiscoveredComponent:
    return DiscoveredComponent(
        kind=LWC,
        name=name,
        content_files=(Path(f"/p/lwc/{name}/{name}.js"),),
        support_file=Path(f"/p/lwc/{name}/{name}.js-meta.xml") if support else None,
    )


def apex(name: str) -> DiscoveredComponent:
    return DiscoveredComponent(
        kind="ApexClass",
        name=name,
        content_files=(Path(f"/p/classes/{name}.cls"),),
        support_file=Path(f"/p/classes/{name}.cls-meta.xml"),
    )


# ---------------------------------------------------------------------------
# Skip reasons
# ---------------------------------------------------------------------------


class TestSkipReasons:
    def test_eligible_component_has_no_skip(self):
        result = classify_requests([lwc("card")], [f"{LWC}:card"])
        assert result.skipped == []
        assert [c.name for c in result.eligible] == ["card"]

    def test_not_found(self):
        result = classify_requests([lwc("card")], [f"{LWC}:ghost"])
        assert result.eligible == []
        assert len(result.skipped) == 1
        skip = result.skipped[0]
        assert skip.reason == SkipReason.NOT_FOUND
        assert skip.kind == LWC
        assert skip.component_name == "ghost"
        assert skip.message == "Not found in source project"

    def test_unsupported_kind(self):
        result = classify_requests([apex("Util")], ["ApexClass:Util"])
        assert result.eligible == []
        skip = result.skipped[0]
        assert skip.reason == SkipReason.UNSUPPORTED_KIND
        assert skip.kind == "ApexClass"
        assert "Lightning Web Components" in skip.message

    def test_missing_support_file(self):
        result = classify_requests([lwc("bare", support=False)], [f"{LWC}:bare"])
        skip = result.skipped[0]
        assert skip.reason == SkipReason.MISSING_SUPPORT_FILE
        assert "js-meta.xml" in skip.message

    def test_not_found_checked_before_kind(self):
        # nothing named "Util" exists, so the kind is never consulted
        result = classify_requests([lwc("card")], ["ApexClass:Util"])
        assert result.skipped[0].reason == SkipReason.NOT_FOUND

    def test_wrong_kind_in_request_reports_discovered_kind(self):
        # requested as LWC, discovered as an Apex class with the same name
        result = classify_requests([apex("Util")], [f"{LWC}:Util"])
        skip = result.skipped[0]
        assert skip.reason == SkipReason.UNSUPPORTED_KIND
        assert skip.kind == "ApexClass"

    def test_exact_kind_match_wins_over_name_only(self):
        discovered = [apex("shared"), lwc("shared")]
        result = classify_requests(discovered, [f"{LWC}:shared"])
        assert result.skipped == []
        assert result.eligible[0].kind == LWC

    def test_mixed_batch(self):
        discovered = [lwc("a"), lwc("b", support=False), apex("C")]
        result = classify_requests(discovered, [f"{LWC}:a", f"{LWC}:b", "ApexClass:C", f"{LWC}:z"])
        assert [c.name for c in result.eligible] == ["a"]
        assert [(s.component_name, s.reason) for s in result.skipped] == [
            ("b", SkipReason.MISSING_SUPPORT_FILE),
            ("C", SkipReason.UNSUPPORTED_KIND),
            ("z", SkipReason.NOT_FOUND),
        ]


# ---------------------------------------------------------------------------
# Ignored identifiers
# ---------------------------------------------------------------------------


class TestIgnoredIdentifiers:
    def test_unknown_kind_is_ignored_not_skipped(self):
        result = classify_requests([lwc("card")], ["NoSuchKind:card"])
        assert result.skipped == []
        assert result.eligible == []
        assert result.ignored[0].reason == IgnoreReason.UNKNOWN_KIND
        assert result.ignored[0].raw == "NoSuchKind:card"

    @pytest.mark.parametrize("raw", ["", "   ", f"{LWC}:"])
    def test_malformed_is_ignored(self, raw):
        result = classify_requests([lwc("card")], [raw])
        assert result.skipped == []
        assert result.ignored[0].reason == IgnoreReason.MALFORMED

    @pytest.mark.parametrize("raw", [LWC, f"{LWC}:*", f"{LWC}:ca*"])
    def test_wildcards_never_become_eligible(self, raw):
        result = classify_requests([lwc("card")], [raw])
        assert result.eligible == []
        assert result.skipped == []
        assert result.ignored[0].reason == IgnoreReason.WILDCARD

    def test_discovered_but_unrequested_is_not_eligible(self):
        result = classify_requests([lwc("a"), lwc("b")], [f"{LWC}:a"])
        assert [c.name for c in result.eligible] == ["a"]


# ---------------------------------------------------------------------------
# Dedup and ordering
# ---------------------------------------------------------------------------


class TestDedup:
    def test_duplicate_requests_yield_single_eligible(self):
        result = classify_requests([lwc("a")], [f"{LWC}:a", f"{LWC}:a", "lwc:a"])
        assert len(result.eligible) == 1

    def test_duplicate_misses_yield_single_skip(self):
        result = classify_requests([], [f"{LWC}:x", f"{LWC}:x"])
        assert len(result.skipped) == 1

    def test_eligible_follows_request_order(self):
        discovered = [lwc("a"), lwc("b"), lwc("c")]
        result = classify_requests(discovered, [f"{LWC}:c", f"{LWC}:a"])
        assert [c.name for c in result.eligible] == ["c", "a"]


# ---------------------------------------------------------------------------
# Registry and config injection
# ---------------------------------------------------------------------------


class TestInjection:
    def test_custom_registry_and_supported_kind(self):
        registry = StaticRegistry(kinds=("Bundle", "OtherKind"), aliases={})
        config = UpliftConfig(supported_kind="Bundle")
        discovered = [
            DiscoveredComponent(kind="Bundle", name="Alpha", support_file=Path("/p/Alpha.xml")),
            DiscoveredComponent(kind="OtherKind", name="X", support_file=Path("/p/X.xml")),
        ]

        result = classify_requests(discovered, ["Bundle:Alpha", "OtherKind:X"], registry, config)

        assert [c.name for c in result.eligible] == ["Alpha"]
        assert result.skipped[0].reason == SkipReason.UNSUPPORTED_KIND

    def test_registry_errors_are_treated_as_unknown(self):
        class BrokenRegistry:
            def get_type_by_name(self, name):
                raise LookupError(name)

        result = classify_requests([lwc("a")], [f"{LWC}:a"], BrokenRegistry())
        assert result.ignored[0].reason == IgnoreReason.UNKNOWN_KIND

    def test_logs_summary(self, caplog):
        with caplog.at_level(logging.INFO, logger="uplift"):
            classify_requests([lwc("a")], [f"{LWC}:a", f"{LWC}:b"])
        assert "1 eligible, 1 skipped" in caplog.text


# ---------------------------------------------------------------------------
# classify / select_eligible
# ---------------------------------------------------------------------------


class TestClassifyHelpers:
    def test_classify_returns_only_skips(self):
        skips = classify([lwc("a")], [f"{LWC}:a", f"{LWC}:missing"])
        assert len(skips) == 1
        assert isinstance(skips[0], SkipRecord)

    def test_select_eligible_excludes_skipped(self):
        discovered = [lwc("a"), lwc("b", support=False)]
        skips = classify(discovered, [f"{LWC}:a", f"{LWC}:b"])
        assert [c.name for c in select_eligible(discovered, skips)] == ["a"]


# ---------------------------------------------------------------------------
# Public surface
# ---------------------------------------------------------------------------


class TestPublicSurface:
    def test_identifier_parsing_lives_in_registry(self):
        import uplift.stages as stages
        import uplift.stages.classifier as classifier
        from uplift.registry import parse_identifier

        assert not hasattr(classifier, "parse_identifier")
        assert "parse_identifier" not in stages.__all__
        assert parse_identifier(f"{LWC}:card").name == "card"
