"""Metrics aggregation: every component lands in exactly one bucket."""

from __future__ import annotations

from typing import Iterable

from ..schemas.components import ComponentStatus, SkipRecord
from ..schemas.metrics import Metrics
from ..schemas.records import EnrichmentRequestRecord

DEFAULT_FAILURE_MESSAGE = "Enrichment request failed"


def _record_kind(record: EnrichmentRequestRecord) -> str:
    if record.component_kind:
        return record.component_kind
    response = record.response
    if response is not None and response.results:
        return response.results[0].metadata_type
    return ""


def aggregate(
    records: Iterable[EnrichmentRequestRecord],
    skip_records: Iterable[SkipRecord] = (),
) -> Metrics:
    """Sort records into success / fail and skip records into skipped."""
    metrics = Metrics()

    for record in records:
        if record.response is not None:
            metrics.add_success(ComponentStatus(
                kind=_record_kind(record),
                component_name=record.component_name,
                message=record.message or "",
            ))
        else:
            metrics.add_fail(ComponentStatus(
                kind=_record_kind(record),
                component_name=record.component_name,
                message=record.message or DEFAULT_FAILURE_MESSAGE,
            ))

    for skip in skip_records:
        metrics.add_skipped(skip)

    return metrics
