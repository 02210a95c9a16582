"""Typed data passed between the Uplift pipeline stages.

- Component types: RequestedIdentifier, DiscoveredComponent, SkipRecord
- Wire payloads: ContentBundle, EnrichmentRequestBody, EnrichMetadataResult
- Records: EnrichmentRequestRecord with a Pending / Succeeded / Failed outcome
- Metrics: success / fail / skipped buckets
"""

from .components import (
    ComponentStatus,
    DiscoveredComponent,
    IgnoredIdentifier,
    IgnoreReason,
    RequestedIdentifier,
    SkipReason,
    SkipRecord,
)
from .enrichment import (
    ContentBundle,
    ContentBundleFile,
    EnrichmentMetadata,
    EnrichmentRequestBody,
    EnrichmentResult,
    EnrichMetadataResult,
)
from .metrics import Metrics, MetricsBucket
from .records import EnrichmentRequestRecord, Failed, Outcome, Pending, Succeeded

__all__ = [
    "ComponentStatus",
    "DiscoveredComponent",
    "IgnoredIdentifier",
    "IgnoreReason",
    "RequestedIdentifier",
    "SkipReason",
    "SkipRecord",
    "ContentBundle",
    "ContentBundleFile",
    "EnrichmentMetadata",
    "EnrichmentRequestBody",
    "EnrichmentResult",
    "EnrichMetadataResult",
    "Metrics",
    "MetricsBucket",
    "EnrichmentRequestRecord",
    "Failed",
    "Outcome",
    "Pending",
    "Succeeded",
]
