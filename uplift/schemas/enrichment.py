"""Request and response payloads for the on-demand enrichment endpoint.

Request shape::

    {
      "contentBundles": [{"resourceName": ..., "files": {<name>: {...}}}],
      "metadataType": "Generic",
      "maxTokens": 250
    }

Response shape::

    {
      "metadata": {"durationMs", "failureCount", "successCount", "timestamp"},
      "results": [{"resourceId", "resourceName", "metadataType",
                   "modelUsed", "description", "descriptionScore"}, ...]
    }
"""

from typing import Literal, Optional

from pydantic import Field

from .base import WireModel


class ContentBundleFile(WireModel):
    """One source file of a component, sent inline as text."""

    filename: str
    mime_type: str
    content: str
    encoding: Literal["PlainText"] = "PlainText"


class ContentBundle(WireModel):
    """All readable files of one component, keyed by basename."""

    resource_name: str
    files: dict[str, ContentBundleFile] = Field(default_factory=dict)


class EnrichmentRequestBody(WireModel):
    """Body of one enrichment request (always a single bundle)."""

    content_bundles: list[ContentBundle]
    metadata_type: str = "Generic"
    max_tokens: int = 250


class EnrichmentMetadata(WireModel):
    """Service-side bookkeeping returned alongside the results."""

    duration_ms: Optional[float] = None
    failure_count: Optional[int] = None
    success_count: Optional[int] = None
    timestamp: Optional[str] = None


class EnrichmentResult(WireModel):
    """Generated description for one resource."""

    resource_id: Optional[str] = None
    resource_name: str = ""
    metadata_type: str = ""
    model_used: Optional[str] = None
    description: str = ""
    description_score: Optional[float] = None

    @property
    def score_text(self) -> Optional[str]:
        """Score as written to configuration files (``1.0`` -> ``"1"``), or ``None`` if absent."""
        if self.description_score is None:
            return None
        if float(self.description_score).is_integer():
            return str(int(self.description_score))
        return str(self.description_score)


class EnrichMetadataResult(WireModel):
    """Full response of the enrichment endpoint."""

    metadata: EnrichmentMetadata = Field(default_factory=EnrichmentMetadata)
    results: list[EnrichmentResult] = Field(default_factory=list)

    @property
    def first_result(self) -> Optional[EnrichmentResult]:
        """The only result that is ever persisted, or ``None`` if empty."""
        return self.results[0] if self.results else None
