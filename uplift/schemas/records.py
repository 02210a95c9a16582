"""Per-component request records and their outcomes.

A record is created ``Pending`` by the bundler and replaced (never mutated)
with a ``Succeeded`` or ``Failed`` copy as it moves through the pipeline.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Optional, Union

from .enrichment import EnrichMetadataResult, EnrichmentRequestBody


@dataclass(frozen=True)
class Pending:
    """Request built but not yet sent."""


@dataclass(frozen=True)
class Succeeded:
    """The service returned a parsed response.

    ``note`` carries informational text, e.g. that the configuration file
    opted out of updates.  ``error`` is set when the response could not be
    written to the configuration file; the record still counts as a success.
    """

    response: EnrichMetadataResult
    note: Optional[str] = None
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class Failed:
    """The request failed.

    ``stage`` names the step that failed; ``error`` is the exception
    behind ``message`` when there was one.
    """

    message: str
    stage: str = "dispatch"
    error: Optional[BaseException] = None


Outcome = Union[Pending, Succeeded, Failed]


@dataclass(frozen=True)
class EnrichmentRequestRecord:
    """One enrichment request and its outcome.

    Attributes:
        component_name: Name of the component the request describes.
        component_kind: Kind of the component.
        request_body: Payload sent to the service.
        outcome: ``Pending``, ``Succeeded`` or ``Failed``.
    """

    component_name: str
    component_kind: str
    request_body: EnrichmentRequestBody
    outcome: Outcome = Pending()

    @property
    def key(self) -> tuple[str, str]:
        return (self.component_kind, self.component_name)

    @property
    def response(self) -> Optional[EnrichMetadataResult]:
        if isinstance(self.outcome, Succeeded):
            return self.outcome.response
        return None

    @property
    def message(self) -> Optional[str]:
        if isinstance(self.outcome, Failed):
            return self.outcome.message
        if isinstance(self.outcome, Succeeded):
            return self.outcome.note
        return None

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, Succeeded)

    def with_outcome(self, outcome: Outcome) -> EnrichmentRequestRecord:
        return dataclasses.replace(self, outcome=outcome)
