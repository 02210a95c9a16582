"""Component-level types shared by the classifier, bundler and merger."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, model_validator

WILDCARD = "*"


@dataclass(frozen=True)
class RequestedIdentifier:
    """A parsed ``Kind:Name`` request.

    Attributes:
        kind: Canonical metadata kind (normalised by the registry).
        name: Component name, or ``None`` when the whole kind was requested.
    """

    kind: str
    name: Optional[str] = None

    @property
    def is_wildcard(self) -> bool:
        return self.name is None or WILDCARD in self.name or self.name == "all"

    def __str__(self) -> str:
        return f"{self.kind}:{self.name if self.name is not None else WILDCARD}"


@dataclass(frozen=True)
class DiscoveredComponent:
    """A component found in the local project.

    Attributes:
        kind: Metadata kind, e.g. ``LightningComponentBundle``.
        name: Component name, unique within its kind.
        content_files: Source files in discovery order.
        support_file: The component's XML configuration file, if any.
    """

    kind: str
    name: str
    content_files: tuple[Path, ...] = ()
    support_file: Optional[Path] = None

    @property
    def has_support_file(self) -> bool:
        return self.support_file is not None

    @property
    def key(self) -> tuple[str, str]:
        return (self.kind, self.name)


class SkipReason(str, Enum):
    """Why a requested component was not sent for enrichment."""

    NOT_FOUND = "not_found"
    UNSUPPORTED_KIND = "unsupported_kind"
    MISSING_SUPPORT_FILE = "missing_support_file"


SKIP_MESSAGES = {
    SkipReason.NOT_FOUND: "Not found in source project",
    SkipReason.UNSUPPORTED_KIND: "Only Lightning Web Components are currently supported for enrichment",
    SkipReason.MISSING_SUPPORT_FILE: (
        "Lightning Web Component configuration file does not exist (*.js-meta.xml)"
    ),
}


class IgnoreReason(str, Enum):
    """Why a raw identifier never reached classification."""

    MALFORMED = "malformed"
    UNKNOWN_KIND = "unknown_kind"
    WILDCARD = "wildcard"


class ComponentStatus(BaseModel):
    """One line of the final report."""

    kind: str = ""
    component_name: Optional[str] = None
    message: Optional[str] = None

    def label(self) -> str:
        return f"{self.kind}:{self.component_name if self.component_name is not None else WILDCARD}"


class SkipRecord(ComponentStatus):
    """A requested component that was rejected before dispatch.

    ``message`` defaults to the standard text for ``reason``.
    """

    reason: SkipReason

    @model_validator(mode="after")
    def _default_message(self) -> "SkipRecord":
        if not self.message:
            self.message = SKIP_MESSAGES[self.reason]
        return self


class IgnoredIdentifier(BaseModel):
    """A raw identifier dropped without a skip record."""

    raw: str
    reason: IgnoreReason
