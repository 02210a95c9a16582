"""Decides which requested components can be enriched.

Requested identifiers are ``Kind:Name`` strings.  Each explicit request
ends up in exactly one of three places:

* ``eligible``: matched a discovered component that passes every check;
* ``skipped``: a ``SkipRecord`` explaining why it was rejected;
* ``ignored``: never classified (unknown kind, malformed or wildcard).

Checks run in order: not found, unsupported kind, missing support file.
A component is matched by ``(kind, name)`` first and by name alone as a
fallback, so a request typed with the wrong kind still reports
``UNSUPPORTED_KIND`` rather than ``NOT_FOUND``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..core.config import UpliftConfig
from ..registry.base import MetadataRegistry, StaticRegistry
from ..registry.identifiers import parse_or_reason
from ..schemas.components import (
    DiscoveredComponent,
    IgnoredIdentifier,
    IgnoreReason,
    RequestedIdentifier,
    SkipReason,
    SkipRecord,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Classification:
    """Result of classifying one batch of requested identifiers."""

    eligible: list[DiscoveredComponent] = field(default_factory=list)
    skipped: list[SkipRecord] = field(default_factory=list)
    ignored: list[IgnoredIdentifier] = field(default_factory=list)


class _ComponentIndex:
    def __init__(self, discovered: Iterable[DiscoveredComponent]):
        self.by_key: dict[tuple[str, str], DiscoveredComponent] = {}
        self.by_name: dict[str, DiscoveredComponent] = {}
        for component in discovered:
            self.by_key.setdefault(component.key, component)
            self.by_name.setdefault(component.name, component)

    def match(self, ident: RequestedIdentifier) -> Optional[DiscoveredComponent]:
        exact = self.by_key.get((ident.kind, ident.name))
        if exact is not None:
            return exact
        return self.by_name.get(ident.name)


def classify_requests(
    discovered: Iterable[DiscoveredComponent],
    requested_identifiers: Iterable[str],
    registry: MetadataRegistry | None = None,
    config: UpliftConfig | None = None,
) -> Classification:
    """Classify every requested identifier against the discovered components.

    Args:
        discovered: Components found in the local project.
        requested_identifiers: Raw ``Kind:Name`` strings from the caller.
        registry: Kind registry used to validate/normalise kind tokens.
        config: Supplies ``supported_kind``.

    Returns:
        A :class:`Classification`.  ``eligible`` contains only components
        that were explicitly requested, in request order, without duplicates.
    """
    registry = registry or StaticRegistry()
    supported_kind = (config or UpliftConfig()).supported_kind
    index = _ComponentIndex(discovered)
    result = Classification()

    requested: dict[RequestedIdentifier, None] = {}
    for raw in requested_identifiers:
        parsed = parse_or_reason(raw, registry)
        if isinstance(parsed, IgnoreReason):
            logger.debug("Ignoring identifier %r: %s", raw, parsed.value)
            result.ignored.append(IgnoredIdentifier(raw=str(raw), reason=parsed))
        elif parsed.is_wildcard:
            logger.debug("Ignoring wildcard identifier %r", raw)
            result.ignored.append(IgnoredIdentifier(raw=raw, reason=IgnoreReason.WILDCARD))
        else:
            requested.setdefault(parsed, None)

    eligible_keys: set[tuple[str, str]] = set()
    skipped_keys: set[tuple[str, Optional[str], SkipReason]] = set()

    def skip(kind: str, name: Optional[str], reason: SkipReason) -> None:
        # two identifiers can resolve to the same component
        if (kind, name, reason) not in skipped_keys:
            skipped_keys.add((kind, name, reason))
            result.skipped.append(SkipRecord(kind=kind, component_name=name, reason=reason))

    for ident in requested:
        component = index.match(ident)
        if component is None:
            skip(ident.kind, ident.name, SkipReason.NOT_FOUND)
        elif component.kind != supported_kind:
            skip(component.kind, component.name, SkipReason.UNSUPPORTED_KIND)
        elif not component.has_support_file:
            skip(component.kind, component.name, SkipReason.MISSING_SUPPORT_FILE)
        elif component.key not in eligible_keys:
            eligible_keys.add(component.key)
            result.eligible.append(component)

    logger.info(
        "Classified %d requested components: %d eligible, %d skipped, %d ignored",
        len(requested), len(result.eligible), len(result.skipped), len(result.ignored),
    )
    return result


def classify(
    discovered: Iterable[DiscoveredComponent],
    requested_identifiers: Iterable[str],
    registry: MetadataRegistry | None = None,
    config: UpliftConfig | None = None,
) -> list[SkipRecord]:
    """Return the skip records for *requested_identifiers*.

    Eligible components are not returned; use :func:`select_eligible` or
    :func:`classify_requests` to obtain them.
    """
    return classify_requests(discovered, requested_identifiers, registry, config).skipped


def select_eligible(
    discovered: Iterable[DiscoveredComponent],
    skip_records: Iterable[SkipRecord],
) -> list[DiscoveredComponent]:
    """Discovered components that have no matching skip record."""
    skipped = {(skip.kind, skip.component_name) for skip in skip_records}
    return [component for component in discovered if component.key not in skipped]
