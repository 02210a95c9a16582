"""Parsing of ``Kind:Name`` identifiers against a registry."""

from __future__ import annotations

from typing import Optional, Union

from ..schemas.components import WILDCARD, IgnoreReason, RequestedIdentifier
from .base import MetadataRegistry, StaticRegistry


def parse_or_reason(raw: str, registry: MetadataRegistry) -> Union[RequestedIdentifier, IgnoreReason]:
    """Parse *raw*, or say why it cannot be parsed."""
    if not isinstance(raw, str) or not raw.strip():
        return IgnoreReason.MALFORMED

    kind_token, sep, rest = raw.partition(":")
    try:
        kind = registry.get_type_by_name(kind_token.strip())
    except (LookupError, ValueError):
        kind = None
    if not kind:
        return IgnoreReason.UNKNOWN_KIND

    # everything after the first colon is the name, colons included
    name = rest.strip() if sep else WILDCARD
    if not name:
        return IgnoreReason.MALFORMED
    return RequestedIdentifier(kind=kind, name=None if name == WILDCARD else name)


def parse_identifier(raw: str, registry: MetadataRegistry | None = None) -> Optional[RequestedIdentifier]:
    """Parse ``Kind:Name`` / ``Kind:*`` / ``Kind``.

    Returns ``None`` when the kind is unknown to *registry* or the string
    is malformed.
    """
    parsed = parse_or_reason(raw, registry or StaticRegistry())
    return parsed if isinstance(parsed, RequestedIdentifier) else None
