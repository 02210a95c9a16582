"""Metadata kind registry and local project discovery."""

from .base import DEFAULT_KINDS, MetadataRegistry, StaticRegistry
from .identifiers import parse_identifier
from .project import discover_components, expand_wildcards, scan_project

__all__ = [
    "DEFAULT_KINDS",
    "MetadataRegistry",
    "StaticRegistry",
    "discover_components",
    "parse_identifier",
    "expand_wildcards",
    "scan_project",
]
