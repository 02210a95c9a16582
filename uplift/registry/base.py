"""MetadataRegistry protocol and the built-in static registry."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class MetadataRegistry(Protocol):
    """Resolves user-typed kind tokens to canonical metadata kinds."""

    def get_type_by_name(self, name: str) -> Optional[str]:
        """Return the canonical kind for *name*, or ``None`` if unknown."""
        ...


DEFAULT_KINDS = (
    "LightningComponentBundle",
    "AuraDefinitionBundle",
    "ApexClass",
    "ApexTrigger",
    "ApexPage",
    "ApexComponent",
    "CustomObject",
    "CustomField",
    "CustomLabels",
    "Flow",
    "FlexiPage",
    "Layout",
    "PermissionSet",
    "Profile",
    "StaticResource",
)

DEFAULT_ALIASES = {
    "lwc": "LightningComponentBundle",
    "aura": "AuraDefinitionBundle",
}


class StaticRegistry:
    """In-memory registry over a fixed list of kinds.

    Lookups are case-insensitive and surrounding whitespace is ignored.
    """

    def __init__(self, kinds=DEFAULT_KINDS, aliases: Optional[dict[str, str]] = None):
        self._kinds = {kind.lower(): kind for kind in kinds}
        alias_map = DEFAULT_ALIASES if aliases is None else aliases
        for alias, kind in alias_map.items():
            if kind.lower() not in self._kinds:
                raise ValueError(f"Alias '{alias}' points at unknown kind '{kind}'")
            self._kinds[alias.lower()] = self._kinds[kind.lower()]

    @property
    def kinds(self) -> list[str]:
        return sorted(set(self._kinds.values()))

    def get_type_by_name(self, name: str) -> Optional[str]:
        if not name:
            return None
        return self._kinds.get(name.strip().lower())
