"""Local source-tree discovery.

Walks a project directory and returns the components named by a list of
``Kind:Name`` identifiers.  Supported layouts::

    **/lwc/<name>/...            LightningComponentBundle (<name>.js-meta.xml)
    **/aura/<name>/...           AuraDefinitionBundle     (<name>.*-meta.xml)
    **/classes/<name>.cls        ApexClass                (<name>.cls-meta.xml)
    **/triggers/<name>.trigger   ApexTrigger              (<name>.trigger-meta.xml)
"""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..schemas.components import DiscoveredComponent
from ..utils.logger import get_logger
from .base import MetadataRegistry, StaticRegistry
from .identifiers import parse_identifier

logger = get_logger(__name__)

META_SUFFIX = "-meta.xml"

# directory name -> kind, for directory-per-component ("bundle") layouts
BUNDLE_DIRS = {
    "lwc": "LightningComponentBundle",
    "aura": "AuraDefinitionBundle",
}

# directory name -> (kind, source suffix), for file-per-component layouts
FILE_DIRS = {
    "classes": ("ApexClass", ".cls"),
    "triggers": ("ApexTrigger", ".trigger"),
}

IGNORED_DIRS = {".git", ".sfdx", ".sf", "node_modules", "__pycache__"}


def _bundle_support_file(bundle_dir: Path, kind: str) -> Optional[Path]:
    name = bundle_dir.name
    if kind == "LightningComponentBundle":
        candidate = bundle_dir / f"{name}.js{META_SUFFIX}"
        return candidate if candidate.is_file() else None
    matches = sorted(p for p in bundle_dir.glob(f"{name}.*{META_SUFFIX}") if p.is_file())
    return matches[0] if matches else None


def _scan_bundle(bundle_dir: Path, kind: str) -> DiscoveredComponent:
    support = _bundle_support_file(bundle_dir, kind)
    content = []
    for root, dirs, files in os.walk(bundle_dir):
        dirs[:] = sorted(d for d in dirs if d not in IGNORED_DIRS)
        for filename in sorted(files):
            path = Path(root) / filename
            if support is not None and path == support:
                continue
            content.append(path)
    return DiscoveredComponent(kind=kind, name=bundle_dir.name, content_files=tuple(content), support_file=support)


def _scan_file_dir(directory: Path, kind: str, suffix: str) -> Iterator[DiscoveredComponent]:
    for source in sorted(directory.glob(f"*{suffix}")):
        if not source.is_file():
            continue
        meta = source.with_name(source.name + META_SUFFIX)
        yield DiscoveredComponent(
            kind=kind,
            name=source.name[: -len(suffix)],
            content_files=(source,),
            support_file=meta if meta.is_file() else None,
        )


def scan_project(project_dir: str | os.PathLike) -> list[DiscoveredComponent]:
    """Return every recognised component under *project_dir*.

    Components are ordered by path so repeated scans are stable.
    """
    root = Path(project_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"Project directory does not exist: {root}")

    found: list[DiscoveredComponent] = []
    for current, dirs, _files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in IGNORED_DIRS)
        current_path = Path(current)
        if current_path.name in BUNDLE_DIRS:
            kind = BUNDLE_DIRS[current_path.name]
            for child in dirs:
                found.append(_scan_bundle(current_path / child, kind))
            # bundle contents are not scanned for further layouts
            dirs[:] = []
        elif current_path.name in FILE_DIRS:
            kind, suffix = FILE_DIRS[current_path.name]
            found.extend(_scan_file_dir(current_path, kind, suffix))

    logger.debug("Scanned %s: %d components", root, len(found))
    return found


def discover_components(
    project_dir: str | os.PathLike,
    identifiers: Iterable[str],
    registry: MetadataRegistry | None = None,
) -> list[DiscoveredComponent]:
    """Resolve *identifiers* against the components in *project_dir*.

    Wildcard identifiers (``Kind``, ``Kind:*``, ``Kind:Prefix*``) expand to
    the matching components of that kind.  Named identifiers match by name
    across kinds, so a request with the wrong kind still resolves and can
    be reported as unsupported.  Unknown kinds match nothing.
    """
    registry = registry or StaticRegistry()
    requested = [parsed for parsed in (parse_identifier(raw, registry) for raw in identifiers) if parsed]

    selected: list[DiscoveredComponent] = []
    for component in scan_project(project_dir):
        for ident in requested:
            if ident.is_wildcard:
                if component.kind == ident.kind and _wildcard_matches(ident.name, component.name):
                    selected.append(component)
                    break
            elif component.name == ident.name:
                selected.append(component)
                break
    return selected


def _wildcard_matches(pattern: Optional[str], name: str) -> bool:
    if pattern is None or pattern in ("*", "all"):
        return True
    return fnmatchcase(name, pattern)


def expand_wildcards(
    identifiers: Iterable[str],
    discovered: Iterable[DiscoveredComponent],
    registry: MetadataRegistry | None = None,
) -> list[str]:
    """Replace wildcard identifiers with one ``Kind:Name`` per matching component.

    Named identifiers (including unparseable ones) pass through unchanged
    so the classifier can still report them.  Duplicates are removed,
    keeping first-seen order.
    """
    registry = registry or StaticRegistry()
    components = list(discovered)
    expanded: list[str] = []
    for raw in identifiers:
        parsed = parse_identifier(raw, registry)
        if parsed is None or not parsed.is_wildcard:
            expanded.append(raw)
            continue
        expanded.extend(
            f"{component.kind}:{component.name}"
            for component in components
            if component.kind == parsed.kind and _wildcard_matches(parsed.name, component.name)
        )
    return list(dict.fromkeys(expanded))
