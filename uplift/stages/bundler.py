"""Packages each component's files into a request record."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from ..core.config import UpliftConfig
from ..schemas.components import DiscoveredComponent
from ..schemas.enrichment import ContentBundle, ContentBundleFile, EnrichmentRequestBody
from ..schemas.records import EnrichmentRequestRecord
from ..utils.logger import get_logger

logger = get_logger(__name__)

MIME_TYPES: dict[str, str] = {
    ".js": "application/javascript",
    ".html": "text/html",
    ".css": "text/css",
    ".xml": "application/xml",
    ".svg": "image/svg+xml",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


def get_mime_type(file_path: str | os.PathLike) -> str:
    """MIME type for *file_path* from its (case-insensitive) extension."""
    return MIME_TYPES.get(Path(file_path).suffix.lower(), DEFAULT_MIME_TYPE)


@dataclass(frozen=True)
class FileReadResult:
    """Contents of one successfully read component file."""

    component_name: str
    file_path: Path
    contents: str
    mime_type: str


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


async def _read_component_file(component: DiscoveredComponent, path: Path) -> FileReadResult:
    loop = asyncio.get_running_loop()
    contents = await loop.run_in_executor(None, _read_text, Path(path))
    return FileReadResult(
        component_name=component.name,
        file_path=Path(path),
        contents=contents,
        mime_type=get_mime_type(path),
    )


async def read_component_files(
    components: Sequence[DiscoveredComponent],
) -> list[list[FileReadResult]]:
    """Read every content file of every component concurrently.

    Returns one list per component, aligned with *components*, holding the
    readable files in enumeration order.  Unreadable files are logged and
    left out.
    """
    slots: list[tuple[int, Path]] = [
        (idx, Path(path)) for idx, component in enumerate(components) for path in component.content_files
    ]
    raw_results = await asyncio.gather(
        *(_read_component_file(components[idx], path) for idx, path in slots),
        return_exceptions=True,
    )

    grouped: list[list[FileReadResult]] = [[] for _ in components]
    for (idx, path), result_or_exc in zip(slots, raw_results):
        if isinstance(result_or_exc, BaseException):
            logger.warning(
                "Skipping unreadable file %s of component '%s': %s",
                path, components[idx].name, result_or_exc,
            )
            continue
        grouped[idx].append(result_or_exc)
    return grouped


def create_content_bundle(resource_name: str, files: Iterable[FileReadResult]) -> ContentBundle:
    """Bundle *files* under their basenames; a later duplicate basename wins."""
    bundle_files: dict[str, ContentBundleFile] = {}
    for file in files:
        bundle_file = ContentBundleFile(
            filename=file.file_path.name,
            mime_type=file.mime_type,
            content=file.contents,
        )
        bundle_files[bundle_file.filename] = bundle_file
    return ContentBundle(resource_name=resource_name, files=bundle_files)


def create_request_body(bundle: ContentBundle, config: UpliftConfig | None = None) -> EnrichmentRequestBody:
    config = config or UpliftConfig()
    return EnrichmentRequestBody(
        content_bundles=[bundle],
        metadata_type=config.metadata_type,
        max_tokens=config.max_tokens,
    )


async def build_bundles(
    components: Iterable[DiscoveredComponent],
    config: UpliftConfig | None = None,
) -> list[EnrichmentRequestRecord]:
    """Build one pending request record per component with readable files.

    Components without a single readable file are omitted (and logged);
    they produce neither a record nor a skip record.

    Args:
        components: Eligible components, typically ``Classification.eligible``.
        config: Supplies ``metadata_type`` and ``max_tokens``.

    Returns:
        Records in the same relative order as *components*.
    """
    components = list(components)
    grouped = await read_component_files(components)

    records: list[EnrichmentRequestRecord] = []
    for component, files in zip(components, grouped):
        if not files:
            logger.warning("Component '%s' has no readable files; not sent for enrichment", component.name)
            continue
        bundle = create_content_bundle(component.name, files)
        records.append(
            EnrichmentRequestRecord(
                component_name=component.name,
                component_kind=component.kind,
                request_body=create_request_body(bundle, config),
            )
        )

    logger.info("Built %d enrichment requests from %d components", len(records), len(components))
    return records


def build_bundles_sync(
    components: Iterable[DiscoveredComponent],
    config: UpliftConfig | None = None,
) -> list[EnrichmentRequestRecord]:
    """Synchronous wrapper around :func:`build_bundles`."""
    return asyncio.run(build_bundles(components, config))
