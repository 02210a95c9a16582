"""Writes accepted descriptions into configuration files.

Only the first result of a response is persisted.  A configuration file
whose control element already says ``skipUplift`` = true is never touched.
A file that cannot be updated is reported in the record's message; the
response is kept and other components are unaffected.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from ..core.config import UpliftConfig
from ..core.exceptions import DocumentError
from ..documents.xml_config import ConfigDocument
from ..schemas.components import DiscoveredComponent
from ..schemas.records import EnrichmentRequestRecord, Succeeded
from ..utils.logger import get_logger

logger = get_logger(__name__)

OPTED_OUT_NOTE = "Configuration file has skipUplift set; left unchanged"
NO_RESULTS_NOTE = "Enrichment response contained no results; configuration file left unchanged"


def update_config_file(path: Path, record: EnrichmentRequestRecord, config: UpliftConfig) -> str | None:
    """Apply *record*'s first result to the configuration file at *path*.

    Returns:
        A note when the file was deliberately left unchanged, else ``None``.

    Raises:
        OSError: If the file cannot be read or written.
        DocumentError: If the file is not well-formed XML.
    """
    response = record.response
    result = response.first_result if response is not None else None
    if result is None:
        return NO_RESULTS_NOTE

    document = ConfigDocument.parse(path.read_text(encoding="utf-8"))

    current = document.get_control(config.control_element)
    if current is not None and current.opted_out:
        logger.info("Component '%s' opted out of enrichment; %s not modified", record.component_name, path)
        return OPTED_OUT_NOTE

    document.set_control(
        config.control_element,
        skip_uplift=False,
        description=result.description,
        score=result.score_text,
    )
    path.write_text(document.to_string(), encoding="utf-8")
    logger.debug("Updated %s for component '%s'", path, record.component_name)
    return None


def merge_results(
    components: Iterable[DiscoveredComponent],
    records: Sequence[EnrichmentRequestRecord],
    config: UpliftConfig | None = None,
) -> list[EnrichmentRequestRecord]:
    """Persist successful results into each component's configuration file.

    Args:
        components: Components that were sent for enrichment.
        records: Settled records from :func:`~uplift.stages.dispatcher.dispatch`.
        config: Supplies ``control_element``.

    Returns:
        Records in the input order.  Every record keeps its response.  A
        failed file update sets a message naming the component and the
        outcome's ``error``; a file intentionally left alone gains a note.
    """
    config = config or UpliftConfig()
    by_key = {record.key: idx for idx, record in enumerate(records)}
    merged = list(records)
    updated = 0

    for component in components:
        if component.support_file is None:
            continue
        idx = by_key.get(component.key)
        if idx is None or not isinstance(merged[idx].outcome, Succeeded):
            continue

        record = merged[idx]
        try:
            note = update_config_file(Path(component.support_file), record, config)
        except (OSError, UnicodeDecodeError, DocumentError) as exc:
            message = f"Failed to update configuration for component {component.name}: {exc}"
            logger.warning("%s", message)
            merged[idx] = record.with_outcome(Succeeded(response=record.outcome.response, note=message, error=exc))
            continue

        if note is not None:
            merged[idx] = record.with_outcome(Succeeded(response=record.outcome.response, note=note))
        else:
            updated += 1

    logger.info("Updated %d configuration files", updated)
    return merged
