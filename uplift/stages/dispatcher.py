"""Sends every request concurrently, isolating failures.

All requests are awaited together; one failure never cancels or delays
another.  The returned list is aligned with the input list.  No retries.
"""

from __future__ import annotations

import asyncio
import time as _time
from contextlib import nullcontext
from typing import Any, Sequence

from pydantic import ValidationError
from tqdm.auto import tqdm

from ..core.config import UpliftConfig
from ..core.exceptions import TransportError
from ..core.hooks import EnrichmentHooks, RequestCompleteEvent, _fire_hook
from ..providers.base import Connection
from ..schemas.enrichment import EnrichMetadataResult
from ..schemas.records import EnrichmentRequestRecord, Failed, Succeeded
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, ValidationError):
        return f"Malformed enrichment response: {exc.error_count()} validation error(s)"
    if isinstance(exc, TransportError):
        return exc.message
    return str(exc) or type(exc).__name__


async def _send(connection: Connection, endpoint: str, record: EnrichmentRequestRecord) -> EnrichMetadataResult:
    payload = await connection.post_json(endpoint, record.request_body.to_wire())
    if not isinstance(payload, dict):
        raise TransportError(f"Malformed enrichment response: expected an object, got {type(payload).__name__}")
    return EnrichMetadataResult.model_validate(payload)


async def dispatch(
    connection: Connection,
    records: Sequence[EnrichmentRequestRecord],
    config: UpliftConfig | None = None,
    hooks: EnrichmentHooks | None = None,
) -> list[EnrichmentRequestRecord]:
    """Send one enrichment request per record.

    Args:
        connection: Shared connection; must tolerate concurrent calls.
        records: Pending records from :func:`~uplift.stages.bundler.build_bundles`.
        config: Supplies the endpoint, ``max_concurrency`` and progress display.
        hooks: Optional hooks; ``on_request_complete`` fires per record.

    Returns:
        New records, one per input and in the same order, each either
        ``Succeeded`` or ``Failed``.  Failure messages name the component.
    """
    config = config or UpliftConfig()
    hooks = hooks or EnrichmentHooks()
    endpoint = config.enrichment_endpoint
    semaphore = asyncio.Semaphore(config.max_concurrency) if config.max_concurrency else None

    progress = tqdm(
        total=len(records),
        desc="Enriching",
        unit="component",
        disable=not config.enable_progress_bar,
    )

    async def send_one(record: EnrichmentRequestRecord) -> tuple[Any, float]:
        async with semaphore if semaphore is not None else nullcontext():
            started = _time.monotonic()
            try:
                result: Any = await _send(connection, endpoint, record)
            except Exception as exc:
                result = exc
            finally:
                progress.update(1)
            return result, _time.monotonic() - started

    try:
        raw_results = await asyncio.gather(*(send_one(r) for r in records), return_exceptions=True)
    finally:
        progress.close()

    settled: list[EnrichmentRequestRecord] = []
    for record, settled_or_exc in zip(records, raw_results):
        if isinstance(settled_or_exc, BaseException):
            result, elapsed = settled_or_exc, 0.0
        else:
            result, elapsed = settled_or_exc

        if isinstance(result, BaseException):
            message = f"Error sending request for component {record.component_name}: {_describe(result)}"
            logger.warning("%s", message)
            updated = record.with_outcome(Failed(message=message, stage="dispatch", error=result))
        else:
            response = result
            logger.debug(
                "Component '%s' enriched (%d result(s))", record.component_name, len(response.results),
            )
            updated = record.with_outcome(Succeeded(response=response))
        settled.append(updated)

        await _fire_hook(hooks.on_request_complete, RequestCompleteEvent(
            component_name=updated.component_name,
            component_kind=updated.component_kind,
            succeeded=updated.succeeded,
            message=updated.message,
            elapsed_seconds=elapsed,
        ))

    failures = sum(1 for r in settled if not r.succeeded)
    logger.info("Dispatched %d enrichment requests: %d succeeded, %d failed", len(settled), len(settled) - failures, failures)
    return settled
