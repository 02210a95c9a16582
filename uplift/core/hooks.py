"""Lifecycle hooks for pipeline observability.

Typed event dataclasses + ``EnrichmentHooks`` container.  Hook callables
are optional; ``_fire_hook`` catches errors so observability failures
never break an enrichment run.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from ..schemas.components import SkipRecord
    from .config import UpliftConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PipelineStartEvent:
    """Fired once at the beginning of ``EnrichmentPipeline.run_async()``."""

    requested: list[str]
    num_discovered: int
    config: UpliftConfig


@dataclass(frozen=True)
class ComponentSkippedEvent:
    """Fired for every requested component the classifier rejects."""

    skip: SkipRecord


@dataclass(frozen=True)
class RequestCompleteEvent:
    """Fired after each enrichment request settles."""

    component_name: str
    component_kind: str
    succeeded: bool
    message: str | None
    elapsed_seconds: float


@dataclass(frozen=True)
class PipelineEndEvent:
    """Fired once at the end of ``EnrichmentPipeline.run_async()`` (including on error)."""

    success_count: int
    fail_count: int
    skipped_count: int
    elapsed_seconds: float


# ---------------------------------------------------------------------------
# EnrichmentHooks container
# ---------------------------------------------------------------------------


@dataclass
class EnrichmentHooks:
    """User-facing hook container, passed to ``EnrichmentPipeline.run()``.

    All fields are optional callables. Sync and async callables both work.
    Hook errors are caught and logged.
    """

    on_pipeline_start: Optional[Callable[[PipelineStartEvent], Any]] = None
    on_component_skipped: Optional[Callable[[ComponentSkippedEvent], Any]] = None
    on_request_complete: Optional[Callable[[RequestCompleteEvent], Any]] = None
    on_pipeline_end: Optional[Callable[[PipelineEndEvent], Any]] = None


# ---------------------------------------------------------------------------
# Fire helper
# ---------------------------------------------------------------------------


async def _fire_hook(hook: Optional[Callable], event: Any) -> None:
    """Call *hook* with *event*, awaiting if async.  Catches and logs errors."""
    if hook is None:
        return
    try:
        result = hook(event)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.warning("Hook %s raised an exception", hook, exc_info=True)
