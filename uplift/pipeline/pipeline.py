"""EnrichmentPipeline: runs classify, bundle, dispatch, merge and aggregate."""

from __future__ import annotations

import asyncio
import time as _time
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..core.config import UpliftConfig
from ..core.exceptions import ComponentError, PipelineError
from ..core.hooks import (
    ComponentSkippedEvent,
    EnrichmentHooks,
    PipelineEndEvent,
    PipelineStartEvent,
    _fire_hook,
)
from ..providers.base import Connection
from ..registry.base import MetadataRegistry, StaticRegistry
from ..schemas.components import DiscoveredComponent
from ..schemas.metrics import Metrics
from ..schemas.records import EnrichmentRequestRecord, Failed, Succeeded
from ..stages.bundler import build_bundles
from ..stages.classifier import Classification, classify_requests
from ..stages.dispatcher import dispatch
from ..stages.merger import merge_results
from ..stages.metrics import aggregate
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Result from EnrichmentPipeline.run() / run_async().

    Attributes:
        metrics: Success / fail / skipped buckets for reporting.
        records: Final per-component records (after merging).
        classification: Eligible, skipped and ignored requests.
    """

    metrics: Metrics
    records: list[EnrichmentRequestRecord] = field(default_factory=list)
    classification: Classification = field(default_factory=Classification)

    @property
    def has_failures(self) -> bool:
        """True if any component ended in the fail bucket."""
        return self.metrics.has_failures

    @property
    def errors(self) -> list[ComponentError]:
        """Exceptions collected from records, tagged with the stage they came from.

        Includes successful records whose configuration file could not be
        updated (stage ``"merge"``).
        """
        errors = []
        for r in self.records:
            outcome = r.outcome
            if isinstance(outcome, Failed) and outcome.error is not None:
                errors.append(ComponentError(component_name=r.component_name, stage=outcome.stage, error=outcome.error))
            elif isinstance(outcome, Succeeded) and outcome.error is not None:
                errors.append(ComponentError(component_name=r.component_name, stage="merge", error=outcome.error))
        return errors


class EnrichmentPipeline:
    """Enriches requested components and writes the results to disk.

    Stages run in order; within the bundle and dispatch stages work runs
    concurrently and each component succeeds or fails on its own.
    """

    def __init__(
        self,
        connection: Connection,
        registry: MetadataRegistry | None = None,
        config: UpliftConfig | None = None,
    ):
        self._connection = connection
        self._registry = registry or StaticRegistry()
        self._config = config or UpliftConfig()

    @property
    def config(self) -> UpliftConfig:
        return self._config

    def run(
        self,
        discovered: Iterable[DiscoveredComponent],
        identifiers: Sequence[str],
        hooks: EnrichmentHooks | None = None,
    ) -> PipelineResult:
        """Synchronous entry point.

        Raises ``PipelineError`` if called from inside a running event loop
        (use ``await pipeline.run_async(...)`` in that case).
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.run_async(discovered, identifiers, hooks=hooks))
        raise PipelineError(
            "EnrichmentPipeline.run() cannot be called from inside an async context. "
            "Use 'await pipeline.run_async(...)' instead."
        )

    async def run_async(
        self,
        discovered: Iterable[DiscoveredComponent],
        identifiers: Sequence[str],
        hooks: EnrichmentHooks | None = None,
    ) -> PipelineResult:
        """Async entry point: ``await pipeline.run_async(discovered, identifiers)``.

        Args:
            discovered: Components found in the local project.
            identifiers: Requested ``Kind:Name`` strings.  Wildcards are
                ignored; expand them beforehand with
                :func:`uplift.registry.expand_wildcards`.
            hooks: Optional :class:`EnrichmentHooks` for lifecycle callbacks.

        Returns:
            A :class:`PipelineResult`.
        """
        hooks = hooks or EnrichmentHooks()
        discovered = list(discovered)
        identifiers = list(identifiers)

        await _fire_hook(hooks.on_pipeline_start, PipelineStartEvent(
            requested=identifiers,
            num_discovered=len(discovered),
            config=self._config,
        ))

        started = _time.monotonic()
        metrics = Metrics()
        try:
            classification = classify_requests(discovered, identifiers, self._registry, self._config)
            for skip in classification.skipped:
                await _fire_hook(hooks.on_component_skipped, ComponentSkippedEvent(skip=skip))

            records = await build_bundles(classification.eligible, self._config)
            records = await dispatch(self._connection, records, self._config, hooks=hooks)
            loop = asyncio.get_running_loop()
            records = await loop.run_in_executor(
                None, merge_results, classification.eligible, records, self._config,
            )

            metrics = aggregate(records, classification.skipped)
        finally:
            await _fire_hook(hooks.on_pipeline_end, PipelineEndEvent(
                success_count=metrics.success.count,
                fail_count=metrics.fail.count,
                skipped_count=metrics.skipped.count,
                elapsed_seconds=_time.monotonic() - started,
            ))

        logger.info(
            "Enrichment finished: %d succeeded, %d failed, %d skipped",
            metrics.success.count, metrics.fail.count, metrics.skipped.count,
        )
        return PipelineResult(metrics=metrics, records=records, classification=classification)
