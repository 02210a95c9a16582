"""Run metrics: success / fail / skipped buckets."""

from pydantic import BaseModel, Field, SerializeAsAny

from .components import ComponentStatus


class MetricsBucket(BaseModel):
    """Components that ended a run in the same state."""

    count: int = 0
    components: list[SerializeAsAny[ComponentStatus]] = Field(default_factory=list)


class Metrics(BaseModel):
    """Outcome of one enrichment run.

    Components are only ever added through ``add_*`` so that
    ``total == success.count + fail.count + skipped.count`` holds.
    """

    success: MetricsBucket = Field(default_factory=MetricsBucket)
    fail: MetricsBucket = Field(default_factory=MetricsBucket)
    skipped: MetricsBucket = Field(default_factory=MetricsBucket)
    total: int = 0

    def add_success(self, component: ComponentStatus) -> None:
        self._add(self.success, component)

    def add_fail(self, component: ComponentStatus) -> None:
        self._add(self.fail, component)

    def add_skipped(self, component: ComponentStatus) -> None:
        self._add(self.skipped, component)

    def _add(self, bucket: MetricsBucket, component: ComponentStatus) -> None:
        bucket.components.append(component)
        bucket.count += 1
        self.total += 1

    @property
    def has_failures(self) -> bool:
        return self.fail.count > 0
