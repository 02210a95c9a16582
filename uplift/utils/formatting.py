"""Human-readable rendering of run metrics."""

from __future__ import annotations

from typing import Callable

from ..schemas.metrics import Metrics, MetricsBucket


def _bucket_lines(header: str, bucket: MetricsBucket, with_messages: bool) -> list[str]:
    lines = [f"{header}: {bucket.count}"]
    for component in bucket.components:
        lines.append(f"  • {component.label()}")
        if with_messages and component.message:
            lines.append(f"    Message: {component.message}")
    lines.append("")
    return lines


def format_metrics(metrics: Metrics) -> list[str]:
    """Render *metrics* as report lines (success, skipped, failed)."""
    lines = ["", f"Total Components Processed: {metrics.total}", ""]
    lines += _bucket_lines("✓ Successfully Enriched", metrics.success, with_messages=False)
    lines += _bucket_lines("⊘ Skipped", metrics.skipped, with_messages=True)
    lines += _bucket_lines("✗ Failed", metrics.fail, with_messages=True)
    return lines


def log_metrics(log: Callable[[str], object], metrics: Metrics) -> None:
    """Send each report line to *log* (e.g. ``print`` or ``typer.echo``)."""
    for line in format_metrics(metrics):
        log(line)
