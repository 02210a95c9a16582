"""Logging and report helpers."""

from .formatting import format_metrics, log_metrics
from .logger import get_logger, setup_logging

__all__ = ["format_metrics", "log_metrics", "get_logger", "setup_logging"]
