"""
Core configuration, errors and hooks for the Uplift enrichment tool.
"""

from .config import UpliftConfig
from .exceptions import (
    ComponentError,
    ConfigurationError,
    DocumentError,
    PipelineError,
    TransportError,
    UpliftError,
)
from .hooks import (
    ComponentSkippedEvent,
    EnrichmentHooks,
    PipelineEndEvent,
    PipelineStartEvent,
    RequestCompleteEvent,
)

__all__ = [
    'UpliftConfig',
    'ComponentError',
    'ConfigurationError',
    'DocumentError',
    'PipelineError',
    'TransportError',
    'UpliftError',
    'ComponentSkippedEvent',
    'EnrichmentHooks',
    'PipelineEndEvent',
    'PipelineStartEvent',
    'RequestCompleteEvent',
]
