"""
Uplift - Component Metadata Enrichment

Sends local component source bundles to a remote metadata-intelligence
service and writes the returned descriptions back into each component's
configuration file.
"""

from .core import EnrichmentHooks, UpliftConfig, UpliftError
from .pipeline import EnrichmentPipeline, PipelineResult
from .providers import Connection, HttpConnection
from .registry import StaticRegistry, discover_components, expand_wildcards
from .schemas import Metrics

__version__ = "0.1.0"

__all__ = [
    'EnrichmentPipeline',
    'PipelineResult',
    'UpliftConfig',
    'UpliftError',
    'EnrichmentHooks',
    'Connection',
    'HttpConnection',
    'StaticRegistry',
    'discover_components',
    'expand_wildcards',
    'Metrics',
]
