"""Pipeline stages: classify -> build bundles -> dispatch -> merge -> aggregate."""

from .bundler import MIME_TYPES, build_bundles, build_bundles_sync, get_mime_type
from .classifier import Classification, classify, classify_requests, select_eligible
from .dispatcher import dispatch
from .merger import merge_results
from .metrics import aggregate

__all__ = [
    "MIME_TYPES",
    "build_bundles",
    "build_bundles_sync",
    "get_mime_type",
    "Classification",
    "classify",
    "classify_requests",
    "select_eligible",
    "dispatch",
    "merge_results",
    "aggregate",
]
