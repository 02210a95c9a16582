"""Connections to the remote enrichment service."""

from .base import Connection
from .http import HttpConnection

__all__ = ["Connection", "HttpConnection"]
