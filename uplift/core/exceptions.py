"""
Custom exceptions for the Uplift enrichment tool.

Provides specific exception types for the different failure modes of the
enrichment pipeline, with the offending component attached as context.
"""

from __future__ import annotations

from dataclasses import dataclass


class UpliftError(Exception):
    """Base exception for all enrichment-related errors.

    Attributes:
        message: Human-readable error description.
        component: Component name involved (``None`` for non-component errors).
        path: File path involved (``None`` if not file-specific).
    """

    def __init__(self, message: str, component: str | None = None, path: str | None = None):
        self.message = message
        self.component = component
        self.path = path

        # Build descriptive error message
        error_parts = [message]
        if component is not None:
            error_parts.append(f"Component: {component}")
        if path is not None:
            error_parts.append(f"Path: {path}")

        super().__init__(" | ".join(error_parts))


class ConfigurationError(UpliftError):
    """Raised when configuration is invalid or incomplete."""

    pass


class TransportError(UpliftError):
    """Raised when a call to the remote enrichment service fails.

    Covers network errors, non-2xx responses and bodies that are not JSON.

    Attributes:
        status_code: HTTP status of the failed response (``None`` on network errors).
    """

    def __init__(self, message: str, status_code: int | None = None, **kwargs):
        self.status_code = status_code
        super().__init__(message, **kwargs)


class DocumentError(UpliftError):
    """Raised when a configuration document cannot be parsed or rebuilt."""

    pass


class PipelineError(UpliftError):
    """Raised when the pipeline is used incorrectly (e.g. sync run inside a loop)."""

    pass


@dataclass
class ComponentError:
    """Per-component failure record, collected instead of raised."""

    component_name: str
    stage: str
    error: BaseException
    error_type: str = ""

    def __post_init__(self) -> None:
        if not self.error_type:
            self.error_type = type(self.error).__name__

    def __str__(self) -> str:
        return f"ComponentError(component='{self.component_name}', stage='{self.stage}', {self.error_type}: {self.error})"
