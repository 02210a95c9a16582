"""
Unified configuration for the Uplift enrichment tool.

Consolidates the remote service, pipeline, document and logging options
into a single configuration class with sensible defaults.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_API_VERSION = "66.0"
ENRICHMENT_PATH_TEMPLATE = "/services/data/v{api_version}/metadata-intelligence/enrichments/on-demand"

ENV_PREFIX = "UPLIFT_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class UpliftConfig:
    """
    Unified configuration for enrichment runs.

    Every stage accepts an optional ``UpliftConfig``; omitting it gives
    the defaults below.
    """

    # === Remote Service ===
    instance_url: Optional[str] = None
    """Base URL of the org hosting the enrichment endpoint"""

    access_token: Optional[str] = None
    """Bearer token sent with every enrichment request"""

    api_version: str = DEFAULT_API_VERSION
    """REST API version used to build the enrichment endpoint path"""

    request_timeout: float = 120.0
    """Per-request timeout in seconds, enforced by the HTTP connection"""

    # === Request Payload ===
    metadata_type: str = "Generic"
    """metadataType sent in every request body"""

    max_tokens: int = 250
    """maxTokens sent in every request body"""

    # === Processing ===
    supported_kind: str = "LightningComponentBundle"
    """The one component kind enrichment supports end-to-end"""

    max_concurrency: Optional[int] = None
    """Upper bound on in-flight requests (None = all at once)"""

    enable_progress_bar: bool = True
    """Show a progress bar while requests are in flight"""

    # === Configuration Document ===
    control_element: str = "ai"
    """Tag of the enrichment-control element under the document root"""

    # === Logging ===
    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"""

    log_dir: Optional[str] = None
    """Directory for log files (None = no file logging)"""

    def __post_init__(self):
        """Validate configuration values after initialization."""
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

        if self.max_concurrency is not None and self.max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be positive, got {self.max_concurrency}")

        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")

        if not self.control_element or not self.control_element.strip():
            raise ValueError("control_element cannot be empty")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"log_level must be a standard logging level, got {self.log_level}")

    @property
    def enrichment_endpoint(self) -> str:
        """Path of the on-demand enrichment endpoint for ``api_version``."""
        return ENRICHMENT_PATH_TEMPLATE.format(api_version=self.api_version)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides) -> 'UpliftConfig':
        """Build a configuration from ``UPLIFT_*`` environment variables.

        A ``.env`` file (``dotenv_path``, else the nearest one above the
        working directory) is loaded first (without overriding variables that
        are already set). Explicit keyword ``overrides`` win over both.
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))

        values = {}
        env = {
            "instance_url": ("INSTANCE_URL", str),
            "access_token": ("ACCESS_TOKEN", str),
            "api_version": ("API_VERSION", str),
            "request_timeout": ("REQUEST_TIMEOUT", float),
            "max_concurrency": ("MAX_CONCURRENCY", int),
            "enable_progress_bar": ("PROGRESS_BAR", _env_bool),
            "control_element": ("CONTROL_ELEMENT", str),
            "log_level": ("LOG_LEVEL", str),
            "log_dir": ("LOG_DIR", str),
        }
        for field_name, (suffix, convert) in env.items():
            raw = os.environ.get(ENV_PREFIX + suffix)
            if raw is not None and raw != "":
                values[field_name] = convert(raw)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @classmethod
    def for_development(cls) -> 'UpliftConfig':
        """Create configuration suited to local debugging."""
        return cls(
            max_concurrency=2,   # Easier to follow in logs
            enable_progress_bar=True,
            log_level="DEBUG"
        )

    @classmethod
    def for_ci(cls) -> 'UpliftConfig':
        """Create configuration for non-interactive runs."""
        return cls(
            enable_progress_bar=False,  # No terminal to draw on
            log_level="WARNING"
        )
