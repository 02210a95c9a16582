"""Configuration document codec."""

from .xml_config import (
    CONTROL_FIELDS,
    ConfigDocument,
    ControlFields,
    is_truthy_flag,
    normalize_blank_lines,
)

__all__ = [
    "CONTROL_FIELDS",
    "ConfigDocument",
    "ControlFields",
    "is_truthy_flag",
    "normalize_blank_lines",
]
