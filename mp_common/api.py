"""Public API surface for mp_common."""

from mp_common.config.settings import PickerSettings, load_settings
from mp_common.errors import (
    AdapterError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    PickerError,
    ValidationError,
)
from mp_common.logs.core import configure_logging

__all__ = [
    "AdapterError",
    "ConfigurationError",
    "ConflictError",
    "NotFoundError",
    "PickerError",
    "PickerSettings",
    "ValidationError",
    "configure_logging",
    "load_settings",
]
