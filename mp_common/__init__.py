"""Shared helpers for muxpick."""

from mp_common.api import PickerSettings, configure_logging, load_settings

__all__ = ["configure_logging", "load_settings", "PickerSettings"]
