"""Stable UI API surface."""

from __future__ import annotations

from mp_ui.cli import app, ctx_store, main
from mp_ui.presenters.candidates import build_session_table, build_worktree_table
from mp_ui.tui.screens.picker_screen import PickerScreen
from mp_ui.tui.system.facade import TUI
from mp_ui.tui.system.headless import HeadlessSurface, HeadlessUI
from mp_ui.wiring.dependencies import UIContext

__all__ = [
    "app",
    "main",
    "ctx_store",
    "build_session_table",
    "build_worktree_table",
    "PickerScreen",
    "TUI",
    "HeadlessSurface",
    "HeadlessUI",
    "UIContext",
]
