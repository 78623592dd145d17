from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mp_adapters.api import SourceBundle, build_sources
from mp_common.api import PickerSettings, configure_logging, load_settings
from mp_picker.api import Mode, PickerEngine
from mp_ui.tui.core.protocols import UI
from mp_ui.tui.system.facade import TUI


@dataclass
class UIContext:
    """Container for UI services and state, initialized lazily."""
    headless: bool = False
    debug: bool = False
    config_path: Optional[Path] = None

    # Lazily initialized services
    _ui: Optional[UI] = None
    _settings: Optional[PickerSettings] = None
    _bundle: Optional[SourceBundle] = None

    @property
    def ui(self) -> UI:
        # --headless only skips the full-screen picker; output still goes to the console.
        if self._ui is None:
            self._ui = TUI()
        return self._ui

    @ui.setter
    def ui(self, value: UI):
        self._ui = value

    @property
    def settings(self) -> PickerSettings:
        if self._settings is None:
            self._settings = load_settings(self.config_path)
        return self._settings

    @settings.setter
    def settings(self, value: PickerSettings):
        self._settings = value

    @property
    def bundle(self) -> Optional[SourceBundle]:
        return self._bundle

    @bundle.setter
    def bundle(self, value: Optional[SourceBundle]):
        self._bundle = value

    def sources(self, mode: Mode, *, repo_path: Optional[Path] = None) -> SourceBundle:
        """Return adapters covering ``mode``, building them on first use."""
        if self._bundle is None or mode not in self._bundle.sources:
            self._bundle = build_sources(self.settings, modes=(mode,), repo_path=repo_path)
        return self._bundle

    def engine(self, mode: Mode, *, repo_path: Optional[Path] = None) -> PickerEngine:
        bundle = self.sources(mode, repo_path=repo_path)
        return PickerEngine(bundle.sources, page_size=self.settings.page_size)


__all__ = [
    "UIContext",
    "configure_logging",
]
