"""Interactive picker engine for tmux sessions and git worktrees."""

from mp_picker.api import Mode, PickerEngine, PickerResult, run_picker

__all__ = ["Mode", "PickerEngine", "PickerResult", "run_picker"]
