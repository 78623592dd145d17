"""Public API surface for mp_picker."""

from mp_picker.dispatcher import Action, ActionDispatcher, ActionResult, Effect, EffectKind
from mp_picker.events import Command, KeyEvent, KeyKind
from mp_picker.loop import run_picker
from mp_picker.matcher import Match, MatchScore, match
from mp_picker.models import (
    Candidate,
    CandidateKind,
    Mode,
    SessionAnnotations,
    WorktreeAnnotations,
    session_candidate,
    worktree_candidate,
)
from mp_picker.protocols import CandidateSource, MergeCapable, RenderSurface
from mp_picker.state import (
    ConfirmPrompt,
    NamePrompt,
    PickerEngine,
    PickerResult,
    PickerState,
    PickerView,
    StatusMessage,
)

__all__ = [
    "Action",
    "ActionDispatcher",
    "ActionResult",
    "Candidate",
    "CandidateKind",
    "CandidateSource",
    "Command",
    "ConfirmPrompt",
    "Effect",
    "EffectKind",
    "KeyEvent",
    "KeyKind",
    "Match",
    "MatchScore",
    "MergeCapable",
    "Mode",
    "NamePrompt",
    "PickerEngine",
    "PickerResult",
    "PickerState",
    "PickerView",
    "RenderSurface",
    "SessionAnnotations",
    "StatusMessage",
    "WorktreeAnnotations",
    "match",
    "run_picker",
    "session_candidate",
    "worktree_candidate",
]
