from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

from mp_picker.events import KeyEvent
from mp_picker.models import Candidate, Mode

if TYPE_CHECKING:
    from mp_picker.state import PickerView


class CandidateSource(Protocol):
    """Adapter over one external tool; every call reflects live state."""

    mode: Mode

    def list(self) -> Sequence[Candidate]: ...

    def create(self, name: str) -> Candidate: ...

    def delete(self, candidate_id: str) -> None: ...

    def switch_to(self, candidate_id: str) -> None: ...


@runtime_checkable
class MergeCapable(Protocol):
    def merge(self, candidate_id: str) -> None: ...


class RenderSurface(Protocol):
    def render(self, view: "PickerView") -> None: ...

    def next_event(self) -> KeyEvent | None: ...
