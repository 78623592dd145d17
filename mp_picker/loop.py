"""Pull-style input loop for surfaces that hand out one key event at a time."""

from __future__ import annotations

from mp_picker.events import ESCAPE
from mp_picker.models import Mode
from mp_picker.protocols import RenderSurface
from mp_picker.state import PickerEngine, PickerResult


def run_picker(
    engine: PickerEngine,
    surface: RenderSurface,
    mode: Mode,
    *,
    query: str = "",
) -> PickerResult:
    """Open the picker and feed it events until it closes.

    Each action blocks inside ``engine.handle``, so no further events are read
    until it returns. A surface that runs out of input closes the picker as if
    Escape had been pressed.
    """
    engine.open(mode, query=query)
    while engine.is_open:
        surface.render(engine.view())
        event = surface.next_event()
        engine.handle(event if event is not None else ESCAPE)
    assert engine.result is not None
    return engine.result
