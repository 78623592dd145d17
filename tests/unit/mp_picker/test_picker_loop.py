import pytest

from tests.helpers.keys import parse_keys
from mp_picker.loop import run_picker
from mp_picker.models import Mode
from mp_picker.state import PickerEngine

pytestmark = pytest.mark.unit_picker


class ListSurface:
    def __init__(self, events) -> None:
        self.events = list(events)
        self.views = []

    def render(self, view) -> None:
        self.views.append(view)

    def next_event(self):
        return self.events.pop(0) if self.events else None


def test_run_picker_switches_to_selected(session_source) -> None:
    engine = PickerEngine({Mode.SESSION: session_source})
    surface = ListSurface(parse_keys("scr<enter>"))

    result = run_picker(engine, surface, Mode.SESSION)

    assert result.switched_to.label == "scratch"
    assert surface.views[0].query == ""
    assert surface.views[-1].query == "scr"


def test_exhausted_input_acts_as_escape(session_source) -> None:
    engine = PickerEngine({Mode.SESSION: session_source})
    result = run_picker(engine, ListSurface([]), Mode.SESSION, query="rev")
    assert result.cancelled
    assert session_source.calls == []
