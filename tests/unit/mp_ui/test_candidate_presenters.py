import pytest
from rich.console import Console

from mp_picker.models import session_candidate, worktree_candidate
from mp_ui.presenters.candidates import annotation_text, build_preview, build_session_table
from mp_ui.tui.system.components.presenter import RichPresenter
from mp_ui.tui.system.components.table import RichTablePresenter
from mp_ui.tui.system.models import TableModel

pytestmark = pytest.mark.unit_ui


def test_annotation_text_for_sessions() -> None:
    assert annotation_text(session_candidate("w", project="api", windows=1)) == "api  1 win"
    assert (
        annotation_text(session_candidate("w", is_attached=True, windows=3))
        == "3 wins  attached"
    )


def test_annotation_text_for_worktrees() -> None:
    candidate = worktree_candidate("/r", branch="main", short_commit="abc1234", is_dirty=True, is_main=True)
    assert annotation_text(candidate) == "abc1234  dirty  main"


def test_preview_renders_worktree_details() -> None:
    console = Console(width=80, record=True)
    console.print(build_preview(worktree_candidate("/srv/repo-x", branch="x", is_dirty=True)))
    text = console.export_text()
    assert "/srv/repo-x" in text
    assert "uncommitted changes" in text


def test_rich_presenters_print_through_console() -> None:
    console = Console(width=80, record=True)
    RichPresenter(console).error("boom")
    RichTablePresenter(console).show(TableModel(title="tmux sessions", columns=["Session"], rows=[["work"]]))
    text = console.export_text()
    assert "✖ boom" in text
    assert "tmux sessions" in text
    assert "work" in text


def test_table_title_is_not_wrapped_for_narrow_content() -> None:
    console = Console(width=80, record=True)
    RichTablePresenter(console).show(TableModel(title="git worktrees", columns=["B"], rows=[["x"]]))
    assert "git worktrees" in console.export_text()


@pytest.mark.parametrize("name", ["[wip]", "[/x]", "[bold]release"])
def test_bracketed_session_names_render_literally(name: str) -> None:
    console = Console(width=80, record=True)
    table = build_session_table([session_candidate(name, project="[api]", windows=1)])

    RichTablePresenter(console).show(table)
    console.print(build_preview(session_candidate(name, project="[api]")))

    text = console.export_text()
    assert text.count(name) == 2
    assert "[api]" in text


def test_presenter_messages_do_not_interpret_markup() -> None:
    console = Console(width=80, record=True)
    RichPresenter(console).error("tmux: can't find session: [/x]")
    assert "[/x]" in console.export_text()
