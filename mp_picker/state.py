"""Picker state machine: query, ranked list, selection and sub-state prompts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Union

from mp_common.errors import AdapterError, NotFoundError, ValidationError
from mp_picker import matcher
from mp_picker.dispatcher import Action, ActionDispatcher, ActionResult, EffectKind
from mp_picker.events import Command, KeyEvent, KeyKind
from mp_picker.models import Candidate, Mode
from mp_picker.protocols import CandidateSource

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10

_HELP_TEXT: dict[Mode, str] = {
    Mode.SESSION: "Enter:switch  n:new  d:delete  Esc:close",
    Mode.WORKTREE: "Enter:switch  n:new  d:delete  m:merge  Esc:close",
}
_NAME_PROMPT_HELP = "Enter:create  Esc:close"
_CONFIRM_HELP = "y:yes  n:no  Esc:close"

_MODE_COMMANDS: dict[Mode, frozenset[Command]] = {
    Mode.SESSION: frozenset({Command.NEW, Command.DELETE}),
    Mode.WORKTREE: frozenset({Command.NEW, Command.DELETE, Command.MERGE}),
}


@dataclass(frozen=True)
class NamePrompt:
    """Collecting a name for a new session or worktree branch."""

    mode: Mode
    text: str = ""

    @property
    def title(self) -> str:
        return "New session name" if self.mode is Mode.SESSION else "New worktree branch"


@dataclass(frozen=True)
class ConfirmPrompt:
    """Waiting for a yes/no before a destructive action."""

    action: Action
    candidate: Candidate
    message: str


Prompt = Union[NamePrompt, ConfirmPrompt]


@dataclass(frozen=True)
class StatusMessage:
    level: str
    text: str


@dataclass
class PickerState:
    mode: Mode
    query: str = ""
    all_candidates: list[Candidate] = field(default_factory=list)
    filtered: list[matcher.Match] = field(default_factory=list)
    selection_index: int = -1
    is_open: bool = False
    prompt: Prompt | None = None
    message: StatusMessage | None = None

    @property
    def selected(self) -> Candidate | None:
        if 0 <= self.selection_index < len(self.filtered):
            return self.filtered[self.selection_index].candidate
        return None


@dataclass(frozen=True)
class PickerView:
    """Immutable frame handed to render surfaces."""

    mode: Mode
    query: str
    rows: tuple[matcher.Match, ...]
    selection_index: int
    prompt: Prompt | None
    message: StatusMessage | None
    help_text: str
    total: int

    @property
    def selected(self) -> Candidate | None:
        if 0 <= self.selection_index < len(self.rows):
            return self.rows[self.selection_index].candidate
        return None


@dataclass(frozen=True)
class PickerResult:
    mode: Mode
    switched_to: Candidate | None = None

    @property
    def cancelled(self) -> bool:
        return self.switched_to is None


DispatcherFactory = Callable[[CandidateSource], ActionDispatcher]


class PickerEngine:
    """Single-threaded state machine driven one key event at a time."""

    def __init__(
        self,
        sources: Mapping[Mode, CandidateSource],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        dispatcher_factory: DispatcherFactory = ActionDispatcher,
    ) -> None:
        self._sources = dict(sources)
        self._page_size = max(1, page_size)
        self._dispatcher_factory = dispatcher_factory
        self._dispatcher: ActionDispatcher | None = None
        self.state = PickerState(mode=Mode.SESSION)
        self.result: PickerResult | None = None

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def dispatcher(self) -> ActionDispatcher:
        if self._dispatcher is None:
            raise RuntimeError("Picker is not open")
        return self._dispatcher

    def open(self, mode: Mode, *, query: str = "") -> None:
        source = self._sources.get(mode)
        if source is None:
            raise ValueError(f"No candidate source configured for {mode.value} mode")
        self._dispatcher = self._dispatcher_factory(source)
        self.state = PickerState(mode=mode, query=query, is_open=True)
        self.result = None
        logger.debug("Opening picker in %s mode", mode.value)
        self.refresh()

    def close(self, switched_to: Candidate | None = None) -> None:
        mode = self.state.mode
        self.result = PickerResult(mode=mode, switched_to=switched_to)
        self.state = PickerState(mode=mode)
        self._dispatcher = None

    def view(self) -> PickerView:
        state = self.state
        if isinstance(state.prompt, NamePrompt):
            help_text = _NAME_PROMPT_HELP
        elif isinstance(state.prompt, ConfirmPrompt):
            help_text = _CONFIRM_HELP
        else:
            help_text = _HELP_TEXT[state.mode]
        return PickerView(
            mode=state.mode,
            query=state.query,
            rows=tuple(state.filtered),
            selection_index=state.selection_index,
            prompt=state.prompt,
            message=state.message,
            help_text=help_text,
            total=len(state.all_candidates),
        )

    def refresh(self, *, select_id: str | None = None) -> None:
        """Re-snapshot the active source and re-filter against the current query."""
        current = self.state.selected
        preferred = select_id or (current.id if current else None)
        try:
            snapshot = list(self.dispatcher.source.list())
        except AdapterError as exc:
            logger.warning("Snapshot failed: %s", exc)
            self._set_message("error", str(exc))
            snapshot = list(self.state.all_candidates)
        self.state.all_candidates = snapshot
        self._refilter(preferred)

    def handle(self, event: KeyEvent) -> None:
        if not self.state.is_open:
            return
        self.state.message = None

        if event.kind is KeyKind.ESCAPE:
            self.close()
            return

        prompt = self.state.prompt
        if isinstance(prompt, NamePrompt):
            self._handle_name_prompt(prompt, event)
            return
        if isinstance(prompt, ConfirmPrompt):
            self._handle_confirm(prompt, event)
            return

        kind = event.kind
        if kind is KeyKind.CHAR:
            command = self._command_for_char(event.char)
            if command is not None:
                self._command(command)
            else:
                self._set_query(self.state.query + event.char)
        elif kind is KeyKind.COMMAND:
            self._command(Command(event.char))
        elif kind is KeyKind.BACKSPACE:
            if self.state.query:
                self._set_query(self.state.query[:-1])
        elif kind is KeyKind.UP:
            self.move(-1)
        elif kind is KeyKind.DOWN:
            self.move(1)
        elif kind is KeyKind.PAGE_UP:
            self.move(-self._page_size)
        elif kind is KeyKind.PAGE_DOWN:
            self.move(self._page_size)
        elif kind is KeyKind.ENTER:
            selected = self.state.selected
            if selected is not None:
                self._perform(Action.SWITCH, selected)

    def move(self, delta: int) -> None:
        if not self.state.filtered:
            return
        last = len(self.state.filtered) - 1
        self.state.selection_index = max(0, min(self.state.selection_index + delta, last))

    def _command_for_char(self, char: str) -> Command | None:
        # Command letters only act as commands while the query is empty.
        if self.state.query:
            return None
        try:
            command = Command(char)
        except ValueError:
            return None
        return command if command in _MODE_COMMANDS[self.state.mode] else None

    def _command(self, command: Command) -> None:
        if command is Command.NEW:
            self.state.prompt = NamePrompt(mode=self.state.mode)
            return

        action = Action.DELETE if command is Command.DELETE else Action.MERGE
        candidate = self.state.selected
        if candidate is None:
            return
        try:
            self.dispatcher.validate(action, candidate)
        except ValidationError as exc:
            self._set_message("error", str(exc))
            return
        self.state.prompt = ConfirmPrompt(
            action=action,
            candidate=candidate,
            message=self._confirm_message(action, candidate),
        )

    def _confirm_message(self, action: Action, candidate: Candidate) -> str:
        if action is Action.MERGE:
            return f"Merge '{candidate.label}' into the main branch?"
        if self.state.mode is Mode.SESSION:
            return f"Delete session '{candidate.label}'?"
        if candidate.is_dirty:
            return f"Worktree '{candidate.label}' has uncommitted changes. Delete anyway?"
        return f"Delete worktree '{candidate.label}'?"

    def _handle_name_prompt(self, prompt: NamePrompt, event: KeyEvent) -> None:
        if event.kind is KeyKind.CHAR:
            self.state.prompt = NamePrompt(prompt.mode, prompt.text + event.char)
        elif event.kind is KeyKind.BACKSPACE:
            self.state.prompt = NamePrompt(prompt.mode, prompt.text[:-1])
        elif event.kind is KeyKind.ENTER:
            self.state.prompt = None
            name = prompt.text.strip()
            if name:
                self._perform(Action.CREATE, name=name)

    def _handle_confirm(self, prompt: ConfirmPrompt, event: KeyEvent) -> None:
        answer = event.char.lower() if event.kind is KeyKind.CHAR else ""
        if event.kind is KeyKind.ENTER or answer == "y":
            self.state.prompt = None
            self._perform(prompt.action, prompt.candidate)
        elif answer == "n":
            self.state.prompt = None

    def _perform(
        self,
        action: Action,
        candidate: Candidate | None = None,
        *,
        name: str | None = None,
    ) -> ActionResult:
        result = self.dispatcher.perform(action, candidate, name=name)
        if not result.ok:
            error = result.error
            if isinstance(error, NotFoundError):
                self.refresh()
            else:
                self._set_message("error", str(error))
            return result

        effect = result.effect
        assert effect is not None
        if effect.kind is EffectKind.SWITCHED:
            self.close(switched_to=candidate)
        elif effect.kind is EffectKind.CREATED:
            self.refresh(select_id=effect.candidate_id)
            if not self._is_filtered(effect.candidate_id):
                # The query hides the new candidate; drop it so the selection lands.
                self.state.query = ""
                self._refilter(effect.candidate_id)
            self._announce(f"Created {name}")
        else:
            self.refresh()
            verb = "Deleted" if effect.kind is EffectKind.DELETED else "Merged"
            self._announce(f"{verb} {candidate.label if candidate else effect.candidate_id}")
        return result

    def _set_query(self, query: str) -> None:
        current = self.state.selected
        self.state.query = query
        self._refilter(current.id if current else None)

    def _refilter(self, preferred_id: str | None) -> None:
        filtered = matcher.match(self.state.query, self.state.all_candidates)
        self.state.filtered = filtered
        if not filtered:
            self.state.selection_index = -1
            return
        self.state.selection_index = 0
        if preferred_id is not None:
            for idx, item in enumerate(filtered):
                if item.candidate.id == preferred_id:
                    self.state.selection_index = idx
                    break

    def _is_filtered(self, candidate_id: str | None) -> bool:
        return any(item.candidate.id == candidate_id for item in self.state.filtered)

    def _set_message(self, level: str, text: str) -> None:
        self.state.message = StatusMessage(level=level, text=text)

    def _announce(self, text: str) -> None:
        # A failed refresh already left an error message; keep it visible.
        if self.state.message is None:
            self._set_message("success", text)
