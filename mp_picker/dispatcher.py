"""Maps confirmed picker commands onto candidate-source calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from mp_common.errors import PickerError, ValidationError, error_to_payload
from mp_picker.models import Candidate, Mode
from mp_picker.protocols import CandidateSource, MergeCapable

logger = logging.getLogger(__name__)


class Action(str, Enum):
    SWITCH = "switch"
    CREATE = "create"
    DELETE = "delete"
    MERGE = "merge"


class EffectKind(str, Enum):
    SWITCHED = "switched"
    CREATED = "created"
    DELETED = "deleted"
    MERGED = "merged"


@dataclass(frozen=True)
class Effect:
    kind: EffectKind
    candidate_id: str | None = None


@dataclass(frozen=True)
class ActionResult:
    """Tagged outcome of a dispatched action: exactly one of effect/error is set."""

    effect: Effect | None = None
    error: PickerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, effect: Effect) -> "ActionResult":
        return cls(effect=effect)

    @classmethod
    def failure(cls, error: PickerError) -> "ActionResult":
        return cls(error=error)


def _describe(candidate: Candidate) -> str:
    return candidate.label or candidate.id


class ActionDispatcher:
    """Validates and performs actions against the active candidate source.

    Calls block until the external tool returns. Validation failures are
    reported before the source is touched.
    """

    def __init__(self, source: CandidateSource) -> None:
        self._source = source

    @property
    def source(self) -> CandidateSource:
        return self._source

    @property
    def supports_merge(self) -> bool:
        return self._source.mode is Mode.WORKTREE and isinstance(
            self._source, MergeCapable
        )

    def validate(
        self,
        action: Action,
        candidate: Candidate | None = None,
        *,
        name: str | None = None,
    ) -> None:
        """Raise ValidationError when ``action`` must not reach the source."""
        if action is Action.CREATE:
            if not (name or "").strip():
                raise ValidationError("A name is required")
            return

        if candidate is None:
            raise ValidationError("Nothing selected")

        if action is Action.DELETE and candidate.is_protected:
            if self._source.mode is Mode.SESSION:
                raise ValidationError(
                    f"Cannot delete the attached session '{_describe(candidate)}'",
                    context={"candidate": candidate.id},
                )
            raise ValidationError(
                "Cannot delete the main worktree",
                context={"candidate": candidate.id},
            )

        if action is Action.MERGE:
            if not self.supports_merge:
                raise ValidationError("Merge is only available for worktrees")
            if candidate.is_protected:
                raise ValidationError(
                    "Cannot merge the main worktree into itself",
                    context={"candidate": candidate.id},
                )

    def perform(
        self,
        action: Action,
        candidate: Candidate | None = None,
        *,
        name: str | None = None,
    ) -> ActionResult:
        try:
            self.validate(action, candidate, name=name)
            effect = self._run(action, candidate, name)
        except PickerError as exc:
            logger.info(
                "%s on %s failed: %s",
                action.value,
                candidate.id if candidate else name,
                error_to_payload(exc),
            )
            return ActionResult.failure(exc)
        logger.info("%s completed: %s", action.value, effect.candidate_id)
        return ActionResult.success(effect)

    def _run(
        self, action: Action, candidate: Candidate | None, name: str | None
    ) -> Effect:
        if action is Action.CREATE:
            created = self._source.create((name or "").strip())
            return Effect(EffectKind.CREATED, created.id)

        assert candidate is not None
        if action is Action.SWITCH:
            self._source.switch_to(candidate.id)
            return Effect(EffectKind.SWITCHED, candidate.id)
        if action is Action.DELETE:
            self._source.delete(candidate.id)
            return Effect(EffectKind.DELETED, candidate.id)
        if action is Action.MERGE:
            assert isinstance(self._source, MergeCapable)
            self._source.merge(candidate.id)
            return Effect(EffectKind.MERGED, candidate.id)
        raise ValueError(f"Unsupported action: {action}")
