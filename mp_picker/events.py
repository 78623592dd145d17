"""Discrete key events delivered by a render surface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyKind(str, Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    ENTER = "enter"
    ESCAPE = "escape"
    COMMAND = "command"


class Command(str, Enum):
    NEW = "n"
    DELETE = "d"
    MERGE = "m"


@dataclass(frozen=True)
class KeyEvent:
    kind: KeyKind
    char: str = ""

    @classmethod
    def typed(cls, char: str) -> "KeyEvent":
        return cls(KeyKind.CHAR, char)

    @classmethod
    def command(cls, command: Command) -> "KeyEvent":
        return cls(KeyKind.COMMAND, command.value)


UP = KeyEvent(KeyKind.UP)
DOWN = KeyEvent(KeyKind.DOWN)
PAGE_UP = KeyEvent(KeyKind.PAGE_UP)
PAGE_DOWN = KeyEvent(KeyKind.PAGE_DOWN)
ENTER = KeyEvent(KeyKind.ENTER)
ESCAPE = KeyEvent(KeyKind.ESCAPE)
BACKSPACE = KeyEvent(KeyKind.BACKSPACE)
