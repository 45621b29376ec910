"""Terminal key decoding and key-to-action mapping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

ESC = b"\x1b"

UP = "up"
DOWN = "down"
PAGE_UP = "page_up"
PAGE_DOWN = "page_down"
ENTER = "enter"
ESCAPE = "escape"

_ESCAPE_SEQUENCES = {
    b"\x1b[A": UP,
    b"\x1b[B": DOWN,
    b"\x1bOA": UP,
    b"\x1bOB": DOWN,
    b"\x1b[5~": PAGE_UP,
    b"\x1b[6~": PAGE_DOWN,
}


class Action(str, Enum):
    QUIT = "quit"
    NEXT = "next"
    PREVIOUS = "previous"
    PAGE_FORWARD = "page_forward"
    PAGE_BACKWARD = "page_backward"
    CONFIRM = "confirm"


@dataclass(frozen=True)
class KeyEvent:
    code: str
    ctrl: bool = False


_BINDINGS: dict[KeyEvent, Action] = {
    KeyEvent("q"): Action.QUIT,
    KeyEvent("c", ctrl=True): Action.QUIT,
    KeyEvent(DOWN): Action.NEXT,
    KeyEvent("j"): Action.NEXT,
    KeyEvent(UP): Action.PREVIOUS,
    KeyEvent("k"): Action.PREVIOUS,
    KeyEvent(PAGE_DOWN): Action.PAGE_FORWARD,
    KeyEvent(PAGE_UP): Action.PAGE_BACKWARD,
    KeyEvent(ENTER): Action.CONFIRM,
}


def is_escape_prefix(data: bytes) -> bool:
    """True while ``data`` could still grow into a known escape sequence."""
    return any(sequence.startswith(data) and sequence != data for sequence in _ESCAPE_SEQUENCES)


def decode_key(data: bytes) -> KeyEvent | None:
    if not data:
        return None
    if data in _ESCAPE_SEQUENCES:
        return KeyEvent(_ESCAPE_SEQUENCES[data])
    if data == ESC:
        return KeyEvent(ESCAPE)
    if data in (b"\r", b"\n"):
        return KeyEvent(ENTER)
    if len(data) == 1 and 0x01 <= data[0] <= 0x1A:
        return KeyEvent(chr(data[0] + 0x60), ctrl=True)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if len(text) == 1 and text.isprintable():
        return KeyEvent(text)
    return None


def action_for(event: KeyEvent) -> Action | None:
    return _BINDINGS.get(event)
