"""Scoped raw keyboard input for the picker."""

from __future__ import annotations

import logging as py_logging
import os
import select
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TextIO

from branchpick.errors import BranchPickError, ExitCode
from branchpick.ui.keys import ESC, KeyEvent, decode_key, is_escape_prefix

logger = py_logging.getLogger(__name__)

ESCAPE_TIMEOUT_SECONDS = 0.05

ByteReader = Callable[[int, int], bytes]
ReadyProbe = Callable[[int, float], bool]


def _select_ready(fd: int, timeout: float) -> bool:
    readable, _, _ = select.select([fd], [], [], timeout)
    return bool(readable)


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


class KeyReader:
    def __init__(
        self,
        fd: int,
        *,
        read: ByteReader = os.read,
        ready: ReadyProbe = _select_ready,
        escape_timeout: float = ESCAPE_TIMEOUT_SECONDS,
    ) -> None:
        self._fd = fd
        self._read = read
        self._ready = ready
        self._escape_timeout = escape_timeout

    def _read_byte(self) -> bytes:
        data = self._read(self._fd, 1)
        if not data:
            raise BranchPickError(
                "Terminal input closed",
                code=ExitCode.RUNTIME_ERROR,
                hint="Run branchpick from an interactive terminal.",
            )
        return data

    def _read_chunk(self) -> bytes:
        data = self._read_byte()
        if data == ESC:
            while is_escape_prefix(data) and self._ready(self._fd, self._escape_timeout):
                data += self._read_byte()
            if decode_key(data) is None:
                # Unknown sequence: drop whatever the terminal already sent for it.
                while self._ready(self._fd, 0):
                    self._read_byte()
            return data
        for _ in range(_utf8_length(data[0]) - 1):
            data += self._read_byte()
        return data

    def read_key(self) -> KeyEvent:
        """Block until one recognizable key press arrives."""
        while True:
            chunk = self._read_chunk()
            event = decode_key(chunk)
            if event is not None:
                return event
            logger.debug("Ignoring undecodable input=%r", chunk)


def _raw_attributes(saved: list, termios_module) -> list:
    attrs = list(saved)
    attrs[3] &= ~(termios_module.ECHO | termios_module.ICANON | termios_module.ISIG | termios_module.IEXTEN)
    control_chars = list(attrs[6])
    control_chars[termios_module.VMIN] = 1
    control_chars[termios_module.VTIME] = 0
    attrs[6] = control_chars
    return attrs


@contextmanager
def raw_input_mode(stream: TextIO | None = None) -> Iterator[KeyReader]:
    """Switch the input terminal to unbuffered, non-echoing mode.

    Signal generation is disabled as well, so ctrl+c arrives as a key
    press. The saved terminal attributes are restored on every exit path.
    """
    source = stream or sys.stdin
    if not source.isatty():
        raise BranchPickError(
            "Standard input is not a terminal",
            code=ExitCode.RUNTIME_ERROR,
            hint="Run branchpick from an interactive terminal.",
        )
    try:
        import termios
    except ImportError as exc:
        raise BranchPickError(
            "Raw terminal input is unavailable on this platform",
            code=ExitCode.UNSUPPORTED_PLATFORM,
            hint="Use a POSIX terminal.",
        ) from exc

    fd = source.fileno()
    saved = termios.tcgetattr(fd)
    logger.debug("Entering raw input mode fd=%s", fd)
    try:
        termios.tcsetattr(fd, termios.TCSADRAIN, _raw_attributes(saved, termios))
        yield KeyReader(fd)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        logger.debug("Restored terminal mode fd=%s", fd)
