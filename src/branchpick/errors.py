"""Error model shared by the branch data source, the picker and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit statuses; the values are part of the CLI contract."""

    SUCCESS = 0
    INVALID_ARGS = 2
    RUNTIME_ERROR = 4
    GIT_ERROR = 5
    CHECKOUT_ERROR = 6
    UNSUPPORTED_PLATFORM = 8


@dataclass
class BranchPickError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message

    def report(self) -> str:
        return user_facing_error(self.message, hint=self.hint)


def user_facing_error(message: str, *, hint: str = "") -> str:
    """Format the stderr text shown after the picker has released the terminal."""
    lines = [f"branchpick: {message.rstrip('.')}"]
    if hint:
        lines.append(f"  hint: {hint}")
    return "\n".join(lines)
