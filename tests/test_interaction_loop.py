from __future__ import annotations

import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from types import SimpleNamespace

import pytest

from branchpick.config import AppConfig
from branchpick.errors import BranchPickError, ExitCode
from branchpick.git.models import BranchRecord
from branchpick.ui import app as picker_app
from branchpick.ui.app import InteractionLoop
from branchpick.ui.keys import DOWN, ENTER, PAGE_DOWN, PAGE_UP, UP, KeyEvent
from branchpick.ui.state import BranchListModel


class _RecordingRenderer:
    def __init__(self, viewport_rows: int = 5) -> None:
        self.viewport_rows = viewport_rows
        self.frames: list[int | None] = []

    def render(self, model: BranchListModel) -> None:
        self.frames.append(model.cursor)


class _Keys:
    def __init__(self, *events: KeyEvent) -> None:
        self._events = list(events)
        self.reads = 0

    def read_key(self) -> KeyEvent:
        self.reads += 1
        return self._events.pop(0)


def _loop(
    names: list[str],
    events: list[KeyEvent],
    *,
    page_size: int = 1,
    current: str = "",
) -> tuple[InteractionLoop, _RecordingRenderer, _Keys, list[str]]:
    branches = [BranchRecord(name=name, is_current=name == current) for name in names]
    model = BranchListModel.from_listing(branches, page_size=page_size)
    renderer = _RecordingRenderer()
    keys = _Keys(*events)
    checkouts: list[str] = []

    def checkout(branch: str) -> int:
        checkouts.append(branch)
        return 0

    loop = InteractionLoop(model=model, renderer=renderer, read_key=keys.read_key, checkout=checkout)
    return loop, renderer, keys, checkouts


def test_navigate_and_confirm_checks_out_selection() -> None:
    loop, renderer, keys, checkouts = _loop(
        ["a", "b", "c"],
        [KeyEvent(DOWN), KeyEvent("j"), KeyEvent(UP), KeyEvent(ENTER)],
    )

    loop.drive()
    result = loop.finish()

    assert renderer.frames == [0, 1, 2, 1]
    assert keys.reads == 4
    assert loop.model.confirmed_branch == "b"
    assert checkouts == ["b"]
    assert result == 0


def test_quit_keys_end_without_checkout() -> None:
    for key in (KeyEvent("q"), KeyEvent("c", ctrl=True)):
        loop, _, _, checkouts = _loop(["a", "b"], [key])

        loop.drive()

        assert loop.model.done is True
        assert loop.finish() is None
        assert checkouts == []


def test_unmapped_keys_do_not_change_state() -> None:
    loop, renderer, _, _ = _loop(["a", "b"], [KeyEvent("x"), KeyEvent("c"), KeyEvent("q")])

    assert loop.dispatch(KeyEvent("x")) is False
    loop.drive()

    assert renderer.frames == [0, 0, 0]


def test_paging_uses_configured_page_size() -> None:
    loop, renderer, _, _ = _loop(
        [f"b{index}" for index in range(10)],
        [KeyEvent(PAGE_DOWN), KeyEvent(PAGE_DOWN), KeyEvent(PAGE_UP), KeyEvent("q")],
        page_size=4,
    )

    loop.drive()

    assert renderer.frames == [0, 4, 8, 4]


def test_confirm_on_empty_listing_exits_without_checkout() -> None:
    loop, renderer, _, checkouts = _loop([], [KeyEvent(DOWN), KeyEvent(ENTER)])

    loop.drive()

    assert renderer.frames == [None, None]
    assert loop.model.done is True
    assert loop.finish() is None
    assert checkouts == []


def test_loop_stops_reading_after_termination() -> None:
    loop, _, keys, _ = _loop(["a"], [KeyEvent(ENTER), KeyEvent(DOWN)])

    loop.drive()

    assert keys.reads == 1


def test_checkout_failure_is_surfaced_once() -> None:
    model = BranchListModel.from_listing([BranchRecord(name="a")])
    attempts: list[str] = []

    def checkout(branch: str) -> int:
        attempts.append(branch)
        raise BranchPickError("Checkout of a failed", code=ExitCode.CHECKOUT_ERROR)

    loop = InteractionLoop(
        model=model,
        renderer=_RecordingRenderer(),
        read_key=_Keys(KeyEvent(ENTER)).read_key,
        checkout=checkout,
    )
    loop.drive()

    with pytest.raises(BranchPickError):
        loop.finish()
    assert attempts == ["a"]


def test_run_picker_restores_terminal_before_checkout(monkeypatch) -> None:
    events: list[str] = []

    class _Reader:
        def __init__(self) -> None:
            self._keys = [KeyEvent(DOWN), KeyEvent(ENTER)]

        def read_key(self) -> KeyEvent:
            return self._keys.pop(0)

    @contextmanager
    def fake_raw_input_mode() -> Iterator[_Reader]:
        events.append("raw-on")
        try:
            yield _Reader()
        finally:
            events.append("raw-off")

    class _Renderer(_RecordingRenderer):
        def __init__(self, *, viewport_rows: int, console: object) -> None:
            super().__init__(viewport_rows)
            events.append(f"viewport={viewport_rows}")

        def __enter__(self) -> _Renderer:
            return self

        def __exit__(self, *exc_info: object) -> None:
            events.append("renderer-closed")

    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        if cmd[0] == "gh":
            return subprocess.CompletedProcess(cmd, 0, '[{"headRefName":"main","number":3}]', "")
        if "checkout" in cmd:
            events.append(f"checkout={cmd[-1]}")
            return subprocess.CompletedProcess(cmd, 0)
        stdout = "*|feature||now|20|origin/feature\n|main||then|10|origin/main\n"
        return subprocess.CompletedProcess(cmd, 0, stdout, "")

    monkeypatch.setattr(picker_app, "raw_input_mode", fake_raw_input_mode)
    monkeypatch.setattr(picker_app, "RichRenderer", _Renderer)

    console = SimpleNamespace(size=SimpleNamespace(height=40))
    result = picker_app.run_picker(AppConfig(), repo_path="/tmp/repo", runner=runner, console=console)

    assert result == 0
    assert events == ["raw-on", "viewport=4", "renderer-closed", "raw-off", "checkout=main"]


def test_run_picker_propagates_listing_failure_before_raw_mode(monkeypatch) -> None:
    def fail_raw_mode() -> None:
        raise AssertionError("raw mode must not start")

    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        if cmd[0] == "gh":
            return subprocess.CompletedProcess(cmd, 1, "", "")
        return subprocess.CompletedProcess(cmd, 128, "", "fatal: not a git repository")

    monkeypatch.setattr(picker_app, "raw_input_mode", fail_raw_mode)

    with pytest.raises(BranchPickError) as exc:
        picker_app.run_picker(AppConfig(), runner=runner)
    assert exc.value.code == ExitCode.GIT_ERROR
