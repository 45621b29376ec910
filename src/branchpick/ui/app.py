"""Interactive branch picker loop and session wiring."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Protocol

from rich.console import Console

from branchpick.config import AppConfig
from branchpick.git.branch_provider import load_listing
from branchpick.git.checkout import checkout_branch
from branchpick.terminal import RichRenderer, page_size_for, raw_input_mode, viewport_rows_for
from branchpick.ui.keys import Action, KeyEvent, action_for
from branchpick.ui.state import BranchListModel

logger = py_logging.getLogger(__name__)


class Renderer(Protocol):
    viewport_rows: int

    def render(self, model: BranchListModel) -> None: ...


@dataclass
class InteractionLoop:
    model: BranchListModel
    renderer: Renderer
    read_key: Callable[[], KeyEvent]
    checkout: Callable[[str], int | None]

    def dispatch(self, event: KeyEvent) -> bool:
        action = action_for(event)
        if action is None:
            return False
        logger.debug("Dispatching action=%s cursor=%s", action.value, self.model.cursor)
        if action is Action.QUIT:
            self.model.quit()
        elif action is Action.NEXT:
            self.model.move_next()
        elif action is Action.PREVIOUS:
            self.model.move_previous()
        elif action is Action.PAGE_FORWARD:
            self.model.page_forward()
        elif action is Action.PAGE_BACKWARD:
            self.model.page_backward()
        elif action is Action.CONFIRM:
            self.model.confirm()
        return True

    def drive(self) -> None:
        while not self.model.done:
            self.renderer.render(self.model)
            self.dispatch(self.read_key())

    def finish(self) -> int | None:
        """Hand the confirmed branch to the checkout collaborator, at most once."""
        branch = self.model.confirmed_branch
        if branch is None:
            logger.debug("Picker closed without a selection")
            return None
        return self.checkout(branch)


def run_picker(
    config: AppConfig,
    *,
    repo_path: str | Path = ".",
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    console: Console | None = None,
) -> int | None:
    branches = load_listing(
        repo_path,
        runner=runner,
        include_pull_requests=config.show_pull_requests,
        pr_limit=config.pr_limit,
    )
    console = console or Console()
    viewport_rows = viewport_rows_for(len(branches), config.max_height, console.size.height)
    model = BranchListModel.from_listing(branches, page_size=page_size_for(viewport_rows))
    logger.debug(
        "Starting picker branches=%s viewport_rows=%s page_size=%s",
        len(branches),
        viewport_rows,
        model.page_size,
    )

    with raw_input_mode() as keys, RichRenderer(viewport_rows=viewport_rows, console=console) as renderer:
        loop = InteractionLoop(
            model=model,
            renderer=renderer,
            read_key=keys.read_key,
            checkout=partial(checkout_branch, repo_path=repo_path, runner=runner),
        )
        loop.drive()
    return loop.finish()
