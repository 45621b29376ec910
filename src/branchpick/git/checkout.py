"""Branch checkout collaborator."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from branchpick.errors import BranchPickError, ExitCode

logger = py_logging.getLogger(__name__)


def checkout_branch(
    branch: str,
    repo_path: str | Path = ".",
    *,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> int:
    # stdout/stderr are inherited so git reports success or failure itself.
    repo = Path(repo_path)
    logger.info("Checking out branch=%s repo=%s", branch, repo)
    try:
        result = runner(["git", "-C", str(repo), "checkout", branch], check=False)
    except OSError as exc:
        logger.error("git is unavailable repo=%s error=%s", repo, exc)
        raise BranchPickError(
            "git executable not found",
            code=ExitCode.GIT_ERROR,
            hint="Install git and make sure it is on PATH.",
        ) from exc

    if result.returncode != 0:
        logger.error("Checkout failed branch=%s code=%s", branch, result.returncode)
        raise BranchPickError(
            f"Checkout of {branch} failed",
            code=ExitCode.CHECKOUT_ERROR,
            hint="Review the git output above, then commit or stash local changes.",
        )
    return int(ExitCode.SUCCESS)
