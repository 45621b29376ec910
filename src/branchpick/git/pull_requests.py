"""Best-effort pull request lookup through the GitHub CLI."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = py_logging.getLogger(__name__)

DEFAULT_PR_LIMIT = 1000


class PullRequestRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    head_ref_name: str = Field(alias="headRefName")
    number: int = Field(ge=0)


_PULL_REQUEST_LIST = TypeAdapter(list[PullRequestRef])


def build_pr_list_command(limit: int = DEFAULT_PR_LIMIT) -> list[str]:
    return ["gh", "pr", "list", "--json", "headRefName,number", "--limit", str(limit)]


def parse_pr_list(payload: str) -> dict[str, int]:
    """Map head branch names to PR numbers; any malformed payload maps to nothing."""
    try:
        entries = _PULL_REQUEST_LIST.validate_json(payload)
    except ValidationError as exc:
        logger.debug("Discarding unparsable gh output errors=%s", exc.error_count())
        return {}
    return {entry.head_ref_name: entry.number for entry in entries}


def fetch_pr_map(
    repo_path: str | Path = ".",
    *,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    limit: int = DEFAULT_PR_LIMIT,
) -> dict[str, int]:
    repo = Path(repo_path)
    command = build_pr_list_command(limit)
    try:
        result = runner(
            command,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            cwd=str(repo),
        )
    except (OSError, ValueError) as exc:
        logger.debug("gh is unavailable repo=%s error=%s", repo, exc)
        return {}

    if result.returncode != 0:
        logger.debug(
            "gh pr list failed repo=%s code=%s stderr=%s",
            repo,
            result.returncode,
            (result.stderr or "").strip(),
        )
        return {}

    pr_map = parse_pr_list(result.stdout or "")
    logger.debug("Resolved %s pull requests repo=%s", len(pr_map), repo)
    return pr_map
