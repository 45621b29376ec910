"""Local branch provider."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path

from branchpick.errors import BranchPickError, ExitCode
from branchpick.git.models import BranchRecord
from branchpick.git.pull_requests import DEFAULT_PR_LIMIT, fetch_pr_map

logger = py_logging.getLogger(__name__)

FIELD_DELIMITER = "|"
REF_FIELDS = (
    "%(HEAD)",
    "%(refname:short)",
    "%(upstream:track,nobracket)",
    "%(committerdate:relative)",
    "%(committerdate:unix)",
    "%(upstream:short)",
)
REF_FORMAT = FIELD_DELIMITER.join(REF_FIELDS)

Runner = Callable[..., subprocess.CompletedProcess]


def _run_git(repo: Path, args: list[str], runner: Runner) -> subprocess.CompletedProcess:
    cmd = ["git", "-C", str(repo), *args]
    return runner(cmd, capture_output=True, encoding="utf-8", errors="replace", check=False)


def _parse_epoch(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def _split_lines(stdout: str) -> list[str]:
    # Only newline separates records; ref names may contain other line breaks.
    lines = [line.removesuffix("\r") for line in stdout.split("\n")]
    return [line for line in lines if line]


def parse_branch_line(line: str, pr_map: Mapping[str, int] | None = None) -> BranchRecord | None:
    parts = line.split(FIELD_DELIMITER)
    if len(parts) != len(REF_FIELDS):
        return None
    head, name, track, relative_date, epoch, upstream = parts
    return BranchRecord(
        name=name,
        is_current=bool(head.strip()),
        has_upstream=bool(upstream.strip()),
        tracking_info=track,
        last_commit_display=relative_date,
        last_commit_epoch=_parse_epoch(epoch),
        pr_number=(pr_map or {}).get(name),
    )


def parse_branch_lines(stdout: str, pr_map: Mapping[str, int] | None = None) -> list[BranchRecord]:
    """Parse ``for-each-ref`` output, newest tip commit first.

    Lines without exactly six fields are skipped. ``sorted`` is stable, so
    branches with equal timestamps keep git's ordering.
    """
    records: list[BranchRecord] = []
    seen: set[str] = set()
    for line in _split_lines(stdout):
        record = parse_branch_line(line, pr_map)
        if record is None:
            logger.debug("Skipping malformed ref line=%r", line)
            continue
        if record.name in seen:
            continue
        seen.add(record.name)
        records.append(record)
    return sorted(records, key=lambda record: record.last_commit_epoch, reverse=True)


def fetch_branches(
    repo_path: str | Path = ".",
    *,
    runner: Runner = subprocess.run,
    pr_map: Mapping[str, int] | None = None,
) -> list[BranchRecord]:
    repo = Path(repo_path)
    logger.debug("Listing local branches repo=%s", repo)

    try:
        listing = _run_git(repo, ["for-each-ref", f"--format={REF_FORMAT}", "refs/heads/"], runner)
    except OSError as exc:
        logger.error("git is unavailable repo=%s error=%s", repo, exc)
        raise BranchPickError(
            "git executable not found",
            code=ExitCode.GIT_ERROR,
            hint="Install git and make sure it is on PATH.",
        ) from exc

    if listing.returncode != 0:
        stderr = (listing.stderr or "").strip()
        logger.error("Failed to list local branches repo=%s stderr=%s", repo, stderr)
        raise BranchPickError(
            f"Failed to list local branches: {stderr or f'git exited with {listing.returncode}'}",
            code=ExitCode.GIT_ERROR,
            hint="Run the command inside a git repository.",
        )

    branches = parse_branch_lines(listing.stdout or "", pr_map)
    logger.debug("Discovered %s local branches repo=%s", len(branches), repo)
    return branches


def load_listing(
    repo_path: str | Path = ".",
    *,
    runner: Runner = subprocess.run,
    include_pull_requests: bool = True,
    pr_limit: int = DEFAULT_PR_LIMIT,
) -> list[BranchRecord]:
    pr_map = fetch_pr_map(repo_path, runner=runner, limit=pr_limit) if include_pull_requests else None
    return fetch_branches(repo_path, runner=runner, pr_map=pr_map)
