"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .config import MAX_MAX_HEIGHT, MIN_MAX_HEIGHT, AppConfig, load_config
from .errors import BranchPickError, ExitCode, user_facing_error
from .logging import configure_logging, default_log_path

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

Picker = Callable[[AppConfig, Path], int | None]


def _max_height_type(value: str) -> int:
    try:
        height = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("--max-height must be an integer") from exc
    if height < MIN_MAX_HEIGHT or height > MAX_MAX_HEIGHT:
        raise argparse.ArgumentTypeError(
            f"--max-height must be between {MIN_MAX_HEIGHT} and {MAX_MAX_HEIGHT}"
        )
    return height


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="branchpick",
        description="Pick a local git branch, most recently committed first, and check it out.",
    )
    parser.add_argument("-C", "--repo", type=Path, default=Path("."), help="Repository to operate in")
    parser.add_argument("--max-height", type=_max_height_type, default=None)
    parser.add_argument(
        "--no-pr",
        action="store_true",
        help="Skip the GitHub CLI pull request lookup",
    )
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--log-level", type=_log_level_type, default="WARN")
    parser.add_argument("--log-file", type=Path, default=None)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def resolve_config(namespace: argparse.Namespace) -> AppConfig:
    config = load_config(namespace.config)
    if namespace.max_height is not None:
        config.max_height = namespace.max_height
    if namespace.no_pr:
        config.show_pull_requests = False
    return config


def launch_picker(config: AppConfig, repo_path: Path) -> int | None:
    from branchpick.ui.app import run_picker

    return run_picker(config, repo_path=repo_path)


def main(
    argv: Sequence[str] | None = None,
    *,
    picker: Picker | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level, log_file=log_path)

    try:
        config = resolve_config(namespace)
        logger.debug(
            "Starting picker repo=%s max_height=%s pull_requests=%s",
            namespace.repo,
            config.max_height,
            config.show_pull_requests,
        )
        launcher = picker or launch_picker
        launcher(config, namespace.repo)
        return int(ExitCode.SUCCESS)
    except BranchPickError as exc:
        logger.error(
            "Handled BranchPickError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(exc.report(), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        hint = f"Inspect logs: {log_path}"
        print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
