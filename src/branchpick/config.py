"""XDG config loading."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from branchpick.git.pull_requests import DEFAULT_PR_LIMIT

DEFAULT_CONFIG_PATH = Path("~/.config/branchpick/config.toml").expanduser()
DEFAULT_MAX_HEIGHT = 20
MIN_MAX_HEIGHT = 3
MAX_MAX_HEIGHT = 200
NO_PR_ENV = "BRANCHPICK_NO_PR"

_TRUTHY = {"1", "true", "yes", "on"}


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    max_height: int = Field(default=DEFAULT_MAX_HEIGHT, ge=MIN_MAX_HEIGHT, le=MAX_MAX_HEIGHT)
    show_pull_requests: bool = True
    pr_limit: int = Field(default=DEFAULT_PR_LIMIT, ge=1, le=DEFAULT_PR_LIMIT)


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def pull_requests_disabled_by_env() -> bool:
    return os.getenv(NO_PR_ENV, "").strip().lower() in _TRUTHY


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    max_height = raw.get("max_height", cfg.max_height)
    if (
        isinstance(max_height, int)
        and not isinstance(max_height, bool)
        and MIN_MAX_HEIGHT <= max_height <= MAX_MAX_HEIGHT
    ):
        cfg.max_height = max_height

    show_pull_requests = raw.get("show_pull_requests", cfg.show_pull_requests)
    if isinstance(show_pull_requests, bool):
        cfg.show_pull_requests = show_pull_requests

    pr_limit = raw.get("pr_limit", cfg.pr_limit)
    if isinstance(pr_limit, int) and not isinstance(pr_limit, bool) and 1 <= pr_limit <= DEFAULT_PR_LIMIT:
        cfg.pr_limit = pr_limit

    if pull_requests_disabled_by_env():
        cfg.show_pull_requests = False

    return cfg


def load_config(path: str | Path | None = None) -> AppConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return _sanitize({})
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return _sanitize({})
    if not isinstance(raw, dict):
        return _sanitize({})
    return _sanitize(raw)
