"""Picker settings: TOML file plus MP_* environment overrides."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from mp_common.config.env import (
    parse_bool_env,
    parse_float_env,
    parse_int_env,
    parse_str_env,
)
from mp_common.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MP_CONFIG"


class PickerSettings(BaseModel):
    """Runtime settings for the picker and its adapters."""

    model_config = ConfigDict(extra="forbid")

    tmux_bin: str = Field(default="tmux", description="tmux executable name or path")
    git_bin: str = Field(default="git", description="git executable name or path")
    repo_path: Optional[Path] = Field(
        default=None,
        description="Repository whose worktrees are listed (defaults to the current directory)",
    )
    worktree_dir: Optional[Path] = Field(
        default=None,
        description="Directory new worktrees are created in (defaults to the main worktree's parent)",
    )
    main_branch: Optional[str] = Field(
        default=None,
        description="Branch merges target (defaults to the main worktree's branch)",
    )
    command_timeout: Optional[float] = Field(
        default=30.0,
        gt=0,
        description="Seconds before an external command is abandoned; unset to wait forever",
    )
    page_size: int = Field(default=10, ge=1, description="Rows moved by PageUp/PageDown")
    allow_dirty_delete: bool = Field(
        default=True,
        description="Force-remove worktrees with uncommitted changes after confirmation",
    )


_ENV_OVERRIDES: dict[str, tuple[str, Callable[[str | None], Any]]] = {
    "MP_TMUX_BIN": ("tmux_bin", parse_str_env),
    "MP_GIT_BIN": ("git_bin", parse_str_env),
    "MP_REPO_PATH": ("repo_path", parse_str_env),
    "MP_WORKTREE_DIR": ("worktree_dir", parse_str_env),
    "MP_MAIN_BRANCH": ("main_branch", parse_str_env),
    "MP_COMMAND_TIMEOUT": ("command_timeout", parse_float_env),
    "MP_PAGE_SIZE": ("page_size", parse_int_env),
    "MP_ALLOW_DIRTY_DELETE": ("allow_dirty_delete", parse_bool_env),
}


def default_config_path() -> Path:
    """Return the XDG location of the config file."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "muxpick" / "config.toml"


def resolve_config_path(explicit: Path | str | None = None) -> Path | None:
    """Pick the config file: explicit path, then $MP_CONFIG, then the XDG default."""
    if explicit is not None:
        path = Path(explicit).expanduser()
        if not path.exists():
            raise ConfigurationError(
                f"Config file not found: {path}", context={"path": path}
            )
        return path
    env_path = parse_str_env(os.environ.get(CONFIG_ENV_VAR))
    if env_path:
        return Path(env_path).expanduser()
    candidate = default_config_path()
    return candidate if candidate.exists() else None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(
            f"Cannot read config file {path}: {exc}",
            context={"path": path},
            cause=exc,
        ) from exc
    # Accept either a flat file or one nested under [muxpick].
    section = data.get("muxpick", data)
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Config section 'muxpick' in {path} must be a table",
            context={"path": path},
        )
    return dict(section)


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for env_key, (field_name, parser) in _ENV_OVERRIDES.items():
        value = parser(os.environ.get(env_key))
        if value is not None:
            overrides[field_name] = value
    return overrides


def load_settings(config_path: Path | str | None = None) -> PickerSettings:
    """Load settings with priority: environment > config file > defaults."""
    raw: dict[str, Any] = {}
    path = resolve_config_path(config_path)
    if path is not None:
        logger.debug("Loading settings from %s", path)
        raw.update(_read_toml(path))
    raw.update(_env_overrides())
    try:
        return PickerSettings.model_validate(raw)
    except PydanticValidationError as exc:
        raise ConfigurationError(
            f"Invalid settings: {exc.error_count()} error(s)",
            context={
                "path": path,
                "errors": [
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in exc.errors()
                ],
            },
            cause=exc,
        ) from exc
