from pathlib import Path

import pytest

from mp_common.config.settings import PickerSettings, load_settings, resolve_config_path
from mp_common.errors import ConfigurationError

pytestmark = pytest.mark.unit_common

_ENV_KEYS = (
    "MP_CONFIG",
    "MP_TMUX_BIN",
    "MP_GIT_BIN",
    "MP_REPO_PATH",
    "MP_WORKTREE_DIR",
    "MP_MAIN_BRANCH",
    "MP_COMMAND_TIMEOUT",
    "MP_PAGE_SIZE",
    "MP_ALLOW_DIRTY_DELETE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def test_defaults_without_any_config() -> None:
    settings = load_settings()
    assert settings == PickerSettings()
    assert settings.command_timeout == 30.0
    assert settings.page_size == 10


def test_flat_toml_file(tmp_path: Path) -> None:
    cfg = tmp_path / "muxpick.toml"
    cfg.write_text('tmux_bin = "/usr/local/bin/tmux"\npage_size = 5\n')

    settings = load_settings(cfg)

    assert settings.tmux_bin == "/usr/local/bin/tmux"
    assert settings.page_size == 5


def test_nested_section_and_xdg_default(tmp_path: Path) -> None:
    cfg = tmp_path / "xdg" / "muxpick" / "config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('[muxpick]\nmain_branch = "trunk"\n')

    assert resolve_config_path() == cfg
    assert load_settings().main_branch == "trunk"


def test_env_overrides_file(tmp_path: Path, monkeypatch) -> None:
    cfg = tmp_path / "c.toml"
    cfg.write_text("page_size = 5\nallow_dirty_delete = true\n")
    monkeypatch.setenv("MP_CONFIG", str(cfg))
    monkeypatch.setenv("MP_PAGE_SIZE", "20")
    monkeypatch.setenv("MP_ALLOW_DIRTY_DELETE", "no")

    settings = load_settings()

    assert settings.page_size == 20
    assert settings.allow_dirty_delete is False


def test_missing_explicit_file_is_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_settings(tmp_path / "nope.toml")


def test_invalid_values_are_reported(tmp_path: Path) -> None:
    cfg = tmp_path / "bad.toml"
    cfg.write_text("page_size = 0\ncolour = 'blue'\n")

    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(cfg)

    errors = excinfo.value.context["errors"]
    assert any(e.startswith("page_size") for e in errors)
    assert any(e.startswith("colour") for e in errors)


def test_malformed_toml(tmp_path: Path) -> None:
    cfg = tmp_path / "broken.toml"
    cfg.write_text("page_size = = 3")
    with pytest.raises(ConfigurationError, match="Cannot read config file"):
        load_settings(cfg)
