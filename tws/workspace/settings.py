"""Tool configuration loaded from TWS_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path("~/.config/tmux/workspace.yaml")


class TwsSettings(BaseSettings):
    """tws settings.

    All fields are read from environment variables with the ``TWS_`` prefix.
    For example, ``TWS_SOCKET_NAME=work`` maps to ``socket_name``.  Command
    line options take precedence over these values.
    """

    model_config = SettingsConfigDict(
        env_prefix="TWS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"

    # -- Workspace file --------------------------------------------------------
    config_path: Path = DEFAULT_CONFIG_PATH
    """Workspace file read by up/restart/diff and written by snapshot."""

    strict: bool = False
    """Reject malformed lines and duplicate items instead of dropping them."""

    # -- tmux ------------------------------------------------------------------
    socket_name: str | None = None
    """tmux ``-L`` socket name; None means the default server."""

    tmux_bin: str = "tmux"

    wait_for_tick: bool = False
    """Also space group creation across clock seconds (see reconciler)."""

    @field_validator("config_path")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()


@lru_cache(maxsize=1)
def get_settings() -> TwsSettings:
    """Return a cached settings instance."""
    return TwsSettings()
