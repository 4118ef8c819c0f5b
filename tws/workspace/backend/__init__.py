"""Session/window manager backends."""

from tws.workspace.backend.base import (
    BackendError,
    ExternalCallError,
    LiveGroupInfo,
    LiveItemInfo,
    NoServerError,
    ToolMissingError,
    WorkspaceBackend,
)
from tws.workspace.backend.tmux import TmuxBackend

__all__ = [
    "BackendError",
    "ExternalCallError",
    "LiveGroupInfo",
    "LiveItemInfo",
    "NoServerError",
    "TmuxBackend",
    "ToolMissingError",
    "WorkspaceBackend",
]
