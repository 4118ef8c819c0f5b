"""Backend interface for the session/window manager.

The engine never talks to tmux directly: it goes through a
``WorkspaceBackend``.  ``TmuxBackend`` drives the real binary; tests use an
in-memory implementation of the same protocol.

Backend calls are synchronous and never retried.  Failures surface as
``ExternalCallError`` and the caller decides whether they are fatal.
"""

from __future__ import annotations

from typing import NamedTuple, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BackendError(RuntimeError):
    """Base class for manager-side failures."""


class NoServerError(BackendError):
    """No manager server is running (on the selected socket)."""

    def __init__(self, socket_name: str | None = None) -> None:
        self.socket_name = socket_name
        where = f" on socket '{socket_name}'" if socket_name else ""
        super().__init__(f"No tmux server running{where}")


class ExternalCallError(BackendError):
    """A manager command exited non-zero."""

    def __init__(self, args: list[str], returncode: int, stderr: str = "") -> None:
        self.command = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"{' '.join(args)} exited with {returncode}{detail}")


class ToolMissingError(BackendError):
    """The manager binary is not on PATH."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"{tool} is required on PATH")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class LiveGroupInfo(NamedTuple):
    name: str
    created_at: int
    sequence: int | None = None


class LiveItemInfo(NamedTuple):
    index: int
    name: str
    path: str = ""


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class WorkspaceBackend(Protocol):
    """Operations the engine consumes from the session/window manager."""

    def server_reachable(self) -> bool:
        """True if a server is running and answering."""
        ...

    def list_groups(self) -> list[LiveGroupInfo]:
        """All groups, unordered.  Raises ``NoServerError`` without a server."""
        ...

    def group_exists(self, name: str) -> bool: ...

    def create_group(self, name: str, placeholder: str) -> None:
        """Create a detached group holding a single placeholder item."""
        ...

    def set_group_sequence(self, name: str, sequence: int) -> None:
        """Persist the logical creation counter on a group."""
        ...

    def create_item(self, group: str, name: str, path: str | None = None) -> None:
        """Append an item; ``path=None`` lets the manager pick its default."""
        ...

    def list_items(self, group: str) -> list[LiveItemInfo]:
        """Items of a group in display order."""
        ...

    def select_item(self, group: str, index: int) -> None: ...

    def kill_item(self, group: str, index: int) -> None: ...

    def kill_group(self, name: str) -> None: ...

    def kill_server(self) -> None: ...

    def attach(self, group: str | None = None) -> int:
        """Attach the terminal; returns the manager's exit status."""
        ...
