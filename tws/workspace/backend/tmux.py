"""tmux implementation of the WorkspaceBackend protocol.

Every call shells out to the ``tmux`` binary.  When a socket name is set,
``-L <socket>`` is prepended so all calls go to an isolated server.

Session targets use tmux's exact-match prefix (``=name``) so that a session
called ``web`` never resolves to ``webapp``.

The logical creation counter is stored as the session user option
``@tws-sequence`` and read back through the ``list-sessions`` format.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable, Sequence

from loguru import logger

from tws.workspace.backend.base import (
    ExternalCallError,
    LiveGroupInfo,
    LiveItemInfo,
    NoServerError,
    ToolMissingError,
)

SEQUENCE_OPTION = "@tws-sequence"

_NO_SERVER_MARKERS = ("no server running", "error connecting to", "server exited unexpectedly")

Runner = Callable[..., subprocess.CompletedProcess]


def _run_subprocess(argv: Sequence[str], *, capture: bool = True) -> subprocess.CompletedProcess:
    if not capture:
        return subprocess.run(list(argv), check=False)
    return subprocess.run(
        list(argv),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        check=False,
    )


def _session(name: str) -> str:
    return f"={name}"


def _window(group: str, index: int | str = "") -> str:
    return f"={group}:{index}"


class TmuxBackend:
    """Drive a tmux server through its command line.

    ``runner`` receives the full argv and a ``capture`` keyword; it must
    return a ``subprocess.CompletedProcess``.  Tests pass a fake.
    """

    def __init__(
        self,
        socket_name: str | None = None,
        *,
        tmux_bin: str = "tmux",
        runner: Runner | None = None,
    ) -> None:
        self.socket_name = socket_name
        self.tmux_bin = tmux_bin
        self._runner = runner or _run_subprocess

    # -- Plumbing --------------------------------------------------------------

    def ensure_available(self) -> None:
        """Raise ``ToolMissingError`` unless the tmux binary is on PATH."""
        if shutil.which(self.tmux_bin) is None:
            raise ToolMissingError(self.tmux_bin)

    def _argv(self, *args: str) -> list[str]:
        argv = [self.tmux_bin]
        if self.socket_name:
            argv += ["-L", self.socket_name]
        argv.extend(args)
        return argv

    def _call(self, *args: str) -> subprocess.CompletedProcess:
        argv = self._argv(*args)
        logger.debug("tmux: {}", " ".join(argv))
        return self._runner(argv, capture=True)

    def _check(self, *args: str) -> str:
        """Run a command that must succeed; returns its stdout."""
        result = self._call(*args)
        if result.returncode != 0:
            stderr = result.stderr or ""
            if any(marker in stderr.lower() for marker in _NO_SERVER_MARKERS):
                raise NoServerError(self.socket_name)
            raise ExternalCallError(self._argv(*args), result.returncode, stderr)
        return result.stdout or ""

    # -- Query -----------------------------------------------------------------

    def server_reachable(self) -> bool:
        return self._call("list-sessions").returncode == 0

    def list_groups(self) -> list[LiveGroupInfo]:
        fmt = f"#{{session_created}}\t#{{{SEQUENCE_OPTION}}}\t#{{session_name}}"
        out = self._check("list-sessions", "-F", fmt)
        groups = []
        for line in out.splitlines():
            parts = line.split("\t", 2)
            if len(parts) != 3 or not parts[2]:
                continue
            created, sequence, name = parts
            try:
                created_at = int(created)
            except ValueError:
                created_at = 0
            groups.append(LiveGroupInfo(name, created_at, int(sequence) if sequence.isdigit() else None))
        return groups

    def group_exists(self, name: str) -> bool:
        return self._call("has-session", "-t", _session(name)).returncode == 0

    def list_items(self, group: str) -> list[LiveItemInfo]:
        fmt = "#{window_index}\t#{window_name}\t#{pane_current_path}"
        out = self._check("list-windows", "-t", _session(group), "-F", fmt)
        items = []
        for line in out.splitlines():
            parts = line.split("\t", 2)
            if len(parts) < 2 or not parts[0].isdigit():
                continue
            path = parts[2] if len(parts) == 3 else ""
            items.append(LiveItemInfo(int(parts[0]), parts[1], path))
        return items

    # -- Mutation --------------------------------------------------------------

    def create_group(self, name: str, placeholder: str) -> None:
        self._check("new-session", "-d", "-s", name, "-n", placeholder)

    def set_group_sequence(self, name: str, sequence: int) -> None:
        self._check("set-option", "-t", _session(name), SEQUENCE_OPTION, str(sequence))

    def create_item(self, group: str, name: str, path: str | None = None) -> None:
        args = ["new-window", "-t", _window(group), "-n", name]
        if path:
            args += ["-c", path]
        self._check(*args)

    def select_item(self, group: str, index: int) -> None:
        self._check("select-window", "-t", _window(group, index))

    def kill_item(self, group: str, index: int) -> None:
        self._check("kill-window", "-t", _window(group, index))

    def kill_group(self, name: str) -> None:
        self._check("kill-session", "-t", _session(name))

    def kill_server(self) -> None:
        self._check("kill-server")

    # -- Terminal --------------------------------------------------------------

    def attach(self, group: str | None = None) -> int:
        args = ["attach-session"]
        if group is not None:
            args += ["-t", _session(group)]
        argv = self._argv(*args)
        logger.debug("tmux: {}", " ".join(argv))
        return self._runner(argv, capture=False).returncode
