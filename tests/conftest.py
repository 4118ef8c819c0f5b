"""Shared test fixtures: an in-memory tmux stand-in and a controllable clock.

``FakeBackend`` implements the ``WorkspaceBackend`` protocol over plain
dicts.  Its session timestamps come from ``FakeClock``, which only moves
when something sleeps -- i.e. every group created without waiting lands in
the same second.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from tws.workspace.backend.base import ExternalCallError, LiveGroupInfo, LiveItemInfo, NoServerError
from tws.workspace.reconciler import CreationClock

HOME = "/home/tester"


class FakeClock:
    def __init__(self, start: float = 1000.0, step: float = 0.25) -> None:
        self.now = start
        self.step = step
        self.sleeps = 0

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps += 1
        self.now += self.step


class FakeBackend:
    """Dict-backed session/window manager.

    ``default_path`` is where a window without ``-c`` starts.  Real tmux uses
    the session start directory (the cwd of ``tws``), which need not be home.
    """

    def __init__(self, now: Callable[[], float] | None = None, default_path: str = HOME) -> None:
        self.running = False
        self.socket_name: str | None = None
        self.groups: dict[str, dict] = {}
        self.selected: dict[str, list[int]] = {}
        self.attached: list[str | None] = []
        self.fail_items: set[tuple[str, str]] = set()
        self.fail_select = False
        self.default_path = default_path
        self._now = now or (lambda: 1000.0)

    # -- Test helpers ----------------------------------------------------------

    def add_group(
        self,
        name: str,
        items: list[tuple[str, str]],
        *,
        created_at: int = 900,
        sequence: int | None = None,
    ) -> None:
        self.running = True
        self.groups[name] = {
            "created_at": created_at,
            "sequence": sequence,
            "items": [LiveItemInfo(idx, n, p) for idx, (n, p) in enumerate(items, start=1)],
        }

    def item_names(self, group: str) -> list[str]:
        return [item.name for item in self.groups[group]["items"]]

    def _require(self) -> None:
        if not self.running:
            raise NoServerError

    def _group(self, name: str) -> dict:
        self._require()
        if name not in self.groups:
            raise ExternalCallError(["tmux", name], 1, f"can't find session: {name}")
        return self.groups[name]

    # -- Protocol --------------------------------------------------------------

    def server_reachable(self) -> bool:
        return self.running

    def list_groups(self) -> list[LiveGroupInfo]:
        self._require()
        return [LiveGroupInfo(name, g["created_at"], g["sequence"]) for name, g in self.groups.items()]

    def group_exists(self, name: str) -> bool:
        return self.running and name in self.groups

    def create_group(self, name: str, placeholder: str) -> None:
        if name in self.groups:
            raise ExternalCallError(["tmux", "new-session", name], 1, f"duplicate session: {name}")
        self.running = True
        self.groups[name] = {
            "created_at": int(self._now()),
            "sequence": None,
            "items": [LiveItemInfo(0, placeholder, self.default_path)],
        }

    def set_group_sequence(self, name: str, sequence: int) -> None:
        self._group(name)["sequence"] = sequence

    def create_item(self, group: str, name: str, path: str | None = None) -> None:
        if (group, name) in self.fail_items:
            raise ExternalCallError(["tmux", "new-window", name], 1, "create window failed")
        items = self._group(group)["items"]
        index = max((item.index for item in items), default=-1) + 1
        items.append(LiveItemInfo(index, name, path or self.default_path))

    def list_items(self, group: str) -> list[LiveItemInfo]:
        return list(self._group(group)["items"])

    def select_item(self, group: str, index: int) -> None:
        self._group(group)
        if self.fail_select:
            raise ExternalCallError(["tmux", "select-window"], 1, "can't find window")
        self.selected.setdefault(group, []).append(index)

    def kill_item(self, group: str, index: int) -> None:
        g = self._group(group)
        g["items"] = [item for item in g["items"] if item.index != index]
        if not g["items"]:
            del self.groups[group]
            self.running = bool(self.groups)

    def kill_group(self, name: str) -> None:
        self._group(name)
        del self.groups[name]
        self.running = bool(self.groups)

    def kill_server(self) -> None:
        self._require()
        self.groups.clear()
        self.running = False

    def attach(self, group: str | None = None) -> int:
        self.attached.append(group)
        return 0 if self.running else 1


@pytest.fixture
def home() -> str:
    return HOME


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def creation_clock(clock: FakeClock) -> CreationClock:
    return CreationClock(now=clock.time, sleep=clock.sleep)


@pytest.fixture
def backend(clock: FakeClock) -> FakeBackend:
    return FakeBackend(now=clock.time)
