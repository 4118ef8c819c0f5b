"""Create live groups and items from a workspace config.

Creation protocol, per invocation:

1. Collect the config's groups that do not exist yet (checked by name).
2. Create each with a placeholder item (tmux cannot hold an empty session),
   read its creation second back from the manager and stamp it with the
   next logical sequence number.  Sequences continue after the highest one
   already live, so ``(created_at, sequence)`` orders groups strictly even
   when several are created within one second.
3. Optionally (``wait_for_tick``) block before each creation until the clock
   has moved past the previous group's second, so that tools which only see
   ``session_created`` still get distinct timestamps.  Nothing waits after
   the last group.
4. Create the items of each new group in config order.
5. Drop the placeholder from every group that has more than it.
6. Select the second item then the first, leaving the first current and
   the second as "last window" for a quick toggle.

Steps 5 and 6 are best effort.  Group creation failures propagate;
individual item failures are recorded and not retried.  Nothing is rolled
back: re-running ``create`` skips what exists and is the recovery path.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from tws.workspace.backend.base import BackendError, ExternalCallError, WorkspaceBackend
from tws.workspace.models.workspace import Group, WorkspaceConfig
from tws.workspace.paths import expand_tilde

PLACEHOLDER_ITEM = "__init__"

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class CreationClock:
    """Whole-second clock with a bounded poll for the next tick.

    ``now`` and ``sleep`` are injectable so tests can run without real time.
    """

    def __init__(
        self,
        now: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        interval: float = 0.01,
    ) -> None:
        self._now = now
        self._sleep = sleep
        self.interval = interval

    def tick(self) -> int:
        return int(self._now())

    def wait_past(self, second: int) -> int:
        """Poll until the current second is later than ``second``."""
        current = self.tick()
        while current <= second:
            self._sleep(self.interval)
            current = self.tick()
        return current


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


class FailedItem(BaseModel):
    group: str
    name: str
    error: str


class CreatedGroup(BaseModel):
    name: str
    created_at: int
    sequence: int


class ReconcileResult(BaseModel):
    """What a ``create`` run did."""

    created: list[CreatedGroup] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list, description="Groups that already existed")
    failed_items: list[FailedItem] = Field(default_factory=list)

    @property
    def created_names(self) -> list[str]:
        return [group.name for group in self.created]


# ---------------------------------------------------------------------------
# Reconciler
# ---------------------------------------------------------------------------


class Reconciler:
    """Realize a ``WorkspaceConfig`` on a backend."""

    def __init__(
        self,
        backend: WorkspaceBackend,
        *,
        clock: CreationClock | None = None,
        wait_for_tick: bool = False,
        home: str | Path | None = None,
    ) -> None:
        self.backend = backend
        self.clock = clock or CreationClock()
        self.wait_for_tick = wait_for_tick
        self.home = home

    def create(self, config: WorkspaceConfig) -> ReconcileResult:
        result = ReconcileResult()

        pending: list[Group] = []
        seen: set[str] = set()
        for group in config.groups:
            if group.name in seen:
                continue
            seen.add(group.name)
            if self.backend.group_exists(group.name):
                result.skipped.append(group.name)
            else:
                pending.append(group)

        sequence = self._next_sequence() if pending else 0
        last_created: int | None = None

        for group in pending:
            if self.wait_for_tick and last_created is not None and self.clock.tick() == last_created:
                logger.debug("Waiting for clock to pass {} before creating {}", last_created, group.name)
                self.clock.wait_past(last_created)

            self.backend.create_group(group.name, PLACEHOLDER_ITEM)
            last_created = self._created_at(group.name)
            self.backend.set_group_sequence(group.name, sequence)
            result.created.append(CreatedGroup(name=group.name, created_at=last_created, sequence=sequence))
            logger.info("Created group {} (t={}, seq={})", group.name, last_created, sequence)
            sequence += 1

        for group in pending:
            self._create_items(group, result)

        self._cleanup_placeholders()
        self._normalize_focus()
        return result

    # -- Steps -----------------------------------------------------------------

    def _next_sequence(self) -> int:
        try:
            groups = self.backend.list_groups()
        except BackendError:
            return 1
        sequences = [g.sequence for g in groups if g.sequence is not None]
        return max(sequences, default=0) + 1

    def _created_at(self, name: str) -> int:
        """The manager's creation second for ``name``, or the local clock if it has none."""
        try:
            for info in self.backend.list_groups():
                if info.name == name:
                    return info.created_at
        except BackendError as exc:
            logger.debug("Cannot read creation time of {}: {}", name, exc)
        return self.clock.tick()

    def _create_items(self, group: Group, result: ReconcileResult) -> None:
        for item in group.items:
            path = expand_tilde(item.path, self.home) if item.path else None
            try:
                self.backend.create_item(group.name, item.name, path)
            except ExternalCallError as exc:
                logger.warning("Failed to create {}:{}: {}", group.name, item.name, exc)
                result.failed_items.append(FailedItem(group=group.name, name=item.name, error=str(exc)))

    def _cleanup_placeholders(self) -> None:
        for name in self._live_group_names():
            try:
                items = self.backend.list_items(name)
                remaining = len(items)
                for item in items:
                    # never kill the last item: tmux would drop the session
                    if item.name == PLACEHOLDER_ITEM and remaining > 1:
                        self.backend.kill_item(name, item.index)
                        remaining -= 1
            except BackendError as exc:
                logger.debug("Placeholder cleanup failed for {}: {}", name, exc)

    def _normalize_focus(self) -> None:
        for name in self._live_group_names():
            try:
                items = self.backend.list_items(name)
            except BackendError as exc:
                logger.debug("Cannot list items of {}: {}", name, exc)
                continue
            for item in items[1::-1]:
                try:
                    self.backend.select_item(name, item.index)
                except BackendError as exc:
                    logger.debug("Select {}:{} failed: {}", name, item.index, exc)

    def _live_group_names(self) -> list[str]:
        try:
            return [group.name for group in self.backend.list_groups()]
        except BackendError as exc:
            logger.debug("Cannot list groups: {}", exc)
            return []
