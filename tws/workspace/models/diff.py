"""Diff report models.

Produced by ``tws.workspace.diff.diff_workspace``; rendering to colored text
lives in ``tws.workspace.render``.
"""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, ConfigDict, Field

from tws.workspace.models.enums import DiffSide, ItemStatus


class DiffEntry(BaseModel):
    """One classified item line.

    ``path`` is the display path: the config path for removed and unchanged
    items, the live path for added and path-changed items.  ``moved`` marks
    the halves of a reorder (a same-named removed/added pair).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    status: ItemStatus
    side: DiffSide
    moved: bool = False


class GroupDiff(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    entries: tuple[DiffEntry, ...] = Field(default_factory=tuple)

    @property
    def has_changes(self) -> bool:
        return any(entry.status != ItemStatus.UNCHANGED for entry in self.entries)

    def by_status(self, status: ItemStatus) -> list[DiffEntry]:
        return [entry for entry in self.entries if entry.status == status]

    @property
    def moved(self) -> list[str]:
        """Names reported as reordered, in config order."""
        return [e.name for e in self.entries if e.moved and e.side == DiffSide.CONFIG]


class WorkspaceDiff(BaseModel):
    """Full report: config groups first, then live-only groups."""

    model_config = ConfigDict(frozen=True)

    groups: tuple[GroupDiff, ...] = Field(default_factory=tuple)

    @property
    def has_changes(self) -> bool:
        return any(group.has_changes for group in self.groups)

    def get_group(self, name: str) -> GroupDiff | None:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def counts(self) -> dict[ItemStatus, int]:
        counter: Counter[ItemStatus] = Counter()
        for group in self.groups:
            counter.update(entry.status for entry in group.entries)
        return {status: counter.get(status, 0) for status in ItemStatus}
