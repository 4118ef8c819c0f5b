"""Workspace data model.

A workspace file describes named groups (tmux sessions), each holding an
ordered list of items (tmux windows) bound to a directory.  The same shape
is used for the declarative config and for the live state read back from
tmux; live groups additionally carry their ordering key.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """A named window bound to a path.  Empty path means "tmux default"."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str = ""


class Group(BaseModel):
    """A named session with its windows in display order."""

    model_config = ConfigDict(frozen=True)

    name: str
    items: tuple[Item, ...] = Field(default_factory=tuple, description="Ordered items, first = default focus")

    @property
    def item_names(self) -> list[str]:
        return [item.name for item in self.items]

    def get_item(self, name: str) -> Item | None:
        for item in self.items:
            if item.name == name:
                return item
        return None


class WorkspaceConfig(BaseModel):
    """Parsed declarative workspace, groups in file order."""

    model_config = ConfigDict(frozen=True)

    groups: tuple[Group, ...] = Field(default_factory=tuple)

    @property
    def group_names(self) -> list[str]:
        return [group.name for group in self.groups]

    def get_group(self, name: str) -> Group | None:
        for group in self.groups:
            if group.name == name:
                return group
        return None


class LiveGroup(Group):
    """A session as reported by tmux.

    ``created_at`` is tmux's ``session_created`` (whole seconds), so sessions
    created within the same second tie on it.  ``sequence`` is the logical
    creation counter written by the reconciler; it breaks those ties.
    Sessions not created by us have no sequence and sort first within a
    second.
    """

    created_at: int = 0
    sequence: int | None = None

    @property
    def ordering_key(self) -> tuple[int, int]:
        return (self.created_at, self.sequence if self.sequence is not None else -1)


class LiveState(BaseModel):
    """Snapshot of the running tmux server, groups in creation order."""

    model_config = ConfigDict(frozen=True)

    groups: tuple[LiveGroup, ...] = Field(default_factory=tuple)

    @property
    def group_names(self) -> list[str]:
        return [group.name for group in self.groups]

    @property
    def first_group(self) -> LiveGroup | None:
        """Earliest created group -- the default attach target."""
        return self.groups[0] if self.groups else None

    def get_group(self, name: str) -> LiveGroup | None:
        for group in self.groups:
            if group.name == name:
                return group
        return None
