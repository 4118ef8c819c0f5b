"""Data models for the workspace engine."""

from tws.workspace.models.diff import DiffEntry, GroupDiff, WorkspaceDiff
from tws.workspace.models.enums import DiffSide, ItemStatus
from tws.workspace.models.workspace import (
    Group,
    Item,
    LiveGroup,
    LiveState,
    WorkspaceConfig,
)

__all__ = [
    # Diff
    "DiffEntry",
    # Enums
    "DiffSide",
    "GroupDiff",
    # Workspace
    "Group",
    "Item",
    "ItemStatus",
    "LiveGroup",
    "LiveState",
    "WorkspaceConfig",
    "WorkspaceDiff",
]
