"""Shared enumerations used across the workspace engine."""

from __future__ import annotations

from enum import StrEnum

# -- Diff --------------------------------------------------------------------


class ItemStatus(StrEnum):
    """Classification of a single item in a workspace diff."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    PATH_CHANGED = "path_changed"


class DiffSide(StrEnum):
    """Which pass emitted a diff entry."""

    CONFIG = "config"
    LIVE = "live"
