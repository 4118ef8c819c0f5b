"""Order-aware diff between a workspace config and the live state.

A plain set comparison would flag every window of a reordered session as
both removed and added.  Instead, for each group we project the live item
order onto the config order and keep the longest strictly increasing
subsequence (LIS) of config positions.  Items on that subsequence are
"stable": their relative order is the same on both sides.  Only the items
off the subsequence are reported as moved, each as a removed/added pair.

Per group, entries are emitted in two passes:

1. Config order: missing live -> removed; present but not stable ->
   removed (moved); stable -> unchanged, or path_changed if the normalized
   paths differ (the live path is reported).
2. Live order: missing from config -> added; present but not stable ->
   added (moved).

Groups are reported in config order, followed by live-only groups in
creation order.  Groups with nothing to report are omitted.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Sequence
from pathlib import Path

from tws.workspace.models.diff import DiffEntry, GroupDiff, WorkspaceDiff
from tws.workspace.models.enums import DiffSide, ItemStatus
from tws.workspace.models.workspace import Item, LiveState, WorkspaceConfig
from tws.workspace.paths import normalize_path, tilde_path

# ---------------------------------------------------------------------------
# LIS
# ---------------------------------------------------------------------------


def longest_increasing_subsequence(values: Sequence[int]) -> list[int]:
    """Return the indices of a longest strictly increasing subsequence.

    Patience sorting with a lower-bound binary search: ``tails[k]`` is the
    smallest tail value of any increasing run of length ``k + 1`` seen so
    far.  Equal values replace instead of extend, which makes the result
    strictly increasing.  O(n log n).
    """
    tails: list[int] = []
    tail_idx: list[int] = []
    prev: list[int] = [-1] * len(values)

    for i, value in enumerate(values):
        pos = bisect_left(tails, value)
        if pos == len(tails):
            tails.append(value)
            tail_idx.append(i)
        else:
            tails[pos] = value
            tail_idx[pos] = i
        prev[i] = tail_idx[pos - 1] if pos > 0 else -1

    result: list[int] = []
    k = tail_idx[-1] if tail_idx else -1
    while k >= 0:
        result.append(k)
        k = prev[k]
    result.reverse()
    return result


def stable_indices(config_names: Sequence[str], live_names: Sequence[str]) -> set[int]:
    """Indices into ``live_names`` whose relative order matches the config."""
    config_pos: dict[str, int] = {}
    for pos, name in enumerate(config_names):
        config_pos.setdefault(name, pos)

    live_idx = [i for i, name in enumerate(live_names) if name in config_pos]
    seq = [config_pos[live_names[i]] for i in live_idx]
    return {live_idx[k] for k in longest_increasing_subsequence(seq)}


# ---------------------------------------------------------------------------
# Group / workspace diff
# ---------------------------------------------------------------------------


def diff_group(
    name: str,
    config_items: Sequence[Item],
    live_items: Sequence[Item],
    *,
    home: str | Path | None = None,
) -> GroupDiff:
    """Classify the items of one group."""
    config_names = [item.name for item in config_items]
    live_names = [item.name for item in live_items]
    config_set = set(config_names)
    live_set = set(live_names)
    stable = stable_indices(config_names, live_names)

    # name -> stable live item (at most one per name: the LIS is strict)
    stable_by_name = {live_items[i].name: live_items[i] for i in stable}

    def display(path: str) -> str:
        return tilde_path(path, home) if path else normalize_path(path, home)

    entries: list[DiffEntry] = []

    for item in config_items:
        config_path = display(item.path)
        if item.name not in live_set:
            entries.append(DiffEntry(name=item.name, path=config_path, status=ItemStatus.REMOVED, side=DiffSide.CONFIG))
            continue
        live_item = stable_by_name.get(item.name)
        if live_item is None:
            entries.append(
                DiffEntry(name=item.name, path=config_path, status=ItemStatus.REMOVED, side=DiffSide.CONFIG, moved=True)
            )
        elif normalize_path(item.path, home) != normalize_path(live_item.path, home):
            entries.append(
                DiffEntry(
                    name=item.name,
                    path=display(live_item.path),
                    status=ItemStatus.PATH_CHANGED,
                    side=DiffSide.CONFIG,
                )
            )
        else:
            entries.append(DiffEntry(name=item.name, path=config_path, status=ItemStatus.UNCHANGED, side=DiffSide.CONFIG))

    for idx, item in enumerate(live_items):
        if item.name not in config_set:
            entries.append(
                DiffEntry(name=item.name, path=display(item.path), status=ItemStatus.ADDED, side=DiffSide.LIVE)
            )
        elif idx not in stable:
            entries.append(
                DiffEntry(name=item.name, path=display(item.path), status=ItemStatus.ADDED, side=DiffSide.LIVE, moved=True)
            )

    return GroupDiff(name=name, entries=tuple(entries))


def diff_workspace(config: WorkspaceConfig, live: LiveState, *, home: str | Path | None = None) -> WorkspaceDiff:
    """Diff a parsed config against the live state."""
    order = list(config.group_names)
    order += [name for name in live.group_names if config.get_group(name) is None]

    groups = []
    for name in order:
        config_group = config.get_group(name)
        live_group = live.get_group(name)
        config_items = config_group.items if config_group else ()
        live_items = live_group.items if live_group else ()
        group_diff = diff_group(name, config_items, live_items, home=home)
        if group_diff.entries:
            groups.append(group_diff)

    return WorkspaceDiff(groups=tuple(groups))
