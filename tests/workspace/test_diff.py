"""Unit tests for the order-aware diff engine."""

from __future__ import annotations

from tws.workspace.diff import (
    diff_group,
    diff_workspace,
    longest_increasing_subsequence,
    stable_indices,
)
from tws.workspace.models.enums import DiffSide, ItemStatus
from tws.workspace.models.workspace import Group, Item, LiveGroup, LiveState, WorkspaceConfig

HOME = "/home/tester"


def _items(*pairs: str) -> tuple[Item, ...]:
    """``"a:/x"`` -> Item(a, /x); a bare name gets path ``/<name>``."""
    items = []
    for pair in pairs:
        name, _, path = pair.partition(":")
        items.append(Item(name=name, path=path if _ else f"/{name}"))
    return tuple(items)


def _statuses(group_diff) -> list[tuple[str, ItemStatus]]:
    return [(e.name, e.status) for e in group_diff.entries]


# ---------------------------------------------------------------------------
# LIS
# ---------------------------------------------------------------------------


def test_lis_empty() -> None:
    assert longest_increasing_subsequence([]) == []


def test_lis_sorted_input_is_fully_stable() -> None:
    assert longest_increasing_subsequence([0, 1, 2, 3]) == [0, 1, 2, 3]


def test_lis_reversed_input_keeps_one() -> None:
    assert len(longest_increasing_subsequence([3, 2, 1, 0])) == 1


def test_lis_is_strictly_increasing() -> None:
    values = [2, 2, 2]
    assert len(longest_increasing_subsequence(values)) == 1


def test_lis_known_sequence() -> None:
    values = [3, 1, 4, 1, 5, 9, 2, 6]
    result = longest_increasing_subsequence(values)

    picked = [values[i] for i in result]
    assert len(result) == 4
    assert picked == sorted(set(picked))
    assert result == sorted(result)


def test_stable_indices_ignore_names_missing_from_config() -> None:
    # "x" is not in the config and must not take part in the subsequence.
    assert stable_indices(["a", "b"], ["x", "a", "b"]) == {1, 2}


# ---------------------------------------------------------------------------
# Per-group classification
# ---------------------------------------------------------------------------


def test_single_swap_reports_one_moved_pair() -> None:
    config = _items("a", "b", "c", "d")
    live = _items("a", "c", "b", "d")

    result = diff_group("g", config, live, home=HOME)

    unchanged = [e.name for e in result.by_status(ItemStatus.UNCHANGED)]
    removed = result.by_status(ItemStatus.REMOVED)
    added = result.by_status(ItemStatus.ADDED)

    assert len(unchanged) == 3
    assert "a" in unchanged and "d" in unchanged
    assert len(removed) == 1 and len(added) == 1
    assert removed[0].name == added[0].name
    assert removed[0].name in {"b", "c"}
    assert removed[0].moved and added[0].moved
    assert result.moved == [removed[0].name]


def test_single_swap_tie_break_keeps_earlier_config_position() -> None:
    result = diff_group("g", _items("a", "b", "c", "d"), _items("a", "c", "b", "d"), home=HOME)

    assert _statuses(result) == [
        ("a", ItemStatus.UNCHANGED),
        ("b", ItemStatus.UNCHANGED),
        ("c", ItemStatus.REMOVED),
        ("d", ItemStatus.UNCHANGED),
        ("c", ItemStatus.ADDED),
    ]


def test_pure_addition() -> None:
    result = diff_group("g", _items("a", "b"), _items("a", "b", "c"), home=HOME)

    assert _statuses(result) == [
        ("a", ItemStatus.UNCHANGED),
        ("b", ItemStatus.UNCHANGED),
        ("c", ItemStatus.ADDED),
    ]
    added = result.by_status(ItemStatus.ADDED)[0]
    assert added.moved is False
    assert added.side == DiffSide.LIVE


def test_pure_removal() -> None:
    result = diff_group("g", _items("a", "b", "c"), _items("a", "c"), home=HOME)

    assert _statuses(result) == [
        ("a", ItemStatus.UNCHANGED),
        ("b", ItemStatus.REMOVED),
        ("c", ItemStatus.UNCHANGED),
    ]
    assert result.by_status(ItemStatus.REMOVED)[0].moved is False


def test_path_change_reports_live_path() -> None:
    result = diff_group("g", _items("a:/x"), _items("a:/y"), home=HOME)

    assert len(result.entries) == 1
    entry = result.entries[0]
    assert entry.status == ItemStatus.PATH_CHANGED
    assert entry.path == "/y"


def test_home_prefix_and_tilde_compare_equal() -> None:
    result = diff_group("g", _items("a:~/src"), _items(f"a:{HOME}/src"), home=HOME)

    assert _statuses(result) == [("a", ItemStatus.UNCHANGED)]
    assert result.entries[0].path == "~/src"


def test_empty_paths_mean_home() -> None:
    result = diff_group("g", _items("a:", "b:~"), _items("a:", f"b:{HOME}"), home=HOME)

    assert _statuses(result) == [("a", ItemStatus.UNCHANGED), ("b", ItemStatus.UNCHANGED)]
    assert [e.path for e in result.entries] == ["~", "~"]


def test_swap_of_two_with_path_change_on_the_stable_one() -> None:
    result = diff_group("g", _items("a:/1", "b:/2"), _items("b:/2", "a:/9"), home=HOME)

    # "a" stays on the subsequence, so its new path is reported; "b" moved.
    assert _statuses(result) == [
        ("a", ItemStatus.PATH_CHANGED),
        ("b", ItemStatus.REMOVED),
        ("b", ItemStatus.ADDED),
    ]
    assert result.entries[0].path == "/9"
    assert result.moved == ["b"]


def test_move_and_add_and_remove_mixed() -> None:
    config = _items("a", "b", "c", "d", "e")
    live = _items("e", "a", "x", "b", "d")

    result = diff_group("g", config, live, home=HOME)

    assert {e.name for e in result.by_status(ItemStatus.UNCHANGED)} == {"a", "b", "d"}
    removed = {(e.name, e.moved) for e in result.by_status(ItemStatus.REMOVED)}
    added = {(e.name, e.moved) for e in result.by_status(ItemStatus.ADDED)}
    assert removed == {("c", False), ("e", True)}
    assert added == {("e", True), ("x", False)}


def test_identical_group_is_all_unchanged() -> None:
    items = _items("a", "b", "c")
    result = diff_group("g", items, items, home=HOME)

    assert not result.has_changes
    assert [e.status for e in result.entries] == [ItemStatus.UNCHANGED] * 3


def test_duplicate_live_names_only_one_can_be_stable() -> None:
    result = diff_group("g", _items("a", "b"), _items("a", "b", "a"), home=HOME)

    assert _statuses(result) == [
        ("a", ItemStatus.UNCHANGED),
        ("b", ItemStatus.UNCHANGED),
        ("a", ItemStatus.ADDED),
    ]


# ---------------------------------------------------------------------------
# Workspace diff
# ---------------------------------------------------------------------------


def test_group_order_config_first_then_live_only() -> None:
    config = WorkspaceConfig(
        groups=(
            Group(name="b", items=_items("w")),
            Group(name="a", items=_items("w")),
        )
    )
    live = LiveState(
        groups=(
            LiveGroup(name="z", items=_items("w"), created_at=1),
            LiveGroup(name="a", items=_items("w"), created_at=2),
            LiveGroup(name="y", items=_items("w"), created_at=3),
        )
    )

    result = diff_workspace(config, live, home=HOME)

    assert [g.name for g in result.groups] == ["b", "a", "z", "y"]
    assert _statuses(result.get_group("b")) == [("w", ItemStatus.REMOVED)]
    assert _statuses(result.get_group("a")) == [("w", ItemStatus.UNCHANGED)]
    assert _statuses(result.get_group("z")) == [("w", ItemStatus.ADDED)]


def test_groups_without_entries_are_omitted() -> None:
    config = WorkspaceConfig(groups=(Group(name="empty"),))
    result = diff_workspace(config, LiveState(), home=HOME)

    assert result.groups == ()
    assert not result.has_changes


def test_empty_live_state_reports_everything_removed() -> None:
    config = WorkspaceConfig(groups=(Group(name="g", items=_items("a", "b")),))

    result = diff_workspace(config, LiveState(), home=HOME)

    assert result.has_changes
    assert result.counts()[ItemStatus.REMOVED] == 2
    assert result.counts()[ItemStatus.ADDED] == 0


def test_counts_cover_every_status() -> None:
    config = WorkspaceConfig(groups=(Group(name="g", items=_items("a:/1", "b", "c")),))
    live = LiveState(groups=(LiveGroup(name="g", items=_items("a:/2", "c", "d")),))

    counts = diff_workspace(config, live, home=HOME).counts()

    assert counts == {
        ItemStatus.UNCHANGED: 1,
        ItemStatus.ADDED: 1,
        ItemStatus.REMOVED: 1,
        ItemStatus.PATH_CHANGED: 1,
    }
