"""Text rendering for ``ls`` and ``diff``.

Colors go through ``click.style`` so they are stripped automatically when
output is not a terminal.
"""

from __future__ import annotations

from pathlib import Path

import click

from tws.workspace.models.diff import DiffEntry, WorkspaceDiff
from tws.workspace.models.enums import ItemStatus
from tws.workspace.models.workspace import LiveState
from tws.workspace.snapshot import serialize

_STATUS_COLORS: dict[ItemStatus, str | None] = {
    ItemStatus.REMOVED: "red",
    ItemStatus.ADDED: "green",
    ItemStatus.PATH_CHANGED: "yellow",
    ItemStatus.UNCHANGED: None,
}


def render_live(live: LiveState, *, home: str | Path | None = None) -> str:
    """Listing of the live state, same layout as a snapshot."""
    return serialize(live, home=home)


def render_entry(entry: DiffEntry) -> str:
    line = f"  {entry.name}: {entry.path}"
    color = _STATUS_COLORS[entry.status]
    return click.style(line, fg=color) if color else line


def render_diff(diff: WorkspaceDiff) -> str:
    """One block per group: header, then config-pass and live-pass lines."""
    blocks = []
    for group in diff.groups:
        lines = [f"{group.name}:"]
        lines.extend(render_entry(entry) for entry in group.entries)
        blocks.append("\n".join(lines) + "\n")
    return "\n".join(blocks) + ("\n" if blocks else "")
