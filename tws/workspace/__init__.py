"""Workspace engine: parse, read live state, diff, create and snapshot."""

from tws.workspace.diff import diff_workspace
from tws.workspace.live import read_live
from tws.workspace.parser import load_config, parse
from tws.workspace.reconciler import Reconciler
from tws.workspace.snapshot import serialize, write_snapshot

__all__ = [
    "Reconciler",
    "diff_workspace",
    "load_config",
    "parse",
    "read_live",
    "serialize",
    "write_snapshot",
]
