"""Serialize live state back into a workspace file.

Output uses the same grammar the parser reads, so a snapshot can be fed
straight back to ``tws``::

    session:
      window: ~/path

Before overwriting a target, the existing file is copied to
``workspace.backup.yaml`` in the same directory.  Writes are atomic: data
goes to a temporary file in the target directory, then is renamed over it.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path

from loguru import logger

from tws.workspace.models.workspace import LiveState
from tws.workspace.paths import normalize_path

BACKUP_NAME = "workspace.backup.yaml"


def serialize(live: LiveState, *, home: str | Path | None = None) -> str:
    """Render live state in workspace-file form, ``~`` for the home prefix."""
    lines: list[str] = []
    for group in live.groups:
        lines.append(f"{group.name}:")
        for item in group.items:
            if not item.name:
                continue
            lines.append(f"  {item.name}: {normalize_path(item.path, home)}")
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def backup_path(target: Path) -> Path:
    return target.parent / BACKUP_NAME


def write_snapshot(live: LiveState, target: str | Path, *, home: str | Path | None = None) -> Path | None:
    """Write a snapshot to ``target``.

    Returns the backup path if an existing file was backed up, else None.
    """
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)

    backup = None
    if target.is_file():
        backup = backup_path(target)
        shutil.copy2(target, backup)
        logger.info("Backed up {} to {}", target, backup)

    _atomic_write(target, serialize(live, home=home))
    logger.info("Wrote snapshot of {} group(s) to {}", len(live.groups), target)
    return backup


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename.

    The temp file lives in the same directory so ``os.replace`` stays on one
    filesystem.
    """
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
