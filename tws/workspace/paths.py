"""Home-directory path helpers.

Workspace files use a leading ``~`` for compactness.  ``tilde_path`` is the
display form used by snapshot, ls and diff; ``normalize_path`` applies the
same rule (plus "empty means home") to both sides of a comparison so that
``/home/me/src`` and ``~/src`` compare equal.
"""

from __future__ import annotations

from pathlib import Path

HOME_MARKER = "~"


def _home(home: str | Path | None) -> str:
    return str(home) if home is not None else str(Path.home())


def tilde_path(path: str, home: str | Path | None = None) -> str:
    """Replace a leading home directory with ``~``."""
    home_str = _home(home).rstrip("/")
    if not home_str:
        return path
    if path == home_str:
        return HOME_MARKER
    if path.startswith(home_str + "/"):
        return HOME_MARKER + path[len(home_str) :]
    return path


def expand_tilde(path: str, home: str | Path | None = None) -> str:
    """Expand a leading ``~`` to the home directory.  Empty stays empty."""
    if path == HOME_MARKER:
        return _home(home)
    if path.startswith(HOME_MARKER + "/"):
        return _home(home).rstrip("/") + path[len(HOME_MARKER) :]
    return path


def normalize_path(path: str, home: str | Path | None = None) -> str:
    """Comparison form: empty means home, home prefix folded to ``~``."""
    if not path:
        return HOME_MARKER
    return tilde_path(path.rstrip("/") or "/", home)
