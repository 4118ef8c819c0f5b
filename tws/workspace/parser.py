"""Workspace file parser.

Reads the minimal YAML subset used by workspace files::

    session:
      window: ~/path/to/dir
      other-window:

Only two levels are understood: an unindented ``name:`` opens a group, an
indented ``name: value`` adds an item to the open group.  Anything else is
dropped, unless the caller asks for strict parsing.
"""

from __future__ import annotations

import re
from pathlib import Path

from loguru import logger

from tws.workspace.models.workspace import Group, Item, WorkspaceConfig

_GROUP_RE = re.compile(r"^([A-Za-z0-9_-]+):$")
_ITEM_RE = re.compile(r"^[\t ]+([A-Za-z0-9_-]+):[\t ]*(.*)$")
_COMMENT_RE = re.compile(r"[\t ]+#.*$")

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class MalformedLineError(ValueError):
    """A line does not fit the workspace grammar (strict mode only)."""

    def __init__(self, lineno: int, line: str, reason: str = "unrecognised line") -> None:
        self.lineno = lineno
        self.line = line
        self.reason = reason
        super().__init__(f"line {lineno}: {reason}: {line!r}")


class ConfigNotFoundError(LookupError):
    """The workspace file does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Workspace file not found: {path}")


class ConfigUnreadableError(OSError):
    """The workspace file exists but cannot be read or decoded."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        super().__init__(f"Workspace file not readable: {path} ({detail})")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class _ConfigBuilder:
    """Accumulates groups and items while scanning; local to one parse."""

    def __init__(self, *, strict: bool) -> None:
        self.strict = strict
        self._groups: dict[str, list[Item]] = {}
        self._current: str | None = None

    def open_group(self, name: str) -> None:
        self._groups.setdefault(name, [])
        self._current = name

    def add_item(self, lineno: int, line: str, name: str, path: str) -> None:
        if self._current is None:
            self.drop(lineno, line, "item outside of a group")
            return
        items = self._groups[self._current]
        for idx, existing in enumerate(items):
            if existing.name == name:
                if self.strict:
                    raise MalformedLineError(lineno, line, f"duplicate item {name!r} in group {self._current!r}")
                logger.warning(
                    "Duplicate item {!r} in group {!r} (line {}); last definition wins", name, self._current, lineno
                )
                items[idx] = Item(name=name, path=path)
                return
        items.append(Item(name=name, path=path))

    def drop(self, lineno: int, line: str, reason: str = "unrecognised line") -> None:
        if self.strict:
            raise MalformedLineError(lineno, line, reason)
        logger.debug("Dropping line {}: {} ({!r})", lineno, reason, line)

    def build(self) -> WorkspaceConfig:
        return WorkspaceConfig(
            groups=tuple(Group(name=name, items=tuple(items)) for name, items in self._groups.items()),
        )


def _clean(raw: str) -> str:
    line = raw.replace("\r", "")
    line = _COMMENT_RE.sub("", line)
    return line.rstrip(" \t")


def parse(text: str, *, strict: bool = False) -> WorkspaceConfig:
    """Parse workspace text into a ``WorkspaceConfig``.

    Never raises in the default mode: malformed lines are dropped.  With
    ``strict=True`` the first malformed line (or duplicate item) raises
    ``MalformedLineError``.
    """
    builder = _ConfigBuilder(strict=strict)

    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = _clean(raw)
        if not line.strip() or line.lstrip().startswith("#"):
            continue

        if match := _GROUP_RE.match(line):
            builder.open_group(match.group(1))
            continue

        if match := _ITEM_RE.match(line):
            builder.add_item(lineno, line, match.group(1), match.group(2).strip())
            continue

        builder.drop(lineno, line)

    return builder.build()


def load_config(path: str | Path, *, strict: bool = False) -> WorkspaceConfig:
    """Read and parse a workspace file.

    Raises ``ConfigNotFoundError`` if the file is missing and
    ``ConfigUnreadableError`` if it cannot be read as UTF-8 text.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigNotFoundError(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigUnreadableError(path, str(exc)) from exc

    config = parse(text, strict=strict)
    logger.debug("Loaded {} group(s) from {}", len(config.groups), path)
    return config
