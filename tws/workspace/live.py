"""Live state reader.

Builds a ``LiveState`` from the backend: groups sorted by their ordering
key ``(created_at, sequence)``, items in display order.  Paths are kept
verbatim; display and comparison normalization happen downstream.
"""

from __future__ import annotations

from loguru import logger

from tws.workspace.backend.base import NoServerError, WorkspaceBackend
from tws.workspace.models.workspace import Item, LiveGroup, LiveState


def read_live(backend: WorkspaceBackend) -> LiveState:
    """Snapshot the running server.  Raises ``NoServerError`` if none."""
    if not backend.server_reachable():
        raise NoServerError(getattr(backend, "socket_name", None))

    groups = []
    for info in backend.list_groups():
        items = tuple(Item(name=item.name, path=item.path) for item in backend.list_items(info.name) if item.name)
        groups.append(LiveGroup(name=info.name, items=items, created_at=info.created_at, sequence=info.sequence))

    # sorted() is stable: equal keys keep the backend's listing order.
    groups.sort(key=lambda g: g.ordering_key)
    logger.debug("Read {} live group(s)", len(groups))
    return LiveState(groups=tuple(groups))


def read_live_or_empty(backend: WorkspaceBackend) -> LiveState:
    """Like ``read_live`` but an absent server yields an empty state."""
    try:
        return read_live(backend)
    except NoServerError:
        logger.debug("No server running; using empty live state")
        return LiveState()
