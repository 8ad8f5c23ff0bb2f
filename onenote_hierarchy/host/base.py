"""The external host boundary.

Everything the engine needs from OneNote goes through ``OneNoteHost``.
A live implementation wraps the application's automation object; the
engine itself never talks to the application directly, which keeps it
testable against ``SnapshotHost``.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import IntEnum
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class HierarchyScope(IntEnum):
    """How far below the start node a hierarchy fetch expands.

    Values match the host's own HierarchyScope enumeration.
    """

    SELF = 0
    CHILDREN = 1
    NOTEBOOKS = 2
    SECTIONS = 3
    PAGES = 4


@runtime_checkable
class OneNoteHost(Protocol):
    """Operations the engine consumes from the host application."""

    def fetch_hierarchy(self, scope: HierarchyScope, start_node_id: str = "") -> str:
        """Return hierarchy XML below ``start_node_id`` (root when empty)."""
        ...

    def fetch_page_content(self, page_id: str) -> str:
        """Return the full content XML of one page."""
        ...

    def persist_page_content(self, raw: str) -> None:
        """Write a full page content document back to the host."""
        ...

    def resolve_link_target(self, page_id: str, object_id: str) -> str:
        """Return a navigable link to an element within a page."""
        ...

    def update_hierarchy(self, raw: str) -> None:
        """Apply changed hierarchy XML (names, child order)."""
        ...

    def close(self) -> None:
        """Release the connection to the host."""
        ...


@contextmanager
def host_session(factory: Callable[[], OneNoteHost]) -> Iterator[OneNoteHost]:
    """Acquire a host for one top-level operation.

    The host is closed on every exit path.  An error raised by
    ``close()`` propagates to the caller.
    """
    host = factory()
    logger.debug("Opened host session %r", host)
    try:
        yield host
    finally:
        logger.debug("Closing host session %r", host)
        host.close()
