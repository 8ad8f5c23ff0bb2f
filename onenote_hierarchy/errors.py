"""Exceptions raised by the OneNote hierarchy engine."""


class OneNoteHierarchyError(Exception):
    """Base exception for onenote_hierarchy operations."""


class MalformedHierarchy(OneNoteHierarchyError):
    """Host data does not have the expected OneNote XML shape."""


class NodeNotFound(OneNoteHierarchyError):
    """A node ID that must exist could not be resolved."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"No hierarchy node with ID '{node_id}'")
        self.node_id = node_id


class AmbiguousCurrent(OneNoteHierarchyError):
    """More than one sibling is flagged as currently viewed.

    The host should never report this; it signals inconsistent source
    data rather than a bad request.
    """

    def __init__(self, nodes: list) -> None:
        names = ", ".join(repr(n.name) for n in nodes)
        super().__init__(f"{len(nodes)} siblings flagged as current: {names}")
        self.nodes = nodes


class InvalidPageReference(OneNoteHierarchyError):
    """A content transform was given something without a page ID."""


class HostError(OneNoteHierarchyError):
    """Failure reported by a host implementation."""
