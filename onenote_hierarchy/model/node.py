"""Hierarchy node model: notebooks, section groups, sections and pages."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    """Node types, valued by their OneNote XML element name."""

    ROOT = "Notebooks"
    NOTEBOOK = "Notebook"
    SECTION_GROUP = "SectionGroup"
    SECTION = "Section"
    PAGE = "Page"


@dataclass
class Node:
    """A single entry in the OneNote hierarchy.

    ``attributes`` keeps every raw XML attribute not mapped to a field
    (path, color, dateTime, ...) so the node serializes back unchanged.
    """

    kind: NodeKind
    id: str = ""
    name: str = ""
    is_currently_active: bool = False
    level: int = 0  # page indentation (subpages), 0 for non-pages
    last_modified: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def child_index(self, node_id: str) -> int:
        """Return the position of a direct child, or -1 if absent."""
        for i, child in enumerate(self.children):
            if child.id == node_id:
                return i
        return -1
