"""Moves one child to a new position among its siblings.

Invalid positions are reported through ``ReorderResult.outcome`` rather
than raised, so a batch of moves keeps going past a bad index.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from onenote_hierarchy.errors import NodeNotFound
from onenote_hierarchy.host.base import HierarchyScope, OneNoteHost
from onenote_hierarchy.model.node import Node
from onenote_hierarchy.parser.hierarchy import hierarchy_to_xml
from onenote_hierarchy.query import query

logger = logging.getLogger(__name__)


class ReorderOutcome(str, Enum):
    MOVED = "moved"
    UNCHANGED = "unchanged"
    POSITION_OUT_OF_BOUNDS = "position_out_of_bounds"


@dataclass(frozen=True)
class ReorderResult:
    """Result of a reorder.

    Attributes
    ----------
    parent
        The parent node, mutated in place when the child moved.
    outcome
        What happened; only MOVED changes the parent.
    old_index, new_index
        The child's position before and after the call.
    """
    parent: Node
    outcome: ReorderOutcome
    old_index: int
    new_index: int

    @property
    def moved(self) -> bool:
        return self.outcome is ReorderOutcome.MOVED


def reorder(parent: Node, child_id: str, target_index: int) -> ReorderResult:
    """Move a direct child of ``parent`` to ``target_index``.

    The child is detached and reinserted before the sibling that then
    occupies ``target_index`` (appended when there is none), so it ends
    up exactly at that index.  Every other child keeps its relative
    order.  Raises NodeNotFound if ``child_id`` is not a direct child.
    """
    old_index = parent.child_index(child_id)
    if old_index < 0:
        raise NodeNotFound(child_id)

    count = len(parent.children)
    if not 0 <= target_index < count:
        logger.warning(
            "Cannot move %s to position %d: %s %r has %d children",
            child_id, target_index, parent.kind.value, parent.name, count,
        )
        return ReorderResult(
            parent, ReorderOutcome.POSITION_OUT_OF_BOUNDS, old_index, old_index
        )

    if old_index == target_index:
        logger.debug("%s already at position %d", child_id, target_index)
        return ReorderResult(
            parent, ReorderOutcome.UNCHANGED, old_index, old_index
        )

    child = parent.children.pop(old_index)
    # insert() appends when target_index is now past the end
    parent.children.insert(target_index, child)

    logger.info(
        "Moved %s %r from position %d to %d",
        child.kind.value, child.name, old_index, target_index,
    )
    return ReorderResult(parent, ReorderOutcome.MOVED, old_index, target_index)


def move_child(
    host: OneNoteHost,
    parent_id: str,
    child_id: str,
    target_index: int,
    persist: bool = False,
) -> ReorderResult:
    """Fetch a parent from the host, reorder one child, optionally save.

    The hierarchy is written back only when ``persist`` is set and the
    child actually moved.
    """
    parent = query(host, HierarchyScope.CHILDREN, parent_id)
    result = reorder(parent, child_id, target_index)
    if persist and result.moved:
        host.update_hierarchy(hierarchy_to_xml(result.parent))
        logger.info("Saved new child order of %s", parent_id)
    return result
