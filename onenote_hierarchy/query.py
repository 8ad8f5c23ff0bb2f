"""Scoped queries over the notebook hierarchy.

``query`` fetches a subtree from the host once and truncates it to the
requested scope.  The filters below work on any iterable of nodes,
usually the output of ``iter_nodes``.
"""

import logging
from collections.abc import Iterable, Iterator

from onenote_hierarchy.errors import AmbiguousCurrent, NodeNotFound
from onenote_hierarchy.host.base import HierarchyScope, OneNoteHost
from onenote_hierarchy.model.node import Node, NodeKind
from onenote_hierarchy.parser.hierarchy import parse_hierarchy
from onenote_hierarchy.utils import name_matches

logger = logging.getLogger(__name__)

# Deepest node kinds kept for each full-expansion scope
_SCOPE_KINDS: dict[HierarchyScope, frozenset[NodeKind]] = {
    HierarchyScope.NOTEBOOKS: frozenset({NodeKind.ROOT, NodeKind.NOTEBOOK}),
    HierarchyScope.SECTIONS: frozenset(
        {NodeKind.ROOT, NodeKind.NOTEBOOK, NodeKind.SECTION_GROUP, NodeKind.SECTION}
    ),
    HierarchyScope.PAGES: frozenset(NodeKind),
}


def query(
    host: OneNoteHost,
    scope: HierarchyScope,
    start_node_id: str = "",
) -> Node:
    """Return the hierarchy below a start node, truncated to ``scope``.

    An empty ``start_node_id`` starts at the hierarchy root.  Raises
    NodeNotFound when a start node is given but the host's answer does
    not contain it.
    """
    scope = HierarchyScope(scope)
    logger.debug("query scope=%s start=%r", scope.name, start_node_id)
    tree = parse_hierarchy(host.fetch_hierarchy(scope, start_node_id))

    start = tree
    if start_node_id:
        start = find_by_id([tree], start_node_id)
        if start is None:
            raise NodeNotFound(start_node_id)

    return _truncate(start, scope)


def _truncate(node: Node, scope: HierarchyScope) -> Node:
    if scope is HierarchyScope.SELF:
        node.children = []
    elif scope is HierarchyScope.CHILDREN:
        for child in node.children:
            child.children = []
    else:
        _prune(node, _SCOPE_KINDS[scope])
    return node


def _prune(node: Node, keep: frozenset[NodeKind]) -> None:
    node.children = [c for c in node.children if c.kind in keep]
    for child in node.children:
        _prune(child, keep)


def iter_nodes(root: Node, kind: NodeKind | None = None) -> Iterator[Node]:
    """Walk a tree depth-first, optionally yielding only one kind."""
    for node in root.walk():
        if kind is None or node.kind is kind:
            yield node


def filter_by_name(nodes: Iterable[Node], pattern: str) -> list[Node]:
    """Keep the nodes whose name matches ``pattern``.

    See ``utils.name_matches`` for the wildcard-or-prefix rule.
    """
    matched = [n for n in nodes if name_matches(n.name, pattern)]
    logger.debug("filter_by_name %r -> %d match(es)", pattern, len(matched))
    return matched


def find_current(nodes: Iterable[Node]) -> Node | None:
    """Return the sibling flagged as currently viewed.

    Returns None when no node is flagged.  More than one flagged node
    means the host data is inconsistent and raises AmbiguousCurrent.
    """
    current = [n for n in nodes if n.is_currently_active]
    if len(current) > 1:
        raise AmbiguousCurrent(current)
    return current[0] if current else None


def find_by_id(nodes: Iterable[Node], node_id: str) -> Node | None:
    """Find a node by exact ID among ``nodes`` and their descendants."""
    for node in nodes:
        for candidate in node.walk():
            if candidate.id == node_id:
                return candidate
    return None


def get_node(nodes: Iterable[Node], node_id: str) -> Node:
    """Like ``find_by_id``, but the node must exist."""
    node = find_by_id(nodes, node_id)
    if node is None:
        raise NodeNotFound(node_id)
    return node


def current_path(root: Node) -> list[Node]:
    """Follow the currently-viewed flag from ``root`` downwards.

    Returns e.g. [notebook, section, page]; the list stops at the
    first level with no current child.
    """
    path: list[Node] = []
    node = root
    while node.children:
        node = find_current(node.children)
        if node is None:
            break
        path.append(node)
    return path
