"""Parses the host's hierarchy XML into the Node model and back.

The host describes the notebook tree with ``GetHierarchy`` XML in the
OneNote 2013 namespace::

    <one:Notebooks>
      <one:Notebook ID="..." name="Work" isCurrentlyViewed="true">
        <one:Section ID="..." name="Meetings">
          <one:Page ID="..." name="Kickoff" pageLevel="1"/>

This module is the validation boundary: anything that does not have
that shape raises ``MalformedHierarchy`` here, so the query and reorder
engines only ever see well-formed trees.
"""

import logging

from lxml import etree

from onenote_hierarchy.errors import MalformedHierarchy
from onenote_hierarchy.model.node import Node, NodeKind
from onenote_hierarchy.utils import (
    NSMAP,
    ONE_NS,
    as_bool,
    local_name,
    one_tag,
    parse_int,
)

logger = logging.getLogger(__name__)

# Which node kinds may appear directly below each kind
_ALLOWED_CHILDREN: dict[NodeKind, frozenset[NodeKind]] = {
    NodeKind.ROOT: frozenset({NodeKind.NOTEBOOK}),
    NodeKind.NOTEBOOK: frozenset({NodeKind.SECTION, NodeKind.SECTION_GROUP}),
    NodeKind.SECTION_GROUP: frozenset({NodeKind.SECTION, NodeKind.SECTION_GROUP}),
    NodeKind.SECTION: frozenset({NodeKind.PAGE}),
    NodeKind.PAGE: frozenset(),
}

# Attributes mapped onto Node fields; everything else goes to .attributes
_MAPPED_ATTRIBUTES = frozenset(
    {"ID", "name", "isCurrentlyViewed", "pageLevel", "lastModifiedTime"}
)

_KINDS_BY_TAG = {kind.value: kind for kind in NodeKind}


def load_xml(raw: str | bytes | etree._Element) -> etree._Element:
    """Parse raw host XML into an element, raising MalformedHierarchy."""
    if isinstance(raw, etree._Element):
        return raw
    if isinstance(raw, str):
        # lxml refuses str input that carries an encoding declaration
        raw = raw.encode("utf-8")
    parser = etree.XMLParser(
        resolve_entities=False, no_network=True, remove_blank_text=True
    )
    try:
        return etree.fromstring(raw, parser)
    except etree.XMLSyntaxError as e:
        raise MalformedHierarchy(f"Host returned invalid XML: {e}") from e


def parse_hierarchy(raw: str | bytes | etree._Element) -> Node:
    """Convert host hierarchy XML into a Node tree."""
    root = load_xml(raw)
    kind = _element_kind(root)
    if kind is None:
        raise MalformedHierarchy(
            f"Unexpected hierarchy root element: {root.tag}"
        )
    return _build_node(root, kind)


def _element_kind(element: etree._Element) -> NodeKind | None:
    tag = element.tag
    if not isinstance(tag, str) or not tag.startswith(f"{{{ONE_NS}}}"):
        return None
    return _KINDS_BY_TAG.get(local_name(tag))


def _build_node(element: etree._Element, kind: NodeKind) -> Node:
    node_id = element.get("ID", "")
    if kind is not NodeKind.ROOT and not node_id:
        raise MalformedHierarchy(
            f"{kind.value} element without an ID (name={element.get('name')!r})"
        )

    node = Node(
        kind=kind,
        id=node_id,
        name=element.get("name", ""),
        is_currently_active=as_bool(element.get("isCurrentlyViewed")),
        level=parse_int(element.get("pageLevel"), 0),
        last_modified=element.get("lastModifiedTime", ""),
        attributes={
            k: v for k, v in element.attrib.items()
            if k not in _MAPPED_ATTRIBUTES
        },
    )

    allowed = _ALLOWED_CHILDREN[kind]
    for child in element:
        child_kind = _element_kind(child)
        if child_kind is None or child_kind is NodeKind.ROOT:
            # Meta, UnfiledNotes, OpenSections and the like
            logger.debug(
                "Skipping %s inside %s %s",
                local_name(child.tag) or "non-element", kind.value, node_id,
            )
            continue
        if child_kind not in allowed:
            raise MalformedHierarchy(
                f"{child_kind.value} cannot appear inside {kind.value} "
                f"{node_id or '(root)'}"
            )
        node.children.append(_build_node(child, child_kind))

    return node


def hierarchy_to_xml(node: Node) -> str:
    """Serialize a Node tree back to host hierarchy XML."""
    return etree.tostring(_build_element(node, NSMAP), encoding="unicode")


def _build_element(node: Node, nsmap: dict[str, str] | None) -> etree._Element:
    element = etree.Element(one_tag(node.kind.value), nsmap=nsmap)
    if node.id:
        element.set("ID", node.id)
    if node.name:
        element.set("name", node.name)
    for key, value in node.attributes.items():
        element.set(key, value)
    if node.kind is NodeKind.PAGE and node.level:
        element.set("pageLevel", str(node.level))
    if node.last_modified:
        element.set("lastModifiedTime", node.last_modified)
    if node.is_currently_active:
        element.set("isCurrentlyViewed", "true")

    for child in node.children:
        element.append(_build_element(child, None))
    return element
