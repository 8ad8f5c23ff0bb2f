"""Validates host page content documents and wraps them as PageContent."""

from lxml import etree

from onenote_hierarchy.errors import MalformedHierarchy
from onenote_hierarchy.model.content import PageContent
from onenote_hierarchy.parser.hierarchy import load_xml
from onenote_hierarchy.utils import one_tag

# Children that only a full GetPageContent document carries; a hierarchy
# <one:Page/> entry has none of them.
_CONTENT_MARKERS = frozenset(
    one_tag(name)
    for name in ("Title", "Outline", "QuickStyleDef", "PageSettings")
)


def is_page_content(element: etree._Element) -> bool:
    """Return True if the element is a full page content document."""
    if element.tag != one_tag("Page"):
        return False
    return any(child.tag in _CONTENT_MARKERS for child in element)


def parse_page_content(raw: str | bytes | etree._Element) -> PageContent:
    """Convert host page content XML into a PageContent."""
    root = load_xml(raw)
    if not is_page_content(root):
        raise MalformedHierarchy(
            f"Not a page content document: <{root.tag}> "
            f"ID={root.get('ID', '')!r}"
        )
    return PageContent(root)
