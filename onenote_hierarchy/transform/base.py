"""Shared pipeline for transforms of a page's content document.

Every transform follows the same steps: find the style definitions by
name, find the top-level outline elements that use them, compute what
should change, and splice it into the document.  Subclasses provide
``splice``; ``apply`` handles fetching and the optional persist.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from lxml import etree, html

from onenote_hierarchy.errors import InvalidPageReference
from onenote_hierarchy.host.base import OneNoteHost
from onenote_hierarchy.model.content import PageContent
from onenote_hierarchy.model.node import Node, NodeKind
from onenote_hierarchy.parser.content import is_page_content, parse_page_content
from onenote_hierarchy.utils import NSMAP

logger = logging.getLogger(__name__)

H1_STYLE_NAME = "h1"


@dataclass
class TransformResult:
    """Outcome of applying a content transform to one page."""
    content: PageContent
    headings: list[etree._Element] = field(default_factory=list)
    persisted: bool = False


def resolve_page_content(
    host: OneNoteHost, page: PageContent | Node | str,
) -> PageContent:
    """Return full content for a page given as content, node or ID.

    Nodes and IDs cost one ``fetch_page_content`` round trip, as does a
    PageContent wrapping a hierarchy entry rather than a content document.
    """
    if isinstance(page, PageContent):
        if not page.page_id:
            raise InvalidPageReference("Page content has no ID attribute")
        if is_page_content(page.root):
            return page
        page_id = page.page_id
    elif isinstance(page, Node):
        if page.kind is not NodeKind.PAGE:
            raise InvalidPageReference(
                f"Expected a page, got {page.kind.value} {page.name!r}"
            )
        page_id = page.id
    else:
        page_id = page

    if not page_id:
        raise InvalidPageReference("No page ID given")

    logger.debug("Fetching content for page %s", page_id)
    return parse_page_content(host.fetch_page_content(page_id))


def find_style_indexes(content: PageContent, name: str) -> set[str]:
    """Return the indexes of every style definition called ``name``."""
    indexes = content.xpath("one:QuickStyleDef[@name=$name]/@index", name=name)
    return {str(i) for i in indexes if str(i).strip()}


def find_styled_elements(
    content: PageContent, indexes: set[str],
) -> list[etree._Element]:
    """Return top-level outline elements using one of ``indexes``."""
    if not indexes:
        return []
    return [
        oe for oe in content.outline_elements()
        if oe.get("quickStyleIndex") in indexes
    ]


def remove_tagged(content: PageContent, name: str, value: str) -> int:
    """Remove every outline element tagged with a Meta name/content pair."""
    tagged = content.xpath(
        "//one:OE[one:Meta[@name=$name and @content=$value]]",
        name=name, value=value,
    )
    for oe in tagged:
        parent = oe.getparent()
        if parent is not None:
            parent.remove(oe)
    return len(tagged)


def element_text(oe: etree._Element) -> str:
    """Plain text of an outline element's ``T`` runs.

    The host stores run text as HTML fragments; markup is dropped.
    """
    raw = "".join(oe.xpath("one:T/text()", namespaces=NSMAP))
    if not raw.strip():
        return ""
    fragment = html.fragment_fromstring(raw, create_parent="div")
    return " ".join(fragment.text_content().split())


class ContentTransform(ABC):
    """Base class for transforms keyed on a heading style."""

    name = "content-transform"

    def __init__(self, style_name: str = H1_STYLE_NAME) -> None:
        self.style_name = style_name

    def apply(
        self,
        host: OneNoteHost,
        page: PageContent | Node | str,
        persist: bool = False,
    ) -> TransformResult:
        """Run the transform on a page and return the changed content.

        The host is written to (once) only when ``persist`` is set.
        """
        content = resolve_page_content(host, page)
        headings = self.locate(content)
        result = self.splice(host, content, headings)

        if persist:
            host.persist_page_content(content.to_xml())
            result.persisted = True

        logger.info(
            "%s: %d heading(s) on page %r%s",
            self.name, len(headings), content.title,
            " (saved)" if result.persisted else "",
        )
        return result

    def locate(self, content: PageContent) -> list[etree._Element]:
        indexes = find_style_indexes(content, self.style_name)
        return find_styled_elements(content, indexes)

    @abstractmethod
    def splice(
        self,
        host: OneNoteHost,
        content: PageContent,
        headings: list[etree._Element],
    ) -> TransformResult:
        """Change the document for the located headings."""
