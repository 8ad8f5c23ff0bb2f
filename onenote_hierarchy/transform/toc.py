"""Builds a table of contents of a page's level-1 headings.

Each entry is an outline element at the top of the page, tagged with
``<one:Meta name="kind" content="toc-item"/>``.  A rebuild removes all
tagged elements before inserting the new ones, so running it again
never duplicates entries.
"""

import logging
from dataclasses import dataclass, field

from lxml import etree
from lxml.html import builder as E

from onenote_hierarchy.host.base import OneNoteHost
from onenote_hierarchy.model.content import PageContent
from onenote_hierarchy.model.node import Node
from onenote_hierarchy.transform.base import (
    H1_STYLE_NAME,
    ContentTransform,
    TransformResult,
    element_text,
    remove_tagged,
)
from onenote_hierarchy.utils import one_tag

logger = logging.getLogger(__name__)

TOC_META_NAME = "kind"
TOC_META_VALUE = "toc-item"


@dataclass(frozen=True)
class TocEntry:
    """One heading linked from the table of contents."""
    text: str
    link: str
    object_id: str


@dataclass
class TocResult(TransformResult):
    entries: list[TocEntry] = field(default_factory=list)
    removed: int = 0


class TableOfContentsTransform(ContentTransform):
    """Inserts a linked list of headings at the top of the page."""

    name = "toc"

    def __init__(
        self,
        style_name: str = H1_STYLE_NAME,
        meta_name: str = TOC_META_NAME,
        meta_value: str = TOC_META_VALUE,
    ) -> None:
        super().__init__(style_name)
        self.meta_name = meta_name
        self.meta_value = meta_value

    def splice(
        self,
        host: OneNoteHost,
        content: PageContent,
        headings: list[etree._Element],
    ) -> TocResult:
        entries = self.build_entries(host, content, headings)

        removed = remove_tagged(content, self.meta_name, self.meta_value)
        if removed:
            logger.debug("Removed %d previous TOC entry(ies)", removed)

        if entries:
            target = _outline_children(content)
            for offset, entry in enumerate(entries):
                # Created in place so it picks up the document's prefix
                oe = self._build_element(target, entry)
                target.insert(offset, oe)

        return TocResult(
            content=content, headings=headings,
            entries=entries, removed=removed,
        )

    def build_entries(
        self,
        host: OneNoteHost,
        content: PageContent,
        headings: list[etree._Element],
    ) -> list[TocEntry]:
        """Resolve one link per heading, in document order."""
        entries: list[TocEntry] = []
        for heading in headings:
            object_id = heading.get("objectID", "")
            text = element_text(heading)
            if not object_id:
                logger.warning(
                    "Heading %r on page %s has no objectID; not linked",
                    text, content.page_id,
                )
                continue
            link = host.resolve_link_target(content.page_id, object_id)
            entries.append(TocEntry(text=text, link=link, object_id=object_id))
        return entries

    def _build_element(
        self, parent: etree._Element, entry: TocEntry,
    ) -> etree._Element:
        oe = etree.SubElement(parent, one_tag("OE"))
        etree.SubElement(
            oe, one_tag("Meta"), name=self.meta_name, content=self.meta_value,
        )
        t = etree.SubElement(oe, one_tag("T"))
        # XML serialization: the HTML serializer would percent-encode
        # the braces in OneNote link targets
        anchor = etree.tostring(
            E.A(entry.text, href=entry.link), encoding="unicode", method="xml",
        )
        t.text = etree.CDATA(anchor)
        return oe


def _outline_children(content: PageContent) -> etree._Element:
    target = content.first_outline_children()
    if target is None:
        outline = etree.SubElement(content.root, one_tag("Outline"))
        target = etree.SubElement(outline, one_tag("OEChildren"))
    return target


def build_table_of_contents(
    host: OneNoteHost,
    page: PageContent | Node | str,
    persist: bool = False,
) -> TocResult:
    """Apply ``TableOfContentsTransform`` with default settings."""
    return TableOfContentsTransform().apply(host, page, persist=persist)
