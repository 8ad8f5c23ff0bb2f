"""Normalizes the space above level-1 headings."""

import logging

from lxml import etree

from onenote_hierarchy.host.base import OneNoteHost
from onenote_hierarchy.model.content import PageContent
from onenote_hierarchy.model.node import Node
from onenote_hierarchy.transform.base import (
    H1_STYLE_NAME,
    ContentTransform,
    TransformResult,
)

logger = logging.getLogger(__name__)

# In the host's paragraph spacing unit
HEADING_SPACE_BEFORE = "0.23"


class HeadingSpacingTransform(ContentTransform):
    """Sets spaceBefore on the heading style and clears element overrides.

    An element's own spaceBefore wins over its style's, so overrides on
    the headings are removed for the style value to show.
    """

    name = "fix-spacing"

    def __init__(
        self,
        style_name: str = H1_STYLE_NAME,
        space_before: str = HEADING_SPACE_BEFORE,
    ) -> None:
        super().__init__(style_name)
        self.space_before = space_before

    def splice(
        self,
        host: OneNoteHost,
        content: PageContent,
        headings: list[etree._Element],
    ) -> TransformResult:
        for style in content.xpath(
            "one:QuickStyleDef[@name=$name]", name=self.style_name
        ):
            style.set("spaceBefore", self.space_before)

        cleared = 0
        for heading in headings:
            if heading.attrib.pop("spaceBefore", None) is not None:
                cleared += 1
        logger.debug("Cleared %d heading spacing override(s)", cleared)

        return TransformResult(content=content, headings=headings)


def normalize_heading_spacing(
    host: OneNoteHost,
    page: PageContent | Node | str,
    persist: bool = False,
) -> TransformResult:
    """Apply ``HeadingSpacingTransform`` with default settings."""
    return HeadingSpacingTransform().apply(host, page, persist=persist)
