"""Full page content: style definitions and the outline element tree."""

from dataclasses import dataclass

from lxml import etree

from onenote_hierarchy.utils import NSMAP, one_tag


@dataclass(frozen=True)
class StyleDef:
    """A ``QuickStyleDef``: a named style referenced by index."""
    index: str
    name: str
    space_before: str = ""
    space_after: str = ""
    font: str = ""
    font_size: str = ""


class PageContent:
    """The content document of one page, as returned by the host.

    Wraps the lxml tree of a ``one:Page`` content document.  Instances
    are built by ``parse_page_content``, which checks the document is
    a full content page rather than a hierarchy entry.
    """

    def __init__(self, root: etree._Element) -> None:
        self.root = root

    @property
    def page_id(self) -> str:
        return self.root.get("ID", "")

    @property
    def name(self) -> str:
        return self.root.get("name", "")

    @property
    def title(self) -> str:
        """Plain text of the page title, or the page name."""
        texts = self.root.xpath("one:Title//one:T/text()", namespaces=NSMAP)
        title = "".join(texts).strip()
        return title or self.name

    def xpath(self, expr: str, **variables: object) -> list:
        """Evaluate an XPath with the ``one`` prefix bound."""
        return self.root.xpath(expr, namespaces=NSMAP, **variables)

    def style_defs(self) -> list[StyleDef]:
        """Return all style definitions in document order."""
        defs: list[StyleDef] = []
        for el in self.root.iterchildren(one_tag("QuickStyleDef")):
            defs.append(
                StyleDef(
                    index=el.get("index", ""),
                    name=el.get("name", ""),
                    space_before=el.get("spaceBefore", ""),
                    space_after=el.get("spaceAfter", ""),
                    font=el.get("font", ""),
                    font_size=el.get("fontSize", ""),
                )
            )
        return defs

    def outline_elements(self) -> list[etree._Element]:
        """Return the top-level ``OE`` elements of every outline."""
        return self.xpath("one:Outline/one:OEChildren/one:OE")

    def first_outline_children(self) -> etree._Element | None:
        """Return the ``OEChildren`` of the first outline, if any."""
        found = self.xpath("one:Outline[1]/one:OEChildren[1]")
        return found[0] if found else None

    def to_xml(self) -> str:
        """Serialize the document for ``persist_page_content``."""
        return etree.tostring(self.root, encoding="unicode")

    def __repr__(self) -> str:
        return f"PageContent(page_id={self.page_id!r}, title={self.title!r})"
