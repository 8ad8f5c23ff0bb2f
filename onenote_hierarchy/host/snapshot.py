"""In-memory host over a saved copy of a OneNote hierarchy.

A snapshot directory holds the output of the host's own calls::

    snapshot/
      hierarchy.xml          GetHierarchy("", hsPages)
      pages/<anything>.xml   GetPageContent(pageID), one file per page

Page files are indexed by the ``ID`` attribute of their root element,
so file names are free-form.  Writes go to memory and, for snapshots
loaded from disk, through to the same files.
"""

import logging
import re
from pathlib import Path

from lxml import etree

from onenote_hierarchy.errors import HostError, NodeNotFound
from onenote_hierarchy.host.base import HierarchyScope
from onenote_hierarchy.parser.hierarchy import load_xml
from onenote_hierarchy.utils import NSMAP

logger = logging.getLogger(__name__)

HIERARCHY_FILE = "hierarchy.xml"
PAGES_DIR = "pages"


class SnapshotHost:
    """A OneNoteHost backed by XML documents instead of a live application.

    Every call is recorded in ``calls`` as ``(operation, argument)`` so
    callers can check how many round trips an operation made.
    """

    def __init__(
        self,
        hierarchy: str | bytes | etree._Element,
        pages: dict[str, str | bytes | etree._Element] | None = None,
        directory: str | Path | None = None,
    ) -> None:
        self._hierarchy = load_xml(hierarchy)
        self._pages: dict[str, etree._Element] = {}
        self._page_files: dict[str, Path] = {}
        self.directory = Path(directory) if directory else None
        self.calls: list[tuple[str, str]] = []
        self.closed = False

        for page_id, raw in (pages or {}).items():
            self._pages[page_id] = load_xml(raw)

    @classmethod
    def from_directory(cls, directory: str | Path) -> "SnapshotHost":
        """Load a snapshot directory written by ``save``."""
        directory = Path(directory)
        hierarchy_path = directory / HIERARCHY_FILE
        if not hierarchy_path.is_file():
            raise HostError(f"No {HIERARCHY_FILE} in snapshot {directory}")

        host = cls(hierarchy_path.read_bytes(), directory=directory)
        pages_dir = directory / PAGES_DIR
        if pages_dir.is_dir():
            for path in sorted(pages_dir.glob("*.xml")):
                root = load_xml(path.read_bytes())
                page_id = root.get("ID", "")
                if not page_id:
                    logger.warning("Ignoring %s: page has no ID", path)
                    continue
                host._pages[page_id] = root
                host._page_files[page_id] = path
        logger.info(
            "Loaded snapshot %s (%d page document(s))",
            directory, len(host._pages),
        )
        return host

    def save(self, directory: str | Path | None = None) -> Path:
        """Write the hierarchy and every page document to a directory."""
        target = Path(directory) if directory else self.directory
        if target is None:
            raise HostError("Snapshot has no directory to save to")
        pages_dir = target / PAGES_DIR
        pages_dir.mkdir(parents=True, exist_ok=True)
        _write_xml(target / HIERARCHY_FILE, self._hierarchy)
        for page_id, root in self._pages.items():
            path = self._page_files.get(page_id)
            if path is None or path.parent != pages_dir:
                path = pages_dir / f"{_sanitize_filename(page_id)}.xml"
                self._page_files[page_id] = path
            _write_xml(path, root)
        self.directory = target
        return target

    # -------------------------------------------------------------------------
    # OneNoteHost
    # -------------------------------------------------------------------------

    def fetch_hierarchy(
        self, scope: HierarchyScope, start_node_id: str = ""
    ) -> str:
        scope = HierarchyScope(scope)
        self.calls.append(("fetch_hierarchy", start_node_id))
        element = self._find(start_node_id) if start_node_id else self._hierarchy
        logger.debug(
            "fetch_hierarchy scope=%s start=%r", scope.name, start_node_id,
        )
        # Depth truncation is left to the query engine
        return etree.tostring(element, encoding="unicode", with_tail=False)

    def fetch_page_content(self, page_id: str) -> str:
        self.calls.append(("fetch_page_content", page_id))
        root = self._pages.get(page_id)
        if root is None:
            raise HostError(f"No content stored for page '{page_id}'")
        return etree.tostring(root, encoding="unicode")

    def persist_page_content(self, raw: str) -> None:
        root = load_xml(raw)
        page_id = root.get("ID", "")
        self.calls.append(("persist_page_content", page_id))
        if not page_id:
            raise HostError("Page content has no ID")
        if page_id not in self._pages:
            # The live host only updates pages that already exist
            self._find(page_id)
        self._pages[page_id] = root
        if self.directory is not None:
            self.save()
        logger.debug("Stored content for page %s", page_id)

    def resolve_link_target(self, page_id: str, object_id: str) -> str:
        self.calls.append(("resolve_link_target", object_id))
        page = self._find(page_id)
        return (
            f"onenote:#{page.get('name', '')}"
            f"&page-id={page_id}&object-id={object_id}&end"
        )

    def update_hierarchy(self, raw: str) -> None:
        """Apply the name and child order of each node in ``raw``.

        Children the incoming XML does not mention keep their place
        after the ones it orders.
        """
        incoming = load_xml(raw)
        self.calls.append(("update_hierarchy", incoming.get("ID", "")))
        for changed in incoming.iter():
            node_id = changed.get("ID")
            if node_id:
                existing = self._find(node_id)
            elif changed is incoming and changed.tag == self._hierarchy.tag:
                # <one:Notebooks> root: notebook order
                existing = self._hierarchy
            else:
                continue
            if changed.get("name"):
                existing.set("name", changed.get("name"))
            order = [c.get("ID") for c in changed if c.get("ID")]
            if order:
                _reorder_children(existing, order)
        if self.directory is not None:
            self.save()

    def close(self) -> None:
        self.closed = True

    def _find(self, node_id: str) -> etree._Element:
        found = self._hierarchy.xpath(
            "descendant-or-self::*[@ID=$node_id]",
            namespaces=NSMAP, node_id=node_id,
        )
        if not found:
            raise NodeNotFound(node_id)
        return found[0]


def _reorder_children(parent: etree._Element, order: list[str]) -> None:
    by_id = {c.get("ID"): c for c in parent if c.get("ID")}
    ordered = [by_id[i] for i in order if i in by_id]
    if not ordered:
        return
    # Anchor at the first ordered child's position so unrelated
    # siblings (Meta and friends) keep theirs.
    anchor = min(parent.index(c) for c in ordered)
    for child in ordered:
        parent.remove(child)
    for offset, child in enumerate(ordered):
        parent.insert(anchor + offset, child)


def _write_xml(path: Path, root: etree._Element) -> None:
    path.write_bytes(
        etree.tostring(root, xml_declaration=True, encoding="utf-8")
    )
    logger.debug("Wrote %s", path)


def _sanitize_filename(name: str) -> str:
    """Sanitize a string for use as a filename."""
    sanitized = re.sub(r'[<>:"/\\|?*{}\x00-\x1f]', "_", name)
    sanitized = re.sub(r"_+", "_", sanitized).strip("_ ")
    return sanitized[:200] or "page"
