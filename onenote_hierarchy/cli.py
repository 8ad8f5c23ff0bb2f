"""CLI entry point for querying and editing a OneNote hierarchy snapshot."""

import argparse
import logging
import sys
from pathlib import Path

from onenote_hierarchy.errors import HostError, OneNoteHierarchyError
from onenote_hierarchy.host.base import HierarchyScope, host_session
from onenote_hierarchy.host.snapshot import SnapshotHost
from onenote_hierarchy.model.node import Node, NodeKind
from onenote_hierarchy.query import current_path, filter_by_name, iter_nodes, query
from onenote_hierarchy.reorder import ReorderOutcome, move_child
from onenote_hierarchy.transform.spacing import HeadingSpacingTransform
from onenote_hierarchy.transform.toc import TableOfContentsTransform

_SCOPES = {scope.name.lower(): scope for scope in HierarchyScope}
_KINDS = {
    "notebook": NodeKind.NOTEBOOK,
    "sectiongroup": NodeKind.SECTION_GROUP,
    "section": NodeKind.SECTION,
    "page": NodeKind.PAGE,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the onenote-hierarchy CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    snapshot_dir = Path(args.snapshot).resolve()
    if not snapshot_dir.is_dir():
        print(f"Error: Snapshot directory does not exist: {snapshot_dir}",
              file=sys.stderr)
        return 1

    try:
        with host_session(lambda: SnapshotHost.from_directory(snapshot_dir)) as host:
            return args.handler(host, args)
    except HostError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OneNoteHierarchyError as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.debug("Full traceback:", exc_info=True)
        return 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onenote-hierarchy",
        description="Query and edit a saved OneNote notebook hierarchy",
    )
    parser.add_argument(
        "-s",
        "--snapshot",
        required=True,
        help="Snapshot directory (hierarchy.xml and pages/*.xml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (very verbose)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List hierarchy nodes")
    list_cmd.add_argument(
        "--scope",
        choices=sorted(_SCOPES),
        default="pages",
        help="How far below the start node to expand (default: pages)",
    )
    list_cmd.add_argument("--start", default="", help="Start node ID")
    list_cmd.add_argument("--name", help="Name pattern (* and ? wildcards)")
    list_cmd.add_argument(
        "--kind", choices=sorted(_KINDS), help="Only list nodes of this kind",
    )
    list_cmd.set_defaults(handler=_cmd_list)

    current_cmd = commands.add_parser(
        "current", help="Show the current notebook, section and page",
    )
    current_cmd.set_defaults(handler=_cmd_current)

    move_cmd = commands.add_parser("move", help="Move a node among its siblings")
    move_cmd.add_argument("child", help="ID of the node to move")
    move_cmd.add_argument("index", type=int, help="Zero-based target position")
    move_cmd.add_argument(
        "--parent", default="", help="Parent node ID (default: notebooks root)",
    )
    move_cmd.set_defaults(handler=_cmd_move)

    for name, help_text, transform in (
        ("toc", "Rebuild the page's table of contents", TableOfContentsTransform),
        ("fix-spacing", "Normalize space above headings", HeadingSpacingTransform),
    ):
        cmd = commands.add_parser(name, help=help_text)
        cmd.add_argument("page", help="Page ID")
        cmd.add_argument(
            "--dry-run",
            action="store_true",
            help="Print the changed page XML instead of saving it",
        )
        cmd.set_defaults(handler=_cmd_transform, transform=transform)

    return parser


def _cmd_list(host, args: argparse.Namespace) -> int:
    root = query(host, _SCOPES[args.scope], args.start)
    kind = _KINDS.get(args.kind) if args.kind else None
    nodes = list(iter_nodes(root, kind))
    if args.name:
        nodes = filter_by_name(nodes, args.name)

    depths = _depths(root)
    for node in nodes:
        if node.kind is NodeKind.ROOT:
            continue
        print(_format_node(node, depths.get(id(node), 0)))
    return 0


def _cmd_current(host, args: argparse.Namespace) -> int:
    root = query(host, HierarchyScope.PAGES)
    path = current_path(root)
    if not path:
        print("No current notebook", file=sys.stderr)
        return 1
    for depth, node in enumerate(path):
        print(_format_node(node, depth))
    return 0


def _cmd_move(host, args: argparse.Namespace) -> int:
    result = move_child(host, args.parent, args.child, args.index, persist=True)
    if result.outcome is ReorderOutcome.POSITION_OUT_OF_BOUNDS:
        print(
            f"Position {args.index} is out of bounds "
            f"({len(result.parent.children)} siblings)",
            file=sys.stderr,
        )
        return 1
    if result.moved:
        print(f"Moved from position {result.old_index} to {result.new_index}")
    else:
        print(f"Already at position {result.old_index}")
    return 0


def _cmd_transform(host, args: argparse.Namespace) -> int:
    transform = args.transform()
    result = transform.apply(host, args.page, persist=not args.dry_run)
    if args.dry_run:
        print(result.content.to_xml())
    else:
        print(f"{transform.name}: {len(result.headings)} heading(s) on "
              f"'{result.content.title}'")
    return 0


def _depths(root: Node) -> dict[int, int]:
    depths: dict[int, int] = {}
    stack = [(root, -1)]
    while stack:
        node, depth = stack.pop()
        depths[id(node)] = depth
        stack.extend((child, depth + 1) for child in node.children)
    return depths


def _format_node(node: Node, depth: int) -> str:
    marker = "*" if node.is_currently_active else " "
    # pageLevel is 1 for top-level pages, 2+ for subpages
    indent = "  " * (max(depth, 0) + max(node.level - 1, 0))
    return f"{marker} {indent}{node.kind.value}: {node.name} [{node.id}]"


if __name__ == "__main__":
    sys.exit(main())
