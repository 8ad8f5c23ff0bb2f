"""Tests for onenote_hierarchy.host modules."""

import pytest

from onenote_hierarchy.errors import HostError, NodeNotFound
from onenote_hierarchy.host.base import HierarchyScope, OneNoteHost, host_session
from onenote_hierarchy.host.snapshot import SnapshotHost
from onenote_hierarchy.parser.content import parse_page_content
from onenote_hierarchy.parser.hierarchy import parse_hierarchy


class _FailingCloseHost(SnapshotHost):
    def close(self):
        super().close()
        raise HostError("connection already gone")


class TestHierarchyScope:
    """Tests for HierarchyScope."""

    def test_values_match_host_enumeration(self):
        assert [s.value for s in HierarchyScope] == [0, 1, 2, 3, 4]
        assert HierarchyScope(4) is HierarchyScope.PAGES


class TestHostSession:
    """Tests for host_session."""

    def test_closes_on_success(self, host):
        with host_session(lambda: host) as session:
            assert session is host
            assert host.closed is False
        assert host.closed is True

    def test_closes_on_error(self, host):
        with pytest.raises(NodeNotFound):
            with host_session(lambda: host) as session:
                session.fetch_hierarchy(HierarchyScope.SELF, "{NOPE}")
        assert host.closed is True

    def test_close_failure_propagates(self, hierarchy_xml):
        failing = _FailingCloseHost(hierarchy_xml)
        with pytest.raises(HostError, match="already gone"):
            with host_session(lambda: failing):
                pass
        assert failing.closed is True


class TestSnapshotHost:
    """Tests for SnapshotHost."""

    def test_satisfies_protocol(self, host):
        assert isinstance(host, OneNoteHost)

    def test_fetch_subtree(self, host):
        section = parse_hierarchy(host.fetch_hierarchy(HierarchyScope.PAGES, "{S-MEET}"))
        assert section.name == "Meetings"
        assert len(section.children) == 4

    def test_fetch_accepts_plain_scope_value(self, host):
        section = parse_hierarchy(host.fetch_hierarchy(0, "{S-MEET}"))
        assert section.name == "Meetings"

    def test_fetch_rejects_unknown_scope(self, host):
        with pytest.raises(ValueError):
            host.fetch_hierarchy(7, "{S-MEET}")

    def test_fetch_unknown_node(self, host):
        with pytest.raises(NodeNotFound):
            host.fetch_hierarchy(HierarchyScope.SELF, "{NOPE}")

    def test_fetch_missing_page_content(self, host):
        with pytest.raises(HostError):
            host.fetch_page_content("{P-PLAN}")

    def test_persist_replaces_content(self, host, page_xml):
        content = parse_page_content(page_xml)
        content.root.set("name", "Renamed")
        host.persist_page_content(content.to_xml())
        assert parse_page_content(host.fetch_page_content("{P-KICK}")).name == "Renamed"

    def test_persist_unknown_page(self, host, page_xml):
        with pytest.raises(NodeNotFound):
            host.persist_page_content(page_xml.replace("{P-KICK}", "{P-GHOST}"))

    def test_resolve_link_target(self, host):
        link = host.resolve_link_target("{P-KICK}", "{OE-A}")
        assert link.startswith("onenote:")
        assert "page-id={P-KICK}" in link
        assert "object-id={OE-A}" in link

    def test_update_hierarchy_renames(self, host):
        host.update_hierarchy(
            '<one:Section xmlns:one="http://schemas.microsoft.com/office/onenote/2013/onenote"'
            ' ID="{S-TOOLS}" name="Toolbox"/>'
        )
        node = parse_hierarchy(host.fetch_hierarchy(HierarchyScope.SELF, "{S-TOOLS}"))
        assert node.name == "Toolbox"

    def test_records_calls(self, host):
        host.fetch_page_content("{P-KICK}")
        host.resolve_link_target("{P-KICK}", "{OE-A}")
        assert host.calls == [
            ("fetch_page_content", "{P-KICK}"),
            ("resolve_link_target", "{OE-A}"),
        ]


class TestSnapshotDirectory:
    """Tests for loading and saving snapshot directories."""

    def test_save_layout(self, snapshot_dir):
        assert (snapshot_dir / "hierarchy.xml").is_file()
        assert len(list((snapshot_dir / "pages").glob("*.xml"))) == 2

    def test_page_file_names_are_safe(self, snapshot_dir):
        for path in (snapshot_dir / "pages").glob("*.xml"):
            assert "{" not in path.name
            assert "}" not in path.name

    def test_load_round_trip(self, snapshot_dir):
        loaded = SnapshotHost.from_directory(snapshot_dir)
        content = parse_page_content(loaded.fetch_page_content("{P-RETRO}"))
        assert content.title == "Retro"
        root = parse_hierarchy(loaded.fetch_hierarchy(HierarchyScope.PAGES))
        assert [n.name for n in root.children] == ["Work", "Workshop", "Homework"]

    def test_persist_writes_through(self, snapshot_dir, page_xml):
        loaded = SnapshotHost.from_directory(snapshot_dir)
        loaded.persist_page_content(page_xml.replace('name="Kickoff"', 'name="Saved"'))
        reloaded = SnapshotHost.from_directory(snapshot_dir)
        stored = parse_page_content(reloaded.fetch_page_content("{P-KICK}"))
        assert stored.name == "Saved"

    def test_page_without_id_ignored(self, snapshot_dir, caplog):
        (snapshot_dir / "pages" / "stray.xml").write_text(
            '<one:Page xmlns:one="http://schemas.microsoft.com/office/onenote/2013/onenote"/>'
        )
        with caplog.at_level("WARNING"):
            SnapshotHost.from_directory(snapshot_dir)
        assert "stray.xml" in caplog.text

    def test_missing_hierarchy(self, tmp_path):
        with pytest.raises(HostError):
            SnapshotHost.from_directory(tmp_path)

    def test_save_without_directory(self, host):
        with pytest.raises(HostError):
            host.save()
