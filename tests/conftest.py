"""Shared fixtures: a small hierarchy and page content documents."""

import pytest

from onenote_hierarchy.host.snapshot import SnapshotHost
from onenote_hierarchy.parser.hierarchy import parse_hierarchy

HIERARCHY_XML = """<?xml version="1.0"?>
<one:Notebooks xmlns:one="http://schemas.microsoft.com/office/onenote/2013/onenote">
  <one:Notebook name="Work" nickname="Work" ID="{NB-WORK}" path="C:\\Notes\\Work" color="#ADE792" isCurrentlyViewed="true">
    <one:Section name="Meetings" ID="{S-MEET}" path="C:\\Notes\\Work\\Meetings.one" isCurrentlyViewed="true">
      <one:Page ID="{P-KICK}" name="Kickoff" dateTime="2024-01-08T09:00:00.000Z" lastModifiedTime="2024-01-09T10:00:00.000Z" pageLevel="1" isCurrentlyViewed="true"/>
      <one:Page ID="{P-RETRO}" name="Retro" pageLevel="1"/>
      <one:Page ID="{P-NOTES}" name="Notes" pageLevel="2"/>
      <one:Page ID="{P-PLAN}" name="Planning" pageLevel="1"/>
    </one:Section>
    <one:SectionGroup name="Archive" ID="{SG-ARCH}">
      <one:Section name="2023" ID="{S-2023}">
        <one:Page ID="{P-OLD}" name="Old plan" pageLevel="1"/>
      </one:Section>
    </one:SectionGroup>
  </one:Notebook>
  <one:Notebook name="Workshop" nickname="Workshop" ID="{NB-SHOP}">
    <one:Section name="Tools" ID="{S-TOOLS}"/>
  </one:Notebook>
  <one:Notebook name="Homework" nickname="Homework" ID="{NB-HOME}"/>
  <one:UnfiledNotes>
    <one:Section name="Quick Notes" ID="{S-QUICK}"/>
  </one:UnfiledNotes>
</one:Notebooks>
"""

# Three level-1 headings A, B, C; a nested h1 below C that is not top-level
PAGE_XML = """<?xml version="1.0"?>
<one:Page xmlns:one="http://schemas.microsoft.com/office/onenote/2013/onenote" ID="{P-KICK}" name="Kickoff" pageLevel="1">
  <one:QuickStyleDef index="0" name="PageTitle" fontColor="automatic" font="Calibri Light" fontSize="20.0" spaceBefore="0.0" spaceAfter="0.0"/>
  <one:QuickStyleDef index="1" name="p" fontColor="automatic" font="Calibri" fontSize="11.0" spaceBefore="0.0" spaceAfter="0.0"/>
  <one:QuickStyleDef index="2" name="h1" fontColor="#1e4e79" font="Calibri" fontSize="16.0" spaceBefore="0.8" spaceAfter="0.0"/>
  <one:PageSettings RTL="false" color="automatic"/>
  <one:Title lang="en-US">
    <one:OE objectID="{OE-TITLE}" quickStyleIndex="0">
      <one:T><![CDATA[Kickoff]]></one:T>
    </one:OE>
  </one:Title>
  <one:Outline objectID="{OUTLINE-1}">
    <one:OEChildren>
      <one:OE objectID="{OE-A}" quickStyleIndex="2" spaceBefore="1.5">
        <one:T><![CDATA[A]]></one:T>
      </one:OE>
      <one:OE objectID="{OE-P1}" quickStyleIndex="1" spaceBefore="0.4">
        <one:T><![CDATA[Introductory text]]></one:T>
      </one:OE>
      <one:OE objectID="{OE-B}" quickStyleIndex="2">
        <one:T><![CDATA[<span style='font-weight:bold'>B</span>]]></one:T>
      </one:OE>
      <one:OE objectID="{OE-C}" quickStyleIndex="2" spaceBefore="0.5">
        <one:T><![CDATA[C]]></one:T>
        <one:OEChildren>
          <one:OE objectID="{OE-NESTED}" quickStyleIndex="2" spaceBefore="0.9">
            <one:T><![CDATA[Nested]]></one:T>
          </one:OE>
        </one:OEChildren>
      </one:OE>
    </one:OEChildren>
  </one:Outline>
</one:Page>
"""

# No h1 style definition at all
PLAIN_PAGE_XML = """<?xml version="1.0"?>
<one:Page xmlns:one="http://schemas.microsoft.com/office/onenote/2013/onenote" ID="{P-RETRO}" name="Retro" pageLevel="1">
  <one:QuickStyleDef index="0" name="PageTitle" font="Calibri Light" fontSize="20.0" spaceBefore="0.0"/>
  <one:QuickStyleDef index="1" name="p" font="Calibri" fontSize="11.0" spaceBefore="0.0"/>
  <one:Title>
    <one:OE quickStyleIndex="0"><one:T><![CDATA[Retro]]></one:T></one:OE>
  </one:Title>
  <one:Outline>
    <one:OEChildren>
      <one:OE objectID="{OE-R1}" quickStyleIndex="1" spaceBefore="0.4">
        <one:T><![CDATA[What went well]]></one:T>
      </one:OE>
    </one:OEChildren>
  </one:Outline>
</one:Page>
"""


@pytest.fixture
def hierarchy_xml():
    return HIERARCHY_XML


@pytest.fixture
def page_xml():
    return PAGE_XML


@pytest.fixture
def plain_page_xml():
    return PLAIN_PAGE_XML


@pytest.fixture
def hierarchy():
    """The sample hierarchy parsed into Nodes."""
    return parse_hierarchy(HIERARCHY_XML)


@pytest.fixture
def host():
    """An in-memory host holding the sample hierarchy and two pages."""
    return SnapshotHost(
        HIERARCHY_XML,
        pages={"{P-KICK}": PAGE_XML, "{P-RETRO}": PLAIN_PAGE_XML},
    )


@pytest.fixture
def snapshot_dir(tmp_path, host):
    """The sample host saved to a snapshot directory."""
    return host.save(tmp_path / "snapshot")
