"""Tests for external relationship inspection and the report."""

from __future__ import annotations

from doctrack.editor import insert_tracking_relationship
from doctrack.inspector import (
    ExternalTarget,
    format_report,
    iter_metadata,
    list_external_relationships,
)
from doctrack.ooxml.coreprops import FIELDS
from doctrack.ooxml.package import SourcePackage

from conftest import RELS, document_entries, rel, write_package


def _clone(path):
    with SourcePackage.open(path) as source:
        return source.clone()


def test_no_external_relationships(docx_file):
    listing = list_external_relationships(_clone(docx_file))
    assert list(listing) == []
    assert len(listing) == 0
    assert not listing


def test_lists_inserted_tracking_relationship(docx_file):
    package = _clone(docx_file)
    added = insert_tracking_relationship(package, "https://example.org/p.png")

    assert list(list_external_relationships(package)) == [
        ExternalTarget("/word/document.xml", added.rId, "https://example.org/p.png")
    ]


def test_listing_is_restartable_and_live(docx_file):
    package = _clone(docx_file)
    listing = list_external_relationships(package)
    assert list(listing) == []

    insert_tracking_relationship(package, "https://example.org/p.png")

    assert len(list(listing)) == 1
    assert list(listing) == list(listing)


def test_order_is_package_then_parts_in_archive_order(tmp_path):
    entries = document_entries(
        part_rels=rel("rId8", "hyperlink", "https://example.org/doc", external=True)
    )
    entries["_rels/.rels"] = entries["_rels/.rels"].replace(
        "</Relationships>",
        rel("rId9", "hyperlink", "https://example.org/pkg", external=True) + "</Relationships>",
    )
    entries["word/_rels/settings.xml.rels"] = RELS.format(
        rels=rel("rId1", "attachedTemplate", "https://example.org/t.dotm", external=True)
    )
    package = _clone(write_package(tmp_path / "many.docx", entries))

    assert [(e.owner, e.target) for e in list_external_relationships(package)] == [
        ("/", "https://example.org/pkg"),
        ("/word/document.xml", "https://example.org/doc"),
        ("/word/settings.xml", "https://example.org/t.dotm"),
    ]


def test_internal_relationships_are_skipped(linked_docx_file):
    listing = list(list_external_relationships(_clone(linked_docx_file)))
    assert listing == [ExternalTarget("/word/document.xml", "rId7", "https://example.org/existing")]


def test_metadata_pairs_cover_every_field(docx_file):
    pairs = dict(iter_metadata(_clone(docx_file)))
    assert list(pairs) == list(FIELDS)
    assert list(pairs)[:6] == ["Title", "Subject", "Creator", "Keywords", "Description", "LastModifiedBy"]
    assert list(pairs)[-1] == "ContentStatus"
    assert pairs["Title"] == "Quarterly Report"
    assert pairs["Creator"] == "Alice"
    assert pairs["Created"].year == 2020
    assert pairs["Subject"] is None


def test_metadata_without_core_part(bare_xlsx_file):
    assert all(value is None for _, value in iter_metadata(_clone(bare_xlsx_file)))


def test_report_layout(linked_docx_file):
    report = format_report(_clone(linked_docx_file)).splitlines()

    assert report[0] == "[External targets]"
    assert report[1] == "Part: /word/document.xml, ID: rId7, URI: https://example.org/existing"
    assert report[2] == "[Metadata]"
    assert "Title: Quarterly Report" in report
    assert "Created: 2020-01-02T03:04:05Z" in report
    assert "Keywords: None" in report
    assert len(report) == 3 + len(FIELDS)
