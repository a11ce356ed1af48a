"""Shared fixtures: small hand-assembled packages and a python-docx document."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

RT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG_RT = "http://schemas.openxmlformats.org/package/2006/relationships"

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    "{overrides}"
    "</Types>"
)

RELS = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    f'<Relationships xmlns="{PKG_RT}">{{rels}}</Relationships>'
)

CORE_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<cp:coreProperties '
    'xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" '
    'xmlns:dc="http://purl.org/dc/elements/1.1/" '
    'xmlns:dcterms="http://purl.org/dc/terms/" '
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
    "<dc:title>Quarterly Report</dc:title>"
    "<dc:creator>Alice</dc:creator>"
    '<dcterms:created xsi:type="dcterms:W3CDTF">2020-01-02T03:04:05Z</dcterms:created>'
    "</cp:coreProperties>"
)

CORE_OVERRIDE = (
    '<Override PartName="/docProps/core.xml" '
    'ContentType="application/vnd.openxmlformats-package.core-properties+xml"/>'
)
CORE_REL = f'<Relationship Id="rId2" Type="{PKG_RT}/metadata/core-properties" Target="docProps/core.xml"/>'


def rel(rid: str, reltype: str, target: str, external: bool = False) -> str:
    mode = ' TargetMode="External"' if external else ""
    return f'<Relationship Id="{rid}" Type="{RT}/{reltype}" Target="{target}"{mode}/>'


def write_package(path: Path, entries: Dict[str, str]) -> Path:
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, text in entries.items():
            archive.writestr(name, text)
    return path


def document_entries(part_rels: str = "", settings: bool = True, core: bool = True) -> Dict[str, str]:
    overrides = (
        '<Override PartName="/word/document.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    )
    if settings:
        overrides += (
            '<Override PartName="/word/settings.xml" '
            'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.settings+xml"/>'
        )
        part_rels = rel("rId1", "settings", "settings.xml") + part_rels
    if core:
        overrides += CORE_OVERRIDE

    entries = {
        "[Content_Types].xml": CONTENT_TYPES.format(overrides=overrides),
        "_rels/.rels": RELS.format(
            rels=rel("rId1", "officeDocument", "word/document.xml") + (CORE_REL if core else "")
        ),
        "word/document.xml": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
            "<w:body><w:p><w:r><w:t>Hello</w:t></w:r></w:p></w:body></w:document>"
        ),
        "word/_rels/document.xml.rels": RELS.format(rels=part_rels),
    }
    if settings:
        entries["word/settings.xml"] = (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<w:settings xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"/>'
        )
    if core:
        entries["docProps/core.xml"] = CORE_XML
    return entries


def workbook_entries(core: bool = True) -> Dict[str, str]:
    overrides = (
        '<Override PartName="/xl/workbook.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"/>'
        '<Override PartName="/xl/worksheets/sheet1.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.worksheet+xml"/>'
    )
    if core:
        overrides += CORE_OVERRIDE
    entries = {
        "[Content_Types].xml": CONTENT_TYPES.format(overrides=overrides),
        "_rels/.rels": RELS.format(
            rels=rel("rId1", "officeDocument", "xl/workbook.xml") + (CORE_REL if core else "")
        ),
        "xl/workbook.xml": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<workbook xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main" '
            f'xmlns:r="{RT}"><sheets><sheet name="Sheet1" sheetId="1" r:id="rId1"/></sheets></workbook>'
        ),
        "xl/_rels/workbook.xml.rels": RELS.format(rels=rel("rId1", "worksheet", "worksheets/sheet1.xml")),
        "xl/worksheets/sheet1.xml": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<worksheet xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main"><sheetData/></worksheet>'
        ),
    }
    if core:
        entries["docProps/core.xml"] = CORE_XML
    return entries


def presentation_entries() -> Dict[str, str]:
    overrides = (
        '<Override PartName="/ppt/presentation.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"/>'
    )
    return {
        "[Content_Types].xml": CONTENT_TYPES.format(overrides=overrides),
        "_rels/.rels": RELS.format(rels=rel("rId1", "officeDocument", "ppt/presentation.xml")),
        "ppt/presentation.xml": (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<p:presentation xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"/>'
        ),
    }


@pytest.fixture
def docx_file(tmp_path: Path) -> Path:
    return write_package(tmp_path / "report.docx", document_entries())


@pytest.fixture
def linked_docx_file(tmp_path: Path) -> Path:
    """Document whose main part already links an external hyperlink."""
    extra = rel("rId7", "hyperlink", "https://example.org/existing", external=True)
    return write_package(tmp_path / "linked.docx", document_entries(part_rels=extra))


@pytest.fixture
def xlsx_file(tmp_path: Path) -> Path:
    return write_package(tmp_path / "book.xlsx", workbook_entries())


@pytest.fixture
def bare_xlsx_file(tmp_path: Path) -> Path:
    return write_package(tmp_path / "bare.xlsx", workbook_entries(core=False))


@pytest.fixture
def pptx_file(tmp_path: Path) -> Path:
    return write_package(tmp_path / "deck.pptx", presentation_entries())


@pytest.fixture
def python_docx_file(tmp_path: Path) -> Path:
    """A document produced by python-docx from its default template."""
    docx = pytest.importorskip("docx")
    document = docx.Document()
    document.add_paragraph("Generated for doctrack tests.")
    path = tmp_path / "generated.docx"
    document.save(str(path))
    return path


def read_entry(path: Path, name: str) -> Optional[bytes]:
    with zipfile.ZipFile(path) as archive:
        if name not in archive.namelist():
            return None
        return archive.read(name)
