#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document families supported by the relationship editor.

A family is detected from the loaded package structure: the part named by
the package-level officeDocument relationship and that part's content type.
Each family carries the relationship vocabulary the editor needs.
"""

from __future__ import annotations

import posixpath
from typing import Dict, FrozenSet, Optional, Tuple

from .errors import UnsupportedDocumentKind

RT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"

RT_IMAGE = RT + "image"
RT_HYPERLINK = RT + "hyperlink"
RT_ATTACHED_TEMPLATE = RT + "attachedTemplate"
RT_SETTINGS = RT + "settings"

SETTINGS_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.settings+xml"
EMPTY_SETTINGS_XML = (
    b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    b'<w:settings xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"/>'
)

# (file name beside the root part, content type, initial content)
NewPart = Tuple[str, str, bytes]

DOCUMENT_CONTENT_TYPES = frozenset({
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.template.main+xml",
    "application/vnd.ms-word.document.macroEnabled.main+xml",
    "application/vnd.ms-word.template.macroEnabledTemplate.main+xml",
})

WORKBOOK_CONTENT_TYPES = frozenset({
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.template.main+xml",
    "application/vnd.ms-excel.sheet.macroEnabled.main+xml",
    "application/vnd.ms-excel.template.macroEnabled.main+xml",
})


class PackageFamily:
    """Capabilities of one document family."""

    def __init__(
        self,
        name: str,
        main_content_types: FrozenSet[str],
        tracking_reltype: str,
        template_reltype: str,
        template_owner_reltype: Optional[str] = None,
        template_owner_part: Optional[NewPart] = None,
    ):
        self.name = name
        self.main_content_types = main_content_types
        self.tracking_reltype = tracking_reltype
        self.template_reltype = template_reltype
        self.template_owner_reltype = template_owner_reltype
        self.template_owner_part = template_owner_part

    def __repr__(self) -> str:
        return f"<PackageFamily {self.name}>"

    def matches(self, package) -> bool:
        main = package.main_partname
        if main is None:
            return False
        return package.content_types.content_type_for(main) in self.main_content_types

    def root_part(self, package) -> str:
        """Part whose relationships receive tracking relationships."""
        main = package.main_partname
        if main is None:
            raise UnsupportedDocumentKind("Package has no main document part")
        return main

    def template_owner(self, package, create: bool = False) -> Optional[str]:
        """
        Part whose relationships hold the template relationship.

        Documents keep it on the settings part. When a document has none,
        ``None`` is returned, or with ``create`` a settings part is added
        beside the root part and linked from it. Workbooks use the root part.
        """
        root = self.root_part(package)
        if self.template_owner_reltype is None:
            return root
        root_rels = package.existing_rels(root)
        owner = root_rels.part_for(self.template_owner_reltype) if root_rels is not None else None
        if owner is not None and package.has_part(owner):
            return owner
        if not create or self.template_owner_part is None:
            return None

        filename, content_type, blob = self.template_owner_part
        owner = posixpath.join(posixpath.dirname(root), filename)
        if not package.has_part(owner):
            package.add_part(owner, content_type, blob)
        package.part_rels(root).add(self.template_owner_reltype, filename)
        return owner


DOCUMENT = PackageFamily(
    "document",
    DOCUMENT_CONTENT_TYPES,
    tracking_reltype=RT_IMAGE,
    template_reltype=RT_ATTACHED_TEMPLATE,
    template_owner_reltype=RT_SETTINGS,
    template_owner_part=("settings.xml", SETTINGS_CONTENT_TYPE, EMPTY_SETTINGS_XML),
)

WORKBOOK = PackageFamily(
    "workbook",
    WORKBOOK_CONTENT_TYPES,
    tracking_reltype=RT_HYPERLINK,
    template_reltype=RT_ATTACHED_TEMPLATE,
)

FAMILIES: Tuple[PackageFamily, ...] = (DOCUMENT, WORKBOOK)

# type name -> (extension, family), in the order --list-types shows them
DOCUMENT_TYPES: Dict[str, Tuple[str, PackageFamily]] = {
    "Document": (".docx", DOCUMENT),
    "MacroEnabledDocument": (".docm", DOCUMENT),
    "MacroEnabledTemplate": (".dotm", DOCUMENT),
    "Template": (".dotx", DOCUMENT),
    "Workbook": (".xlsx", WORKBOOK),
    "MacroEnabledWorkbook": (".xlsm", WORKBOOK),
    "MacroEnabledTemplateX": (".xltm", WORKBOOK),
    "TemplateX": (".xltx", WORKBOOK),
}


def detect_family(package) -> PackageFamily:
    for family in FAMILIES:
        if family.matches(package):
            return family
    main = package.main_partname
    content_type = package.content_types.content_type_for(main) if main else None
    raise UnsupportedDocumentKind(
        f"Unsupported document kind: {content_type or 'no main document part'}"
    )


def family_for_type(type_name: str) -> PackageFamily:
    try:
        return DOCUMENT_TYPES[type_name][1]
    except KeyError:
        raise UnsupportedDocumentKind(
            "Specify correct document type, use --list-types to view types."
        ) from None


def format_type_table() -> str:
    width = max(len(name) for name in DOCUMENT_TYPES) + 1
    lines = [f"{name:<{width}}(*{ext})" for name, (ext, _) in DOCUMENT_TYPES.items()]
    return "\n".join(lines) + "\n"
