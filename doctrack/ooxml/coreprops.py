#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core properties part (``docProps/core.xml``).

Field names follow the package property names shown by Office tooling
(``Title``, ``LastModifiedBy`` ...). Values are read and written as text,
except ``Created``, ``Modified`` and ``LastPrinted`` which are date-times.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterator, Optional, Tuple, Union

from ..utilities import XMLEditor, local_name, text_of

CP_NS = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
DC_NS = "http://purl.org/dc/elements/1.1/"
DCTERMS_NS = "http://purl.org/dc/terms/"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

TEXT = "text"
STRING = "string"
DATETIME = "datetime"

# field name -> (namespace, element, preferred prefix, kind), in display order
FIELDS: Dict[str, Tuple[str, str, str, str]] = {
    "Title": (DC_NS, "title", "dc", STRING),
    "Subject": (DC_NS, "subject", "dc", STRING),
    "Creator": (DC_NS, "creator", "dc", STRING),
    "Keywords": (CP_NS, "keywords", "cp", STRING),
    "Description": (DC_NS, "description", "dc", TEXT),
    "LastModifiedBy": (CP_NS, "lastModifiedBy", "cp", STRING),
    "Revision": (CP_NS, "revision", "cp", STRING),
    "LastPrinted": (CP_NS, "lastPrinted", "cp", DATETIME),
    "Created": (DCTERMS_NS, "created", "dcterms", DATETIME),
    "Modified": (DCTERMS_NS, "modified", "dcterms", DATETIME),
    "Category": (CP_NS, "category", "cp", STRING),
    "Identifier": (DC_NS, "identifier", "dc", STRING),
    "ContentType": (CP_NS, "contentType", "cp", STRING),
    "Language": (DC_NS, "language", "dc", STRING),
    "Version": (CP_NS, "version", "cp", STRING),
    "ContentStatus": (CP_NS, "contentStatus", "cp", STRING),
}

# dcterms dates carry an explicit W3CDTF type
_TYPED_DATES = {"Created", "Modified"}

EMPTY_CORE_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    f'<cp:coreProperties xmlns:cp="{CP_NS}" xmlns:dc="{DC_NS}" '
    f'xmlns:dcterms="{DCTERMS_NS}" xmlns:dcmitype="http://purl.org/dc/dcmitype/" '
    f'xmlns:xsi="{XSI_NS}"/>'
).encode("utf-8")

Value = Union[str, datetime, None]


def parse_w3cdtf(value: str) -> datetime:
    """Parse an ISO 8601 / W3CDTF string; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_w3cdtf(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class CoreProperties:
    """Typed access to the elements of a core properties stream."""

    def __init__(self, partname: str, blob: Optional[bytes] = None):
        self.partname = partname
        self.dirty = blob is None
        self._original = blob
        self._editor = XMLEditor(blob if blob is not None else EMPTY_CORE_XML, partname)

    def _element(self, field: str):
        namespace, local, _, _ = FIELDS[field]
        for child in self._editor.root.childNodes:
            if child.nodeType != child.ELEMENT_NODE:
                continue
            if local_name(child) == local and child.namespaceURI == namespace:
                return child
        return None

    def has(self, field: str) -> bool:
        return self._element(field) is not None

    def get(self, field: str) -> Value:
        element = self._element(field)
        if element is None:
            return None
        raw = text_of(element)
        if FIELDS[field][3] != DATETIME:
            return raw
        try:
            return parse_w3cdtf(raw)
        except ValueError:
            return None

    def set(self, field: str, value: Value) -> None:
        namespace, local, prefix, kind = FIELDS[field]
        element = self._element(field)
        if value is None:
            if element is not None:
                self._editor.root.removeChild(element)
                self.dirty = True
            return

        if kind == DATETIME:
            if not isinstance(value, datetime):
                raise TypeError(f"{field} expects a datetime, got {type(value).__name__}")
            text = format_w3cdtf(value)
        else:
            text = str(value)

        if element is None:
            element = self._editor.append_element(self._editor.root, namespace, local, prefix)
        if field in _TYPED_DATES:
            xsi = self._editor.ensure_prefix(XSI_NS, "xsi")
            dcterms = self._editor.ensure_prefix(DCTERMS_NS, "dcterms")
            element.setAttribute(f"{xsi}:type", f"{dcterms}:W3CDTF")
        self._editor.set_text(element, text)
        self.dirty = True

    def items(self) -> Iterator[Tuple[str, Value]]:
        for field in FIELDS:
            yield field, self.get(field)

    def to_bytes(self) -> bytes:
        if not self.dirty and self._original is not None:
            return self._original
        return self._editor.to_bytes()
