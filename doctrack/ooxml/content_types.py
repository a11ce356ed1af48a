#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Read and extend the ``[Content_Types].xml`` stream.
"""

from __future__ import annotations

import posixpath
from typing import Optional

from ..errors import MalformedPackage
from ..utilities import XMLEditor, local_name

CONTENT_TYPES_NAME = "[Content_Types].xml"
CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"

RELS_CONTENT_TYPE = "application/vnd.openxmlformats-package.relationships+xml"
CORE_PROPERTIES_CONTENT_TYPE = "application/vnd.openxmlformats-package.core-properties+xml"


class ContentTypes:
    """Default (by extension) and Override (by part name) content type entries."""

    def __init__(self, blob: bytes):
        self.dirty = False
        self._original = blob
        self._editor = XMLEditor(blob, CONTENT_TYPES_NAME)
        if local_name(self._editor.root) != "Types":
            raise MalformedPackage(f"{CONTENT_TYPES_NAME} has no Types root element")

    def content_type_for(self, partname: str) -> Optional[str]:
        wanted = partname.lower()
        for override in self._editor.get_nodes("Override"):
            if override.getAttribute("PartName").lower() == wanted:
                return override.getAttribute("ContentType")
        ext = posixpath.splitext(partname)[1].lstrip(".").lower()
        for default in self._editor.get_nodes("Default"):
            if default.getAttribute("Extension").lower() == ext:
                return default.getAttribute("ContentType")
        return None

    def has_default(self, ext: str) -> bool:
        return any(
            node.getAttribute("Extension").lower() == ext.lower()
            for node in self._editor.get_nodes("Default")
        )

    def ensure_default(self, ext: str, content_type: str) -> None:
        if self.has_default(ext):
            return
        self._editor.append_element(
            self._editor.root, CT_NS, "Default", "", {"Extension": ext, "ContentType": content_type}
        )
        self.dirty = True

    def add_override(self, partname: str, content_type: str) -> None:
        wanted = partname.lower()
        for override in self._editor.get_nodes("Override"):
            if override.getAttribute("PartName").lower() == wanted:
                override.setAttribute("ContentType", content_type)
                self.dirty = True
                return
        self._editor.append_element(
            self._editor.root, CT_NS, "Override", "", {"PartName": partname, "ContentType": content_type}
        )
        self.dirty = True

    def to_bytes(self) -> bytes:
        if not self.dirty:
            return self._original
        return self._editor.to_bytes()
