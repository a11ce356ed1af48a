#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Relationship collections backed by ``.rels`` streams.

A collection belongs either to the package (source ``/``) or to one part
(source ``/word/document.xml``). Relationship elements are edited in place
so attributes the tool does not know about survive a round trip, and an
untouched collection is written back byte-for-byte.
"""

from __future__ import annotations

import posixpath
from typing import Iterator, List, Optional
from urllib.parse import unquote

from ..errors import MalformedPackage
from ..utilities import XMLEditor, local_name

RELS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

INTERNAL = "Internal"
EXTERNAL = "External"

PACKAGE_SOURCE = "/"

_EMPTY_RELS = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    f'<Relationships xmlns="{RELS_NS}"/>'
).encode("utf-8")


def rels_name_for(source: str) -> str:
    """Return the archive name of the ``.rels`` stream owned by ``source``."""
    if source == PACKAGE_SOURCE:
        return "_rels/.rels"
    directory, filename = posixpath.split(source.lstrip("/"))
    return posixpath.join(directory, "_rels", f"{filename}.rels")


def source_for_rels_name(name: str) -> Optional[str]:
    """Inverse of :func:`rels_name_for`; ``None`` if ``name`` is not a rels stream."""
    directory, filename = posixpath.split(name.lstrip("/"))
    if posixpath.basename(directory) != "_rels" or not filename.lower().endswith(".rels"):
        return None
    owner_dir = posixpath.dirname(directory)
    owner = filename[: -len(".rels")]
    if not owner:
        return PACKAGE_SOURCE if not owner_dir else None
    return "/" + posixpath.join(owner_dir, owner)


def resolve_target(source: str, target_ref: str) -> str:
    """Resolve an internal target reference to an absolute part name."""
    target = unquote(target_ref.split("#", 1)[0])
    if target.startswith("/"):
        return posixpath.normpath(target)
    base = posixpath.dirname(source) if source != PACKAGE_SOURCE else "/"
    return posixpath.normpath(posixpath.join(base, target))


class Relationship:
    """One ``<Relationship>`` element of a collection."""

    def __init__(self, collection: "RelationshipCollection", element):
        self._collection = collection
        self._element = element

    def __repr__(self) -> str:
        return f"<Relationship {self.rId} {self.mode} {self.reltype} -> {self.target_ref}>"

    @property
    def source(self) -> str:
        return self._collection.source

    @property
    def rId(self) -> str:
        return self._element.getAttribute("Id")

    @property
    def reltype(self) -> str:
        return self._element.getAttribute("Type")

    @property
    def target_ref(self) -> str:
        return self._element.getAttribute("Target")

    @property
    def mode(self) -> str:
        return self._element.getAttribute("TargetMode") or INTERNAL

    @property
    def is_external(self) -> bool:
        return self.mode == EXTERNAL

    @property
    def target_partname(self) -> str:
        if self.is_external:
            raise ValueError(f"Relationship {self.rId} targets an external resource")
        return resolve_target(self.source, self.target_ref)

    def retarget_external(self, url: str) -> None:
        """Point this relationship at ``url`` and force External mode, keeping the id."""
        self._element.setAttribute("Target", url)
        self._element.setAttribute("TargetMode", EXTERNAL)
        self._collection.dirty = True


class RelationshipCollection:
    """Relationships owned by the package or by one part."""

    def __init__(self, source: str, blob: Optional[bytes] = None):
        self.source = source
        self.is_new = blob is None
        self.dirty = False
        self._original = blob
        self._editor = XMLEditor(blob if blob is not None else _EMPTY_RELS, rels_name_for(source))
        if local_name(self._editor.root) != "Relationships":
            raise MalformedPackage(f"{self.rels_name} is not a relationships stream")

    def __iter__(self) -> Iterator[Relationship]:
        for element in self._editor.get_nodes("Relationship"):
            yield Relationship(self, element)

    def __len__(self) -> int:
        return len(self._editor.get_nodes("Relationship"))

    @property
    def rels_name(self) -> str:
        return rels_name_for(self.source)

    def get(self, rId: str) -> Optional[Relationship]:
        for rel in self:
            if rel.rId == rId:
                return rel
        return None

    def by_type(self, reltype: str) -> List[Relationship]:
        return [rel for rel in self if rel.reltype == reltype]

    def next_rId(self) -> str:
        used = {rel.rId for rel in self}
        max_id = 0
        for rid in used:
            if rid.startswith("rId"):
                try:
                    max_id = max(max_id, int(rid[3:]))
                except ValueError:
                    continue
        candidate = max_id + 1
        while f"rId{candidate}" in used:
            candidate += 1
        return f"rId{candidate}"

    def add(self, reltype: str, target_ref: str, external: bool = False) -> Relationship:
        root = self._editor.root
        attrs = {"Id": self.next_rId(), "Type": reltype, "Target": target_ref}
        if external:
            attrs["TargetMode"] = EXTERNAL
        element = self._editor.append_element(root, RELS_NS, "Relationship", "", attrs)
        self.dirty = True
        return Relationship(self, element)

    def add_external(self, reltype: str, url: str) -> Relationship:
        return self.add(reltype, url, external=True)

    def remove(self, relationship: Relationship) -> None:
        element = relationship._element
        element.parentNode.removeChild(element)
        self.dirty = True

    def part_for(self, reltype: str) -> Optional[str]:
        """Part name targeted by the first internal relationship of ``reltype``."""
        for rel in self.by_type(reltype):
            if not rel.is_external:
                return rel.target_partname
        return None

    def to_bytes(self) -> bytes:
        if not self.dirty and self._original is not None:
            return self._original
        return self._editor.to_bytes()
