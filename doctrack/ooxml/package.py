#!/usr/bin/env python3
"""
Open an Office package read-only and clone it into a mutable in-memory copy.

``SourcePackage`` wraps the archive handle and is never modified. ``clone``
copies every archive entry into a ``WorkingPackage`` which owns its own
buffers, parsed content types and relationship collections, and can be
saved to a new file once the source handle is closed.
"""

from __future__ import annotations

import io
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..errors import MalformedPackage
from .content_types import (
    CONTENT_TYPES_NAME,
    CORE_PROPERTIES_CONTENT_TYPE,
    RELS_CONTENT_TYPE,
    ContentTypes,
)
from .coreprops import CoreProperties
from .relationships import (
    PACKAGE_SOURCE,
    RelationshipCollection,
    rels_name_for,
    source_for_rels_name,
)

RT_OFFICE_DOCUMENT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument"
RT_CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
# written by some older producers
RT_CORE_PROPERTIES_LEGACY = "http://schemas.openxmlformats.org/officedocument/2006/relationships/metadata/core-properties"

CORE_PROPERTIES_PARTNAME = "/docProps/core.xml"


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


class Part:
    """A named stream of the package that is not package structure."""

    def __init__(self, partname: str, content_type: Optional[str], blob: bytes):
        self.partname = partname
        self.content_type = content_type
        self.blob = blob

    def __repr__(self) -> str:
        return f"<Part {self.partname} ({self.content_type})>"


class SourcePackage:
    """Read-only handle on a package file."""

    def __init__(self, path: str | Path, archive: zipfile.ZipFile):
        self.path = Path(path)
        self._archive = archive

    @classmethod
    def open(cls, path: str | Path) -> "SourcePackage":
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Input file not found: {path}")
        try:
            archive = zipfile.ZipFile(path, "r")
        except zipfile.BadZipFile as exc:
            raise MalformedPackage(f"{path} is not a valid package archive: {exc}") from exc
        if CONTENT_TYPES_NAME not in archive.namelist():
            archive.close()
            raise MalformedPackage(f"{path} has no {CONTENT_TYPES_NAME}")
        return cls(path, archive)

    def __enter__(self) -> "SourcePackage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._archive is None

    def close(self) -> None:
        if self._archive is not None:
            self._archive.close()
            self._archive = None

    def namelist(self) -> List[str]:
        if self._archive is None:
            raise ValueError("Package is closed")
        return [info.filename for info in self._archive.infolist() if not info.is_dir()]

    def clone(self) -> "WorkingPackage":
        """Copy every entry into an independent mutable package."""
        if self._archive is None:
            raise ValueError("Package is closed")
        entries: Dict[str, bytes] = {}
        try:
            for name in self.namelist():
                entries[name] = bytes(self._archive.read(name))
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise MalformedPackage(f"Cannot read {self.path}: {exc}") from exc
        return WorkingPackage(entries)


class WorkingPackage:
    """Mutable in-memory package built from a copy of the archive entries."""

    def __init__(self, entries: Dict[str, bytes]):
        self._entries: Dict[str, bytes] = dict(entries)
        self._index = {name.lower(): name for name in self._entries}

        content_types = self.read(CONTENT_TYPES_NAME)
        if content_types is None:
            raise MalformedPackage(f"Package has no {CONTENT_TYPES_NAME}")
        self.content_types = ContentTypes(content_types)

        self._rels: Dict[str, RelationshipCollection] = {}
        for name, blob in self._entries.items():
            source = source_for_rels_name(name)
            if source is not None:
                self._rels[source.lower()] = RelationshipCollection(source, blob)
        self.rels = self.part_rels(PACKAGE_SOURCE)

        self._core_properties: Optional[CoreProperties] = None

    # ---- entries ----

    def read(self, name: str) -> Optional[bytes]:
        actual = self._index.get(name.lstrip("/").lower())
        return self._entries[actual] if actual is not None else None

    def _is_structural(self, name: str) -> bool:
        return name == CONTENT_TYPES_NAME or source_for_rels_name(name) is not None

    def entry_names(self) -> List[str]:
        return list(self._entries)

    def has_part(self, partname: str) -> bool:
        name = partname.lstrip("/")
        return name.lower() in self._index and not self._is_structural(self._index[name.lower()])

    def iter_parts(self) -> Iterator[Part]:
        """Yield every part in archive order."""
        for name, blob in self._entries.items():
            if self._is_structural(name):
                continue
            partname = "/" + name
            yield Part(partname, self.content_types.content_type_for(partname), blob)

    def get_part(self, partname: str) -> Optional[Part]:
        if not self.has_part(partname):
            return None
        name = self._index[partname.lstrip("/").lower()]
        return Part("/" + name, self.content_types.content_type_for("/" + name), self._entries[name])

    def add_part(self, partname: str, content_type: str, blob: bytes) -> None:
        """Add a new part and register its content type override."""
        if self.has_part(partname):
            raise ValueError(f"Part {partname} already exists")
        name = partname.lstrip("/")
        self._entries[name] = blob
        self._index[name.lower()] = name
        self.content_types.add_override("/" + name, content_type)

    # ---- relationships ----

    def part_rels(self, source: str) -> RelationshipCollection:
        """Relationships owned by ``source``, created empty when the part has none."""
        key = source.lower()
        if key not in self._rels:
            self._rels[key] = RelationshipCollection(source)
        return self._rels[key]

    def existing_rels(self, source: str) -> Optional[RelationshipCollection]:
        return self._rels.get(source.lower())

    def iter_relationship_collections(self) -> Iterator[RelationshipCollection]:
        """Package relationships first, then per part in archive order, then orphans."""
        seen = set()
        ordered = [PACKAGE_SOURCE] + [part.partname for part in self.iter_parts()]
        for source in ordered:
            collection = self._rels.get(source.lower())
            if collection is not None and source.lower() not in seen:
                seen.add(source.lower())
                yield collection
        for key, collection in self._rels.items():
            if key not in seen:
                yield collection

    @property
    def main_partname(self) -> Optional[str]:
        partname = self.rels.part_for(RT_OFFICE_DOCUMENT)
        if partname is None or not self.has_part(partname):
            return None
        return "/" + self._index[partname.lstrip("/").lower()]

    # ---- core properties ----

    def _core_properties_partname(self) -> Optional[str]:
        for reltype in (RT_CORE_PROPERTIES, RT_CORE_PROPERTIES_LEGACY):
            partname = self.rels.part_for(reltype)
            if partname is not None:
                return partname
        return None

    @property
    def core_properties(self) -> Optional[CoreProperties]:
        if self._core_properties is None:
            partname = self._core_properties_partname()
            blob = self.read(partname) if partname is not None else None
            if blob is not None:
                self._core_properties = CoreProperties(partname, blob)
        return self._core_properties

    def get_or_add_core_properties(self) -> CoreProperties:
        """
        Return the core properties part, creating it when the package has none.

        A package-level relationship that names a missing part is reused and
        the part is created at its target, so the package never holds more
        than one core properties relationship.
        """
        props = self.core_properties
        if props is not None:
            return props
        partname = self._core_properties_partname()
        if partname is None:
            partname = CORE_PROPERTIES_PARTNAME
            self.rels.add(RT_CORE_PROPERTIES, partname.lstrip("/"))
        name = partname.lstrip("/")
        props = CoreProperties(partname, self.read(name))
        props.dirty = True
        if name.lower() not in self._index:
            self._entries[name] = props.to_bytes()
            self._index[name.lower()] = name
        self.content_types.add_override(partname, CORE_PROPERTIES_CONTENT_TYPE)
        self._core_properties = props
        return props

    # ---- serialization ----

    def _serialized_entries(self) -> Iterator[tuple]:
        new_rels = [c for c in self._rels.values() if c.is_new and len(c)]
        if new_rels:
            self.content_types.ensure_default("rels", RELS_CONTENT_TYPE)

        props = self._core_properties
        props_name = props.partname.lstrip("/").lower() if props is not None else None
        rels_by_name = {c.rels_name.lower(): c for c in self._rels.values() if not c.is_new}

        yield CONTENT_TYPES_NAME, self.content_types.to_bytes()
        for name, blob in self._entries.items():
            key = name.lower()
            if name == CONTENT_TYPES_NAME:
                continue
            if key in rels_by_name:
                yield name, rels_by_name[key].to_bytes()
            elif props is not None and key == props_name:
                yield name, props.to_bytes()
            else:
                yield name, blob

        for collection in new_rels:
            yield rels_name_for(collection.source), collection.to_bytes()

    def to_bytes(self) -> bytes:
        """Serialize the package to an in-memory archive."""
        buffer = io.BytesIO()
        self._write(buffer)
        return buffer.getvalue()

    def _write(self, target) -> None:
        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as archive:
            for name, blob in self._serialized_entries():
                archive.writestr(name, blob)

    def save(self, path: str | Path) -> Path:
        """
        Write the package to ``path``.

        The archive is written to a temporary file beside ``path`` and moved
        into place, so a failed write leaves no output file behind.
        """
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=".doctrack-", suffix=".tmp", dir=output_path.parent)
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            self._write(tmp_path)
            # mkstemp creates the file 0600; give it the mode a plain open() would
            os.chmod(tmp_path, 0o666 & ~_current_umask())
            os.replace(tmp_path, output_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return output_path
