#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Read-only inspection of external relationships and core properties.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterator, List, NamedTuple, Optional, Tuple

from .ooxml.coreprops import FIELDS, Value, format_w3cdtf


class ExternalTarget(NamedTuple):
    owner: str
    rId: str
    target: str


class ExternalRelationships:
    """
    Every External relationship of a package.

    Iterating walks the package relationships, then each part's
    relationships in archive order. Each iteration starts afresh, so the
    result reflects the package state at the time it is iterated.
    """

    def __init__(self, package):
        self.package = package

    def __iter__(self) -> Iterator[ExternalTarget]:
        for collection in self.package.iter_relationship_collections():
            for rel in collection:
                if rel.is_external:
                    yield ExternalTarget(collection.source, rel.rId, rel.target_ref)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return any(True for _ in self)


def list_external_relationships(package) -> ExternalRelationships:
    return ExternalRelationships(package)


def iter_metadata(package) -> Iterator[Tuple[str, Value]]:
    props = package.core_properties
    for field in FIELDS:
        yield field, props.get(field) if props is not None else None


def _display(value: Optional[object]) -> str:
    if value is None:
        return "None"
    if isinstance(value, datetime):
        return format_w3cdtf(value)
    return str(value)


def format_report(package) -> str:
    lines: List[str] = ["[External targets]"]
    for entry in list_external_relationships(package):
        lines.append(f"Part: {entry.owner}, ID: {entry.rId}, URI: {entry.target}")
    lines.append("[Metadata]")
    for field, value in iter_metadata(package):
        lines.append(f"{field}: {_display(value)}")
    return "\n".join(lines)
