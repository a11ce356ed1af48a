"""OOXML package access: read-only source, in-memory working copy, relationships."""

from .package import SourcePackage, WorkingPackage
from .relationships import EXTERNAL, INTERNAL, Relationship, RelationshipCollection

__all__ = [
    "EXTERNAL",
    "INTERNAL",
    "Relationship",
    "RelationshipCollection",
    "SourcePackage",
    "WorkingPackage",
]
