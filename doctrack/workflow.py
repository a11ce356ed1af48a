#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Edit workflow: open, clone, edit, save.

Usage:
    from doctrack.workflow import EditConfig, apply_edits, open_package
    from doctrack.families import DOCUMENT

    package = open_package("report.docx", DOCUMENT)
    apply_edits(EditConfig(url="https://example.com/p.png"), package)
    package.save("report_tracked.docx")
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .editor import insert_template_relationship, insert_tracking_relationship
from .errors import ConfigurationError, MalformedPackage, UnsupportedDocumentKind
from .families import PackageFamily, detect_family
from .metadata import apply_metadata
from .ooxml.package import SourcePackage, WorkingPackage
from .ooxml.relationships import Relationship
from .ooxml.validation import validator_for


@dataclass
class EditConfig:
    """Edits to apply to one package."""

    metadata: Optional[Dict[str, Any]] = None
    url: Optional[str] = None
    template: bool = False


@dataclass
class EditResult:
    changed_fields: List[str] = field(default_factory=list)
    relationship: Optional[Relationship] = None


def load_metadata(path: str | Path) -> Dict[str, Any]:
    """Load a flat JSON object of metadata field values."""
    metadata_path = Path(path)
    if not metadata_path.is_file():
        raise ConfigurationError(f"Metadata file not found: {metadata_path}")
    try:
        data = json.loads(metadata_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {metadata_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{metadata_path} must contain a JSON object")
    return data


def open_package(path: str | Path, family: PackageFamily) -> WorkingPackage:
    """
    Open ``path`` read-only and return a mutable clone.

    The source handle is closed before this returns.

    Raises:
        MalformedPackage: if the archive or its structure cannot be parsed
        UnsupportedDocumentKind: if the package is not of ``family``
    """
    with SourcePackage.open(path) as source:
        package = source.clone()

    actual = detect_family(package)
    if actual is not family:
        raise UnsupportedDocumentKind(
            f"Document type mismatch: expected a {family.name} package, found a {actual.name} package."
        )

    validator = validator_for(family)(package)
    if not validator.validate():
        raise MalformedPackage("; ".join(validator.errors))
    return package


def apply_edits(config: EditConfig, package: WorkingPackage) -> EditResult:
    """Apply metadata first, then the URL insertion selected by ``config``."""
    result = EditResult()
    if config.metadata:
        result.changed_fields = apply_metadata(package, config.metadata)
    if config.url:
        if config.template:
            result.relationship = insert_template_relationship(package, config.url)
        else:
            result.relationship = insert_tracking_relationship(package, config.url)
    return result


def validate_output(path: str | Path, family: PackageFamily, verbose: bool = False) -> List[str]:
    """Reopen a saved package and run the structural checks; return the problems found."""
    with SourcePackage.open(path) as source:
        package = source.clone()
    validator = validator_for(family)(package, verbose=verbose)
    validator.validate()
    return validator.errors
