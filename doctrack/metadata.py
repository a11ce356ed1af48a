#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Apply a flat key/value object to a package's core properties.

Keys are matched against the core property names, either exactly
(``LastModifiedBy``) or in snake case (``last_modified_by``). Unknown keys
are skipped silently. A value that cannot be converted to the field's type
leaves that field unchanged and raises a ``MetadataWarning`` through the
warnings module; the remaining keys are still applied.
"""

from __future__ import annotations

import re
import warnings
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import MetadataWarning
from .ooxml.coreprops import DATETIME, FIELDS, Value, parse_w3cdtf

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


FIELD_ALIASES: Dict[str, str] = {}
for _field in FIELDS:
    FIELD_ALIASES[_field] = _field
    FIELD_ALIASES[snake_case(_field)] = _field


def resolve_field(key: str) -> Optional[str]:
    return FIELD_ALIASES.get(key)


def _convert(field: str, value: Any) -> Tuple[bool, Value]:
    """Return ``(ok, converted)`` for ``value`` assigned to ``field``."""
    if value is None:
        return True, None
    kind = FIELDS[field][3]
    if kind == DATETIME:
        if not isinstance(value, str):
            warnings.warn(f"{field}: expected an ISO 8601 date string, got {value!r}", MetadataWarning)
            return False, None
        try:
            return True, parse_w3cdtf(value)
        except ValueError:
            warnings.warn(f"{field}: cannot parse date {value!r}, field left unchanged", MetadataWarning)
            return False, None
    if isinstance(value, (dict, list)):
        warnings.warn(f"{field}: expected a scalar value, got {type(value).__name__}", MetadataWarning)
        return False, None
    if isinstance(value, bool):
        return True, "true" if value else "false"
    return True, str(value)


def apply_metadata(package, values: Mapping[str, Any]) -> List[str]:
    """
    Merge ``values`` into the package's core properties.

    Args:
        package: Working package to edit
        values: Flat mapping, typically loaded from a JSON file

    Returns:
        list: Names of the fields that were set or cleared
    """
    updates: Dict[str, Value] = {}
    for key, value in values.items():
        field = resolve_field(key)
        if field is None:
            continue
        ok, converted = _convert(field, value)
        if ok:
            updates[field] = converted

    if not updates:
        return []

    props = package.core_properties
    if props is None:
        if all(value is None for value in updates.values()):
            return []
        props = package.get_or_add_core_properties()

    changed = []
    for field, value in updates.items():
        if value is None:
            if not props.has(field):
                continue
        elif value == props.get(field):
            continue
        props.set(field, value)
        changed.append(field)
    return changed
