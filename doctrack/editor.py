#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Insert tracking and template relationships into a working package.

Tracking relationships always accumulate: every call appends a new
External relationship to the root part. The template relationship is a
singleton on its owning part: an existing one is retargeted in place
(keeping its id), otherwise a new one is added.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from .errors import InvalidTarget
from .families import detect_family
from .ooxml.relationships import Relationship

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_FORBIDDEN_RE = re.compile(r"[\s\x00-\x1f\x7f]")
# schemes whose URIs are meaningless without an authority
_HOST_SCHEMES = {"http", "https", "ftp", "ftps", "ws", "wss"}


def validate_target(url: str) -> str:
    """
    Check that ``url`` is an absolute URI usable as an external target.

    Raises:
        InvalidTarget: if the URL is empty, relative, or malformed
    """
    if not isinstance(url, str) or not url:
        raise InvalidTarget("URL must be a non-empty string")
    if _FORBIDDEN_RE.search(url):
        raise InvalidTarget(f"URL contains whitespace or control characters: {url!r}")
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise InvalidTarget(f"Malformed URL {url!r}: {exc}") from exc
    if not parsed.scheme or not _SCHEME_RE.match(parsed.scheme):
        raise InvalidTarget(f"URL is not absolute: {url!r}")
    if parsed.scheme.lower() in _HOST_SCHEMES and not parsed.netloc:
        raise InvalidTarget(f"URL has no host: {url!r}")
    if not (parsed.netloc or parsed.path):
        raise InvalidTarget(f"URL has nothing after the scheme: {url!r}")
    return url


def insert_tracking_relationship(package, url: str) -> Relationship:
    """Append a new External tracking relationship to the package's root part."""
    target = validate_target(url)
    family = detect_family(package)
    rels = package.part_rels(family.root_part(package))
    return rels.add_external(family.tracking_reltype, target)


def insert_template_relationship(package, url: str) -> Relationship:
    """Point the package's template relationship at ``url``, creating it if needed."""
    target = validate_target(url)
    family = detect_family(package)
    rels = package.part_rels(family.template_owner(package, create=True))

    existing = rels.by_type(family.template_reltype)
    if not existing:
        return rels.add_external(family.template_reltype, target)

    template, duplicates = existing[0], existing[1:]
    template.retarget_external(target)
    for duplicate in duplicates:
        rels.remove(duplicate)
    return template
