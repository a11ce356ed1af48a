#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Lightweight XML helpers for editing package streams in memory.
"""

from __future__ import annotations

from typing import Dict, List, Optional
from xml.parsers.expat import ExpatError

from defusedxml import DefusedXmlException, minidom

from .errors import MalformedPackage


def _matches_attrs(node, attrs: Optional[Dict[str, str]]) -> bool:
    if not attrs:
        return True
    for key, value in attrs.items():
        if node.getAttribute(key) != value:
            return False
    return True


def local_name(node) -> str:
    return node.localName or node.tagName.split(":")[-1]


def text_of(node) -> str:
    parts = []
    for child in node.childNodes:
        if child.nodeType in (child.TEXT_NODE, child.CDATA_SECTION_NODE):
            parts.append(child.data)
    return "".join(parts)


class XMLEditor:
    """Simple XML editor built on minidom, holding one package stream."""

    def __init__(self, blob: bytes, name: str = "<memory>"):
        self.name = name
        try:
            self.dom = minidom.parseString(blob)
        except (ExpatError, DefusedXmlException) as exc:
            raise MalformedPackage(f"Invalid XML in {name}: {exc}") from exc

    @property
    def root(self):
        return self.dom.documentElement

    def to_bytes(self) -> bytes:
        return self.dom.toxml(encoding="UTF-8")

    def get_nodes(self, local: Optional[str] = None, attrs: Optional[Dict[str, str]] = None) -> List:
        matches = []
        for node in self.dom.getElementsByTagName("*"):
            if local and local_name(node) != local:
                continue
            if _matches_attrs(node, attrs):
                matches.append(node)
        return matches

    def prefix_for(self, namespace: str) -> Optional[str]:
        """Return the prefix bound to ``namespace`` on the root element, '' for the default."""
        attributes = self.root.attributes
        for index in range(attributes.length):
            attr = attributes.item(index)
            if attr.value != namespace:
                continue
            if attr.name == "xmlns":
                return ""
            if attr.name.startswith("xmlns:"):
                return attr.name[len("xmlns:"):]
        return None

    def ensure_prefix(self, namespace: str, preferred: str) -> str:
        prefix = self.prefix_for(namespace)
        if prefix is not None:
            return prefix
        self.root.setAttribute(f"xmlns:{preferred}" if preferred else "xmlns", namespace)
        return preferred

    def create_element(self, namespace: str, local: str, preferred_prefix: str):
        prefix = self.ensure_prefix(namespace, preferred_prefix)
        qualified = f"{prefix}:{local}" if prefix else local
        return self.dom.createElementNS(namespace, qualified)

    def append_element(self, parent, namespace: str, local: str, preferred_prefix: str, attrs: Optional[Dict[str, str]] = None):
        element = self.create_element(namespace, local, preferred_prefix)
        for key, value in (attrs or {}).items():
            element.setAttribute(key, value)
        parent.appendChild(element)
        return element

    def set_text(self, node, value: str) -> None:
        while node.firstChild is not None:
            node.removeChild(node.firstChild)
        node.appendChild(self.dom.createTextNode(value))
