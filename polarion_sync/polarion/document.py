"""
Polarion Document Module.

Typed node model for the XML documents accepted by the Polarion importers.

A document is a tree of ``Element`` nodes. Each element carries a tag, an
attribute set, an optional ``Text`` body and an ordered list of child
elements. Trees are assembled with the ``element()`` builder and converted
to ``xml.etree.ElementTree`` only when they are serialized.

Usage::

    doc = element(
        "testcases",
        {"project-id": "MYPROJECT"},
        element("testcase", {"id": "A01"}, element("title", text="A01 - x")),
    )
    xml_bytes = doc.to_bytes()
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

AttributeValue = Union[str, int]


@dataclass(frozen=True)
class Text:
    """Character data of an element."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Element:
    """
    A single XML element.

    Attributes:
        tag: Element name.
        attributes: Attribute name -> value, kept in insertion order.
        text: Optional character data.
        children: Ordered child elements.
    """

    tag: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    text: Optional[Text] = None
    children: Tuple["Element", ...] = field(default_factory=tuple)

    def get(self, name: str) -> Optional[str]:
        """Return the value of an attribute, or None."""
        for key, value in self.attributes:
            if key == name:
                return value
        return None

    @property
    def attrib(self) -> Dict[str, str]:
        """Attributes as a dictionary."""
        return dict(self.attributes)

    def find(self, tag: str) -> Optional["Element"]:
        """Return the first direct child with the given tag."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def findall(self, tag: str) -> List["Element"]:
        """Return every direct child with the given tag."""
        return [child for child in self.children if child.tag == tag]

    def to_etree(self) -> ET.Element:
        """Convert the tree to an ``ElementTree`` element."""
        node = ET.Element(self.tag, self.attrib)
        if self.text is not None:
            node.text = self.text.value
        for child in self.children:
            node.append(child.to_etree())
        return node

    def to_bytes(self, pretty: bool = True) -> bytes:
        """Serialize the tree to UTF-8 XML with an XML declaration."""
        tree = ET.ElementTree(self.to_etree())
        if pretty:
            ET.indent(tree, space="  ")
        return ET.tostring(
            tree.getroot(), encoding="utf-8", xml_declaration=True
        )


def element(
    tag: str,
    attributes: Optional[Mapping[str, AttributeValue]] = None,
    *children: Element,
    text: Optional[str] = None,
) -> Element:
    """
    Build an ``Element``.

    Attribute values are converted to strings; children keep their order.

    Args:
        tag: Element name.
        attributes: Optional attribute mapping.
        *children: Child elements.
        text: Optional character data.

    Returns:
        The new element.
    """
    attrs = tuple(
        (str(name), str(value)) for name, value in (attributes or {}).items()
    )
    return Element(
        tag=tag,
        attributes=attrs,
        text=Text(text) if text is not None else None,
        children=tuple(children),
    )


def property_element(name: str, value: AttributeValue) -> Element:
    """Build a ``<property name=... value=.../>`` element."""
    return element("property", {"name": name, "value": value})


def properties(*entries: Tuple[str, AttributeValue]) -> Element:
    """Build a ``<properties>`` element from (name, value) pairs."""
    return element(
        "properties", None, *(property_element(n, v) for n, v in entries)
    )
