"""Read-only access to nodes of a parsed BPEL document.

The query functions in this package only need a handful of capabilities
from the document tree: the element name, attributes, ordered children,
the parent and the text content. ``TreeNode`` describes that surface and
``XmlNode`` provides it on top of lxml. Any other tree can take part by
implementing the protocol.

Name comparisons for elements and attributes ignore case.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from lxml import etree

from src.core.config import get_settings


class BpelQueryError(ValueError):
    """Base class for errors raised while querying a BPEL document."""


class NotAnElementError(BpelQueryError):
    """Raised when a comment or processing instruction is queried as an element."""


class TreeNode(Protocol):
    """Read-only view of one node in a parsed document."""

    @property
    def tag(self) -> str: ...

    @property
    def is_element(self) -> bool: ...

    @property
    def attributes(self) -> Mapping[str, str]: ...

    @property
    def children(self) -> Sequence[TreeNode]: ...

    @property
    def parent(self) -> TreeNode | None: ...

    @property
    def text_content(self) -> str: ...


@dataclass(frozen=True)
class XmlNode:
    """TreeNode backed by an lxml element.

    Two wrappers are equal when they wrap the same element, so nodes can be
    collected in sets by identity rather than by name.
    """

    element: etree._Element

    @property
    def tag(self) -> str:
        tag = self.element.tag
        if isinstance(tag, str):
            return etree.QName(tag).localname
        if tag is etree.Comment:
            return "#comment"
        if tag is etree.ProcessingInstruction:
            return "#pi"
        return "#entity"

    @property
    def is_element(self) -> bool:
        return isinstance(self.element.tag, str)

    @property
    def attributes(self) -> Mapping[str, str]:
        if not self.is_element:
            return {}
        return {etree.QName(key).localname: value for key, value in self.element.attrib.items()}

    @property
    def children(self) -> Sequence[XmlNode]:
        return [XmlNode(child) for child in self.element]

    @property
    def parent(self) -> XmlNode | None:
        parent = self.element.getparent()
        return XmlNode(parent) if parent is not None else None

    @property
    def text_content(self) -> str:
        if not self.is_element:
            return self.element.text or ""
        return etree.tostring(self.element, method="text", encoding="unicode", with_tail=False)

    def __repr__(self) -> str:
        return f"XmlNode(<{self.tag}> {effective_name(self)!r})" if self.is_element else f"XmlNode({self.tag})"


def wrap(source: etree._Element | etree._ElementTree) -> XmlNode:
    """Wrap an lxml element (or the root of an element tree) as a TreeNode."""
    if isinstance(source, etree._ElementTree):
        source = source.getroot()
    return XmlNode(source)


def require_element(node: TreeNode) -> None:
    """Raise NotAnElementError unless ``node`` is an element."""
    if not node.is_element:
        raise NotAnElementError(f"Expected an element, got a {node.tag} node")


def attribute(node: TreeNode, name: str) -> str | None:
    """Return the value of attribute ``name``, or None when it is absent.

    An exact name match is preferred; otherwise the first attribute whose
    name matches case-insensitively is used.

    Raises:
        NotAnElementError: If ``node`` is not an element.
    """
    require_element(node)

    attrs = node.attributes
    if name in attrs:
        return attrs[name]

    lowered = name.lower()
    for key, value in attrs.items():
        if key.lower() == lowered:
            return value
    return None


def effective_name(node: TreeNode) -> str:
    """Return the ``name`` attribute of an activity, falling back to its tag."""
    name = attribute(node, "name")
    return name if name is not None else node.tag


def _has_name(node: TreeNode, name: str) -> bool:
    return node.is_element and node.tag.lower() == name.lower()


def find_child(node: TreeNode | None, name: str) -> TreeNode | None:
    """Return the direct child called ``name``.

    When several children share the name, the last one in document order
    is returned. A missing ``node`` yields None.
    """
    if node is None:
        return None
    require_element(node)

    found = None
    for child in node.children:
        if _has_name(child, name):
            found = child
    return found


def find_children(node: TreeNode | None, name: str) -> set[TreeNode]:
    """Return all direct children called ``name`` (unordered)."""
    return set(find_children_ordered(node, name))


def find_children_ordered(node: TreeNode | None, name: str) -> list[TreeNode]:
    """Return all direct children called ``name`` in document order."""
    if node is None:
        return []
    require_element(node)
    return [child for child in node.children if _has_name(child, name)]


def boolean_attribute(node: TreeNode, name: str, true_value: str | None = None) -> bool:
    """Return True if attribute ``name`` equals ``true_value``, ignoring case.

    ``true_value`` defaults to the configured BPEL truth literal (``yes``).
    A missing attribute or any other value is False.
    """
    if true_value is None:
        true_value = get_settings().bpel_true_value
    value = attribute(node, name)
    return value is not None and value.lower() == true_value.lower()


def is_create_instance_set(node: TreeNode) -> bool:
    """Return True if ``createInstance`` is set on a receive or pick."""
    return boolean_attribute(node, "createInstance")
