"""Order-preserving markup tree.

A document is modelled as three node variants:

    Scalar          text content of a leaf element, or an attribute value
    Element         ordered mapping of field name to node
    RepeatedGroup   sibling elements sharing one tag, in source order

Attributes and child elements of an Element share one namespace: both live in
``Element.fields`` keyed by name, and ``Element.attributes`` records which of
those names are rendered as XML attributes. A node therefore cannot carry an
attribute and a child element with the same name.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

TEXT_FIELD = "#text"


@dataclass
class Scalar:
    """Leaf text value."""

    text: str


@dataclass
class Element:
    """Element with attribute and child fields in one ordered namespace."""

    fields: dict[str, "MarkupNode"] = field(default_factory=dict)
    attributes: set[str] = field(default_factory=set)
    handle: int = -1

    def scalar(self, name: str) -> str | None:
        """Return the text of a scalar field, or None if absent or not scalar."""
        node = self.fields.get(name)
        if isinstance(node, Scalar):
            return node.text
        return None

    def set_attribute(self, name: str, value: str) -> None:
        self.fields[name] = Scalar(value)
        self.attributes.add(name)

    def set_child(self, name: str, node: "MarkupNode") -> None:
        self.fields[name] = node
        self.attributes.discard(name)

    def children(self) -> Iterator[tuple[str, "MarkupNode"]]:
        """Yield (name, node) for child fields, skipping attributes and text."""
        for name, node in self.fields.items():
            if name in self.attributes or name == TEXT_FIELD:
                continue
            yield name, node


@dataclass
class RepeatedGroup:
    """Sibling elements that share a tag."""

    items: list["MarkupNode"] = field(default_factory=list)


MarkupNode = Union[Scalar, Element, RepeatedGroup]


@dataclass(frozen=True, slots=True)
class XmlDeclaration:
    version: str = "1.0"
    standalone: bool | None = None


class MarkupTree:
    """A parsed document and the arena of its Element nodes.

    Every Element reachable from ``root`` is registered in ``elements`` in
    document (pre-order) order and its ``handle`` is set to its arena index.
    Later pipeline stages hold handles rather than node references and mutate
    through ``element()``.
    """

    def __init__(self, root: Element, declaration: XmlDeclaration | None = None) -> None:
        self.root = root
        self.declaration = declaration
        self.elements: list[Element] = []
        self._register(root)

    def _register(self, node: MarkupNode) -> None:
        if isinstance(node, RepeatedGroup):
            for item in node.items:
                self._register(item)
        elif isinstance(node, Element):
            node.handle = len(self.elements)
            self.elements.append(node)
            for _, child in node.children():
                self._register(child)

    def element(self, handle: int) -> Element:
        return self.elements[handle]

    def __len__(self) -> int:
        return len(self.elements)
