"""Parse GPX text into a MarkupTree."""

import logging
from dataclasses import dataclass, field
from xml.parsers import expat

from gpx_altitude.exceptions import ParseError
from gpx_altitude.markup.tree import (
    TEXT_FIELD,
    Element,
    MarkupNode,
    MarkupTree,
    RepeatedGroup,
    Scalar,
    XmlDeclaration,
)

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    name: str
    attributes: list[tuple[str, str]]
    children: list[tuple[str, MarkupNode]] = field(default_factory=list)
    text: list[str] = field(default_factory=list)


def _add_field(element: Element, name: str, node: MarkupNode) -> None:
    existing = element.fields.get(name)
    if existing is None:
        element.fields[name] = node
    elif name in element.attributes:
        logger.debug("Child element replaces attribute of the same name", extra={"field": name})
        element.set_child(name, node)
    elif isinstance(existing, RepeatedGroup):
        existing.items.append(node)
    else:
        element.fields[name] = RepeatedGroup([existing, node])


def _build_node(frame: _Frame) -> MarkupNode:
    text = "".join(frame.text).strip()
    if not frame.attributes and not frame.children:
        return Scalar(text)

    element = Element()
    for name, value in frame.attributes:
        element.set_attribute(name, value)
    for name, child in frame.children:
        _add_field(element, name, child)
    if text:
        element.fields[TEXT_FIELD] = Scalar(text)
    return element


class _TreeBuilder:
    """Collects expat callbacks into nested frames."""

    def __init__(self) -> None:
        self.document = _Frame(name="", attributes=[])
        self.stack: list[_Frame] = [self.document]
        self.declaration: XmlDeclaration | None = None

    def xml_decl(self, version: str | None, encoding: str | None, standalone: int) -> None:
        self.declaration = XmlDeclaration(
            version=version or "1.0",
            standalone=None if standalone == -1 else bool(standalone),
        )

    def start(self, name: str, attributes: list[str]) -> None:
        pairs = list(zip(attributes[0::2], attributes[1::2]))
        self.stack.append(_Frame(name=name, attributes=pairs))

    def end(self, name: str) -> None:
        frame = self.stack.pop()
        self.stack[-1].children.append((frame.name, _build_node(frame)))

    def characters(self, data: str) -> None:
        self.stack[-1].text.append(data)


def parse(text: str | bytes) -> MarkupTree:
    """Parse markup into an order-preserving tree.

    Bytes are decoded by expat using the encoding named in the XML
    declaration (UTF-8 when there is none); bytes that do not decode are a
    parse error. A str is always treated as already-decoded text.

    Namespace processing is disabled, so prefixed names and ``xmlns``
    declarations are kept verbatim. Comments and processing instructions are
    dropped; the XML declaration is kept on the returned tree.

    Raises:
        ParseError: If the text is not well-formed.
    """
    builder = _TreeBuilder()
    parser = expat.ParserCreate()
    parser.ordered_attributes = True
    parser.buffer_text = True
    parser.XmlDeclHandler = builder.xml_decl
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.characters

    try:
        parser.Parse(text, True)
    except expat.ExpatError as exc:
        raise ParseError(
            f"Malformed markup: {expat.ErrorString(exc.code)}",
            line=exc.lineno,
            column=exc.offset,
        ) from exc

    root = Element()
    for name, node in builder.document.children:
        _add_field(root, name, node)
    tree = MarkupTree(root, builder.declaration)
    logger.debug("Parsed markup", extra={"element_count": len(tree)})
    return tree
