"""Render a MarkupTree back to GPX text."""

from xml.sax.saxutils import escape, quoteattr

from gpx_altitude.markup.tree import (
    TEXT_FIELD,
    Element,
    MarkupNode,
    MarkupTree,
    RepeatedGroup,
    Scalar,
    XmlDeclaration,
)

INDENT = "  "
DEFAULT_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def _declaration(declaration: XmlDeclaration | None) -> str:
    if declaration is None:
        return DEFAULT_DECLARATION
    standalone = ""
    if declaration.standalone is not None:
        standalone = f' standalone="{"yes" if declaration.standalone else "no"}"'
    # Output is always written as UTF-8, whatever the source declared.
    return f'<?xml version="{declaration.version}" encoding="UTF-8"{standalone}?>'


def _open_tag(name: str, element: Element) -> str:
    parts = [name]
    for field_name, node in element.fields.items():
        if field_name not in element.attributes:
            continue
        if not isinstance(node, Scalar):
            raise TypeError(f"Attribute {field_name!r} on <{name}> is not a scalar")
        parts.append(f"{field_name}={quoteattr(node.text)}")
    return "<" + " ".join(parts) + ">"


def _render(name: str, node: MarkupNode, depth: int, lines: list[str]) -> None:
    pad = INDENT * depth
    if isinstance(node, RepeatedGroup):
        for item in node.items:
            _render(name, item, depth, lines)
        return
    if isinstance(node, Scalar):
        lines.append(f"{pad}<{name}>{escape(node.text)}</{name}>")
        return

    children = list(node.children())
    text = node.scalar(TEXT_FIELD)
    if not children:
        lines.append(f"{pad}{_open_tag(name, node)}{escape(text or '')}</{name}>")
        return

    lines.append(pad + _open_tag(name, node))
    if text:
        lines.append(INDENT * (depth + 1) + escape(text))
    for child_name, child in children:
        _render(child_name, child, depth + 1, lines)
    lines.append(f"{pad}</{name}>")


def serialize(tree: MarkupTree) -> str:
    """Render the tree as indented markup, preserving field order.

    The result always starts with an XML declaration and ends with a newline.
    """
    lines: list[str] = []
    for name, node in tree.root.children():
        _render(name, node, 0, lines)
    body = "\n".join(lines)
    if not body.lstrip().startswith("<?xml"):
        body = f"{_declaration(tree.declaration)}\n{body}"
    return body + "\n"

