"""Markup parsing into lines of styled runs.

The dialect is a small HTML subset:

    <l>, <r>, <c>   align descendant text left, right or center
    <font ...>      override size, color, background, family, weight, style
    <br>            start a new line (literal newlines behave the same)

Any other element is transparent: its children are visited with the
inherited style unchanged.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from html.parser import HTMLParser
from typing import Callable, TypeVar, Union

from postergen.fonts import FontResolver
from postergen.models import Content, Run, TextStyle
from postergen.types import Alignment, FontStyle, Weight
from postergen.utils.colors import parse_color

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALIGNMENT_TAGS: dict[str, Alignment] = {
    "l": "left",
    "r": "right",
    "c": "center",
}

# Elements that never have content or a closing tag
VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)


class MarkupError(ValueError):
    """The markup document can't be parsed."""


class AttributeValueError(MarkupError):
    """An attribute value doesn't parse as its expected type."""

    def __init__(self, attribute: str, expected: str, value: str) -> None:
        super().__init__(f"Invalid {attribute}. {expected} expected, got {value!r}.")
        self.attribute = attribute
        self.expected = expected
        self.value = value


@dataclass
class Element:
    """Element node of the parsed markup tree."""

    name: str
    attributes: dict[str, str | None] = field(default_factory=dict)
    children: list[Union["Element", str]] = field(default_factory=list)


class _TreeBuilder(HTMLParser):
    """Builds an Element tree, rejecting mismatched or unclosed tags."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = Element("#document")
        self._stack = [self.root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = Element(tag, dict(attrs))
        self._stack[-1].children.append(element)
        if tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._stack[-1].children.append(Element(tag, dict(attrs)))

    def handle_endtag(self, tag: str) -> None:
        if tag in VOID_ELEMENTS:
            return
        line, column = self.getpos()
        if len(self._stack) == 1:
            raise MarkupError(f"Unexpected closing tag </{tag}> at line {line}, column {column}.")
        if self._stack[-1].name != tag:
            raise MarkupError(
                f"Mismatched closing tag </{tag}> at line {line}, column {column}: "
                f"<{self._stack[-1].name}> is still open."
            )
        self._stack.pop()

    def handle_data(self, data: str) -> None:
        children = self._stack[-1].children
        if children and isinstance(children[-1], str):
            children[-1] += data
        else:
            children.append(data)

    def close(self) -> None:
        # Whatever feed() left unconsumed from a "<" on is a tag that never ended
        start = self.rawdata.find("<")
        if start >= 0:
            raise MarkupError(f"Unterminated tag at end of input: {self.rawdata[start:]!r}.")
        super().close()
        if len(self._stack) > 1:
            unclosed = ", ".join(f"<{element.name}>" for element in self._stack[1:])
            raise MarkupError(f"Unclosed element(s) at end of input: {unclosed}.")


def normalize(raw: str) -> str:
    """Drop carriage returns and turn line feeds into explicit breaks."""
    return raw.replace("\r", "").replace("\n", "<br>")


def parse_document(markup: str) -> Element:
    """
    Parse markup into an element tree.

    Args:
        markup: Normalized markup text.

    Returns:
        Synthetic root element holding the top-level nodes.

    Raises:
        MarkupError: If tags are mismatched or left open.
    """
    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    return builder.root


def parse_size(value: str) -> float:
    size = float(value)
    if not math.isfinite(size) or size <= 0:
        raise ValueError(f"font size must be positive: {value}")
    return size


def parse_weight(value: str) -> Weight:
    value = value.strip().lower()
    if value == "bold":
        return "bold"
    if value == "light":
        return "light"
    return "normal"


def parse_font_style(value: str) -> FontStyle:
    return "italic" if value.strip().lower() == "italic" else "normal"


def _attribute(element: Element, key: str, convert: Callable[[str], T], expected: str) -> T | None:
    value = element.attributes.get(key)
    if value is None:
        return None
    try:
        return convert(value)
    except ValueError:
        raise AttributeValueError(key, expected, value) from None


def apply_font(element: Element, style: TextStyle) -> TextStyle:
    """
    Derive the style for the children of a <font> element.

    Unspecified attributes keep the inherited value.

    Raises:
        AttributeValueError: If size or a color doesn't parse.
    """
    updates: dict[str, object] = {}
    if (size := _attribute(element, "size", parse_size, "float")) is not None:
        updates["font_size"] = size
    if (color := _attribute(element, "color", parse_color, "CSS color")) is not None:
        updates["font_color"] = color
    if (background := _attribute(element, "background", parse_color, "CSS color")) is not None:
        updates["background_color"] = background

    key_updates: dict[str, object] = {}
    if (family := _attribute(element, "family", str.strip, "font family")) is not None:
        key_updates["family"] = family
    if (weight := _attribute(element, "weight", parse_weight, "font weight")) is not None:
        key_updates["weight"] = weight
    if (font_style := _attribute(element, "style", parse_font_style, "font style")) is not None:
        key_updates["style"] = font_style
    if key_updates:
        updates["font_key"] = replace(style.font_key, **key_updates)

    return replace(style, **updates) if updates else style


class MarkupParser:
    """Turns markup into Content, resolving every run's font on the way."""

    def __init__(self, resolver: FontResolver) -> None:
        self.resolver = resolver

    def parse(self, raw: str) -> Content:
        """
        Parse raw markup.

        Args:
            raw: Markup as read from the input file.

        Returns:
            Content with one line per break, plus the first line.

        Raises:
            MarkupError: If the document or an attribute value is malformed.
            FontNotFoundError: If a run's font and the default font both fail.
        """
        root = parse_document(normalize(raw))
        content = Content()
        base_style = TextStyle(font_key=self.resolver.default_key)
        for node in root.children:
            self._parse_node(node, base_style, content)

        run_count = sum(len(line.runs) for line in content.lines)
        logger.info(f"Parsed {run_count} run(s) on {content.line_size()} line(s)")
        return content

    def _parse_node(self, node: Element | str, style: TextStyle, content: Content) -> None:
        if isinstance(node, str):
            # Whitespace between tags is not content
            if not node.strip():
                return
            run = Run.from_style(node, style, content.line_size())
            run.face = self.resolver.load(run.font_key)
            content.push(run)
            return

        child_style = self._apply_element(node, style, content)
        for child in node.children:
            self._parse_node(child, child_style, content)

    def _apply_element(self, element: Element, style: TextStyle, content: Content) -> TextStyle:
        if element.name in ALIGNMENT_TAGS:
            return replace(style, alignment=ALIGNMENT_TAGS[element.name])
        if element.name == "font":
            return apply_font(element, style)
        if element.name == "br":
            content.new_line()
        return style


def parse_markup(raw: str, resolver: FontResolver) -> Content:
    """Parse raw markup with the given resolver."""
    return MarkupParser(resolver).parse(raw)
