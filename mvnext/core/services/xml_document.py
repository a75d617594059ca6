"""
XML document service — parse, serialize, query, and locate elements in
source text.

lxml provides the tree. The source text stays authoritative: editing
splices new text into it and re-parses, so nothing outside the edited
span is ever re-serialised. ``element_spans`` maps each element of the
tree to its character offsets in the text for that purpose.

Structural paths are a small XPath subset, matched on local names so
that namespaced files (``xmlns="http://maven.apache.org/..."``) match
the same expressions as plain ones:

    /extensions/extension/artifactId    absolute
    //artifactId                        any depth
    /extensions/*                       wildcard step
"""

from __future__ import annotations

import codecs
import logging
import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from lxml import etree

from mvnext.core.models.document import FormatStyle, detect_format_style, separators_to_unix

logger = logging.getLogger(__name__)


class XmlParseError(ValueError):
    """Raised when text is not well-formed XML."""


DEFAULT_ENCODING = "utf-8"

_ENCODING_DECL = re.compile(
    r"""\A(?:\ufeff|\xef\xbb\xbf)?<\?xml\s[^>]*?\bencoding\s*=\s*["']([A-Za-z][A-Za-z0-9._-]*)["']"""
)


def declared_encoding(head: str) -> str:
    """The encoding named by the XML declaration at the start of ``head``.

    ``head`` only needs to cover the declaration; bytes may be passed
    through ``decode("latin-1")`` first since declarations are ASCII.
    Falls back to UTF-8, the XML default, when there is no declaration
    or Python does not know the name.
    """
    match = _ENCODING_DECL.match(head)
    if not match:
        return DEFAULT_ENCODING
    try:
        return codecs.lookup(match.group(1)).name
    except LookupError:
        logger.warning("Unknown XML encoding %r, assuming %s", match.group(1), DEFAULT_ENCODING)
        return DEFAULT_ENCODING


def decode_xml(data: bytes) -> str:
    """Decode file bytes using the encoding the document declares.

    Raises:
        UnicodeDecodeError: If the bytes do not match that encoding.
    """
    return data.decode(declared_encoding(data[:256].decode("latin-1")))


def encode_xml(text: str) -> bytes:
    """Encode text back to the encoding its own declaration names.

    Raises:
        UnicodeEncodeError: If the text holds characters that encoding
            cannot represent.
    """
    return text.encode(declared_encoding(text))


@dataclass(frozen=True)
class XmlDocument:
    """A parsed XML file.

    Attributes:
        source_path: Logical path from project root.
        text:        Exact source text, line endings untouched.
        root:        lxml root element parsed from ``text``.
        style:       Line-ending convention of ``text``.
    """

    source_path: str
    text: str
    root: etree._Element
    style: FormatStyle

    @property
    def newline(self) -> str:
        return self.style.newline


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        remove_blank_text=False,
        remove_comments=False,
        resolve_entities=False,
        no_network=True,
    )


def parse(text: str, source_path: str = "") -> XmlDocument:
    """Parse ``text`` into an XmlDocument.

    The text is handed to lxml in the encoding its declaration names, so
    a Latin-1 document keeps its non-ASCII characters.

    Raises:
        XmlParseError: If the text is not well-formed, or holds characters
            its declared encoding cannot represent.
    """
    try:
        root = etree.fromstring(encode_xml(text), _parser())
    except (etree.XMLSyntaxError, UnicodeEncodeError) as e:
        raise XmlParseError(f"{source_path or '<string>'}: {e}") from e
    return XmlDocument(
        source_path=separators_to_unix(source_path),
        text=text,
        root=root,
        style=detect_format_style(text) or FormatStyle(),
    )


def serialize(document: XmlDocument, newline: str | None = None) -> str:
    """Return the document's text, optionally converted to ``newline``."""
    if newline is None:
        return document.text
    return convert_newlines(document.text, newline)


def convert_newlines(text: str, newline: str) -> str:
    """Rewrite every line terminator in ``text`` as ``newline``."""
    normalised = text.replace("\r\n", "\n")
    if newline == "\n":
        return normalised
    return normalised.replace("\n", newline)


# ── Structural paths ────────────────────────────────────────────


def local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


class PathMatcher:
    """Match an element's path of local names against an expression."""

    def __init__(self, expression: str):
        expr = expression.strip()
        if not expr.startswith("/"):
            raise ValueError(f"Path must be absolute: '{expression}'")
        self.expression = expression
        self.anchored = not expr.startswith("//")
        body = expr.lstrip("/")
        if not body or "//" in body:
            raise ValueError(f"Unsupported path expression: '{expression}'")
        self.steps = tuple(body.split("/"))

    def matches(self, path: Sequence[str]) -> bool:
        if self.anchored:
            if len(path) != len(self.steps):
                return False
            tail = path
        else:
            if len(path) < len(self.steps):
                return False
            tail = path[len(path) - len(self.steps):]
        return all(step in ("*", name) for step, name in zip(self.steps, tail))

    def __repr__(self) -> str:
        return f"PathMatcher({self.expression!r})"


def walk(root: etree._Element) -> Iterator[tuple[etree._Element, tuple[str, ...]]]:
    """Yield ``(element, path)`` for every element, in document order.

    Comments and processing instructions are skipped.
    """
    stack: list[tuple[etree._Element, tuple[str, ...]]] = [(root, (local_name(root),))]
    while stack:
        element, path = stack.pop()
        yield element, path
        children = [child for child in element if isinstance(child.tag, str)]
        for child in reversed(children):
            stack.append((child, path + (local_name(child),)))


def find_first(
    document: XmlDocument,
    expression: str,
    predicate: Callable[[etree._Element], bool],
) -> etree._Element | None:
    """First element matching ``expression`` that satisfies ``predicate``."""
    matcher = PathMatcher(expression)
    for element, path in walk(document.root):
        if matcher.matches(path) and predicate(element):
            return element
    return None


def query(document: XmlDocument, expression: str) -> list[etree._Element]:
    """All elements matching ``expression``, in document order."""
    matcher = PathMatcher(expression)
    return [element for element, path in walk(document.root) if matcher.matches(path)]


# ── Source offsets ──────────────────────────────────────────────


_TOKEN = re.compile(
    r"<!--.*?-->"
    r"|<!\[CDATA\[.*?\]\]>"
    r"|<\?.*?\?>"
    r"|<!DOCTYPE(?:[^\[>]|\[.*?\])*>"
    r"|</(?P<close>[^\s>]+)\s*>"
    r"|<(?P<open>[^\s/>!?]+)(?:[^>\"']|\"[^\"]*\"|'[^']*')*?(?P<empty>/)?>",
    re.DOTALL,
)


@dataclass
class ElementSpan:
    """Character offsets of one element in its source text.

    ``start``..``start_tag_end`` is the start tag; ``close_start``..``end``
    is the end tag. For a self-closing element the start tag is the whole
    element and ``close_start`` is None.
    """

    name: str
    start: int
    start_tag_end: int
    close_start: int | None = None
    end: int | None = None

    @property
    def self_closing(self) -> bool:
        return self.close_start is None and self.end == self.start_tag_end


def element_spans(text: str) -> list[ElementSpan]:
    """Offsets of every element in ``text``, in document order.

    Expects well-formed input (parse it first).
    """
    spans: list[ElementSpan] = []
    open_spans: list[ElementSpan] = []
    for match in _TOKEN.finditer(text):
        if match.group("open"):
            span = ElementSpan(match.group("open"), match.start(), match.end())
            spans.append(span)
            if match.group("empty"):
                span.end = match.end()
            else:
                open_spans.append(span)
        elif match.group("close"):
            if not open_spans or open_spans[-1].name != match.group("close"):
                raise XmlParseError(f"Unbalanced end tag </{match.group('close')}>")
            span = open_spans.pop()
            span.close_start = match.start()
            span.end = match.end()
    if open_spans:
        raise XmlParseError(f"Unclosed element <{open_spans[-1].name}>")
    return spans


def span_map(document: XmlDocument) -> dict[etree._Element, ElementSpan]:
    """Map every element of ``document`` to its offsets in the document's text.

    Raises:
        XmlParseError: If the tree and the text disagree.
    """
    elements = [e for e in document.root.iter() if isinstance(e.tag, str)]
    spans = element_spans(document.text)
    if len(elements) != len(spans):
        raise XmlParseError(
            f"{document.source_path}: cannot align {len(elements)} elements "
            f"with {len(spans)} tags in the source text"
        )
    return dict(zip(elements, spans))
