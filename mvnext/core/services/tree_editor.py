"""
Tree editor — make sure one element exists in an existing XML document.

Two passes over a document:

1. Detection: walk every element, and for each one at the descriptor's
   identity path compare its text with the identity value. The first hit
   means the element is already there and the document is returned
   untouched.
2. Insertion: render the descriptor's template and splice it into the
   source text right before the anchor's end tag. Only the inserted span
   is new; comments, attribute order, whitespace and line endings of the
   rest of the file are kept byte for byte. The spliced text is parsed
   again before it is accepted.

The editor never creates a document and touches each document once.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from lxml import etree

from mvnext.core.models.descriptor import TargetElementDescriptor
from mvnext.core.services.xml_document import (
    XmlDocument,
    XmlParseError,
    find_first,
    parse,
    query,
    span_map,
)

logger = logging.getLogger(__name__)

DEFAULT_INDENT = "  "

_INDENTED_TAG = re.compile(r"^([ \t]+)<", re.MULTILINE)


class MalformedContainerError(Exception):
    """Raised when a document has no single anchor element to insert into."""


class EditOutcome(str, Enum):
    UNCHANGED = "unchanged"
    INSERTED = "inserted"
    MALFORMED = "malformed"


@dataclass
class EditResult:
    """Outcome of editing one document.

    ``text`` is the document's text after the edit; for UNCHANGED and
    MALFORMED it is the original text.
    """

    source_path: str
    text: str
    outcome: EditOutcome
    message: str = ""
    document: XmlDocument | None = None

    @property
    def changed(self) -> bool:
        return self.outcome == EditOutcome.INSERTED

    def to_dict(self) -> dict:
        result = {"path": self.source_path, "outcome": self.outcome.value}
        if self.message:
            result["message"] = self.message
        return result


def find_existing(
    document: XmlDocument,
    descriptor: TargetElementDescriptor,
) -> etree._Element | None:
    """The identity-field element showing the target is present, or None."""
    return find_first(
        document,
        descriptor.identity_path,
        lambda element: descriptor.is_identity(element.text),
    )


def _line_indent(text: str, offset: int) -> str | None:
    """Whitespace between the start of the line and ``offset``.

    None when something other than whitespace precedes ``offset`` on its line.
    """
    line_start = text.rfind("\n", 0, offset) + 1
    prefix = text[line_start:offset]
    return None if prefix.strip() else prefix


def _indent_unit(text: str) -> str:
    match = _INDENTED_TAG.search(text)
    return match.group(1) if match else DEFAULT_INDENT


def insert(
    document: XmlDocument,
    descriptor: TargetElementDescriptor,
    params: Mapping[str, str | None] | None = None,
) -> XmlDocument:
    """Append the descriptor's element as the anchor's last child.

    Does not check whether the element is already present; see ``edit``.

    Raises:
        MalformedContainerError: If the anchor is missing or ambiguous, or
            the source text cannot be aligned with the tree.
    """
    anchors = query(document, descriptor.anchor_path)
    if len(anchors) != 1:
        raise MalformedContainerError(
            f"expected one element at {descriptor.anchor_path}, found {len(anchors)}"
        )
    anchor = anchors[0]

    try:
        spans = span_map(document)
    except XmlParseError as e:
        raise MalformedContainerError(str(e)) from e

    text = document.text
    newline = document.newline
    span = spans[anchor]
    anchor_indent = _line_indent(text, span.start) or ""

    child_indent = None
    children = [child for child in anchor if isinstance(child.tag, str)]
    if children:
        child_indent = _line_indent(text, spans[children[0]].start)
    if child_indent is not None and len(child_indent) > len(anchor_indent) \
            and child_indent.startswith(anchor_indent):
        unit = child_indent[len(anchor_indent):]
    else:
        unit = _indent_unit(text)
    if child_indent is None:
        child_indent = anchor_indent + unit

    rendered = descriptor.build(params).render(child_indent, unit, newline, anchor.prefix)

    if span.self_closing:
        open_tag = text[span.start:span.end][:-2].rstrip() + ">"
        replacement = f"{open_tag}{newline}{rendered}{newline}{anchor_indent}</{span.name}>"
        new_text = text[:span.start] + replacement + text[span.end:]
    else:
        assert span.close_start is not None
        close = span.close_start
        line_start = text.rfind("\n", 0, close) + 1
        if line_start > span.start_tag_end and not text[line_start:close].strip():
            # end tag sits on its own line: new lines go right above it
            new_text = text[:line_start] + rendered + newline + text[line_start:]
        else:
            new_text = text[:close] + newline + rendered + newline + anchor_indent + text[close:]

    try:
        return parse(new_text, document.source_path)
    except XmlParseError as e:
        raise MalformedContainerError(f"insertion produced invalid XML: {e}") from e


def edit(
    document: XmlDocument,
    descriptor: TargetElementDescriptor,
    params: Mapping[str, str | None] | None = None,
) -> EditResult:
    """Ensure the descriptor's element is present in ``document``.

    Never raises for a malformed container: the result says MALFORMED and
    carries the original text.
    """
    if find_existing(document, descriptor) is not None:
        logger.info("%s: %s already present", document.source_path, descriptor.label)
        return EditResult(
            source_path=document.source_path,
            text=document.text,
            outcome=EditOutcome.UNCHANGED,
            document=document,
        )

    try:
        updated = insert(document, descriptor, params)
    except MalformedContainerError as e:
        logger.warning("%s: malformed container, edit skipped (%s)", document.source_path, e)
        return EditResult(
            source_path=document.source_path,
            text=document.text,
            outcome=EditOutcome.MALFORMED,
            message=str(e),
            document=document,
        )

    logger.info("%s: inserted %s", document.source_path, descriptor.label)
    return EditResult(
        source_path=updated.source_path,
        text=updated.text,
        outcome=EditOutcome.INSERTED,
        document=updated,
    )


def edit_text(
    source_path: str,
    text: str,
    descriptor: TargetElementDescriptor,
    params: Mapping[str, str | None] | None = None,
) -> EditResult:
    """Parse ``text`` and edit it; unparseable text counts as MALFORMED."""
    try:
        document = parse(text, source_path)
    except XmlParseError as e:
        logger.warning("%s: not well-formed, edit skipped (%s)", source_path, e)
        return EditResult(
            source_path=source_path,
            text=text,
            outcome=EditOutcome.MALFORMED,
            message=str(e),
        )
    return edit(document, descriptor, params)
