"""
Source document model — one file of the project as the inventory sees it.

The scanner only needs the logical path and, for some files, the
formatting convention the author used. Parsing into a tree happens later
and only for the files that get edited (see services/xml_document.py).
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class FormatStyle:
    """Formatting convention detected in a file."""

    use_crlf_new_lines: bool = False

    @property
    def newline(self) -> str:
        return "\r\n" if self.use_crlf_new_lines else "\n"

    @classmethod
    def platform_default(cls) -> FormatStyle:
        """Style used when a file carries no line break to learn from."""
        return cls(use_crlf_new_lines=os.linesep == "\r\n")


def detect_format_style(text: str | None) -> FormatStyle | None:
    """Detect the line-ending convention of ``text``.

    The first line terminator decides. Returns None when the text has
    no line break at all, so callers can apply their own default.
    """
    if not text:
        return None
    index = text.find("\n")
    if index < 0:
        return None
    return FormatStyle(use_crlf_new_lines=index > 0 and text[index - 1] == "\r")


def separators_to_unix(path: str) -> str:
    """Normalise a relative path to ``/`` separators, no leading ``./``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


@dataclass(frozen=True)
class SourceDocument:
    """A project file: its logical path, and its text when it was read."""

    source_path: str
    text: str | None = None
    style: FormatStyle | None = None

    @classmethod
    def from_text(cls, source_path: str, text: str | None) -> SourceDocument:
        return cls(
            source_path=separators_to_unix(source_path),
            text=text,
            style=detect_format_style(text),
        )
