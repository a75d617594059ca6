"""
Target element descriptor — what the tree editor inserts, and how it
recognises that the element is already there.

An ``ElementTemplate`` is a small immutable tree. Text values are either
literal strings or a ``Slot`` naming a parameter; resolving a template
against parameters drops every element whose slot parameter is None,
so an unset option leaves no empty tag behind.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from xml.sax.saxutils import escape

from mvnext.core.models.document import separators_to_unix


@dataclass(frozen=True)
class Slot:
    """Placeholder for a parameter value inside a template."""

    name: str


@dataclass(frozen=True)
class ElementTemplate:
    """One element of a template tree."""

    tag: str
    text: str | Slot | None = None
    children: tuple[ElementTemplate, ...] = ()

    def resolve(self, params: Mapping[str, str | None]) -> ElementTemplate | None:
        """Substitute slots; return None if this element's slot is unset."""
        text = self.text
        if isinstance(text, Slot):
            text = params.get(text.name)
            if text is None:
                return None
        children = tuple(
            resolved
            for resolved in (child.resolve(params) for child in self.children)
            if resolved is not None
        )
        return ElementTemplate(tag=self.tag, text=text, children=children)

    def render(
        self,
        indent: str = "",
        unit: str = "  ",
        newline: str = "\n",
        prefix: str | None = None,
    ) -> str:
        """Serialise a resolved template, one element per line for containers.

        ``indent`` is applied to the first line as well, so the result can
        be spliced in at the start of a line.
        """
        if isinstance(self.text, Slot):
            raise ValueError(f"Unresolved slot '{self.text.name}' in <{self.tag}>")
        name = f"{prefix}:{self.tag}" if prefix else self.tag
        if not self.children:
            if self.text is None:
                return f"{indent}<{name}/>"
            return f"{indent}<{name}>{escape(self.text)}</{name}>"
        lines = [f"{indent}<{name}>"]
        lines.extend(
            child.render(indent + unit, unit, newline, prefix) for child in self.children
        )
        lines.append(f"{indent}</{name}>")
        return newline.join(lines)


@dataclass(frozen=True)
class TargetElementDescriptor:
    """Where to insert, what to insert, and how to spot an existing copy.

    Attributes:
        anchor_path:    Structural path of the element that receives the insert.
        identity_path:  Structural path of the identity-field elements.
        identity_value: Text an identity field must carry to count as "present".
        template:       The element to insert.
        scope_path:     Logical path of the only document the editor applies to
                        (empty: any document).
        description:    Human-readable name used in log lines.
    """

    anchor_path: str
    identity_path: str
    identity_value: str
    template: ElementTemplate
    scope_path: str = ""
    description: str = field(default="", compare=False)

    @property
    def label(self) -> str:
        """Name for log lines; the identity value when no description is set."""
        return self.description or self.identity_value

    def in_scope(self, source_path: str) -> bool:
        """Whether the editor applies to the document at ``source_path``."""
        return not self.scope_path or separators_to_unix(source_path) == self.scope_path

    def is_identity(self, value: str | None) -> bool:
        return value is not None and value.strip() == self.identity_value

    def build(self, params: Mapping[str, str | None] | None = None) -> ElementTemplate:
        resolved = self.template.resolve(params or {})
        if resolved is None:
            raise ValueError(f"Template root <{self.template.tag}> resolved to nothing")
        return resolved
