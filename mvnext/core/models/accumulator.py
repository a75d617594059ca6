"""
Accumulator — facts gathered by the scan phase.

One instance lives for one run. The scanner is the only writer; the
synthesizer and the editor only read it. Every fact moves from False to
True and never back, so partial accumulators built independently can be
combined with ``merge`` in any order.
"""

from __future__ import annotations

from pydantic import BaseModel


class Accumulator(BaseModel):
    """What the scan found out about the project tree."""

    is_maven_project: bool = False
    use_crlf_new_lines: bool = False
    extensions_xml_exists: bool = False
    gradle_enterprise_xml_exists: bool = False

    @property
    def newline(self) -> str:
        return "\r\n" if self.use_crlf_new_lines else "\n"

    def merge(self, other: Accumulator) -> Accumulator:
        """Combine two partial accumulators (logical OR of every fact)."""
        return Accumulator(
            is_maven_project=self.is_maven_project or other.is_maven_project,
            use_crlf_new_lines=self.use_crlf_new_lines or other.use_crlf_new_lines,
            extensions_xml_exists=self.extensions_xml_exists or other.extensions_xml_exists,
            gradle_enterprise_xml_exists=(
                self.gradle_enterprise_xml_exists or other.gradle_enterprise_xml_exists
            ),
        )

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
