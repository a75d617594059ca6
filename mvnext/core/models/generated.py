"""
New project files decided by the synthesizer.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from mvnext.core.models.document import separators_to_unix


class GeneratedFile(BaseModel):
    """A file to create in the project tree.

    ``content`` already uses the project's line terminator and is
    written byte for byte. ``overwrite`` stays False for everything the
    synthesizer emits: it only proposes paths the scan did not see.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    overwrite: bool = False
    reason: str = ""

    @field_validator("path")
    @classmethod
    def _unix_path(cls, v: str) -> str:
        return separators_to_unix(v)

    def with_content(self, content: str) -> GeneratedFile:
        """Same file, different content (after an in-run edit)."""
        return self.model_copy(update={"content": content})
