"""
Pipeline — scan, synthesize, edit over an in-memory set of documents.

Order matters: the scan completes before anything is decided, and
the decisions are made before any document is edited. Nothing here
touches the filesystem; the result lists the new content of every file
that should change.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from mvnext.core.models.accumulator import Accumulator
from mvnext.core.models.descriptor import TargetElementDescriptor
from mvnext.core.models.document import SourceDocument
from mvnext.core.models.options import ExtensionOptions
from mvnext.core.models.generated import GeneratedFile
from mvnext.core.services.extension_descriptor import GRADLE_ENTERPRISE_EXTENSION, VERSION_PARAM
from mvnext.core.services.scanner import POM_XML_PATH, scan_documents
from mvnext.core.services.synthesizer import synthesize
from mvnext.core.services.tree_editor import EditOutcome, EditResult, edit_text

logger = logging.getLogger(__name__)


class RunOutcome(str, Enum):
    NO_CHANGES = "no_changes"
    FILES_CREATED = "files_created"
    FILE_EDITED = "file_edited"
    EDIT_SKIPPED = "edit_skipped"


@dataclass
class PipelineResult:
    """Everything one run decided."""

    accumulator: Accumulator
    created: list[GeneratedFile] = field(default_factory=list)
    edits: list[EditResult] = field(default_factory=list)

    @property
    def edited(self) -> list[EditResult]:
        return [e for e in self.edits if e.outcome == EditOutcome.INSERTED]

    @property
    def skipped(self) -> list[EditResult]:
        return [e for e in self.edits if e.outcome == EditOutcome.MALFORMED]

    @property
    def outcomes(self) -> list[RunOutcome]:
        outcomes = []
        if self.created:
            outcomes.append(RunOutcome.FILES_CREATED)
        if self.edited:
            outcomes.append(RunOutcome.FILE_EDITED)
        if self.skipped:
            outcomes.append(RunOutcome.EDIT_SKIPPED)
        return outcomes or [RunOutcome.NO_CHANGES]

    @property
    def has_changes(self) -> bool:
        return bool(self.created or self.edited)


def text_paths(
    descriptor: TargetElementDescriptor = GRADLE_ENTERPRISE_EXTENSION,
) -> frozenset[str] | None:
    """Logical paths whose text a run needs: pom.xml and the edited file.

    None when the descriptor applies to every document, since any XML
    file may then be edited.
    """
    if not descriptor.scope_path:
        return None
    return frozenset({POM_XML_PATH, descriptor.scope_path})


def run_pipeline(
    documents: Sequence[SourceDocument],
    options: ExtensionOptions,
    descriptor: TargetElementDescriptor = GRADLE_ENTERPRISE_EXTENSION,
    max_workers: int | None = None,
) -> PipelineResult:
    """Run scan → synthesize → edit over ``documents``.

    A file created in this run goes through the editor before it is
    returned, so its first version already holds the inserted element.
    Each document is edited at most once.

    Raises:
        SerializationError: If the options cannot be rendered. Nothing
            has been decided for writing at that point.
    """
    acc = scan_documents(documents, max_workers=max_workers)
    result = PipelineResult(accumulator=acc)
    params = {VERSION_PARAM: options.version_selector}

    for generated in synthesize(acc, options):
        if descriptor.in_scope(generated.path):
            edit = edit_text(generated.path, generated.content, descriptor, params)
            generated = generated.with_content(edit.text)
        result.created.append(generated)

    created_paths = {f.path for f in result.created}
    for document in documents:
        if not descriptor.in_scope(document.source_path):
            continue
        if document.source_path in created_paths:
            continue
        result.edits.append(
            edit_text(document.source_path, document.text or "", descriptor, params)
        )

    logger.info("Pipeline outcomes: %s", ", ".join(o.value for o in result.outcomes))
    return result
