"""
Apply use case — add the Gradle Enterprise extension to a project tree.

Ties together the inventory, the in-memory pipeline and file
persistence. Every new file content is computed before the first byte
is written, so a rendering failure leaves the tree untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from mvnext.core.models.accumulator import Accumulator
from mvnext.core.models.options import ExtensionOptions
from mvnext.core.persistence.source_files import WriteError, write_source_file
from mvnext.core.services.generators.gradle_enterprise import SerializationError
from mvnext.core.services.inventory import InventoryError, collect_documents
from mvnext.core.services.pipeline import RunOutcome, run_pipeline, text_paths

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Result of the apply use case."""

    project_root: Path | None = None
    accumulator: Accumulator | None = None
    outcomes: list[RunOutcome] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    edited: list[str] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)
    dry_run: bool = False
    written: bool = False
    error: str | None = None

    @property
    def changed(self) -> bool:
        return bool(self.created or self.edited)

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["project_root"] = str(self.project_root)
        result["outcomes"] = [o.value for o in self.outcomes]
        result["created"] = self.created
        result["edited"] = self.edited
        result["skipped"] = self.skipped
        result["dry_run"] = self.dry_run
        result["written"] = self.written
        if self.accumulator:
            result["facts"] = self.accumulator.to_dict()
        return result


def run_apply(
    project_root: Path,
    options: ExtensionOptions,
    dry_run: bool = False,
    max_workers: int | None = None,
) -> ApplyResult:
    """Run the pipeline on ``project_root`` and write the changes.

    Args:
        project_root: Root of the Maven project.
        options: Validated extension options.
        dry_run: Compute and report, but write nothing.
        max_workers: Threads for the scan (None: sequential).

    Returns:
        ApplyResult describing what was (or would be) created and edited.
    """
    result = ApplyResult(project_root=project_root.resolve(), dry_run=dry_run)
    root = result.project_root
    assert root is not None

    try:
        documents = collect_documents(root, text_paths())
    except InventoryError as e:
        result.error = str(e)
        return result

    try:
        pipeline = run_pipeline(documents, options, max_workers=max_workers)
    except SerializationError as e:
        result.error = str(e)
        return result

    result.accumulator = pipeline.accumulator
    result.outcomes = pipeline.outcomes
    result.created = [f.path for f in pipeline.created]
    result.edited = [e.source_path for e in pipeline.edited]
    result.skipped = {e.source_path: e.message for e in pipeline.skipped}

    if dry_run or not pipeline.has_changes:
        return result

    try:
        for generated in pipeline.created:
            write_source_file(root, generated.path, generated.content, overwrite=generated.overwrite)
        for edit in pipeline.edited:
            write_source_file(root, edit.source_path, edit.text, overwrite=True)
    except WriteError as e:
        result.error = str(e)
        return result

    result.written = True
    return result
