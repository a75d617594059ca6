"""
Scan use case — report what the scanner sees in a project tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from mvnext.core.models.accumulator import Accumulator
from mvnext.core.services.inventory import InventoryError, collect_documents
from mvnext.core.services.pipeline import text_paths
from mvnext.core.services.scanner import scan_documents

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Result of the scan use case."""

    project_root: Path | None = None
    accumulator: Accumulator | None = None
    document_count: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "project_root": str(self.project_root),
            "documents": self.document_count,
            "facts": self.accumulator.to_dict() if self.accumulator else {},
        }


def run_scan(project_root: Path, max_workers: int | None = None) -> ScanResult:
    """Scan every file under ``project_root``."""
    result = ScanResult(project_root=project_root.resolve())
    try:
        documents = collect_documents(result.project_root, text_paths())
    except InventoryError as e:
        result.error = str(e)
        return result

    result.document_count = len(documents)
    result.accumulator = scan_documents(documents, max_workers=max_workers)
    return result
