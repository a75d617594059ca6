"""
Inventory service — list the files of a project tree as SourceDocuments.

Only the files the run actually looks into are read: ``pom.xml`` for its
line endings and the file the editor patches. Every other file is listed
by path alone, whatever its encoding or size. A file that is read keeps
its raw line endings and is decoded with the encoding its XML
declaration names.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Collection
from pathlib import Path

from mvnext.core.models.document import SourceDocument
from mvnext.core.services.xml_document import decode_xml

logger = logging.getLogger(__name__)

SKIP_DIRS = frozenset({".git", ".hg", ".svn", ".idea", "node_modules", "target"})

# read when no explicit path set is given
READ_SUFFIXES = frozenset({".xml"})


class InventoryError(Exception):
    """Raised when a project file that must be read cannot be."""


def read_source_text(path: Path) -> str:
    """Read an XML file without newline translation.

    Raises:
        InventoryError: If the file cannot be read or does not match its
            declared encoding.
    """
    try:
        return decode_xml(path.read_bytes())
    except (OSError, UnicodeDecodeError) as e:
        raise InventoryError(f"Cannot read {path}: {e}") from e


def collect_documents(
    project_root: Path,
    text_paths: Collection[str] | None = None,
) -> list[SourceDocument]:
    """Walk ``project_root`` and return one SourceDocument per file.

    Args:
        project_root: Directory to walk.
        text_paths: Logical paths whose text is needed. Other files get
            ``text=None``. None reads every ``*.xml`` file.

    Returns:
        Documents sorted by logical path.

    Raises:
        InventoryError: If the root is not a directory or a file in
            ``text_paths`` cannot be read.
    """
    if not project_root.is_dir():
        raise InventoryError(f"Project root is not a directory: {project_root}")

    documents: list[SourceDocument] = []
    for dirpath, dirnames, filenames in os.walk(project_root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for filename in filenames:
            path = Path(dirpath) / filename
            rel = path.relative_to(project_root).as_posix()
            if text_paths is None:
                wanted = path.suffix.lower() in READ_SUFFIXES
            else:
                wanted = rel in text_paths
            text = read_source_text(path) if wanted else None
            documents.append(SourceDocument.from_text(rel, text))

    documents.sort(key=lambda d: d.source_path)
    logger.debug("Inventory: %d files under %s", len(documents), project_root)
    return documents
