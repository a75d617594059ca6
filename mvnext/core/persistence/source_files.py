"""
Source file persistence — write created and edited project files.

Content is encoded as its XML declaration says (UTF-8 without one), so a
Latin-1 file stays Latin-1, and written as bytes so line endings land on
disk exactly as produced. Writes are atomic (temp file in the same directory, then
rename): a file is either left as it was or fully replaced.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from mvnext.core.services.xml_document import encode_xml

logger = logging.getLogger(__name__)


class WriteError(Exception):
    """Raised when a project file cannot be written."""


def write_source_file(
    project_root: Path,
    rel_path: str,
    content: str,
    overwrite: bool = True,
) -> Path:
    """Write ``content`` to ``project_root / rel_path``.

    Args:
        project_root: Project root directory.
        rel_path: Logical path, ``/``-separated.
        content: Full file content.
        overwrite: Whether an existing file may be replaced.

    Returns:
        The path written.

    Raises:
        WriteError: If the file exists and ``overwrite`` is False, or the
            write fails.
    """
    target = project_root / rel_path
    if target.exists() and not overwrite:
        raise WriteError(f"File already exists: {rel_path}")

    try:
        data = encode_xml(content)
    except UnicodeEncodeError as e:
        raise WriteError(f"Cannot encode {rel_path}: {e}") from e

    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp, target)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise WriteError(f"Cannot write {rel_path}: {e}") from e

    logger.info("Wrote %s", target)
    return target
