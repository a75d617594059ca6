"""
Scanner service — classify project files and accumulate facts.

Every document of the project is observed once. Only three logical
paths matter; everything else is ignored. Observations commute, so the
documents may arrive in any order and may be observed in parallel, each
into its own partial accumulator, as long as the partials are merged
before anything reads the result.

Pure logic — no filesystem access.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from functools import reduce

from mvnext.core.models.accumulator import Accumulator
from mvnext.core.models.document import FormatStyle, SourceDocument, separators_to_unix
from mvnext.core.services.generators.extensions_xml import EXTENSIONS_XML_PATH
from mvnext.core.services.generators.gradle_enterprise import GRADLE_ENTERPRISE_XML_PATH

logger = logging.getLogger(__name__)

POM_XML_PATH = "pom.xml"


def observe(document: SourceDocument, acc: Accumulator) -> None:
    """Record what ``document`` tells us about the project into ``acc``."""
    source_path = separators_to_unix(document.source_path)
    if source_path == POM_XML_PATH:
        acc.is_maven_project = True
        style = document.style or FormatStyle.platform_default()
        acc.use_crlf_new_lines = style.use_crlf_new_lines
        logger.debug("Maven project marker found (crlf=%s)", style.use_crlf_new_lines)
    elif source_path == EXTENSIONS_XML_PATH:
        acc.extensions_xml_exists = True
    elif source_path == GRADLE_ENTERPRISE_XML_PATH:
        acc.gradle_enterprise_xml_exists = True


def _observe_one(document: SourceDocument) -> Accumulator:
    partial = Accumulator()
    observe(document, partial)
    return partial


def scan_documents(
    documents: Iterable[SourceDocument],
    max_workers: int | None = None,
) -> Accumulator:
    """Observe every document and return the complete accumulator.

    Args:
        documents: All documents of the project.
        max_workers: Thread count for a parallel scan. None or 1 scans
            sequentially into a single accumulator.

    Returns:
        The accumulator, fully populated.
    """
    if max_workers is None or max_workers <= 1:
        acc = Accumulator()
        for document in documents:
            observe(document, acc)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            partials = list(pool.map(_observe_one, documents))
        acc = reduce(Accumulator.merge, partials, Accumulator())

    logger.info(
        "Scan: maven=%s extensions.xml=%s gradle-enterprise.xml=%s crlf=%s",
        acc.is_maven_project,
        acc.extensions_xml_exists,
        acc.gradle_enterprise_xml_exists,
        acc.use_crlf_new_lines,
    )
    return acc
