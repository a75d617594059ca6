"""
Synthesizer service — decide which new files the project needs.

Runs after the scan is complete. Never proposes a file the scan saw.
"""

from __future__ import annotations

import logging

from mvnext.core.models.accumulator import Accumulator
from mvnext.core.models.options import ExtensionOptions
from mvnext.core.models.generated import GeneratedFile
from mvnext.core.services.generators.extensions_xml import generate_extensions_xml
from mvnext.core.services.generators.gradle_enterprise import generate_gradle_enterprise_xml

logger = logging.getLogger(__name__)


def synthesize(acc: Accumulator, options: ExtensionOptions) -> list[GeneratedFile]:
    """Files to create for this project.

    Nothing when the tree is not a Maven project or gradle-enterprise.xml
    already exists. Otherwise gradle-enterprise.xml, plus an empty
    extensions.xml when there is none.

    Raises:
        SerializationError: If the options cannot be rendered.
    """
    if not acc.is_maven_project:
        logger.info("No pom.xml at the project root; nothing to generate")
        return []
    if acc.gradle_enterprise_xml_exists:
        logger.info("gradle-enterprise.xml already present; nothing to generate")
        return []

    files = [generate_gradle_enterprise_xml(options, acc.newline)]
    if not acc.extensions_xml_exists:
        files.append(generate_extensions_xml(acc.newline))

    for f in files:
        logger.info("Will create %s", f.path)
    return files
