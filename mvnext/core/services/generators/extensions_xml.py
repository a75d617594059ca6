"""
.mvn/extensions.xml generator — an empty extension list.

Created only when the project has no extensions.xml yet; the tree editor
then inserts the Gradle Enterprise extension into it.
"""

from __future__ import annotations

from mvnext.core.models.generated import GeneratedFile
from mvnext.core.services.xml_document import convert_newlines

EXTENSIONS_XML_PATH = ".mvn/extensions.xml"

_EXTENSIONS_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<extensions>
</extensions>"""


def generate_extensions_xml(newline: str = "\n") -> GeneratedFile:
    """Generate an empty ``<extensions>`` container.

    Args:
        newline: Line terminator detected for the project.

    Returns:
        GeneratedFile for .mvn/extensions.xml.
    """
    return GeneratedFile(
        path=EXTENSIONS_XML_PATH,
        content=convert_newlines(_EXTENSIONS_XML, newline),
        overwrite=False,
        reason="Maven extension list did not exist",
    )
