"""
.mvn/gradle-enterprise.xml generator — server and build scan settings.

The options are mapped onto small pydantic models whose camelCase aliases
are the XML element names. Dumping with ``exclude_none`` removes every
unset option, and a whole section disappears when none of its options
were given. lxml builds and pretty-prints the tree.
"""

from __future__ import annotations

import logging

from lxml import etree
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from mvnext.core.models.options import ExtensionOptions
from mvnext.core.models.generated import GeneratedFile
from mvnext.core.services.xml_document import convert_newlines

logger = logging.getLogger(__name__)

GRADLE_ENTERPRISE_XML_PATH = ".mvn/gradle-enterprise.xml"

GRADLE_ENTERPRISE_NS = "https://www.gradle.com/gradle-enterprise-maven"
GRADLE_ENTERPRISE_XSD = "https://www.gradle.com/schema/gradle-enterprise-maven.xsd"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes" ?>'


class SerializationError(Exception):
    """Raised when the options cannot be rendered as XML."""


class _XmlModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ServerConfiguration(_XmlModel):
    url: str
    allow_untrusted: bool | None = None


class Capture(_XmlModel):
    goal_input_files: bool


class BuildScanConfiguration(_XmlModel):
    background_build_scan_upload: bool | None = None
    publish: str | None = None
    capture: Capture | None = None


class GradleEnterpriseConfiguration(_XmlModel):
    server: ServerConfiguration
    build_scan: BuildScanConfiguration | None = None


def build_scan_configuration(options: ExtensionOptions) -> BuildScanConfiguration | None:
    """The ``<buildScan>`` section, or None when no build scan option is set."""
    if not options.has_build_scan_settings:
        return None
    return BuildScanConfiguration(
        background_build_scan_upload=options.upload_in_background,
        publish=options.publish_criteria.xml_name if options.publish_criteria else None,
        capture=(
            Capture(goal_input_files=options.capture_goal_input_files)
            if options.capture_goal_input_files is not None
            else None
        ),
    )


def gradle_enterprise_configuration(options: ExtensionOptions) -> GradleEnterpriseConfiguration:
    return GradleEnterpriseConfiguration(
        server=ServerConfiguration(
            url=options.server_url,
            allow_untrusted=options.allow_untrusted_server,
        ),
        build_scan=build_scan_configuration(options),
    )


def _append_mapping(parent: etree._Element, data: dict) -> None:
    for key, value in data.items():
        child = etree.SubElement(parent, f"{{{GRADLE_ENTERPRISE_NS}}}{key}")
        if isinstance(value, dict):
            _append_mapping(child, value)
        elif isinstance(value, bool):
            child.text = "true" if value else "false"
        else:
            child.text = str(value)


def render_configuration(config: GradleEnterpriseConfiguration, newline: str = "\n") -> str:
    """Serialise the configuration, declaration included, without a final newline.

    Raises:
        SerializationError: If a value cannot be represented in XML.
    """
    root = etree.Element(
        f"{{{GRADLE_ENTERPRISE_NS}}}gradleEnterprise",
        nsmap={None: GRADLE_ENTERPRISE_NS, "xsi": XSI_NS},
    )
    root.set(f"{{{XSI_NS}}}schemaLocation", f"{GRADLE_ENTERPRISE_NS} {GRADLE_ENTERPRISE_XSD}")
    try:
        _append_mapping(root, config.model_dump(by_alias=True, exclude_none=True))
        body = etree.tostring(root, encoding="unicode", pretty_print=True)
    except (ValueError, TypeError) as e:
        raise SerializationError(f"Cannot render gradle-enterprise.xml: {e}") from e
    content = XML_DECLARATION + "\n" + body.rstrip("\n")
    return convert_newlines(content, newline)


def generate_gradle_enterprise_xml(
    options: ExtensionOptions,
    newline: str = "\n",
) -> GeneratedFile:
    """Generate the extension's configuration file.

    Args:
        options: Validated extension options.
        newline: Line terminator detected for the project.

    Returns:
        GeneratedFile for .mvn/gradle-enterprise.xml.

    Raises:
        SerializationError: If the options cannot be rendered.
    """
    content = render_configuration(gradle_enterprise_configuration(options), newline)
    logger.debug("Rendered %s (%d chars)", GRADLE_ENTERPRISE_XML_PATH, len(content))
    return GeneratedFile(
        path=GRADLE_ENTERPRISE_XML_PATH,
        content=content,
        overwrite=False,
        reason=f"Gradle Enterprise server {options.server_url}",
    )
