"""
The Gradle Enterprise extension as a tree-editor target.
"""

from __future__ import annotations

from mvnext.core.models.descriptor import ElementTemplate, Slot, TargetElementDescriptor
from mvnext.core.services.generators.extensions_xml import EXTENSIONS_XML_PATH

GROUP_ID = "com.gradle"
ARTIFACT_ID = "gradle-enterprise-maven-extension"

VERSION_PARAM = "version"

GRADLE_ENTERPRISE_EXTENSION = TargetElementDescriptor(
    anchor_path="/extensions",
    identity_path="/extensions/extension/artifactId",
    identity_value=ARTIFACT_ID,
    template=ElementTemplate(
        "extension",
        children=(
            ElementTemplate("groupId", GROUP_ID),
            ElementTemplate("artifactId", ARTIFACT_ID),
            ElementTemplate("version", Slot(VERSION_PARAM)),
        ),
    ),
    scope_path=EXTENSIONS_XML_PATH,
    description=f"{GROUP_ID}:{ARTIFACT_ID} in {EXTENSIONS_XML_PATH}",
)
