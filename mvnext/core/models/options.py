"""
Extension options — what the user asked for.

Loaded from mvnext.yml and/or CLI flags. Field names follow Python
conventions; the camelCase aliases are the names used in mvnext.yml.
Every optional field distinguishes "unset" (None) from an explicit value,
because unset options are left out of the generated configuration.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class PublishCriteria(str, Enum):
    """When the extension publishes a build scan."""

    ALWAYS = "always"
    FAILURE = "failure"
    DEMAND = "demand"

    @property
    def xml_name(self) -> str:
        """Value written to ``<publish>`` in gradle-enterprise.xml."""
        return _PUBLISH_XML_NAMES[self]


_PUBLISH_XML_NAMES = {
    PublishCriteria.ALWAYS: "ALWAYS",
    PublishCriteria.FAILURE: "ON_FAILURE",
    PublishCriteria.DEMAND: "ON_DEMAND",
}


class ExtensionOptions(BaseModel):
    """Options for adding the extension.

    Attributes:
        version_selector:         Exact version or node-style selector (``1.x``).
        server_url:               URL of the Gradle Enterprise server.
        allow_untrusted_server:   Allow plain http to the server.
        capture_goal_input_files: Capture Maven goal inputs in build scans.
        upload_in_background:     Upload build scans after the build finishes.
        publish_criteria:         always / failure / demand.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    version_selector: str | None = None
    server_url: str
    allow_untrusted_server: bool | None = None
    capture_goal_input_files: bool | None = None
    upload_in_background: bool | None = None
    publish_criteria: PublishCriteria | None = None

    @field_validator("server_url")
    @classmethod
    def _server_url_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("server URL must not be empty")
        return value

    @field_validator("version_selector")
    @classmethod
    def _blank_version_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value.strip() if value is not None else None

    @field_validator("publish_criteria", mode="before")
    @classmethod
    def _publish_criteria_case(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def has_build_scan_settings(self) -> bool:
        """Whether any ``<buildScan>`` setting was supplied."""
        return (
            self.upload_in_background is not None
            or self.publish_criteria is not None
            or self.capture_goal_input_files is not None
        )
