"""
Tests for file generators — gradle-enterprise.xml and the empty extensions.xml.

Pure unit tests: options in → GeneratedFile out.
"""

import pytest
from lxml import etree

from mvnext.core.models.options import ExtensionOptions, PublishCriteria
from mvnext.core.services.generators.extensions_xml import (
    EXTENSIONS_XML_PATH,
    generate_extensions_xml,
)
from mvnext.core.services.generators.gradle_enterprise import (
    GRADLE_ENTERPRISE_XML_PATH,
    SerializationError,
    XML_DECLARATION,
    build_scan_configuration,
    generate_gradle_enterprise_xml,
)
from mvnext.core.services.xml_document import convert_newlines, parse

SERVER = "https://scans.example.com/"


def _body_lines(content: str) -> list[str]:
    """Lines after the declaration and the root start tag."""
    return content.split("\n")[2:]


# ═══════════════════════════════════════════════════════════════════
#  gradle-enterprise.xml
# ═══════════════════════════════════════════════════════════════════


class TestGradleEnterpriseXml:
    def test_server_only(self, options: ExtensionOptions):
        f = generate_gradle_enterprise_xml(options)
        assert f.path == GRADLE_ENTERPRISE_XML_PATH
        assert f.overwrite is False
        lines = f.content.split("\n")
        assert lines[0] == XML_DECLARATION
        assert lines[1].startswith("<gradleEnterprise ")
        assert 'xmlns="https://www.gradle.com/gradle-enterprise-maven"' in lines[1]
        assert 'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"' in lines[1]
        assert (
            'xsi:schemaLocation="https://www.gradle.com/gradle-enterprise-maven '
            'https://www.gradle.com/schema/gradle-enterprise-maven.xsd"'
        ) in lines[1]
        assert _body_lines(f.content) == [
            "  <server>",
            f"    <url>{SERVER}</url>",
            "  </server>",
            "</gradleEnterprise>",
        ]

    def test_all_options(self):
        opts = ExtensionOptions(
            server_url=SERVER,
            allow_untrusted_server=True,
            capture_goal_input_files=True,
            upload_in_background=False,
            publish_criteria=PublishCriteria.DEMAND,
        )
        f = generate_gradle_enterprise_xml(opts)
        assert _body_lines(f.content) == [
            "  <server>",
            f"    <url>{SERVER}</url>",
            "    <allowUntrusted>true</allowUntrusted>",
            "  </server>",
            "  <buildScan>",
            "    <backgroundBuildScanUpload>false</backgroundBuildScanUpload>",
            "    <publish>ON_DEMAND</publish>",
            "    <capture>",
            "      <goalInputFiles>true</goalInputFiles>",
            "    </capture>",
            "  </buildScan>",
            "</gradleEnterprise>",
        ]

    def test_allow_untrusted_false_is_written(self):
        opts = ExtensionOptions(server_url=SERVER, allow_untrusted_server=False)
        f = generate_gradle_enterprise_xml(opts)
        assert "    <allowUntrusted>false</allowUntrusted>" in _body_lines(f.content)

    def test_publish_only(self):
        opts = ExtensionOptions(server_url=SERVER, publish_criteria="failure")
        f = generate_gradle_enterprise_xml(opts)
        assert _body_lines(f.content)[3:] == [
            "  <buildScan>",
            "    <publish>ON_FAILURE</publish>",
            "  </buildScan>",
            "</gradleEnterprise>",
        ]
        assert "<capture>" not in f.content
        assert "backgroundBuildScanUpload" not in f.content

    def test_no_build_scan_when_unset(self, options: ExtensionOptions):
        f = generate_gradle_enterprise_xml(options)
        assert "buildScan" not in f.content
        assert "capture" not in f.content
        assert build_scan_configuration(options) is None

    def test_crlf(self, options: ExtensionOptions):
        f = generate_gradle_enterprise_xml(options, newline="\r\n")
        assert "\r\n" in f.content
        assert f.content.replace("\r\n", "").count("\n") == 0
        assert not f.content.endswith("\r\n")

    def test_url_is_escaped(self):
        opts = ExtensionOptions(server_url="https://ge.example.com/?a=1&b=2")
        f = generate_gradle_enterprise_xml(opts)
        assert "<url>https://ge.example.com/?a=1&amp;b=2</url>" in f.content
        assert parse(f.content).root[0][0].text == "https://ge.example.com/?a=1&b=2"

    def test_unrenderable_value(self):
        opts = ExtensionOptions(server_url="https://ge.example.com/\x00")
        with pytest.raises(SerializationError):
            generate_gradle_enterprise_xml(opts)

    @pytest.mark.parametrize("newline", ["\n", "\r\n"])
    @pytest.mark.parametrize(
        "opts",
        [
            ExtensionOptions(server_url=SERVER),
            ExtensionOptions(
                server_url="https://ge.example.com/?a=1&b=2",
                allow_untrusted_server=False,
                capture_goal_input_files=True,
                upload_in_background=True,
                publish_criteria=PublishCriteria.ALWAYS,
            ),
        ],
    )
    def test_round_trip(self, opts: ExtensionOptions, newline: str):
        content = generate_gradle_enterprise_xml(opts, newline=newline).content
        body = convert_newlines(content, "\n").split("\n", 1)[1]
        reparsed = parse(content).root
        assert etree.tostring(reparsed, encoding="unicode") == body


# ═══════════════════════════════════════════════════════════════════
#  extensions.xml placeholder
# ═══════════════════════════════════════════════════════════════════


class TestExtensionsXml:
    def test_placeholder(self):
        f = generate_extensions_xml()
        assert f.path == EXTENSIONS_XML_PATH
        assert f.content == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<extensions>\n"
            "</extensions>"
        )

    def test_placeholder_crlf(self):
        f = generate_extensions_xml("\r\n")
        assert f.content == (
            '<?xml version="1.0" encoding="UTF-8"?>\r\n'
            "<extensions>\r\n"
            "</extensions>"
        )

    def test_placeholder_round_trip(self):
        content = generate_extensions_xml().content
        reparsed = parse(content).root
        assert etree.tostring(reparsed, encoding="unicode") == content.split("\n", 1)[1]
        assert len(reparsed) == 0
