"""
Tests for the in-memory pipeline — the run outcomes end to end,
without touching the filesystem.
"""

from mvnext.core.models.document import SourceDocument
from mvnext.core.models.options import ExtensionOptions
from mvnext.core.services.extension_descriptor import ARTIFACT_ID, GRADLE_ENTERPRISE_EXTENSION
from mvnext.core.services.generators.extensions_xml import EXTENSIONS_XML_PATH
from mvnext.core.services.generators.gradle_enterprise import GRADLE_ENTERPRISE_XML_PATH
from mvnext.core.models.descriptor import TargetElementDescriptor
from mvnext.core.services.pipeline import RunOutcome, run_pipeline, text_paths
from mvnext.core.services.tree_editor import EditOutcome

POM_XML = "<project>\n  <modelVersion>4.0.0</modelVersion>\n</project>\n"

POM = SourceDocument.from_text("pom.xml", POM_XML)
POM_CRLF = SourceDocument.from_text("pom.xml", POM_XML.replace("\n", "\r\n"))
GRADLE_ENTERPRISE = SourceDocument.from_text(
    GRADLE_ENTERPRISE_XML_PATH, "<gradleEnterprise>\n</gradleEnterprise>\n"
)
EMPTY_EXTENSIONS = SourceDocument.from_text(
    EXTENSIONS_XML_PATH, "<extensions>\n  <!-- keep -->\n</extensions>\n"
)


def _apply_result(documents, result):
    """Documents as they would look on disk after writing ``result``."""
    by_path = {d.source_path: d for d in documents}
    for f in result.created:
        by_path[f.path] = SourceDocument.from_text(f.path, f.content)
    for e in result.edited:
        by_path[e.source_path] = SourceDocument.from_text(e.source_path, e.text)
    return list(by_path.values())


class TestRunPipeline:
    def test_not_maven(self, options: ExtensionOptions):
        result = run_pipeline([GRADLE_ENTERPRISE], options)
        assert result.outcomes == [RunOutcome.NO_CHANGES]
        assert not result.has_changes

    def test_empty_project(self, options: ExtensionOptions):
        assert run_pipeline([], options).outcomes == [RunOutcome.NO_CHANGES]

    def test_bare_maven_project(self, options: ExtensionOptions):
        result = run_pipeline([POM], options)
        assert result.outcomes == [RunOutcome.FILES_CREATED]
        assert [f.path for f in result.created] == [GRADLE_ENTERPRISE_XML_PATH, EXTENSIONS_XML_PATH]
        assert result.edits == []
        extensions = result.created[1].content
        assert f"<artifactId>{ARTIFACT_ID}</artifactId>" in extensions
        assert "<version>" not in extensions

    def test_version_selector(self):
        opts = ExtensionOptions(server_url="https://ge.example.com", version_selector="1.x")
        result = run_pipeline([POM], opts)
        assert "<version>1.x</version>" in result.created[1].content

    def test_existing_extensions_edited(self, options: ExtensionOptions):
        result = run_pipeline([POM, EMPTY_EXTENSIONS], options)
        assert result.outcomes == [RunOutcome.FILES_CREATED, RunOutcome.FILE_EDITED]
        assert [f.path for f in result.created] == [GRADLE_ENTERPRISE_XML_PATH]
        assert [e.source_path for e in result.edited] == [EXTENSIONS_XML_PATH]
        assert "<!-- keep -->" in result.edited[0].text

    def test_gradle_enterprise_present_still_edits(self, options: ExtensionOptions):
        result = run_pipeline([POM, GRADLE_ENTERPRISE, EMPTY_EXTENSIONS], options)
        assert result.created == []
        assert result.outcomes == [RunOutcome.FILE_EDITED]

    def test_edits_extensions_without_pom(self, options: ExtensionOptions):
        result = run_pipeline([EMPTY_EXTENSIONS], options)
        assert result.created == []
        assert result.outcomes == [RunOutcome.FILE_EDITED]

    def test_malformed_extensions(self, options: ExtensionOptions):
        broken = SourceDocument.from_text(EXTENSIONS_XML_PATH, "<project></project>")
        result = run_pipeline([POM, broken], options)
        assert result.outcomes == [RunOutcome.FILES_CREATED, RunOutcome.EDIT_SKIPPED]
        assert result.skipped[0].text == "<project></project>"
        assert result.has_changes

    def test_only_malformed(self, options: ExtensionOptions):
        broken = SourceDocument.from_text(EXTENSIONS_XML_PATH, "<extensions>")
        result = run_pipeline([POM, GRADLE_ENTERPRISE, broken], options)
        assert result.outcomes == [RunOutcome.EDIT_SKIPPED]
        assert not result.has_changes

    def test_other_files_untouched(self, options: ExtensionOptions):
        nested = SourceDocument.from_text("module/.mvn/extensions.xml", "<extensions/>")
        result = run_pipeline([POM, nested], options)
        assert result.edits == []
        assert "module/.mvn/extensions.xml" not in [f.path for f in result.created]

    def test_crlf_project(self, options: ExtensionOptions):
        result = run_pipeline([POM_CRLF], options)
        for f in result.created:
            assert f.content.replace("\r\n", "").count("\n") == 0

    def test_second_run_is_noop(self, options: ExtensionOptions):
        documents = [POM, EMPTY_EXTENSIONS]
        first = run_pipeline(documents, options)
        second = run_pipeline(_apply_result(documents, first), options)
        assert second.outcomes == [RunOutcome.NO_CHANGES]
        assert [e.outcome for e in second.edits] == [EditOutcome.UNCHANGED]

    def test_second_run_after_creation_is_noop(self, options: ExtensionOptions):
        first = run_pipeline([POM], options)
        second = run_pipeline(_apply_result([POM], first), options)
        assert second.outcomes == [RunOutcome.NO_CHANGES]
        assert not second.has_changes

    def test_parallel_scan(self, options: ExtensionOptions):
        documents = [POM, EMPTY_EXTENSIONS]
        sequential = run_pipeline(documents, options)
        parallel = run_pipeline(documents, options, max_workers=4)
        assert parallel.outcomes == sequential.outcomes
        assert [f.content for f in parallel.created] == [f.content for f in sequential.created]
        assert [e.text for e in parallel.edits] == [e.text for e in sequential.edits]


class TestTextPaths:
    def test_pom_and_edited_file(self):
        assert text_paths() == frozenset({"pom.xml", EXTENSIONS_XML_PATH})

    def test_unscoped_descriptor_reads_everything(self):
        descriptor = TargetElementDescriptor(
            anchor_path="/extensions",
            identity_path="/extensions/extension/artifactId",
            identity_value=ARTIFACT_ID,
            template=GRADLE_ENTERPRISE_EXTENSION.template,
        )
        assert text_paths(descriptor) is None
