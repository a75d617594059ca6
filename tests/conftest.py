"""
Shared test fixtures and configuration.
"""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from mvnext.core.models.options import ExtensionOptions

POM_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<project>\n"
    "  <modelVersion>4.0.0</modelVersion>\n"
    "  <groupId>org.example</groupId>\n"
    "  <artifactId>demo</artifactId>\n"
    "  <version>1.0</version>\n"
    "</project>\n"
)


@pytest.fixture
def options() -> ExtensionOptions:
    """Options with only the required server URL."""
    return ExtensionOptions(server_url="https://scans.example.com/")


@pytest.fixture
def write_files(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Return a helper that writes ``{relative path: text}`` under tmp_path.

    Text is written as UTF-8 bytes, so CRLF line endings survive.
    """

    def _write(files: dict[str, str]) -> Path:
        for rel, text in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(text.encode("utf-8"))
        return tmp_path

    return _write


@pytest.fixture
def maven_project(write_files) -> Path:
    """A project root holding only pom.xml."""
    return write_files({"pom.xml": POM_XML})


@pytest.fixture
def pom_xml() -> str:
    """Text of the pom.xml the ``maven_project`` fixture writes."""
    return POM_XML


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back after tests that call setup_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
