"""Shared fixtures for core unit tests"""

import pytest

from trydocs.core.directory import DirectoryAccessor
from trydocs.core.project import MarkdownProject


@pytest.fixture(name="source_root")
def source_root_fixture(tmp_path):
    root = tmp_path / "docs"
    root.mkdir()
    return root


@pytest.fixture(name="project")
def project_fixture(source_root):
    return MarkdownProject(DirectoryAccessor(source_root))


@pytest.fixture(name="write")
def write_fixture(source_root):
    """Write a file relative to the source root, creating parents."""
    def _write(relative: str, text: str):
        path = source_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
