"""Shared test fixtures and utilities."""

from pathlib import Path
import pytest

from deploy_state.context import ProjectContext
from deploy_state.store import SnapshotStore


@pytest.fixture
def project(tmp_path):
    """Create an initialized project context rooted at tmp_path."""
    return ProjectContext.init(tmp_path)


@pytest.fixture
def store(project):
    return SnapshotStore(project)


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content="test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            file_path.write_bytes(content)
        else:
            file_path.write_text(content)
        return file_path
    return _write


@pytest.fixture
def test_files(write_file):
    """Create a small Python project tree."""
    def make_files():
        return {
            "main.py": write_file("main.py", "print('hello')\n"),
            "requirements.txt": write_file("requirements.txt", "flask==1.0\nrequests\n"),
            "src/app.py": write_file("src/app.py", "def app():\n    return 42\n"),
            "data/data.csv": write_file("data/data.csv", "a,b,c\n1,2,3\n"),
        }
    return make_files
