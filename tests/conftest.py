"""
Pytest configuration for the rulescout test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Isolation of the user config, paths and CLI mode singletons
- Temporary corpus fixtures
- Marker-based test organization
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from rulescout.cli.config import CLIConfig
from rulescout.logging_config import reset_logging, setup_logging
from rulescout.paths import RulescoutPaths, reset_paths
from rulescout.user_config import reset_user_config


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Run everything in machine mode."""
    os.environ.setdefault("RULESCOUT_MACHINE_MODE", "1")
    os.environ.pop("RULESCOUT_HUMAN_MODE", None)


# ============================================================================
# LOGGING / SINGLETON FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True)


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """
    Keep the global config, paths and CLI mode from leaking between tests.

    The working directory is a fresh temp dir so no local .rulescout/config.json
    is picked up, and the global config directory points inside it too.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(RulescoutPaths, "GLOBAL_DIR", tmp_path / "home" / ".rulescout")
    reset_paths()
    reset_user_config()
    CLIConfig.set_machine_mode(None)
    yield
    reset_paths()
    reset_user_config()
    CLIConfig.set_machine_mode(None)


# ============================================================================
# TEMPORARY CORPUS FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="rulescout_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def write_corpus(temp_dir):
    """
    Write files into the temp directory.

    Usage:
        def test_something(write_corpus):
            root = write_corpus({"a.py": "x = 1\\n", "pkg/b.py": "y = 2\\n"})
    """
    def _write(files):
        for name, content in files.items():
            path = temp_dir / name
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_bytes(content.encode("utf-8"))
        return temp_dir

    return _write


@pytest.fixture
def temp_project(write_corpus):
    """
    Create a temporary project with two conventional Python files.

    Single-quoted strings, four-space indentation, no semicolons, LF endings,
    trailing newline, and an unused import in utils.py.

    Returns:
        Path to the temp directory containing the files.
    """
    return write_corpus({
        "sample.py": (
            "def hello(name):\n"
            "    greeting = 'hello'\n"
            "    return greeting + name\n"
            "\n"
            "\n"
            "class Greeter:\n"
            "    def greet(self, name):\n"
            "        return hello(name)\n"
        ),
        "utils.py": (
            "import os\n"
            "\n"
            "\n"
            "def add(a, b):\n"
            "    return a + b\n"
        ),
    })
