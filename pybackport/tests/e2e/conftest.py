"""Configuration for pytest."""

import shutil
from pathlib import Path

import pytest

# Import fixtures to make them available to all tests
from pybackport.tests.e2e.fixtures import (  # noqa: F401
    fake_github,
    remote_repo,
)

E2E_DIR = Path(__file__).parent


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    """Skip the end-to-end tests when no git executable is available."""
    if shutil.which("git"):
        return
    skip = pytest.mark.skip(reason="git executable not found")
    for item in items:
        if E2E_DIR in Path(str(item.fspath)).parents:
            item.add_marker(skip)
