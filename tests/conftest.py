"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest


@pytest.fixture
def to_file(tmp_path: Path) -> Path:
    """Existing regular file used as link destination."""
    path = tmp_path / "to_file"
    path.write_text("woohoo")
    return path


@pytest.fixture
def target(tmp_path: Path) -> Path:
    """Path where links are created (absent initially)."""
    return tmp_path / "link"


@pytest.fixture
def other_file(tmp_path: Path) -> Path:
    """Second regular file, used as an unrelated destination."""
    path = tmp_path / "other_file"
    path.write_text("eek")
    return path
