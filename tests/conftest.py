"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURE_FILES = [
    ".dot-file.js",
    "package.json",
    "root-file.js",
    "node_modules/deep/deep-file.js",
    "src/src-file.js",
    "src/deep/deep-file.js",
    "src/deep/deeper/deeper-file.js",
    "tests/deep/deep-file.js",
]


@pytest.fixture
def find_fixture(tmp_path: Path) -> Path:
    """A small project tree with JavaScript files at several depths."""
    for rel in FIXTURE_FILES:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {rel}\n")
    return tmp_path
