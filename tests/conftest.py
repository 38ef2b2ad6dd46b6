from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.entity_builder import EntityFileBuilder, FakePhpLint


@pytest.fixture
def entity_files(tmp_path: Path) -> EntityFileBuilder:
    """Provide a reusable PHP file builder rooted at the pytest tmp_path."""
    return EntityFileBuilder(tmp_path)


@pytest.fixture
def php_lint() -> FakePhpLint:
    """A syntax checker that accepts every file."""
    return FakePhpLint()
