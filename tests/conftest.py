"""Shared test fixtures for confgen."""

import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def workspace(tmp_path):
    """Fresh copy of the fixture main/ and contrib/ directories."""
    shutil.copytree(FIXTURES / "main", tmp_path / "main")
    shutil.copytree(FIXTURES / "contrib", tmp_path / "contrib")
    return tmp_path


@pytest.fixture
def prepared(workspace):
    """Workspace whose contrib dir already holds fresh template copies."""
    for name in ("xmonad.cabal", "Config.hs"):
        shutil.copyfile(workspace / "main" / name, workspace / "contrib" / name)
    return workspace
