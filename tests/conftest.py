"""Shared test fixtures for nstack tests."""
import io
from pathlib import Path

import pytest
from rich.console import Console

from nstack.core.config import reset_settings
from nstack.core.package_manager import PackageManager
from nstack.core.project_structure import ProjectStructure
from nstack.core.runner import CommandRunner
from nstack.features import FeatureContext


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from NSTACK_* variables in the developer's shell."""
    for var in ("NSTACK_MOCK", "NSTACK_LOG_FILE", "NSTACK_PROBE_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def src_project(tmp_path):
    """Project root containing only a src/ directory."""
    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture
def app_project(tmp_path):
    """Project root using the top-level app/ layout."""
    (tmp_path / "app").mkdir()
    return tmp_path


@pytest.fixture
def output():
    """In-memory buffer backing a Rich console."""
    return io.StringIO()


@pytest.fixture
def make_context(output):
    """Build a FeatureContext with a mock runner for a given root."""
    def _make(root: Path, pm: PackageManager = PackageManager.PNPM, runner=None):
        return FeatureContext(
            root=root,
            console=Console(file=output, width=200),
            runner=runner or CommandRunner(mock=True),
            package_manager=pm,
            structure=ProjectStructure.detect(root),
        )
    return _make
