"""Shared pytest fixtures for the buildinit test suite.

Provides reusable fixtures for:
- Temporary build directories
- Resolved ``InitSettings`` for single-module and modularized runs
- The bundled version table, template renderer and descriptor registry
- A mocked template renderer for merge-rule tests
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from buildinit.config import InitSettings
from buildinit.models import BuildInitDsl, TestFramework
from buildinit.scaffolder.registry import ProjectLayoutSetupRegistry, build_default_registry
from buildinit.scaffolder.templates import TemplateRenderer
from buildinit.versions import LibraryVersionProvider


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Empty directory a build is generated into (auto-cleanup)."""
    target = tmp_path / "demo"
    target.mkdir()
    yield target


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def make_settings(target_dir: Path) -> Callable[..., InitSettings]:
    """Factory for ``InitSettings`` with single-module Java defaults."""

    def _make(**overrides: Any) -> InitSettings:
        values: dict[str, Any] = {
            "project_name": "demo",
            "subprojects": ("demo",),
            "modularized": False,
            "dsl": BuildInitDsl.GROOVY,
            "package_name": "demo",
            "test_framework": TestFramework.JUNIT,
            "target": target_dir,
        }
        values.update(overrides)
        return InitSettings(**values)

    return _make


@pytest.fixture
def single_settings(make_settings) -> InitSettings:
    return make_settings()


@pytest.fixture
def modular_settings(make_settings) -> InitSettings:
    """Modularized java-application settings with the full app/list/utilities topology."""
    return make_settings(
        subprojects=("app", "list", "utilities"),
        modularized=True,
        test_framework=TestFramework.JUNIT_JUPITER,
    )


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def versions() -> LibraryVersionProvider:
    return LibraryVersionProvider()


@pytest.fixture(scope="session")
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture(scope="session")
def registry(versions: LibraryVersionProvider, renderer: TemplateRenderer) -> ProjectLayoutSetupRegistry:
    return build_default_registry(versions=versions, renderer=renderer)


@pytest.fixture
def mock_renderer() -> MagicMock:
    """TemplateRenderer stand-in whose ``render`` echoes the template key."""
    mock = MagicMock(spec=TemplateRenderer)
    mock.render.side_effect = lambda template, bindings: f"// {template}\n"
    return mock
