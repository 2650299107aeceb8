"""Shared pytest fixtures for the TS-Nodify test suite.

Provides reusable fixtures for:
- Temporary output directories
- Project configurations for each supported language
- Tool settings with package installs disabled
- A fake ``run_command`` that records package-manager invocations
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from src.config import Config
from src.scaffolder.catalog import SOURCE_KINDS, TemplateParams, render_source
from src.scaffolder.models import DeploymentHelper, Language, ModuleSystem, ProjectConfig
from src.scaffolder.variants import VariantKey


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory generated projects are written into."""
    directory = tmp_path / "projects"
    directory.mkdir()
    yield directory


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------

@pytest.fixture
def demo_config() -> ProjectConfig:
    """TypeScript + ESM project with a Dockerfile (the reference scenario)."""
    return ProjectConfig(
        name="demo-app",
        language=Language.TYPESCRIPT,
        module_system=ModuleSystem.ESM,
        packages={"express", "dotenv"},
        port=4000,
        deployment_helpers={DeploymentHelper.DOCKERFILE},
    )


@pytest.fixture
def js_config(demo_config: ProjectConfig) -> ProjectConfig:
    """Same as ``demo_config`` but JavaScript."""
    return ProjectConfig(**{**demo_config.model_dump(), "language": Language.JAVASCRIPT})


@pytest.fixture
def full_config() -> ProjectConfig:
    """TypeScript project with every deployment helper selected."""
    return ProjectConfig(
        name="Full-App",
        port=8080,
        deployment_helpers=set(DeploymentHelper),
    )


@pytest.fixture
def offline_settings(output_dir: Path) -> Config:
    """Tool settings that never invoke the package manager."""
    return Config(output_dir=output_dir, skip_install=True)


@pytest.fixture
def online_settings(output_dir: Path) -> Config:
    """Tool settings that do invoke the (mocked) package manager."""
    return Config(output_dir=output_dir, skip_install=False, install_timeout=30)


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_run_command():
    """Patch the emitter's ``run_command`` with a successful AsyncMock."""
    with patch(
        "src.scaffolder.emitter.run_command",
        new=AsyncMock(return_value=(0, "", "")),
    ) as mocked:
        yield mocked


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

_RELATIVE_IMPORT = re.compile(
    r"""(?:from\s+|require\()\s*['"](?P<spec>\.{1,2}/[^'"]+)['"]"""
)


@pytest.fixture
def relative_imports():
    """Return a function listing every relative import/require specifier."""
    def _extract(source: str) -> list[str]:
        return [m.group("spec") for m in _RELATIVE_IMPORT.finditer(source)]
    return _extract


@pytest.fixture
def render_all_sources():
    """Return a function rendering every source kind for a variant."""
    def _render(variant: VariantKey, **overrides: Any) -> dict[str, str]:
        params = TemplateParams.for_variant(
            variant,
            project_name=overrides.get("project_name", "demo-app"),
            port=overrides.get("port", 3000),
            api_version=overrides.get("api_version", "v1"),
        )
        return {kind.value: render_source(kind, params) for kind in SOURCE_KINDS}
    return _render
