"""Deployment helper artifacts: Dockerfile, Compose, Jenkins and CI.

Each helper maps to one Jinja2 template (``deploy/*.j2``).  Build stages in
the Dockerfile, Jenkinsfile and CI workflow are only emitted for TypeScript
variants.
"""

from __future__ import annotations

from functools import partial

from .artifacts import ArtifactAction, ArtifactSpec
from .catalog import ArtifactKind, TemplateParams, render_deployment
from .models import DeploymentHelper, ProjectConfig
from .variants import VariantKey


def _render(kind: ArtifactKind, variant: VariantKey, config: ProjectConfig) -> str:
    return render_deployment(kind, TemplateParams.from_config(config, variant))


class DeploymentGenerator:
    """Plans deployment descriptors for the selected helpers."""

    # Helper -> (artifact kind, output path), in emission order.
    _HELPER_FILES: dict[DeploymentHelper, tuple[ArtifactKind, str]] = {
        DeploymentHelper.DOCKERFILE: (ArtifactKind.DOCKERFILE, "Dockerfile"),
        DeploymentHelper.COMPOSE: (ArtifactKind.COMPOSE, "docker-compose.yml"),
        DeploymentHelper.JENKINS: (ArtifactKind.JENKINS, "Jenkinsfile"),
        DeploymentHelper.GITHUB_ACTIONS: (
            ArtifactKind.GITHUB_ACTIONS,
            ".github/workflows/ci.yml",
        ),
    }

    def __init__(self, variant: VariantKey) -> None:
        self.variant = variant

    def plan(self, helpers: frozenset[DeploymentHelper]) -> list[ArtifactSpec]:
        """Return the deployment artifacts for *helpers*.

        Args:
            helpers: Selected deployment helpers. Unselected helpers produce
                nothing.

        Returns:
            Artifacts in fixed helper order, each preceded by the directory
            it lives in when that directory is not the project root.
        """
        artifacts: list[ArtifactSpec] = []
        for helper, (kind, relative_path) in self._HELPER_FILES.items():
            if helper not in helpers:
                continue
            parent, _, _ = relative_path.rpartition("/")
            if parent:
                artifacts.append(
                    ArtifactSpec(
                        relative_path=parent,
                        kind=ArtifactKind.DIRECTORY,
                        action=ArtifactAction.CREATE_DIRECTORY,
                        variant=self.variant,
                    )
                )
            artifacts.append(
                ArtifactSpec(
                    relative_path=relative_path,
                    kind=kind,
                    action=ArtifactAction.WRITE_FILE,
                    variant=self.variant,
                    renderer=partial(_render, kind, self.variant),
                )
            )
        return artifacts

    @classmethod
    def output_path(cls, helper: DeploymentHelper) -> str:
        """Project-relative path written for *helper*."""
        return cls._HELPER_FILES[helper][1]
