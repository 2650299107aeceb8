"""Composition planner: the ordered list of steps for one scaffolding run.

``build_plan`` is a pure function of :class:`ProjectConfig`.  The
:class:`CompositionPlanner` wrapper adds the one filesystem check that must
happen before planning: the target directory must not exist unless the
caller confirmed an overwrite.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path

from .artifacts import ArtifactAction, ArtifactSpec, CompositionPlan, InstallStep, PlanStep
from .catalog import (
    FOLDERS,
    SOURCE_KINDS,
    SOURCE_ROOT,
    ArtifactKind,
    TemplateParams,
    dev_packages,
    dump_json,
    initial_manifest,
    manifest_amendment,
    render_env_file,
    render_source,
    runtime_packages,
    source_path,
    tsconfig,
)
from .deploy_gen import DeploymentGenerator
from .models import ProjectConfig
from .variants import VariantKey, select_variant


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class NameConflict(Exception):
    """Raised when the target project path already exists.

    The caller must resolve it (overwrite, rename or abort) before a plan is
    computed.  Only an existing directory can be overwritten;
    ``can_overwrite`` is ``False`` when the path is a file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.can_overwrite = self.path.is_dir()
        kind = "Folder" if self.can_overwrite else "File"
        super().__init__(f"{kind} '{self.path.name}' already exists at {self.path}")


# ---------------------------------------------------------------------------
# Renderers bound into artifacts
# ---------------------------------------------------------------------------


def _render_source(kind: ArtifactKind, variant: VariantKey, config: ProjectConfig) -> str:
    return render_source(kind, TemplateParams.from_config(config, variant))


def _render_manifest(config: ProjectConfig) -> str:
    return dump_json(initial_manifest(config.name))


def _render_amendment(variant: VariantKey, _config: ProjectConfig) -> str:
    return dump_json(manifest_amendment(variant))


def _render_tsconfig(variant: VariantKey, _config: ProjectConfig) -> str:
    return dump_json(tsconfig(variant))


def _render_env(variant: VariantKey, config: ProjectConfig) -> str:
    return render_env_file(TemplateParams.from_config(config, variant))


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def install_steps(config: ProjectConfig, variant: VariantKey, package_manager: str = "npm") -> list[InstallStep]:
    """Package-manager invocations for *config*: runtime then dev dependencies."""
    runtime = runtime_packages(config)
    dev = dev_packages(variant, runtime)
    return [
        InstallStep(
            description="Install dependencies",
            argv=(package_manager, "install", *runtime),
        ),
        InstallStep(
            description="Install development dependencies",
            argv=(package_manager, "install", "--save-dev", *dev),
        ),
    ]


def build_plan(config: ProjectConfig, *, package_manager: str = "npm") -> CompositionPlan:
    """Compute the ordered composition plan for *config*.

    Order: initial manifest, install steps, ``tsconfig.json`` (TypeScript
    only), source folders, ``.env``, manifest amendment, sources, then the
    selected deployment helpers.
    """
    variant = select_variant(config.language, config.module_system)
    steps: list[PlanStep] = []

    def file(path: str, kind: ArtifactKind, renderer, action=ArtifactAction.WRITE_FILE) -> None:
        steps.append(
            ArtifactSpec(
                relative_path=path,
                kind=kind,
                action=action,
                variant=variant,
                renderer=renderer,
            )
        )

    # 1. Manifest, created once; everything else only amends it.
    file("package.json", ArtifactKind.MANIFEST, _render_manifest)

    # 2. Dependencies
    steps.extend(install_steps(config, variant, package_manager))

    # 3. Compiler config
    if variant.is_typescript:
        file("tsconfig.json", ArtifactKind.TSCONFIG, partial(_render_tsconfig, variant))

    # 4. Folder markers
    for folder in FOLDERS:
        steps.append(
            ArtifactSpec(
                relative_path=f"{SOURCE_ROOT}/{folder}",
                kind=ArtifactKind.DIRECTORY,
                action=ArtifactAction.CREATE_DIRECTORY,
                variant=variant,
            )
        )

    # 5. Environment
    file(".env", ArtifactKind.ENV_FILE, partial(_render_env, variant))

    # 6. Launch scripts and module type
    file(
        "package.json",
        ArtifactKind.MANIFEST_AMENDMENT,
        partial(_render_amendment, variant),
        action=ArtifactAction.MERGE_JSON,
    )

    # 7. Sources
    for kind in SOURCE_KINDS:
        file(source_path(kind, variant), kind, partial(_render_source, kind, variant))

    # 8. Deployment helpers
    steps.extend(DeploymentGenerator(variant).plan(config.deployment_helpers))

    return CompositionPlan(project_name=config.name, variant=variant, steps=tuple(steps))


class CompositionPlanner:
    """Plans a project under *output_dir* after checking for name conflicts."""

    def __init__(self, output_dir: str | Path, *, package_manager: str = "npm") -> None:
        self.output_dir = Path(output_dir)
        self.package_manager = package_manager

    def target_for(self, config: ProjectConfig) -> Path:
        """Directory the project described by *config* is generated into."""
        return self.output_dir / config.name

    def check_target(self, config: ProjectConfig, *, overwrite: bool = False) -> Path:
        """Return the target directory, raising ``NameConflict`` if it exists.

        With *overwrite* an existing directory is accepted; any other
        existing path still conflicts.
        """
        target = self.target_for(config)
        if target.exists() and not (overwrite and target.is_dir()):
            raise NameConflict(target)
        return target

    def plan(self, config: ProjectConfig, *, overwrite: bool = False) -> CompositionPlan:
        """Plan *config*; pass ``overwrite=True`` once the user confirmed reuse."""
        self.check_target(config, overwrite=overwrite)
        return build_plan(config, package_manager=self.package_manager)
