"""TS-Nodify scaffolder -- generates Node.js + Express backend skeletons.

This package turns a validated ``ProjectConfig`` (language, module system,
packages, port, deployment helpers) into an ordered composition plan and
emits it to disk.  Every source file is selected by a single ``VariantKey``
so that import style, file extension and export convention agree across the
whole generated project.

Quick usage::

    from src.scaffolder import ProjectConfig, ProjectGenerator

    config = ProjectConfig(name="demo-app", port=4000)
    generator = ProjectGenerator(config)
    result = await generator.generate()
"""

from src.scaffolder.artifacts import ArtifactAction, ArtifactSpec, CompositionPlan, InstallStep
from src.scaffolder.catalog import ArtifactKind, TemplateParams
from src.scaffolder.deploy_gen import DeploymentGenerator
from src.scaffolder.emitter import ArtifactEmitter, ExternalToolFailure
from src.scaffolder.generator import GenerationResult, ProjectGenerator
from src.scaffolder.models import (
    ConfigurationError,
    DeploymentHelper,
    Language,
    ModuleSystem,
    PackageName,
    ProjectConfig,
)
from src.scaffolder.planner import CompositionPlanner, NameConflict, build_plan
from src.scaffolder.templates import TemplateRenderer
from src.scaffolder.variants import VariantKey, select_variant

__all__ = [
    # Configuration
    "ProjectConfig",
    "ConfigurationError",
    "Language",
    "ModuleSystem",
    "PackageName",
    "DeploymentHelper",
    # Variants & catalog
    "VariantKey",
    "select_variant",
    "ArtifactKind",
    "TemplateParams",
    "TemplateRenderer",
    # Planning
    "ArtifactAction",
    "ArtifactSpec",
    "InstallStep",
    "CompositionPlan",
    "CompositionPlanner",
    "NameConflict",
    "build_plan",
    "DeploymentGenerator",
    # Emission
    "ArtifactEmitter",
    "ExternalToolFailure",
    "ProjectGenerator",
    "GenerationResult",
]
