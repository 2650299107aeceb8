"""Main scaffolding orchestrator.

Takes a validated ``ProjectConfig``, plans the project and emits it into the
configured output directory: planning first, then emission, each finished
before the next begins.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

from src.config import Config

from .artifacts import CompositionPlan
from .emitter import ArtifactEmitter
from .models import ProjectConfig
from .planner import CompositionPlanner


@dataclass
class GenerationResult:
    """Outcome of a completed generation run."""

    project_root: Path
    plan: CompositionPlan
    written: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0


class ProjectGenerator:
    """Scaffolding orchestrator for one project.

    Raises ``NameConflict`` from :meth:`plan` / :meth:`generate` when the
    target directory exists and ``overwrite`` was not confirmed, before
    anything is written.
    """

    def __init__(self, config: ProjectConfig, settings: Config | None = None) -> None:
        self.config = config
        self.settings = settings or Config()
        self.planner = CompositionPlanner(
            self.settings.output_dir,
            package_manager=self.settings.package_manager,
        )

    @property
    def project_root(self) -> Path:
        return self.planner.target_for(self.config)

    def plan(self, *, overwrite: bool = False) -> CompositionPlan:
        return self.planner.plan(self.config, overwrite=overwrite)

    async def generate(self, *, overwrite: bool = False) -> GenerationResult:
        """Plan and emit the project.

        Args:
            overwrite: Reuse an existing target directory, as confirmed by
                the user.

        Returns:
            A :class:`GenerationResult` describing the emitted tree.
        """
        started = time.monotonic()
        plan = self.plan(overwrite=overwrite)
        emitter = ArtifactEmitter(self.project_root, self.config, self.settings)
        written = await emitter.emit(plan)
        return GenerationResult(
            project_root=self.project_root,
            plan=plan,
            written=written,
            duration_seconds=time.monotonic() - started,
        )
