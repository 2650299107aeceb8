"""Emission driver: materialises a composition plan on disk.

The emitter walks the plan strictly in order.  It never decides content:
files are whatever the artifact renderers return, and install steps are run
verbatim.  A failing install step stops the run before anything after it is
written.
"""

from __future__ import annotations

import json
from pathlib import Path

from src.config import Config
from src.utils import atomic_write_text, console, load_json, print_warning, run_command

from .artifacts import ArtifactAction, ArtifactSpec, CompositionPlan, InstallStep, deep_merge
from .catalog import dump_json
from .models import ProjectConfig


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ExternalToolFailure(Exception):
    """Raised when a package-manager invocation fails."""

    def __init__(self, step: InstallStep, returncode: int, stderr: str = "") -> None:
        self.step = step
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr}" if stderr else ""
        super().__init__(
            f"{step.description} failed (exit {returncode}) running '{step.command}'{detail}"
        )


# ---------------------------------------------------------------------------
# Emitter
# ---------------------------------------------------------------------------


class ArtifactEmitter:
    """Writes the artifacts of a plan under *project_root*.

    Attributes:
        project_root: Directory of the generated project.
        config: The project configuration, handed opaquely to renderers.
        settings: Tool settings (package manager timeout, skip-install).
        written: Relative paths emitted so far, in order.
    """

    def __init__(
        self,
        project_root: str | Path,
        config: ProjectConfig,
        settings: Config | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.config = config
        self.settings = settings or Config()
        self.written: list[str] = []

    async def emit(self, plan: CompositionPlan) -> list[str]:
        """Emit every step of *plan* in order.

        Returns:
            Relative paths of the emitted artifacts.

        Raises:
            ExternalToolFailure: If an install step exits non-zero.
        """
        self.project_root.mkdir(parents=True, exist_ok=True)
        for step in plan:
            if isinstance(step, InstallStep):
                await self._install(step)
            else:
                self._write(step)
        return list(self.written)

    # -- Steps -------------------------------------------------------------

    async def _install(self, step: InstallStep) -> None:
        if self.settings.skip_install:
            print_warning(f"Skipping: {step.command}")
            return

        console.print(f"[cyan]{step.description}:[/cyan] {step.command}")
        returncode, _stdout, stderr = await run_command(
            list(step.argv),
            cwd=self.project_root,
            timeout=self.settings.install_timeout,
            capture=False,
        )
        if returncode != 0:
            raise ExternalToolFailure(step, returncode, stderr)

    def _write(self, artifact: ArtifactSpec) -> None:
        target = self.project_root / artifact.relative_path

        if artifact.action is ArtifactAction.CREATE_DIRECTORY:
            target.mkdir(parents=True, exist_ok=True)
        elif artifact.action is ArtifactAction.MERGE_JSON:
            patch = json.loads(artifact.render(self.config))
            current = load_json(target) if target.exists() else {}
            atomic_write_text(target, dump_json(deep_merge(current, patch)))
        else:
            atomic_write_text(target, artifact.render(self.config))

        self.written.append(artifact.relative_path)
        console.print(f"  [green]+[/green] {artifact.relative_path}", highlight=False)
