"""Plan building blocks: artifacts, install steps and the composition plan."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Mapping, Union

from .catalog import ArtifactKind
from .models import ProjectConfig
from .variants import VariantKey


class ArtifactAction(str, Enum):
    """How the emitter materialises an artifact."""
    CREATE_DIRECTORY = "create_directory"
    WRITE_FILE = "write_file"
    MERGE_JSON = "merge_json"


Renderer = Callable[[ProjectConfig], str]


def _no_content(_config: ProjectConfig) -> str:
    return ""


@dataclass(frozen=True)
class ArtifactSpec:
    """One generated file or directory marker.

    Attributes:
        relative_path: POSIX path relative to the project root.
        kind: Artifact kind, used for reporting and lookups.
        action: Directory creation, full write, or JSON merge into an existing file.
        variant: Variant key the content was selected for.
        renderer: Pure function producing the file content.  For
            ``MERGE_JSON`` artifacts the content is a JSON object patch.
    """

    relative_path: str
    kind: ArtifactKind
    action: ArtifactAction
    variant: VariantKey
    renderer: Renderer = _no_content

    @property
    def is_directory(self) -> bool:
        return self.action is ArtifactAction.CREATE_DIRECTORY

    def render(self, config: ProjectConfig) -> str:
        return self.renderer(config)


@dataclass(frozen=True)
class InstallStep:
    """A package-manager invocation executed during emission."""

    description: str
    argv: tuple[str, ...]

    @property
    def command(self) -> str:
        return " ".join(self.argv)


PlanStep = Union[ArtifactSpec, InstallStep]


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Return *base* with *patch* merged in; nested objects merge key by key."""
    merged = copy.deepcopy(dict(base))
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass(frozen=True)
class CompositionPlan:
    """Ordered steps of a single scaffolding run."""

    project_name: str
    variant: VariantKey
    steps: tuple[PlanStep, ...]

    def __iter__(self) -> Iterator[PlanStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def artifacts(self) -> tuple[ArtifactSpec, ...]:
        return tuple(step for step in self.steps if isinstance(step, ArtifactSpec))

    @property
    def install_steps(self) -> tuple[InstallStep, ...]:
        return tuple(step for step in self.steps if isinstance(step, InstallStep))

    def paths(self) -> list[str]:
        """Relative paths of all artifacts in plan order."""
        return [artifact.relative_path for artifact in self.artifacts]

    def find(self, relative_path: str) -> list[ArtifactSpec]:
        """All artifacts targeting *relative_path* (a file may be written then amended)."""
        return [a for a in self.artifacts if a.relative_path == relative_path]

    def of_kind(self, *kinds: ArtifactKind) -> list[ArtifactSpec]:
        return [a for a in self.artifacts if a.kind in kinds]

    def render_all(self, config: ProjectConfig) -> dict[str, str]:
        """Render every file artifact, keyed by ``path`` (``path#n`` for amendments)."""
        rendered: dict[str, str] = {}
        for artifact in self.artifacts:
            if artifact.is_directory:
                continue
            key = artifact.relative_path
            n = 1
            while key in rendered:
                key = f"{artifact.relative_path}#{n}"
                n += 1
            rendered[key] = artifact.render(config)
        return rendered

    def manifest(self, config: ProjectConfig) -> dict[str, Any]:
        """Final ``package.json`` as planned: initial manifest plus amendments.

        Dependencies added by the package manager are not part of the plan.
        """
        result: dict[str, Any] = {}
        for artifact in self.find("package.json"):
            data = json.loads(artifact.render(config))
            if artifact.action is ArtifactAction.WRITE_FILE:
                result = data
            else:
                result = deep_merge(result, data)
        return result
