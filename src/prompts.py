"""Interactive wizard that collects a ``ProjectConfig``.

Every question validates its answer with the same field validators the
``ProjectConfig`` model uses; an invalid answer is reported inline and the
question is asked again.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Callable, TypeVar

from rich.prompt import Prompt
from rich.table import Table

from src.scaffolder.models import (
    DEFAULT_DEPLOYMENT_HELPERS,
    DEFAULT_PACKAGES,
    DEFAULT_PORT,
    DEFAULT_PROJECT_NAME,
    ConfigurationError,
    DeploymentHelper,
    Language,
    ModuleSystem,
    PackageName,
    ProjectConfig,
    parse_deployment_helper,
    parse_package,
    validate_port,
    validate_project_name,
)
from src.utils import console, print_error

T = TypeVar("T")

HELPER_LABELS: dict[DeploymentHelper, str] = {
    DeploymentHelper.DOCKERFILE: "Dockerfile",
    DeploymentHelper.COMPOSE: "docker-compose.yml",
    DeploymentHelper.JENKINS: "Jenkinsfile",
    DeploymentHelper.GITHUB_ACTIONS: "GitHub Actions CI/CD (ci.yml)",
}

_SPLIT = re.compile(r"[,\s]+")


class ConflictResolution(str, Enum):
    """What to do when the project folder already exists."""
    OVERWRITE = "overwrite"
    RENAME = "rename"
    ABORT = "abort"


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


def ask_validated(question: str, default: str, parse: Callable[[str], T]) -> T:
    """Ask *question* until *parse* accepts the answer."""
    while True:
        answer = Prompt.ask(question, default=default, console=console)
        try:
            return parse(answer)
        except ConfigurationError as exc:
            print_error(str(exc))


def _parse_selection(answer: str, options: list[T], parse_one: Callable[[str], T]) -> frozenset[T]:
    """Parse a comma separated list of option numbers (1-based) or names."""
    tokens = [token for token in _SPLIT.split(answer.strip()) if token]
    if len(tokens) == 1 and tokens[0].lower() == "none":
        return frozenset()
    selected: set[T] = set()
    for token in tokens:
        if token.isdigit():
            index = int(token)
            if not 1 <= index <= len(options):
                raise ConfigurationError(f"No option numbered {index}")
            selected.add(options[index - 1])
        else:
            selected.add(parse_one(token))
    return frozenset(selected)


def _show_options(title: str, rows: list[tuple[str, str]]) -> None:
    table = Table(title=title, show_header=False, box=None)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Option")
    for number, label in rows:
        table.add_row(number, label)
    console.print(table)


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


def ask_project_name(default: str = DEFAULT_PROJECT_NAME) -> str:
    return ask_validated("Enter your project name", default, validate_project_name)


def ask_language() -> Language:
    answer = Prompt.ask(
        "Choose your language",
        choices=[language.value for language in Language],
        default=Language.TYPESCRIPT.value,
        console=console,
    )
    return Language(answer)


def ask_module_system() -> ModuleSystem:
    """Only ES Modules can be chosen; CommonJS is listed as disabled."""
    _show_options(
        "Module system",
        [
            ("1", "ES Modules (import/export)"),
            ("-", "[dim]CommonJS (require/module.exports) -- Will be supported in future releases[/dim]"),
        ],
    )
    answer = Prompt.ask(
        "Choose module system",
        choices=[ModuleSystem.ESM.value],
        default=ModuleSystem.ESM.value,
        console=console,
    )
    return ModuleSystem(answer)


def ask_packages() -> frozenset[PackageName]:
    options = list(PackageName)
    _show_options(
        "Packages (required ones are suggested)",
        [(str(i), pkg.value) for i, pkg in enumerate(options, start=1)],
    )
    default = ",".join(pkg.value for pkg in options if pkg in DEFAULT_PACKAGES)
    return ask_validated(
        "Select packages to install (numbers or names, comma separated, or 'none')",
        default,
        lambda answer: _parse_selection(answer, options, parse_package),
    )


def ask_port(default: int = DEFAULT_PORT) -> int:
    return ask_validated("Enter the port number for your server", str(default), validate_port)


def ask_deployment_helpers() -> frozenset[DeploymentHelper]:
    options = list(DeploymentHelper)
    _show_options(
        "Deployment helpers",
        [(str(i), HELPER_LABELS[helper]) for i, helper in enumerate(options, start=1)],
    )
    default = ",".join(h.value for h in options if h in DEFAULT_DEPLOYMENT_HELPERS)
    return ask_validated(
        "Select deployment helpers to generate (numbers or names, comma separated, or 'none')",
        default,
        lambda answer: _parse_selection(answer, options, parse_deployment_helper),
    )


def collect_project_config() -> ProjectConfig:
    """Run the full questionnaire and return the validated configuration."""
    return ProjectConfig(
        name=ask_project_name(),
        language=ask_language(),
        module_system=ask_module_system(),
        packages=ask_packages(),
        port=ask_port(),
        deployment_helpers=ask_deployment_helpers(),
    )


# ---------------------------------------------------------------------------
# Name conflicts
# ---------------------------------------------------------------------------


def ask_conflict_resolution(path: Path, *, allow_overwrite: bool = True) -> ConflictResolution:
    """Ask how to resolve an existing target; a file can only be renamed around."""
    choices = [
        resolution.value
        for resolution in ConflictResolution
        if allow_overwrite or resolution is not ConflictResolution.OVERWRITE
    ]
    answer = Prompt.ask(
        f"'{path.name}' already exists. What would you like to do?",
        choices=choices,
        default=ConflictResolution.ABORT.value,
        console=console,
    )
    return ConflictResolution(answer)


def ask_new_name(current: str) -> str:
    return ask_validated("Enter a new project name", f"{current}-new", validate_project_name)
