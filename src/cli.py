"""TS-Nodify command line interface.

Usage::

    ts-nodify                 # interactive project creation
    ts-nodify --help          # navigable help menu
    ts-nodify --version       # version, author and description
    python -m src.cli -o ./projects --skip-install
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Sequence

from rich.panel import Panel
from rich.prompt import Prompt

from src.config import Config
from src.descriptor import get_descriptor
from src.prompts import (
    ConflictResolution,
    ask_conflict_resolution,
    ask_new_name,
    collect_project_config,
)
from src.scaffolder import (
    ExternalToolFailure,
    NameConflict,
    ProjectConfig,
    ProjectGenerator,
)
from src.utils import (
    console,
    format_duration,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ts-nodify",
        description="Scaffold Node.js + Express projects with TypeScript/JavaScript",
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show the help menu")
    parser.add_argument("-v", "--version", action="store_true", help="Show CLI version")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory the project folder is created in (default: current directory)",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Write the project files without running the package manager",
    )
    return parser


# ---------------------------------------------------------------------------
# Help & version
# ---------------------------------------------------------------------------

HELP_SECTIONS = ("overview", "commands", "options", "examples", "exit")


def _help_text(section: str) -> str:
    descriptor = get_descriptor()
    if section == "overview":
        return (
            f"[bold]{descriptor.name}[/bold] - {descriptor.description}\n"
            f"Author: [green]{descriptor.author}[/green]\n"
            f"Version: [yellow]{descriptor.version}[/yellow]\n"
            "Purpose: Quickly scaffold Node.js + Express projects with TypeScript/JavaScript."
        )
    if section == "commands":
        return (
            "[bold]Available commands:[/bold]\n"
            "  [cyan]--help, -h[/cyan]          Show this help menu\n"
            "  [cyan]--version, -v[/cyan]       Show CLI version\n"
            "  [cyan]--output, -o DIR[/cyan]    Create the project inside DIR\n"
            "  [cyan]--skip-install[/cyan]      Do not run the package manager"
        )
    if section == "options":
        return (
            "[bold]Options for project creation:[/bold]\n"
            "  Language: TypeScript or JavaScript\n"
            "  Module system: ES Modules (import/export)\n"
            "  Packages: express, dotenv, cors, mongoose, winston, etc.\n"
            "  Deployment helpers: Dockerfile, docker-compose, Jenkinsfile, GitHub Actions CI"
        )
    return (
        "[bold]Example usage:[/bold]\n"
        "  [cyan]ts-nodify[/cyan]              Start interactive project creation\n"
        "  [cyan]ts-nodify --version[/cyan]    Show CLI version\n"
        "  [cyan]ts-nodify --help[/cyan]       Show this interactive help"
    )


def show_help_menu() -> None:
    """Loop over help sections until the user picks ``exit``."""
    print_header(f"{get_descriptor().name} help")
    while True:
        section = Prompt.ask(
            "Select a help section",
            choices=list(HELP_SECTIONS),
            default="overview",
            console=console,
        )
        if section == "exit":
            return
        console.print(Panel(_help_text(section), title=section.title(), border_style="cyan"))


def show_version() -> None:
    descriptor = get_descriptor()
    console.print(
        Panel(
            f"[bright_green]Version     : v{descriptor.version}[/bright_green]\n"
            f"[bright_magenta]Author      : {descriptor.author}[/bright_magenta]\n"
            f"[bright_yellow]Description : {descriptor.description}[/bright_yellow]",
            title=f"[bold red]{descriptor.name}[/bold red]",
            border_style="bright_cyan",
        )
    )


# ---------------------------------------------------------------------------
# Interactive run
# ---------------------------------------------------------------------------


def resolve_target(
    config: ProjectConfig, settings: Config
) -> tuple[ProjectConfig, bool] | None:
    """Settle name conflicts before planning.

    Returns:
        ``(config, overwrite)`` to proceed with, or ``None`` if the user
        aborted.  A rename returns a new config and is re-checked.
    """
    while True:
        generator = ProjectGenerator(config, settings)
        try:
            generator.planner.check_target(config)
        except NameConflict as conflict:
            choice = ask_conflict_resolution(
                conflict.path, allow_overwrite=conflict.can_overwrite
            )
            if choice is ConflictResolution.ABORT:
                return None
            if choice is ConflictResolution.OVERWRITE:
                return config, True
            config = config.renamed(ask_new_name(config.name))
            continue
        return config, False


def print_next_steps(config: ProjectConfig, duration: float) -> None:
    print_success("🚀 Project Setup Complete!")
    console.print(
        f"[green]✅ Project '[cyan]{config.name}[/cyan]' scaffolded successfully "
        f"in {format_duration(duration)}![/green]"
    )
    console.print("\n[bold magenta]👉 Next steps:[/bold magenta]")
    console.print(f"  1. Navigate to your project: [cyan]cd {config.name}[/cyan]")
    console.print("  2. Start development server: [cyan]npm run dev[/cyan]")
    console.print(
        f"  3. Check health endpoint: "
        f"[cyan]http://localhost:{config.port}/api/{config.api_version}/health[/cyan]"
    )
    console.print(f"  4. Open Swagger docs: [cyan]http://localhost:{config.port}/docs[/cyan]")
    console.print("\n[bold green]💡 Tip: Use --help for more commands and options![/bold green]")


def run_wizard(settings: Config) -> int:
    """Collect answers, resolve conflicts, generate.  Returns the exit status."""
    print_header(get_descriptor().name)
    console.print("🚀 Starting Node.js project setup...")

    config = collect_project_config()
    resolved = resolve_target(config, settings)
    if resolved is None:
        print_warning("Setup cancelled.")
        return 1
    config, overwrite = resolved

    print_summary_table(
        {
            "Project": config.name,
            "Language": config.language.value,
            "Module system": config.module_system.value,
            "Packages": ", ".join(pkg.value for pkg in config.ordered_packages) or "-",
            "Port": str(config.port),
            "Deployment helpers": ", ".join(sorted(h.value for h in config.deployment_helpers)) or "-",
        },
        title="Project configuration",
    )

    generator = ProjectGenerator(config, settings)
    try:
        result = asyncio.run(generator.generate(overwrite=overwrite))
    except ExternalToolFailure as exc:
        print_error(f"Error: {exc}")
        print_error("Project setup aborted.")
        return 1

    print_next_steps(config, result.duration_seconds)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``ts-nodify`` and ``python -m src.cli``."""
    args = build_parser().parse_args(argv)

    if args.help:
        show_help_menu()
        return 0
    if args.version:
        show_version()
        return 0

    settings = Config.from_env()
    updates: dict[str, object] = {}
    if args.output:
        updates["output_dir"] = Path(args.output)
    if args.skip_install:
        updates["skip_install"] = True
    if updates:
        settings = settings.model_copy(update=updates)

    try:
        return run_wizard(settings)
    except KeyboardInterrupt:
        print_warning("\nSetup cancelled.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
