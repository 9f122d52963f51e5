import logging
from pathlib import Path
from typing import Dict, Optional

import click
from rich.console import Console

from skill_bridge.adapters import create_adapter_registry
from skill_bridge.agents.registry import AgentId
from skill_bridge.config import load_sync_sources
from skill_bridge.constants import PROJECT_CONFIG_FILENAME
from skill_bridge.errors import SkillBridgeError
from skill_bridge.logging_config import setup_logging
from skill_bridge.models import InstallOptions, Scope
from skill_bridge.planner import InstallationPlanner, run_install
from skill_bridge.skills.discovery import discover_skills
from skill_bridge.sources.fetcher import RepositoryFetcher
from skill_bridge.sources.resolver import parse_source
from skill_bridge.tui import SkillBridgeConsoleUI


AGENT_VALUES = [agent.value for agent in AgentId]


def _agent_option():
    return click.option(
        "-a",
        "--agent",
        "agents",
        multiple=True,
        type=click.Choice(AGENT_VALUES, case_sensitive=False),
        help="Target agent (repeatable). Defaults to detected agents.",
    )


def _global_option():
    return click.option(
        "-g",
        "--global",
        "global_scope",
        is_flag=True,
        default=False,
        help="Install into the agents' home directories.",
    )


def _project_option():
    return click.option(
        "-p",
        "--project",
        "project_dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Project directory (defaults to the current directory).",
    )


def _project_path(project_dir: Optional[Path]) -> Path:
    return (project_dir or Path.cwd()).resolve()


def _explicit_or_all_agents(planner: InstallationPlanner, agents: tuple[str, ...]):
    if agents:
        return planner.select_agents([agent.lower() for agent in agents])
    return list(planner.adapters.values())


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Install skills from Git repositories into AI coding agents."""
    setup_logging(logging.DEBUG if verbose else None)
    ctx.obj = {}


@cli.command(help="List the skills found in a repository.")
@click.argument("source")
@click.pass_obj
def discover(obj: Dict[str, str], source: str) -> None:
    ui = SkillBridgeConsoleUI(Console())
    try:
        parsed = parse_source(source)
        with RepositoryFetcher().cloned(parsed) as repo:
            skills = discover_skills(repo.path, parsed.subpath)
            ui.render_source(parsed, skills)
            ui.render_skills(skills, root=repo.path)
    except SkillBridgeError as exc:
        raise click.ClickException(f"Fatal: {exc}")


@cli.command(help="Install skills from a repository.")
@click.argument("source")
@click.option(
    "-s",
    "--skill",
    "skills",
    multiple=True,
    help="Skill to install (repeatable). Defaults to every discovered skill.",
)
@_agent_option()
@_global_option()
@_project_option()
@click.pass_obj
def install(
    obj: Dict[str, str],
    source: str,
    skills: tuple[str, ...],
    agents: tuple[str, ...],
    global_scope: bool,
    project_dir: Optional[Path],
) -> None:
    ui = SkillBridgeConsoleUI(Console())
    options = InstallOptions(
        source=source,
        global_scope=global_scope,
        selected_skill_ids=list(skills) or None,
        selected_agent_ids=[agent.lower() for agent in agents] or None,
        project_path=_project_path(project_dir),
    )
    try:
        report = run_install(options)
    except SkillBridgeError as exc:
        raise click.ClickException(f"Fatal: {exc}")

    ui.render_install_report(report)
    if not report.success:
        raise click.exceptions.Exit(1)


@cli.command(help="List supported agents and whether they are detected.")
@_project_option()
@click.pass_obj
def agents(obj: Dict[str, str], project_dir: Optional[Path]) -> None:
    ui = SkillBridgeConsoleUI(Console())
    registry = create_adapter_registry()
    ui.render_agents(list(registry.values()), _project_path(project_dir))


@cli.command(help="Render the project config into every selected agent.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=(
        f"Project config file (defaults to <project>/{PROJECT_CONFIG_FILENAME}, "
        "falling back to the detected project stack)."
    ),
)
@_agent_option()
@_global_option()
@_project_option()
@click.option(
    "--skills-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Local directory whose skills are copied to every agent.",
)
@click.pass_obj
def sync(
    obj: Dict[str, str],
    config_path: Optional[Path],
    agents: tuple[str, ...],
    global_scope: bool,
    project_dir: Optional[Path],
    skills_dir: Optional[Path],
) -> None:
    ui = SkillBridgeConsoleUI(Console())
    project_path = _project_path(project_dir)
    planner = InstallationPlanner(create_adapter_registry())

    try:
        sources = load_sync_sources(project_path, config_path)
        targets = planner.select_agents([agent.lower() for agent in agents] or None)
    except SkillBridgeError as exc:
        raise click.ClickException(f"Fatal: {exc}")

    ui.render_sync_sources(sources, project_path)
    skills = discover_skills(skills_dir) if skills_dir is not None else None
    if skills_dir is not None and not skills:
        ui.render_no_skills()

    results = planner.sync_all(
        project_path,
        sources.config,
        sources.rules,
        agents=targets,
        global_scope=global_scope,
        skills=skills,
    )
    ui.render_results(results)
    if not all(result.success for result in results):
        raise click.exceptions.Exit(1)


@cli.command(name="list", help="List the skills installed for each agent.")
@_agent_option()
@click.option(
    "--scope",
    type=click.Choice(["project", "global", "all"], case_sensitive=False),
    default="all",
    show_default=True,
    help="Which skills directories to look in.",
)
@_project_option()
@click.pass_obj
def list_skills(
    obj: Dict[str, str],
    agents: tuple[str, ...],
    scope: str,
    project_dir: Optional[Path],
) -> None:
    ui = SkillBridgeConsoleUI(Console())
    project_path = _project_path(project_dir)
    planner = InstallationPlanner(create_adapter_registry())
    try:
        targets = _explicit_or_all_agents(planner, agents)
    except SkillBridgeError as exc:
        raise click.ClickException(f"Fatal: {exc}")

    scope = scope.lower()
    scopes = [Scope.PROJECT, Scope.GLOBAL] if scope == "all" else [Scope(scope)]
    ui.render_installed(planner.installed(project_path, targets, scopes=scopes), project_path)


@cli.command(help="Remove installed skills by name or folder.")
@click.argument("names", nargs=-1, required=True)
@_agent_option()
@_global_option()
@_project_option()
@click.pass_obj
def remove(
    obj: Dict[str, str],
    names: tuple[str, ...],
    agents: tuple[str, ...],
    global_scope: bool,
    project_dir: Optional[Path],
) -> None:
    ui = SkillBridgeConsoleUI(Console())
    planner = InstallationPlanner(create_adapter_registry())
    try:
        targets = _explicit_or_all_agents(planner, agents)
    except SkillBridgeError as exc:
        raise click.ClickException(f"Fatal: {exc}")

    results = planner.remove(
        _project_path(project_dir), list(names), targets, global_scope=global_scope
    )
    ui.render_removal(results)
    if not all(result.success for result in results):
        raise click.exceptions.Exit(1)

def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
