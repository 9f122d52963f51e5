"""Skill selection and per-agent install orchestration."""

from pathlib import Path
from typing import Callable, Iterable, Optional

from skill_bridge.adapters import AdapterRegistry, BaseAdapter, create_adapter_registry
from skill_bridge.agents.registry import AgentId
from skill_bridge.errors import UnknownAgentError
from skill_bridge.logging_config import get_logger
from skill_bridge.models import (
    AgentConfig,
    InstallOptions,
    InstallReport,
    Scope,
    SyncResult,
)
from skill_bridge.rules.models import RuleSet
from skill_bridge.skills.discovery import SkillDiscovery
from skill_bridge.skills.installer import sanitize_skill_name, skill_match_keys
from skill_bridge.skills.inventory import InstalledSkill
from skill_bridge.skills.models import Skill
from skill_bridge.sources.fetcher import RepositoryFetcher
from skill_bridge.sources.resolver import parse_source

logger = get_logger(__name__)

__all__ = [
    "InstallationPlanner",
    "run_install",
    "sanitize_skill_name",
]


class InstallationPlanner:
    def __init__(self, adapters: Optional[AdapterRegistry] = None) -> None:
        self.adapters = adapters if adapters is not None else create_adapter_registry()

    def select_skills(
        self, skills: list[Skill], selected_ids: Optional[Iterable[str]] = None
    ) -> list[Skill]:
        """Filter by name, folder name or sanitized name. ``None`` keeps all."""
        if selected_ids is None:
            return list(skills)

        wanted = {item.strip().lower() for item in selected_ids if item.strip()}
        if not wanted:
            return list(skills)

        selected = [skill for skill in skills if skill_match_keys(skill) & wanted]
        matched: set[str] = set()
        for skill in selected:
            matched |= skill_match_keys(skill) & wanted
        for missing in sorted(wanted - matched):
            logger.warning("No discovered skill matches %r", missing)
        return selected

    def select_agents(
        self, selected_ids: Optional[Iterable[str]] = None
    ) -> list[BaseAdapter]:
        """Explicit ids win, otherwise installed agents, otherwise every agent."""
        if selected_ids:
            selected: list[BaseAdapter] = []
            for raw in selected_ids:
                try:
                    agent_id = AgentId(raw)
                except ValueError as exc:
                    raise UnknownAgentError(raw) from exc
                adapter = self.adapters.get(agent_id)
                if adapter is None:
                    raise UnknownAgentError(raw)
                if adapter not in selected:
                    selected.append(adapter)
            return selected

        installed = [adapter for adapter in self.adapters.values() if adapter.is_installed()]
        if installed:
            return installed
        logger.info("No agents detected, targeting all %d", len(self.adapters))
        return list(self.adapters.values())

    def install(
        self,
        project_path: Path,
        skills: list[Skill],
        agents: Iterable[BaseAdapter],
        *,
        global_scope: bool = False,
    ) -> list[SyncResult]:
        return [
            self._run(
                adapter,
                lambda adapter=adapter: adapter.install_skills(
                    project_path, skills, global_scope=global_scope
                ),
            )
            for adapter in agents
        ]

    def sync_all(
        self,
        project_path: Path,
        config: AgentConfig,
        rules: Optional[RuleSet] = None,
        *,
        agents: Optional[Iterable[BaseAdapter]] = None,
        global_scope: bool = False,
        skills: Optional[list[Skill]] = None,
    ) -> list[SyncResult]:
        targets = list(agents) if agents is not None else self.select_agents()
        return [
            self._run(
                adapter,
                lambda adapter=adapter: adapter.sync(
                    project_path,
                    config,
                    rules,
                    global_scope=global_scope,
                    skills=skills,
                ),
            )
            for adapter in targets
        ]

    def installed(
        self,
        project_path: Path,
        agents: Iterable[BaseAdapter],
        *,
        scopes: Iterable[Scope] = (Scope.PROJECT, Scope.GLOBAL),
    ) -> list[InstalledSkill]:
        """Installed skills per agent, in the order of ``scopes``."""
        scopes = list(scopes)
        found: list[InstalledSkill] = []
        for adapter in agents:
            for scope in scopes:
                found.extend(
                    adapter.installed_skills(project_path, scope == Scope.GLOBAL)
                )
        return found

    def remove(
        self,
        project_path: Path,
        names: Iterable[str],
        agents: Iterable[BaseAdapter],
        *,
        global_scope: bool = False,
    ) -> list[SyncResult]:
        names = [name for name in names if name.strip()]
        return [
            self._run(
                adapter,
                lambda adapter=adapter: adapter.remove_skills(
                    project_path, names, global_scope=global_scope
                ),
            )
            for adapter in agents
        ]

    @staticmethod
    def _run(adapter: BaseAdapter, call: Callable[[], SyncResult]) -> SyncResult:
        try:
            return call()
        except Exception as exc:
            logger.exception("Adapter %s failed", adapter.agent_id.value)
            return SyncResult(agent_id=adapter.agent_id.value, errors=[str(exc)])


def run_install(
    options: InstallOptions,
    *,
    adapters: Optional[AdapterRegistry] = None,
    fetcher: Optional[RepositoryFetcher] = None,
    discovery: Optional[SkillDiscovery] = None,
) -> InstallReport:
    """Install skills from ``options.source`` into the selected agents.

    The clone lives only for the duration of this call. Skills are copied out
    of it before it is released, whatever the outcome.
    """
    parsed = parse_source(options.source)
    planner = InstallationPlanner(adapters)
    fetcher = fetcher or RepositoryFetcher()
    discovery = discovery or SkillDiscovery()
    agents = planner.select_agents(options.selected_agent_ids)

    with fetcher.cloned(parsed) as repo:
        discovered = discovery.discover(repo.path, parsed.subpath)
        report = InstallReport(source=parsed)
        if not discovered:
            logger.info("No skills found in %s", parsed.clone_url)
            return report

        report.skills = planner.select_skills(discovered, options.selected_skill_ids)
        if not report.skills:
            return report
        report.results = planner.install(
            Path(options.project_path),
            report.skills,
            agents,
            global_scope=options.global_scope,
        )
    return report
