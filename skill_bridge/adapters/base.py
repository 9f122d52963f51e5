"""Adapter contract shared by every supported agent."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Iterable, Optional

from skill_bridge.adapters.markdown import AgentFileTemplate, render_agent_file
from skill_bridge.agents.registry import AGENT_CATALOG, AgentDescriptor, AgentId
from skill_bridge.executor import SyncExecutor
from skill_bridge.logging_config import get_logger
from skill_bridge.mcp.models import MCPServer
from skill_bridge.models import Action, ActionKind, AgentConfig, Scope, SyncResult
from skill_bridge.rules.compilers import IRulesCompiler
from skill_bridge.rules.models import RuleSet
from skill_bridge.skills.installer import skill_destination_name
from skill_bridge.skills.inventory import InstalledSkill, scan_skills_dir
from skill_bridge.skills.models import Skill

logger = get_logger(__name__)


class BaseAdapter(ABC):
    """Render the canonical project config into one agent's on-disk layout.

    Subclasses set ``AGENT_ID`` and ``TEMPLATE`` and provide the rules and MCP
    renderings. Path lookups come from the agent's descriptor and are pure.
    """

    AGENT_ID: ClassVar[AgentId]
    TEMPLATE: ClassVar[AgentFileTemplate] = AgentFileTemplate()

    def __init__(
        self,
        descriptor: Optional[AgentDescriptor] = None,
        executor: Optional[SyncExecutor] = None,
    ) -> None:
        self.descriptor = descriptor or AGENT_CATALOG[self.AGENT_ID]
        self.executor = executor or SyncExecutor()

    @property
    def agent_id(self) -> AgentId:
        return self.descriptor.agent_id

    @property
    def display_name(self) -> str:
        return self.descriptor.display_name

    def is_installed(self) -> bool:
        home = Path.home()
        return any((home / marker).exists() for marker in self.descriptor.marker_dirs)

    def generate_agent_file(self, config: AgentConfig) -> str:
        return render_agent_file(config, self.TEMPLATE)

    @property
    @abstractmethod
    def rules_compiler(self) -> IRulesCompiler:
        raise NotImplementedError

    def generate_rules_config(self, rules: RuleSet) -> str | dict[str, str]:
        return self.rules_compiler.compile(rules)

    @abstractmethod
    def generate_mcp_config(self, servers: list[MCPServer]) -> str:
        raise NotImplementedError

    def get_agent_file_path(self, project_path: Path, global_scope: bool = False) -> Path:
        return self.descriptor.agent_file_path(project_path, Scope.from_flag(global_scope))

    def get_rules_path(self, project_path: Path, global_scope: bool = False) -> Path:
        return self.descriptor.rules_path(project_path, Scope.from_flag(global_scope))

    def get_mcp_config_path(
        self, project_path: Path, global_scope: bool = False
    ) -> Optional[Path]:
        return self.descriptor.mcp_config_path(
            project_path, Scope.from_flag(global_scope)
        )

    def get_skills_path(self, project_path: Path, global_scope: bool = False) -> Path:
        return self.descriptor.skills_dir(project_path, Scope.from_flag(global_scope))

    def plan_agent_file(
        self, project_path: Path, config: AgentConfig, global_scope: bool = False
    ) -> list[Action]:
        return [
            Action(
                kind=ActionKind.WRITE_TEXT,
                path=self.get_agent_file_path(project_path, global_scope),
                detail=f"write {self.agent_id.value} agent file",
                payload=self.generate_agent_file(config),
            )
        ]

    def plan_rules(
        self, project_path: Path, rules: Optional[RuleSet], global_scope: bool = False
    ) -> list[Action]:
        if rules is None or rules.is_empty():
            return []
        rendered = self.generate_rules_config(rules)
        rules_path = self.get_rules_path(project_path, global_scope)
        detail = f"write {self.agent_id.value} rules"
        if isinstance(rendered, str):
            return [
                Action(
                    kind=ActionKind.WRITE_TEXT,
                    path=rules_path,
                    detail=detail,
                    payload=rendered,
                )
            ]
        return [
            Action(
                kind=ActionKind.WRITE_TEXT,
                path=rules_path / filename,
                detail=detail,
                payload=content,
            )
            for filename, content in rendered.items()
        ]

    def plan_mcp(
        self, project_path: Path, servers: list[MCPServer], global_scope: bool = False
    ) -> list[Action]:
        if not servers:
            return []
        mcp_path = self.get_mcp_config_path(project_path, global_scope)
        if mcp_path is None:
            return []
        return [
            Action(
                kind=ActionKind.WRITE_TEXT,
                path=mcp_path,
                detail=f"write {self.agent_id.value} mcp config",
                payload=self.generate_mcp_config(servers),
            )
        ]

    def plan_skills(
        self,
        project_path: Path,
        skills: Optional[Iterable[Skill]],
        global_scope: bool = False,
    ) -> list[Action]:
        if not skills:
            return []
        skills_path = self.get_skills_path(project_path, global_scope)
        actions: list[Action] = []
        taken: set[str] = set()
        for skill in skills:
            name = skill_destination_name(skill)
            if name in taken:
                # Two skills sanitizing to one folder would overwrite each other.
                base = name
                counter = 2
                while name in taken:
                    name = f"{base}-{counter}"
                    counter += 1
                logger.warning(
                    "Skill %r renamed to %s to avoid a folder collision",
                    skill.name,
                    name,
                )
            taken.add(name)
            actions.append(
                Action(
                    kind=ActionKind.COPY_TREE,
                    path=skills_path / name,
                    detail=f"copy skill {skill.name}",
                    source=skill.source_path,
                )
            )
        return actions

    def sync(
        self,
        project_path: Path,
        config: AgentConfig,
        rules: Optional[RuleSet] = None,
        *,
        global_scope: bool = False,
        skills: Optional[list[Skill]] = None,
    ) -> SyncResult:
        project_path = Path(project_path)
        actions = [
            *self.plan_agent_file(project_path, config, global_scope),
            *self.plan_rules(project_path, rules, global_scope),
            *self.plan_mcp(project_path, config.mcp_servers, global_scope),
            *self.plan_skills(project_path, skills, global_scope),
        ]
        return self.executor.execute(self.agent_id.value, actions)

    def install_skills(
        self,
        project_path: Path,
        skills: list[Skill],
        *,
        global_scope: bool = False,
    ) -> SyncResult:
        actions = self.plan_skills(Path(project_path), skills, global_scope)
        return self.executor.execute(self.agent_id.value, actions)

    def installed_skills(
        self, project_path: Path, global_scope: bool = False
    ) -> list[InstalledSkill]:
        return scan_skills_dir(
            self.get_skills_path(Path(project_path), global_scope),
            self.agent_id.value,
            Scope.from_flag(global_scope),
        )

    def plan_removal(
        self, project_path: Path, names: Iterable[str], global_scope: bool = False
    ) -> list[Action]:
        installed = self.installed_skills(project_path, global_scope)
        actions: list[Action] = []
        planned: set[Path] = set()
        for name in names:
            matches = [item for item in installed if item.matches(name)]
            if not matches:
                logger.info("%s: skill %r is not installed", self.agent_id.value, name)
            for item in matches:
                if item.path in planned:
                    continue
                planned.add(item.path)
                actions.append(
                    Action(
                        kind=ActionKind.REMOVE_TREE,
                        path=item.path,
                        detail=f"remove skill {item.skill.name}",
                    )
                )
        return actions

    def remove_skills(
        self,
        project_path: Path,
        names: Iterable[str],
        *,
        global_scope: bool = False,
    ) -> SyncResult:
        actions = self.plan_removal(Path(project_path), list(names), global_scope)
        return self.executor.execute(self.agent_id.value, actions)
