"""Static per-agent location and format metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from skill_bridge.models import Scope


class AgentId(str, Enum):
    CLAUDE_CODE = "claude-code"
    CURSOR = "cursor"
    OPENCODE = "opencode"
    GITHUB_COPILOT = "github-copilot"
    ANTIGRAVITY = "antigravity"
    CODEX = "codex"


class RulesFormat(str, Enum):
    JSON = "json"
    MDC = "mdc"
    MARKDOWN = "markdown"
    NONE = "none"


class MCPFormat(str, Enum):
    JSON = "json"
    TOML = "toml"
    NONE = "none"


@dataclass(frozen=True)
class AgentDescriptor:
    """Where one agent keeps its files.

    ``project_*`` paths are relative to the project directory, ``global_*``
    paths are relative to the user's home directory.
    """

    agent_id: AgentId
    display_name: str
    project_agent_file: str
    global_agent_file: str
    project_rules_path: str
    global_rules_path: str
    rules_format: RulesFormat
    project_skills_dir: str
    global_skills_dir: str
    project_mcp_path: str | None
    global_mcp_path: str | None
    mcp_format: MCPFormat
    marker_dirs: tuple[str, ...]

    @staticmethod
    def _resolve(project_path: Path, scope: Scope, project: str, home: str) -> Path:
        if scope == Scope.GLOBAL:
            return Path.home() / home
        return Path(project_path) / project

    def agent_file_path(self, project_path: Path, scope: Scope) -> Path:
        return self._resolve(
            project_path, scope, self.project_agent_file, self.global_agent_file
        )

    def rules_path(self, project_path: Path, scope: Scope) -> Path:
        return self._resolve(
            project_path, scope, self.project_rules_path, self.global_rules_path
        )

    def skills_dir(self, project_path: Path, scope: Scope) -> Path:
        return self._resolve(
            project_path, scope, self.project_skills_dir, self.global_skills_dir
        )

    def mcp_config_path(self, project_path: Path, scope: Scope) -> Path | None:
        if self.mcp_format == MCPFormat.NONE:
            return None
        if self.project_mcp_path is None or self.global_mcp_path is None:
            return None
        return self._resolve(
            project_path, scope, self.project_mcp_path, self.global_mcp_path
        )


AGENT_CATALOG: Mapping[AgentId, AgentDescriptor] = MappingProxyType(
    {
        AgentId.CLAUDE_CODE: AgentDescriptor(
            agent_id=AgentId.CLAUDE_CODE,
            display_name="Claude Code",
            project_agent_file="CLAUDE.md",
            global_agent_file=".claude/CLAUDE.md",
            project_rules_path=".claude/settings.json",
            global_rules_path=".claude/settings.json",
            rules_format=RulesFormat.JSON,
            project_skills_dir=".claude/skills",
            global_skills_dir=".claude/skills",
            project_mcp_path=".claude/mcp.json",
            global_mcp_path=".claude/mcp.json",
            mcp_format=MCPFormat.JSON,
            marker_dirs=(".claude",),
        ),
        AgentId.CURSOR: AgentDescriptor(
            agent_id=AgentId.CURSOR,
            display_name="Cursor",
            project_agent_file="AGENTS.md",
            global_agent_file=".cursor/AGENTS.md",
            project_rules_path=".cursor/rules",
            global_rules_path=".cursor/rules",
            rules_format=RulesFormat.MDC,
            project_skills_dir=".cursor/skills",
            global_skills_dir=".cursor/skills",
            project_mcp_path=".cursor/mcp.json",
            global_mcp_path=".cursor/mcp.json",
            mcp_format=MCPFormat.JSON,
            marker_dirs=(".cursor",),
        ),
        AgentId.OPENCODE: AgentDescriptor(
            agent_id=AgentId.OPENCODE,
            display_name="OpenCode",
            project_agent_file="AGENTS.md",
            global_agent_file=".config/opencode/AGENTS.md",
            project_rules_path=".opencode.json",
            global_rules_path=".config/opencode/opencode.json",
            rules_format=RulesFormat.JSON,
            project_skills_dir=".opencode/skill",
            global_skills_dir=".config/opencode/skill",
            project_mcp_path=".opencode/mcp.json",
            global_mcp_path=".config/opencode/mcp.json",
            mcp_format=MCPFormat.JSON,
            marker_dirs=(".config/opencode",),
        ),
        AgentId.GITHUB_COPILOT: AgentDescriptor(
            agent_id=AgentId.GITHUB_COPILOT,
            display_name="GitHub Copilot",
            project_agent_file=".github/copilot-instructions.md",
            global_agent_file=".copilot/instructions.md",
            project_rules_path=".github/instructions",
            global_rules_path=".copilot/instructions",
            rules_format=RulesFormat.MARKDOWN,
            project_skills_dir=".github/skills",
            global_skills_dir=".copilot/skills",
            project_mcp_path=None,
            global_mcp_path=None,
            mcp_format=MCPFormat.NONE,
            marker_dirs=(".copilot",),
        ),
        AgentId.ANTIGRAVITY: AgentDescriptor(
            agent_id=AgentId.ANTIGRAVITY,
            display_name="Antigravity",
            project_agent_file="AGENTS.md",
            global_agent_file=".gemini/GEMINI.md",
            project_rules_path=".agent/rules",
            global_rules_path=".gemini/rules",
            rules_format=RulesFormat.MARKDOWN,
            project_skills_dir=".agent/skills",
            global_skills_dir=".gemini/skills",
            project_mcp_path=".gemini/settings.json",
            global_mcp_path=".gemini/settings.json",
            mcp_format=MCPFormat.JSON,
            marker_dirs=(".gemini",),
        ),
        AgentId.CODEX: AgentDescriptor(
            agent_id=AgentId.CODEX,
            display_name="Codex",
            project_agent_file="AGENTS.md",
            global_agent_file=".codex/AGENTS.md",
            project_rules_path=".codex/rules",
            global_rules_path=".codex/rules",
            rules_format=RulesFormat.NONE,
            project_skills_dir=".codex/skills",
            global_skills_dir=".codex/skills",
            project_mcp_path=".codex/config.toml",
            global_mcp_path=".codex/config.toml",
            mcp_format=MCPFormat.TOML,
            marker_dirs=(".codex",),
        ),
    }
)

# Most commonly used agents first.
AGENT_PRIORITY: tuple[AgentId, ...] = (
    AgentId.CLAUDE_CODE,
    AgentId.OPENCODE,
    AgentId.CURSOR,
    AgentId.GITHUB_COPILOT,
    AgentId.ANTIGRAVITY,
    AgentId.CODEX,
)


def agent_descriptor(agent: AgentId | str) -> AgentDescriptor:
    agent_id = agent if isinstance(agent, AgentId) else AgentId(agent)
    return AGENT_CATALOG[agent_id]


def agent_label(agent: AgentId | str) -> str:
    return agent_descriptor(agent).display_name


def project_skill_dirs(
    catalog: Mapping[AgentId, AgentDescriptor] = AGENT_CATALOG,
) -> list[str]:
    seen: list[str] = []
    for agent_id in AGENT_PRIORITY:
        descriptor = catalog.get(agent_id)
        if descriptor is None:
            continue
        if descriptor.project_skills_dir not in seen:
            seen.append(descriptor.project_skills_dir)
    return seen
