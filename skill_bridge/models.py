from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from skill_bridge.mcp.models import MCPServer
from skill_bridge.skills.models import Skill
from skill_bridge.sources.models import ParsedSource


class ActionKind(str, Enum):
    WRITE_TEXT = "write_text"
    COPY_TREE = "copy_tree"
    REMOVE_TREE = "remove_tree"


class ActionStatus(str, Enum):
    NOOP = "noop"
    CREATE = "create"
    UPDATE = "update"
    REMOVE = "remove"
    FAILED = "failed"


class Scope(str, Enum):
    PROJECT = "project"
    GLOBAL = "global"

    @classmethod
    def from_flag(cls, global_scope: bool) -> "Scope":
        return cls.GLOBAL if global_scope else cls.PROJECT


@dataclass
class Action:
    kind: ActionKind
    path: Path
    detail: str
    payload: Optional[str] = None
    source: Optional[Path] = None


@dataclass
class AgentConfig:
    project_name: Optional[str] = None
    description: Optional[str] = None
    languages: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    tech_stack: list[str] = field(default_factory=list)
    dev_commands: list[str] = field(default_factory=list)
    build_commands: list[str] = field(default_factory=list)
    test_commands: list[str] = field(default_factory=list)
    coding_guidelines: list[str] = field(default_factory=list)
    architecture_notes: list[str] = field(default_factory=list)
    mcp_servers: list[MCPServer] = field(default_factory=list)

    def all_technologies(self) -> list[str]:
        return [*self.languages, *self.frameworks, *self.tech_stack]

    def has_commands(self) -> bool:
        return bool(self.dev_commands or self.build_commands or self.test_commands)


@dataclass
class SyncResult:
    agent_id: str
    files_created: list[str] = field(default_factory=list)
    files_updated: list[str] = field(default_factory=list)
    files_removed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def record(self, path: Path, status: ActionStatus) -> None:
        if status == ActionStatus.CREATE:
            self.files_created.append(str(path))
        elif status == ActionStatus.UPDATE:
            self.files_updated.append(str(path))
        elif status == ActionStatus.REMOVE:
            self.files_removed.append(str(path))


@dataclass(frozen=True)
class InstallOptions:
    source: str
    global_scope: bool = False
    selected_skill_ids: Optional[list[str]] = None
    selected_agent_ids: Optional[list[str]] = None
    non_interactive: bool = True
    project_path: Path = field(default_factory=Path.cwd)


@dataclass
class InstallReport:
    source: ParsedSource
    skills: list[Skill] = field(default_factory=list)
    results: list[SyncResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(result.success for result in self.results)
