from types import MappingProxyType
from typing import Mapping

from skill_bridge.adapters.antigravity import AntigravityAdapter
from skill_bridge.adapters.base import BaseAdapter
from skill_bridge.adapters.claude import ClaudeCodeAdapter
from skill_bridge.adapters.codex import CodexAdapter
from skill_bridge.adapters.copilot import CopilotAdapter
from skill_bridge.adapters.cursor import CursorAdapter
from skill_bridge.adapters.opencode import OpenCodeAdapter
from skill_bridge.agents.registry import AGENT_PRIORITY, AgentId

ADAPTER_CLASSES: tuple[type[BaseAdapter], ...] = (
    ClaudeCodeAdapter,
    CursorAdapter,
    OpenCodeAdapter,
    CopilotAdapter,
    AntigravityAdapter,
    CodexAdapter,
)

AdapterRegistry = Mapping[AgentId, BaseAdapter]


def create_adapter_registry() -> AdapterRegistry:
    """Return a read-only agent id -> adapter map in priority order."""
    by_id = {cls.AGENT_ID: cls() for cls in ADAPTER_CLASSES}
    return MappingProxyType({agent_id: by_id[agent_id] for agent_id in AGENT_PRIORITY})


__all__ = [
    "ADAPTER_CLASSES",
    "AdapterRegistry",
    "AntigravityAdapter",
    "BaseAdapter",
    "ClaudeCodeAdapter",
    "CodexAdapter",
    "CopilotAdapter",
    "CursorAdapter",
    "OpenCodeAdapter",
    "create_adapter_registry",
]
