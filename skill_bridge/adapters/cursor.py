from skill_bridge.adapters.base import BaseAdapter
from skill_bridge.adapters.markdown import AgentFileTemplate, CommandStyle, TechStyle
from skill_bridge.agents.registry import AgentId
from skill_bridge.mcp.codec import render_mcp_manifest
from skill_bridge.mcp.models import MCPServer
from skill_bridge.rules.compilers import CursorRulesCompiler, IRulesCompiler
from skill_bridge.utils import dump_json


class CursorAdapter(BaseAdapter):
    """AGENTS.md, ``.cursor/rules/*.mdc`` and ``.cursor/mcp.json``."""

    AGENT_ID = AgentId.CURSOR
    TEMPLATE = AgentFileTemplate(
        title="{project} - Agent Instructions",
        tech_heading="Tech Stack",
        tech_style=TechStyle.INLINE,
        command_style=CommandStyle.COMBINED,
        command_titles=("Dev", "Build", "Test"),
        guidelines_heading="Guidelines",
    )

    @property
    def rules_compiler(self) -> IRulesCompiler:
        return CursorRulesCompiler()

    def generate_mcp_config(self, servers: list[MCPServer]) -> str:
        return dump_json(render_mcp_manifest(servers))
