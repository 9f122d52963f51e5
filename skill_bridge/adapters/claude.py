from skill_bridge.adapters.base import BaseAdapter
from skill_bridge.adapters.markdown import AgentFileTemplate, TechStyle
from skill_bridge.agents.registry import AgentId
from skill_bridge.mcp.codec import render_mcp_manifest
from skill_bridge.mcp.models import MCPServer
from skill_bridge.rules.compilers import IRulesCompiler, JsonRulesCompiler, claude_settings
from skill_bridge.utils import dump_json


class ClaudeCodeAdapter(BaseAdapter):
    """CLAUDE.md, ``.claude/settings.json`` rules and ``.claude/mcp.json``."""

    AGENT_ID = AgentId.CLAUDE_CODE
    TEMPLATE = AgentFileTemplate(
        title="{project} - Claude Instructions",
        tech_heading="Tech Stack",
        tech_style=TechStyle.LABELLED,
        commands_heading="Build and Run",
    )

    @property
    def rules_compiler(self) -> IRulesCompiler:
        return JsonRulesCompiler(claude_settings)

    def generate_mcp_config(self, servers: list[MCPServer]) -> str:
        return dump_json(render_mcp_manifest(servers))
