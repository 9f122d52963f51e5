from skill_bridge.adapters.base import BaseAdapter
from skill_bridge.adapters.markdown import AgentFileTemplate
from skill_bridge.agents.registry import AgentId
from skill_bridge.mcp.codec import render_mcp_manifest
from skill_bridge.mcp.models import MCPServer
from skill_bridge.rules.compilers import IRulesCompiler, JsonRulesCompiler, opencode_settings
from skill_bridge.utils import dump_json


class OpenCodeAdapter(BaseAdapter):
    AGENT_ID = AgentId.OPENCODE
    TEMPLATE = AgentFileTemplate(
        title="AGENTS.md - {project}",
        tagline="Universal AI Agent Instructions",
        overview_heading="Overview",
        include_intro=False,
    )

    @property
    def rules_compiler(self) -> IRulesCompiler:
        return JsonRulesCompiler(opencode_settings)

    def generate_mcp_config(self, servers: list[MCPServer]) -> str:
        return dump_json(render_mcp_manifest(servers))
