from skill_bridge.adapters.base import BaseAdapter
from skill_bridge.adapters.markdown import AgentFileTemplate
from skill_bridge.agents.registry import AgentId
from skill_bridge.mcp.codec import render_mcp_manifest
from skill_bridge.mcp.models import MCPServer
from skill_bridge.rules.compilers import IRulesCompiler, MarkdownRulesCompiler
from skill_bridge.utils import dump_json


class AntigravityAdapter(BaseAdapter):
    """Workspace rules in ``.agent/rules``, global rules in ``~/.gemini/rules``."""

    AGENT_ID = AgentId.ANTIGRAVITY
    TEMPLATE = AgentFileTemplate(
        title="{project} - Antigravity Instructions",
        tagline="AI-powered development with Antigravity",
        overview_heading="Overview",
    )

    @property
    def rules_compiler(self) -> IRulesCompiler:
        return MarkdownRulesCompiler()

    def generate_mcp_config(self, servers: list[MCPServer]) -> str:
        return dump_json(render_mcp_manifest(servers))
