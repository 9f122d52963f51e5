from skill_bridge.adapters.base import BaseAdapter
from skill_bridge.adapters.markdown import AgentFileTemplate
from skill_bridge.agents.registry import AgentId
from skill_bridge.mcp.codec import render_codex_manifest
from skill_bridge.mcp.models import MCPServer
from skill_bridge.rules.compilers import IRulesCompiler, NoRulesCompiler


class CodexAdapter(BaseAdapter):
    """AGENTS.md and ``[mcp_servers.*]`` tables in ``.codex/config.toml``.

    Codex reads its rules from AGENTS.md, so no separate rule files are written.
    """

    AGENT_ID = AgentId.CODEX
    TEMPLATE = AgentFileTemplate(
        title="{project} - Codex Instructions",
        overview_heading="Overview",
    )

    @property
    def rules_compiler(self) -> IRulesCompiler:
        return NoRulesCompiler()

    def generate_mcp_config(self, servers: list[MCPServer]) -> str:
        return render_codex_manifest(servers)
