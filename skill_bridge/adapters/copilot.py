from pathlib import Path

from skill_bridge.adapters.base import BaseAdapter
from skill_bridge.adapters.markdown import AgentFileTemplate, TechStyle
from skill_bridge.agents.registry import AgentId
from skill_bridge.mcp.models import MCPServer
from skill_bridge.rules.compilers import CopilotRulesCompiler, IRulesCompiler


class CopilotAdapter(BaseAdapter):
    """``.github/copilot-instructions.md`` plus ``.github/instructions``.

    Copilot has no file based MCP configuration.
    """

    AGENT_ID = AgentId.GITHUB_COPILOT
    TEMPLATE = AgentFileTemplate(
        title="GitHub Copilot Instructions",
        tagline="These instructions guide GitHub Copilot in this repository.",
        overview_heading="Project Overview",
        show_project_label=True,
        include_intro=False,
        tech_style=TechStyle.LABELLED,
        commands_heading="Development Workflow",
        command_titles=("Running Locally", "Building", "Testing"),
        guidelines_heading="Coding Standards",
        include_mcp=False,
    )

    def is_installed(self) -> bool:
        return super().is_installed() or (Path.cwd() / ".github").exists()

    @property
    def rules_compiler(self) -> IRulesCompiler:
        return CopilotRulesCompiler()

    def generate_mcp_config(self, servers: list[MCPServer]) -> str:
        return "{}\n"
