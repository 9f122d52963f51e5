"""Agent instruction file rendering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from skill_bridge.agents.prompts import (
    DEFAULT_AGENT_INTRO,
    MCP_INTRO,
    prompt_for_tech_stack,
)
from skill_bridge.models import AgentConfig


class TechStyle(str, Enum):
    LABELLED = "labelled"
    INLINE = "inline"
    GROUPED = "grouped"


class CommandStyle(str, Enum):
    GROUPED = "grouped"
    COMBINED = "combined"


@dataclass(frozen=True)
class AgentFileTemplate:
    """Per-agent wording of the instruction file.

    Sections always come in the same order: overview, tech stack,
    tech-specific guidance, commands, architecture, guidelines, MCP tools.
    """

    title: str = "{project} - Agent Instructions"
    tagline: str | None = None
    overview_heading: str | None = None
    show_project_label: bool = False
    include_intro: bool = True
    tech_heading: str = "Technology Stack"
    tech_style: TechStyle = TechStyle.GROUPED
    commands_heading: str = "Commands"
    command_style: CommandStyle = CommandStyle.GROUPED
    command_titles: tuple[str, str, str] = ("Development", "Build", "Test")
    guidelines_heading: str = "Coding Guidelines"
    include_mcp: bool = True


def _bullet_section(heading: str, items: list[str]) -> list[str]:
    if not items:
        return []
    return [f"## {heading}", "", *[f"- {item}" for item in items], ""]


def _overview(config: AgentConfig, template: AgentFileTemplate) -> list[str]:
    lines: list[str] = []
    body: list[str] = []
    if template.show_project_label and config.project_name:
        body.append(f"**Project:** {config.project_name}")
    if config.description:
        if body:
            body.append("")
        body.append(config.description)
    if not body:
        return lines
    if template.overview_heading:
        lines.extend([f"## {template.overview_heading}", ""])
    lines.extend([*body, ""])
    return lines


def _tech_stack(config: AgentConfig, template: AgentFileTemplate) -> list[str]:
    groups = [
        ("Languages", config.languages),
        ("Frameworks", config.frameworks),
        ("Technologies", config.tech_stack),
    ]
    if not any(items for _, items in groups):
        return []

    lines = [f"## {template.tech_heading}", ""]
    if template.tech_style == TechStyle.INLINE:
        lines.append(", ".join(config.all_technologies()))
        lines.append("")
    elif template.tech_style == TechStyle.LABELLED:
        for label, items in groups:
            if items:
                lines.append(f"- **{label}:** {', '.join(items)}")
        lines.append("")
    else:
        for label, items in groups:
            if items:
                lines.extend([f"### {label}", *[f"- {item}" for item in items], ""])
    return lines


def _commands(config: AgentConfig, template: AgentFileTemplate) -> list[str]:
    if not config.has_commands():
        return []

    groups = list(
        zip(
            template.command_titles,
            [config.dev_commands, config.build_commands, config.test_commands],
        )
    )
    lines = [f"## {template.commands_heading}", ""]
    if template.command_style == CommandStyle.COMBINED:
        lines.append("```bash")
        for title, commands in groups:
            lines.extend(f"# {title}: {command}" for command in commands)
        lines.extend(["```", ""])
        return lines

    for title, commands in groups:
        if commands:
            lines.extend([f"### {title}", "```bash", *commands, "```", ""])
    return lines


def _mcp_tools(config: AgentConfig) -> list[str]:
    if not config.mcp_servers:
        return []
    lines = [MCP_INTRO.rstrip(), ""]
    for server in config.mcp_servers:
        label = server.display_name or server.name
        suffix = f": {server.description}" if server.description else ""
        lines.append(f"- **{label}**{suffix}")
    lines.append("")
    return lines


def render_agent_file(config: AgentConfig, template: AgentFileTemplate) -> str:
    project = config.project_name or "Project"
    lines = [f"# {template.title.format(project=project)}", ""]
    if template.tagline:
        lines.extend([f"> {template.tagline}", ""])
    lines.extend(_overview(config, template))
    if template.include_intro:
        lines.extend([DEFAULT_AGENT_INTRO.rstrip(), ""])
    lines.extend(_tech_stack(config, template))

    guidance = prompt_for_tech_stack(config.all_technologies())
    if guidance:
        lines.extend([guidance.rstrip(), ""])

    lines.extend(_commands(config, template))
    lines.extend(_bullet_section("Architecture", config.architecture_notes))
    lines.extend(_bullet_section(template.guidelines_heading, config.coding_guidelines))
    if template.include_mcp:
        lines.extend(_mcp_tools(config))
    return "\n".join(lines).rstrip() + "\n"
