from pathlib import Path

from rich.panel import Panel
from rich.table import Column, Table

from skill_bridge.adapters import BaseAdapter
from skill_bridge.agents.registry import agent_label
from skill_bridge.config import SyncSources
from skill_bridge.models import ActionStatus, Scope, SyncResult
from skill_bridge.skills.installer import skill_destination_name
from skill_bridge.skills.inventory import InstalledSkill
from skill_bridge.skills.models import Skill
from skill_bridge.sources.models import ParsedSource
from skill_bridge.tui.enums import ACTION_STATUS_STYLE, UIStyle
from skill_bridge.utils import compact_home_path


def _styled(status: ActionStatus) -> str:
    style = ACTION_STATUS_STYLE.get(status, UIStyle.WHITE.value)
    return f"[{style}]{status.value}[/{style}]"


class SourceTable:
    @staticmethod
    def summary_block(source: ParsedSource, skill_count: int) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Repository", source.clone_url)
        table.add_row("Ref", source.ref or "default branch")
        if source.subpath:
            table.add_row("Subpath", source.subpath)
        table.add_row("Skills", str(skill_count))
        return table


class SkillsTable:
    @staticmethod
    def skills_table(skills: list[Skill], root: Path | None = None) -> Table:
        table = Table(
            Column(header="Skill", width=24),
            Column(header="Folder", width=22),
            Column(header="Description", overflow="ellipsis"),
            Column(header="Path", overflow="ellipsis", max_width=40),
            expand=True,
            header_style="bold",
        )
        for skill in skills:
            path = skill.source_path
            if root is not None:
                try:
                    path = path.relative_to(root.resolve())
                except ValueError:
                    pass
            table.add_row(
                skill.name,
                skill_destination_name(skill),
                skill.description,
                str(path),
            )
        return table


class AgentsTable:
    @staticmethod
    def agents_table(adapters: list[BaseAdapter], project_path: Path) -> Table:
        table = Table(
            Column(header="Agent", width=16),
            Column(header="Name", width=16),
            Column(header="Status", width=12),
            Column(header="Skills dir", overflow="ellipsis"),
            Column(header="Global skills dir", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for adapter in adapters:
            installed = adapter.is_installed()
            style = UIStyle.GREEN.value if installed else UIStyle.DIM.value
            status = "detected" if installed else "not found"
            table.add_row(
                adapter.agent_id.value,
                adapter.display_name,
                f"[{style}]{status}[/{style}]",
                str(adapter.get_skills_path(project_path).relative_to(project_path)),
                compact_home_path(adapter.get_skills_path(project_path, global_scope=True)),
            )
        return table


class ResultsTable:
    @staticmethod
    def files_table(results: list[SyncResult]) -> Table:
        table = Table(
            Column(header="Agent", width=16),
            Column(header="Status", width=10),
            Column(header="Target", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for result in results:
            for path in result.files_created:
                table.add_row(result.agent_id, _styled(ActionStatus.CREATE), compact_home_path(path))
            for path in result.files_updated:
                table.add_row(result.agent_id, _styled(ActionStatus.UPDATE), compact_home_path(path))
            for path in result.files_removed:
                table.add_row(result.agent_id, _styled(ActionStatus.REMOVE), compact_home_path(path))
        return table

    @staticmethod
    def stats_panel(results: list[SyncResult]) -> Panel:
        created = sum(len(result.files_created) for result in results)
        updated = sum(len(result.files_updated) for result in results)
        removed = sum(len(result.files_removed) for result in results)
        failed = sum(len(result.errors) for result in results)
        stats: dict[str, str] = {
            "agents": str(len(results)),
            "created": str(created),
            "updated": str(updated),
            "removed": str(removed),
            "failed": str(failed),
        }
        table = Table(show_header=False, box=None)
        for key, value in stats.items():
            table.add_row(f"[bold]{key}[/bold]", value)
        return Panel(
            table,
            title="result",
            border_style=UIStyle.GREEN.value if failed == 0 else UIStyle.RED.value,
        )


class InstalledTable:
    @staticmethod
    def installed_table(installed: list[InstalledSkill], project_path: Path) -> Table:
        table = Table(
            Column(header="Agent", width=14),
            Column(header="Scope", width=7),
            Column(header="Folder", width=20),
            Column(header="Skill", width=20),
            Column(header="Path", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in installed:
            if item.scope == Scope.PROJECT:
                try:
                    location = str(item.path.relative_to(project_path))
                except ValueError:
                    location = compact_home_path(item.path)
            else:
                location = compact_home_path(item.path)
            table.add_row(
                agent_label(item.agent_id),
                item.scope.value,
                item.folder_name,
                item.skill.name,
                location,
            )
        return table


class SyncSourcesTable:
    @staticmethod
    def summary_block(sources: SyncSources, project_path: Path) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        if sources.config_path is not None:
            table.add_row("Config", compact_home_path(sources.config_path))
        elif sources.detected is not None:
            table.add_row(
                "Detected",
                f"{sources.detected.display_name} ({sources.detected.config_file})",
            )
        else:
            table.add_row("Config", "[dim]none found, using defaults[/dim]")
        if sources.mcp_path is not None:
            try:
                mcp_location = str(sources.mcp_path.relative_to(project_path))
            except ValueError:
                mcp_location = compact_home_path(sources.mcp_path)
            table.add_row("MCP servers", f"{len(sources.config.mcp_servers)} from {mcp_location}")
        else:
            table.add_row("MCP servers", str(len(sources.config.mcp_servers)))
        return table
