from pathlib import Path

from rich.console import Console

from skill_bridge.adapters import BaseAdapter
from skill_bridge.config import SyncSources
from skill_bridge.models import InstallReport, SyncResult
from skill_bridge.skills.inventory import InstalledSkill
from skill_bridge.skills.models import Skill
from skill_bridge.sources.models import ParsedSource
from skill_bridge.tui.enums import UIStyle
from skill_bridge.tui.sections import UISection
from skill_bridge.tui.tables import (
    AgentsTable,
    InstalledTable,
    ResultsTable,
    SkillsTable,
    SourceTable,
    SyncSourcesTable,
)
from skill_bridge.utils import compact_home_paths_in_text


class SkillBridgeConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_source(self, source: ParsedSource, skills: list[Skill]) -> None:
        self.console.print(
            UISection.wrap(
                "source",
                SourceTable.summary_block(source, len(skills)),
                style=UIStyle.BLUE.value,
            )
        )

    def render_skills(self, skills: list[Skill], root: Path | None = None) -> None:
        if not skills:
            self.render_no_skills()
            return
        self.console.print(
            UISection.wrap(
                "skills",
                SkillsTable.skills_table(skills, root=root),
                style=UIStyle.CYAN.value,
            )
        )

    def render_no_skills(self) -> None:
        self.console.print(
            UISection.note(
                "skills",
                "No skills found. A skill is a directory containing a SKILL.md file.",
                style=UIStyle.YELLOW.value,
            )
        )

    def render_agents(self, adapters: list[BaseAdapter], project_path: Path) -> None:
        self.console.print(
            UISection.wrap(
                "agents",
                AgentsTable.agents_table(adapters, project_path),
                style=UIStyle.CYAN.value,
            )
        )

    def render_sync_sources(self, sources: SyncSources, project_path: Path) -> None:
        self.console.print(
            UISection.wrap(
                "sources",
                SyncSourcesTable.summary_block(sources, project_path),
                style=UIStyle.BLUE.value,
            )
        )

    def render_installed(self, installed: list[InstalledSkill], project_path: Path) -> None:
        if not installed:
            self.console.print(
                UISection.note(
                    "installed",
                    "No installed skills found.",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "installed",
                InstalledTable.installed_table(installed, project_path),
                style=UIStyle.CYAN.value,
            )
        )

    def render_removal(self, results: list[SyncResult]) -> None:
        if not any(result.files_removed or result.errors for result in results):
            self.console.print(
                UISection.note(
                    "remove",
                    "No matching skills were installed.",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        self.render_results(results)

    def render_results(self, results: list[SyncResult]) -> None:
        if any(
            result.files_created or result.files_updated or result.files_removed
            for result in results
        ):
            self.console.print(
                UISection.wrap(
                    "files",
                    ResultsTable.files_table(results),
                    style=UIStyle.CYAN.value,
                )
            )
        self.console.print(ResultsTable.stats_panel(results))

        errors = [
            f"- {result.agent_id}: {compact_home_paths_in_text(error)}"
            for result in results
            for error in result.errors
        ]
        if errors:
            self.console.print(
                UISection.note("errors", "\n".join(errors), style=UIStyle.RED.value)
            )

    def render_install_report(self, report: InstallReport) -> None:
        self.render_source(report.source, report.skills)
        if not report.skills:
            self.render_no_skills()
            return
        self.render_skills(report.skills)
        self.render_results(report.results)
