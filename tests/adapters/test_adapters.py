import json
import tomllib
from pathlib import Path

import pytest

from skill_bridge.adapters import (
    AntigravityAdapter,
    ClaudeCodeAdapter,
    CodexAdapter,
    CopilotAdapter,
    CursorAdapter,
    OpenCodeAdapter,
    create_adapter_registry,
)
from skill_bridge.agents.registry import AGENT_PRIORITY, AgentId
from skill_bridge.mcp.models import CommandMCPServer, HttpMCPServer
from skill_bridge.models import AgentConfig, Scope
from skill_bridge.rules.models import PathRule, Rule, RuleSet
from skill_bridge.skills.discovery import discover_skills
from skill_bridge.skills.parser import parse_skill


def _config(**overrides) -> AgentConfig:
    values = dict(
        project_name="Demo",
        description="A demo project.",
        languages=["Python"],
        frameworks=["React"],
        tech_stack=["Postgres"],
        dev_commands=["make dev"],
        build_commands=["make build"],
        test_commands=["pytest"],
        coding_guidelines=["Keep functions small"],
        architecture_notes=["Hexagonal layout"],
        mcp_servers=[
            CommandMCPServer(
                name="fs",
                command="mcp-fs",
                display_name="Files",
                description="Read project files",
            ),
            HttpMCPServer(name="docs", url="https://docs.example.com/mcp"),
        ],
    )
    values.update(overrides)
    return AgentConfig(**values)


RULES = RuleSet(
    global_rules=[Rule("Prefer composition"), Rule("No print debugging")],
    path_specific=[
        PathRule("src/**/*.ts", [Rule("Use strict types")]),
        PathRule("src/*.ts", [Rule("Export one thing")]),
    ],
)


def _positions(text: str, markers: list[str]) -> list[int]:
    return [text.index(marker) for marker in markers]


@pytest.mark.parametrize(
    ("adapter", "markers"),
    [
        (
            ClaudeCodeAdapter(),
            ["A demo project.", "## Tech Stack", "## Python Guidelines", "## Build and Run",
             "## Architecture", "## Coding Guidelines", "## Available Tools (MCP)"],
        ),
        (
            CursorAdapter(),
            ["A demo project.", "## Tech Stack", "## React Guidelines", "## Commands",
             "## Architecture", "## Guidelines", "## Available Tools (MCP)"],
        ),
        (
            OpenCodeAdapter(),
            ["## Overview", "## Technology Stack", "## Python Guidelines", "## Commands",
             "## Architecture", "## Coding Guidelines", "## Available Tools (MCP)"],
        ),
        (
            CopilotAdapter(),
            ["## Project Overview", "## Technology Stack", "## Python Guidelines",
             "## Development Workflow", "## Architecture", "## Coding Standards"],
        ),
    ],
)
def test_agent_file_section_order(adapter, markers: list[str]) -> None:
    text = adapter.generate_agent_file(_config())

    positions = _positions(text, markers)
    assert positions == sorted(positions)


def test_agent_file_omits_empty_sections() -> None:
    text = ClaudeCodeAdapter().generate_agent_file(AgentConfig())

    assert text.startswith("# Project - Claude Instructions\n")
    for heading in ["## Tech Stack", "## Build and Run", "## Architecture", "## Available Tools"]:
        assert heading not in text


def test_agent_file_lists_mcp_servers() -> None:
    text = CodexAdapter().generate_agent_file(_config())

    assert "- **Files**: Read project files" in text
    assert "- **docs**" in text


def test_cursor_commands_are_combined() -> None:
    text = CursorAdapter().generate_agent_file(_config())

    assert "# Dev: make dev" in text
    assert "# Test: pytest" in text


def test_copilot_agent_file_has_no_mcp_section() -> None:
    text = CopilotAdapter().generate_agent_file(_config())

    assert "**Project:** Demo" in text
    assert "Available Tools" not in text


def test_claude_rules_are_json() -> None:
    payload = json.loads(ClaudeCodeAdapter().generate_rules_config(RULES))

    assert payload["rules"]["global"] == ["Prefer composition", "No print debugging"]
    assert payload["rules"]["pathSpecific"][0] == {
        "pattern": "src/**/*.ts",
        "rules": ["Use strict types"],
    }


def test_opencode_rules_are_json() -> None:
    payload = json.loads(OpenCodeAdapter().generate_rules_config(RULES))

    assert payload["rules"]["enabled"] is True
    assert payload["rules"]["patterns"]["src/*.ts"] == ["Export one thing"]


def test_cursor_rules_are_mdc_files() -> None:
    files = CursorAdapter().generate_rules_config(RULES)

    assert sorted(files) == ["global.mdc", "src-ts-2.mdc", "src-ts.mdc"]
    assert "alwaysApply: true" in files["global.mdc"]
    assert "- Prefer composition" in files["global.mdc"]
    assert "globs:" in files["src-ts.mdc"]
    assert "src/**/*.ts" in files["src-ts.mdc"]
    assert "alwaysApply: false" in files["src-ts.mdc"]


def test_copilot_rules_are_instruction_files() -> None:
    files = CopilotAdapter().generate_rules_config(RULES)

    assert "global.instructions.md" in files
    assert "applyTo:" in files["src-ts.instructions.md"]
    assert "# Instructions for src/**/*.ts" in files["src-ts.instructions.md"]


def test_antigravity_rules_are_markdown_files() -> None:
    files = AntigravityAdapter().generate_rules_config(RULES)

    assert files["global.md"].startswith("# Global Rules\n")
    assert "> Applies to: `src/*.ts`" in files["src-ts-2.md"]


def test_codex_has_no_rule_files() -> None:
    assert CodexAdapter().generate_rules_config(RULES) == {}


def test_mcp_configs() -> None:
    servers = _config().mcp_servers

    claude = json.loads(ClaudeCodeAdapter().generate_mcp_config(servers))
    codex = tomllib.loads(CodexAdapter().generate_mcp_config(servers))

    assert claude["mcpServers"]["docs"]["type"] == "sse"
    assert codex["mcp_servers"]["fs"]["command"] == "mcp-fs"
    assert CopilotAdapter().generate_mcp_config(servers) == "{}\n"


def test_paths_follow_scope(tmp_path: Path, project_dir: Path) -> None:
    antigravity = AntigravityAdapter()
    opencode = OpenCodeAdapter()

    assert antigravity.get_rules_path(project_dir) == project_dir / ".agent" / "rules"
    assert antigravity.get_rules_path(project_dir, global_scope=True) == tmp_path / ".gemini" / "rules"
    assert antigravity.get_agent_file_path(project_dir, True) == tmp_path / ".gemini" / "GEMINI.md"
    assert opencode.get_skills_path(project_dir) == project_dir / ".opencode" / "skill"
    assert opencode.get_skills_path(project_dir, True) == tmp_path / ".config" / "opencode" / "skill"
    assert CopilotAdapter().get_mcp_config_path(project_dir) is None


def test_is_installed_checks_home_markers(tmp_path: Path, project_dir: Path, monkeypatch) -> None:
    monkeypatch.chdir(project_dir)
    assert not ClaudeCodeAdapter().is_installed()
    assert not CopilotAdapter().is_installed()

    (tmp_path / ".claude").mkdir()
    (project_dir / ".github").mkdir()

    assert ClaudeCodeAdapter().is_installed()
    assert CopilotAdapter().is_installed()
    assert not CursorAdapter().is_installed()


def test_sync_writes_every_artifact(project_dir: Path, tmp_path: Path, make_skill) -> None:
    skill = parse_skill(make_skill(tmp_path / "src" / "helper", name="Helper Skill"))

    result = CursorAdapter().sync(project_dir, _config(), RULES, skills=[skill])

    assert result.success
    assert (project_dir / "AGENTS.md").is_file()
    assert (project_dir / ".cursor" / "rules" / "global.mdc").is_file()
    assert (project_dir / ".cursor" / "mcp.json").is_file()
    assert (project_dir / ".cursor" / "skills" / "helper-skill" / "SKILL.md").is_file()
    assert len(result.files_created) == 6
    assert result.files_updated == []


def test_sync_twice_updates_without_duplicates(project_dir: Path, tmp_path: Path, make_skill) -> None:
    skill = parse_skill(make_skill(tmp_path / "src" / "helper"))
    adapter = ClaudeCodeAdapter()

    first = adapter.sync(project_dir, _config(), RULES, skills=[skill])
    second = adapter.sync(project_dir, _config(), RULES, skills=[skill])

    assert first.files_updated == []
    assert second.files_created == []
    assert sorted(second.files_updated) == sorted(first.files_created)
    assert [p.name for p in (project_dir / ".claude" / "skills").iterdir()] == ["helper"]


def test_sync_without_servers_skips_mcp(project_dir: Path) -> None:
    result = ClaudeCodeAdapter().sync(project_dir, _config(mcp_servers=[]))

    assert result.success
    assert not (project_dir / ".claude" / "mcp.json").exists()


def test_copilot_sync_never_writes_mcp(project_dir: Path) -> None:
    result = CopilotAdapter().sync(project_dir, _config())

    assert result.success
    assert result.files_created == [str(project_dir / ".github" / "copilot-instructions.md")]


def test_codex_sync_writes_toml(project_dir: Path) -> None:
    result = CodexAdapter().sync(project_dir, _config(), RULES)

    assert result.success
    assert not (project_dir / ".codex" / "rules").exists()
    parsed = tomllib.loads((project_dir / ".codex" / "config.toml").read_text(encoding="utf-8"))
    assert set(parsed["mcp_servers"]) == {"fs", "docs"}


def test_sync_global_scope(tmp_path: Path, project_dir: Path) -> None:
    result = AntigravityAdapter().sync(project_dir, _config(), RULES, global_scope=True)

    assert result.success
    assert (tmp_path / ".gemini" / "GEMINI.md").is_file()
    assert (tmp_path / ".gemini" / "rules" / "global.md").is_file()
    assert not (project_dir / "AGENTS.md").exists()


def test_failed_write_is_recorded_and_others_continue(project_dir: Path) -> None:
    (project_dir / "CLAUDE.md").mkdir()

    result = ClaudeCodeAdapter().sync(project_dir, _config(), RULES)

    assert not result.success
    assert len(result.errors) == 1
    assert "CLAUDE.md" in result.errors[0]
    assert str(project_dir / ".claude" / "settings.json") in result.files_created
    assert str(project_dir / ".claude" / "mcp.json") in result.files_created


def test_skill_copy_excludes_payload_files(project_dir: Path, tmp_path: Path, make_skill) -> None:
    source = make_skill(tmp_path / "src" / "Fancy Skill")
    (source / "README.md").write_text("readme", encoding="utf-8")
    (source / "metadata.json").write_text("{}", encoding="utf-8")
    (source / "_drafts").mkdir()
    (source / "scripts").mkdir()
    (source / "scripts" / "run.sh").write_text("echo hi", encoding="utf-8")

    result = OpenCodeAdapter().install_skills(project_dir, [parse_skill(source)])

    dest = project_dir / ".opencode" / "skill" / "fancy-skill"
    assert result.files_created == [str(dest)]
    assert sorted(p.name for p in dest.iterdir()) == ["SKILL.md", "scripts"]
    assert not (project_dir / "AGENTS.md").exists()


def test_reinstall_replaces_stale_files(project_dir: Path, tmp_path: Path, make_skill) -> None:
    source = make_skill(tmp_path / "src" / "helper")
    adapter = ClaudeCodeAdapter()
    adapter.install_skills(project_dir, [parse_skill(source)])
    stale = project_dir / ".claude" / "skills" / "helper" / "old.txt"
    stale.write_text("old", encoding="utf-8")

    result = adapter.install_skills(project_dir, [parse_skill(source)])

    assert result.files_updated == [str(stale.parent)]
    assert not stale.exists()


def test_colliding_skill_names_get_distinct_folders(project_dir: Path, tmp_path: Path, make_skill) -> None:
    first = parse_skill(make_skill(tmp_path / "one" / "helper"))
    second = parse_skill(make_skill(tmp_path / "two" / "Helper"))

    result = ClaudeCodeAdapter().install_skills(project_dir, [first, second])

    assert result.success
    names = sorted(p.name for p in (project_dir / ".claude" / "skills").iterdir())
    assert names == ["helper", "helper-2"]



def test_sync_from_own_skills_dir_keeps_the_skill(project_dir: Path, make_skill) -> None:
    own = make_skill(project_dir / ".claude" / "skills" / "foo", name="foo")
    (own / "notes.txt").write_text("keep me", encoding="utf-8")
    skills = discover_skills(project_dir / ".claude" / "skills")

    claude = ClaudeCodeAdapter().install_skills(project_dir, skills)
    cursor = CursorAdapter().install_skills(project_dir, skills)

    assert claude.success
    assert claude.files_created == []
    assert claude.files_updated == []
    assert (own / "SKILL.md").is_file()
    assert (own / "notes.txt").read_text(encoding="utf-8") == "keep me"
    assert cursor.files_created == [str(project_dir / ".cursor" / "skills" / "foo")]
    assert (project_dir / ".cursor" / "skills" / "foo" / "notes.txt").is_file()


def test_installed_skills_lists_skill_folders(tmp_path: Path, project_dir: Path, make_skill) -> None:
    skills_dir = project_dir / ".cursor" / "skills"
    make_skill(skills_dir / "pdf-tools", name="PDF Tools")
    make_skill(skills_dir / "lint")
    (skills_dir / "not-a-skill").mkdir()
    make_skill(tmp_path / ".cursor" / "skills" / "global-one")
    adapter = CursorAdapter()

    local = adapter.installed_skills(project_dir)
    home = adapter.installed_skills(project_dir, global_scope=True)

    assert [item.folder_name for item in local] == ["lint", "pdf-tools"]
    assert [item.skill.name for item in local] == ["Lint", "PDF Tools"]
    assert {item.scope for item in local} == {Scope.PROJECT}
    assert [(item.folder_name, item.scope) for item in home] == [("global-one", Scope.GLOBAL)]


def test_remove_skills_by_name_or_folder(project_dir: Path, make_skill) -> None:
    skills_dir = project_dir / ".claude" / "skills"
    make_skill(skills_dir / "pdf-tools", name="PDF Tools")
    make_skill(skills_dir / "lint")
    make_skill(skills_dir / "docs")

    result = ClaudeCodeAdapter().remove_skills(
        project_dir, ["pdf tools", "LINT", "pdf-tools", "missing"]
    )

    assert result.success
    assert sorted(result.files_removed) == sorted(
        [str(skills_dir / "pdf-tools"), str(skills_dir / "lint")]
    )
    assert sorted(p.name for p in skills_dir.iterdir()) == ["docs"]


def test_plan_removal_without_matches(project_dir: Path) -> None:
    assert CodexAdapter().plan_removal(project_dir, ["anything"]) == []

def test_registry_is_immutable_and_ordered() -> None:
    registry = create_adapter_registry()

    assert list(registry) == list(AGENT_PRIORITY)
    assert isinstance(registry[AgentId.CODEX], CodexAdapter)
    with pytest.raises(TypeError):
        registry[AgentId.CODEX] = ClaudeCodeAdapter()  # type: ignore[index]
