"""Per-agent rule compilers."""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Callable

import yaml

from skill_bridge.rules.models import PathRule, Rule, RuleSet

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]+")

GLOBAL_RULES_NAME = "global"


def safe_pattern_name(pattern: str) -> str:
    """Turn a glob pattern into a filename stem, e.g. ``src/**/*.ts`` -> ``src-ts``."""
    return _UNSAFE_FILENAME_CHARS.sub("-", pattern).strip("-") or "pattern"


def _contents(rules: list[Rule]) -> list[str]:
    return [rule.content for rule in rules]


def _bullets(rules: list[Rule]) -> list[str]:
    return [f"- {rule.content}" for rule in rules]


class IRulesCompiler(ABC):
    @abstractmethod
    def compile(self, rules: RuleSet) -> str | dict[str, str]:
        """Return a single document or a filename -> content map."""


class PerPatternRulesCompiler(IRulesCompiler):
    """One file for global rules plus one per glob pattern."""

    suffix: str = ".md"

    def compile(self, rules: RuleSet) -> dict[str, str]:
        files: dict[str, str] = {}
        if rules.global_rules:
            files[f"{GLOBAL_RULES_NAME}{self.suffix}"] = self.render_global(
                rules.global_rules
            )
        for path_rule in rules.path_specific:
            filename = self._unique_filename(safe_pattern_name(path_rule.pattern), files)
            files[filename] = self.render_pattern(path_rule)
        return files

    def _unique_filename(self, stem: str, taken: dict[str, str]) -> str:
        filename = f"{stem}{self.suffix}"
        counter = 2
        while filename in taken:
            filename = f"{stem}-{counter}{self.suffix}"
            counter += 1
        return filename

    @abstractmethod
    def render_global(self, rules: list[Rule]) -> str:
        raise NotImplementedError

    @abstractmethod
    def render_pattern(self, path_rule: PathRule) -> str:
        raise NotImplementedError


class CursorRulesCompiler(PerPatternRulesCompiler):
    """Compile to Cursor .mdc files with YAML frontmatter."""

    suffix = ".mdc"

    def _render(self, description: str, rules: list[Rule], glob: str | None = None) -> str:
        fm: dict[str, Any] = {"description": description}
        if glob:
            fm["globs"] = glob
        fm["alwaysApply"] = glob is None

        parts: list[str] = []
        parts.append("---")
        parts.append(yaml.dump(fm, default_flow_style=False, sort_keys=False).rstrip())
        parts.append("---")
        parts.append("")
        parts.extend(_bullets(rules))
        return "\n".join(parts) + "\n"

    def render_global(self, rules: list[Rule]) -> str:
        return self._render("Global Rules", rules)

    def render_pattern(self, path_rule: PathRule) -> str:
        return self._render(
            f"Rules for {path_rule.pattern}", path_rule.rules, path_rule.pattern
        )


class CopilotRulesCompiler(PerPatternRulesCompiler):
    """Compile to GitHub Copilot ``.instructions.md`` files."""

    suffix = ".instructions.md"

    def _render(self, title: str, rules: list[Rule], apply_to: str | None = None) -> str:
        fm: dict[str, Any] = {}
        if apply_to:
            fm["applyTo"] = apply_to

        parts: list[str] = ["---"]
        if fm:
            parts.append(yaml.dump(fm, default_flow_style=False, sort_keys=False).rstrip())
        parts.append("---")
        parts.append("")
        parts.append(f"# {title}")
        parts.append("")
        parts.extend(_bullets(rules))
        return "\n".join(parts) + "\n"

    def render_global(self, rules: list[Rule]) -> str:
        return self._render("Global coding guidelines", rules)

    def render_pattern(self, path_rule: PathRule) -> str:
        return self._render(
            f"Instructions for {path_rule.pattern}", path_rule.rules, path_rule.pattern
        )


class MarkdownRulesCompiler(PerPatternRulesCompiler):
    """Compile to plain markdown rule files."""

    suffix = ".md"

    def render_global(self, rules: list[Rule]) -> str:
        return "\n".join(["# Global Rules", "", *_bullets(rules)]) + "\n"

    def render_pattern(self, path_rule: PathRule) -> str:
        parts = [
            f"# Rules for {path_rule.pattern}",
            "",
            f"> Applies to: `{path_rule.pattern}`",
            "",
            *_bullets(path_rule.rules),
        ]
        return "\n".join(parts) + "\n"


class JsonRulesCompiler(IRulesCompiler):
    """Compile to a JSON settings document built by ``build``."""

    def __init__(self, build: Callable[[RuleSet], dict[str, Any]]) -> None:
        self._build = build

    def compile(self, rules: RuleSet) -> str:
        return json.dumps(self._build(rules), indent=2) + "\n"


class NoRulesCompiler(IRulesCompiler):
    def compile(self, rules: RuleSet) -> dict[str, str]:
        return {}


def claude_settings(rules: RuleSet) -> dict[str, Any]:
    payload: dict[str, Any] = {"global": _contents(rules.global_rules)}
    if rules.path_specific:
        payload["pathSpecific"] = [
            {"pattern": item.pattern, "rules": _contents(item.rules)}
            for item in rules.path_specific
        ]
    return {"rules": payload}


def opencode_settings(rules: RuleSet) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "enabled": True,
        "global": _contents(rules.global_rules),
    }
    if rules.path_specific:
        patterns: dict[str, list[str]] = {}
        for item in rules.path_specific:
            patterns.setdefault(item.pattern, []).extend(_contents(item.rules))
        payload["patterns"] = patterns
    return {"rules": payload}
