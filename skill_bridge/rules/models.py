"""Rule data models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Rule:
    content: str
    id: str | None = None
    category: str | None = None
    priority: str | None = None


@dataclass(frozen=True)
class PathRule:
    pattern: str
    rules: list[Rule] = field(default_factory=list)


@dataclass(frozen=True)
class RuleSet:
    global_rules: list[Rule] = field(default_factory=list)
    path_specific: list[PathRule] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.global_rules and not self.path_specific
