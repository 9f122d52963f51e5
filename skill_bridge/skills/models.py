"""Skill data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Skill:
    name: str
    description: str
    source_path: Path
    frontmatter: dict[str, str] = field(default_factory=dict)

    @property
    def folder_name(self) -> str:
        return self.source_path.name

    @property
    def declared_name(self) -> str | None:
        return self.frontmatter.get("name") or None
