"""Skills already installed in an agent's skills directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from skill_bridge.constants import SKILL_FILENAME
from skill_bridge.logging_config import get_logger
from skill_bridge.models import Scope
from skill_bridge.skills.installer import sanitize_skill_name, skill_match_keys
from skill_bridge.skills.models import Skill
from skill_bridge.skills.parser import parse_skill

logger = get_logger(__name__)


@dataclass(frozen=True)
class InstalledSkill:
    agent_id: str
    scope: Scope
    path: Path
    skill: Skill

    @property
    def folder_name(self) -> str:
        return self.path.name

    def matches(self, wanted: str) -> bool:
        key = wanted.strip().lower()
        if not key:
            return False
        keys = skill_match_keys(self.skill, folder_name=self.folder_name)
        return key in keys or sanitize_skill_name(key) in keys


def scan_skills_dir(skills_dir: Path, agent_id: str, scope: Scope) -> list[InstalledSkill]:
    """Immediate children of ``skills_dir`` holding a SKILL.md, by folder name."""
    if not skills_dir.is_dir():
        return []

    installed: list[InstalledSkill] = []
    for child in sorted(skills_dir.iterdir(), key=lambda item: item.name):
        if not child.is_dir() or not (child / SKILL_FILENAME).is_file():
            continue
        try:
            skill = parse_skill(child, SKILL_FILENAME)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", child / SKILL_FILENAME, exc)
            continue
        installed.append(
            InstalledSkill(agent_id=agent_id, scope=scope, path=child, skill=skill)
        )
    return installed
