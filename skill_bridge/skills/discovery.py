"""Locate skill bundles inside an arbitrary repository tree."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Iterable

from skill_bridge.agents.registry import project_skill_dirs
from skill_bridge.constants import (
    CONVENTIONAL_SKILL_DIRS,
    DISCOVERY_IGNORED_DIRS,
    MAX_DISCOVERY_DEPTH,
    SKILL_FILENAME,
)
from skill_bridge.logging_config import get_logger
from skill_bridge.skills.models import Skill
from skill_bridge.skills.parser import parse_skill
from skill_bridge.utils import is_under

logger = get_logger(__name__)


class SkillDiscovery:
    """Find directories holding a ``SKILL.md`` manifest.

    Search order, stopping at the first rule that yields anything:

    1. the search root itself is a skill;
    2. immediate children of the conventional skill directories;
    3. a breadth-first walk bounded by ``max_depth``.

    Every candidate must resolve under the repository root, so symlinks
    pointing outside the clone are never followed into results.
    """

    def __init__(
        self,
        conventional_dirs: Iterable[str] | None = None,
        max_depth: int = MAX_DISCOVERY_DEPTH,
    ) -> None:
        if conventional_dirs is None:
            conventional_dirs = [*CONVENTIONAL_SKILL_DIRS, *project_skill_dirs()]
        self.conventional_dirs = list(dict.fromkeys(conventional_dirs))
        self.max_depth = max_depth

    def discover(self, root_dir: Path, subpath: str | None = None) -> list[Skill]:
        root = Path(root_dir).resolve()
        search_root = root
        if subpath:
            search_root = (root / subpath).resolve()
            if not is_under(search_root, root):
                logger.warning("Subpath escapes repository root, ignored: %s", subpath)
                return []
        if not search_root.is_dir():
            logger.info("Search root does not exist: %s", search_root)
            return []

        for rule in (self._root_skill, self._conventional_skills, self._walk_skills):
            candidates = rule(root, search_root)
            skills = self._build_skills(root, candidates)
            if skills:
                logger.debug(
                    "Discovery rule %s found %d skill(s)", rule.__name__, len(skills)
                )
                return skills
        return []

    def _root_skill(self, root: Path, search_root: Path) -> list[Path]:
        if _has_manifest(search_root):
            return [search_root]
        return []

    def _conventional_skills(self, root: Path, search_root: Path) -> list[Path]:
        candidates: list[Path] = []
        for relative in self.conventional_dirs:
            container = search_root / relative
            if not container.is_dir() or not is_under(container, root):
                continue
            for child in sorted(container.iterdir(), key=lambda item: item.name):
                if child.is_dir() and _has_manifest(child):
                    candidates.append(child)
        return candidates

    def _walk_skills(self, root: Path, search_root: Path) -> list[Path]:
        candidates: list[Path] = []
        visited: set[Path] = set()
        queue: deque[tuple[Path, int]] = deque([(search_root, 0)])

        while queue:
            current, depth = queue.popleft()
            resolved = current.resolve()
            if resolved in visited or not is_under(resolved, root):
                continue
            visited.add(resolved)

            if _has_manifest(resolved):
                candidates.append(resolved)
                continue
            if depth >= self.max_depth:
                continue

            try:
                children = sorted(resolved.iterdir(), key=lambda item: item.name)
            except OSError as exc:
                logger.debug("Cannot list %s: %s", resolved, exc)
                continue
            for child in children:
                if child.name in DISCOVERY_IGNORED_DIRS or not child.is_dir():
                    continue
                queue.append((child, depth + 1))
        return candidates

    @staticmethod
    def _build_skills(root: Path, candidates: list[Path]) -> list[Skill]:
        skills: list[Skill] = []
        seen: set[Path] = set()
        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved in seen:
                continue
            if not is_under(resolved, root) or not is_under(
                resolved / SKILL_FILENAME, root
            ):
                logger.warning("Skipping skill outside repository: %s", candidate)
                continue
            seen.add(resolved)
            try:
                skills.append(parse_skill(resolved, SKILL_FILENAME))
            except OSError as exc:
                logger.warning("Cannot read %s: %s", resolved / SKILL_FILENAME, exc)
        return skills


def _has_manifest(directory: Path) -> bool:
    return (directory / SKILL_FILENAME).is_file()


def discover_skills(root_dir: Path, subpath: str | None = None) -> list[Skill]:
    return SkillDiscovery().discover(root_dir, subpath)
