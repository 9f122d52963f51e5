"""Destination naming and payload filtering for installed skills."""

import re
import uuid
from pathlib import Path
from typing import Callable

from skill_bridge.constants import (
    SKILL_PAYLOAD_EXCLUDED_FILES,
    SKILL_PAYLOAD_EXCLUDED_PREFIX,
    SKILL_PAYLOAD_IGNORED_DIRS,
)
from skill_bridge.logging_config import get_logger
from skill_bridge.skills.models import Skill
from skill_bridge.utils import is_under

logger = get_logger(__name__)

_INVALID_CHARS = re.compile(r"[^a-z0-9._-]+")
_REPEATED_SEPARATORS = re.compile(r"([._-])[._-]+")


def sanitize_skill_name(name: str) -> str:
    """Turn an arbitrary skill name into a safe folder name.

    The result only contains ``[a-z0-9._-]``, never starts or ends with a
    separator, and is never ``.`` or ``..``.
    """
    cleaned = _INVALID_CHARS.sub("-", name.strip().lower())
    cleaned = _REPEATED_SEPARATORS.sub(r"\1", cleaned)
    cleaned = cleaned.strip(".-_")
    if not cleaned:
        fallback = f"skill-{uuid.uuid4().hex[:8]}"
        logger.debug("Skill name %r sanitized to nothing, using %s", name, fallback)
        return fallback
    return cleaned


def skill_destination_name(skill: Skill) -> str:
    return sanitize_skill_name(skill.declared_name or skill.folder_name)


def skill_match_keys(skill: Skill, folder_name: str | None = None) -> set[str]:
    """Lowercased names a user may type to refer to ``skill``."""
    keys = {skill.name, folder_name or skill.folder_name, skill_destination_name(skill)}
    return {key.lower() for key in keys if key}


def is_excluded_payload(name: str) -> bool:
    """Top-level names next to SKILL.md that are not part of the payload."""
    return name in SKILL_PAYLOAD_EXCLUDED_FILES or name.startswith(
        SKILL_PAYLOAD_EXCLUDED_PREFIX
    )


def skill_copy_ignore(skill_root: Path) -> Callable[[str, list[str]], set[str]]:
    """Build a ``shutil.copytree`` ignore callback for one skill payload.

    Excluded names are only dropped beside SKILL.md. ``.git`` and symlinks
    pointing outside ``skill_root`` are dropped at every depth.
    """
    root = skill_root.resolve()

    def _ignore(directory: str, names: list[str]) -> set[str]:
        at_root = Path(directory).resolve() == root
        ignored: set[str] = set()
        for name in names:
            if name in SKILL_PAYLOAD_IGNORED_DIRS:
                ignored.add(name)
                continue
            if at_root and is_excluded_payload(name):
                ignored.add(name)
                continue
            entry = Path(directory) / name
            if entry.is_symlink() and not is_under(entry, root):
                logger.warning("Skipping symlink outside skill: %s", entry)
                ignored.add(name)
        return ignored

    return _ignore
