"""Parse SKILL.md manifests with YAML frontmatter."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from skill_bridge.logging_config import get_logger
from skill_bridge.skills.models import Skill

logger = get_logger(__name__)

_FRONTMATTER_RE = re.compile(r"^\ufeff?---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)


def humanize_name(folder_name: str) -> str:
    words = re.split(r"[-_\s]+", folder_name.strip())
    return " ".join(word[:1].upper() + word[1:].lower() for word in words if word)


def _flatten(raw: dict[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in raw.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{name}."))
        elif isinstance(value, list):
            flat[name] = ", ".join(str(item) for item in value)
        elif value is None:
            continue
        else:
            flat[name] = str(value)
    return flat


def parse_frontmatter(text: str) -> dict[str, str]:
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}
    try:
        raw = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed skill frontmatter: %s", exc)
        return {}
    if not isinstance(raw, dict):
        return {}
    return _flatten(raw)


def parse_skill(skill_dir: Path, manifest_name: str = "SKILL.md") -> Skill:
    text = (skill_dir / manifest_name).read_text(encoding="utf-8", errors="replace")
    frontmatter = parse_frontmatter(text)
    name = frontmatter.get("name", "").strip() or humanize_name(skill_dir.name)
    return Skill(
        name=name,
        description=frontmatter.get("description", "").strip(),
        source_path=skill_dir,
        frontmatter=frontmatter,
    )
