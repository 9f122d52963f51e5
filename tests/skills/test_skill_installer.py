import os
import re
import shutil
from pathlib import Path

import pytest

from skill_bridge.skills.installer import (
    is_excluded_payload,
    sanitize_skill_name,
    skill_copy_ignore,
    skill_destination_name,
    skill_match_keys,
)
from skill_bridge.skills.models import Skill


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Foo / Bar!!", "foo-bar"),
        ("My_Skill.v2", "my_skill.v2"),
        ("a--b__c", "a-b_c"),
        ("  -leading and trailing- ", "leading-and-trailing"),
        ("../../etc/passwd", "etc-passwd"),
    ],
)
def test_sanitize_skill_name(name: str, expected: str) -> None:
    assert sanitize_skill_name(name) == expected


@pytest.mark.parametrize("name", ["", ".", "..", "!!!", "___"])
def test_sanitize_falls_back_to_random_name(name: str) -> None:
    result = sanitize_skill_name(name)

    assert re.fullmatch(r"skill-[0-9a-f]{8}", result)


@pytest.mark.parametrize("name", ["Foo / Bar!!", "..", "Ünïcode Skill", "x" * 3])
def test_sanitized_names_are_safe(name: str) -> None:
    result = sanitize_skill_name(name)

    assert re.fullmatch(r"[a-z0-9._-]+", result)
    assert result not in {".", ".."}


def test_destination_prefers_declared_name(tmp_path: Path) -> None:
    named = Skill("Web Design", "", tmp_path / "web", {"name": "Web Design"})
    unnamed = Skill("Pdf Tools", "", tmp_path / "PDF_Tools", {})

    assert skill_destination_name(named) == "web-design"
    assert skill_destination_name(unnamed) == "pdf_tools"


def test_payload_exclusions() -> None:
    assert is_excluded_payload("README.md")
    assert is_excluded_payload("metadata.json")
    assert is_excluded_payload("_drafts")
    assert not is_excluded_payload("SKILL.md")
    assert not is_excluded_payload("readme.txt")


def test_copy_ignore_drops_outside_symlinks(tmp_path: Path) -> None:
    skill = tmp_path / "skill"
    skill.mkdir()
    (skill / "SKILL.md").write_text("x", encoding="utf-8")
    (skill / "inside.txt").write_text("x", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("x", encoding="utf-8")
    os.symlink(tmp_path / "secret.txt", skill / "leak.txt")
    os.symlink(skill / "inside.txt", skill / "alias.txt")

    ignored = skill_copy_ignore(skill)(
        str(skill), ["SKILL.md", "inside.txt", "leak.txt", "alias.txt", "README.md"]
    )

    assert ignored == {"leak.txt", "README.md"}


def test_copy_keeps_nested_payload_files(tmp_path: Path) -> None:
    skill = tmp_path / "skill"
    (skill / "scripts" / "pkg").mkdir(parents=True)
    (skill / "references").mkdir()
    (skill / "SKILL.md").write_text("x", encoding="utf-8")
    (skill / "README.md").write_text("repo readme", encoding="utf-8")
    (skill / "_drafts.md").write_text("draft", encoding="utf-8")
    (skill / "scripts" / "pkg" / "__init__.py").write_text("", encoding="utf-8")
    (skill / "scripts" / "_helpers.py").write_text("", encoding="utf-8")
    (skill / "references" / "README.md").write_text("ref", encoding="utf-8")
    (skill / "references" / "metadata.json").write_text("{}", encoding="utf-8")
    dest = tmp_path / "dest"

    shutil.copytree(skill, dest, symlinks=True, ignore=skill_copy_ignore(skill))

    assert (dest / "scripts" / "pkg" / "__init__.py").is_file()
    assert (dest / "scripts" / "_helpers.py").is_file()
    assert (dest / "references" / "README.md").is_file()
    assert (dest / "references" / "metadata.json").is_file()
    assert not (dest / "README.md").exists()
    assert not (dest / "_drafts.md").exists()


def test_copy_skips_git_directories(tmp_path: Path) -> None:
    skill = tmp_path / "repo"
    (skill / ".git" / "objects").mkdir(parents=True)
    (skill / "vendor" / ".git").mkdir(parents=True)
    (skill / "SKILL.md").write_text("x", encoding="utf-8")
    (skill / "vendor" / "tool.sh").write_text("", encoding="utf-8")
    dest = tmp_path / "dest"

    shutil.copytree(skill, dest, symlinks=True, ignore=skill_copy_ignore(skill))

    assert (dest / "SKILL.md").is_file()
    assert (dest / "vendor" / "tool.sh").is_file()
    assert not (dest / ".git").exists()
    assert not (dest / "vendor" / ".git").exists()


def test_match_keys_cover_name_folder_and_installed_folder(tmp_path: Path) -> None:
    skill = Skill("Web Design", "", tmp_path / "Web_Design", {"name": "Web Design"})

    assert skill_match_keys(skill) == {"web design", "web_design", "web-design"}
    assert "custom" in skill_match_keys(skill, folder_name="Custom")
