import json
from pathlib import Path

from skill_bridge.utils import (
    compact_home_path,
    compact_home_paths_in_text,
    dump_json,
    is_under,
    read_json_safe,
    write_text,
)


# --- is_under ---


def test_is_under_path_under_root(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()

    assert is_under(root / "child" / "file.txt", root)


def test_is_under_path_outside_root(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()

    assert not is_under(tmp_path / "other", root)
    assert not is_under(root / ".." / "other", root)


def test_is_under_follows_symlinks(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (tmp_path / "outside").mkdir()
    (root / "link").symlink_to(tmp_path / "outside")

    assert not is_under(root / "link", root)


# --- dump_json / write_text ---


def test_dump_json_is_indented_with_newline() -> None:
    text = dump_json({"a": [1]})

    assert text.endswith("}\n")
    assert json.loads(text) == {"a": [1]}
    assert '\n  "a"' in text


def test_write_text_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "c.md"

    write_text(target, "hi")

    assert target.read_text(encoding="utf-8") == "hi"


# --- compact_home_path ---


def test_compact_home_path(tmp_path: Path) -> None:
    assert compact_home_path(tmp_path) == "~"
    assert compact_home_path(tmp_path / ".claude" / "skills") == "~/.claude/skills"
    assert compact_home_path("/elsewhere/file") == "/elsewhere/file"


def test_compact_home_paths_in_text(tmp_path: Path) -> None:
    text = f"Failed to write: {tmp_path}/.cursor/mcp.json"

    assert compact_home_paths_in_text(text) == "Failed to write: ~/.cursor/mcp.json"


# --- read_json_safe ---


def test_read_json_safe(tmp_path: Path) -> None:
    good = tmp_path / "good.json"
    good.write_text('{"a": 1}', encoding="utf-8")
    empty = tmp_path / "empty.json"
    empty.write_text("", encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("{nope", encoding="utf-8")

    assert read_json_safe(good) == ({"a": 1}, None)
    assert read_json_safe(empty) == (None, None)
    assert read_json_safe(tmp_path / "missing.json") == (None, None)
    payload, error = read_json_safe(broken)
    assert payload is None
    assert error
