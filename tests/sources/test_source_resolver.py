import pytest

from skill_bridge.errors import SourceParseError
from skill_bridge.sources.models import ParsedSource
from skill_bridge.sources.resolver import parse_source


def test_shorthand_resolves_to_github() -> None:
    assert parse_source("vercel-labs/agent-skills") == ParsedSource(
        "https://github.com/vercel-labs/agent-skills.git", None, None
    )


def test_shorthand_strips_whitespace_and_git_suffix() -> None:
    parsed = parse_source("  owner/repo.git  ")

    assert parsed.clone_url == "https://github.com/owner/repo.git"


def test_github_tree_url_extracts_ref_and_subpath() -> None:
    parsed = parse_source("https://github.com/owner/repo/tree/main/skills/frontend")

    assert parsed == ParsedSource(
        "https://github.com/owner/repo.git", "main", "skills/frontend"
    )


def test_github_tree_url_without_subpath() -> None:
    parsed = parse_source("https://github.com/owner/repo/tree/v1.2.0/")

    assert parsed.ref == "v1.2.0"
    assert parsed.subpath is None


@pytest.mark.parametrize(
    "source",
    [
        "https://github.com/owner/repo",
        "https://github.com/owner/repo/",
        "https://github.com/owner/repo.git",
        "https://github.com/owner/repo.git.git",
        "https://www.github.com/owner/repo",
        "https://github.com/owner/repo/issues/12",
    ],
)
def test_github_urls_normalize_to_repo_root(source: str) -> None:
    parsed = parse_source(source)

    assert parsed.clone_url == "https://github.com/owner/repo.git"
    assert parsed.ref is None
    assert parsed.subpath is None


def test_gitlab_subgroup_tree_url() -> None:
    parsed = parse_source("https://gitlab.com/group/sub/repo/-/tree/dev/skills/lint")

    assert parsed == ParsedSource("https://gitlab.com/group/sub/repo.git", "dev", "skills/lint")


def test_gitlab_plain_url_keeps_full_path() -> None:
    parsed = parse_source("https://gitlab.com/group/sub/repo.git/")

    assert parsed.clone_url == "https://gitlab.com/group/sub/repo.git"


def test_ssh_url_passes_through() -> None:
    parsed = parse_source("git@github.com:owner/repo.git")

    assert parsed == ParsedSource("git@github.com:owner/repo.git")
    assert parsed.repo_name == "repo"


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("https://git.example.com/team/repo.git/", "https://git.example.com/team/repo.git"),
        ("ssh://git@example.com/team/repo.git", "ssh://git@example.com/team/repo.git"),
        ("file:///srv/git/repo", "file:///srv/git/repo"),
    ],
)
def test_generic_git_urls_pass_through(source: str, expected: str) -> None:
    assert parse_source(source).clone_url == expected


@pytest.mark.parametrize(
    "source",
    ["", "   ", "not a source", "ftp://example.com/repo", "https://example.com", "owner"],
)
def test_unrecognized_sources_raise(source: str) -> None:
    with pytest.raises(SourceParseError):
        parse_source(source)


def test_hosted_url_without_repo_raises() -> None:
    with pytest.raises(SourceParseError, match="Repository path missing"):
        parse_source("https://github.com/owner")


def test_repo_name_from_clone_url() -> None:
    assert ParsedSource("https://github.com/o/agent-skills.git").repo_name == "agent-skills"
    assert ParsedSource("file:///srv/git/tools/").repo_name == "tools"
