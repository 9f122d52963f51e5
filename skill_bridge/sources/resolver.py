"""Normalize user-supplied repository sources into a clonable location."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from skill_bridge.errors import SourceParseError
from skill_bridge.logging_config import get_logger
from skill_bridge.sources.models import ParsedSource

logger = get_logger(__name__)

_SHORTHAND_RE = re.compile(r"^([A-Za-z0-9_][A-Za-z0-9_.-]*)/([A-Za-z0-9_][A-Za-z0-9_.-]*)$")
_SSH_RE = re.compile(r"^[A-Za-z0-9_.-]+@[A-Za-z0-9_.-]+:[^\s]+$")

_HOSTED_DOMAINS = {"github.com", "www.github.com", "gitlab.com", "www.gitlab.com"}
_GENERIC_SCHEMES = {"http", "https", "ssh", "git", "file"}


def _strip_git_suffix(path: str) -> str:
    while path.endswith(".git"):
        path = path[: -len(".git")]
    return path


def _hosted_clone_url(host: str, repo_path: str) -> str:
    return f"https://{host}/{_strip_git_suffix(repo_path.strip('/'))}.git"


def _join_subpath(parts: list[str]) -> str | None:
    cleaned = [part for part in parts if part]
    return "/".join(cleaned) if cleaned else None


def _parse_github(host: str, parts: list[str]) -> ParsedSource | None:
    if len(parts) < 2:
        return None
    owner, repo = parts[0], _strip_git_suffix(parts[1])
    if not owner or not repo:
        return None
    clone_url = _hosted_clone_url(host, f"{owner}/{repo}")
    if len(parts) >= 4 and parts[2] == "tree":
        return ParsedSource(
            clone_url=clone_url, ref=parts[3], subpath=_join_subpath(parts[4:])
        )
    return ParsedSource(clone_url=clone_url)


def _parse_gitlab(host: str, parts: list[str]) -> ParsedSource | None:
    if "-" in parts:
        marker = parts.index("-")
        repo_parts = parts[:marker]
        rest = parts[marker + 1 :]
        if len(repo_parts) < 2:
            return None
        clone_url = _hosted_clone_url(host, "/".join(repo_parts))
        if len(rest) >= 2 and rest[0] == "tree":
            return ParsedSource(
                clone_url=clone_url, ref=rest[1], subpath=_join_subpath(rest[2:])
            )
        return ParsedSource(clone_url=clone_url)
    if len(parts) < 2:
        return None
    return ParsedSource(clone_url=_hosted_clone_url(host, "/".join(parts)))


def _parse_hosted_url(text: str) -> ParsedSource | None:
    parsed = urlparse(text)
    if parsed.scheme not in {"http", "https"} or parsed.netloc not in _HOSTED_DOMAINS:
        return None
    host = parsed.netloc.removeprefix("www.")
    parts = [part for part in parsed.path.split("/") if part]
    if host == "github.com":
        result = _parse_github(host, parts)
    else:
        result = _parse_gitlab(host, parts)
    if result is None:
        raise SourceParseError(text, "Repository path missing from URL")
    return result


def _parse_generic_url(text: str) -> ParsedSource | None:
    parsed = urlparse(text)
    if parsed.scheme not in _GENERIC_SCHEMES:
        return None
    if parsed.scheme == "file":
        if not parsed.path:
            return None
    elif not parsed.netloc or not parsed.path.strip("/"):
        return None
    return ParsedSource(clone_url=text.rstrip("/"))


def parse_source(source: str) -> ParsedSource:
    """Resolve ``source`` to a :class:`ParsedSource`.

    Accepts ``owner/repo`` shorthand, GitHub/GitLab web and tree URLs, SSH
    URLs (``git@host:owner/repo.git``) and any other syntactically valid Git
    URL. Raises :class:`SourceParseError` for anything else.
    """
    text = source.strip() if isinstance(source, str) else ""
    if not text:
        raise SourceParseError(str(source), "Empty repository source")

    match = _SHORTHAND_RE.match(text.rstrip("/"))
    if match and not text.startswith("."):
        owner, repo = match.group(1), _strip_git_suffix(match.group(2))
        if repo:
            result = ParsedSource(clone_url=f"https://github.com/{owner}/{repo}.git")
            logger.debug("Resolved shorthand %s -> %s", text, result.clone_url)
            return result

    hosted = _parse_hosted_url(text)
    if hosted is not None:
        logger.debug("Resolved hosted URL %s -> %s", text, hosted)
        return hosted

    if _SSH_RE.match(text):
        return ParsedSource(clone_url=text)

    generic = _parse_generic_url(text)
    if generic is not None:
        return generic

    raise SourceParseError(text)
