"""Shallow clones of remote repositories into scoped temp directories."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from skill_bridge.constants import TEMP_DIR_PREFIX
from skill_bridge.errors import CloneError, CloneReason
from skill_bridge.logging_config import get_logger
from skill_bridge.sources.models import ParsedSource

logger = get_logger(__name__)

_AUTH_MARKERS = (
    "authentication failed",
    "could not read username",
    "could not read password",
    "terminal prompts disabled",
    "permission denied (publickey)",
    "returned error: 403",
    "returned error: 401",
)
_NOT_FOUND_MARKERS = (
    "repository not found",
    "not found in upstream",
    "does not appear to be a git repository",
    "returned error: 404",
    "does not exist",
    "not found",
)
_NETWORK_MARKERS = (
    "could not resolve host",
    "failed to connect",
    "connection timed out",
    "connection refused",
    "network is unreachable",
)
# Generic transport failures, checked after the more specific markers.
_TRANSPORT_MARKERS = (
    "operation timed out",
    "unable to access",
    "could not read from remote repository",
)


def classify_clone_failure(stderr: str) -> CloneReason:
    lowered = stderr.lower()
    for reason, markers in (
        (CloneReason.AUTH, _AUTH_MARKERS),
        (CloneReason.NETWORK, _NETWORK_MARKERS),
        (CloneReason.NOT_FOUND, _NOT_FOUND_MARKERS),
        (CloneReason.NETWORK, _TRANSPORT_MARKERS),
    ):
        if any(marker in lowered for marker in markers):
            return reason
    return CloneReason.UNKNOWN


class ClonedRepository:
    """Handle on a temporary clone; ``release()`` removes it exactly once."""

    def __init__(self, temp_dir: Path, path: Path, source: ParsedSource) -> None:
        self.temp_dir = temp_dir
        self.path = path
        self.source = source
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        RepositoryFetcher.cleanup(self.temp_dir)


class RepositoryFetcher:
    def __init__(self, git_executable: str = "git", temp_root: Path | None = None) -> None:
        self.git_executable = git_executable
        self.temp_root = temp_root

    def clone(self, source: ParsedSource) -> ClonedRepository:
        temp_dir = Path(
            tempfile.mkdtemp(
                prefix=TEMP_DIR_PREFIX,
                dir=str(self.temp_root) if self.temp_root is not None else None,
            )
        )
        target = temp_dir / source.repo_name
        args = [self.git_executable, "clone", "--depth", "1"]
        if source.ref:
            args.extend(["--branch", source.ref])
        args.extend([source.clone_url, str(target)])

        logger.info("Cloning %s", source.clone_url)
        logger.debug("Running: %s", " ".join(args))
        try:
            self._run_git(args, source.clone_url)
        except BaseException:
            self.cleanup(temp_dir)
            raise
        return ClonedRepository(temp_dir=temp_dir, path=target, source=source)

    @contextmanager
    def cloned(self, source: ParsedSource) -> Iterator[ClonedRepository]:
        repository = self.clone(source)
        try:
            yield repository
        finally:
            repository.release()

    @staticmethod
    def cleanup(path: Path) -> None:
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            return
        logger.debug("Removed temporary clone %s", path)

    def _run_git(self, args: list[str], url: str) -> None:
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"
        try:
            result = subprocess.run(
                args, capture_output=True, text=True, check=False, env=env
            )
        except FileNotFoundError as exc:
            raise CloneError(url, CloneReason.GIT_MISSING, str(exc)) from exc
        if result.returncode != 0:
            stderr = result.stderr.strip() or result.stdout.strip()
            reason = classify_clone_failure(stderr)
            logger.warning("git clone failed (%s): %s", reason.value, stderr)
            raise CloneError(url, reason, stderr)
