import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Callable, Optional

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from skill_bridge.sources.fetcher import RepositoryFetcher  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("skill_bridge")
    package_logger.handlers.clear()
    package_logger.propagate = True


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def temp_root(tmp_path: Path) -> Path:
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def make_skill() -> Callable[..., Path]:
    def _make(
        directory: Path,
        name: Optional[str] = None,
        description: str = "",
        body: str = "Do the thing.\n",
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        lines: list[str] = []
        if name is not None or description:
            lines.append("---")
            if name is not None:
                lines.append(f"name: {name}")
            if description:
                lines.append(f"description: {description}")
            lines.append("---")
        lines.append(body)
        (directory / "SKILL.md").write_text("\n".join(lines), encoding="utf-8")
        return directory

    return _make


class LocalTreeFetcher(RepositoryFetcher):
    """Clones by copying a prepared directory instead of running git."""

    def __init__(self, tree: Path, temp_root: Path) -> None:
        super().__init__(temp_root=temp_root)
        self.tree = tree
        self.calls: list[list[str]] = []

    def _run_git(self, args: list[str], url: str) -> None:
        self.calls.append(args)
        shutil.copytree(self.tree, Path(args[-1]), symlinks=True)


@pytest.fixture
def repo_tree(tmp_path: Path) -> Path:
    path = tmp_path / "remote-repo"
    path.mkdir()
    return path


@pytest.fixture
def local_fetcher(repo_tree: Path, temp_root: Path) -> LocalTreeFetcher:
    return LocalTreeFetcher(repo_tree, temp_root)


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
