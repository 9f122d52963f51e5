import shutil
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from skill_bridge.constants import TEMP_DIR_PREFIX
from skill_bridge.errors import WriteError
from skill_bridge.logging_config import get_logger
from skill_bridge.models import Action, ActionKind, ActionStatus, SyncResult
from skill_bridge.skills.installer import skill_copy_ignore
from skill_bridge.utils import write_text

logger = get_logger(__name__)


class ActionHandler(Protocol):
    def handle(self, action: Action) -> Optional[ActionStatus]: ...


class WriteTextHandler:
    def handle(self, action: Action) -> Optional[ActionStatus]:
        if not isinstance(action.payload, str):
            raise ValueError(f"Missing text payload for write action: {action.path}")
        write_text(action.path, action.payload)
        return None


def _remove_path(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


class CopyTreeHandler:
    """Copy a skill folder, replacing whatever sits at the destination.

    The copy is staged next to the destination and only swapped in once it
    completed, so a failed copy leaves the previous install untouched.
    """

    def handle(self, action: Action) -> Optional[ActionStatus]:
        if action.source is None:
            raise ValueError(f"Missing source for copy action: {action.path}")
        source = action.source.resolve()
        target = action.path.parent.resolve() / action.path.name
        if source == target or (action.path.is_symlink() and action.path.resolve() == source):
            logger.debug("Skill already in place: %s", action.path)
            return ActionStatus.NOOP
        if source in target.parents or target in source.parents:
            raise ValueError(f"Source {source} and destination overlap")
        if not source.is_dir():
            raise FileNotFoundError(f"Skill source not found: {source}")

        action.path.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{TEMP_DIR_PREFIX}", dir=action.path.parent))
        try:
            staged = staging / action.path.name
            shutil.copytree(
                source,
                staged,
                symlinks=True,
                ignore=skill_copy_ignore(source),
            )
            _remove_path(action.path)
            staged.rename(action.path)
        finally:
            shutil.rmtree(staging, ignore_errors=True)
        return None


class RemoveTreeHandler:
    def handle(self, action: Action) -> Optional[ActionStatus]:
        if not (action.path.exists() or action.path.is_symlink()):
            return ActionStatus.NOOP
        _remove_path(action.path)
        return ActionStatus.REMOVE


class SyncExecutor:
    """Run planned actions for one agent, one failure never stopping the rest."""

    def __init__(self, handlers: Optional[dict[ActionKind, ActionHandler]] = None) -> None:
        self.handlers: dict[ActionKind, ActionHandler] = handlers or {
            ActionKind.WRITE_TEXT: WriteTextHandler(),
            ActionKind.COPY_TREE: CopyTreeHandler(),
            ActionKind.REMOVE_TREE: RemoveTreeHandler(),
        }

    def execute(self, agent_id: str, actions: list[Action]) -> SyncResult:
        result = SyncResult(agent_id=agent_id)
        for action in actions:
            status, failure = self.run_action(action)
            if failure is not None:
                result.errors.append(failure)
                continue
            result.record(action.path, status)
        return result

    def run_action(self, action: Action) -> tuple[ActionStatus, Optional[str]]:
        handler = self.handlers.get(action.kind)
        if handler is None:
            return ActionStatus.FAILED, f"Unknown action kind: {action.kind.value}"

        existed = _exists(action.path)
        try:
            status = handler.handle(action)
        except (OSError, ValueError) as exc:
            error = WriteError(action.path, str(exc))
            logger.warning("%s: %s", action.detail, error)
            return ActionStatus.FAILED, str(error)

        logger.debug("%s -> %s", action.detail, action.path)
        if status is not None:
            return status, None
        return (ActionStatus.UPDATE if existed else ActionStatus.CREATE), None


def _exists(path: Path) -> bool:
    return path.exists() or path.is_symlink()
