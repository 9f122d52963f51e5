from enum import Enum
from pathlib import Path


class SkillBridgeError(Exception):
    """Base user-facing application error."""


class SourceParseError(SkillBridgeError):
    def __init__(self, source: str, message: str = "Unrecognized repository source") -> None:
        self.source = source
        self.message = message
        super().__init__(f"{message}: {source!r}")


class CloneReason(str, Enum):
    AUTH = "auth"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    GIT_MISSING = "git_missing"
    UNKNOWN = "unknown"


class CloneError(SkillBridgeError):
    def __init__(self, url: str, reason: CloneReason, detail: str = "") -> None:
        self.url = url
        self.reason = reason
        self.detail = detail
        message = {
            CloneReason.AUTH: "Authentication failed",
            CloneReason.NOT_FOUND: "Repository or ref not found",
            CloneReason.NETWORK: "Network error",
            CloneReason.GIT_MISSING: "git executable not found",
        }.get(reason, "Clone failed")
        text = f"{message} while cloning {url}"
        if detail:
            text = f"{text}\n{detail}"
        super().__init__(text)


class SkillBridgeFileError(SkillBridgeError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class WriteError(SkillBridgeFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Failed to write ({detail})")


class MissingConfigFileError(SkillBridgeFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Missing required config file")


class InvalidConfigError(SkillBridgeFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config ({detail})")


class UnknownAgentError(SkillBridgeError):
    def __init__(self, agent: str) -> None:
        self.agent = agent
        super().__init__(f"Unknown agent: {agent}")
