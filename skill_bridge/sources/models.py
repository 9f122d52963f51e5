from dataclasses import dataclass


@dataclass(frozen=True)
class ParsedSource:
    clone_url: str
    ref: str | None = None
    subpath: str | None = None

    @property
    def repo_name(self) -> str:
        tail = self.clone_url.rstrip("/").rsplit("/", 1)[-1]
        tail = tail.rsplit(":", 1)[-1]
        if tail.endswith(".git"):
            tail = tail[: -len(".git")]
        return tail or "repository"
