"""Project configuration loading."""

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from skill_bridge.constants import MCP_SOURCE_FILES, PROJECT_CONFIG_FILENAME
from skill_bridge.detector import DetectedProject, detect_project
from skill_bridge.errors import InvalidConfigError, MissingConfigFileError
from skill_bridge.logging_config import get_logger
from skill_bridge.mcp.codec import parse_mcp_manifest
from skill_bridge.mcp.models import MCPServer, mcp_server_from_dict
from skill_bridge.models import AgentConfig
from skill_bridge.rules.models import PathRule, Rule, RuleSet
from skill_bridge.utils import read_json_safe

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.json"

_LIST_FIELDS = (
    "languages",
    "frameworks",
    "tech_stack",
    "dev_commands",
    "build_commands",
    "test_commands",
    "coding_guidelines",
    "architecture_notes",
)


@lru_cache(maxsize=1)
def load_config_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


def validate_project_config(payload: Any, path: Path) -> None:
    validator = Draft202012Validator(load_config_schema())
    error = next(iter(validator.iter_errors(payload)), None)
    if error is not None:
        raise InvalidConfigError(path, format_schema_error(error))


def _rule_from_raw(raw: Any) -> Rule:
    if isinstance(raw, str):
        return Rule(content=raw)
    return Rule(
        content=raw["content"],
        id=raw.get("id"),
        category=raw.get("category"),
        priority=raw.get("priority"),
    )


def _rules_from_raw(raw: dict[str, Any] | None) -> RuleSet | None:
    if raw is None:
        return None
    return RuleSet(
        global_rules=[_rule_from_raw(item) for item in raw.get("global", [])],
        path_specific=[
            PathRule(
                pattern=item["pattern"],
                rules=[_rule_from_raw(rule) for rule in item.get("rules", [])],
            )
            for item in raw.get("path_specific", [])
        ],
    )


def parse_project_config(
    payload: dict[str, Any], path: Path
) -> tuple[AgentConfig, RuleSet | None]:
    validate_project_config(payload, path)

    servers = []
    for name, raw in (payload.get("mcp_servers") or {}).items():
        try:
            servers.append(mcp_server_from_dict(str(name), raw))
        except ValueError as exc:
            raise InvalidConfigError(path, str(exc)) from exc

    config = AgentConfig(
        project_name=payload.get("project_name"),
        description=payload.get("description"),
        mcp_servers=servers,
        **{field: list(payload.get(field) or []) for field in _LIST_FIELDS},
    )
    return config, _rules_from_raw(payload.get("rules"))


def load_project_config(path: Path) -> tuple[AgentConfig, RuleSet | None]:
    """Read and validate a ``skill-bridge.yaml`` file."""
    if not path.exists():
        raise MissingConfigFileError(path)
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidConfigError(path, f"YAML parse error: {exc}") from exc
    except OSError as exc:
        raise InvalidConfigError(path, str(exc)) from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidConfigError(path, "top-level value must be a mapping")
    return parse_project_config(payload, path)


@dataclass
class SyncSources:
    """Where ``sync`` found the settings it is about to render."""

    config: AgentConfig
    rules: RuleSet | None = None
    config_path: Path | None = None
    detected: DetectedProject | None = None
    mcp_path: Path | None = None


def load_mcp_sources(project_path: Path) -> tuple[list[MCPServer], Path | None]:
    """First existing MCP manifest of the project that declares servers."""
    for relative in MCP_SOURCE_FILES:
        path = project_path / relative
        payload, error = read_json_safe(path)
        if error:
            logger.warning("Ignoring unreadable MCP manifest %s: %s", path, error)
            continue
        if payload is None:
            continue
        servers = parse_mcp_manifest(payload)
        if servers:
            return servers, path
    return [], None


def load_sync_sources(project_path: Path, config_path: Path | None = None) -> SyncSources:
    """Resolve the settings rendered by ``sync``.

    An explicit config file must exist. Without one, ``skill-bridge.yaml`` in
    the project is used when present, otherwise the project's stack is
    detected from its manifest files. Existing MCP manifests fill in the
    servers when the config declares none.
    """
    default_path = project_path / PROJECT_CONFIG_FILENAME
    if config_path is not None or default_path.exists():
        path = config_path or default_path
        config, rules = load_project_config(path)
        sources = SyncSources(config=config, rules=rules, config_path=path)
    else:
        detected = detect_project(project_path)
        if detected is None:
            logger.info(
                "No %s and no known project files in %s",
                PROJECT_CONFIG_FILENAME,
                project_path,
            )
            config = AgentConfig(project_name=project_path.resolve().name)
        else:
            config = detected.to_agent_config(project_path)
        sources = SyncSources(config=config, detected=detected)

    if not sources.config.mcp_servers:
        servers, mcp_path = load_mcp_sources(project_path)
        if servers:
            logger.info("Using %d MCP server(s) from %s", len(servers), mcp_path)
            sources.config.mcp_servers = servers
            sources.mcp_path = mcp_path
    return sources
