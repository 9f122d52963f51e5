"""Render and parse MCP server manifests."""

import json
import re
import tomllib
from copy import deepcopy
from typing import Any, Iterable

from skill_bridge.logging_config import get_logger
from skill_bridge.mcp.models import (
    CommandMCPServer,
    HttpMCPServer,
    MCPServer,
    mcp_server_from_dict,
)

logger = get_logger(__name__)

MCP_SERVERS_KEY = "mcpServers"
CODEX_SERVERS_KEY = "mcp_servers"

_ENV_PATTERN = re.compile(r"^\$\{(?:env:)?([A-Z_][A-Z0-9_]*)\}$")
_BEARER_PATTERN = re.compile(r"^Bearer\s+\$\{(?:env:)?([A-Z_][A-Z0-9_]*)\}$")
_BARE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def render_mcp_manifest(
    servers: Iterable[MCPServer], http_type: str = "sse"
) -> dict[str, Any]:
    mapped: dict[str, Any] = {}
    for server in servers:
        out: dict[str, Any] = {}
        if isinstance(server, HttpMCPServer):
            out["type"] = http_type
            out["url"] = server.url
            if server.headers:
                out["headers"] = deepcopy(server.headers)
        else:
            out["command"] = server.command
            out["args"] = [str(arg) for arg in server.args]
            if server.env:
                out["env"] = deepcopy(server.env)
        mapped[server.name] = out
    return {MCP_SERVERS_KEY: mapped}


def parse_mcp_manifest(payload: dict[str, Any] | str) -> list[MCPServer]:
    if isinstance(payload, str):
        payload = json.loads(payload) if payload.strip() else {}
    if not isinstance(payload, dict):
        return []
    raw_servers = payload.get(MCP_SERVERS_KEY)
    if not isinstance(raw_servers, dict):
        return []

    servers: list[MCPServer] = []
    for name, raw in raw_servers.items():
        if not isinstance(raw, dict):
            continue
        try:
            servers.append(mcp_server_from_dict(str(name), raw))
        except ValueError as exc:
            logger.warning("Skipping MCP server entry: %s", exc)
    return servers


def _extract_env_var(value: str) -> str | None:
    match = _ENV_PATTERN.match(value.strip())
    return match.group(1) if match else None


def _extract_bearer_env_var(value: str) -> str | None:
    match = _BEARER_PATTERN.match(value.strip())
    return match.group(1) if match else None


def _dump_toml_key(key: str) -> str:
    if _BARE_KEY_PATTERN.match(key):
        return key
    return _dump_toml_value(key)


_TOML_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _escape_toml_string(text: str) -> str:
    out: list[str] = []
    for char in text:
        if char in _TOML_ESCAPES:
            out.append(_TOML_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\u{ord(char):04x}")
        else:
            out.append(char)
    return "".join(out)


def _dump_toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        return "[" + ", ".join(_dump_toml_value(item) for item in value) + "]"
    return f'"{_escape_toml_string(str(value))}"'


def _dump_string_table(
    lines: list[str], table_name: str, values: dict[str, str]
) -> None:
    if not values:
        return
    lines.append(f"[{table_name}]")
    for key in sorted(values):
        lines.append(f"{_dump_toml_key(key)} = {_dump_toml_value(values[key])}")
    lines.append("")


def _codex_entry(server: MCPServer) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if isinstance(server, CommandMCPServer):
        out["command"] = server.command
        if server.args:
            out["args"] = list(server.args)
        env_vars: list[str] = []
        env_table: dict[str, str] = {}
        for key, value in server.env.items():
            env_name = _extract_env_var(value)
            if env_name is not None and env_name == key:
                env_vars.append(env_name)
            else:
                env_table[key] = value
        if env_vars:
            out["env_vars"] = sorted(set(env_vars))
        if env_table:
            out["env"] = env_table
        return out

    out["url"] = server.url
    http_headers: dict[str, str] = {}
    env_http_headers: dict[str, str] = {}
    for key, value in server.headers.items():
        bearer_env = (
            _extract_bearer_env_var(value) if key.lower() == "authorization" else None
        )
        if bearer_env is not None:
            out["bearer_token_env_var"] = bearer_env
            continue
        env_name = _extract_env_var(value)
        if env_name is None:
            http_headers[key] = value
        else:
            env_http_headers[key] = env_name
    if http_headers:
        out["http_headers"] = http_headers
    if env_http_headers:
        out["env_http_headers"] = env_http_headers
    return out


def render_codex_manifest(servers: Iterable[MCPServer]) -> str:
    lines: list[str] = []
    for server in sorted(servers, key=lambda item: item.name):
        entry = _codex_entry(server)
        table = f"{CODEX_SERVERS_KEY}.{_dump_toml_key(server.name)}"
        lines.append(f"[{table}]")
        for key in ["command", "args", "url", "env_vars", "bearer_token_env_var"]:
            if key in entry:
                lines.append(f"{key} = {_dump_toml_value(entry[key])}")
        lines.append("")
        for key in ["env", "http_headers", "env_http_headers"]:
            if key in entry:
                _dump_string_table(lines, f"{table}.{key}", entry[key])
    return "\n".join(lines).strip() + "\n"


def parse_codex_manifest(text: str) -> list[MCPServer]:
    payload = tomllib.loads(text) if text.strip() else {}
    raw_servers = payload.get(CODEX_SERVERS_KEY)
    if not isinstance(raw_servers, dict):
        return []

    servers: list[MCPServer] = []
    for name, raw in raw_servers.items():
        if not isinstance(raw, dict):
            continue
        url = raw.get("url")
        if isinstance(url, str):
            headers: dict[str, str] = {}
            for key, value in (raw.get("http_headers") or {}).items():
                headers[str(key)] = str(value)
            for key, env_name in (raw.get("env_http_headers") or {}).items():
                headers[str(key)] = f"${{{env_name}}}"
            bearer = raw.get("bearer_token_env_var")
            if isinstance(bearer, str):
                headers["Authorization"] = f"Bearer ${{{bearer}}}"
            servers.append(HttpMCPServer(name=name, url=url, headers=headers))
            continue

        command = raw.get("command")
        if not isinstance(command, str):
            continue
        env: dict[str, str] = {}
        for key in raw.get("env_vars") or []:
            env[str(key)] = f"${{{key}}}"
        for key, value in (raw.get("env") or {}).items():
            env[str(key)] = str(value)
        args = raw.get("args")
        servers.append(
            CommandMCPServer(
                name=name,
                command=command,
                args=[str(item) for item in args] if isinstance(args, list) else [],
                env=env,
            )
        )
    return servers
