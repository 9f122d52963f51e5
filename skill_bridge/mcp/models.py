from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class MCPServerType(str, Enum):
    COMMAND = "command"
    HTTP = "http"


@dataclass(frozen=True)
class CommandMCPServer:
    TYPE: ClassVar[MCPServerType] = MCPServerType.COMMAND

    name: str
    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    display_name: str | None = None
    description: str | None = None

    @property
    def type(self) -> MCPServerType:
        return self.TYPE


@dataclass(frozen=True)
class HttpMCPServer:
    TYPE: ClassVar[MCPServerType] = MCPServerType.HTTP

    name: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    display_name: str | None = None
    description: str | None = None

    @property
    def type(self) -> MCPServerType:
        return self.TYPE


MCPServer = Union[CommandMCPServer, HttpMCPServer]


def mcp_server_from_dict(name: str, raw: dict[str, Any]) -> MCPServer:
    """Build the server variant matching ``raw``.

    Exactly one of ``command`` or ``url`` must be present.
    """
    command = raw.get("command")
    url = raw.get("url")
    if command is not None and url is not None:
        raise ValueError(f"MCP server {name!r} declares both command and url")

    display_name = raw.get("displayName") or raw.get("display_name")
    description = raw.get("description")

    if isinstance(command, str) and command:
        args = raw.get("args")
        env = raw.get("env")
        return CommandMCPServer(
            name=name,
            command=command,
            args=[str(item) for item in args] if isinstance(args, list) else [],
            env={str(k): str(v) for k, v in env.items()}
            if isinstance(env, dict)
            else {},
            display_name=str(display_name) if display_name else None,
            description=str(description) if description else None,
        )

    if isinstance(url, str) and url:
        headers = raw.get("headers")
        return HttpMCPServer(
            name=name,
            url=url,
            headers={str(k): str(v) for k, v in headers.items()}
            if isinstance(headers, dict)
            else {},
            display_name=str(display_name) if display_name else None,
            description=str(description) if description else None,
        )

    raise ValueError(f"MCP server {name!r} needs either a command or a url")
