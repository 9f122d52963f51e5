from typing import Final


SKILL_FILENAME: Final[str] = "SKILL.md"
PROJECT_CONFIG_FILENAME: Final[str] = "skill-bridge.yaml"

MAX_DISCOVERY_DEPTH: Final[int] = 5

CONVENTIONAL_SKILL_DIRS: Final[tuple[str, ...]] = (
    "skills",
    "skills/.curated",
    "skills/.experimental",
)

DISCOVERY_IGNORED_DIRS: Final[tuple[str, ...]] = (
    ".git",
    "node_modules",
)

SKILL_PAYLOAD_EXCLUDED_FILES: Final[tuple[str, ...]] = (
    "README.md",
    "metadata.json",
)
SKILL_PAYLOAD_EXCLUDED_PREFIX: Final[str] = "_"
SKILL_PAYLOAD_IGNORED_DIRS: Final[tuple[str, ...]] = (".git",)

TEMP_DIR_PREFIX: Final[str] = "skill-bridge-"

# Existing MCP manifests picked up by ``sync`` when the config declares none.
MCP_SOURCE_FILES: Final[tuple[str, ...]] = (
    ".mcp/mcp.json",
    ".claude/mcp.json",
    ".cursor/mcp.json",
)
