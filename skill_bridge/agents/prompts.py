"""Text blocks shared by generated agent instruction files."""

from typing import Iterable


DEFAULT_AGENT_INTRO = """You are an expert AI coding assistant working on this project. Follow these instructions carefully to provide the best assistance.

## Your Behavior

- **Be precise**: Write clean, efficient code following the project's conventions
- **Be proactive**: Suggest improvements and catch potential issues early
- **Be thorough**: Consider edge cases, error handling, and testing
- **Be concise**: Explain only what's necessary, focus on the code
- **Ask clarifying questions** when requirements are ambiguous
"""

TECH_PROMPTS: dict[str, str] = {
    "typescript": """## TypeScript Guidelines

- Use strict TypeScript with proper type annotations
- Prefer interfaces over type aliases for object shapes
- Use `unknown` instead of `any` when type is uncertain
- Enable strict null checks and handle nullability properly
""",
    "react": """## React Guidelines

- Use functional components with hooks
- Keep components small and focused
- Memoize expensive computations with useMemo/useCallback
""",
    "node": """## Node.js Guidelines

- Use async/await for asynchronous operations
- Use environment variables for configuration
- Add request validation and sanitization
""",
    "flutter": """## Flutter Guidelines

- Follow Flutter's widget composition patterns
- Use const constructors where possible
- Follow Dart naming conventions
""",
    "python": """## Python Guidelines

- Follow PEP 8 style guidelines
- Use type hints for function signatures
- Write docstrings for public functions
- Handle exceptions appropriately
""",
}

MCP_INTRO = """## Available Tools (MCP)

You have access to the following tools through the Model Context Protocol.
Use them when appropriate to assist with tasks:
"""


def prompt_for_tech_stack(technologies: Iterable[str]) -> str:
    """Join the guidance blocks for known technologies, once each."""
    seen: set[str] = set()
    prompts: list[str] = []
    for tech in technologies:
        key = tech.strip().lower()
        prompt = TECH_PROMPTS.get(key)
        if prompt is None or key in seen:
            continue
        seen.add(key)
        prompts.append(prompt)
    return "\n".join(prompts)
