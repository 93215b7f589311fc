"""
Static prompt library.

Activities name a template from this library in ``prompt_template``.
"""

from stories.core.exceptions import UnknownPromptError

PROMPT_LIBRARY: dict[str, str] = {
    "generate-ui": "Given the following spec, generate minimal HTML/TSX with Tailwind:",
    "lint-code": "Given the code below, check for lint issues and suggest fixes:",
    "create-component": "Create a React component with the following requirements:",
    "setup-database": "Set up a database with the following schema:",
    "write-tests": "Write comprehensive tests for the following code:",
    "refactor-code": "Refactor the following code to improve readability and maintainability:",
    "debug-issue": "Debug the following issue and provide a solution:",
    "optimize-performance": "Analyze and optimize the performance of the following code:",
    "validate-outcome": "Validate that the following outcome has been achieved:",
    "update-state": "Update the current state based on the following changes:",
}


def get_prompt(name: str, context: str | None = None) -> str:
    """
    Look up a base prompt, optionally followed by context.

    Args:
        name: Template name
        context: Text appended after a blank line

    Returns:
        The assembled prompt

    Raises:
        UnknownPromptError: If the name is not in the library

    Example:
        >>> get_prompt("debug-issue", "TypeError in main()")
        'Debug the following issue and provide a solution:\\n\\nTypeError in main()'
    """
    base_prompt = PROMPT_LIBRARY.get(name)
    if base_prompt is None:
        raise UnknownPromptError(name)
    return f"{base_prompt}\n\n{context}" if context else base_prompt


def list_prompts() -> list[tuple[str, str]]:
    """All (name, base prompt) pairs in library order."""
    return list(PROMPT_LIBRARY.items())
