"""
Helper functions for conversation history
"""

from src.services.errors import InputValidationError

VALID_ROLES = ("user", "assistant")


def normalize_history(history: list | None) -> list[dict[str, str]]:
    """
    Validate caller-supplied history and return it as plain ``{role, content}`` dicts.

    Order is kept as given (chronological). Raises InputValidationError on a turn with
    an unknown role or non-text content.
    """
    if not history:
        return []
    turns = []
    for i, turn in enumerate(history):
        if not isinstance(turn, dict):
            raise InputValidationError(f"history[{i}] must be an object with role and content")
        role = turn.get("role")
        content = turn.get("content")
        if role not in VALID_ROLES:
            raise InputValidationError(f"history[{i}].role must be one of {', '.join(VALID_ROLES)}")
        if not isinstance(content, str):
            raise InputValidationError(f"history[{i}].content must be text")
        turns.append({"role": role, "content": content})
    return turns


def format_transcript(history: list[dict[str, str]]) -> str:
    """Render turns as ``User: ...`` / ``Assistant: ...`` lines."""
    lines = []
    for msg in history:
        label = "User" if msg["role"] == "user" else "Assistant"
        lines.append(f"{label}: {msg['content'].strip()}")
    return "\n".join(lines)


def with_current_question(history: list[dict[str, str]], question: str) -> list[dict[str, str]]:
    """History plus the just-submitted user turn."""
    return [*history, {"role": "user", "content": question}]
