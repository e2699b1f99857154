"""Split raw console input into executable commands."""

from __future__ import annotations

COMMENT_PREFIXES = ("//", "#")


def split_commands(raw_text: str) -> list[str]:
    """Return trimmed, non-empty, non-comment lines in input order."""
    commands: list[str] = []
    for line in raw_text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIXES):
            continue
        commands.append(stripped)
    return commands
