"""Command guard - refuses commands the console cannot or should not run."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Commands that stream replies indefinitely; one request/one reply cannot serve them.
STREAMING_PATTERNS: list[tuple[str, str]] = [
    (r"^(subscribe|psubscribe|ssubscribe)\b", "Pub/sub subscriptions are not supported in the console"),
    (r"^monitor\b", "MONITOR streams indefinitely and is not supported"),
    (r"^p?sync\b", "Replication commands are not supported"),
]

UNSAFE_PATTERNS: list[tuple[str, str]] = [
    (r"^flush(all|db)\b", "Flushing data is disabled in safe mode"),
    (r"^shutdown\b", "SHUTDOWN is disabled in safe mode"),
    (r"^debug\b", "DEBUG is disabled in safe mode"),
    (r"^config\s+set\b", "CONFIG SET is disabled in safe mode"),
    (r"^script\s+flush\b", "SCRIPT FLUSH is disabled in safe mode"),
]


def _compile(patterns: list[tuple[str, str]]) -> list[tuple[re.Pattern[str], str]]:
    compiled: list[tuple[re.Pattern[str], str]] = []
    for pattern, reason in patterns:
        try:
            compiled.append((re.compile(pattern, re.IGNORECASE), reason))
        except re.error:
            logger.error("Invalid guard pattern: %s", pattern)
    return compiled


class CommandGuard:
    """Regex-based command guard."""

    def __init__(self) -> None:
        self._streaming = _compile(STREAMING_PATTERNS)
        self._unsafe = _compile(UNSAFE_PATTERNS)

    def check(self, command: str, safe_mode: bool = False) -> tuple[bool, str]:
        """Check if a command is refused. Returns (blocked, reason)."""
        text = command.strip()
        patterns = self._streaming + self._unsafe if safe_mode else self._streaming
        for compiled, reason in patterns:
            if compiled.search(text):
                logger.warning("Refused command: %s (reason: %s)", command, reason)
                return True, reason
        return False, ""


command_guard = CommandGuard()
