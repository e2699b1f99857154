"""redis-cli style rendering of replies and outcomes."""

from __future__ import annotations

import json
from typing import Any

from redis_console.storage.models import (
    MAX_REPLY_DEPTH,
    TRUNCATED,
    ExecutionOutcome,
    ReplyKind,
    ReplyValue,
)


def format_reply(reply: Any) -> str:
    """Render a reply the way redis-cli prints it.

    Accepts a ``ReplyValue`` or any raw reply, which is classified once here.
    Total: unknown shapes fall back to ``str()``.

    >>> print(format_reply([b"a", [b"b", b"c"]]))
    1) "a"
    2) 1) "b"
       2) "c"
    """
    return _render(ReplyValue.from_raw(reply), 0)


def _render(reply: ReplyValue, depth: int) -> str:
    if depth >= MAX_REPLY_DEPTH:
        return TRUNCATED
    kind = reply.kind
    if kind is ReplyKind.NIL:
        return "(nil)"
    if kind is ReplyKind.TEXT:
        return quote_text(reply.value)
    if kind is ReplyKind.INTEGER:
        return f"(integer) {reply.value}"
    if kind is ReplyKind.SEQUENCE:
        return _render_sequence(reply.items, depth)
    if kind is ReplyKind.OBJECT:
        return json.dumps(reply.value, indent=2, ensure_ascii=False, default=str)
    return str(reply.value)


_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\a": "\\a",
    "\b": "\\b",
}


def quote_text(text: str) -> str:
    """Double-quote a string reply, escaping like redis-cli so it stays on one line."""
    out: list[str] = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _render_sequence(items: tuple[ReplyValue, ...], depth: int) -> str:
    if not items:
        return "(empty array)"

    # Right-align indices like redis-cli: " 9) ", "10) "
    width = len(str(len(items)))
    lines: list[str] = []
    for position, item in enumerate(items, 1):
        prefix = f"{position:>{width}}) "
        first, *rest = _render(item, depth + 1).split("\n")
        lines.append(prefix + first)
        pad = " " * len(prefix)
        lines.extend(pad + line for line in rest)
    return "\n".join(lines)


def format_outcome_body(outcome: ExecutionOutcome) -> str:
    """Formatted reply for a success, ``(error) message`` for a failure."""
    if outcome.failed:
        return f"(error) {outcome.result_text}"
    return outcome.result_text


def format_outcome(outcome: ExecutionOutcome) -> str:
    """Command echo followed by its result."""
    return f"> {outcome.command}\n{format_outcome_body(outcome)}"


def format_duration(ms: int) -> str:
    """Format milliseconds to human-readable duration."""
    if ms < 1000:
        return f"{ms}ms"
    elif ms < 60000:
        return f"{ms / 1000:.1f}s"
    else:
        minutes = ms // 60000
        seconds = (ms % 60000) // 1000
        return f"{minutes}m {seconds}s"
