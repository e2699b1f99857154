"""Data models for redis-console."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Nesting guard for reply conversion; deeper levels collapse to a placeholder.
MAX_REPLY_DEPTH = 256
TRUNCATED = "(nested reply truncated)"


class ReplyKind(str, Enum):
    NIL = "nil"
    INTEGER = "integer"
    TEXT = "text"
    SEQUENCE = "sequence"
    OBJECT = "object"
    OTHER = "other"


@dataclass(frozen=True)
class ReplyValue:
    """A reply from the server, tagged with its shape.

    ``value`` holds an ``int`` for INTEGER, a ``str`` for TEXT, a tuple of
    ``ReplyValue`` for SEQUENCE, a plain ``dict`` for OBJECT and the untouched
    raw value for OTHER.
    """

    kind: ReplyKind
    value: Any = None

    @classmethod
    def nil(cls) -> ReplyValue:
        return cls(ReplyKind.NIL)

    @classmethod
    def integer(cls, value: int) -> ReplyValue:
        return cls(ReplyKind.INTEGER, value)

    @classmethod
    def text(cls, value: str) -> ReplyValue:
        return cls(ReplyKind.TEXT, value)

    @classmethod
    def sequence(cls, items: list[ReplyValue] | tuple[ReplyValue, ...] = ()) -> ReplyValue:
        return cls(ReplyKind.SEQUENCE, tuple(items))

    @classmethod
    def mapping(cls, mapping: Mapping[Any, Any]) -> ReplyValue:
        return cls(ReplyKind.OBJECT, dict(mapping))

    @classmethod
    def other(cls, value: Any) -> ReplyValue:
        return cls(ReplyKind.OTHER, value)

    @classmethod
    def from_raw(cls, raw: Any, _depth: int = 0) -> ReplyValue:
        """Classify a loosely typed reply (redis-py or JSON-decoded) once."""
        if isinstance(raw, ReplyValue):
            return raw
        if raw is None:
            return cls.nil()
        # bool is an int subclass but is not an integer reply
        if isinstance(raw, bool):
            return cls.other(raw)
        if isinstance(raw, int):
            return cls.integer(raw)
        if isinstance(raw, bytes):
            return cls.text(raw.decode("utf-8", errors="replace"))
        if isinstance(raw, str):
            return cls.text(raw)
        if isinstance(raw, (list, tuple, set, frozenset)):
            if _depth >= MAX_REPLY_DEPTH:
                return cls.other(TRUNCATED)
            return cls.sequence([cls.from_raw(item, _depth + 1) for item in raw])
        if isinstance(raw, Mapping):
            return cls.mapping(_plain(raw, _depth))
        return cls.other(raw)

    @property
    def items(self) -> tuple[ReplyValue, ...]:
        if self.kind is not ReplyKind.SEQUENCE:
            return ()
        return self.value


def _plain(raw: Any, depth: int) -> Any:
    """Reduce a mapping reply to JSON-friendly builtins, keeping key order."""
    if depth >= MAX_REPLY_DEPTH:
        return TRUNCATED
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    if isinstance(raw, Mapping):
        return {_key(k): _plain(v, depth + 1) for k, v in raw.items()}
    if isinstance(raw, (list, tuple, set, frozenset)):
        return [_plain(item, depth + 1) for item in raw]
    return raw


def _key(key: Any) -> Any:
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    if key is None or isinstance(key, (str, int, float, bool)):
        return key
    return str(key)


@dataclass(frozen=True)
class ExecutionOutcome:
    """Recorded result of one command from a batch."""

    command: str
    success: bool
    reply: ReplyValue | None = None
    error: str | None = None
    timestamp: float = 0.0
    index: int = 0
    execution_time_ms: int = 0

    @property
    def failed(self) -> bool:
        return not self.success

    @property
    def key(self) -> str:
        """Unique display key: creation time plus position in the batch."""
        return f"{self.timestamp:.6f}-{self.index}"

    @property
    def result_text(self) -> str:
        """Formatted reply on success, the error message on failure."""
        if self.failed:
            return self.error or ""
        from redis_console.utils.formatting import format_reply

        return format_reply(self.reply)
