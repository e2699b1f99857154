"""Console session: submission, busy flag and outcome history."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from redis_console.config import AppConfig, ConnectionConfig
from redis_console.errors import BatchInProgressError
from redis_console.services.executor import run_batch
from redis_console.services.splitter import split_commands
from redis_console.storage.models import ExecutionOutcome

if TYPE_CHECKING:
    from redis_console.services.redis_client import RedisRunner

logger = logging.getLogger(__name__)


class History:
    """Newest-batch-first log of outcomes.

    Batches are only ever prepended whole, and the log is only ever cleared
    whole. ``limit`` of 0 keeps everything; otherwise the oldest entries are
    dropped once the log grows past it.
    """

    def __init__(self, limit: int = 0) -> None:
        self.limit = limit
        self._entries: tuple[ExecutionOutcome, ...] = ()

    def prepend_batch(self, outcomes: Sequence[ExecutionOutcome]) -> None:
        entries = tuple(outcomes) + self._entries
        if self.limit > 0:
            entries = entries[: self.limit]
        self._entries = entries

    def clear(self) -> None:
        self._entries = ()

    @property
    def entries(self) -> tuple[ExecutionOutcome, ...]:
        return self._entries

    def __iter__(self) -> Iterator[ExecutionOutcome]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class ConsoleSession:
    """One interactive console bound to a connection configuration."""

    def __init__(
        self,
        config: AppConfig,
        runner: RedisRunner,
        connection: ConnectionConfig | None = None,
    ) -> None:
        self.config = config
        self.runner = runner
        self.connection = connection or config.connection
        self.history = History(limit=config.console.history_limit)
        self._busy = False

    @property
    def busy(self) -> bool:
        """True while a batch is running; callers should hold back submissions."""
        return self._busy

    async def _execute(self, command: str):
        return await self.runner.execute(self.connection, command)

    async def submit(self, raw_text: str) -> list[ExecutionOutcome]:
        """Split, run and record one submission. Returns the batch's outcomes.

        Raises ``EmptyBatchError`` when nothing executable was submitted and
        ``BatchInProgressError`` when called while another batch is running.
        """
        if self._busy:
            raise BatchInProgressError()

        commands = split_commands(raw_text)
        self._busy = True
        try:
            outcomes = await run_batch(commands, self._execute)
        finally:
            self._busy = False

        self.history.prepend_batch(outcomes)
        logger.debug("History now holds %d outcome(s)", len(self.history))
        return outcomes

    def clear(self) -> None:
        """Empty the history."""
        self.history.clear()
        logger.debug("History cleared")
