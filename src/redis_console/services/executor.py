"""Sequential batch executor with per-command failure isolation."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from redis_console.errors import CommandError, EmptyBatchError
from redis_console.storage.models import ExecutionOutcome, ReplyValue

logger = logging.getLogger(__name__)

Execute = Callable[[str], Awaitable[Any]]


async def run_batch(commands: Sequence[str], execute: Execute) -> list[ExecutionOutcome]:
    """Run commands one at a time, in order, recording one outcome each.

    ``execute`` is awaited exactly once per command. Whatever it raises is
    recorded as a failed outcome and the batch moves on to the next command.
    Only an empty ``commands`` raises (``EmptyBatchError``).
    """
    if not commands:
        raise EmptyBatchError()

    logger.info("Running batch of %d command(s)", len(commands))
    outcomes: list[ExecutionOutcome] = []
    last_stamp = 0.0

    for index, command in enumerate(commands):
        start = time.monotonic()
        reply: ReplyValue | None = None
        error: str | None = None
        try:
            reply = ReplyValue.from_raw(await execute(command))
        except CommandError as e:
            error = str(e) or type(e).__name__
            logger.warning("Command failed: %s (%s)", command, error)
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.exception("Unexpected error executing command: %s", command)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        # Wall clock may step backwards; keep stamps non-decreasing within the batch
        last_stamp = max(time.time(), last_stamp)
        outcomes.append(
            ExecutionOutcome(
                command=command,
                success=error is None,
                reply=reply,
                error=error,
                timestamp=last_stamp,
                index=index,
                execution_time_ms=elapsed_ms,
            )
        )

    failed = sum(1 for o in outcomes if o.failed)
    logger.info("Batch finished: %d command(s), %d failed", len(outcomes), failed)
    return outcomes
