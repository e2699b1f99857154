"""Tests for the batch executor."""

from __future__ import annotations

import pytest

from redis_console.errors import CommandError, EmptyBatchError, NoCommandsError
from redis_console.services.executor import run_batch
from redis_console.services.splitter import split_commands
from redis_console.storage.models import ReplyKind, ReplyValue
from redis_console.utils.formatting import format_outcome_body


def make_execute(failing: set[int], commands: list[str]):
    calls: list[str] = []

    async def execute(command: str):
        calls.append(command)
        index = len(calls) - 1
        if index in failing:
            raise CommandError(f"failed {commands[index]}")
        return ReplyValue.integer(index)

    return execute, calls


class TestRunBatch:
    @pytest.mark.asyncio
    async def test_empty_batch_raises(self):
        async def execute(command):
            raise AssertionError("should not execute")

        with pytest.raises(EmptyBatchError):
            await run_batch([], execute)

    @pytest.mark.asyncio
    async def test_comment_only_input_raises(self):
        async def execute(command):
            raise AssertionError("should not execute")

        commands = split_commands("# nothing\n\n// here")
        assert commands == []
        with pytest.raises(NoCommandsError):
            await run_batch(commands, execute)

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_batch(self):
        replies = {"BADCMD": CommandError("unknown command"), "DBSIZE": ReplyValue.integer(3)}

        async def execute(command):
            reply = replies[command]
            if isinstance(reply, Exception):
                raise reply
            return reply

        outcomes = await run_batch(["BADCMD", "DBSIZE"], execute)

        assert len(outcomes) == 2
        assert outcomes[0].failed
        assert outcomes[0].error == "unknown command"
        assert outcomes[0].reply is None
        assert outcomes[1].success
        assert format_outcome_body(outcomes[1]) == "(integer) 3"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", [set(), {0}, {4}, {1, 3}, {0, 1, 2, 3, 4}])
    async def test_outcomes_match_failing_subset(self, failing):
        commands = [f"CMD {i}" for i in range(5)]
        execute, calls = make_execute(failing, commands)

        outcomes = await run_batch(commands, execute)

        assert calls == commands
        assert [o.command for o in outcomes] == commands
        assert {i for i, o in enumerate(outcomes) if o.failed} == failing

    @pytest.mark.asyncio
    async def test_unexpected_exception_recorded(self):
        async def execute(command):
            if command == "BOOM":
                raise RuntimeError("connection reset")
            return "ok"

        outcomes = await run_batch(["BOOM", "PING"], execute)
        assert outcomes[0].error == "connection reset"
        assert outcomes[1].success

    @pytest.mark.asyncio
    async def test_exception_without_message_uses_class_name(self):
        async def execute(command):
            raise ConnectionError()

        outcomes = await run_batch(["PING"], execute)
        assert outcomes[0].error == "ConnectionError"

    @pytest.mark.asyncio
    async def test_raw_replies_classified(self):
        async def execute(command):
            return [b"a", 1, None]

        outcomes = await run_batch(["LRANGE x 0 -1"], execute)
        reply = outcomes[0].reply
        assert reply.kind is ReplyKind.SEQUENCE
        assert [item.kind for item in reply.items] == [ReplyKind.TEXT, ReplyKind.INTEGER, ReplyKind.NIL]

    @pytest.mark.asyncio
    async def test_timestamps_non_decreasing_and_keys_unique(self):
        async def execute(command):
            return None

        outcomes = await run_batch(["PING"] * 20, execute)
        stamps = [o.timestamp for o in outcomes]
        assert stamps == sorted(stamps)
        assert len({o.key for o in outcomes}) == 20
        assert [o.index for o in outcomes] == list(range(20))

    @pytest.mark.asyncio
    async def test_repeated_invocations_independent(self):
        async def execute(command):
            return command

        first = await run_batch(["A"], execute)
        second = await run_batch(["B", "C"], execute)
        assert [o.command for o in first] == ["A"]
        assert [o.command for o in second] == ["B", "C"]
