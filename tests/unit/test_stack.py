"""Unit tests for ScopeStack."""

import pytest
from structlog.testing import capture_logs

from box_harness.commands import CommandScope
from box_harness.errors import BoxAPIError, LifecycleError
from box_harness.stack import ScopeStack
from tests.mocks import RecordingCommand


def resolve(command):
    return "client"


class TestPushPop:
    """Tests for stack bookkeeping."""

    def test_new_stack_is_empty(self):
        stack = ScopeStack(CommandScope.TEST)
        assert len(stack) == 0
        assert not stack
        assert stack.peek() is None
        assert stack.leaked == ()

    def test_push_pop_is_lifo(self, command_log):
        stack = ScopeStack(CommandScope.TEST)
        first = RecordingCommand("first", command_log)
        second = RecordingCommand("second", command_log)
        stack.push(first)
        stack.push(second)

        assert stack.entries() == (first, second)
        assert stack.peek() is second
        assert stack.pop() is second
        assert stack.pop() is first

    def test_pop_empty_raises(self):
        with pytest.raises(LifecycleError, match="empty"):
            ScopeStack(CommandScope.CLASS).pop()

    def test_push_rejects_other_scope(self, command_log):
        """A class-scoped command never lands on a test stack."""
        stack = ScopeStack(CommandScope.TEST)
        with pytest.raises(LifecycleError, match="class-scoped"):
            stack.push(RecordingCommand("c", command_log, scope=CommandScope.CLASS))
        assert len(stack) == 0


class TestDrain:
    """Tests for draining."""

    @pytest.mark.asyncio
    async def test_drain_disposes_in_reverse_push_order(self, command_log):
        stack = ScopeStack(CommandScope.TEST)
        labels = [f"cmd{i}" for i in range(5)]
        for label in labels:
            stack.push(RecordingCommand(label, command_log))

        disposed = await stack.drain(resolve)

        assert disposed == 5
        assert [entry[1] for entry in command_log] == list(reversed(labels))
        assert len(stack) == 0

    @pytest.mark.asyncio
    async def test_drain_uses_resolved_client(self, command_log):
        stack = ScopeStack(CommandScope.TEST)
        stack.push(RecordingCommand("a", command_log))

        await stack.drain(lambda command: f"client-for-{command.label}")

        assert command_log == [("dispose", "a", "client-for-a")]

    @pytest.mark.asyncio
    async def test_drain_empty_stack(self):
        assert await ScopeStack(CommandScope.CLASS).drain(resolve) == 0

    @pytest.mark.asyncio
    async def test_drain_stops_at_first_failure(self, command_log):
        """A failing disposal propagates and the rest are recorded as leaked."""
        error = BoxAPIError("conflict", status_code=409)
        stack = ScopeStack(CommandScope.TEST)
        bottom = RecordingCommand("bottom", command_log)
        middle = RecordingCommand("middle", command_log, dispose_error=error)
        top = RecordingCommand("top", command_log)
        for command in (bottom, middle, top):
            stack.push(command)

        with capture_logs() as logs:
            with pytest.raises(BoxAPIError) as exc_info:
                await stack.drain(resolve)

        assert exc_info.value is error
        assert [entry[1] for entry in command_log] == ["top", "middle"]
        assert stack.leaked == (middle, bottom)
        assert len(stack) == 0
        failure = next(log for log in logs if log["event"] == "scope_drain_failed")
        assert failure["leaked"] == ["middle", "bottom"]
        assert failure["disposed"] == 1
