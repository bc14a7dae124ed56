"""Tests for the traversal context."""

import threading

import pytest

from conftest import FakeNode
from aws_path_analyzer.analyzer.context import TraversalContext
from aws_path_analyzer.analyzer.errors import TraversalCancelled


class TestTraversalContext:
    def test_visited_by_id(self):
        """BINARY: Distinct objects with one id are the same vertex."""
        ctx = TraversalContext()
        ctx.mark_visited(FakeNode("n1"))
        assert ctx.is_visited(FakeNode("n1")) is True
        assert ctx.is_visited(FakeNode("n2")) is False

    def test_mark_idempotent(self):
        ctx = TraversalContext()
        node = FakeNode("n1")
        ctx.mark_visited(node)
        ctx.mark_visited(node)
        assert ctx.visited_count == 1

    def test_holds_account_and_resolver(self, account_context):
        resolver = object()
        ctx = TraversalContext(account_context, resolver)
        assert ctx.account_context is account_context
        assert ctx.resolver is resolver

    def test_not_cancelled_by_default(self):
        ctx = TraversalContext()
        assert ctx.cancelled is False
        ctx.raise_if_cancelled()

    def test_cancellation(self):
        event = threading.Event()
        ctx = TraversalContext(cancel_event=event)
        event.set()
        assert ctx.cancelled is True
        with pytest.raises(TraversalCancelled):
            ctx.raise_if_cancelled()
