"""Per-traversal mutable state."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Optional

from .errors import TraversalCancelled

if TYPE_CHECKING:
    from .nodes import Node
    from .resolver import DestinationResolver


class TraversalContext:
    """Visited set, cancellation event and account handle for one traversal.

    Membership is by ``node_id``: two node objects with the same id are the
    same vertex. One context is built per direction of a top-level query and
    discarded afterwards; it must not be shared across concurrent calls.
    """

    def __init__(
        self,
        account_context: Any = None,
        resolver: Optional["DestinationResolver"] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.account_context = account_context
        self.resolver = resolver
        self.cancel_event = cancel_event or threading.Event()
        self._visited: set[str] = set()

    def mark_visited(self, node: "Node") -> None:
        self._visited.add(node.node_id)

    def is_visited(self, node: "Node") -> bool:
        return node.node_id in self._visited

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancel_event.is_set():
            raise TraversalCancelled("traversal cancelled")
