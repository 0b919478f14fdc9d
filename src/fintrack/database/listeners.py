"""In-process change listeners.

A listener subscribes to one collection (accounts, transactions, ...) of one
user and is called with the full current list of that collection whenever a
write touching it is committed, and once immediately on subscribe.
"""

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[[list[Any]], None]
Loader = Callable[[int], list[Any]]

COLLECTIONS = (
    "accounts",
    "transactions",
    "budgets",
    "recurring",
    "recurring_incomes",
    "goals",
    "notifications",
)


class ListenerRegistry:
    """Registry of change callbacks keyed by (collection, user_id)."""

    def __init__(self, loaders: dict[str, Loader]):
        """Initialize the registry.

        Args:
            loaders: Map of collection name to a function returning the
                current contents of that collection for a user.
        """
        unknown = set(loaders) - set(COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown collections: {', '.join(sorted(unknown))}")
        self._loaders = loaders
        self._listeners: dict[tuple[str, int], list[Listener]] = defaultdict(list)

    def subscribe(self, collection: str, user_id: int, callback: Listener) -> Callable[[], None]:
        """Register a callback and deliver the current snapshot.

        Returns:
            A function that removes the callback. Calling it twice is a no-op.
        """
        if collection not in self._loaders:
            raise ValueError(f"Unknown collection '{collection}'")

        key = (collection, user_id)
        self._listeners[key].append(callback)
        self._deliver(collection, user_id, [callback])

        def unsubscribe() -> None:
            callbacks = self._listeners.get(key)
            if callbacks and callback in callbacks:
                callbacks.remove(callback)
                if not callbacks:
                    del self._listeners[key]

        return unsubscribe

    def listener_count(self, collection: str, user_id: int) -> int:
        return len(self._listeners.get((collection, user_id), []))

    def notify(self, collection: str, user_id: int) -> None:
        """Deliver a fresh snapshot to every listener of a collection."""
        callbacks = list(self._listeners.get((collection, user_id), []))
        if callbacks:
            self._deliver(collection, user_id, callbacks)

    def _deliver(self, collection: str, user_id: int, callbacks: list[Listener]) -> None:
        try:
            snapshot = self._loaders[collection](user_id)
        except Exception:
            # Same as a failing listener: the write is already committed.
            logger.exception("Loading %s of user %s for listeners failed", collection, user_id)
            return
        for callback in callbacks:
            try:
                callback(list(snapshot))
            except Exception:
                # A failing listener must not undo a committed write.
                logger.exception(
                    "Listener for %s of user %s raised", collection, user_id
                )
