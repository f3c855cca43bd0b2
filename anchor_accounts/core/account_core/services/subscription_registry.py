"""Account change subscriptions.

One registry entry (and one underlying websocket listener) per address,
however many callers subscribe to it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from anchor_accounts.core.logging import log

CHANGE_EVENT = "change"

Handler = Callable[[Any], Any]


class AccountEventSource:
    """Callback fan-out for decoded account updates."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def on(self, event: str, handler: Handler) -> Handler:
        self._handlers.setdefault(event, []).append(handler)
        return handler

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event) or []
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str = CHANGE_EVENT) -> int:
        return len(self._handlers.get(event) or [])

    def emit(self, event: str, value: Any) -> int:
        """Call every handler for ``event``; return how many were called."""
        handlers = list(self._handlers.get(event) or [])
        for handler in handlers:
            try:
                handler(value)
            except Exception as exc:
                # a bad handler must not tear down the websocket listener
                log.error(f"{event} handler failed: {exc!r}", source="subscriptions")
        return len(handlers)


@dataclass
class Subscription:
    event_source: AccountEventSource
    listener: Any


class SubscriptionRegistry:
    """Address-keyed table of live subscriptions.

    Keys are the base-58 text of the address.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Subscription] = {}
        self._lock = threading.Lock()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Subscription]:
        return self._entries.get(key)

    def subscribe(
        self,
        key: str,
        start_listener: Callable[[AccountEventSource], Any],
    ) -> AccountEventSource:
        """Return the event source for ``key``, creating the listener on first use.

        ``start_listener`` receives the fresh event source and returns the
        transport's listener handle. It is not called when ``key`` already has
        an entry.
        """
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                return existing.event_source
            event_source = AccountEventSource()
            listener = start_listener(event_source)
            self._entries[key] = Subscription(event_source=event_source, listener=listener)
            return event_source

    async def unsubscribe(self, key: str, connection: Any) -> bool:
        """Drop the entry for ``key`` and remove its transport listener.

        Returns False (after a warning) when ``key`` is not subscribed.
        """
        with self._lock:
            sub = self._entries.pop(key, None)
        if sub is None:
            log.warning(f"Address is not subscribed: {key}", source="subscriptions")
            return False
        try:
            await connection.remove_account_change_listener(sub.listener)
        except Exception as exc:
            log.error(f"removing listener for {key} failed: {exc!r}", source="subscriptions")
        return True


_DEFAULT_REGISTRY = SubscriptionRegistry()


def default_registry() -> SubscriptionRegistry:
    """Process-wide registry used by clients and namespaces built without one."""
    return _DEFAULT_REGISTRY


__all__ = [
    "CHANGE_EVENT",
    "AccountEventSource",
    "Subscription",
    "SubscriptionRegistry",
    "default_registry",
]
