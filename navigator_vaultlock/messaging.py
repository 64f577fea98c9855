"""
Broadcaster — in-process message bus for lock lifecycle events.

Commands emitted by the vault timeout service:
- ``locked`` (data: ``user_initiated``)
- ``unlocked`` (data: ``user_id``)
- ``vaultTimeoutActionChanged`` (data: new action value)
"""
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("navigator.vaultlock")

Subscriber = Callable[[str, Any], None]


class Broadcaster:
    """Deliver every sent command to all named subscribers, in order."""

    def __init__(self) -> None:
        self._subscribers: dict[str, Subscriber] = {}

    def subscribe(self, name: str, callback: Subscriber) -> None:
        self._subscribers[name] = callback

    def unsubscribe(self, name: str) -> None:
        self._subscribers.pop(name, None)

    @property
    def subscribers(self) -> list[str]:
        return list(self._subscribers.keys())

    def send(self, command: str, data: Any = None) -> None:
        """Deliver ``command`` to every subscriber.

        A failing subscriber is logged and skipped; delivery continues.
        """
        for name, callback in list(self._subscribers.items()):
            try:
                callback(command, data)
            except Exception as err:
                logger.error(
                    "Subscriber %s failed handling command=%s: %s",
                    name, command, err,
                )
