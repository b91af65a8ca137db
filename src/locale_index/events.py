"""Подписка на события загрузчика."""

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


class EventHandler:
    """Минимальный диспетчер событий: on / off / dispatch_event."""

    def __init__(self):
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """Подписывает listener, возвращает функцию отписки."""
        self._listeners[event].append(listener)
        return lambda: self.off(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def dispatch_event(self, event: str) -> None:
        for listener in list(self._listeners[event]):
            listener(event)
