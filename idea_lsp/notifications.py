"""Indexing notifications pushed by the IDE and the status they drive."""

from abc import ABC, abstractmethod
from enum import Enum
from threading import Lock
from typing import Optional

INDEXING_LABEL = "(indexing)"


class NotificationKind(Enum):
    INDEX_STARTED = "idea/indexStarted"
    INDEX_FINISHED = "idea/indexFinished"

    @classmethod
    def parse(cls, method: str) -> Optional["NotificationKind"]:
        """Kind for a wire method name, None for methods we do not handle."""
        try:
            return cls(method)
        except ValueError:
            return None


class SessionStatus:
    """Indexing label of one connection.

    Written from the transport reader, read by the presentation layer, so
    access goes through a lock.
    """

    def __init__(self):
        self._lock = Lock()
        self._label: Optional[str] = None

    @property
    def label(self) -> Optional[str]:
        with self._lock:
            return self._label

    @label.setter
    def label(self, value: Optional[str]):
        with self._lock:
            self._label = value

    @property
    def is_indexing(self) -> bool:
        return self.label is not None


class IndexingListener(ABC):
    """Receives indexing notifications. Methods must return quickly."""

    @abstractmethod
    def on_index_started(self):
        ...

    @abstractmethod
    def on_index_finished(self):
        ...


class IndexingStatusHandler(IndexingListener):
    """Mirrors indexing notifications into a SessionStatus.

    Both transitions are plain assignments, so any order or repetition of
    notifications is harmless.
    """

    def __init__(self, status: SessionStatus):
        self.status = status

    def on_index_started(self):
        self.status.label = INDEXING_LABEL

    def on_index_finished(self):
        self.status.label = None


class NotificationRouter:
    """Dispatches idea/* notifications to an IndexingListener."""

    def __init__(self, listener: IndexingListener):
        self.listener = listener
        self.handlers = {
            NotificationKind.INDEX_STARTED: listener.on_index_started,
            NotificationKind.INDEX_FINISHED: listener.on_index_finished,
        }

    def dispatch(self, method: str, params=None) -> bool:
        """Run the handler for ``method``; params are not used.

        Returns False for methods this router does not know.
        """
        kind = NotificationKind.parse(method)
        if kind is None:
            return False
        self.handlers[kind]()
        return True

    def install(self, transport):
        """Register with the transport, once per connection.

        A second install on the same transport fails in
        ``register_notification_handler``.
        """
        for kind in self.handlers:
            transport.register_notification_handler(
                kind.value, lambda params, method=kind.value: self.dispatch(method, params)
            )
