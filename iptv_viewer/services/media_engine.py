"""Interface to the media engine that decodes and renders streams."""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple


logger = logging.getLogger(__name__)


class EngineEventKind(Enum):
    BUFFERING = "buffering"
    PLAYING = "playing"
    PAUSED = "paused"
    ITEM_READY = "item_ready"
    ITEM_FAILED = "item_failed"
    PLAYBACK_INTERRUPTED = "playback_interrupted"
    MUTE_CHANGED = "mute_changed"


@dataclass(frozen=True)
class EngineEvent:
    kind: EngineEventKind
    message: str = ""
    muted: Optional[bool] = None


EngineCallback = Callable[[EngineEvent], None]


class Subscription:
    """Handle returned by :meth:`MediaEngine.subscribe`; ``cancel`` is idempotent."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe: Optional[Callable[[], None]] = unsubscribe

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def cancel(self):
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()


class MediaEngine(ABC):
    """Commands and status events of an opaque player."""

    @abstractmethod
    def load(self, url: str):
        """Replace the current media item with ``url``."""

    @abstractmethod
    def unload(self):
        """Stop and release the current media item."""

    @abstractmethod
    def play(self):
        ...

    @abstractmethod
    def pause(self):
        ...

    @abstractmethod
    def set_muted(self, muted: bool):
        ...

    @property
    @abstractmethod
    def is_muted(self) -> bool:
        ...

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        """Playback status as reported by the engine itself."""

    @abstractmethod
    def subscribe(
        self,
        callback: EngineCallback,
        kinds: Optional[Iterable[EngineEventKind]] = None,
    ) -> Subscription:
        """Deliver events (optionally only of ``kinds``) to ``callback``."""

    @abstractmethod
    def release(self):
        """Free the engine; it must not be used afterwards."""


class BaseMediaEngine(MediaEngine):
    """Subscription bookkeeping shared by engine implementations.

    Engines may emit from any thread; subscribers get events on the emitting
    thread.
    """

    def __init__(self):
        self._subscribers: List[Tuple[EngineCallback, Optional[frozenset]]] = []
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(
        self,
        callback: EngineCallback,
        kinds: Optional[Iterable[EngineEventKind]] = None,
    ) -> Subscription:
        entry = (callback, frozenset(kinds) if kinds is not None else None)
        with self._lock:
            self._subscribers.append(entry)

        def unsubscribe():
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        return Subscription(unsubscribe)

    def emit(self, event: EngineEvent):
        with self._lock:
            targets = [cb for cb, kinds in self._subscribers if kinds is None or event.kind in kinds]
        for callback in targets:
            callback(event)

    def release(self):
        with self._lock:
            self._subscribers.clear()
