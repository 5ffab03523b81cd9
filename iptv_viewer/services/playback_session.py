"""Playback state machine driven by media-engine events."""
import logging
from contextlib import ExitStack
from typing import Callable, List, Optional

from ..models.channel import Channel
from ..models.playback import PlaybackState, PlaybackStatus
from .dispatcher import Dispatcher
from .media_engine import EngineEvent, EngineEventKind, MediaEngine


logger = logging.getLogger(__name__)

STREAM_MARKERS = (".m3u8", "playlist", "hls")

# Events that only make sense for the item loaded by a given ``load`` call
ITEM_EVENTS = (
    EngineEventKind.BUFFERING,
    EngineEventKind.ITEM_READY,
    EngineEventKind.ITEM_FAILED,
    EngineEventKind.PLAYBACK_INTERRUPTED,
)
PLAYER_EVENTS = (
    EngineEventKind.PLAYING,
    EngineEventKind.PAUSED,
    EngineEventKind.MUTE_CHANGED,
)


def is_valid_stream_url(url: str) -> bool:
    """Heuristic check that ``url`` looks like a playable HLS stream."""
    if not url or not url.startswith("http") or len(url) <= 10:
        return False
    return any(marker in url for marker in STREAM_MARKERS)


class PlaybackSession:
    """Wraps a :class:`MediaEngine` and reduces its events to a :class:`PlaybackState`.

    The session owns the engine exclusively. When a :class:`Dispatcher` is
    given, engine events are posted to it and commands called from other
    threads are handed to it, so every transition runs on its loop.
    Without one, everything runs on the calling thread.

    Failures are reported as an ERROR state and are never retried; the
    caller has to :meth:`load` again.
    """

    def __init__(self, engine: MediaEngine, dispatcher: Optional[Dispatcher] = None):
        self._engine: Optional[MediaEngine] = engine
        self._dispatcher = dispatcher
        self._state = PlaybackState.idle()
        self._current_channel: Optional[Channel] = None
        self._generation = 0
        self._listeners: List[Callable[[PlaybackState], None]] = []

        self.is_playing = False
        self.is_muted = engine.is_muted

        self._player_scope = ExitStack()
        self._item_scope = ExitStack()
        subscription = engine.subscribe(self._on_player_event, PLAYER_EVENTS)
        self._player_scope.callback(subscription.cancel)

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_channel(self) -> Optional[Channel]:
        return self._current_channel

    @property
    def closed(self) -> bool:
        return self._engine is None

    def on_state_change(self, callback: Callable[[PlaybackState], None]):
        """Register callback invoked after every committed transition."""
        self._listeners.append(callback)

    def load(self, channel: Channel):
        """Start loading ``channel``; an invalid URL goes straight to ERROR.

        An invalid URL does not touch the engine: whatever it was playing
        keeps running, but the session reports ERROR and not playing.
        """
        self._require_engine()
        self._run(self._load, channel)

    def toggle_play_pause(self):
        """Pause if the engine reports it is playing, otherwise play."""
        self._require_engine()
        self._run(self._toggle_play_pause)

    def toggle_mute(self):
        """Flip the engine mute flag; ``is_muted`` follows the engine's echo."""
        self._require_engine()
        self._run(self._toggle_mute)

    def stop(self):
        """Release the current item and return to IDLE."""
        self._run(self._stop)

    def cleanup(self):
        """Stop, drop every subscription and release the engine. Idempotent."""
        self._run(self._cleanup)

    def _run(self, fn: Callable, *args):
        # Same context as engine events
        if self._dispatcher is not None:
            self._dispatcher.call(fn, *args)
        else:
            fn(*args)

    def _load(self, channel: Channel):
        engine = self._engine
        if engine is None:
            return
        logger.info("Loading channel %s", channel.name)
        self._current_channel = channel

        if not is_valid_stream_url(channel.url):
            logger.warning("Rejected stream URL for %s: %s", channel.name, channel.url)
            self.is_playing = False
            self._transition(PlaybackState.error(f"Invalid URL: {channel.url}"))
            return

        self._release_item()
        self._generation += 1
        generation = self._generation
        self._transition(PlaybackState.loading())

        subscription = engine.subscribe(
            lambda event: self._on_item_event(event, generation),
            ITEM_EVENTS,
        )
        self._item_scope.callback(subscription.cancel)

        engine.load(channel.url)
        engine.play()

    def _toggle_play_pause(self):
        engine = self._engine
        if engine is None or self._state.status in (PlaybackStatus.IDLE, PlaybackStatus.ERROR):
            return
        if engine.is_playing:
            engine.pause()
        else:
            engine.play()

    def _toggle_mute(self):
        if self._engine is not None:
            self._engine.set_muted(not self._engine.is_muted)

    def _stop(self):
        if self._engine is None:
            return
        self._release_item()
        self.is_playing = False
        self._transition(PlaybackState.idle())

    def _cleanup(self):
        if self._engine is None:
            return
        self._stop()
        self._player_scope.close()
        engine, self._engine = self._engine, None
        engine.release()
        logger.info("Playback session cleaned up")

    def _require_engine(self) -> MediaEngine:
        if self._engine is None:
            raise RuntimeError("Playback session has been cleaned up")
        return self._engine

    def _release_item(self):
        self._item_scope.close()
        self._generation += 1
        if self._engine is not None:
            self._engine.unload()

    def _on_player_event(self, event: EngineEvent):
        self._deliver(event, None)

    def _on_item_event(self, event: EngineEvent, generation: int):
        self._deliver(event, generation)

    def _deliver(self, event: EngineEvent, generation: Optional[int]):
        if self._dispatcher is not None and self._dispatcher.running:
            self._dispatcher.post(self._apply_event, event, generation)
        else:
            self._apply_event(event, generation)

    def _apply_event(self, event: EngineEvent, generation: Optional[int]):
        if self._engine is None:
            return
        # Late events from an item that has since been replaced or stopped
        if generation is not None and generation != self._generation:
            return

        kind = event.kind
        if kind is EngineEventKind.MUTE_CHANGED:
            if event.muted is not None and event.muted != self.is_muted:
                self.is_muted = event.muted
                self._notify()
            return

        # ERROR and IDLE are only left through load() or stop()
        if self._state.status in (PlaybackStatus.IDLE, PlaybackStatus.ERROR):
            return

        if kind is EngineEventKind.BUFFERING:
            self._transition(PlaybackState.loading())
        elif kind is EngineEventKind.PLAYING:
            self.is_playing = True
            self._transition(PlaybackState.playing())
        elif kind is EngineEventKind.PAUSED:
            self.is_playing = False
            if self._state.status is not PlaybackStatus.LOADING:
                self._transition(PlaybackState.paused())
        elif kind is EngineEventKind.ITEM_READY:
            self._transition(PlaybackState.ready())
        elif kind is EngineEventKind.ITEM_FAILED:
            self.is_playing = False
            self._transition(PlaybackState.error(f"Playback failed: {event.message or 'Unknown error'}"))
        elif kind is EngineEventKind.PLAYBACK_INTERRUPTED:
            self.is_playing = False
            self._transition(PlaybackState.error(f"Playback error: {event.message or 'Unknown error'}"))

    def _transition(self, state: PlaybackState):
        if state == self._state:
            return
        logger.debug("Playback state %s -> %s", self._state, state)
        self._state = state
        if state.is_error:
            logger.warning("Playback error: %s", state.message)
        self._notify()

    def _notify(self):
        for callback in self._listeners:
            callback(self._state)
