"""Playback state model."""
from dataclasses import dataclass
from enum import Enum


class PlaybackStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"


@dataclass(frozen=True)
class PlaybackState:
    """Tagged playback state; ``message`` is only meaningful for ERROR."""

    status: PlaybackStatus
    message: str = ""

    @classmethod
    def idle(cls) -> "PlaybackState":
        return cls(PlaybackStatus.IDLE)

    @classmethod
    def loading(cls) -> "PlaybackState":
        return cls(PlaybackStatus.LOADING)

    @classmethod
    def ready(cls) -> "PlaybackState":
        return cls(PlaybackStatus.READY)

    @classmethod
    def playing(cls) -> "PlaybackState":
        return cls(PlaybackStatus.PLAYING)

    @classmethod
    def paused(cls) -> "PlaybackState":
        return cls(PlaybackStatus.PAUSED)

    @classmethod
    def error(cls, message: str) -> "PlaybackState":
        return cls(PlaybackStatus.ERROR, message)

    @property
    def is_error(self) -> bool:
        return self.status is PlaybackStatus.ERROR

    def __str__(self) -> str:
        if self.is_error:
            return f"error({self.message})"
        return self.status.value
