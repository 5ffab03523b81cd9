"""Media engine backed by the flet-video player control."""
import logging
from typing import Optional

import flet as ft
import flet_video as fv

from ..services.media_engine import BaseMediaEngine, EngineEvent, EngineEventKind


logger = logging.getLogger(__name__)


class FletVideoEngine(BaseMediaEngine):
    """Adapts :class:`flet_video.Video` to the media engine interface.

    The control has no buffering or play-state events, so the adapter emits
    BUFFERING on load and echoes PLAYING/PAUSED/MUTE_CHANGED after the
    matching command. ``on_completed`` on a live stream means the stream was
    cut off and is reported as an interruption.
    """

    DEFAULT_VOLUME = 100

    def __init__(self, hardware_acceleration: bool = True):
        super().__init__()
        self._muted = False
        self._volume = self.DEFAULT_VOLUME
        self._has_item = False
        self._playing = False

        # Create video player with optimized settings for stability
        self._video: Optional[fv.Video] = fv.Video(
            expand=True,
            fill_color="#000000",
            aspect_ratio=16 / 9,
            volume=self._volume,
            autoplay=False,
            filter_quality=ft.FilterQuality.HIGH,
            show_controls=False,
            fit=ft.ImageFit.CONTAIN,
            configuration=fv.VideoConfiguration(enable_hardware_acceleration=hardware_acceleration),
            on_loaded=self._on_video_loaded,
            on_error=self._on_video_error,
            on_completed=self._on_video_completed,
        )

    @property
    def control(self) -> fv.Video:
        """The flet control to place on the page."""
        return self._video

    @property
    def is_muted(self) -> bool:
        return self._muted

    @property
    def is_playing(self) -> bool:
        if self._video is None or not self._has_item:
            return False
        if self._video.page is None:
            return self._playing
        return bool(self._video.is_playing())

    def load(self, url: str):
        video = self._require_video()
        self.emit(EngineEvent(EngineEventKind.BUFFERING))
        try:
            self._clear_playlist()
            video.playlist_add(fv.VideoMedia(resource=url))
            video.jump_to(0)
            self._has_item = True
        except Exception as e:  # flet raises plain exceptions for control method failures
            logger.warning("Video load failed: %s", e)
            self._has_item = False
            self.emit(EngineEvent(EngineEventKind.ITEM_FAILED, message=str(e)))

    def unload(self):
        if self._video is None or not self._has_item:
            return
        self._has_item = False
        self._playing = False
        if self._video.page is not None:
            self._video.stop()
            self._clear_playlist()

    def play(self):
        video = self._require_video()
        if not self._has_item:
            return
        if video.page is not None:
            video.play()
        self._playing = True
        self.emit(EngineEvent(EngineEventKind.PLAYING))

    def pause(self):
        video = self._require_video()
        if not self._has_item:
            return
        if video.page is not None:
            video.pause()
        self._playing = False
        self.emit(EngineEvent(EngineEventKind.PAUSED))

    def set_muted(self, muted: bool):
        video = self._require_video()
        if muted == self._muted:
            return
        if muted:
            self._volume = int(video.volume or self.DEFAULT_VOLUME)
            video.volume = 0
        else:
            video.volume = self._volume
        self._muted = muted
        if video.page is not None:
            video.update()
        self.emit(EngineEvent(EngineEventKind.MUTE_CHANGED, muted=self._muted))

    def release(self):
        super().release()
        self.unload()
        self._video = None

    def _require_video(self) -> fv.Video:
        if self._video is None:
            raise RuntimeError("Video engine has been released")
        return self._video

    def _clear_playlist(self):
        # The control exposes no length; remove until it refuses
        for _ in range(20):
            try:
                self._video.playlist_remove(0)
            except Exception:
                break

    def _on_video_loaded(self, e):
        """Handle video loaded event."""
        if self._has_item:
            self.emit(EngineEvent(EngineEventKind.ITEM_READY))

    def _on_video_error(self, e):
        """Handle video error event."""
        self._playing = False
        message = getattr(e, "data", None) or "Failed to load stream"
        self.emit(EngineEvent(EngineEventKind.ITEM_FAILED, message=str(message)))

    def _on_video_completed(self, e):
        """Handle end of stream."""
        if self._has_item:
            self._playing = False
            self.emit(EngineEvent(EngineEventKind.PLAYBACK_INTERRUPTED, message="Stream ended"))
