"""
Shared fixtures for the IPTV viewer tests.
"""

from typing import Callable, List

import httpx
import pytest

from iptv_viewer.services.config_service import ConfigService
from iptv_viewer.services.config_store import MemoryConfigStore
from iptv_viewer.services.media_engine import BaseMediaEngine, EngineEvent, EngineEventKind
from iptv_viewer.services.playlist_fetcher import PlaylistFetcher


SAMPLE_PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="cnn.us" tvg-logo="http://logos/cnn.png" group-title="News",CNN
http://provider.test/live/u/p/1.m3u8
#EXTINF:-1 group-title="Sports",ESPN
http://provider.test/live/u/p/2.m3u8
#EXTINF:-1,Cartoon Network
http://provider.test/live/u/p/3.m3u8
"""


class FakeEngine(BaseMediaEngine):
    """Media engine double that records commands and emits only on request."""

    def __init__(self, muted: bool = False):
        super().__init__()
        self.calls: List[tuple] = []
        self.muted = muted
        self.playing = False
        self.released = False

    def load(self, url: str):
        self.calls.append(("load", url))

    def unload(self):
        self.calls.append(("unload",))
        self.playing = False

    def play(self):
        self.calls.append(("play",))
        self.playing = True

    def pause(self):
        self.calls.append(("pause",))
        self.playing = False

    def set_muted(self, muted: bool):
        self.calls.append(("set_muted", muted))
        self.muted = muted
        self.emit(EngineEvent(EngineEventKind.MUTE_CHANGED, muted=muted))

    @property
    def is_muted(self) -> bool:
        return self.muted

    @property
    def is_playing(self) -> bool:
        return self.playing

    def release(self):
        super().release()
        self.released = True

    def fire(self, kind: EngineEventKind, message: str = ""):
        self.emit(EngineEvent(kind, message=message))


def make_fetcher(handler: Callable) -> PlaylistFetcher:
    """Fetcher whose HTTP traffic goes to ``handler`` instead of the network."""
    return PlaylistFetcher(transport=httpx.MockTransport(handler))


def playlist_handler(body: str = SAMPLE_PLAYLIST, status: int = 200):
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, text=body)

    handler.requests = requests
    return handler


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def store() -> MemoryConfigStore:
    return MemoryConfigStore()


@pytest.fixture
def ok_handler():
    return playlist_handler()


@pytest.fixture
def fetcher(ok_handler) -> PlaylistFetcher:
    return make_fetcher(ok_handler)


@pytest.fixture
def config_service(store, fetcher) -> ConfigService:
    return ConfigService(store, fetcher)
