"""
Unit tests for channel selection and playback wiring.
"""

import asyncio
import threading
from unittest.mock import Mock

import pytest

from iptv_viewer.models.channel import Channel
from iptv_viewer.models.config import StreamSourceConfig
from iptv_viewer.models.playback import PlaybackStatus
from iptv_viewer.services.channel_catalog import ChannelCatalog
from iptv_viewer.services.channel_refresher import ChannelRefresher
from iptv_viewer.services.dispatcher import Dispatcher
from iptv_viewer.services.playback_session import PlaybackSession
from iptv_viewer.services.player_controller import PlayerController
from tests.conftest import make_fetcher, playlist_handler


@pytest.fixture
def catalog():
    return ChannelCatalog()


@pytest.fixture
def controller(catalog, engine):
    return PlayerController(catalog, PlaybackSession(engine))


class TestPlayerController:

    def test_start_plays_first_channel(self, controller, catalog, engine):
        controller.start()

        assert controller.current_channel == catalog.first()
        assert ("load", catalog.first().url) in engine.calls

    def test_select_notifies_listeners(self, controller, catalog):
        changes = []
        controller.on_channel_change(changes.append)

        controller.select_channel(catalog.channels[2])

        assert changes == [catalog.channels[2]]

    def test_unknown_channel_is_ignored(self, controller, engine):
        controller.select_channel(Channel(99, "Ghost", "", "http://x/1.m3u8", "General"))

        assert controller.current_channel is None
        assert engine.calls == []

    def test_next_and_previous_wrap(self, controller, catalog):
        controller.start()

        controller.previous_channel()
        assert controller.current_channel == catalog.channels[-1]

        controller.next_channel()
        assert controller.current_channel == catalog.channels[0]

    def test_next_without_selection_starts_at_first(self, controller, catalog):
        controller.next_channel()

        assert controller.current_channel == catalog.first()

    def test_invalid_channel_url_surfaces_error(self, engine):
        bad = Channel(1, "Bad", "", "rtmp://x/live", "General")
        session = PlaybackSession(engine)
        controller = PlayerController(ChannelCatalog([bad]), session)

        controller.start()

        assert session.state.status is PlaybackStatus.ERROR

    async def test_new_playlist_selects_first_channel(self, catalog, engine, config_service):
        handler = playlist_handler()
        fetcher = make_fetcher(handler)
        refresher = ChannelRefresher(catalog, config_service, fetcher)
        session = PlaybackSession(engine)
        controller = PlayerController(catalog, session, refresher)
        controller.start()

        await refresher.refresh(StreamSourceConfig(
            host_dns="provider.test", username="u", password="p",
        ))

        assert controller.current_channel.name == "CNN"
        assert session.current_channel.name == "CNN"


def test_select_loads_channel_into_session(catalog):
    session = Mock(spec=PlaybackSession)
    controller = PlayerController(catalog, session)

    controller.select_channel(catalog.channels[1])

    session.load.assert_called_once_with(catalog.channels[1])


def test_stale_channel_from_previous_list_is_ignored(catalog, engine):
    controller = PlayerController(catalog, PlaybackSession(engine))
    stale = Channel(1, "Old", "", "http://x/1.m3u8", "General")

    controller.select_channel(stale)

    assert controller.current_channel is None
    assert engine.calls == []


async def test_navigation_from_worker_thread_runs_on_dispatcher(catalog, engine):
    async with Dispatcher() as dispatcher:
        session = PlaybackSession(engine, dispatcher)
        controller = PlayerController(catalog, session, dispatcher=dispatcher)
        controller.start()

        worker = threading.Thread(target=controller.next_channel)
        worker.start()
        worker.join()
        assert controller.current_channel == catalog.channels[0]

        await asyncio.sleep(0)
        await dispatcher.join()

        assert controller.current_channel == catalog.channels[1]
        assert session.current_channel == catalog.channels[1]
