"""Glue between channel selection and the playback session."""
import logging
from typing import Callable, List, Optional

from ..models.channel import Channel
from .channel_catalog import ChannelCatalog
from .channel_refresher import ChannelRefresher
from .dispatcher import Dispatcher
from .playback_session import PlaybackSession


logger = logging.getLogger(__name__)


class PlayerController:
    """Selects channels in the catalog and plays them in the session.

    With a :class:`Dispatcher`, selection changes run on its loop, the same
    context that installs refreshed channel lists.
    """

    def __init__(
        self,
        catalog: ChannelCatalog,
        session: PlaybackSession,
        refresher: Optional[ChannelRefresher] = None,
        dispatcher: Optional[Dispatcher] = None,
    ):
        self._catalog = catalog
        self._session = session
        self._dispatcher = dispatcher
        self._on_channel_change: List[Callable[[Channel], None]] = []
        if refresher is not None:
            refresher.on_channels_changed(self._on_channels_changed)

    @property
    def current_channel(self) -> Optional[Channel]:
        return self._catalog.selected

    def on_channel_change(self, callback: Callable[[Channel], None]):
        """Register callback for channel changes."""
        self._on_channel_change.append(callback)

    def start(self):
        """Play the first channel of the catalog."""
        self._run(lambda: self._select(self._catalog.first()))

    def select_channel(self, channel: Channel):
        self._run(self._select, channel)

    def next_channel(self):
        self._run(lambda: self._select(self._catalog.next(self._selected_id())))

    def previous_channel(self):
        self._run(lambda: self._select(self._catalog.previous(self._selected_id())))

    def _run(self, fn: Callable, *args):
        if self._dispatcher is not None:
            self._dispatcher.call(fn, *args)
        else:
            fn(*args)

    def _selected_id(self) -> Optional[int]:
        current = self._catalog.selected
        return current.id if current else None

    def _select(self, channel: Channel):
        # A stale tile may still point at a channel from the previous list
        if self._catalog.get(channel.id) != channel:
            logger.warning("Channel %s is not in the catalog", channel.id)
            return
        selected = self._catalog.select(channel.id)
        self._session.load(selected)
        for callback in self._on_channel_change:
            callback(selected)

    def _on_channels_changed(self, channels: List[Channel]):
        # A new playlist starts on its first channel
        self._run(self._select, channels[0])
