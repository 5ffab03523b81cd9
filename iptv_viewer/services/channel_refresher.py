"""Keeps the channel catalog in sync with the saved stream source."""
import asyncio
import logging
from typing import Callable, List, Optional, Set

from ..errors import ErrorKind, StreamError
from ..models.channel import Channel
from ..models.config import ConfigurationChanged, StreamSourceConfig
from . import config_resolver
from .channel_catalog import ChannelCatalog
from .config_service import ConfigService
from .dispatcher import Dispatcher
from .m3u_parser import M3UParser
from .playlist_fetcher import PlaylistFetcher


logger = logging.getLogger(__name__)


class ChannelRefresher:
    """Downloads, parses and installs playlists.

    Reacts to :class:`ConfigurationChanged` events from the
    :class:`ConfigService`: each revision is processed at most once, and
    the service's dirty flag is cleared only after the new list has been
    installed. Fetch or parse failures leave the catalog untouched and are
    reported through :attr:`last_error`.
    """

    def __init__(
        self,
        catalog: ChannelCatalog,
        config_service: ConfigService,
        fetcher: PlaylistFetcher,
        dispatcher: Optional[Dispatcher] = None,
    ):
        self._catalog = catalog
        self._config_service = config_service
        self._fetcher = fetcher
        self._dispatcher = dispatcher
        self._consumed_revision = -1
        self._pending: Optional[ConfigurationChanged] = None
        self._refreshing = False
        self._tasks: Set[asyncio.Task] = set()
        self._on_channels_changed: List[Callable[[List[Channel]], None]] = []
        self.last_error: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        return self._refreshing or self._fetcher.is_busy

    def on_channels_changed(self, callback: Callable[[List[Channel]], None]):
        """Register callback invoked after the catalog has been replaced."""
        self._on_channels_changed.append(callback)

    def attach(self):
        """Subscribe to configuration changes of the config service."""
        self._config_service.on_configuration_changed(self.handle_configuration_changed)

    def handle_configuration_changed(self, event: ConfigurationChanged):
        """Schedule processing of ``event`` without blocking the caller."""
        task = asyncio.get_running_loop().create_task(self.process(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self):
        """Wait for refreshes scheduled by :meth:`handle_configuration_changed`."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def process(self, event: ConfigurationChanged) -> bool:
        """Refresh for ``event`` unless that revision was already consumed."""
        if event.revision <= self._consumed_revision:
            logger.debug("Ignoring already consumed revision %d", event.revision)
            return False

        if self.is_busy:
            # Picked up again once the running download finishes
            if self._pending is None or event.revision > self._pending.revision:
                self._pending = event
            return False

        self._consumed_revision = event.revision
        refreshed = await self._refresh(event.config)
        if refreshed:
            self._apply(self._config_service.mark_consumed, event)

        await self._process_pending()
        return refreshed

    async def refresh(self, config: Optional[StreamSourceConfig] = None) -> bool:
        """Download and install the playlist for ``config`` (default: current config).

        Returns False without doing anything if a download is already in
        flight, and False with :attr:`last_error` set on failure. A change
        saved while this download runs is processed right after it.
        """
        if self.is_busy:
            logger.info("Playlist download already in progress, skipping refresh")
            return False

        refreshed = await self._refresh(config)
        await self._process_pending()
        return refreshed

    async def _process_pending(self):
        pending, self._pending = self._pending, None
        if pending is not None and pending.revision > self._consumed_revision:
            await self.process(pending)

    async def _refresh(self, config: Optional[StreamSourceConfig]) -> bool:
        config = config or self._config_service.config
        if not config.playlist_url:
            config = config_resolver.resolve(config)
        self.last_error = None

        self._refreshing = True
        try:
            channels = await self._load_channels(config.playlist_url)
        except StreamError as e:
            channels = await self._try_alternative(config, e)
            if channels is None:
                self.last_error = f"Error downloading playlist: {e}"
                logger.warning("Playlist refresh failed: %s", e)
                return False
        finally:
            self._refreshing = False

        logger.info("%d channels downloaded", len(channels))
        self._apply(self._commit, channels)
        return True

    async def _try_alternative(
        self,
        config: StreamSourceConfig,
        error: StreamError,
    ) -> Optional[List[Channel]]:
        if error.kind is not ErrorKind.NETWORK_ERROR:
            return None
        alternative = config_resolver.resolve_alternative(config)
        if alternative is None:
            return None

        logger.info("Retrying playlist download with alternative DNS %s", config.alternative_dns)
        try:
            return await self._load_channels(alternative.playlist_url)
        except StreamError as e:
            logger.warning("Alternative DNS failed: %s", e)
            return None

    async def _load_channels(self, location: str) -> List[Channel]:
        if PlaylistFetcher.is_local_file(location):
            data = await self._fetcher.read_file(location)
        else:
            data = await self._fetcher.fetch_playlist(location)

        channels = M3UParser.parse(PlaylistFetcher.decode_playlist(data))
        if not channels:
            raise StreamError(ErrorKind.PARSE_EMPTY)
        return channels

    def _commit(self, channels: List[Channel]):
        if not self._catalog.replace(channels):
            return
        for callback in self._on_channels_changed:
            callback(list(self._catalog.channels))

    def _apply(self, fn: Callable, *args):
        if self._dispatcher is not None and self._dispatcher.running:
            self._dispatcher.post(fn, *args)
        else:
            fn(*args)
