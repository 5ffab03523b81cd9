# Services package
from .channel_catalog import ChannelCatalog
from .channel_refresher import ChannelRefresher
from .config_service import ConfigService
from .config_store import ConfigStore, JsonFileConfigStore, MemoryConfigStore
from .dispatcher import Dispatcher
from .m3u_parser import M3UParser
from .media_engine import BaseMediaEngine, EngineEvent, EngineEventKind, MediaEngine, Subscription
from .playback_session import PlaybackSession, is_valid_stream_url
from .player_controller import PlayerController
from .playlist_fetcher import PlaylistFetcher
