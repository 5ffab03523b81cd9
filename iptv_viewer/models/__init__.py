# Models package
from .channel import Channel, DEFAULT_CHANNELS
from .config import ConfigurationChanged, StreamSourceConfig
from .playback import PlaybackState, PlaybackStatus
