# Components package
from .channel_list import ChannelList
from .video_player import FletVideoEngine
