"""IPTV Viewer - live IPTV playlists and playback."""

__version__ = "1.0.0"
