"""Stream source configuration model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


PLAYLIST_FORMATS = ("ts", "hls")


@dataclass
class StreamSourceConfig:
    """Connection descriptor for an IPTV provider plus its derived playlist URL."""

    host_dns: str = ""
    username: str = ""
    password: str = ""
    port: str = "80"
    alternative_dns: str = ""
    playlist_format: str = "ts"  # "ts" or "hls"
    playlist_url: str = ""  # derived by the resolver
    update_interval: str = "30"
    auto_reconnect: bool = True
    hardware_acceleration: bool = True
    is_direct_m3u: bool = False  # derived by the resolver
    config_changed: bool = False
    last_config_update: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        return {
            "hostDns": self.host_dns,
            "username": self.username,
            "password": self.password,
            "port": self.port,
            "alternativeDns": self.alternative_dns,
            "playlistFormat": self.playlist_format,
            "playlistUrl": self.playlist_url,
            "updateInterval": self.update_interval,
            "autoReconnect": self.auto_reconnect,
            "hardwareAcceleration": self.hardware_acceleration,
            "isDirectM3U": self.is_direct_m3u,
            "configChanged": self.config_changed,
            "lastConfigUpdate": self.last_config_update.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StreamSourceConfig":
        """Create config from dictionary, falling back to defaults per field."""
        defaults = cls()

        last_update: Optional[datetime] = None
        if data.get("lastConfigUpdate"):
            try:
                last_update = datetime.fromisoformat(data["lastConfigUpdate"])
            except (ValueError, TypeError):
                pass

        playlist_format = str(data.get("playlistFormat", defaults.playlist_format))
        if playlist_format not in PLAYLIST_FORMATS:
            playlist_format = defaults.playlist_format

        return cls(
            host_dns=str(data.get("hostDns", "")),
            username=str(data.get("username", "")),
            password=str(data.get("password", "")),
            port=str(data.get("port", defaults.port)),
            alternative_dns=str(data.get("alternativeDns", "")),
            playlist_format=playlist_format,
            playlist_url=str(data.get("playlistUrl", "")),
            update_interval=str(data.get("updateInterval", defaults.update_interval)),
            auto_reconnect=bool(data.get("autoReconnect", defaults.auto_reconnect)),
            hardware_acceleration=bool(data.get("hardwareAcceleration", defaults.hardware_acceleration)),
            is_direct_m3u=bool(data.get("isDirectM3U", False)),
            config_changed=bool(data.get("configChanged", False)),
            last_config_update=last_update or defaults.last_config_update,
        )


@dataclass(frozen=True)
class ConfigurationChanged:
    """Emitted once per successful save; consumed at most once by the refresher."""

    config: StreamSourceConfig
    revision: int

    name = "configurationChanged"
