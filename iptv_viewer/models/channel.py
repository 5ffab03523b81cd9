"""Channel model for IPTV channels."""
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Channel:
    """Represents a single live channel from the active playlist."""

    id: int
    name: str
    description: str
    url: str
    category: str
    logo: Optional[str] = None
    is_live: bool = True

    def to_dict(self) -> dict:
        """Convert channel to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "category": self.category,
            "logo": self.logo,
            "isLive": self.is_live,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Channel":
        """Create channel from dictionary."""
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", "Unknown"),
            description=data.get("description", ""),
            url=data.get("url", ""),
            category=data.get("category", "General"),
            logo=data.get("logo"),
            is_live=bool(data.get("isLive", True)),
        )


# Shipped with the app so the catalog is never empty on first run
DEFAULT_CHANNELS: Tuple[Channel, ...] = (
    Channel(
        id=1,
        name="Red Bull TV",
        description="Extreme sports and events",
        url="https://rbmn-live.akamaized.net/hls/live/590964/BoRB-AT/master.m3u8",
        category="Sports",
    ),
    Channel(
        id=2,
        name="RT News",
        description="Russia Today - 24/7 news",
        url="https://rt-glb.rttv.com/live/rtnews/playlist.m3u8",
        category="News",
    ),
    Channel(
        id=3,
        name="Al Jazeera English",
        description="International news channel",
        url="https://live-hls-web-aje.getaj.net/AJE/index.m3u8",
        category="News",
    ),
    Channel(
        id=4,
        name="Fashion TV",
        description="Fashion and lifestyle",
        url="https://fashiontv-fashiontv-1-eu.rakuten.wurl.tv/playlist.m3u8",
        category="Lifestyle",
    ),
    Channel(
        id=5,
        name="Bloomberg TV",
        description="Financial news",
        url="https://bloomberg.com/media-manifest/streams/phoenix-us.m3u8",
        category="Business",
    ),
)
