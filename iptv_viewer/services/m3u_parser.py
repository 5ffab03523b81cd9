"""M3U playlist parser producing a bounded, ordered channel list."""
import re
from typing import List, Optional

from ..models.channel import Channel


class M3UParser:
    """Parser for M3U/M3U8 playlist text.

    Works line by line: an ``#EXTINF:`` line sets a pending channel name and
    group, and the next line starting with ``http`` turns the pending entry
    into a :class:`Channel`. Anything else is skipped, so malformed input
    never raises.
    """

    # Upper bound on emitted channels to keep memory and list rendering cheap
    MAX_CHANNELS = 1000

    EXTINF_PREFIX = "#EXTINF:"
    URL_PREFIX = "http"
    UNKNOWN_NAME = "Unknown Channel"
    DEFAULT_GROUP = "General"

    GROUP_RE = re.compile(r'group-title="([^"]*)"')
    LOGO_RE = re.compile(r'tvg-logo="([^"]*)"')

    @classmethod
    def parse(cls, content: str, max_channels: Optional[int] = None) -> List[Channel]:
        """Parse M3U content and return list of channels in first-seen order."""
        limit = cls.MAX_CHANNELS if max_channels is None else max_channels
        channels: List[Channel] = []
        if limit <= 0:
            return channels

        pending_name: Optional[str] = None
        pending_group = cls.DEFAULT_GROUP
        pending_logo: Optional[str] = None

        for line in content.splitlines():
            line = line.strip()

            if line.startswith(cls.EXTINF_PREFIX):
                pending_name = cls._extract_name(line)
                pending_group = cls._extract_group(line)
                pending_logo = cls._extract_logo(line)
                continue

            if pending_name is not None and line.startswith(cls.URL_PREFIX):
                channel_id = len(channels) + 1
                channels.append(Channel(
                    id=channel_id,
                    name=pending_name or f"Channel {channel_id}",
                    description=f"{pending_group} channel",
                    url=line,
                    category=pending_group,
                    logo=pending_logo,
                ))
                pending_name = None

                if len(channels) >= limit:
                    break

        return channels

    @classmethod
    def _extract_name(cls, extinf_line: str) -> str:
        """Channel name is everything after the last comma."""
        last_comma_idx = extinf_line.rfind(",")
        if last_comma_idx == -1:
            return cls.UNKNOWN_NAME
        return extinf_line[last_comma_idx + 1:].strip()

    @classmethod
    def _extract_group(cls, extinf_line: str) -> str:
        match = cls.GROUP_RE.search(extinf_line)
        if match and match.group(1):
            return match.group(1)
        return cls.DEFAULT_GROUP

    @classmethod
    def _extract_logo(cls, extinf_line: str) -> Optional[str]:
        match = cls.LOGO_RE.search(extinf_line)
        if match and match.group(1):
            return match.group(1)
        return None
