"""Playlist URL resolution for Xtream-style providers and direct M3U links."""
import re
from dataclasses import replace
from typing import Optional

from ..models.config import StreamSourceConfig


DIRECT_MARKERS = (".m3u", "playlist")


def is_direct_m3u(config: StreamSourceConfig) -> bool:
    """True when the host is itself a playlist link or credentials are missing."""
    host = config.host_dns
    if any(marker in host for marker in DIRECT_MARKERS):
        return True
    return not config.username or not config.password


def build_base_url(host: str, port: str = "") -> str:
    """Normalize a host into ``scheme://host[:port]``."""
    base = host.strip().rstrip("/")
    if not base.startswith("http"):
        base = f"http://{base}"
    if port:
        base = f"{base}:{port}"
    return base


def build_playlist_url(config: StreamSourceConfig, host: Optional[str] = None) -> str:
    """Build the ``get.php`` playlist URL for a credentialed config.

    Credentials are appended verbatim, without percent-encoding.
    """
    base = build_base_url(host if host is not None else config.host_dns, config.port)
    return (
        f"{base}/get.php?username={config.username}&password={config.password}"
        f"&type=m3u_plus&output={config.playlist_format}"
    )


def build_probe_url(config: StreamSourceConfig, host: Optional[str] = None) -> str:
    """Build the ``player_api.php`` account-info URL used to check credentials."""
    base = build_base_url(host if host is not None else config.host_dns, config.port)
    return (
        f"{base}/player_api.php?username={config.username}&password={config.password}"
        f"&action=get_info"
    )


def resolve(config: StreamSourceConfig) -> StreamSourceConfig:
    """Return a copy of ``config`` with ``is_direct_m3u`` and ``playlist_url`` filled in."""
    if is_direct_m3u(config):
        return replace(config, is_direct_m3u=True, playlist_url=config.host_dns)
    return replace(config, is_direct_m3u=False, playlist_url=build_playlist_url(config))


def resolve_alternative(config: StreamSourceConfig) -> Optional[StreamSourceConfig]:
    """Resolve against ``alternative_dns`` instead of the primary host.

    Returns None when there is no alternative host or the config is direct-M3U.
    """
    if not config.alternative_dns or is_direct_m3u(config):
        return None
    return replace(
        config,
        is_direct_m3u=False,
        playlist_url=build_playlist_url(config, host=config.alternative_dns),
    )


_PASSWORD_RE = re.compile(r"(password=)[^&]*")


def redact(url: str) -> str:
    """Mask the password query value so a URL can be logged or displayed."""
    return _PASSWORD_RE.sub(r"\1***", url)
