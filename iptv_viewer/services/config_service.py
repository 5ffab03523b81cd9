"""Loading, saving and testing the stream source configuration."""
import json
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from ..models.config import ConfigurationChanged, StreamSourceConfig
from . import config_resolver
from .config_store import ConfigStore
from .playlist_fetcher import PlaylistFetcher


logger = logging.getLogger(__name__)


class ConfigService:
    """Owns the current :class:`StreamSourceConfig` and its persistence.

    Every successful :meth:`save` produces one :class:`ConfigurationChanged`
    event with a new revision and broadcasts it to subscribers. The consumer
    acknowledges it with :meth:`mark_consumed`, which clears the persisted
    dirty flag only if no newer save happened in between.
    """

    CONFIG_KEY = "IPTVConfig"

    def __init__(self, store: ConfigStore, fetcher: Optional[PlaylistFetcher] = None):
        self._store = store
        self._fetcher = fetcher or PlaylistFetcher()
        self._config = StreamSourceConfig()
        self._revision = 0
        self._saving = False
        self._on_configuration_changed: List[Callable[[ConfigurationChanged], None]] = []
        self.last_error: Optional[str] = None

    @property
    def config(self) -> StreamSourceConfig:
        return self._config

    @property
    def revision(self) -> int:
        return self._revision

    def on_configuration_changed(self, callback: Callable[[ConfigurationChanged], None]):
        """Register callback for configuration changes."""
        self._on_configuration_changed.append(callback)

    def load(self) -> StreamSourceConfig:
        """Load the saved configuration, keeping defaults if none is usable."""
        blob = self._store.get(self.CONFIG_KEY)
        if not blob:
            logger.info("No saved configuration, using defaults")
            return self._config

        try:
            data = json.loads(blob) if isinstance(blob, str) else blob
            if not isinstance(data, dict):
                raise ValueError("configuration blob is not an object")
            self._config = StreamSourceConfig.from_dict(data)
        except ValueError as e:
            logger.warning("Ignoring unreadable configuration: %s", e)
            return self._config

        logger.info("Configuration loaded")
        return self._config

    def pending_change(self) -> Optional[ConfigurationChanged]:
        """Event for a change saved in an earlier session but never consumed."""
        if not self._config.config_changed:
            return None
        return ConfigurationChanged(config=replace(self._config), revision=self._revision)

    def save(self, config: Optional[StreamSourceConfig] = None) -> Optional[ConfigurationChanged]:
        """Resolve, persist and broadcast ``config`` (or the current config).

        Returns the emitted event, or None if the write failed or another
        save is still in progress.
        """
        if self._saving:
            logger.info("Save already in progress, ignoring")
            return None

        self._saving = True
        try:
            resolved = config_resolver.resolve(config or self._config)
            resolved = replace(resolved, config_changed=True, last_config_update=datetime.now())
            try:
                self._persist(resolved)
            except (OSError, TypeError, ValueError) as e:
                self.last_error = f"Error saving configuration: {e}"
                logger.error("Failed to save configuration: %s", e)
                return None

            self._config = resolved
            self._revision += 1
            self.last_error = None
            event = ConfigurationChanged(config=replace(resolved), revision=self._revision)
            logger.info("Configuration saved (revision %d)", self._revision)

            for callback in self._on_configuration_changed:
                callback(event)
            return event
        finally:
            self._saving = False

    def mark_consumed(self, event: ConfigurationChanged) -> bool:
        """Clear the dirty flag for ``event``; stale events are ignored."""
        if event.revision != self._revision or not self._config.config_changed:
            return False
        self._config = replace(self._config, config_changed=False)
        try:
            self._persist(self._config)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to persist consumed configuration: %s", e)
        return True

    def clear(self):
        """Remove the stored configuration and reset to defaults."""
        self._store.delete(self.CONFIG_KEY)
        self._config = StreamSourceConfig()
        logger.info("Configuration cleared")

    async def test_connection(self, config: Optional[StreamSourceConfig] = None) -> bool:
        """Probe the provider described by ``config`` (or the current config)."""
        config = config or self._config
        self.last_error = None

        if not config.host_dns.strip():
            self.last_error = "Host/DNS not configured"
            return False

        resolved = config_resolver.resolve(config)
        if resolved.is_direct_m3u:
            if PlaylistFetcher.is_local_file(resolved.playlist_url):
                return True
            ok = await self._fetcher.probe(resolved.playlist_url)
            if not ok:
                self.last_error = self._fetcher.last_error
            return ok

        ok = await self._fetcher.probe(config_resolver.build_probe_url(resolved))
        if not ok:
            status = self._fetcher.last_status_code
            if status is not None:
                self.last_error = f"Invalid credentials (HTTP {status})"
            else:
                self.last_error = self._fetcher.last_error
        return ok

    def export_summary(self) -> str:
        """Human-readable summary of the configuration, without the password."""
        config = self._config
        return "\n".join([
            "IPTV Viewer configuration",
            "=========================",
            f"Host/DNS: {config.host_dns}",
            f"Username: {config.username}",
            f"Format: {config.playlist_format}",
            f"Port: {config.port}",
            f"Playlist URL: {config_resolver.redact(config.playlist_url)}",
            f"Date: {datetime.now():%Y-%m-%d %H:%M}",
        ])

    def _persist(self, config: StreamSourceConfig):
        self._store.set(self.CONFIG_KEY, json.dumps(config.to_dict()))
