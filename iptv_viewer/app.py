"""Main application module."""
import logging
from typing import Optional

import flet as ft

from .components.video_player import FletVideoEngine
from .logging_setup import configure_logging
from .services.channel_catalog import ChannelCatalog
from .services.channel_refresher import ChannelRefresher
from .services.config_service import ConfigService
from .services.config_store import JsonFileConfigStore
from .services.dispatcher import Dispatcher
from .services.playback_session import PlaybackSession
from .services.player_controller import PlayerController
from .services.playlist_fetcher import PlaylistFetcher
from .views.player_view import PlayerView
from .views.settings_view import SettingsView


logger = logging.getLogger(__name__)


class IPTVApp:
    """Wires the playlist pipeline, the playback session and the views."""

    def __init__(self, page: ft.Page, data_dir: Optional[str] = None):
        self.page = page

        self.dispatcher = Dispatcher()
        self.fetcher = PlaylistFetcher()
        self.config_service = ConfigService(JsonFileConfigStore(data_dir), self.fetcher)
        self.config_service.load()

        self.catalog = ChannelCatalog()
        self.refresher = ChannelRefresher(self.catalog, self.config_service, self.fetcher, self.dispatcher)
        self.refresher.attach()

        engine = FletVideoEngine(hardware_acceleration=self.config_service.config.hardware_acceleration)
        video_control = engine.control
        self.session = PlaybackSession(engine, self.dispatcher)
        self.controller = PlayerController(self.catalog, self.session, self.refresher, self.dispatcher)

        self._setup_page()
        self._setup_views(video_control)

    def _setup_page(self):
        """Configure the page settings."""
        self.page.title = "IPTV Viewer"
        self.page.theme_mode = ft.ThemeMode.DARK
        self.page.bgcolor = "#0a0a0f"
        self.page.padding = 0
        self.page.spacing = 0

        self.page.window.width = 1280
        self.page.window.height = 720
        self.page.window.min_width = 800
        self.page.window.min_height = 600

        self.page.theme = ft.Theme(color_scheme_seed=ft.Colors.PURPLE)
        self.page.on_keyboard_event = self._on_keyboard
        self.page.on_disconnect = self._on_disconnect

    def _setup_views(self, video_control: ft.Control):
        """Initialize all views."""
        self._player_view = PlayerView(
            video_control=video_control,
            catalog=self.catalog,
            session=self.session,
            controller=self.controller,
            on_settings_click=self._show_settings,
        )
        self._settings_view = SettingsView(
            config_service=self.config_service,
            refresher=self.refresher,
            on_back=self._show_player,
        )
        self.refresher.on_channels_changed(lambda channels: self._player_view.refresh_channels())

        self._container = ft.Container(content=self._player_view, expand=True)
        self.page.add(self._container)

    async def start(self):
        """Start background coordination and play the first channel."""
        self.dispatcher.start()
        self.controller.start()

        # A change saved in a previous session that was never applied
        pending = self.config_service.pending_change()
        if pending is not None:
            await self.refresher.process(pending)
        elif self.config_service.config.playlist_url:
            await self.refresher.refresh()

    def _show_player(self):
        self._container.content = self._player_view
        self.page.update()

    def _show_settings(self):
        self._settings_view.load_from_config()
        self._container.content = self._settings_view
        self.page.update()

    def _on_keyboard(self, e: ft.KeyboardEvent):
        """Handle global keyboard events."""
        if e.key == "Escape":
            self._show_player()
        elif e.key == " ":
            self.session.toggle_play_pause()
        elif e.key == "M":
            self.session.toggle_mute()
        elif e.key == "Arrow Right":
            self.controller.next_channel()
        elif e.key == "Arrow Left":
            self.controller.previous_channel()

    def _on_disconnect(self, e):
        self.session.cleanup()


async def main(page: ft.Page):
    """Application entry point."""
    app = IPTVApp(page)
    await app.start()


def run():
    """Console script entry point."""
    configure_logging()
    ft.app(target=main)
