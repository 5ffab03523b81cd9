"""Player view - video surface, transport controls and channel list."""
import flet as ft
from typing import Callable, Optional

from ..components.channel_list import ChannelList
from ..models.channel import Channel
from ..models.playback import PlaybackState, PlaybackStatus
from ..services.channel_catalog import ChannelCatalog
from ..services.player_controller import PlayerController
from ..services.playback_session import PlaybackSession


STATUS_LABELS = {
    PlaybackStatus.IDLE: "Select a channel to start watching",
    PlaybackStatus.LOADING: "Loading stream...",
    PlaybackStatus.READY: "Ready",
    PlaybackStatus.PLAYING: "Live",
    PlaybackStatus.PAUSED: "Paused",
}


class PlayerView(ft.Container):
    """Main screen: 65% player, 35% channel list."""

    def __init__(
        self,
        video_control: ft.Control,
        catalog: ChannelCatalog,
        session: PlaybackSession,
        controller: PlayerController,
        on_settings_click: Optional[Callable] = None,
    ):
        super().__init__()
        self._session = session
        self._controller = controller
        self._on_settings_click = on_settings_click

        self._channel_list = ChannelList(catalog, on_channel_select=controller.select_channel)
        self._build_ui(video_control)

        session.on_state_change(self._on_state_change)
        controller.on_channel_change(self._on_channel_change)

    def _build_ui(self, video_control: ft.Control):
        """Build the player view."""
        self._channel_name_text = ft.Text(
            "Select a channel",
            size=16,
            weight=ft.FontWeight.BOLD,
            color=ft.Colors.WHITE,
            max_lines=1,
            overflow=ft.TextOverflow.ELLIPSIS,
        )
        self._channel_group_text = ft.Text("", size=12, color=ft.Colors.WHITE54)
        self._status_text = ft.Text(STATUS_LABELS[PlaybackStatus.IDLE], size=12, color=ft.Colors.WHITE70)
        self._loading_ring = ft.ProgressRing(width=16, height=16, color=ft.Colors.PURPLE_400, visible=False)

        self._play_button = ft.IconButton(
            icon=ft.Icons.PLAY_ARROW_ROUNDED,
            icon_color=ft.Colors.WHITE,
            tooltip="Play/Pause",
            on_click=lambda e: self._session.toggle_play_pause(),
        )
        self._mute_button = ft.IconButton(
            icon=ft.Icons.VOLUME_UP_ROUNDED,
            icon_color=ft.Colors.WHITE70,
            tooltip="Mute",
            on_click=lambda e: self._session.toggle_mute(),
        )

        controls = ft.Row(
            [
                ft.IconButton(
                    icon=ft.Icons.SKIP_PREVIOUS_ROUNDED,
                    icon_color=ft.Colors.WHITE70,
                    tooltip="Previous channel",
                    on_click=lambda e: self._controller.previous_channel(),
                ),
                self._play_button,
                ft.IconButton(
                    icon=ft.Icons.SKIP_NEXT_ROUNDED,
                    icon_color=ft.Colors.WHITE70,
                    tooltip="Next channel",
                    on_click=lambda e: self._controller.next_channel(),
                ),
                self._mute_button,
                ft.Container(expand=True),
                self._loading_ring,
                self._status_text,
                ft.IconButton(
                    icon=ft.Icons.SETTINGS_ROUNDED,
                    icon_color=ft.Colors.WHITE70,
                    tooltip="Settings",
                    on_click=lambda e: self._on_settings_click() if self._on_settings_click else None,
                ),
            ],
            vertical_alignment=ft.CrossAxisAlignment.CENTER,
        )

        player_area = ft.Column(
            [
                ft.Column([self._channel_name_text, self._channel_group_text], spacing=2),
                ft.Container(
                    content=video_control,
                    expand=True,
                    border_radius=16,
                    bgcolor="#000000",
                    clip_behavior=ft.ClipBehavior.HARD_EDGE,
                ),
                controls,
            ],
            expand=65,
            spacing=8,
        )

        self.content = ft.Row(
            [
                ft.Container(content=player_area, padding=ft.padding.all(16), expand=65),
                ft.Container(content=self._channel_list, expand=35, bgcolor="#12121c"),
            ],
            spacing=0,
            expand=True,
        )
        self.expand = True
        self.bgcolor = "#0a0a0f"

    def refresh_channels(self):
        """Re-read the catalog after a playlist refresh."""
        self._channel_list.refresh(self._controller.current_channel)

    def _on_channel_change(self, channel: Channel):
        self._channel_name_text.value = channel.name
        self._channel_group_text.value = channel.description
        self._channel_list.refresh(channel)
        if self.page:
            self.update()

    def _on_state_change(self, state: PlaybackState):
        if state.is_error:
            self._status_text.value = state.message
            self._status_text.color = ft.Colors.RED_300
        else:
            self._status_text.value = STATUS_LABELS[state.status]
            self._status_text.color = ft.Colors.WHITE70

        self._loading_ring.visible = state.status is PlaybackStatus.LOADING
        self._play_button.icon = (
            ft.Icons.PAUSE_ROUNDED if self._session.is_playing else ft.Icons.PLAY_ARROW_ROUNDED
        )
        self._mute_button.icon = (
            ft.Icons.VOLUME_OFF_ROUNDED if self._session.is_muted else ft.Icons.VOLUME_UP_ROUNDED
        )
        if self.page:
            self.update()
