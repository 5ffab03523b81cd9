"""Settings view for the stream source configuration."""
import flet as ft
from dataclasses import replace
from typing import Callable, Optional

from ..models.config import StreamSourceConfig
from ..services import config_resolver
from ..services.channel_refresher import ChannelRefresher
from ..services.config_service import ConfigService


class SettingsView(ft.Container):
    """Form for host, credentials and playlist options."""

    def __init__(
        self,
        config_service: ConfigService,
        refresher: ChannelRefresher,
        on_back: Optional[Callable] = None,
    ):
        super().__init__()
        self._config_service = config_service
        self._refresher = refresher
        self._on_back = on_back
        self._build_ui()
        self.load_from_config()

    def _text_field(self, label: str, hint: str = "", password: bool = False) -> ft.TextField:
        return ft.TextField(
            label=label,
            hint_text=hint,
            password=password,
            can_reveal_password=password,
            border_radius=12,
            border_color=ft.Colors.WHITE24,
            focused_border_color=ft.Colors.PURPLE_400,
            label_style=ft.TextStyle(color=ft.Colors.WHITE70),
            text_style=ft.TextStyle(color=ft.Colors.WHITE),
            on_change=self._update_preview,
        )

    def _build_ui(self):
        """Build the settings view."""
        header = ft.Row(
            [
                ft.IconButton(
                    icon=ft.Icons.ARROW_BACK_ROUNDED,
                    icon_color=ft.Colors.WHITE70,
                    tooltip="Back",
                    on_click=lambda e: self._on_back() if self._on_back else None,
                ),
                ft.Text("Settings", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
            ],
            spacing=8,
        )

        self._host_field = self._text_field("Host/DNS", "provider.example.com or https://.../playlist.m3u")
        self._username_field = self._text_field("Username")
        self._password_field = self._text_field("Password", password=True)
        self._port_field = self._text_field("Port", "80")
        self._alt_dns_field = self._text_field("Alternative DNS", "backup.example.com")
        self._interval_field = self._text_field("Update interval (minutes)", "30")
        self._format_group = ft.RadioGroup(
            content=ft.Row([
                ft.Radio(value="ts", label="MPEG-TS"),
                ft.Radio(value="hls", label="HLS"),
            ]),
            on_change=self._update_preview,
        )
        self._auto_reconnect_switch = ft.Switch(label="Auto reconnect", active_color=ft.Colors.PURPLE_400)
        self._hw_accel_switch = ft.Switch(label="Hardware acceleration", active_color=ft.Colors.PURPLE_400)

        self._preview_text = ft.Text("", size=11, color=ft.Colors.WHITE54, selectable=True)
        self._status_text = ft.Text("", size=12, color=ft.Colors.WHITE70)
        self._busy_ring = ft.ProgressRing(width=18, height=18, color=ft.Colors.PURPLE_400, visible=False)

        buttons = ft.Row(
            [
                ft.ElevatedButton(
                    text="Test connection",
                    icon=ft.Icons.WIFI_TETHERING_ROUNDED,
                    on_click=self._test_connection,
                ),
                ft.ElevatedButton(
                    text="Save",
                    icon=ft.Icons.SAVE_ROUNDED,
                    bgcolor=ft.Colors.PURPLE_700,
                    color=ft.Colors.WHITE,
                    on_click=self._save,
                ),
                ft.OutlinedButton(
                    text="Reload channels",
                    icon=ft.Icons.REFRESH_ROUNDED,
                    on_click=self._reload,
                ),
                ft.OutlinedButton(
                    text="Export",
                    icon=ft.Icons.CONTENT_COPY_ROUNDED,
                    on_click=self._export,
                ),
                ft.TextButton(
                    text="Clear",
                    icon=ft.Icons.DELETE_OUTLINE_ROUNDED,
                    on_click=self._clear,
                ),
                self._busy_ring,
            ],
            wrap=True,
            spacing=8,
        )

        self.content = ft.Column(
            [
                header,
                self._host_field,
                ft.Row([
                    ft.Container(self._username_field, expand=True),
                    ft.Container(self._password_field, expand=True),
                ]),
                ft.Row([
                    ft.Container(self._port_field, expand=True),
                    ft.Container(self._alt_dns_field, expand=True),
                    ft.Container(self._interval_field, expand=True),
                ]),
                ft.Text("Playlist format", color=ft.Colors.WHITE70),
                self._format_group,
                ft.Row([self._auto_reconnect_switch, self._hw_accel_switch]),
                self._preview_text,
                buttons,
                self._status_text,
            ],
            spacing=12,
            scroll=ft.ScrollMode.AUTO,
            expand=True,
        )
        self.padding = ft.padding.all(24)
        self.expand = True
        self.bgcolor = "#0a0a0f"

    def load_from_config(self):
        """Fill the form from the current configuration."""
        config = self._config_service.config
        self._host_field.value = config.host_dns
        self._username_field.value = config.username
        self._password_field.value = config.password
        self._port_field.value = config.port
        self._alt_dns_field.value = config.alternative_dns
        self._interval_field.value = config.update_interval
        self._format_group.value = config.playlist_format
        self._auto_reconnect_switch.value = config.auto_reconnect
        self._hw_accel_switch.value = config.hardware_acceleration
        self._update_preview(None)

    def _form_config(self) -> StreamSourceConfig:
        return replace(
            self._config_service.config,
            host_dns=(self._host_field.value or "").strip(),
            username=(self._username_field.value or "").strip(),
            password=(self._password_field.value or "").strip(),
            port=(self._port_field.value or "").strip(),
            alternative_dns=(self._alt_dns_field.value or "").strip(),
            update_interval=(self._interval_field.value or "").strip(),
            playlist_format=self._format_group.value or "ts",
            auto_reconnect=bool(self._auto_reconnect_switch.value),
            hardware_acceleration=bool(self._hw_accel_switch.value),
        )

    def _update_preview(self, e):
        config = self._form_config()
        if not config.host_dns:
            self._preview_text.value = "Playlist URL: http://server.com/get.php?username=...&password=...&type=m3u_plus"
        else:
            resolved = config_resolver.resolve(config)
            mode = "direct M3U" if resolved.is_direct_m3u else "provider API"
            self._preview_text.value = f"Playlist URL ({mode}): {config_resolver.redact(resolved.playlist_url)}"
        if self.page:
            self.update()

    def _set_status(self, text: str, ok: bool):
        self._status_text.value = text
        self._status_text.color = ft.Colors.GREEN_300 if ok else ft.Colors.RED_300

    def _set_busy(self, busy: bool):
        self._busy_ring.visible = busy
        if self.page:
            self.update()

    async def _test_connection(self, e):
        """Probe the provider with the values in the form."""
        self._status_text.value = "Testing connection..."
        self._status_text.color = ft.Colors.WHITE70
        self._set_busy(True)
        try:
            ok = await self._config_service.test_connection(self._form_config())
        finally:
            self._busy_ring.visible = False
        if ok:
            self._set_status("✓ Connection successful", True)
        else:
            error = self._config_service.last_error or "Unknown error"
            self._set_status(f"Connection failed: {error}", False)
        if self.page:
            self.update()

    async def _save(self, e):
        """Save the form; the channel list is refreshed in the background."""
        event = self._config_service.save(self._form_config())
        if event is None:
            self._set_status(self._config_service.last_error or "Save already in progress", False)
        else:
            self._set_status("✓ Configuration saved. The channel list will be updated.", True)
        self._update_preview(None)

    async def _reload(self, e):
        """Download the playlist again for the saved configuration."""
        self._set_busy(True)
        try:
            ok = await self._refresher.refresh()
        finally:
            self._busy_ring.visible = False
        if ok:
            self._set_status("✓ Channel list updated", True)
        elif self._refresher.last_error:
            self._set_status(self._refresher.last_error, False)
        else:
            self._set_status("A download is already in progress", False)
        if self.page:
            self.update()

    def _export(self, e):
        """Copy a configuration summary to the clipboard."""
        if self.page:
            self.page.set_clipboard(self._config_service.export_summary())
        self._set_status("Configuration copied to clipboard", True)
        if self.page:
            self.update()

    def _clear(self, e):
        self._config_service.clear()
        self.load_from_config()
        self._set_status("Configuration cleared", True)
        if self.page:
            self.update()
