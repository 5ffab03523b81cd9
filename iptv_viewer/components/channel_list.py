"""Side panel listing the catalog's channels."""
import flet as ft
from typing import Callable, List, Optional

from ..models.channel import Channel
from ..services.channel_catalog import ChannelCatalog


class ChannelList(ft.Container):
    """Scrollable channel list with category chips and name search.

    Renders at most ``PAGE_SIZE`` tiles at a time; the catalog may hold up
    to the parser's channel cap.
    """

    PAGE_SIZE = 50
    MAX_CHIPS = 12

    def __init__(
        self,
        catalog: ChannelCatalog,
        on_channel_select: Optional[Callable[[Channel], None]] = None,
    ):
        super().__init__()
        self._catalog = catalog
        self._on_channel_select = on_channel_select
        self._selected_id: Optional[int] = None
        self._selected_group: Optional[str] = None
        self._search_query = ""
        self._visible: List[Channel] = []
        self._displayed_count = 0

        self._build_ui()
        self._apply_filters()

    def _build_ui(self):
        """Build the channel list UI."""
        self._search_field = ft.TextField(
            hint_text="Search channels...",
            prefix_icon=ft.Icons.SEARCH_ROUNDED,
            border_radius=30,
            height=44,
            text_size=14,
            border_color=ft.Colors.TRANSPARENT,
            focused_border_color=ft.Colors.PURPLE_400,
            bgcolor="#1a1a2e",
            color=ft.Colors.WHITE,
            on_submit=self._on_search_submit,
        )
        self._group_chips = ft.Row(scroll=ft.ScrollMode.AUTO, spacing=8)
        self._count_text = ft.Text("", size=12, color=ft.Colors.WHITE38)
        self._list_view = ft.ListView(spacing=4, expand=True)
        self._load_more_btn = ft.TextButton(
            text="Load more",
            icon=ft.Icons.EXPAND_MORE_ROUNDED,
            visible=False,
            on_click=self._load_more,
        )

        self.content = ft.Column(
            [
                ft.Row(
                    [
                        ft.Text("Channels", size=18, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
                        self._count_text,
                    ],
                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                ),
                self._search_field,
                self._group_chips,
                ft.Column([self._list_view, self._load_more_btn], spacing=0, expand=True),
            ],
            spacing=12,
            expand=True,
        )
        self.padding = ft.padding.all(16)
        self.expand = True

    def refresh(self, selected: Optional[Channel] = None):
        """Re-read the catalog, e.g. after a playlist refresh."""
        if selected is not None:
            self._selected_id = selected.id
        if self._selected_group not in self._catalog.groups():
            self._selected_group = None
        self._apply_filters()

    def _apply_filters(self):
        channels = list(self._catalog.search(self._search_query)) if self._search_query else list(self._catalog.channels)
        if self._selected_group:
            channels = [ch for ch in channels if ch.category == self._selected_group]
        self._visible = channels

        self._update_group_chips()
        self._list_view.controls = [self._build_channel_tile(ch) for ch in channels[:self.PAGE_SIZE]]
        self._displayed_count = len(self._list_view.controls)
        self._count_text.value = f"{len(channels)} channels"
        self._load_more_btn.visible = self._displayed_count < len(channels)

        if self.page:
            self.update()

    def _update_group_chips(self):
        groups = self._catalog.groups()
        chips = [self._build_chip("All", None)]
        chips.extend(self._build_chip(group, group) for group in groups[:self.MAX_CHIPS])
        self._group_chips.controls = chips

    def _build_chip(self, label: str, group: Optional[str]) -> ft.Control:
        is_selected = self._selected_group == group
        return ft.Container(
            content=ft.Text(
                label[:16] + "..." if len(label) > 16 else label,
                size=13,
                color=ft.Colors.WHITE if is_selected else ft.Colors.WHITE70,
            ),
            padding=ft.padding.symmetric(horizontal=14, vertical=6),
            border_radius=20,
            bgcolor=ft.Colors.PURPLE_700 if is_selected else "#1a1a2e",
            on_click=lambda e, g=group: self._select_group(g),
        )

    def _build_channel_tile(self, channel: Channel) -> ft.Control:
        is_selected = channel.id == self._selected_id

        if channel.logo:
            logo_content = ft.Image(
                src=channel.logo,
                width=32,
                height=32,
                fit=ft.ImageFit.CONTAIN,
                error_content=ft.Icon(ft.Icons.LIVE_TV_ROUNDED, color=ft.Colors.WHITE54, size=18),
            )
        else:
            logo_content = ft.Icon(ft.Icons.LIVE_TV_ROUNDED, color=ft.Colors.WHITE54, size=18)

        return ft.Container(
            content=ft.Row(
                [
                    ft.Container(
                        content=logo_content,
                        width=40,
                        height=40,
                        border_radius=10,
                        bgcolor="#1a1a2e",
                        alignment=ft.alignment.center,
                    ),
                    ft.Column(
                        [
                            ft.Text(channel.name, size=13, weight=ft.FontWeight.W_500,
                                    color=ft.Colors.WHITE, max_lines=1),
                            ft.Text(channel.category, size=11, color=ft.Colors.WHITE38, max_lines=1),
                        ],
                        spacing=2,
                        expand=True,
                    ),
                ],
                spacing=10,
            ),
            padding=ft.padding.symmetric(horizontal=12, vertical=8),
            border_radius=12,
            bgcolor="#1e1e32" if is_selected else "transparent",
            on_click=lambda e, ch=channel: self._select_channel(ch),
        )

    def _load_more(self, e):
        start = self._displayed_count
        more = self._visible[start:start + self.PAGE_SIZE]
        self._list_view.controls.extend(self._build_channel_tile(ch) for ch in more)
        self._displayed_count += len(more)
        self._load_more_btn.visible = self._displayed_count < len(self._visible)
        if self.page:
            self.update()

    def _select_channel(self, channel: Channel):
        self._selected_id = channel.id
        if self._on_channel_select:
            # The owner calls refresh() once the selection is committed
            self._on_channel_select(channel)
        else:
            self._apply_filters()

    def _select_group(self, group: Optional[str]):
        self._selected_group = group
        self._apply_filters()

    def _on_search_submit(self, e):
        self._search_query = (self._search_field.value or "").strip()
        self._apply_filters()
