"""Active channel list with selection and navigation."""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models.channel import Channel, DEFAULT_CHANNELS


logger = logging.getLogger(__name__)


class ChannelCatalog:
    """Owns the current channel list.

    Single writer, many readers: :meth:`replace` swaps in a new tuple in one
    assignment so readers always see either the old or the new list.
    """

    def __init__(self, channels: Optional[Iterable[Channel]] = None):
        initial = tuple(channels) if channels is not None else ()
        self._channels: Tuple[Channel, ...] = initial or DEFAULT_CHANNELS
        self._selected: Optional[Channel] = None

    @property
    def channels(self) -> Tuple[Channel, ...]:
        return self._channels

    @property
    def selected(self) -> Optional[Channel]:
        return self._selected

    def __len__(self) -> int:
        return len(self._channels)

    def replace(self, channels: Sequence[Channel]) -> bool:
        """Swap in ``channels``; an empty sequence keeps the current list.

        Returns True when the list was replaced. The selection survives only if
        the same channel (equal in every field, not just id) is in the new list.
        """
        new_channels = tuple(channels)
        if not new_channels:
            logger.info("Empty channel list ignored, keeping %d channels", len(self._channels))
            return False

        self._channels = new_channels
        if self._selected is not None and self._selected not in new_channels:
            self._selected = None
        logger.info("Channel catalog replaced with %d channels", len(new_channels))
        return True

    def get(self, channel_id: int) -> Optional[Channel]:
        """Look up a channel by id without changing the selection."""
        index = self._find_index(channel_id)
        return self._channels[index] if index is not None else None

    def select(self, channel_id: int) -> Optional[Channel]:
        """Select a channel by id; unknown ids leave the selection untouched."""
        channel = self.get(channel_id)
        if channel is not None:
            self._selected = channel
        return channel

    def first(self) -> Channel:
        return self._channels[0]

    def next(self, after: Optional[int] = None) -> Channel:
        """Channel following ``after`` in list order, wrapping to the first.

        An unknown or missing id also wraps to the first channel.
        """
        channels = self._channels
        index = self._find_index(after) if after is not None else None
        if index is None or index == len(channels) - 1:
            return channels[0]
        return channels[index + 1]

    def previous(self, before: Optional[int] = None) -> Channel:
        """Channel preceding ``before``, wrapping to the last."""
        channels = self._channels
        index = self._find_index(before) if before is not None else None
        if index is None or index == 0:
            return channels[-1]
        return channels[index - 1]

    def groups(self) -> List[str]:
        """Get all unique categories from channels."""
        return sorted({channel.category for channel in self._channels if channel.category})

    def search(self, query: str) -> List[Channel]:
        """Search channels by name."""
        query = query.lower()
        return [ch for ch in self._channels if query in ch.name.lower()]

    def _find_index(self, channel_id: int) -> Optional[int]:
        for index, channel in enumerate(self._channels):
            if channel.id == channel_id:
                return index
        return None
