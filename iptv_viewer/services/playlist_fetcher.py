"""Playlist download and connectivity probing over HTTP."""
import logging
from pathlib import Path
from typing import Callable, Optional

import aiofiles
import httpx

from ..errors import ErrorKind, StreamError


logger = logging.getLogger(__name__)


class PlaylistFetcher:
    """Downloads playlists and probes provider endpoints.

    A fetcher allows one playlist download at a time. There is no
    cancellation: a request already issued runs until it completes or the
    transport times out.
    """

    TIMEOUT = 120.0  # large playlists can take a while
    CONNECT_TIMEOUT = 30.0
    PROBE_TIMEOUT = 15.0
    CHUNK_SIZE = 65536

    # Headers to mimic a TV/media player app
    DEFAULT_HEADERS = {
        "User-Agent": "IPTV Smarters Pro/2.2.2.5 (Linux; Android 10)",
        "Accept": "*/*",
        "Connection": "keep-alive",
    }

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._busy = False
        self.last_error: Optional[str] = None
        self.last_status_code: Optional[int] = None

    @property
    def is_busy(self) -> bool:
        """True while a playlist download is in flight."""
        return self._busy

    def _create_client(self, timeout: float) -> httpx.AsyncClient:
        """Create configured HTTP client."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=min(timeout, self.CONNECT_TIMEOUT)),
            follow_redirects=True,
            headers=self.DEFAULT_HEADERS,
            transport=self._transport,
        )

    async def probe(self, url: str) -> bool:
        """GET ``url`` and report whether it answered with exactly HTTP 200."""
        self.last_error = None
        self.last_status_code = None

        if not url or not url.startswith("http"):
            self.last_error = f"Invalid URL: {url}" if url else "URL not configured"
            return False

        try:
            async with self._create_client(self.PROBE_TIMEOUT) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            self.last_error = f"Connection timed out after {self.PROBE_TIMEOUT}s"
            return False
        except httpx.ConnectError:
            self.last_error = f"Cannot connect to server: {url}"
            return False
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.last_error = f"Connection error: {type(e).__name__} - {str(e) or 'Unknown error'}"
            return False

        self.last_status_code = response.status_code
        if response.status_code != 200:
            self.last_error = f"HTTP {response.status_code}"
            return False
        return True

    async def fetch_playlist(
        self,
        url: str,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> bytes:
        """Download the playlist body.

        Raises :class:`StreamError` with ``INVALID_URL`` for an empty or
        non-HTTP URL and ``NETWORK_ERROR`` for transport failures, non-200
        responses, or when another download is already running.
        """
        if not url:
            raise StreamError(ErrorKind.INVALID_URL, "Playlist URL not configured")
        if not url.startswith("http"):
            raise StreamError(ErrorKind.INVALID_URL, f"Invalid URL: {url}")
        if self._busy:
            raise StreamError(ErrorKind.NETWORK_ERROR, "A playlist download is already in progress")

        self._busy = True
        try:
            return await self._download(url, progress_callback)
        finally:
            self._busy = False

    async def _download(
        self,
        url: str,
        progress_callback: Optional[Callable[[int, int], None]],
    ) -> bytes:
        try:
            async with self._create_client(self.TIMEOUT) as client:
                async with client.stream("GET", url) as response:
                    if response.status_code != 200:
                        raise StreamError(ErrorKind.NETWORK_ERROR, f"HTTP {response.status_code}")

                    total_size = int(response.headers.get("content-length", 0) or 0)
                    downloaded = 0
                    chunks = []

                    async for chunk in response.aiter_bytes(chunk_size=self.CHUNK_SIZE):
                        chunks.append(chunk)
                        downloaded += len(chunk)

                        if progress_callback and total_size > 0:
                            progress_callback(downloaded, total_size)
        except httpx.TimeoutException as e:
            raise StreamError(ErrorKind.NETWORK_ERROR, "Timeout downloading playlist") from e
        except httpx.ConnectError as e:
            raise StreamError(ErrorKind.NETWORK_ERROR, f"Cannot connect to server: {url}") from e
        except httpx.InvalidURL as e:
            raise StreamError(ErrorKind.INVALID_URL, f"Invalid URL: {url}") from e
        except httpx.HTTPError as e:
            raise StreamError(ErrorKind.NETWORK_ERROR, f"Connection error: {type(e).__name__}") from e

        data = b"".join(chunks)
        logger.debug("Downloaded %d bytes from %s", len(data), url)
        return data

    async def read_file(self, file_path: str) -> bytes:
        """Read a playlist from a local file."""
        try:
            async with aiofiles.open(Path(file_path).expanduser(), "rb") as f:
                return await f.read()
        except OSError as e:
            raise StreamError(ErrorKind.INVALID_URL, f"Failed to read file: {e}") from e

    @staticmethod
    def is_local_file(location: str) -> bool:
        """True when ``location`` names an existing local file rather than a URL."""
        if not location or location.startswith("http"):
            return False
        return Path(location).expanduser().is_file()

    @staticmethod
    def decode_playlist(data: bytes) -> str:
        """Decode a playlist body as UTF-8 text, dropping a leading BOM."""
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise StreamError(ErrorKind.INVALID_DATA, "Playlist is not valid UTF-8 text") from e
