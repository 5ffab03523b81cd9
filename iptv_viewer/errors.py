"""Error types shared by the playlist pipeline."""
from enum import Enum


class ErrorKind(Enum):
    INVALID_URL = "invalid_url"
    NETWORK_ERROR = "network_error"
    INVALID_DATA = "invalid_data"
    PARSE_EMPTY = "parse_empty"


DEFAULT_MESSAGES = {
    ErrorKind.INVALID_URL: "Invalid URL",
    ErrorKind.NETWORK_ERROR: "Network error",
    ErrorKind.INVALID_DATA: "Invalid data",
    ErrorKind.PARSE_EMPTY: "No channels found in playlist",
}


class StreamError(Exception):
    """A pipeline failure tagged with its kind and a human-readable message."""

    def __init__(self, kind: ErrorKind, message: str = ""):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"StreamError({self.kind.name}, {self.message!r})"
