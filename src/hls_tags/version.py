from __future__ import annotations

from enum import IntEnum


class ProtocolVersion(IntEnum):
    """Playlist compatibility version (EXT-X-VERSION)."""

    V1 = 1
    V2 = 2
    V3 = 3
    V4 = 4
    V5 = 5
    V6 = 6
    V7 = 7

    def __str__(self) -> str:
        return str(self.value)
