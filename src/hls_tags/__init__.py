"""HLS (RFC 8216) media segment tags: parse, validate and render.

Recommended entry point:
- MediaSegmentToolbox

The tag classes, scalar value types and ProtocolVersion are exported for
callers that work with single tags.
"""

from .errors import HlsError, InvalidInput
from .models import ByteRange, DecryptionKey, EncryptionMethod
from .tag import (
    ExtInf,
    ExtXByteRange,
    ExtXDateRange,
    ExtXDiscontinuity,
    ExtXKey,
    ExtXMap,
    ExtXProgramDateTime,
    MediaSegmentTag,
    parse_media_segment_tag,
)
from .toolbox import MediaSegmentToolbox
from .version import ProtocolVersion

__all__ = [
    "MediaSegmentToolbox",
    "MediaSegmentTag",
    "parse_media_segment_tag",
    "ExtInf",
    "ExtXByteRange",
    "ExtXDiscontinuity",
    "ExtXKey",
    "ExtXMap",
    "ExtXProgramDateTime",
    "ExtXDateRange",
    "ByteRange",
    "DecryptionKey",
    "EncryptionMethod",
    "ProtocolVersion",
    "HlsError",
    "InvalidInput",
]
