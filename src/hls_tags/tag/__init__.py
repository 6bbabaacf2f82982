"""Media segment tags and the dispatcher that picks one from a line.

Public API:
- ExtInf, ExtXByteRange, ExtXDiscontinuity, ExtXKey, ExtXMap,
  ExtXProgramDateTime, ExtXDateRange
- MediaSegmentTag (union of the above)
- parse_media_segment_tag(line)
"""

from __future__ import annotations

from typing import Union

from ..errors import InvalidInput
from .media_segment import (
    ExtInf,
    ExtXByteRange,
    ExtXDateRange,
    ExtXDiscontinuity,
    ExtXKey,
    ExtXMap,
    ExtXProgramDateTime,
)

MediaSegmentTag = Union[
    ExtInf,
    ExtXByteRange,
    ExtXDiscontinuity,
    ExtXKey,
    ExtXMap,
    ExtXProgramDateTime,
    ExtXDateRange,
]

MEDIA_SEGMENT_TAGS = (
    ExtInf,
    ExtXByteRange,
    ExtXDiscontinuity,
    ExtXKey,
    ExtXMap,
    ExtXProgramDateTime,
    ExtXDateRange,
)


_TAGS_BY_NAME = {tag_class.PREFIX.rstrip(":"): tag_class for tag_class in MEDIA_SEGMENT_TAGS}


def _tag_class_for(line: str):
    # compare whole tag names so #EXT-X-DISCONTINUITY-SEQUENCE is not taken
    # for #EXT-X-DISCONTINUITY
    name = line.split(":", 1)[0]
    return _TAGS_BY_NAME.get(name)


def is_media_segment_tag(line: str) -> bool:
    return _tag_class_for(line) is not None


def parse_media_segment_tag(line: str) -> MediaSegmentTag:
    tag_class = _tag_class_for(line)
    if tag_class is None:
        raise InvalidInput("not a media segment tag", value=line)
    return tag_class.parse(line)


__all__ = [
    "ExtInf",
    "ExtXByteRange",
    "ExtXDiscontinuity",
    "ExtXKey",
    "ExtXMap",
    "ExtXProgramDateTime",
    "ExtXDateRange",
    "MediaSegmentTag",
    "MEDIA_SEGMENT_TAGS",
    "is_media_segment_tag",
    "parse_media_segment_tag",
]
