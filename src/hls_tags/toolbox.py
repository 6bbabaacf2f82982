from __future__ import annotations

from typing import Iterable, List, Optional

from . import config
from . import logger as log_mod
from .errors import InvalidInput
from .tag import MediaSegmentTag, is_media_segment_tag, parse_media_segment_tag
from .version import ProtocolVersion

log = log_mod.get_logger()


class MediaSegmentToolbox:
    """Single entry point for reading and writing media segment tag lines.

    Contract:
    - parse_lines() keeps only media segment tags; comments, URIs and tags of
      other families are skipped
    - malformed tag lines are logged and dropped unless `strict` (default
      `config.STRICT_LINES`), in which case InvalidInput propagates
    - required_version() is the highest version any tag needs (V1 if none)
    """

    def __init__(self, *, strict: Optional[bool] = None):
        self.strict = config.STRICT_LINES if strict is None else strict

    @staticmethod
    def parse_line(line: str) -> MediaSegmentTag:
        return parse_media_segment_tag(line.rstrip("\r\n"))

    def parse_lines(
        self, lines: Iterable[str], *, strict: Optional[bool] = None
    ) -> List[MediaSegmentTag]:
        strict = self.strict if strict is None else strict
        tags: List[MediaSegmentTag] = []
        for lineno, raw in enumerate(lines, start=1):
            line = str(raw).rstrip("\r\n")
            if not is_media_segment_tag(line):
                continue
            try:
                tags.append(parse_media_segment_tag(line))
            except InvalidInput as e:
                if strict:
                    raise
                log.warning(f"Skipping malformed tag on line {lineno}: {e}")
        log.debug(f"Parsed {len(tags)} media segment tags")
        return tags

    @staticmethod
    def render_lines(tags: Iterable[MediaSegmentTag]) -> List[str]:
        return [tag.render() for tag in tags]

    @staticmethod
    def required_version(tags: Iterable[MediaSegmentTag]) -> ProtocolVersion:
        return max(
            (tag.requires_version() for tag in tags),
            default=ProtocolVersion.V1,
        )
