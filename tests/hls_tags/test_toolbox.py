import datetime
import logging

import pytest

from hls_tags import config
from hls_tags.errors import InvalidInput
from hls_tags.models import ByteRange
from hls_tags.tag import ExtInf, ExtXDiscontinuity, ExtXKey, ExtXMap
from hls_tags.toolbox import MediaSegmentToolbox
from hls_tags.version import ProtocolVersion

PLAYLIST = [
    "#EXTM3U\n",
    "#EXT-X-VERSION:3\n",
    "#EXT-X-TARGETDURATION:10\n",
    "#EXT-X-KEY:METHOD=NONE\n",
    "#EXTINF:9.009,\n",
    "seg0.ts\n",
    "#EXT-X-BYTERANGE:bad\r\n",
    "#EXT-X-DISCONTINUITY\n",
    "\n",
    "#EXTINF:10,\n",
    "seg1.ts",
]


def test_parse_lines_skips_other_lines_and_malformed_tags(caplog):
    toolbox = MediaSegmentToolbox(strict=False)
    with caplog.at_level(logging.WARNING, logger="hls_tags"):
        tags = toolbox.parse_lines(PLAYLIST)

    assert tags == [
        ExtXKey.without_key(),
        ExtInf(datetime.timedelta(seconds=9, microseconds=9000), ""),
        ExtXDiscontinuity(),
        ExtInf(datetime.timedelta(seconds=10), ""),
    ]
    assert "line 7" in caplog.text


def test_parse_lines_strict_raises():
    with pytest.raises(InvalidInput):
        MediaSegmentToolbox(strict=True).parse_lines(PLAYLIST)
    with pytest.raises(InvalidInput):
        MediaSegmentToolbox(strict=False).parse_lines(PLAYLIST, strict=True)


def test_strict_default_comes_from_config(monkeypatch):
    monkeypatch.setattr(config, "STRICT_LINES", True)
    assert MediaSegmentToolbox().strict is True
    monkeypatch.setattr(config, "STRICT_LINES", False)
    assert MediaSegmentToolbox().strict is False


def test_parse_line_strips_line_ending():
    assert MediaSegmentToolbox.parse_line("#EXT-X-DISCONTINUITY\r\n") == ExtXDiscontinuity()


def test_render_lines_round_trip():
    toolbox = MediaSegmentToolbox(strict=True)
    tags = toolbox.parse_lines(PLAYLIST[:6] + PLAYLIST[7:])
    rendered = toolbox.render_lines(tags)
    assert rendered == [
        "#EXT-X-KEY:METHOD=NONE",
        "#EXTINF:9.009,",
        "#EXT-X-DISCONTINUITY",
        "#EXTINF:10,",
    ]
    assert toolbox.parse_lines(rendered) == tags


def test_required_version_is_the_maximum():
    tags = MediaSegmentToolbox(strict=False).parse_lines(PLAYLIST)
    assert MediaSegmentToolbox.required_version(tags) == ProtocolVersion.V3
    assert MediaSegmentToolbox.required_version([]) == ProtocolVersion.V1
    tags.append(ExtXMap.with_range("init.mp4", ByteRange(length=10)))
    assert MediaSegmentToolbox.required_version(tags) == ProtocolVersion.V6
