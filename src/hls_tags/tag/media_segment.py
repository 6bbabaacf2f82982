"""Media segment tags (RFC 8216 §4.3.2).

Each tag is an immutable value with:
- PREFIX: the literal text that starts the tag line
- parse(line): build the tag from one playlist line (raises InvalidInput)
- render() / str(): the canonical line, always accepted by parse()
- requires_version(): the lowest EXT-X-VERSION the tag's fields need
"""

from __future__ import annotations

import datetime
import decimal
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Mapping, Optional

import pytz

from .. import config
from .. import logger as log_mod
from ..attribute import (
    AttributePairs,
    format_decimal_floating_point,
    format_quoted_string,
    parse_decimal_floating_point,
    parse_quoted_string,
    parse_yes,
    to_duration,
    validate_attribute_name,
    validate_m3u8_string,
    validate_quoted_string,
    validate_raw_value,
)
from ..errors import InvalidInput
from ..models import ByteRange, DecryptionKey
from ..version import ProtocolVersion

log = log_mod.get_logger()

CLIENT_ATTRIBUTE_PREFIX = "X-"


def _strip_prefix(line: str, prefix: str) -> str:
    if not line.startswith(prefix):
        raise InvalidInput(f"expected a line starting with {prefix}", value=line)
    return line[len(prefix) :]


def _ignore(tag: str, key: str) -> None:
    # RFC 8216 §6.3.1: ignore any attribute with an unrecognized name
    log.debug(f"Ignoring {tag} attribute {key}")


@dataclass(frozen=True)
class ExtInf:
    """#EXTINF:<duration>[,<title>]

    `duration` is stored as exact seconds (Decimal, nanosecond resolution);
    a timedelta, int or float is converted on construction.
    """

    PREFIX: ClassVar[str] = "#EXTINF:"

    duration: decimal.Decimal
    title: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "duration", to_duration(self.duration, field="duration"))
        if self.title is not None:
            validate_m3u8_string(self.title, field="title")

    @classmethod
    def with_title(cls, duration, title: str) -> "ExtInf":
        return cls(duration=duration, title=title)

    @classmethod
    def parse(cls, line: str) -> "ExtInf":
        rest = _strip_prefix(line, cls.PREFIX)
        seconds, sep, title = rest.partition(",")
        duration = parse_decimal_floating_point(seconds, field="duration")
        return cls(duration=duration, title=title if sep else None)

    def render(self) -> str:
        text = f"{self.PREFIX}{format_decimal_floating_point(self.duration)}"
        if self.title is not None:
            text += f",{self.title}"
        return text

    def __str__(self) -> str:
        return self.render()

    def requires_version(self) -> ProtocolVersion:
        if self.duration == self.duration.to_integral_value():
            return ProtocolVersion.V1
        return ProtocolVersion.V3


@dataclass(frozen=True)
class ExtXByteRange:
    """#EXT-X-BYTERANGE:<n>[@<o>]"""

    PREFIX: ClassVar[str] = "#EXT-X-BYTERANGE:"

    range: ByteRange

    def __post_init__(self) -> None:
        if not isinstance(self.range, ByteRange):
            raise InvalidInput("expected a ByteRange", field="range", value=repr(self.range))

    @classmethod
    def parse(cls, line: str) -> "ExtXByteRange":
        return cls(range=ByteRange.parse(_strip_prefix(line, cls.PREFIX)))

    def render(self) -> str:
        return f"{self.PREFIX}{self.range}"

    def __str__(self) -> str:
        return self.render()

    def requires_version(self) -> ProtocolVersion:
        return ProtocolVersion.V4


@dataclass(frozen=True)
class ExtXDiscontinuity:
    PREFIX: ClassVar[str] = "#EXT-X-DISCONTINUITY"

    @classmethod
    def parse(cls, line: str) -> "ExtXDiscontinuity":
        if line != cls.PREFIX:
            raise InvalidInput(f"expected exactly {cls.PREFIX}", value=line)
        return cls()

    def render(self) -> str:
        return self.PREFIX

    def __str__(self) -> str:
        return self.render()

    def requires_version(self) -> ProtocolVersion:
        return ProtocolVersion.V1


@dataclass(frozen=True)
class ExtXKey:
    """#EXT-X-KEY:<attribute-list>

    `key=None` stands for METHOD=NONE: segments from here on are not
    encrypted.
    """

    PREFIX: ClassVar[str] = "#EXT-X-KEY:"
    FORBIDDEN_WITHOUT_KEY: ClassVar[tuple] = (
        "URI",
        "IV",
        "KEYFORMAT",
        "KEYFORMATVERSIONS",
    )

    key: Optional[DecryptionKey] = None

    def __post_init__(self) -> None:
        if self.key is not None and not isinstance(self.key, DecryptionKey):
            raise InvalidInput("expected a DecryptionKey", field="key", value=repr(self.key))

    @classmethod
    def without_key(cls) -> "ExtXKey":
        return cls(key=None)

    @classmethod
    def parse(cls, line: str) -> "ExtXKey":
        rest = _strip_prefix(line, cls.PREFIX)
        pairs = list(AttributePairs(rest))
        if ("METHOD", "NONE") not in pairs:
            return cls(key=DecryptionKey.parse(rest))

        for key, value in pairs:
            if key in cls.FORBIDDEN_WITHOUT_KEY:
                raise InvalidInput("not allowed with METHOD=NONE", field=key, value=value)
        return cls(key=None)

    def render(self) -> str:
        if self.key is None:
            return f"{self.PREFIX}METHOD=NONE"
        return f"{self.PREFIX}{self.key}"

    def __str__(self) -> str:
        return self.render()

    def requires_version(self) -> ProtocolVersion:
        if self.key is None:
            return ProtocolVersion.V1
        return self.key.requires_version()


@dataclass(frozen=True)
class ExtXMap:
    """#EXT-X-MAP:URI="<uri>"[,BYTERANGE="<n>[@<o>]"]"""

    PREFIX: ClassVar[str] = "#EXT-X-MAP:"

    uri: str
    range: Optional[ByteRange] = None

    def __post_init__(self) -> None:
        validate_quoted_string(self.uri, field="URI")
        if self.range is not None and not isinstance(self.range, ByteRange):
            raise InvalidInput("expected a ByteRange", field="BYTERANGE", value=repr(self.range))

    @classmethod
    def with_range(cls, uri: str, range: ByteRange) -> "ExtXMap":
        return cls(uri=uri, range=range)

    @classmethod
    def parse(cls, line: str) -> "ExtXMap":
        uri = None
        byte_range = None
        for key, value in AttributePairs(_strip_prefix(line, cls.PREFIX)):
            if key == "URI":
                uri = parse_quoted_string(value, field=key)
            elif key == "BYTERANGE":
                # RFC 8216 quotes this value; older writers emit it bare
                if value.startswith('"'):
                    value = parse_quoted_string(value, field=key)
                byte_range = ByteRange.parse(value)
            else:
                _ignore("EXT-X-MAP", key)

        if uri is None:
            raise InvalidInput("missing required attribute", field="URI")
        return cls(uri=uri, range=byte_range)

    def render(self) -> str:
        text = f"{self.PREFIX}URI={format_quoted_string(self.uri)}"
        if self.range is not None:
            text += f",BYTERANGE={format_quoted_string(str(self.range))}"
        return text

    def __str__(self) -> str:
        return self.render()

    def requires_version(self) -> ProtocolVersion:
        return ProtocolVersion.V6


@dataclass(frozen=True)
class ExtXProgramDateTime:
    """#EXT-X-PROGRAM-DATE-TIME:<ISO-8601 date-time with offset>"""

    PREFIX: ClassVar[str] = "#EXT-X-PROGRAM-DATE-TIME:"

    date_time: datetime.datetime

    def __post_init__(self) -> None:
        if not isinstance(self.date_time, datetime.datetime):
            raise InvalidInput("expected a datetime", field="date_time", value=repr(self.date_time))
        if self.date_time.utcoffset() is None:
            raise InvalidInput(
                "a UTC offset is required", field="date_time", value=self.date_time.isoformat()
            )

    @classmethod
    def localized(
        cls, naive: datetime.datetime, tz_name: Optional[str] = None
    ) -> "ExtXProgramDateTime":
        """Attach `tz_name` (default `config.TIMEZONE`) to a naive datetime."""
        name = tz_name or config.TIMEZONE
        try:
            tz = pytz.timezone(name)
        except pytz.UnknownTimeZoneError as exc:
            raise InvalidInput("unknown time zone", field="date_time", value=name) from exc
        try:
            date_time = tz.localize(naive)
        except ValueError as exc:
            raise InvalidInput(
                "expected a naive datetime", field="date_time", value=naive.isoformat()
            ) from exc
        return cls(date_time=date_time)

    @classmethod
    def parse(cls, line: str) -> "ExtXProgramDateTime":
        rest = _strip_prefix(line, cls.PREFIX)
        try:
            date_time = datetime.datetime.fromisoformat(rest)
        except ValueError as exc:
            raise InvalidInput("malformed date-time", field="date_time", value=rest) from exc
        return cls(date_time=date_time)

    def render(self) -> str:
        micro = self.date_time.microsecond
        if not micro:
            timespec = "seconds"
        elif micro % 1000 == 0:
            timespec = "milliseconds"
        else:
            timespec = "microseconds"
        return f"{self.PREFIX}{self.date_time.isoformat(timespec=timespec)}"

    def __str__(self) -> str:
        return self.render()

    def requires_version(self) -> ProtocolVersion:
        return ProtocolVersion.V1


def _parse_date(value: str, key: str) -> datetime.date:
    text = parse_quoted_string(value, field=key)
    try:
        return datetime.datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidInput("expected a YYYY-MM-DD date", field=key, value=text) from exc


def _check_date(value, name: str) -> None:
    if isinstance(value, datetime.datetime) or not isinstance(value, datetime.date):
        raise InvalidInput("expected a date", field=name, value=repr(value))


@dataclass(frozen=True)
class ExtXDateRange:
    """#EXT-X-DATERANGE:<attribute-list>

    `client_attributes` holds the `X-` attributes keyed without the prefix.
    Values are kept exactly as written (quotes included) and rendered sorted
    by key.
    """

    PREFIX: ClassVar[str] = "#EXT-X-DATERANGE:"

    id: str
    start_date: datetime.date
    class_: Optional[str] = None
    end_date: Optional[datetime.date] = None
    duration: Optional[decimal.Decimal] = None
    planned_duration: Optional[decimal.Decimal] = None
    scte35_cmd: Optional[str] = None
    scte35_out: Optional[str] = None
    scte35_in: Optional[str] = None
    end_on_next: bool = False
    client_attributes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_quoted_string(self.id, field="ID")
        _check_date(self.start_date, "START-DATE")
        if self.end_date is not None:
            _check_date(self.end_date, "END-DATE")
        for name, value in (
            ("CLASS", self.class_),
            ("SCTE35-CMD", self.scte35_cmd),
            ("SCTE35-OUT", self.scte35_out),
            ("SCTE35-IN", self.scte35_in),
        ):
            if value is not None:
                validate_quoted_string(value, field=name)
        if self.duration is not None:
            object.__setattr__(self, "duration", to_duration(self.duration, field="DURATION"))
        if self.planned_duration is not None:
            object.__setattr__(
                self,
                "planned_duration",
                to_duration(self.planned_duration, field="PLANNED-DURATION"),
            )
        if self.end_on_next and self.class_ is None:
            raise InvalidInput("END-ON-NEXT requires CLASS", field="END-ON-NEXT")

        for key, value in self.client_attributes.items():
            if not isinstance(key, str):
                raise InvalidInput("client attribute names are strings", value=repr(key))
            name = CLIENT_ATTRIBUTE_PREFIX + key
            validate_attribute_name(name)
            validate_raw_value(value, field=name)
        attributes = dict(sorted(self.client_attributes.items()))
        object.__setattr__(self, "end_on_next", bool(self.end_on_next))
        object.__setattr__(self, "client_attributes", attributes)

    def __hash__(self) -> int:
        return hash(
            (
                self.id,
                self.start_date,
                self.class_,
                self.end_date,
                self.duration,
                self.planned_duration,
                self.scte35_cmd,
                self.scte35_out,
                self.scte35_in,
                self.end_on_next,
                frozenset(self.client_attributes.items()),
            )
        )

    @classmethod
    def parse(cls, line: str) -> "ExtXDateRange":
        values: Dict[str, object] = {}
        client_attributes: Dict[str, str] = {}
        quoted = {
            "ID": "id",
            "CLASS": "class_",
            "SCTE35-CMD": "scte35_cmd",
            "SCTE35-OUT": "scte35_out",
            "SCTE35-IN": "scte35_in",
        }
        dates = {"START-DATE": "start_date", "END-DATE": "end_date"}
        durations = {"DURATION": "duration", "PLANNED-DURATION": "planned_duration"}

        for key, value in AttributePairs(_strip_prefix(line, cls.PREFIX)):
            if key in quoted:
                values[quoted[key]] = parse_quoted_string(value, field=key)
            elif key in dates:
                values[dates[key]] = _parse_date(value, key)
            elif key in durations:
                values[durations[key]] = parse_decimal_floating_point(value, field=key)
            elif key == "END-ON-NEXT":
                values["end_on_next"] = parse_yes(value, field=key)
            elif key.startswith(CLIENT_ATTRIBUTE_PREFIX):
                client_attributes[key[len(CLIENT_ATTRIBUTE_PREFIX) :]] = value
            else:
                _ignore("EXT-X-DATERANGE", key)

        if "id" not in values:
            raise InvalidInput("missing required attribute", field="ID")
        if "start_date" not in values:
            raise InvalidInput("missing required attribute", field="START-DATE")
        return cls(client_attributes=client_attributes, **values)

    def render(self) -> str:
        parts = [f"ID={format_quoted_string(self.id)}"]
        if self.class_ is not None:
            parts.append(f"CLASS={format_quoted_string(self.class_)}")
        parts.append(f"START-DATE={format_quoted_string(self.start_date.isoformat())}")
        if self.end_date is not None:
            parts.append(f"END-DATE={format_quoted_string(self.end_date.isoformat())}")
        if self.duration is not None:
            parts.append(f"DURATION={format_decimal_floating_point(self.duration)}")
        if self.planned_duration is not None:
            parts.append(
                f"PLANNED-DURATION={format_decimal_floating_point(self.planned_duration)}"
            )
        if self.scte35_cmd is not None:
            parts.append(f"SCTE35-CMD={format_quoted_string(self.scte35_cmd)}")
        if self.scte35_out is not None:
            parts.append(f"SCTE35-OUT={format_quoted_string(self.scte35_out)}")
        if self.scte35_in is not None:
            parts.append(f"SCTE35-IN={format_quoted_string(self.scte35_in)}")
        if self.end_on_next:
            parts.append("END-ON-NEXT=YES")
        for key, value in self.client_attributes.items():
            parts.append(f"{CLIENT_ATTRIBUTE_PREFIX}{key}={value}")
        return self.PREFIX + ",".join(parts)

    def __str__(self) -> str:
        return self.render()

    def requires_version(self) -> ProtocolVersion:
        return ProtocolVersion.V1
