"""Attribute lists and the scalar value codecs used inside them (RFC 8216 §4.2).

Every attribute-bearing tag shares these helpers:
- AttributePairs splits `KEY=VALUE,...` text into raw pairs
- parse_*/format_* convert single attribute values to and from Python values

All failures raise `InvalidInput`.
"""

from __future__ import annotations

import datetime
import decimal
import re
import string
import unicodedata
from typing import Iterator, Optional, Tuple

from .errors import InvalidInput

_ATTRIBUTE_NAME_RE = re.compile(r"[A-Z0-9-]+")
_DECIMAL_RE = re.compile(r"(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?")
_FORBIDDEN_IN_QUOTES = ('"', "\r", "\n")

_NANOSECOND = decimal.Decimal("1e-9")


def validate_quoted_string(value: str, *, field: Optional[str] = None) -> str:
    if not isinstance(value, str):
        raise InvalidInput("expected a string", field=field, value=repr(value))
    if any(ch in value for ch in _FORBIDDEN_IN_QUOTES):
        raise InvalidInput(
            "quoted strings cannot contain double quotes or line breaks",
            field=field,
            value=value,
        )
    return value


def parse_quoted_string(text: str, *, field: Optional[str] = None) -> str:
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        raise InvalidInput("expected a double-quoted string", field=field, value=text)
    return validate_quoted_string(text[1:-1], field=field)


def format_quoted_string(value: str) -> str:
    return f'"{value}"'


def validate_m3u8_string(value: str, *, field: Optional[str] = None) -> str:
    """Free text (EXTINF titles): anything but control characters."""
    if not isinstance(value, str):
        raise InvalidInput("expected a string", field=field, value=repr(value))
    if any(unicodedata.category(ch) == "Cc" for ch in value):
        raise InvalidInput("control characters are not allowed", field=field, value=value)
    return value


def to_duration(value, *, field: Optional[str] = None) -> decimal.Decimal:
    """Exact seconds at nanosecond resolution.

    Accepts a timedelta, int, float or Decimal. Digits past the nanosecond
    are truncated.
    """
    if isinstance(value, datetime.timedelta):
        seconds = decimal.Decimal(value.days * 86400 + value.seconds)
        seconds += decimal.Decimal(value.microseconds).scaleb(-6)
    elif isinstance(value, bool) or not isinstance(value, (int, float, decimal.Decimal)):
        raise InvalidInput("expected a duration", field=field, value=repr(value))
    elif isinstance(value, float):
        seconds = decimal.Decimal(repr(value))
    else:
        seconds = decimal.Decimal(value)

    if not seconds.is_finite():
        raise InvalidInput("durations must be finite", field=field, value=str(seconds))
    if seconds < 0:
        raise InvalidInput("durations cannot be negative", field=field, value=str(seconds))
    try:
        return seconds.quantize(_NANOSECOND, rounding=decimal.ROUND_DOWN)
    except decimal.InvalidOperation as exc:
        raise InvalidInput("duration out of range", field=field, value=str(seconds)) from exc


def parse_decimal_floating_point(text: str, *, field: Optional[str] = None) -> decimal.Decimal:
    """Parse `12`, `12.5`, `.5` or `12.` as seconds."""
    match = _DECIMAL_RE.fullmatch(text)
    if match is None or not (match.group("int") or match.group("frac")):
        raise InvalidInput("expected a decimal floating point number", field=field, value=text)
    return to_duration(decimal.Decimal(text), field=field)


def format_decimal_floating_point(value) -> str:
    seconds = to_duration(value)
    # normalize() alone would give exponents such as 1E+2
    return format(seconds.normalize(), "f")


def parse_hexadecimal_sequence(text: str, *, field: Optional[str] = None) -> bytes:
    if text[:2] not in ("0x", "0X"):
        raise InvalidInput("hexadecimal sequences start with 0x", field=field, value=text)
    digits = text[2:]
    if not digits or any(ch not in string.hexdigits for ch in digits):
        raise InvalidInput("malformed hexadecimal sequence", field=field, value=text)
    # an odd trailing digit becomes a byte of its own
    return bytes(int(digits[i : i + 2], 16) for i in range(0, len(digits), 2))


def format_hexadecimal_sequence(value: bytes) -> str:
    return "0x" + bytes(value).hex()


def parse_yes(text: str, *, field: Optional[str] = None) -> bool:
    if text != "YES":
        raise InvalidInput("expected YES", field=field, value=text)
    return True


def _split_raw_value(text: str, name: str) -> Tuple[str, str, str]:
    in_quotes = False
    for i, ch in enumerate(text):
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            return text[:i], ",", text[i + 1 :]
    if in_quotes:
        raise InvalidInput("unterminated quoted string", field=name, value=text)
    return text, "", ""


def validate_attribute_name(name: str) -> str:
    if not isinstance(name, str) or not _ATTRIBUTE_NAME_RE.fullmatch(name):
        raise InvalidInput("malformed attribute name", value=repr(name))
    return name


def validate_raw_value(value: str, *, field: Optional[str] = None) -> str:
    """Check that `value` can be written verbatim as one attribute value."""
    if not isinstance(value, str) or not value:
        raise InvalidInput("expected a non-empty attribute value", field=field, value=repr(value))
    if any(ch in value for ch in ("\r", "\n")):
        raise InvalidInput("line breaks are not allowed", field=field, value=value)
    head, sep, _ = _split_raw_value(value, field or "")
    if sep or head != value:
        raise InvalidInput("unquoted commas are not allowed", field=field, value=value)
    return value


def parse_attribute_pairs(text: str) -> Iterator[Tuple[str, str]]:
    """Yield `(name, raw_value)` pairs one at a time.

    Commas inside double quotes do not end a value. A malformed pair (or a
    trailing comma) raises when it is reached, so earlier pairs are still
    produced.
    """
    rest = text
    while rest:
        name, sep, tail = rest.partition("=")
        if not sep:
            raise InvalidInput("attribute is missing '='", value=rest)
        validate_attribute_name(name)
        value, sep, rest = _split_raw_value(tail, name)
        if sep and not rest:
            raise InvalidInput("attribute list ends with a comma", field=name, value=text)
        yield name, value


class AttributePairs:
    """Re-iterable view of the attribute list in `text`."""

    def __init__(self, text: str):
        self._text = text

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return parse_attribute_pairs(self._text)

    def __repr__(self) -> str:
        return f"AttributePairs({self._text!r})"
