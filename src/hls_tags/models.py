from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from . import logger as log_mod
from .attribute import (
    AttributePairs,
    format_hexadecimal_sequence,
    format_quoted_string,
    parse_hexadecimal_sequence,
    parse_quoted_string,
    validate_quoted_string,
)
from .errors import InvalidInput
from .version import ProtocolVersion

log = log_mod.get_logger()

_BYTE_RANGE_RE = re.compile(r"(?P<length>[0-9]+)(?:@(?P<start>[0-9]+))?")


def _check_unsigned(value, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInput("expected an unsigned integer", field=field, value=repr(value))


@dataclass(frozen=True)
class ByteRange:
    """`LENGTH[@START]`; no start means "right after the previous range"."""

    length: int
    start: Optional[int] = None

    def __post_init__(self) -> None:
        _check_unsigned(self.length, "length")
        if self.start is not None:
            _check_unsigned(self.start, "start")

    @classmethod
    def parse(cls, text: str) -> "ByteRange":
        match = _BYTE_RANGE_RE.fullmatch(text)
        if match is None:
            raise InvalidInput("expected LENGTH[@START]", field="BYTERANGE", value=text)
        start = match.group("start")
        return cls(
            length=int(match.group("length")),
            start=int(start) if start is not None else None,
        )

    def __str__(self) -> str:
        if self.start is None:
            return str(self.length)
        return f"{self.length}@{self.start}"


class EncryptionMethod(Enum):
    AES_128 = "AES-128"
    SAMPLE_AES = "SAMPLE-AES"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "EncryptionMethod":
        try:
            return cls(text)
        except ValueError as exc:
            raise InvalidInput("unknown encryption method", field="METHOD", value=text) from exc


@dataclass(frozen=True)
class DecryptionKey:
    """Key record carried by EXT-X-KEY when segments are encrypted."""

    method: EncryptionMethod
    uri: str
    iv: Optional[bytes] = None
    key_format: Optional[str] = None
    key_format_versions: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.method, EncryptionMethod):
            object.__setattr__(self, "method", EncryptionMethod.parse(self.method))
        validate_quoted_string(self.uri, field="URI")
        if self.iv is not None:
            if not isinstance(self.iv, (bytes, bytearray)) or not self.iv:
                raise InvalidInput("IV must be non-empty bytes", field="IV", value=repr(self.iv))
            object.__setattr__(self, "iv", bytes(self.iv))
        if self.key_format is not None:
            validate_quoted_string(self.key_format, field="KEYFORMAT")
        if self.key_format_versions is not None:
            validate_quoted_string(self.key_format_versions, field="KEYFORMATVERSIONS")

    @classmethod
    def parse(cls, text: str) -> "DecryptionKey":
        """Build a key from an attribute list such as `METHOD=AES-128,URI="k"`."""
        method = None
        uri = None
        iv = None
        key_format = None
        key_format_versions = None
        for key, value in AttributePairs(text):
            if key == "METHOD":
                method = EncryptionMethod.parse(value)
            elif key == "URI":
                uri = parse_quoted_string(value, field=key)
            elif key == "IV":
                iv = parse_hexadecimal_sequence(value, field=key)
            elif key == "KEYFORMAT":
                key_format = parse_quoted_string(value, field=key)
            elif key == "KEYFORMATVERSIONS":
                key_format_versions = parse_quoted_string(value, field=key)
            else:
                # RFC 8216 §6.3.1: ignore unrecognized attributes
                log.debug(f"Ignoring EXT-X-KEY attribute {key}")

        if method is None:
            raise InvalidInput("missing required attribute", field="METHOD")
        if uri is None:
            raise InvalidInput("missing required attribute", field="URI")
        return cls(
            method=method,
            uri=uri,
            iv=iv,
            key_format=key_format,
            key_format_versions=key_format_versions,
        )

    def __str__(self) -> str:
        parts = [f"METHOD={self.method}", f"URI={format_quoted_string(self.uri)}"]
        if self.iv is not None:
            parts.append(f"IV={format_hexadecimal_sequence(self.iv)}")
        if self.key_format is not None:
            parts.append(f"KEYFORMAT={format_quoted_string(self.key_format)}")
        if self.key_format_versions is not None:
            parts.append(
                f"KEYFORMATVERSIONS={format_quoted_string(self.key_format_versions)}"
            )
        return ",".join(parts)

    def requires_version(self) -> ProtocolVersion:
        if self.key_format is not None or self.key_format_versions is not None:
            return ProtocolVersion.V5
        if self.iv is not None:
            return ProtocolVersion.V2
        return ProtocolVersion.V1
