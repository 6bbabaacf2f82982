from __future__ import annotations

from typing import Optional


class HlsError(ValueError):
    """Base error for hls_tags."""


class InvalidInput(HlsError):
    """A tag line or field value is not valid.

    `field` names the attribute or field being decoded (when known) and
    `value` holds the offending raw text. The underlying failure, if any, is
    chained as `__cause__`.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[str] = None,
    ) -> None:
        self.field = field
        self.value = value
        detail = message
        if field is not None:
            detail = f"{field}: {detail}"
        if value is not None:
            detail = f"{detail} (got {value!r})"
        super().__init__(detail)
