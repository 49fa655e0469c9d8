from __future__ import annotations


class CborDecodeError(ValueError):
    """Base class for every decode failure; `offset` is the byte position where it was detected."""

    def __init__(self, msg: str, *, offset: int | None = None):
        if offset is not None:
            msg = f"{msg} (at offset {offset})"
        super().__init__(msg)
        self.offset = offset


class OutOfBoundsError(CborDecodeError):
    pass


class UnsupportedAdditionalInfoError(CborDecodeError):
    def __init__(self, major_type: int, additional_info: int, *, offset: int | None = None, detail: str = ""):
        msg = f"unsupported additional info {additional_info} for major type {major_type}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg, offset=offset)
        self.major_type = major_type
        self.additional_info = additional_info


class InvalidUtf8Error(CborDecodeError):
    pass


class RecursionLimitExceededError(CborDecodeError):
    def __init__(self, limit: int, *, offset: int | None = None):
        super().__init__(f"nesting depth exceeds limit of {limit}", offset=offset)
        self.limit = limit


class NonCanonicalEncodingError(CborDecodeError):
    pass
