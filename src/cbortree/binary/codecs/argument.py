from __future__ import annotations
from .cursor import Cursor
from ..errors import NonCanonicalEncodingError, OutOfBoundsError, UnsupportedAdditionalInfoError
from ...models.common import ArgumentWidth
from ...models.config import DecoderConfig, resolve_config

AI_MASK = 0x1F
AI_UINT8 = 24
AI_UINT64 = 27
AI_INDEFINITE = 31

# AI 24..27 -> (trailing byte count, Cursor reader, width, smallest value that needs this width)
_WIDTHS = {
    24: (1, Cursor.u8, ArgumentWidth.UINT8, 24),
    25: (2, Cursor.u16, ArgumentWidth.UINT16, 1 << 8),
    26: (4, Cursor.u32, ArgumentWidth.UINT32, 1 << 16),
    27: (8, Cursor.u64, ArgumentWidth.UINT64, 1 << 32),
}

def decode_argument(cur: Cursor, config: DecoderConfig | None = None) -> tuple[int, ArgumentWidth]:
    """
    Resolve the argument of the header byte at the cursor and advance past
    the header and any trailing argument bytes.

    The caller has already looked at the top 3 bits (major type) with
    peek(); only this function moves the cursor past the header.
    """
    start = cur.tell()
    initial = cur.peek()
    ai = initial & AI_MASK

    if ai < AI_UINT8:
        cur.advance(1)
        return ai, ArgumentWidth.IMMEDIATE

    if ai > AI_UINT64:
        detail = "indefinite length is not supported" if ai == AI_INDEFINITE else "reserved"
        raise UnsupportedAdditionalInfoError(initial >> 5, ai, offset=start, detail=detail)

    nbytes, read, width, minimum = _WIDTHS[ai]
    # header and argument must both be present before anything is consumed
    if cur.remaining() < 1 + nbytes:
        raise OutOfBoundsError(
            f"argument needs {nbytes} byte(s) after header, have {cur.remaining() - 1}", offset=start
        )
    cur.advance(1)
    value = read(cur)

    if resolve_config(config).canonical and value < minimum:
        raise NonCanonicalEncodingError(
            f"argument {value} encoded in {nbytes} byte(s); shorter form required", offset=start
        )
    return value, width
