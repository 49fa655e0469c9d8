from __future__ import annotations
from .cursor import Cursor
from .argument import AI_INDEFINITE, AI_MASK, AI_UINT8, AI_UINT64, decode_argument
from .float_codec import FLOAT_DECODERS
from ..errors import (
    InvalidUtf8Error,
    OutOfBoundsError,
    RecursionLimitExceededError,
    UnsupportedAdditionalInfoError,
)
from ...models.common import MajorType, SimpleValue, UnsupportedPolicy
from ...models.config import DecoderConfig, resolve_config
from ...models.value import (
    Array,
    ByteString,
    Float,
    Invalid,
    Map,
    NegativeInt,
    Simple,
    Tag,
    TextString,
    UnsignedInt,
    Value,
)

_SIMPLE = {int(sv): Simple(sv) for sv in SimpleValue}


def _is_unsupported(major: int, ai: int) -> bool:
    if ai > AI_UINT64:
        return True
    if major == MajorType.SIMPLE_FLOAT:
        # 0..19 unassigned, 24 is the one-byte simple value extension
        return ai not in _SIMPLE and ai not in FLOAT_DECODERS
    return False


def _unsupported(cur: Cursor, major: int, ai: int, cfg: DecoderConfig) -> Invalid:
    start = cur.tell()
    initial = cur.peek()
    if cfg.on_unsupported is not UnsupportedPolicy.INVALID:
        if ai == AI_INDEFINITE:
            detail = "break code" if major == MajorType.SIMPLE_FLOAT else "indefinite length is not supported"
        elif ai > AI_UINT64:
            detail = "reserved"
        elif ai == AI_UINT8:
            detail = "one-byte simple values are not supported"
        else:
            detail = "unassigned simple value"
        raise UnsupportedAdditionalInfoError(major, ai, offset=start, detail=detail)

    # skip the one-byte payload of an extended simple value so decoding stays in sync
    cur.advance(2 if major == MajorType.SIMPLE_FLOAT and ai == AI_UINT8 else 1)
    return Invalid(initial)


def _enter(cur: Cursor, depth: int, cfg: DecoderConfig) -> int:
    if depth + 1 > cfg.max_depth:
        raise RecursionLimitExceededError(cfg.max_depth, offset=cur.tell())
    return depth + 1


def decode_one(cur: Cursor, config: DecoderConfig | None = None, *, depth: int = 0) -> Value:
    """
    Decode exactly one data item at the cursor, recursing into arrays, maps and tags.

    `depth` is the number of enclosing containers; each array/map/tag adds one
    and the decode fails once it would exceed `config.max_depth`.
    """
    cfg = resolve_config(config)
    start = cur.tell()
    initial = cur.peek()
    major = initial >> 5
    ai = initial & AI_MASK

    if _is_unsupported(major, ai):
        return _unsupported(cur, major, ai, cfg)

    if major == MajorType.UNSIGNED_INT:
        value, _ = decode_argument(cur, cfg)
        return UnsignedInt(value)

    if major == MajorType.NEGATIVE_INT:
        value, _ = decode_argument(cur, cfg)
        return NegativeInt(-1 - value)

    if major == MajorType.BYTE_STRING:
        length, _ = decode_argument(cur, cfg)
        return ByteString(cur.take(length))

    if major == MajorType.TEXT_STRING:
        length, _ = decode_argument(cur, cfg)
        raw = cur.take(length)
        try:
            return TextString(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise InvalidUtf8Error(f"text string is not valid utf-8: {e.reason}", offset=start) from e

    if major == MajorType.ARRAY:
        inner = _enter(cur, depth, cfg)
        count, _ = decode_argument(cur, cfg)
        # every element takes at least one byte
        if count > cur.remaining():
            raise OutOfBoundsError(f"array declares {count} items, only {cur.remaining()} bytes left", offset=start)
        items = []
        for _ in range(count):
            items.append(decode_one(cur, cfg, depth=inner))
        return Array(items)

    if major == MajorType.MAP:
        inner = _enter(cur, depth, cfg)
        count, _ = decode_argument(cur, cfg)
        if count * 2 > cur.remaining():
            raise OutOfBoundsError(f"map declares {count} pairs, only {cur.remaining()} bytes left", offset=start)
        entries: dict = {}
        for _ in range(count):
            key = decode_one(cur, cfg, depth=inner)
            # last write wins; the key keeps the position it first appeared at
            entries[key] = decode_one(cur, cfg, depth=inner)
        return Map(entries)

    if major == MajorType.TAG:
        inner = _enter(cur, depth, cfg)
        number, _ = decode_argument(cur, cfg)
        if cur.at_end():
            raise OutOfBoundsError(f"tag {number} has no content item", offset=start)
        return Tag(number, decode_one(cur, cfg, depth=inner))

    # major type 7: simple values and floats
    if ai in _SIMPLE:
        cur.advance(1)
        return _SIMPLE[ai]

    nbytes, decoder = FLOAT_DECODERS[ai]
    if cur.remaining() < 1 + nbytes:
        raise OutOfBoundsError(f"float needs {nbytes} byte(s) after header, have {cur.remaining() - 1}", offset=start)
    cur.advance(1)
    return Float(decoder(cur.take(nbytes)))
