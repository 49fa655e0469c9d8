from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from .codecs.cursor import Cursor
from .codecs.item_codec import decode_one
from ..models.config import DecoderConfig, resolve_config
from ..models.value import Value

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]
PathLike = Union[str, Path]


# -----------------------------
# Helpers
# -----------------------------

def load_bytes(inp: Union[BytesLike, PathLike]) -> bytes:
    if isinstance(inp, (bytes, bytearray, memoryview)):
        return bytes(inp)
    return Path(str(inp)).read_bytes()


# -----------------------------
# Top-level decoding
# -----------------------------

def iter_items(data: BytesLike, config: DecoderConfig | None = None) -> Iterator[Tuple[int, Value]]:
    """
    Yield (offset, value) for each top-level item in a buffer of concatenated
    CBOR items. Errors propagate as soon as the failing item is reached, so
    items before it have already been yielded.
    """
    cfg = resolve_config(config)
    cur = Cursor(data)
    while not cur.at_end():
        offset = cur.tell()
        item = decode_one(cur, cfg)
        logger.debug("item at offset %d: %s (%d bytes)", offset, item.kind, cur.tell() - offset)
        yield offset, item


def decode(data: BytesLike, config: DecoderConfig | None = None) -> List[Value]:
    """
    Decode every top-level item in `data`, in order.

    All-or-nothing: if any item fails the exception propagates and no
    values are returned. An empty buffer decodes to [].
    """
    values = [item for _, item in iter_items(data, config)]
    logger.debug("decoded %d top-level item(s) from %d bytes", len(values), len(data))
    return values


def decode_file(path: PathLike, config: DecoderConfig | None = None) -> List[Value]:
    """Read a file and decode its contents like decode()."""
    raw = load_bytes(path)
    logger.info("decoding %s (%d bytes)", path, len(raw))
    return decode(raw, config)
