from __future__ import annotations
import math

from .cursor import Cursor

def _expect(data: bytes, n: int, what: str) -> None:
    if len(data) != n:
        raise ValueError(f"{what} needs exactly {n} bytes, got {len(data)}")

def decode_half(data: bytes) -> float:
    """
    IEEE-754 binary16, big-endian: 1 sign bit, 5-bit exponent (bias 15), 10-bit mantissa.
    Exponent 0 is subnormal (no implicit leading 1); exponent 31 is Infinity/NaN.
    """
    _expect(data, 2, "half float")
    half = (data[0] << 8) | data[1]
    sign = -1.0 if half & 0x8000 else 1.0
    exp = (half >> 10) & 0x1F
    mant = half & 0x3FF

    if exp == 0:
        return sign * math.ldexp(mant / 1024.0, -14)
    if exp == 31:
        # a new NaN object per item, like struct gives for the wider formats
        return sign * math.inf if mant == 0 else float("nan")
    return sign * math.ldexp(1.0 + mant / 1024.0, exp - 15)

def decode_single(data: bytes) -> float:
    _expect(data, 4, "single float")
    return Cursor(data).f32()

def decode_double(data: bytes) -> float:
    _expect(data, 8, "double float")
    return Cursor(data).f64()

# AI 25/26/27 -> (byte count, decoder)
FLOAT_DECODERS = {
    25: (2, decode_half),
    26: (4, decode_single),
    27: (8, decode_double),
}
