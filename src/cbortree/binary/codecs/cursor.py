from __future__ import annotations
import struct

from ..errors import OutOfBoundsError

class Cursor:
    __slots__ = ("buf", "pos")

    def __init__(self, data: bytes | bytearray | memoryview):
        self.buf = memoryview(data)
        self.pos = 0

    def remaining(self) -> int: return len(self.buf) - self.pos
    def tell(self) -> int: return self.pos
    def at_end(self) -> bool: return self.pos >= len(self.buf)

    def peek(self) -> int:
        if self.pos >= len(self.buf):
            raise OutOfBoundsError("peek past end of buffer", offset=self.pos)
        return self.buf[self.pos]

    def advance(self, n: int) -> None:
        if n < 0: raise ValueError("cursor cannot move backwards")
        if n > self.remaining():
            raise OutOfBoundsError(f"underrun: need {n}, have {self.remaining()}", offset=self.pos)
        self.pos += n

    def take(self, n: int) -> bytes:
        if n < 0: raise ValueError("cannot take a negative length")
        if n > self.remaining():
            raise OutOfBoundsError(f"underrun: need {n}, have {self.remaining()}", offset=self.pos)
        end = self.pos + n
        out = self.buf[self.pos:end].tobytes()
        self.pos = end
        return out

    # byte-aligned big-endian reads
    def _unpack(self, fmt: str, n: int):
        return struct.unpack(fmt, self.take(n))[0]
    def u8(self) -> int:  return self._unpack(">B", 1)
    def u16(self) -> int: return self._unpack(">H", 2)
    def u32(self) -> int: return self._unpack(">I", 4)
    def u64(self) -> int: return self._unpack(">Q", 8)
    def f32(self) -> float: return self._unpack(">f", 4)
    def f64(self) -> float: return self._unpack(">d", 8)
