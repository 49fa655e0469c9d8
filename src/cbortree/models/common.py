from __future__ import annotations
from enum import Enum, IntEnum

class MajorType:
    UNSIGNED_INT = 0
    NEGATIVE_INT = 1
    BYTE_STRING = 2
    TEXT_STRING = 3
    ARRAY = 4
    MAP = 5
    TAG = 6
    SIMPLE_FLOAT = 7

class ArgumentWidth(str, Enum):
    """How an argument was carried: inside the header byte or in 1/2/4/8 trailing bytes."""
    IMMEDIATE = "immediate"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"

class SimpleValue(IntEnum):
    FALSE = 20
    TRUE = 21
    NULL = 22
    UNDEFINED = 23

class UnsupportedPolicy(str, Enum):
    RAISE = "raise"
    INVALID = "invalid"

UINT64_MAX = 2**64 - 1
NEGATIVE_INT_MIN = -(2**64)
