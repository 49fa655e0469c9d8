import math

import cbor2
import pytest

from cbortree.binary.codecs.cursor import Cursor
from cbortree.binary.codecs.item_codec import decode_one
from cbortree.binary.errors import (
    InvalidUtf8Error,
    OutOfBoundsError,
    RecursionLimitExceededError,
    UnsupportedAdditionalInfoError,
)
from cbortree.models.common import UnsupportedPolicy
from cbortree.models.config import MAX_DEPTH_CEILING, DecoderConfig
from cbortree.models.value import (
    FALSE,
    NULL,
    TRUE,
    UNDEFINED,
    Array,
    ByteString,
    Float,
    Invalid,
    Map,
    NegativeInt,
    Tag,
    TextString,
    UnsignedInt,
)

def one(data: bytes, config=None):
    cur = Cursor(data)
    value = decode_one(cur, config)
    assert cur.at_end(), f"{cur.remaining()} byte(s) left over"
    return value

# --- integers ---

@pytest.mark.parametrize("n", [0, 1, 23, 24, 255, 256, 65535, 65536, 2**32 - 1, 2**32, 2**64 - 2, 2**64 - 1])
def test_unsigned_canonical(n):
    assert one(cbor2.dumps(n)) == UnsignedInt(n)

@pytest.mark.parametrize("n", [-1, -24, -25, -100, -1000, -(2**32), -(2**63), -(2**64)])
def test_negative_canonical(n):
    assert one(cbor2.dumps(n)) == NegativeInt(n)

def test_negative_full_range():
    # -2^64 needs the whole u64 argument range
    assert one(b"\x3b" + b"\xff" * 8) == NegativeInt(-18446744073709551616)
    assert one(b"\x20") == NegativeInt(-1)
    assert one(b"\x39\x03\xe7") == NegativeInt(-1000)

# --- strings ---

def test_byte_string():
    assert one(bytes([0x45, 1, 2, 3, 4, 5])) == ByteString(b"\x01\x02\x03\x04\x05")
    assert one(b"\x40") == ByteString(b"")

@pytest.mark.parametrize("text", ["", "a", "IETF", "\"\\", "ü", "水", "\U00010151", "Hello World"])
def test_text_string(text):
    assert one(cbor2.dumps(text)) == TextString(text)

@pytest.mark.parametrize("data", [b"\x62\xc3\x28", b"\x61\xff", b"\x63\xed\xa0\x80", b"\x61\x80"])
def test_invalid_utf8(data):
    with pytest.raises(InvalidUtf8Error) as exc:
        one(data)
    assert exc.value.offset == 0

def test_string_longer_than_buffer():
    with pytest.raises(OutOfBoundsError):
        one(b"\x62\x61")
    with pytest.raises(OutOfBoundsError):
        one(b"\x45\x01\x02")

def test_huge_declared_length_fails_fast():
    with pytest.raises(OutOfBoundsError):
        one(b"\x5b" + b"\xff" * 8 + b"\x00")
    with pytest.raises(OutOfBoundsError):
        one(b"\x9b" + b"\xff" * 8 + b"\x00")
    with pytest.raises(OutOfBoundsError):
        one(b"\xbb" + b"\x7f" + b"\xff" * 7 + b"\x00\x00")

# --- arrays / maps / tags ---

def test_array():
    assert one(b"\x83\x01\x02\x03") == Array([UnsignedInt(1), UnsignedInt(2), UnsignedInt(3)])
    assert one(b"\x80") == Array([])

def test_nested_array():
    assert one(bytes.fromhex("8301820203820405")) == Array([
        UnsignedInt(1),
        Array([UnsignedInt(2), UnsignedInt(3)]),
        Array([UnsignedInt(4), UnsignedInt(5)]),
    ])

def test_array_from_cbor2():
    value = one(cbor2.dumps(list(range(1, 26))))
    assert [v.value for v in value.items] == list(range(1, 26))

def test_struct_with_skipped_index():
    # an encoder leaving index 0 empty writes null there
    assert one(bytes.fromhex("82f666666f6f626172")) == Array([NULL, TextString("foobar")])

def test_map():
    value = one(bytes.fromhex("a26161016162820203"))
    assert value == Map({
        TextString("a"): UnsignedInt(1),
        TextString("b"): Array([UnsignedInt(2), UnsignedInt(3)]),
    })
    assert value[TextString("b")] == Array([UnsignedInt(2), UnsignedInt(3)])
    assert one(b"\xa0") == Map()

def test_map_from_cbor2_preserves_order():
    payload = {"z": 1, "a": b"x", "m": [True, None]}
    value = one(cbor2.dumps(payload))
    assert [k.value for k in value.keys()] == ["z", "a", "m"]
    assert value.to_python() == payload

def test_map_keys_are_structural():
    # 1, "1", 1.0 and [1] are four distinct keys
    data = bytes.fromhex("a4" "0100" "613101" "fb3ff000000000000002" "810103")
    value = one(data)
    assert len(value) == 4
    assert value[UnsignedInt(1)] == UnsignedInt(0)
    assert value[TextString("1")] == UnsignedInt(1)
    assert value[Float(1.0)] == UnsignedInt(2)
    assert value[Array([UnsignedInt(1)])] == UnsignedInt(3)

def test_map_duplicate_key_last_write_wins():
    value = one(bytes.fromhex("a3" "0102" "0203" "0104"))
    assert value.entries == (
        (UnsignedInt(1), UnsignedInt(4)),
        (UnsignedInt(2), UnsignedInt(3)),
    )

def test_map_truncated():
    with pytest.raises(OutOfBoundsError):
        one(b"\xa1\x01")
    with pytest.raises(OutOfBoundsError):
        one(b"\xa2\x01\x02\x03")

def test_tag():
    assert one(bytes.fromhex("c074323031332d30332d32315432303a30343a30305a")) == Tag(
        0, TextString("2013-03-21T20:04:00Z")
    )
    assert one(bytes.fromhex("d74401020304")) == Tag(23, ByteString(b"\x01\x02\x03\x04"))
    # bignum tags keep their raw byte string
    assert one(bytes.fromhex("c249010000000000000000")) == Tag(2, ByteString(bytes.fromhex("010000000000000000")))

def test_tag_from_cbor2():
    assert one(cbor2.dumps(cbor2.CBORTag(32, "http://www.example.com"))) == Tag(
        32, TextString("http://www.example.com")
    )

def test_tag_without_content():
    with pytest.raises(OutOfBoundsError):
        one(b"\xc1")

def test_truncated_array():
    with pytest.raises(OutOfBoundsError):
        one(b"\x82\x01")
    with pytest.raises(OutOfBoundsError):
        one(b"\x82\x81")

# --- simple values & floats ---

def test_simple_values():
    assert one(b"\xf4") == FALSE
    assert one(b"\xf5") == TRUE
    assert one(b"\xf6") == NULL
    assert one(b"\xf7") == UNDEFINED
    assert one(cbor2.dumps(cbor2.undefined)) == UNDEFINED

def test_floats():
    assert one(b"\xf9\x3c\x01") == Float(1.0009765625)
    assert one(b"\xf9\x7c\x00") == Float(math.inf)
    assert one(b"\xfa\x47\xc3\x50\x00") == Float(100000.0)
    assert one(cbor2.dumps(3.14)) == Float(3.14)
    assert one(cbor2.dumps(1.5, canonical=True)) == Float(1.5)
    assert math.isnan(one(b"\xf9\x7e\x00").value)

def test_truncated_float():
    with pytest.raises(OutOfBoundsError):
        one(b"\xf9\x3c")
    with pytest.raises(OutOfBoundsError):
        one(b"\xfb\x00\x00\x00")

@pytest.mark.parametrize("data", [b"\xe0", b"\xf0", b"\xf3", b"\xf8\x20", b"\xfc", b"\xfd", b"\xfe", b"\xff"])
def test_unsupported_simple(data):
    with pytest.raises(UnsupportedAdditionalInfoError) as exc:
        one(data)
    assert exc.value.major_type == 7

@pytest.mark.parametrize("data", [b"\x1c", b"\x3d", b"\x5f\x41\x00\xff", b"\x7f\xff", b"\x9f\xff", b"\xbf\xff", b"\xdf\x00"])
def test_unsupported_argument(data):
    with pytest.raises(UnsupportedAdditionalInfoError):
        one(data)

def test_nested_unsupported_aborts_whole_item():
    with pytest.raises(UnsupportedAdditionalInfoError) as exc:
        one(b"\x82\x01\x9f")
    assert exc.value.offset == 2

# --- lenient policy ---

def test_lenient_policy_marks_invalid():
    lenient = DecoderConfig(on_unsupported=UnsupportedPolicy.INVALID)
    assert one(b"\x82\x1c\x02", lenient) == Array([Invalid(0x1C), UnsignedInt(2)])
    assert one(b"\xf8\x20", lenient) == Invalid(0xF8)
    assert one(b"\xff", lenient) == Invalid(0xFF)

# --- depth limit ---

def nested_arrays(depth: int) -> bytes:
    return b"\x81" * depth + b"\x00"

def test_depth_within_limit():
    value = one(nested_arrays(3), DecoderConfig(max_depth=3))
    for _ in range(3):
        assert isinstance(value, Array)
        value = value.items[0]
    assert value == UnsignedInt(0)

def test_depth_exceeded():
    with pytest.raises(RecursionLimitExceededError) as exc:
        one(nested_arrays(4), DecoderConfig(max_depth=3))
    assert exc.value.limit == 3
    assert exc.value.offset == 3

def test_depth_counts_maps_and_tags():
    cfg = DecoderConfig(max_depth=2)
    assert one(b"\xa1\x01\xc1\x00", cfg) == Map({UnsignedInt(1): Tag(1, UnsignedInt(0))})
    with pytest.raises(RecursionLimitExceededError):
        one(b"\xa1\x01\xc1\xc1\x00", cfg)

def test_adversarial_depth_does_not_crash():
    with pytest.raises(RecursionLimitExceededError):
        one(nested_arrays(100_000))
    with pytest.raises(RecursionLimitExceededError):
        one(b"\xc1" * 100_000 + b"\x00")

def test_deepest_allowed_config_stays_on_the_stack():
    cfg = DecoderConfig(max_depth=MAX_DEPTH_CEILING)
    value = one(nested_arrays(MAX_DEPTH_CEILING), cfg)
    for _ in range(MAX_DEPTH_CEILING):
        value = value.items[0]
    assert value == UnsignedInt(0)
    with pytest.raises(RecursionLimitExceededError):
        one(nested_arrays(500), cfg)
    with pytest.raises(RecursionLimitExceededError):
        one(b"\xa1\x00" * 500 + b"\x00", cfg)

@pytest.mark.parametrize(
    "nan",
    [bytes.fromhex("f97e00"), bytes.fromhex("fa7fc00000"), bytes.fromhex("fb7ff8000000000000")],
)
def test_nan_keys_never_merge(nan):
    # same for every float width
    value = one(b"\xa2" + nan + b"\x01" + nan + b"\x02")
    assert len(value) == 2
    assert [v.value for v in value.values()] == [1, 2]
