# tests/test_codec.py
from decimal import Decimal

import pytest

from tck_core import codec
from tck_core.constants import INT64_MAX, INT64_MIN
from tck_core.errors import Int64RangeError

BOUNDARIES = [INT64_MAX, INT64_MAX - 1, INT64_MIN + 1, INT64_MIN + 2, 2**53 + 1, -(2**53) - 1, 0, -1]


@pytest.mark.parametrize("value", BOUNDARIES)
def test_int64_string_roundtrip_is_exact(value):
    assert codec.decode_int64(codec.encode_int64(value)) == value


@pytest.mark.parametrize("value", BOUNDARIES)
def test_json_roundtrip_keeps_integer_precision(value):
    decoded = codec.loads(codec.dumps({"expirationTime": value}))
    assert decoded["expirationTime"] == value
    assert isinstance(decoded["expirationTime"], int)


def test_int64_max_is_written_digit_for_digit():
    assert codec.dumps({"v": INT64_MAX}) == b'{"v":9223372036854775807}'
    assert codec.encode_int64(INT64_MAX) == "9223372036854775807"


def test_large_integer_literal_decodes_without_float_rounding():
    # 2**53 + 1 is the first integer a double cannot hold
    assert codec.loads(b'{"n": 9007199254740993}')["n"] == 9007199254740993


def test_int64_min_is_refused_unless_opted_in():
    with pytest.raises(Int64RangeError):
        codec.encode_int64(INT64_MIN)
    with pytest.raises(Int64RangeError):
        codec.decode_int64("-9223372036854775808")
    assert codec.encode_int64(INT64_MIN, allow_min=True) == "-9223372036854775808"
    assert codec.decode_int64("-9223372036854775808", allow_min=True) == INT64_MIN


@pytest.mark.parametrize("value", [INT64_MAX + 1, INT64_MIN - 1, 2**80])
def test_out_of_range_values_raise(value):
    with pytest.raises(Int64RangeError):
        codec.encode_int64(value, allow_min=True)
    with pytest.raises(Int64RangeError):
        codec.decode_int64(str(value), allow_min=True)


def test_bool_and_garbage_are_not_int64():
    with pytest.raises(Int64RangeError):
        codec.encode_int64(True)
    with pytest.raises(Int64RangeError):
        codec.decode_int64("12abc")
    with pytest.raises(Int64RangeError):
        codec.encode_int64("123")


def test_non_integral_numbers_decode_to_decimal():
    decoded = codec.loads(b'{"fee": 0.1000000000000000055511151231257827}')
    assert decoded["fee"] == Decimal("0.1000000000000000055511151231257827")
    assert codec.dumps({"fee": Decimal("5")}) == b'{"fee":5}'


def test_unicode_survives_utf8_encoding():
    memo = "测试文件备注 🚀"
    assert codec.loads(codec.dumps({"memo": memo}))["memo"] == memo


@pytest.mark.parametrize("raw", [b'{"fee":1.5}', b'{"rate":0.1000000000000000055511151231257827}', b'[-2.50,1E+400]'])
def test_non_integral_numbers_reencode_byte_for_byte(raw):
    assert codec.dumps(codec.loads(raw)) == raw


def test_non_integral_decimal_stays_a_json_number():
    assert codec.dumps({"fee": Decimal("1.5"), "tags": ("a", b"\x0f")}) == b'{"fee":1.5,"tags":["a","0f"]}'
    with pytest.raises(ValueError):
        codec.dumps({"fee": Decimal("NaN")})


@pytest.mark.parametrize("text", ["1_000", "+5", " 5", "5 ", "١٢٣", "", "-", "1.0"])
def test_int64_strings_must_be_plain_ascii_digits(text):
    with pytest.raises(Int64RangeError):
        codec.decode_int64(text)
