"""
Unit tests for fixed-width big-endian integers.
"""

import copy

import pytest

from coinhash.core.bignum import FixedWidthInt, UInt256, fixed_width
from coinhash.exceptions import InvalidFormatError, WidthMismatchError


UInt8Num = fixed_width(1)
UInt32Num = fixed_width(4)


def num8(value: int) -> FixedWidthInt:
    return UInt8Num(bytes([value]))


class TestFixedWidthConstruction:
    """Test construction from bytes, hex and ints."""

    def test_factory_caches_class(self):
        """Test that one width maps to one class."""
        assert fixed_width(4) is UInt32Num
        assert fixed_width(32) is UInt256
        assert UInt32Num.WIDTH == 4

    def test_factory_rejects_zero_width(self):
        """Test that width must be positive."""
        with pytest.raises(ValueError):
            fixed_width(0)

    def test_base_class_not_instantiable(self):
        """Test that the unparameterized base refuses construction."""
        with pytest.raises(TypeError):
            FixedWidthInt(b"\x00")

    def test_from_hex_matches_raw_bytes(self):
        """Test FromString(hex).to_bytes() == raw bytes of hex."""
        num = UInt32Num.from_hex("11223344")
        assert num.to_bytes() == bytes([0x11, 0x22, 0x33, 0x44])
        assert num == UInt32Num(bytes([0x11, 0x22, 0x33, 0x44]))

    def test_hex_round_trip(self):
        """Test that hex() returns the parsed string in lowercase."""
        assert UInt32Num.from_hex("DEADBEEF").hex() == "deadbeef"

    @pytest.mark.parametrize("text", ["112233", "1122334455", ""])
    def test_from_hex_length_mismatch(self, text):
        """Test that short or long hex is rejected, never padded."""
        with pytest.raises(InvalidFormatError):
            UInt32Num.from_hex(text)

    def test_from_hex_invalid_characters(self):
        """Test that non-hex characters are rejected."""
        with pytest.raises(InvalidFormatError, match="Invalid hex"):
            UInt32Num.from_hex("zz223344")

    def test_wrong_byte_length(self):
        """Test that raw input must be exactly WIDTH bytes."""
        with pytest.raises(InvalidFormatError):
            UInt32Num(b"\x00\x01")

    def test_int_argument_rejected(self):
        """Test that an int is not taken as a zero-filled buffer of that size."""
        with pytest.raises(TypeError):
            UInt32Num(4)
        with pytest.raises(TypeError):
            UInt256(2 ** 200)

    def test_bytearray_accepted(self):
        """Test that other bytes-like inputs are copied."""
        raw = bytearray(b"\x00\x00\x01\x00")
        number = UInt32Num(raw)
        raw[0] = 0xFF
        assert int(number) == 256

    def test_from_int(self):
        """Test conversion from and to Python ints."""
        num = UInt32Num.from_int(0x10203040)
        assert num.hex() == "10203040"
        assert int(num) == 0x10203040

    def test_from_int_overflow(self):
        """Test that oversized ints are rejected."""
        with pytest.raises(InvalidFormatError):
            UInt8Num.from_int(256)

    def test_zero_and_max(self):
        """Test the boundary constructors."""
        assert int(UInt32Num.zero()) == 0
        assert int(UInt32Num.max_value()) == 0xFFFFFFFF


class TestFixedWidthComparison:
    """Test equality and ordering."""

    def test_assign(self):
        """Test that rebinding to a copy makes values equal."""
        bn1, bn2 = num8(100), num8(101)
        assert not bn1 == bn2
        bn1 = bn2.copy()
        assert bn1 == bn2

    def test_copy_is_independent_equal_value(self):
        """Test copy() and copy.copy() produce equal values."""
        original = UInt32Num.from_hex("01020304")
        assert original.copy() == original
        assert copy.copy(original) == original

    def test_compare_equals(self):
        """Test 128 vs 128."""
        bn1, bn2 = num8(128), num8(128)
        assert bn1 == bn2
        assert not bn1 != bn2
        assert not bn1 < bn2
        assert not bn1 > bn2

    def test_compare_not_equals(self):
        """Test 128 vs 129."""
        bn1, bn2 = num8(128), num8(129)
        assert bn1 != bn2
        assert not bn1 == bn2
        assert bn1 < bn2
        assert not bn2 > bn2

    def test_compare_less_than(self):
        """Test 128 < 129."""
        bn1, bn2 = num8(128), num8(129)
        assert bn1 < bn2
        assert not bn1 > bn2
        assert bn1 <= bn2

    def test_compare_bigger_than(self):
        """Test 130 > 129."""
        bn1, bn2 = num8(130), num8(129)
        assert bn1 > bn2
        assert not bn1 < bn2
        assert bn1 >= bn2

    def test_equality_symmetric(self):
        """Test that equality is reflexive and symmetric."""
        a = UInt32Num.from_hex("00000001")
        b = UInt32Num.from_hex("00000001")
        assert a == a
        assert a == b and b == a

    def test_most_significant_byte_dominates(self):
        """Test that ordering is numeric, not little-endian."""
        high = UInt32Num.from_hex("01000000")
        low = UInt32Num.from_hex("00ffffff")
        assert low < high
        assert sorted([high, low]) == [low, high]

    def test_different_widths_not_equal(self):
        """Test that equal numeric values of different widths differ."""
        assert fixed_width(2).from_int(1) != fixed_width(4).from_int(1)

    def test_different_widths_not_orderable(self):
        """Test that ordering across widths raises."""
        with pytest.raises(WidthMismatchError):
            fixed_width(2).from_int(1) < fixed_width(4).from_int(2)

    def test_hashable(self):
        """Test that equal values hash equally."""
        values = {UInt32Num.from_int(7), UInt32Num.from_int(7)}
        assert len(values) == 1

    def test_repr(self):
        """Test repr shows the width class and hex."""
        assert repr(UInt32Num.from_hex("0a0b0c0d")) == "FixedWidthInt4('0a0b0c0d')"
