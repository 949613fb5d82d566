"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Coinhash, a product of Garudex Labs

Fixed-width big-endian unsigned integers.

A fixed-width integer stores exactly N bytes, most significant byte first.
The width is part of the type: every width gets its own class, created once
by fixed_width() and cached, so values of different widths never compare
as equal and refuse to be ordered against each other.

Comparison is lexicographic over the stored bytes, which for big-endian
unsigned values is the same as numeric comparison. This is the ordering used
when a digest is interpreted as a number (e.g. proof-of-work targets).

Example:
    >>> UInt32 = fixed_width(4)
    >>> UInt32.from_hex("11223344") == UInt32(b"\\x11\\x22\\x33\\x44")
    True
"""

from functools import lru_cache, total_ordering
from typing import Type

from coinhash.exceptions import InvalidFormatError, WidthMismatchError


@total_ordering
class FixedWidthInt:
    """
    Base class for N-byte big-endian unsigned integers.

    Do not instantiate directly; use fixed_width(N) to obtain the class for
    a given width.

    Attributes:
        WIDTH: Number of bytes stored by every instance of the class
    """

    WIDTH: int = 0

    __slots__ = ("_data",)

    def __init__(self, data: bytes):
        """
        Create an integer from exactly WIDTH raw big-endian bytes.

        Args:
            data: Raw bytes, most significant first

        Raises:
            TypeError: If called on the unparameterized base class, or if
                data is not bytes-like
            InvalidFormatError: If len(data) != WIDTH
        """
        if self.WIDTH <= 0:
            raise TypeError("Use fixed_width(n) to create a concrete integer type")
        data = memoryview(data).tobytes()
        if len(data) != self.WIDTH:
            raise InvalidFormatError(
                f"{type(self).__name__} requires exactly {self.WIDTH} bytes, "
                f"got {len(data)}"
            )
        self._data = data

    @classmethod
    def from_hex(cls, text: str) -> "FixedWidthInt":
        """
        Parse a hexadecimal string of exactly 2*WIDTH characters.

        The string is never padded or truncated to fit.

        Raises:
            InvalidFormatError: On length mismatch or non-hex characters
        """
        if len(text) != 2 * cls.WIDTH:
            raise InvalidFormatError(
                f"{cls.__name__} requires {2 * cls.WIDTH} hex characters, "
                f"got {len(text)}"
            )
        try:
            data = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidFormatError(f"Invalid hex characters in {text!r}: {e}") from e
        return cls(data)

    @classmethod
    def from_int(cls, value: int) -> "FixedWidthInt":
        """
        Create an integer from a non-negative Python int that fits in WIDTH bytes.

        Raises:
            InvalidFormatError: If the value is negative or too large
        """
        try:
            return cls(value.to_bytes(cls.WIDTH, "big", signed=False))
        except OverflowError as e:
            raise InvalidFormatError(
                f"{value} does not fit in {cls.WIDTH} unsigned bytes"
            ) from e

    @classmethod
    def zero(cls) -> "FixedWidthInt":
        return cls(bytes(cls.WIDTH))

    @classmethod
    def max_value(cls) -> "FixedWidthInt":
        return cls(b"\xff" * cls.WIDTH)

    def to_bytes(self) -> bytes:
        """Return the WIDTH stored bytes, most significant first."""
        return self._data

    def hex(self) -> str:
        """Return the lowercase hex form, exactly 2*WIDTH characters."""
        return self._data.hex()

    def copy(self) -> "FixedWidthInt":
        """Return an equal, independent instance."""
        return type(self)(self._data)

    def __int__(self) -> int:
        return int.from_bytes(self._data, "big")

    def __bytes__(self) -> bytes:
        return self._data

    def _check_width(self, other: "FixedWidthInt") -> None:
        if type(other) is not type(self):
            raise WidthMismatchError(
                f"Cannot order {type(self).__name__} against {type(other).__name__}"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedWidthInt):
            return NotImplemented
        return type(other) is type(self) and other._data == self._data

    def __lt__(self, other: "FixedWidthInt") -> bool:
        if not isinstance(other, FixedWidthInt):
            return NotImplemented
        self._check_width(other)
        return self._data < other._data

    def __hash__(self) -> int:
        return hash((self.WIDTH, self._data))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()!r})"


@lru_cache(maxsize=None)
def fixed_width(width: int) -> Type[FixedWidthInt]:
    """
    Return the fixed-width integer class for the given byte width.

    The same class object is returned for repeated calls with the same width.

    Args:
        width: Number of bytes (>= 1)

    Returns:
        Subclass of FixedWidthInt with WIDTH == width

    Raises:
        ValueError: If width is less than 1
    """
    if width < 1:
        raise ValueError(f"Width must be at least 1 byte, got {width}")
    name = f"FixedWidthInt{width}"
    return type(name, (FixedWidthInt,), {"WIDTH": width, "__slots__": ()})


# Width of a SHA-256 digest
UInt256 = fixed_width(32)
