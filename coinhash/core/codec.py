"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Coinhash, a product of Garudex Labs

Canonical value codec.

Encodes typed values to bytes in a fixed, architecture-independent order so
that identical logical values hash identically on every host:

- Unsigned integers (8/16/32/64-bit) are written big-endian at their width
- Text is written as its UTF-8 bytes, byte buffers verbatim (no framing)
- Fixed-width integers are written as their stored bytes

Reads go through ByteReader, a cursor that checks the remaining length before
every read and raises UnderflowError instead of zero-filling.

Example:
    >>> encode(UInt16(0x1020)).hex()
    '1020'
    >>> decode(UInt16, b"\\x10\\x20").value == 0x1020
    True
"""

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Type, TypeVar

from coinhash.core.bignum import FixedWidthInt
from coinhash.exceptions import InvalidValueError, UnderflowError
from coinhash.logging_config import get_logger

logger = get_logger(__name__)

V = TypeVar("V", bound="Value")

# Largest payload accepted by the length-prefix convention (u32 length)
MAX_VAR_BYTES = 0xFFFFFFFF

_INT_WIDTHS = (1, 2, 4, 8)


def byte_swap(value: int, bits: int) -> int:
    """
    Reverse the byte order of an unsigned integer of the given bit width.

    Example:
        >>> hex(byte_swap(0x10203040, 32))
        '0x40302010'
    """
    size = bits // 8
    if size not in _INT_WIDTHS or bits % 8:
        raise InvalidValueError(f"Unsupported integer width: {bits} bits")
    return int.from_bytes(_uint_to_bytes(value, size), "little")


def host_to_net(value: int, bits: int) -> int:
    """
    Convert a host-order integer to network (big-endian) order.

    The result is the integer whose native in-memory bytes are the big-endian
    bytes of ``value``. On little-endian hosts this swaps; on big-endian hosts
    it is the identity.
    """
    if sys.byteorder == "little":
        return byte_swap(value, bits)
    _uint_to_bytes(value, bits // 8)
    return value


def net_to_host(value: int, bits: int) -> int:
    """Inverse of host_to_net (the conversion is its own inverse)."""
    return host_to_net(value, bits)


def _uint_to_bytes(value: int, size: int) -> bytes:
    try:
        return int(value).to_bytes(size, "big", signed=False)
    except OverflowError as e:
        raise InvalidValueError(
            f"{value} does not fit in an unsigned {size * 8}-bit integer"
        ) from e


@dataclass
class ByteWriter:
    """Append-only write cursor over a bytearray."""

    buf: bytearray = field(default_factory=bytearray)

    def write_uint(self, value: int, size: int) -> None:
        self.buf.extend(_uint_to_bytes(value, size))

    def write_u8(self, value: int) -> None:
        self.write_uint(value, 1)

    def write_u16(self, value: int) -> None:
        self.write_uint(value, 2)

    def write_u32(self, value: int) -> None:
        self.write_uint(value, 4)

    def write_u64(self, value: int) -> None:
        self.write_uint(value, 8)

    def write_bytes(self, data: bytes) -> None:
        self.buf.extend(data)

    def write_var_bytes(self, data: bytes) -> None:
        """Write a u32 big-endian length prefix followed by the bytes."""
        if len(data) > MAX_VAR_BYTES:
            raise InvalidValueError(f"Payload of {len(data)} bytes is too long to frame")
        self.write_u32(len(data))
        self.write_bytes(data)

    def getvalue(self) -> bytes:
        return bytes(self.buf)

    def __len__(self) -> int:
        return len(self.buf)


class ByteReader:
    """
    Read cursor over an immutable byte buffer.

    Tracks position and remaining length explicitly. Every read checks that
    enough bytes remain before consuming anything, so a failed read leaves
    the cursor where it was.
    """

    def __init__(self, data: bytes):
        self._data = memoryview(data).tobytes()
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self.remaining == 0

    def seek(self, position: int) -> None:
        """Move the cursor to an absolute position inside the buffer."""
        if not 0 <= position <= len(self._data):
            raise ValueError(f"Position {position} outside buffer of {len(self._data)} bytes")
        self._pos = position

    def read(self, size: int) -> bytes:
        """
        Consume exactly ``size`` bytes.

        Raises:
            ValueError: If size is negative
            UnderflowError: If fewer than ``size`` bytes remain
        """
        if size < 0:
            raise ValueError(f"Read size must be non-negative, got {size}")
        if size > self.remaining:
            logger.debug(
                "codec_underflow",
                requested=size,
                remaining=self.remaining,
                position=self._pos,
            )
            raise UnderflowError(size, self.remaining)
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def read_rest(self) -> bytes:
        """Consume every remaining byte (possibly none)."""
        return self.read(self.remaining)

    def read_uint(self, size: int) -> int:
        return int.from_bytes(self.read(size), "big")

    def read_u8(self) -> int:
        return self.read_uint(1)

    def read_u16(self) -> int:
        return self.read_uint(2)

    def read_u32(self) -> int:
        return self.read_uint(4)

    def read_u64(self) -> int:
        return self.read_uint(8)

    def read_var_bytes(self) -> bytes:
        """
        Read bytes framed by write_var_bytes.

        The cursor is restored if the payload is shorter than its prefix claims.
        """
        start = self._pos
        size = self.read_u32()
        try:
            return self.read(size)
        except UnderflowError:
            self.seek(start)
            raise


class Value(ABC):
    """
    A typed payload with a canonical encode/decode contract.

    Subclasses write themselves to a ByteWriter and read themselves back from
    a ByteReader. Values are constructed per call and hold no resources.
    """

    @abstractmethod
    def encode(self, writer: ByteWriter) -> None:
        """Write the canonical bytes of this value."""

    @classmethod
    @abstractmethod
    def decode(cls: Type[V], reader: ByteReader, *args: Any, **kwargs: Any) -> V:
        """Read a value of this type from the reader."""

    def to_bytes(self) -> bytes:
        writer = ByteWriter()
        self.encode(writer)
        return writer.getvalue()


@dataclass(frozen=True)
class UIntValue(Value):
    """Unsigned integer of a fixed bit width, encoded big-endian."""

    value: int
    BITS: ClassVar[int] = 0

    def __post_init__(self) -> None:
        if self.BITS == 0:
            raise TypeError("Use UInt8, UInt16, UInt32 or UInt64")
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidValueError(
                f"{type(self).__name__} requires an int, got {type(self.value).__name__}"
            )
        if not 0 <= self.value < (1 << self.BITS):
            raise InvalidValueError(
                f"{self.value} out of range for {type(self).__name__}"
            )

    def encode(self, writer: ByteWriter) -> None:
        writer.write_uint(self.value, self.BITS // 8)

    @classmethod
    def decode(cls, reader: ByteReader) -> "UIntValue":
        return cls(reader.read_uint(cls.BITS // 8))


class UInt8(UIntValue):
    BITS: ClassVar[int] = 8


class UInt16(UIntValue):
    BITS: ClassVar[int] = 16


class UInt32(UIntValue):
    BITS: ClassVar[int] = 32


class UInt64(UIntValue):
    BITS: ClassVar[int] = 64


@dataclass(frozen=True)
class TextValue(Value):
    """
    Text encoded as raw UTF-8 bytes.

    No length is written. When decoding, pass ``size`` to read a known number
    of bytes, or omit it to read until the buffer is exhausted.
    """

    value: str

    def encode(self, writer: ByteWriter) -> None:
        writer.write_bytes(self.value.encode("utf-8"))

    @classmethod
    def decode(cls, reader: ByteReader, size: Optional[int] = None) -> "TextValue":
        start = reader.position
        data = reader.read_rest() if size is None else reader.read(size)
        try:
            return cls(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            reader.seek(start)
            raise InvalidValueError(f"Text is not valid UTF-8: {e}") from e


@dataclass(frozen=True)
class BytesValue(Value):
    """Opaque byte buffer, encoded verbatim."""

    value: bytes

    def encode(self, writer: ByteWriter) -> None:
        writer.write_bytes(self.value)

    @classmethod
    def decode(cls, reader: ByteReader, size: Optional[int] = None) -> "BytesValue":
        return cls(reader.read_rest() if size is None else reader.read(size))


@dataclass(frozen=True)
class FixedWidthValue(Value):
    """A fixed-width integer, encoded as its N stored big-endian bytes."""

    number: FixedWidthInt

    def encode(self, writer: ByteWriter) -> None:
        writer.write_bytes(self.number.to_bytes())

    @classmethod
    def decode(cls, reader: ByteReader, int_type: Type[FixedWidthInt]) -> "FixedWidthValue":
        return cls(int_type(reader.read(int_type.WIDTH)))


def encode(value: Value) -> bytes:
    """Return the canonical bytes of a value."""
    return value.to_bytes()


def decode(value_type: Type[V], data: bytes, *args: Any, **kwargs: Any) -> V:
    """
    Decode one value of ``value_type`` from the start of ``data``.

    Extra arguments are passed to the type's decode (e.g. ``size`` for text,
    ``int_type`` for fixed-width integers).

    Raises:
        UnderflowError: If data is shorter than the value requires
    """
    return value_type.decode(ByteReader(data), *args, **kwargs)


def canonical_bytes(payload: Any) -> bytes:
    """
    Return the canonical encoding of a leaf payload.

    Accepts Value instances, fixed-width integers, byte-like objects and
    strings (as UTF-8). Bare ints are rejected because their width would be
    ambiguous; wrap them in UInt8/16/32/64 first.

    Raises:
        TypeError: If the payload type has no canonical encoding
    """
    if isinstance(payload, Value):
        return payload.to_bytes()
    if isinstance(payload, FixedWidthInt):
        return payload.to_bytes()
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)
    if isinstance(payload, str):
        return payload.encode("utf-8")
    raise TypeError(
        f"No canonical encoding for {type(payload).__name__}; "
        "wrap integers in a fixed-width Value"
    )
