"""
Core integrity primitives: canonical codec, digest engine and fixed-width
integers.
"""

from coinhash.core.bignum import FixedWidthInt, UInt256, fixed_width
from coinhash.core.codec import (
    ByteReader,
    ByteWriter,
    BytesValue,
    FixedWidthValue,
    TextValue,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    UIntValue,
    Value,
    byte_swap,
    canonical_bytes,
    decode,
    encode,
    host_to_net,
    net_to_host,
)
from coinhash.core.digest import (
    DIGEST_SIZE,
    Digest,
    DigestEngine,
    EngineState,
    digest_of,
    hash_concat,
    hash_to_str,
)

__all__ = [
    "FixedWidthInt",
    "UInt256",
    "fixed_width",
    "ByteReader",
    "ByteWriter",
    "BytesValue",
    "FixedWidthValue",
    "TextValue",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UIntValue",
    "Value",
    "byte_swap",
    "canonical_bytes",
    "decode",
    "encode",
    "host_to_net",
    "net_to_host",
    "DIGEST_SIZE",
    "Digest",
    "DigestEngine",
    "EngineState",
    "digest_of",
    "hash_concat",
    "hash_to_str",
]
