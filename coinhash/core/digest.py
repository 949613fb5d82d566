"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Coinhash, a product of Garudex Labs

Incremental SHA-256 digest engine.

This module provides:
- Digest: immutable 32-byte hash value with hex rendering
- DigestEngine: single-use incremental hasher (OPEN -> FINALIZED)
- digest_of / hash_concat: one-shot helpers for leaf and node hashing

Engine Rules:
1. update() may be called zero or more times while the engine is OPEN
2. finalize() may be called exactly once and moves the engine to FINALIZED
3. Any update() or finalize() on a FINALIZED engine raises EngineMisuseError
   and leaves the engine untouched
4. A failure inside the hash primitive raises ComputationFaultError; it is
   never retried

Engines carry sequential state and must not be shared between threads;
create one per computation.
"""

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from coinhash.core.bignum import UInt256
from coinhash.core.codec import canonical_bytes
from coinhash.exceptions import (
    ComputationFaultError,
    EngineMisuseError,
    InvalidFormatError,
)
from coinhash.logging_config import get_logger

logger = get_logger(__name__)

DIGEST_SIZE = 32


@dataclass(frozen=True)
class Digest:
    """
    A finalized 32-byte SHA-256 digest.

    Attributes:
        value: The raw digest bytes
    """
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes):
            object.__setattr__(self, "value", memoryview(self.value).tobytes())
        if len(self.value) != DIGEST_SIZE:
            raise InvalidFormatError(
                f"Digest must be {DIGEST_SIZE} bytes, got {len(self.value)}"
            )

    @classmethod
    def from_hex(cls, text: str) -> "Digest":
        """
        Parse a full 64-character hex digest.

        Raises:
            InvalidFormatError: On wrong length or non-hex characters
        """
        if len(text) != 2 * DIGEST_SIZE:
            raise InvalidFormatError(
                f"Digest hex must be {2 * DIGEST_SIZE} characters, got {len(text)}"
            )
        try:
            return cls(bytes.fromhex(text))
        except ValueError as e:
            raise InvalidFormatError(f"Invalid hex characters in digest: {e}") from e

    def hex(self, num_bytes: Optional[int] = None) -> str:
        """
        Render the digest as lowercase hex.

        Args:
            num_bytes: Number of leading bytes to render. None renders all 32.
                Values above 32 are capped; this never changes the digest.

        Returns:
            Hex string of 2 * min(num_bytes, 32) characters
        """
        if num_bytes is None:
            return self.value.hex()
        if num_bytes < 0:
            raise ValueError(f"num_bytes must be non-negative, got {num_bytes}")
        return self.value[:num_bytes].hex()

    def as_number(self) -> UInt256:
        """Interpret the digest as a 256-bit big-endian unsigned integer."""
        return UInt256(self.value)

    def __bytes__(self) -> bytes:
        return self.value

    def __str__(self) -> str:
        return self.value.hex()


def hash_to_str(digest: Digest, num_bytes: int) -> str:
    """Return the hex form of the first ``num_bytes`` bytes of a digest."""
    return digest.hex(num_bytes)


class EngineState(Enum):
    """Lifecycle of a DigestEngine."""
    OPEN = "open"
    FINALIZED = "finalized"


class DigestEngine:
    """
    Single-use incremental SHA-256 engine.

    Example:
        >>> engine = DigestEngine().update(b"hello ").update(b"world")
        >>> digest = engine.finalize()
        >>> digest == digest_of(b"hello world")
        True
    """

    def __init__(self):
        self._hasher = hashlib.sha256()
        self._state = EngineState.OPEN

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def finalized(self) -> bool:
        return self._state is EngineState.FINALIZED

    def _require_open(self, operation: str) -> None:
        if self._state is not EngineState.OPEN:
            logger.warning("digest_engine_misuse", operation=operation, state=self._state.value)
            raise EngineMisuseError(f"Cannot {operation}: digest engine already finalized")

    def update(self, data: bytes) -> "DigestEngine":
        """
        Fold bytes into the running hash state.

        Args:
            data: Bytes-like object to absorb

        Returns:
            The engine itself, for chaining

        Raises:
            EngineMisuseError: If the engine was already finalized
            ComputationFaultError: If the hash primitive fails
        """
        self._require_open("update")
        try:
            self._hasher.update(data)
        except ValueError as e:
            logger.critical("digest_computation_fault", operation="update", error=str(e))
            raise ComputationFaultError(f"SHA-256 update failed: {e}") from e
        return self

    def feed(self, payload: Any) -> "DigestEngine":
        """Canonically encode a payload and absorb its bytes."""
        return self.update(canonical_bytes(payload))

    def finalize(self) -> Digest:
        """
        Compute the digest of everything absorbed so far.

        Returns:
            The 32-byte Digest

        Raises:
            EngineMisuseError: If called more than once
            ComputationFaultError: If the hash primitive fails
        """
        self._require_open("finalize")
        try:
            raw = self._hasher.digest()
        except ValueError as e:
            logger.critical("digest_computation_fault", operation="finalize", error=str(e))
            raise ComputationFaultError(f"SHA-256 finalize failed: {e}") from e
        self._state = EngineState.FINALIZED
        self._hasher = None
        return Digest(raw)


def digest_of(data: bytes) -> Digest:
    """Digest a complete byte sequence in one step."""
    return DigestEngine().update(data).finalize()


def hash_concat(left: Digest, right: Digest) -> Digest:
    """
    Digest the concatenation of two digests (64 bytes, hashed once).

    This is the Merkle parent rule: parent = sha256(left + right).
    """
    return DigestEngine().update(left.value).update(right.value).finalize()
