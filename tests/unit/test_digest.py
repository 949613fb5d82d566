"""
Unit tests for the digest engine.

Tests cover:
- Known SHA-256 vectors
- Incremental updates
- Finalize-once semantics
- Hex rendering and numeric interpretation
"""

import hashlib
from unittest.mock import patch

import pytest

from coinhash.core.bignum import UInt256
from coinhash.core.codec import TextValue, UInt32
from coinhash.core.digest import (
    Digest,
    DigestEngine,
    EngineState,
    digest_of,
    hash_concat,
    hash_to_str,
)
from coinhash.exceptions import (
    ComputationFaultError,
    EngineMisuseError,
    InvalidFormatError,
)


HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestDigestEngine:
    """Test the incremental engine."""

    def test_known_vector(self):
        """Test sha256(b"hello")."""
        assert digest_of(b"hello").hex() == HELLO_SHA256

    def test_empty_input(self):
        """Test finalize with no updates."""
        assert DigestEngine().finalize().hex() == EMPTY_SHA256

    def test_incremental_equals_one_shot(self):
        """Test that split updates hash the same as one update."""
        engine = DigestEngine()
        engine.update(b"hel")
        engine.update(b"")
        engine.update(b"lo")
        assert engine.finalize() == digest_of(b"hello")

    def test_update_chains(self):
        """Test that update returns the engine."""
        engine = DigestEngine()
        assert engine.update(b"a") is engine

    def test_feed_encodes_values(self):
        """Test that feed hashes the canonical encoding."""
        engine = DigestEngine().feed(UInt32(0x10203040)).feed(TextValue("x"))
        assert engine.finalize() == digest_of(b"\x10\x20\x30\x40x")

    def test_state_transitions(self):
        """Test OPEN -> FINALIZED."""
        engine = DigestEngine()
        assert engine.state is EngineState.OPEN
        assert not engine.finalized
        engine.finalize()
        assert engine.state is EngineState.FINALIZED
        assert engine.finalized

    def test_finalize_twice_fails(self):
        """Test that a second finalize raises EngineMisuseError."""
        engine = DigestEngine()
        engine.finalize()
        with pytest.raises(EngineMisuseError):
            engine.finalize()

    def test_update_after_finalize_fails(self):
        """Test that update after finalize raises EngineMisuseError."""
        engine = DigestEngine()
        engine.finalize()
        with pytest.raises(EngineMisuseError):
            engine.update(b"more")
        assert engine.state is EngineState.FINALIZED

    def test_str_input_rejected(self):
        """Test that text must be encoded before hashing."""
        with pytest.raises(TypeError):
            DigestEngine().update("not bytes")

    def test_primitive_failure_is_computation_fault(self):
        """Test that a failing hash primitive surfaces as ComputationFaultError."""
        engine = DigestEngine()
        with patch.object(engine, "_hasher") as hasher:
            hasher.update.side_effect = ValueError("error in EVP_DigestUpdate")
            with pytest.raises(ComputationFaultError):
                engine.update(b"data")


class TestDigest:
    """Test the digest value type."""

    def test_digest_size_enforced(self):
        """Test that digests must be 32 bytes."""
        with pytest.raises(InvalidFormatError):
            Digest(b"\x00" * 31)

    def test_int_argument_rejected(self):
        """Test that an int is not taken as a zero-filled 32-byte buffer."""
        with pytest.raises(TypeError):
            Digest(32)

    def test_immutable(self):
        """Test that a digest cannot be modified."""
        digest = digest_of(b"hello")
        with pytest.raises(AttributeError):
            digest.value = b"\x00" * 32

    def test_truncated_hex(self):
        """Test abbreviated rendering of leading bytes."""
        digest = digest_of(b"hello")
        assert digest.hex(4) == HELLO_SHA256[:8]
        assert hash_to_str(digest, 2) == HELLO_SHA256[:4]
        assert digest.hex(0) == ""
        assert digest.hex(100) == HELLO_SHA256

    def test_truncated_hex_does_not_change_digest(self):
        """Test that formatting is pure."""
        digest = digest_of(b"hello")
        digest.hex(3)
        assert digest.hex() == HELLO_SHA256

    def test_from_hex_round_trip(self):
        """Test hex parsing."""
        assert Digest.from_hex(HELLO_SHA256) == digest_of(b"hello")

    def test_from_hex_wrong_length(self):
        """Test that partial hex is rejected."""
        with pytest.raises(InvalidFormatError):
            Digest.from_hex(HELLO_SHA256[:62])

    def test_as_number(self):
        """Test interpretation as a 256-bit integer."""
        digest = digest_of(b"hello")
        number = digest.as_number()
        assert isinstance(number, UInt256)
        assert number.to_bytes() == digest.value
        assert int(number) == int(HELLO_SHA256, 16)

    def test_as_number_threshold_comparison(self):
        """Test digest-as-number comparison against a target."""
        easy_target = UInt256.from_hex("ff" * 32)
        hard_target = UInt256.zero()
        number = digest_of(b"hello").as_number()
        assert number <= easy_target
        assert number > hard_target

    def test_hash_concat(self):
        """Test that the parent rule hashes the 64-byte concatenation once."""
        left, right = digest_of(b"a"), digest_of(b"b")
        expected = hashlib.sha256(left.value + right.value).digest()
        assert hash_concat(left, right).value == expected
        assert hash_concat(left, right) != hash_concat(right, left)
