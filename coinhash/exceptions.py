"""
Exception hierarchy for Coinhash.

All custom exceptions inherit from CoinhashError base class.
"""


class CoinhashError(Exception):
    """Base exception for all Coinhash errors."""
    pass


# Codec Errors
class CodecError(CoinhashError):
    """Base exception for canonical encoding and decoding errors."""
    pass


class UnderflowError(CodecError):
    """Raised when a decode needs more bytes than remain in the buffer."""

    def __init__(self, requested: int, remaining: int):
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Cannot read {requested} bytes, only {remaining} remaining"
        )


class InvalidValueError(CodecError):
    """Raised when a value cannot be represented at its fixed width."""
    pass


# Fixed-Width Integer Errors
class InvalidFormatError(CoinhashError):
    """Raised when hexadecimal or raw input has the wrong shape for its width."""
    pass


class WidthMismatchError(CoinhashError, TypeError):
    """Raised when ordering fixed-width integers of different widths."""
    pass


# Digest Errors
class DigestError(CoinhashError):
    """Base exception for digest engine errors."""
    pass


class EngineMisuseError(DigestError):
    """Raised on update or finalize after the engine has been finalized."""
    pass


class ComputationFaultError(DigestError):
    """
    Raised when the underlying hash primitive fails.

    This is not a normal control-flow error. It means the hash primitive
    itself is broken and the enclosing operation must be aborted.
    """
    pass


# Merkle Errors
class MerkleError(CoinhashError):
    """Base exception for Merkle tree errors."""
    pass


class EmptyInputError(MerkleError):
    """Raised when building a Merkle tree from zero leaves."""
    pass


class InvalidLeafIndexError(MerkleError):
    """Raised when a proof is requested for a leaf index outside the tree."""
    pass


class InvalidProofError(MerkleError):
    """Raised when a serialized Merkle proof is malformed."""
    pass


# Configuration Errors
class ConfigurationError(CoinhashError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass
