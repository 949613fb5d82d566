"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Coinhash, a product of Garudex Labs

Coinhash - Data Integrity Primitives for Ledger Systems

Coinhash provides canonical value encoding, an incremental SHA-256 digest
engine, fixed-width big-endian integers, and Merkle trees with inclusion
proofs.
"""

from coinhash._version import __version__

__all__ = ["__version__"]
