"""
Merkle tree implementation for ledger data integrity.

This module provides Merkle tree construction, proof generation, and
verification over ordered leaf payloads.
"""

from coinhash.merkle.tree import (
    MerkleInternal,
    MerkleLeaf,
    MerkleNode,
    MerkleProof,
    MerkleTree,
    MerkleTreeBuilder,
    ProofStep,
    Side,
    build_tree,
    leaf_digest,
    merkle_root,
)

__all__ = [
    "MerkleInternal",
    "MerkleLeaf",
    "MerkleNode",
    "MerkleProof",
    "MerkleTree",
    "MerkleTreeBuilder",
    "ProofStep",
    "Side",
    "build_tree",
    "leaf_digest",
    "merkle_root",
]
