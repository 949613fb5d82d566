"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Coinhash, a product of Garudex Labs

Merkle tree implementation for ledger data integrity.

This module implements a binary Merkle tree over ordered leaf payloads:
- Tree construction from payloads (canonically encoded, then SHA-256)
- Merkle proof generation for any leaf
- Merkle proof verification from a claimed payload
- Parallel leaf hashing for large trees

Commitment Rules:
1. Leaf digest: sha256(canonical_bytes(payload))
2. Internal digest: sha256(left.digest + right.digest)
3. Pairing: bottom-up, adjacent pairs left to right
4. Odd count at a level: the trailing node is promoted unchanged to the
   next level (it is never duplicated or hashed with itself)
5. Single leaf: root digest == leaf digest
6. Zero leaves: EmptyInputError

The tree is immutable after construction and holds no caches, so it can be
read from several threads at once without locking.
"""

import concurrent.futures
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from coinhash.config.settings import MerkleConfig
from coinhash.core.codec import canonical_bytes
from coinhash.core.digest import Digest, digest_of, hash_concat
from coinhash.exceptions import (
    EmptyInputError,
    InvalidFormatError,
    InvalidLeafIndexError,
    InvalidProofError,
)
from coinhash.logging_config import (
    get_logger,
    log_merkle_root_computation,
    log_merkle_verification,
)

logger = get_logger(__name__)


def leaf_digest(payload: Any) -> Digest:
    """
    Compute the leaf digest of a payload.

    Args:
        payload: Value, fixed-width integer, bytes or str

    Returns:
        sha256 of the payload's canonical encoding
    """
    return digest_of(canonical_bytes(payload))


class Side(Enum):
    """Position of a sibling relative to the node on the proof path."""
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class MerkleLeaf:
    """
    Leaf node. Keeps only the payload's digest, never the payload.

    Attributes:
        index: Position of the payload in the original leaf list
        digest: Leaf digest
    """
    index: int
    digest: Digest

    @property
    def is_leaf(self) -> bool:
        return True


@dataclass(frozen=True)
class MerkleInternal:
    """
    Internal node. Exclusively owns its two children.

    Attributes:
        left: Left child
        right: Right child
        digest: sha256(left.digest + right.digest)
    """
    left: "MerkleNode"
    right: "MerkleNode"
    digest: Digest

    @property
    def is_leaf(self) -> bool:
        return False


MerkleNode = Union[MerkleLeaf, MerkleInternal]


@dataclass(frozen=True)
class ProofStep:
    """One sibling on the path from a leaf to the root."""
    sibling: Digest
    side: Side


@dataclass(frozen=True)
class MerkleProof:
    """
    Proof that a leaf is included in a Merkle tree.

    Attributes:
        leaf_index: Index of the proven leaf
        leaf_digest: Digest of the proven leaf
        steps: Sibling digests and sides, ordered from leaf to root. Levels
            where the node was promoted contribute no step.
        root_digest: Root the proof was generated against
    """
    leaf_index: int
    leaf_digest: Digest
    steps: Tuple[ProofStep, ...]
    root_digest: Digest

    def compute_root(self) -> Digest:
        """Recompute the root digest from the leaf digest and the steps."""
        current = self.leaf_digest
        for step in self.steps:
            if step.side is Side.LEFT:
                current = hash_concat(step.sibling, current)
            else:
                current = hash_concat(current, step.sibling)
        return current

    def to_dict(self) -> Dict[str, Any]:
        """Convert proof to a JSON-friendly dictionary (hex digests)."""
        return {
            "leaf_index": self.leaf_index,
            "leaf_digest": self.leaf_digest.hex(),
            "root_digest": self.root_digest.hex(),
            "steps": [
                {"digest": step.sibling.hex(), "side": step.side.value}
                for step in self.steps
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MerkleProof":
        """
        Rebuild a proof from to_dict() output.

        Raises:
            InvalidProofError: If fields are missing or malformed
        """
        try:
            steps = tuple(
                ProofStep(Digest.from_hex(step["digest"]), Side(step["side"]))
                for step in data["steps"]
            )
            leaf_index = int(data["leaf_index"])
            if leaf_index < 0:
                raise ValueError(f"leaf_index must be non-negative, got {leaf_index}")
            return cls(
                leaf_index=leaf_index,
                leaf_digest=Digest.from_hex(data["leaf_digest"]),
                steps=steps,
                root_digest=Digest.from_hex(data["root_digest"]),
            )
        except (KeyError, TypeError, ValueError, InvalidFormatError) as e:
            raise InvalidProofError(f"Malformed Merkle proof: {e}") from e


class MerkleTree:
    """
    Binary Merkle tree over ordered payloads.

    The tree is built bottom-up once, in the constructor. Changing any leaf
    means building a new tree.

    Example:
        >>> leaves = [b"data1", b"data2", b"data3"]
        >>> tree = MerkleTree(leaves)
        >>> proof = tree.proof_for(2)
        >>> MerkleTree.verify_proof(leaves[2], proof, tree.get_root())
        True
    """

    def __init__(self, leaves: Sequence[Any], config: Optional[MerkleConfig] = None):
        """
        Build Merkle tree from leaf payloads.

        Args:
            leaves: Ordered payloads (canonically encoded, then hashed)
            config: Merkle configuration; defaults to MerkleConfig()

        Raises:
            EmptyInputError: If leaves is empty
        """
        if len(leaves) == 0:
            raise EmptyInputError("Cannot create Merkle tree from empty leaves list")

        self.config = config if config is not None else MerkleConfig()
        start_time = time.time()

        self.use_parallel = (
            self.config.parallel_enabled
            and len(leaves) >= self.config.parallel_threshold
        )

        if self.use_parallel:
            digests = self._hash_leaves_parallel(leaves)
        else:
            digests = [leaf_digest(leaf) for leaf in leaves]

        self._leaf_digests: Tuple[Digest, ...] = tuple(digests)
        self._root, self._levels = self._build_tree(self._leaf_digests)

        log_merkle_root_computation(
            logger,
            leaf_count=self.leaf_count,
            merkle_root=self.get_root().hex(self.config.log_digest_bytes),
            duration_ms=(time.time() - start_time) * 1000,
            parallel=self.use_parallel,
        )

    def _hash_leaves_parallel(self, leaves: Sequence[Any]) -> List[Digest]:
        """
        Hash leaves in a thread pool.

        executor.map yields results in input order, so leaf order is kept.
        """
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.config.max_workers
        ) as executor:
            return list(executor.map(leaf_digest, leaves))

    @staticmethod
    def _build_tree(
        digests: Tuple[Digest, ...],
    ) -> Tuple[MerkleNode, Tuple[Tuple[Digest, ...], ...]]:
        """
        Build the node structure and the per-level digest lists.

        Returns:
            (root node, levels) where levels[0] is the leaf level and
            levels[-1] holds only the root digest
        """
        nodes: List[MerkleNode] = [
            MerkleLeaf(index=i, digest=digest) for i, digest in enumerate(digests)
        ]
        levels = [digests]

        while len(nodes) > 1:
            next_nodes: List[MerkleNode] = []
            for i in range(0, len(nodes) - 1, 2):
                left, right = nodes[i], nodes[i + 1]
                next_nodes.append(
                    MerkleInternal(
                        left=left,
                        right=right,
                        digest=hash_concat(left.digest, right.digest),
                    )
                )
            if len(nodes) % 2 == 1:
                next_nodes.append(nodes[-1])

            nodes = next_nodes
            levels.append(tuple(node.digest for node in nodes))

        return nodes[0], tuple(levels)

    @property
    def root(self) -> MerkleNode:
        return self._root

    @property
    def leaf_count(self) -> int:
        return len(self._leaf_digests)

    @property
    def leaf_digests(self) -> Tuple[Digest, ...]:
        return self._leaf_digests

    @property
    def depth(self) -> int:
        """Number of levels from leaves to root, inclusive (1 for a single leaf)."""
        return len(self._levels)

    def get_root(self) -> Digest:
        """Get the Merkle root digest."""
        return self._root.digest

    def proof_for(self, leaf_index: int) -> MerkleProof:
        """
        Generate Merkle proof for the leaf at the given index.

        Args:
            leaf_index: Index of the leaf (0-based)

        Returns:
            MerkleProof with sibling digests and sides from leaf to root

        Raises:
            InvalidLeafIndexError: If leaf_index is out of range
        """
        if not 0 <= leaf_index < self.leaf_count:
            raise InvalidLeafIndexError(
                f"Leaf index {leaf_index} out of range [0, {self.leaf_count})"
            )

        steps: List[ProofStep] = []
        index = leaf_index

        for level in self._levels[:-1]:
            if index % 2 == 1:
                steps.append(ProofStep(sibling=level[index - 1], side=Side.LEFT))
            elif index + 1 < len(level):
                steps.append(ProofStep(sibling=level[index + 1], side=Side.RIGHT))
            # Promoted trailing node has no sibling at this level
            index //= 2

        return MerkleProof(
            leaf_index=leaf_index,
            leaf_digest=self._leaf_digests[leaf_index],
            steps=tuple(steps),
            root_digest=self.get_root(),
        )

    @staticmethod
    def verify_proof(payload: Any, proof: MerkleProof, expected_root: Digest) -> bool:
        """
        Verify that a payload is included under an expected root.

        The leaf digest is recomputed from the payload, then the root is
        recomputed from the proof steps. The proof's own root_digest is not
        trusted.

        Args:
            payload: Claimed leaf payload
            proof: Merkle proof for the payload
            expected_root: Root digest the caller trusts

        Returns:
            True if the proof is valid, False otherwise
        """
        if leaf_digest(payload) != proof.leaf_digest:
            log_merkle_verification(
                logger,
                leaf_index=proof.leaf_index,
                success=False,
                failure_reason="leaf_digest_mismatch",
            )
            return False

        if proof.compute_root() != expected_root:
            log_merkle_verification(
                logger,
                leaf_index=proof.leaf_index,
                success=False,
                failure_reason="root_mismatch",
            )
            return False

        log_merkle_verification(logger, leaf_index=proof.leaf_index, success=True)
        return True


class MerkleTreeBuilder:
    """
    Builds Merkle trees with a fixed configuration.

    Example:
        >>> builder = MerkleTreeBuilder()
        >>> tree = builder.build([b"chunk-0", b"chunk-1"])
        >>> tree.leaf_count
        2
    """

    def __init__(self, config: Optional[MerkleConfig] = None):
        self.config = config if config is not None else MerkleConfig()

    def build(self, leaves: Sequence[Any]) -> MerkleTree:
        """
        Build a Merkle tree from ordered leaf payloads.

        Raises:
            EmptyInputError: If leaves is empty
        """
        return MerkleTree(leaves, config=self.config)


def build_tree(leaves: Sequence[Any], config: Optional[MerkleConfig] = None) -> MerkleTree:
    """Build a Merkle tree from ordered leaf payloads."""
    return MerkleTreeBuilder(config).build(leaves)


def merkle_root(leaves: Sequence[Any], config: Optional[MerkleConfig] = None) -> Digest:
    """Compute only the root digest of ordered leaf payloads."""
    return build_tree(leaves, config).get_root()
