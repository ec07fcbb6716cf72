"""Merkle tree over bytes32 leaves.

The tree layout matches the simple Merkle tree used by the escrow contracts:
- Leaves are used as-is (no extra leaf hashing)
- Leaves keep the caller's order
- Parent nodes hash the sorted pair: keccak(min(a, b) + max(a, b))
- The tree is stored as a complete binary tree in an array, root at index 0
"""

from typing import List, Sequence

from eth_utils import keccak


def hash_pair(a: bytes, b: bytes) -> bytes:
    """Commutative keccak hash of two nodes."""
    return keccak(a + b) if a < b else keccak(b + a)


def build_tree(leaves: Sequence[bytes]) -> List[bytes]:
    """Build the array representation of the tree.

    Args:
        leaves: 32-byte leaves, at least one

    Returns:
        Node array of length ``2 * len(leaves) - 1`` with the root at index 0
    """
    if not leaves:
        raise ValueError("Expected non-zero number of leaves")

    tree: List[bytes] = [b""] * (2 * len(leaves) - 1)
    for i, leaf in enumerate(leaves):
        tree[len(tree) - 1 - i] = leaf
    for i in range(len(tree) - 1 - len(leaves), -1, -1):
        tree[i] = hash_pair(tree[2 * i + 1], tree[2 * i + 2])
    return tree


def merkle_root(leaves: Sequence[bytes]) -> bytes:
    return build_tree(leaves)[0]


def merkle_proof(leaves: Sequence[bytes], index: int) -> List[bytes]:
    """Sibling path from the leaf at ``index`` up to the root."""
    if index < 0 or index >= len(leaves):
        raise IndexError(f"Leaf index out of range: {index}")

    tree = build_tree(leaves)
    tree_index = len(tree) - 1 - index
    proof = []
    while tree_index > 0:
        sibling = tree_index + 1 if tree_index % 2 == 1 else tree_index - 1
        proof.append(tree[sibling])
        tree_index = (tree_index - 1) // 2
    return proof


def process_proof(leaf: bytes, proof: Sequence[bytes]) -> bytes:
    """Recompute the root implied by a leaf and its proof."""
    node = leaf
    for sibling in proof:
        node = hash_pair(node, sibling)
    return node
