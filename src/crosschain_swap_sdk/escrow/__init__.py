"""Escrow primitives: hash locks, Merkle trees and time locks."""

from .hash_lock import HashLock, secret_to_bytes
from .merkle import build_tree, hash_pair, merkle_proof, merkle_root, process_proof
from .time_locks import DstStage, SrcStage, TimeLocks
from .utils import (
    PLACEHOLDER_SECRET,
    UINT_40_MAX,
    UINT_160_MAX,
    UINT_256_MAX,
    ZERO_ADDRESS,
    generate_secret,
    rand_bigint,
)

__all__ = [
    # Hash lock
    "HashLock",
    "secret_to_bytes",
    # Merkle
    "build_tree",
    "hash_pair",
    "merkle_proof",
    "merkle_root",
    "process_proof",
    # Time locks
    "TimeLocks",
    "SrcStage",
    "DstStage",
    # Utils
    "PLACEHOLDER_SECRET",
    "UINT_40_MAX",
    "UINT_160_MAX",
    "UINT_256_MAX",
    "ZERO_ADDRESS",
    "generate_secret",
    "rand_bigint",
]
