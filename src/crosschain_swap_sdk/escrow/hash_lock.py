"""Hash lock commitments for cross-chain escrows.

A hash lock commits to secret material without revealing it:
- Single fill: keccak256 of one secret
- Multiple fills: Merkle root over indexed secret hashes, so each partial
  fill can reveal one secret together with an inclusion proof

For multiple fills the top 16 bits of the commitment carry the number of
parts (``len(leaves) - 1``); the remaining 240 bits are the Merkle root.
"""

from dataclasses import dataclass
from typing import List, Sequence

from eth_abi.packed import encode_packed
from eth_utils import keccak, is_hexstr

from ..errors import EmptyLeafSet, InvalidLeafSet, InvalidOrderParams, InvalidSecret
from .merkle import merkle_proof, merkle_root, process_proof
from .utils import UINT_16_MAX, UINT_240_MAX


def _to_bytes32(value: str, name: str) -> bytes:
    if not isinstance(value, str) or not is_hexstr(value):
        raise ValueError(f"Invalid {name}: {value!r}")
    raw = bytes.fromhex(value[2:] if value.startswith("0x") else value)
    if len(raw) != 32:
        raise ValueError(f"Invalid {name}: {value!r}. Must be 32 bytes")
    return raw


def _to_hex32(raw: bytes) -> str:
    return "0x" + raw.hex()


def _leaf(index: int, secret_hash: bytes) -> bytes:
    return keccak(encode_packed(["uint64", "bytes32"], [index, secret_hash]))


def secret_to_bytes(secret: str) -> bytes:
    """Bytes a secret is hashed over.

    ``0x``-prefixed hex strings are decoded; any other string is UTF-8 encoded.

    Raises:
        InvalidSecret: If the secret is empty, not a string, or malformed hex
    """
    if not isinstance(secret, str) or not secret:
        raise InvalidSecret(f"Invalid secret: {secret!r}. Must be a non-empty string")

    if secret[:2] in ("0x", "0X"):
        body = secret[2:]
        if not body or len(body) % 2:
            raise InvalidSecret("Invalid secret: malformed hex string")
        try:
            return bytes.fromhex(body)
        except ValueError:
            raise InvalidSecret("Invalid secret: malformed hex string")

    return secret.encode("utf-8")


@dataclass(frozen=True)
class HashLock:
    """Public commitment to an order's secret(s)."""

    value: str
    """bytes32 hex string of the commitment."""

    def __post_init__(self):
        try:
            raw = _to_bytes32(self.value, "hash lock")
        except ValueError as e:
            raise InvalidOrderParams(str(e))
        object.__setattr__(self, "value", _to_hex32(raw))

    def __str__(self) -> str:
        return self.value

    @staticmethod
    def hash_secret(secret: str) -> str:
        """Hash a secret with keccak256.

        Args:
            secret: Hex string (``0x`` prefix) or plain text secret

        Returns:
            bytes32 hex string
        """
        return _to_hex32(keccak(secret_to_bytes(secret)))

    @staticmethod
    def get_merkle_leaves(secrets: Sequence[str]) -> List[str]:
        """Derive indexed Merkle leaves from secrets.

        leaf_i = keccak256(uint64(i) ++ hash_secret(secret_i)), so the same
        secret at another index yields another leaf.

        Raises:
            EmptyLeafSet: If no secrets are given
            InvalidSecret: If any secret is invalid
        """
        if isinstance(secrets, str) or not secrets:
            raise EmptyLeafSet("Expected a non-empty list of secrets")
        return HashLock.get_merkle_leaves_from_secret_hashes(
            [HashLock.hash_secret(s) for s in secrets]
        )

    @staticmethod
    def get_merkle_leaves_from_secret_hashes(secret_hashes: Sequence[str]) -> List[str]:
        if isinstance(secret_hashes, str) or not secret_hashes:
            raise EmptyLeafSet("Expected a non-empty list of secret hashes")

        leaves = []
        for idx, secret_hash in enumerate(secret_hashes):
            try:
                hash_bytes = _to_bytes32(secret_hash, "secret hash")
            except ValueError as e:
                raise InvalidSecret(str(e))
            leaves.append(_to_hex32(_leaf(idx, hash_bytes)))
        return leaves

    @staticmethod
    def get_proof(leaves: Sequence[str], index: int) -> List[str]:
        """Inclusion proof for the leaf at ``index``."""
        raw_leaves = HashLock._leaves_to_bytes(leaves)
        return [_to_hex32(node) for node in merkle_proof(raw_leaves, index)]

    @classmethod
    def for_single_fill(cls, secret: str) -> "HashLock":
        return cls(cls.hash_secret(secret))

    @classmethod
    def for_multiple_fills(cls, leaves: Sequence[str]) -> "HashLock":
        """Commit to a set of Merkle leaves.

        Raises:
            EmptyLeafSet: If leaves is empty
            InvalidLeafSet: If there are more leaves than the parts counter holds
        """
        raw_leaves = cls._leaves_to_bytes(leaves)
        if len(raw_leaves) - 1 > UINT_16_MAX:
            raise InvalidLeafSet(
                f"Too many leaves: {len(raw_leaves)}. Maximum: {UINT_16_MAX + 1}"
            )

        root = int.from_bytes(merkle_root(raw_leaves), "big")
        value = (root & UINT_240_MAX) | ((len(raw_leaves) - 1) << 240)
        return cls(_to_hex32(value.to_bytes(32, "big")))

    @classmethod
    def from_string(cls, value: str) -> "HashLock":
        return cls(value)

    def get_parts_count(self) -> int:
        """Number of parts encoded in a multiple-fill commitment."""
        return int(self.value, 16) >> 240

    def verify_single_fill(self, secret: str) -> bool:
        return self.hash_secret(secret) == self.value

    def verify_multiple_fill(self, secret: str, index: int, proof: Sequence[str]) -> bool:
        """Check that ``secret`` at ``index`` is included under this commitment.

        Args:
            secret: Revealed secret
            index: Position of the secret in the original list
            proof: Sibling hashes from :meth:`get_proof`

        Returns:
            True if the recomputed root matches the lower 240 bits
        """
        leaf_bytes = _leaf(index, keccak(secret_to_bytes(secret)))
        root = process_proof(leaf_bytes, self._leaves_to_bytes(proof, allow_empty=True))
        return int.from_bytes(root, "big") & UINT_240_MAX == int(self.value, 16) & UINT_240_MAX

    @staticmethod
    def _leaves_to_bytes(leaves: Sequence[str], allow_empty: bool = False) -> List[bytes]:
        if isinstance(leaves, str):
            raise InvalidLeafSet("Expected a list of leaves, got a string")
        if not leaves and not allow_empty:
            raise EmptyLeafSet("Expected non-zero number of leaves")
        try:
            return [_to_bytes32(leaf, "leaf") for leaf in leaves]
        except ValueError as e:
            raise InvalidLeafSet(str(e))
