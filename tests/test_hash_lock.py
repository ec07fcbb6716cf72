"""Tests for hash lock commitments and the Merkle tree."""

import pytest
from eth_abi.packed import encode_packed
from eth_utils import keccak

from crosschain_swap_sdk import (
    EmptyLeafSet,
    HashLock,
    InvalidLeafSet,
    InvalidOrderParams,
    InvalidSecret,
    generate_secret,
)
from crosschain_swap_sdk.escrow import hash_pair, merkle_proof, merkle_root, process_proof
from crosschain_swap_sdk.escrow.utils import UINT_240_MAX


class TestHashSecret:
    """Tests for secret hashing."""

    def test_hash_text_secret(self):
        """Test that plain text secrets are hashed as UTF-8."""
        assert HashLock.hash_secret("topsecret") == "0x" + keccak(text="topsecret").hex()

    def test_hash_hex_secret(self):
        """Test that 0x-prefixed secrets are hashed as raw bytes."""
        secret = "0x" + "ab" * 32
        assert HashLock.hash_secret(secret) == "0x" + keccak(bytes.fromhex("ab" * 32)).hex()

    def test_hash_is_bytes32(self):
        """Test hash format."""
        secret_hash = HashLock.hash_secret(generate_secret())
        assert secret_hash.startswith("0x")
        assert len(secret_hash) == 66

    @pytest.mark.parametrize("secret", ["", "0x", "0xabc", "0xzz", None, 123, b"raw"])
    def test_invalid_secret(self, secret):
        """Test that empty or malformed secrets raise InvalidSecret."""
        with pytest.raises(InvalidSecret):
            HashLock.hash_secret(secret)

    def test_invalid_secret_is_value_error(self):
        """Test that InvalidSecret can be handled as ValueError."""
        with pytest.raises(ValueError, match="Invalid secret"):
            HashLock.for_single_fill("")


class TestMerkleLeaves:
    """Tests for Merkle leaf derivation."""

    def test_leaves_are_deterministic(self):
        """Test that the same secrets yield the same leaves."""
        assert HashLock.get_merkle_leaves(["s0", "s1"]) == HashLock.get_merkle_leaves(
            ["s0", "s1"]
        )

    def test_leaves_are_index_sensitive(self):
        """Test that reordering secrets changes the leaves."""
        assert HashLock.get_merkle_leaves(["s1", "s0"]) != HashLock.get_merkle_leaves(
            ["s0", "s1"]
        )

    def test_same_secret_at_different_index(self):
        """Test that a repeated secret yields distinct leaves."""
        leaves = HashLock.get_merkle_leaves(["same", "same"])
        assert leaves[0] != leaves[1]

    def test_three_distinct_leaves(self):
        """Test leaves for the multi-fill example."""
        leaves = HashLock.get_merkle_leaves(["a", "b", "c"])
        assert len(leaves) == 3
        assert len(set(leaves)) == 3

    def test_leaf_encoding(self):
        """Test leaf = keccak(uint64 index ++ keccak(secret))."""
        leaves = HashLock.get_merkle_leaves(["a", "b", "c"])
        expected = keccak(encode_packed(["uint64", "bytes32"], [1, keccak(text="b")]))
        assert leaves[1] == "0x" + expected.hex()

    def test_leaves_from_secret_hashes(self):
        """Test that both derivations agree."""
        secrets = ["a", "b"]
        hashes = [HashLock.hash_secret(s) for s in secrets]
        assert HashLock.get_merkle_leaves_from_secret_hashes(
            hashes
        ) == HashLock.get_merkle_leaves(secrets)

    def test_empty_secrets(self):
        """Test that an empty secret list raises EmptyLeafSet."""
        with pytest.raises(EmptyLeafSet):
            HashLock.get_merkle_leaves([])


class TestHashLock:
    """Tests for single and multiple fill commitments."""

    def test_single_fill(self):
        """Test single fill commitment equals the secret hash."""
        hash_lock = HashLock.for_single_fill("topsecret")
        assert hash_lock.value == HashLock.hash_secret("topsecret")
        assert str(hash_lock) == hash_lock.value
        assert hash_lock.verify_single_fill("topsecret")
        assert not hash_lock.verify_single_fill("wrong")

    def test_multiple_fills_deterministic(self):
        """Test that the root is stable across independent computations."""
        first = HashLock.for_multiple_fills(HashLock.get_merkle_leaves(["a", "b", "c"]))
        second = HashLock.for_multiple_fills(HashLock.get_merkle_leaves(["a", "b", "c"]))
        assert first == second

    def test_multiple_fills_parts_count(self):
        """Test that the top 16 bits hold the number of parts."""
        leaves = HashLock.get_merkle_leaves(["a", "b", "c"])
        hash_lock = HashLock.for_multiple_fills(leaves)
        assert hash_lock.get_parts_count() == 2

    def test_multiple_fills_root(self):
        """Test that the lower 240 bits hold the Merkle root."""
        leaves = HashLock.get_merkle_leaves(["a", "b"])
        hash_lock = HashLock.for_multiple_fills(leaves)

        raw = [bytes.fromhex(leaf[2:]) for leaf in leaves]
        root = int.from_bytes(hash_pair(raw[0], raw[1]), "big")
        assert int(hash_lock.value, 16) & UINT_240_MAX == root & UINT_240_MAX
        assert hash_lock.get_parts_count() == 1

    def test_multiple_fills_empty(self):
        """Test that an empty leaf set raises EmptyLeafSet."""
        with pytest.raises(EmptyLeafSet):
            HashLock.for_multiple_fills([])

    def test_multiple_fills_too_many_leaves(self):
        """Test that the parts counter bounds the leaf count."""
        leaves = ["0x" + "00" * 32] * (2**16 + 1)
        with pytest.raises(InvalidLeafSet, match="Too many leaves"):
            HashLock.for_multiple_fills(leaves)

    def test_invalid_leaf(self):
        """Test that a malformed leaf raises InvalidLeafSet."""
        with pytest.raises(InvalidLeafSet):
            HashLock.for_multiple_fills(["0x1234"])

    def test_from_string(self):
        """Test parsing and normalization of a commitment."""
        value = "0x" + "AB" * 32
        assert HashLock.from_string(value).value == "0x" + "ab" * 32

    def test_from_string_invalid(self):
        """Test that a malformed commitment is rejected."""
        with pytest.raises(InvalidOrderParams):
            HashLock.from_string("0x1234")


class TestMerkleProof:
    """Tests for inclusion proofs."""

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 8])
    def test_every_secret_verifies(self, count):
        """Test that each secret verifies with its own proof."""
        secrets = [f"secret-{i}" for i in range(count)]
        leaves = HashLock.get_merkle_leaves(secrets)
        hash_lock = HashLock.for_multiple_fills(leaves)

        for idx, secret in enumerate(secrets):
            proof = HashLock.get_proof(leaves, idx)
            assert hash_lock.verify_multiple_fill(secret, idx, proof)

    def test_wrong_index_fails(self):
        """Test that a secret does not verify at another index."""
        secrets = ["a", "b", "c"]
        leaves = HashLock.get_merkle_leaves(secrets)
        hash_lock = HashLock.for_multiple_fills(leaves)

        proof = HashLock.get_proof(leaves, 0)
        assert not hash_lock.verify_multiple_fill("a", 1, proof)

    def test_wrong_secret_fails(self):
        """Test that an unknown secret does not verify."""
        secrets = ["a", "b", "c"]
        leaves = HashLock.get_merkle_leaves(secrets)
        hash_lock = HashLock.for_multiple_fills(leaves)

        proof = HashLock.get_proof(leaves, 2)
        assert not hash_lock.verify_multiple_fill("d", 2, proof)

    def test_single_leaf_tree(self):
        """Test that a single leaf is its own root."""
        leaf = bytes.fromhex("11" * 32)
        assert merkle_root([leaf]) == leaf
        assert merkle_proof([leaf], 0) == []

    def test_process_proof(self):
        """Test proof processing against the tree root."""
        leaves = [bytes([i]) * 32 for i in range(1, 6)]
        root = merkle_root(leaves)
        for idx, leaf in enumerate(leaves):
            assert process_proof(leaf, merkle_proof(leaves, idx)) == root

    def test_proof_index_out_of_range(self):
        """Test that proofs need a valid leaf index."""
        with pytest.raises(IndexError):
            merkle_proof([bytes(32)], 1)
