"""Order signing payload (EIP-712).

The SDK never holds keys: it builds the typed data and hands it to an
external signer implementing the TypedDataSigner protocol.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Protocol

from eth_abi import encode
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import keccak

from ..errors import MissingEscrowExtension

if TYPE_CHECKING:
    from .order import Order


DOMAIN_NAME = "CrossChainEscrowOrder"
DOMAIN_VERSION = "1"

EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# EIP-712 types for a cross-chain order
ORDER_TYPES = {
    "Order": [
        {"name": "salt", "type": "uint256"},
        {"name": "maker", "type": "address"},
        {"name": "makerAsset", "type": "address"},
        {"name": "takerAsset", "type": "address"},
        {"name": "makingAmount", "type": "uint256"},
        {"name": "takingAmount", "type": "uint256"},
        {"name": "makerTraits", "type": "uint256"},
        {"name": "hashLock", "type": "bytes32"},
        {"name": "timeLocks", "type": "uint256"},
        {"name": "srcChainId", "type": "uint256"},
        {"name": "dstChainId", "type": "uint256"},
        {"name": "srcSafetyDeposit", "type": "uint256"},
        {"name": "dstSafetyDeposit", "type": "uint256"},
        {"name": "detailsHash", "type": "bytes32"},
    ],
}


@dataclass
class SignedOrder:
    """Order hash with the maker's signature."""

    order_hash: str
    """EIP-712 digest (bytes32 hex string)."""

    typed_data: Dict[str, Any]
    """Typed data that was signed."""

    signature: str
    """65 bytes packed hex string."""


class TypedDataSigner(Protocol):
    """Protocol for signers that can sign EIP-712 typed data."""

    async def get_address(self) -> str:
        """Get the signer's address."""
        ...

    async def sign_typed_data(self, params: Dict[str, Any]) -> str:
        """Sign EIP-712 typed data.

        Args:
            params: Dict with domain, types, primaryType, and message

        Returns:
            Signature as hex string
        """
        ...


def get_details_hash(order: "Order") -> str:
    """keccak256 over the ABI encoded auction, whitelist and resolving start time.

    Raises:
        MissingEscrowExtension: If any of them is missing from the order
    """
    if not order.details.is_complete():
        raise MissingEscrowExtension(
            "Auction, whitelist and resolving start time are required for signing"
        )

    auction = order.auction
    encoded = encode(
        [
            "uint256",
            "(uint256,uint256)[]",
            "uint256",
            "uint256",
            "(address,uint256)[]",
            "uint256",
        ],
        [
            auction.initial_rate_bump,
            [(p.coefficient, p.delay) for p in auction.points],
            auction.duration,
            auction.start_time,
            [(item.address, item.allow_from) for item in order.whitelist],
            order.resolving_start_time,
        ],
    )
    return "0x" + keccak(encoded).hex()


def create_eip712_domain(order: "Order") -> Dict[str, Any]:
    """Domain bound to the source chain and the escrow factory."""
    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": order.src_chain_id,
        "verifyingContract": order.escrow_factory,
    }


def build_order_typed_data(order: "Order") -> Dict[str, Any]:
    """Build the full EIP-712 structure for an order.

    The result depends only on the order fields, so equal orders always
    produce identical typed data.
    """
    return {
        "types": {"EIP712Domain": EIP712_DOMAIN_TYPE, **ORDER_TYPES},
        "primaryType": "Order",
        "domain": create_eip712_domain(order),
        "message": {
            "salt": order.salt,
            "maker": order.maker,
            "makerAsset": order.maker_asset,
            "takerAsset": order.taker_asset,
            "makingAmount": order.making_amount,
            "takingAmount": order.taking_amount,
            "makerTraits": order.maker_traits,
            "hashLock": order.hash_lock.value,
            "timeLocks": order.time_locks.build(),
            "srcChainId": order.src_chain_id,
            "dstChainId": order.dst_chain_id,
            "srcSafetyDeposit": order.src_safety_deposit,
            "dstSafetyDeposit": order.dst_safety_deposit,
            "detailsHash": get_details_hash(order),
        },
    }


def get_order_hash(order: "Order") -> str:
    signable = encode_typed_data(full_message=build_order_typed_data(order))
    return "0x" + keccak(b"\x19" + signable.version + signable.header + signable.body).hex()


async def sign_order_with_signer(signer: TypedDataSigner, order: "Order") -> SignedOrder:
    """Sign an order with any compatible signer.

    Args:
        signer: Signer that implements TypedDataSigner protocol
        order: Order to sign

    Returns:
        SignedOrder with signature

    Raises:
        ValueError: If the signer is not the order maker
    """
    signer_address = await signer.get_address()
    if signer_address.lower() != order.maker.lower():
        raise ValueError(
            f"Signer {signer_address} is not the order maker {order.maker}"
        )

    typed_data = build_order_typed_data(order)
    message = {
        key: str(value) if isinstance(value, int) else value
        for key, value in typed_data["message"].items()
    }

    signature = await signer.sign_typed_data(
        {
            "domain": typed_data["domain"],
            "types": ORDER_TYPES,
            "primaryType": "Order",
            "message": message,  # big integers as strings for JSON signers
        }
    )

    return SignedOrder(
        order_hash=get_order_hash(order),
        typed_data=typed_data,
        signature=signature,
    )


def verify_order_signature(signed_order: SignedOrder, expected_signer: str) -> bool:
    """Verify an order signature locally (for EOA signatures).

    Args:
        signed_order: Signed order
        expected_signer: Expected signer address

    Returns:
        True if signature is valid and from expected signer
    """
    try:
        signable_message = encode_typed_data(full_message=signed_order.typed_data)
        recovered = Account.recover_message(
            signable_message,
            signature=bytes.fromhex(
                signed_order.signature[2:]
                if signed_order.signature.startswith("0x")
                else signed_order.signature
            ),
        )
        return recovered.lower() == expected_signer.lower()
    except Exception:
        return False
