"""Cross-chain order model and its EIP-712 signing payload."""

from .auction import RATE_BUMP_DENOMINATOR, AuctionDetails, AuctionPoint
from .order import (
    EscrowParamsData,
    ExtraData,
    Order,
    OrderDetails,
    OrderInfoData,
)
from .signing import (
    ORDER_TYPES,
    SignedOrder,
    TypedDataSigner,
    build_order_typed_data,
    get_details_hash,
    get_order_hash,
    sign_order_with_signer,
    verify_order_signature,
)
from .whitelist import Whitelist, WhitelistItem

__all__ = [
    # Auction
    "AuctionDetails",
    "AuctionPoint",
    "RATE_BUMP_DENOMINATOR",
    # Whitelist
    "Whitelist",
    "WhitelistItem",
    # Order
    "Order",
    "OrderDetails",
    "OrderInfoData",
    "EscrowParamsData",
    "ExtraData",
    # Signing
    "ORDER_TYPES",
    "SignedOrder",
    "TypedDataSigner",
    "build_order_typed_data",
    "get_details_hash",
    "get_order_hash",
    "sign_order_with_signer",
    "verify_order_signature",
]
