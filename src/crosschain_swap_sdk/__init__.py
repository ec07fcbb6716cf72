"""Cross-chain swap order SDK.

Builds hash-locked cross-chain swap orders, produces their EIP-712 signing
payload, and serializes them together with their secret material so they
can be restored later.

Example usage:
    ```python
    from crosschain_swap_sdk import (
        create_order_with_serialization,
        order_to_json,
        order_from_json,
        generate_secret,
    )

    secret = generate_secret()
    created = create_order_with_serialization(
        escrow_factory="0x...",
        maker="0x...",
        making_amount=1000,
        taking_amount=2000,
        maker_asset="0x...",
        taker_asset="0x...",
        secret=secret,
        src_chain_id=1,
        dst_chain_id=1001,
        src_timestamp=int(time.time()),
        resolver="0x...",
    )

    text = order_to_json(created.order, original_secret=secret)
    restored = order_from_json(text)
    assert restored == created.order
    ```
"""

from .errors import (
    EmptyLeafSet,
    InvalidLeafSet,
    InvalidOrderParams,
    InvalidSecret,
    MalformedTransportData,
    MissingEscrowExtension,
    OrderError,
    ReconstructionAmbiguous,
)
from .escrow import (
    PLACEHOLDER_SECRET,
    ZERO_ADDRESS,
    DstStage,
    HashLock,
    SrcStage,
    TimeLocks,
    generate_secret,
)
from .order import (
    AuctionDetails,
    AuctionPoint,
    Order,
    OrderDetails,
    SignedOrder,
    TypedDataSigner,
    Whitelist,
    WhitelistItem,
    sign_order_with_signer,
    verify_order_signature,
)
from .serialization import (
    deserialize_order,
    export_order_view,
    order_from_json,
    order_to_json,
    serialize_order,
)
from .workflow import (
    CreatedOrder,
    OrderBuilder,
    OrderBuilderConfig,
    SerializationData,
    create_order_with_serialization,
)

__all__ = [
    # Errors
    "OrderError",
    "InvalidSecret",
    "InvalidLeafSet",
    "EmptyLeafSet",
    "MissingEscrowExtension",
    "ReconstructionAmbiguous",
    "MalformedTransportData",
    "InvalidOrderParams",
    # Escrow
    "HashLock",
    "TimeLocks",
    "SrcStage",
    "DstStage",
    "PLACEHOLDER_SECRET",
    "ZERO_ADDRESS",
    "generate_secret",
    # Order
    "AuctionDetails",
    "AuctionPoint",
    "Whitelist",
    "WhitelistItem",
    "Order",
    "OrderDetails",
    "SignedOrder",
    "TypedDataSigner",
    "sign_order_with_signer",
    "verify_order_signature",
    # Serialization
    "serialize_order",
    "deserialize_order",
    "order_to_json",
    "order_from_json",
    "export_order_view",
    # Workflow
    "OrderBuilder",
    "OrderBuilderConfig",
    "CreatedOrder",
    "SerializationData",
    "create_order_with_serialization",
]
