"""Create, sign, store and restore a cross-chain swap order.

This example builds a single-fill order with a fresh secret, signs its
EIP-712 payload with a local key, serializes it together with the secret,
and restores it from the stored JSON.

Prerequisites:
1. pip install crosschain-swap-sdk[examples]
2. Set environment variables:
   MAKER_PRIVATE_KEY, ESCROW_FACTORY, MAKER_ASSET, TAKER_ASSET, RESOLVER

Usage:
    python create_and_restore_order.py
"""

import asyncio
import os
import time

from dotenv import load_dotenv
from eth_account import Account
from eth_utils import to_hex

load_dotenv()


class LocalKeySigner:
    """Signs typed data with a private key held in memory."""

    def __init__(self, private_key: str):
        self._account = Account.from_key(private_key)

    async def get_address(self) -> str:
        return self._account.address

    async def sign_typed_data(self, params) -> str:
        signed = self._account.sign_typed_data(
            domain_data=params["domain"],
            message_types=params["types"],
            message_data=params["message"],
        )
        return to_hex(signed.signature)


async def main():
    from crosschain_swap_sdk import (
        create_order_with_serialization,
        export_order_view,
        generate_secret,
        order_from_json,
        order_to_json,
        sign_order_with_signer,
        verify_order_signature,
    )

    required = [
        "MAKER_PRIVATE_KEY",
        "ESCROW_FACTORY",
        "MAKER_ASSET",
        "TAKER_ASSET",
        "RESOLVER",
    ]
    missing = [var for var in required if not os.environ.get(var)]
    if missing:
        print(f"Missing required environment variables: {', '.join(missing)}")
        return

    signer = LocalKeySigner(os.environ["MAKER_PRIVATE_KEY"])
    maker = await signer.get_address()

    print("=" * 60)
    print("  CROSS-CHAIN SWAP ORDER")
    print("=" * 60)

    print("\n[1] Building order...")
    secret = generate_secret()
    created = create_order_with_serialization(
        escrow_factory=os.environ["ESCROW_FACTORY"],
        maker=maker,
        making_amount=10**18,
        taking_amount=2 * 10**18,
        maker_asset=os.environ["MAKER_ASSET"],
        taker_asset=os.environ["TAKER_ASSET"],
        secret=secret,
        src_chain_id=1,
        dst_chain_id=1001,
        src_timestamp=int(time.time()),
        resolver=os.environ["RESOLVER"],
    )
    order = created.order
    print(f"    Maker:     {order.maker}")
    print(f"    Hash lock: {order.hash_lock}")

    print("\n[2] Signing order...")
    signed = await sign_order_with_signer(signer, order)
    print(f"    Order hash: {signed.order_hash}")
    print(f"    Valid:      {verify_order_signature(signed, maker)}")

    print("\n[3] Serializing order with its secret...")
    text = order_to_json(order, **created.serialization_data.as_kwargs())
    print(f"    {len(text)} bytes")

    print("\n[4] Restoring order...")
    restored = order_from_json(text)
    print(f"    Equal to original: {restored == order}")
    print(f"    Same order hash:   {restored.get_order_hash() == signed.order_hash}")

    view = export_order_view(restored)
    print(f"\n[5] Deadline: {view['orderData']['deadline']}")


if __name__ == "__main__":
    asyncio.run(main())
