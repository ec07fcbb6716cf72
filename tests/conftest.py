import pytest
from eth_account import Account
from eth_utils import to_checksum_address

from crosschain_swap_sdk import (
    AuctionDetails,
    AuctionPoint,
    HashLock,
    Order,
    OrderDetails,
    TimeLocks,
    Whitelist,
    WhitelistItem,
)


# Test wallet (DO NOT use in production)
TEST_PRIVATE_KEY = "0x" + "ab" * 32  # Deterministic test key
TEST_ACCOUNT = Account.from_key(TEST_PRIVATE_KEY)
TEST_ADDRESS = TEST_ACCOUNT.address

ESCROW_FACTORY = to_checksum_address("0x" + "11" * 20)
MAKER_ASSET = to_checksum_address("0x" + "22" * 20)
TAKER_ASSET = to_checksum_address("0x" + "33" * 20)
RESOLVER = to_checksum_address("0x" + "44" * 20)

SECRET = "topsecret"
SECRETS = ["a", "b", "c"]


def default_time_locks():
    return TimeLocks.new(
        src_withdrawal=10,
        src_public_withdrawal=120,
        src_cancellation=121,
        src_public_cancellation=122,
        dst_withdrawal=10,
        dst_public_withdrawal=100,
        dst_cancellation=101,
    )


def default_details():
    return OrderDetails(
        auction=AuctionDetails(
            initial_rate_bump=50000,
            points=(AuctionPoint(coefficient=20000, delay=60),),
            duration=120,
            start_time=1700000000,
        ),
        whitelist=Whitelist((WhitelistItem(address=RESOLVER, allow_from=0),)),
        resolving_start_time=1700000000,
    )


def make_order(
    secret=SECRET,
    secrets=None,
    details=None,
    making_amount=1000,
    taking_amount=2000,
    **extra,
):
    if secrets:
        hash_lock = HashLock.for_multiple_fills(HashLock.get_merkle_leaves(secrets))
        extra.setdefault("allow_partial_fills", True)
        extra.setdefault("allow_multiple_fills", True)
    else:
        hash_lock = HashLock.for_single_fill(secret)

    extra.setdefault("nonce", 42)
    return Order.new(
        ESCROW_FACTORY,
        {
            "salt": 123456789,
            "maker": TEST_ADDRESS,
            "making_amount": making_amount,
            "taking_amount": taking_amount,
            "maker_asset": MAKER_ASSET,
            "taker_asset": TAKER_ASSET,
        },
        {
            "hash_lock": hash_lock,
            "time_locks": default_time_locks(),
            "src_chain_id": 1,
            "dst_chain_id": 1001,
            "src_safety_deposit": 10**15,
            "dst_safety_deposit": 10**15,
        },
        default_details() if details is None else details,
        extra,
    )


@pytest.fixture()
def single_fill_order():
    return make_order()


@pytest.fixture()
def multiple_fill_order():
    return make_order(secrets=SECRETS)
