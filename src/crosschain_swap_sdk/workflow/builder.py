"""Order construction workflow.

Builds a new order from raw swap parameters and returns it together with the
secret material the caller has to keep for serialization:

    builder = OrderBuilder({"auction_duration": 180})
    created = builder.build(
        escrow_factory="0x...",
        maker="0x...",
        making_amount=10**18,
        taking_amount=2 * 10**18,
        maker_asset="0x...",
        taker_asset="0x...",
        secret=generate_secret(),
        src_chain_id=1,
        dst_chain_id=1001,
        src_timestamp=int(time.time()),
        resolver="0x...",
    )
    text = order_to_json(created.order, **created.serialization_data.as_kwargs())
"""

from dataclasses import dataclass
from secrets import randbelow
from typing import Callable, Dict, List, Optional, Sequence, TypedDict

from ..errors import EmptyLeafSet
from ..escrow.hash_lock import HashLock
from ..escrow.time_locks import TimeLocks
from ..escrow.utils import UINT_40_MAX, UINT_160_MAX
from ..logger import get_logger
from ..order.auction import AuctionDetails
from ..order.order import Order, OrderDetails
from ..order.whitelist import Whitelist, WhitelistItem

logger = get_logger(__name__)

# 0.001 ETH
DEFAULT_SAFETY_DEPOSIT = 10**15

DEFAULT_TIME_LOCKS = {
    "src_withdrawal": 10,
    "src_public_withdrawal": 120,
    "src_cancellation": 121,
    "src_public_cancellation": 122,
    "dst_withdrawal": 10,
    "dst_public_withdrawal": 100,
    "dst_cancellation": 101,
}


class OrderBuilderConfig(TypedDict, total=False):
    """Default policy values for new orders."""

    time_locks: Dict[str, int]
    """Time-lock offsets. Default: DEFAULT_TIME_LOCKS"""

    src_safety_deposit: int
    """Source chain safety deposit. Default: 0.001 ETH"""

    dst_safety_deposit: int
    """Destination chain safety deposit. Default: 0.001 ETH"""

    auction_duration: int
    """Auction duration in seconds. Default: 120"""

    resolver_allow_from: int
    """Earliest fill time for the resolver. Default: 0"""

    resolving_start_time: int
    """Default: 0"""

    max_salt: int
    """Upper bound for the random salt. Default: 2**160 - 1"""


@dataclass
class ResolvedOrderBuilderConfig:
    """Builder configuration with all defaults applied."""

    time_locks: TimeLocks
    src_safety_deposit: int
    dst_safety_deposit: int
    auction_duration: int
    resolver_allow_from: int
    resolving_start_time: int
    max_salt: int


@dataclass
class SerializationData:
    """Secret material needed to serialize the order later."""

    original_secret: Optional[str] = None
    original_secrets: Optional[List[str]] = None

    def as_kwargs(self) -> Dict[str, object]:
        return {
            "original_secret": self.original_secret,
            "original_secrets": self.original_secrets,
        }


@dataclass
class CreatedOrder:
    order: Order
    serialization_data: SerializationData


class OrderBuilder:
    """Builds cross-chain orders with a fixed default policy.

    Args:
        config: Optional overrides of the default policy values
        rand_below: Random source, ``rand_below(n)`` returns an int in ``[0, n)``
    """

    def __init__(
        self,
        config: Optional[OrderBuilderConfig] = None,
        rand_below: Callable[[int], int] = randbelow,
    ):
        config = config or {}
        self._rand_below = rand_below
        self._config = ResolvedOrderBuilderConfig(
            time_locks=TimeLocks.new(**config.get("time_locks", DEFAULT_TIME_LOCKS)),
            src_safety_deposit=config.get("src_safety_deposit", DEFAULT_SAFETY_DEPOSIT),
            dst_safety_deposit=config.get("dst_safety_deposit", DEFAULT_SAFETY_DEPOSIT),
            auction_duration=config.get("auction_duration", 120),
            resolver_allow_from=config.get("resolver_allow_from", 0),
            resolving_start_time=config.get("resolving_start_time", 0),
            max_salt=config.get("max_salt", UINT_160_MAX),
        )

    def get_config(self) -> ResolvedOrderBuilderConfig:
        """Get the resolved builder configuration."""
        return self._config

    def build(
        self,
        escrow_factory: str,
        maker: str,
        making_amount: int,
        taking_amount: int,
        maker_asset: str,
        taker_asset: str,
        secret: Optional[str],
        src_chain_id: int,
        dst_chain_id: int,
        src_timestamp: int,
        resolver: str,
        allow_multiple_fills: bool = False,
        secrets: Optional[Sequence[str]] = None,
    ) -> CreatedOrder:
        """Build an order and the secret material to keep alongside it.

        Args:
            secret: Secret for a single-fill order
            src_timestamp: Auction start time (source chain timestamp)
            resolver: The only whitelisted resolver
            allow_multiple_fills: Build a multiple-fill order from ``secrets``
            secrets: One secret per fill part (multiple fills)

        Returns:
            CreatedOrder with the order and its serialization data

        Raises:
            EmptyLeafSet: If multiple fills are requested without secrets
            InvalidSecret: If a secret is invalid
        """
        if allow_multiple_fills:
            if not secrets:
                raise EmptyLeafSet("Multiple fills require a non-empty list of secrets")
            secrets = list(secrets)
            hash_lock = HashLock.for_multiple_fills(HashLock.get_merkle_leaves(secrets))
            serialization_data = SerializationData(original_secrets=secrets)
        else:
            hash_lock = HashLock.for_single_fill(secret)
            serialization_data = SerializationData(original_secret=secret)

        config = self._config
        order = Order.new(
            escrow_factory,
            {
                "salt": self._rand_below(config.max_salt + 1),
                "maker": maker,
                "making_amount": making_amount,
                "taking_amount": taking_amount,
                "maker_asset": maker_asset,
                "taker_asset": taker_asset,
            },
            {
                "hash_lock": hash_lock,
                "time_locks": config.time_locks,
                "src_chain_id": src_chain_id,
                "dst_chain_id": dst_chain_id,
                "src_safety_deposit": config.src_safety_deposit,
                "dst_safety_deposit": config.dst_safety_deposit,
            },
            OrderDetails(
                auction=AuctionDetails(
                    initial_rate_bump=0,
                    points=(),
                    duration=config.auction_duration,
                    start_time=src_timestamp,
                ),
                whitelist=Whitelist(
                    (WhitelistItem(address=resolver, allow_from=config.resolver_allow_from),)
                ),
                resolving_start_time=config.resolving_start_time,
            ),
            {
                "nonce": self._rand_below(UINT_40_MAX + 1),
                "allow_partial_fills": allow_multiple_fills,
                "allow_multiple_fills": allow_multiple_fills,
            },
        )

        logger.info(
            "Built %s-fill order %s -> %s for maker %s",
            "multiple" if allow_multiple_fills else "single",
            src_chain_id,
            dst_chain_id,
            order.maker,
        )
        return CreatedOrder(order=order, serialization_data=serialization_data)


def create_order_with_serialization(
    escrow_factory: str,
    maker: str,
    making_amount: int,
    taking_amount: int,
    maker_asset: str,
    taker_asset: str,
    secret: Optional[str],
    src_chain_id: int,
    dst_chain_id: int,
    src_timestamp: int,
    resolver: str,
    allow_multiple_fills: bool = False,
    secrets: Optional[Sequence[str]] = None,
) -> CreatedOrder:
    """Build an order with the default policy (see OrderBuilder.build)."""
    return OrderBuilder().build(
        escrow_factory=escrow_factory,
        maker=maker,
        making_amount=making_amount,
        taking_amount=taking_amount,
        maker_asset=maker_asset,
        taker_asset=taker_asset,
        secret=secret,
        src_chain_id=src_chain_id,
        dst_chain_id=dst_chain_id,
        src_timestamp=src_timestamp,
        resolver=resolver,
        allow_multiple_fills=allow_multiple_fills,
        secrets=secrets,
    )
