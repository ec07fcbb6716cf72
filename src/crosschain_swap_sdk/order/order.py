"""Cross-chain order aggregate.

An Order bundles the limit-order fields (maker, assets, amounts), the escrow
parameters (hash lock, time locks, chains, safety deposits) and the order
details (auction, whitelist, resolving start time). Orders are immutable;
"updating" an order means building a new one.
"""

import secrets
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, TypedDict, Union

from ..errors import InvalidOrderParams, MissingEscrowExtension
from ..escrow.hash_lock import HashLock
from ..escrow.time_locks import TimeLocks
from ..escrow.utils import UINT_40_MAX, UINT_160_MAX, to_address, to_uint
from .auction import AuctionDetails
from .whitelist import Whitelist

# Maker traits bit layout
NO_PARTIAL_FILLS_FLAG = 255
ALLOW_MULTIPLE_FILLS_FLAG = 254
POST_INTERACTION_CALL_FLAG = 251
HAS_EXTENSION_FLAG = 249
EXPIRATION_OFFSET = 80
NONCE_OFFSET = 120

DETAILS_KEYS = {
    "auction": ("auction",),
    "whitelist": ("whitelist",),
    "resolving_start_time": ("resolvingStartTime", "resolving_start_time"),
}


class OrderInfoData(TypedDict, total=False):
    """Limit-order part of an order."""

    salt: int
    maker: str
    making_amount: int
    taking_amount: int
    maker_asset: str
    taker_asset: str


class EscrowParamsData(TypedDict, total=False):
    """Escrow part of an order."""

    hash_lock: Union[HashLock, str]
    time_locks: Union[TimeLocks, Mapping[str, int]]
    src_chain_id: int
    dst_chain_id: int
    src_safety_deposit: int
    dst_safety_deposit: int


class ExtraData(TypedDict, total=False):
    """Nonce and fill flags."""

    nonce: int
    allow_partial_fills: bool
    allow_multiple_fills: bool


@dataclass(frozen=True)
class OrderDetails:
    """Auction and resolver access settings.

    Fields are None when the source structure did not carry them.
    """

    auction: Optional[AuctionDetails] = None
    whitelist: Optional[Whitelist] = None
    resolving_start_time: Optional[int] = None

    def __post_init__(self):
        if self.auction is not None and not isinstance(self.auction, AuctionDetails):
            object.__setattr__(self, "auction", AuctionDetails.from_dict(self.auction))
        if self.whitelist is not None and not isinstance(self.whitelist, Whitelist):
            object.__setattr__(self, "whitelist", Whitelist.of(self.whitelist))
        if self.resolving_start_time is not None:
            to_uint(self.resolving_start_time, "resolving start time")

    @classmethod
    def from_mapping(cls, data: Any) -> "OrderDetails":
        """Normalize a details structure.

        Each field is read from the first place it is found: the mapping
        itself, its ``details`` entry, or its ``extension`` entry.

        Raises:
            MissingEscrowExtension: If data is not a mapping
        """
        if isinstance(data, OrderDetails):
            return data
        if not isinstance(data, Mapping):
            raise MissingEscrowExtension(
                f"Order details must be a mapping, got {type(data).__name__}"
            )

        candidates = [data]
        for nested in ("details", "extension"):
            if isinstance(data.get(nested), Mapping):
                candidates.append(data[nested])

        found: Dict[str, Any] = {}
        for name, keys in DETAILS_KEYS.items():
            for candidate in candidates:
                value = next((candidate[k] for k in keys if candidate.get(k) is not None), None)
                if value is not None:
                    found[name] = value
                    break
        return cls(**found)

    def is_complete(self) -> bool:
        return (
            self.auction is not None
            and self.whitelist is not None
            and self.resolving_start_time is not None
        )

    def is_empty(self) -> bool:
        return (
            self.auction is None
            and self.whitelist is None
            and self.resolving_start_time is None
        )


@dataclass(frozen=True)
class Order:
    """Hash-locked cross-chain swap order.

    Time-lock offsets (and the deployment timestamp) must fit in 32 bits and
    the auction end time in 40 bits, since both are packed into the signed
    payload. At least one of auction, whitelist and resolving start time
    must be present; the others are defaulted on serialization.
    """

    escrow_factory: str
    """Factory contract deploying the escrows for this order."""

    salt: int
    maker: str
    making_amount: int
    taking_amount: int
    maker_asset: str
    taker_asset: str
    hash_lock: HashLock
    time_locks: TimeLocks
    src_chain_id: int
    dst_chain_id: int
    src_safety_deposit: int
    dst_safety_deposit: int
    details: OrderDetails
    nonce: int
    allow_partial_fills: bool = False
    allow_multiple_fills: bool = False

    def __post_init__(self):
        for name in ("escrow_factory", "maker", "maker_asset", "taker_asset"):
            object.__setattr__(self, name, to_address(getattr(self, name), name))

        to_uint(self.salt, "salt", UINT_160_MAX)
        to_uint(self.nonce, "nonce", UINT_40_MAX)
        for name in (
            "making_amount",
            "taking_amount",
            "src_safety_deposit",
            "dst_safety_deposit",
        ):
            to_uint(getattr(self, name), name)

        for name in ("src_chain_id", "dst_chain_id"):
            if to_uint(getattr(self, name), name) == 0:
                raise InvalidOrderParams(f"Invalid {name}: must be positive")

        if not isinstance(self.hash_lock, HashLock):
            raise MissingEscrowExtension("Order hash lock is missing")
        if not isinstance(self.time_locks, TimeLocks):
            raise MissingEscrowExtension("Order time locks are missing")
        if not isinstance(self.details, OrderDetails) or self.details.is_empty():
            raise MissingEscrowExtension(
                "Order details are missing: no auction, whitelist or resolving start time"
            )

        # Packed into the signed typed data
        self.time_locks.build()
        to_uint(self.deadline, "deadline", UINT_40_MAX)

        for name in ("allow_partial_fills", "allow_multiple_fills"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidOrderParams(f"Invalid {name}: must be a bool")
        if self.allow_multiple_fills and not self.allow_partial_fills:
            raise InvalidOrderParams(
                "allow_multiple_fills requires allow_partial_fills"
            )

    @classmethod
    def new(
        cls,
        escrow_factory: str,
        order_info: OrderInfoData,
        escrow_params: EscrowParamsData,
        details: Union[OrderDetails, Mapping[str, Any], None],
        extra: Optional[ExtraData] = None,
    ) -> "Order":
        """Create an order from its parameter groups.

        Args:
            escrow_factory: Escrow factory address
            order_info: Salt (random if omitted), maker, assets and amounts
            escrow_params: Hash lock, time locks, chain ids and safety deposits
            details: Auction, whitelist and resolving start time, as an
                OrderDetails or a mapping (see OrderDetails.from_mapping)
            extra: Nonce (random if omitted) and fill flags

        Returns:
            Order

        Raises:
            MissingEscrowExtension: If details, hash lock or time locks are missing
            InvalidOrderParams: If any field is invalid
        """
        if details is None:
            raise MissingEscrowExtension("Order details are missing")
        if escrow_params is None:
            raise MissingEscrowExtension("Escrow parameters are missing")
        extra = extra or {}

        hash_lock = escrow_params.get("hash_lock")
        if hash_lock is None:
            raise MissingEscrowExtension("Order hash lock is missing")
        if isinstance(hash_lock, str):
            hash_lock = HashLock.from_string(hash_lock)

        time_locks = escrow_params.get("time_locks")
        if time_locks is None:
            raise MissingEscrowExtension("Order time locks are missing")
        if isinstance(time_locks, Mapping):
            time_locks = TimeLocks.new(**time_locks)

        salt = order_info.get("salt")
        nonce = extra.get("nonce")

        return cls(
            escrow_factory=escrow_factory,
            salt=secrets.randbelow(UINT_160_MAX + 1) if salt is None else salt,
            maker=order_info.get("maker"),
            making_amount=order_info.get("making_amount"),
            taking_amount=order_info.get("taking_amount"),
            maker_asset=order_info.get("maker_asset"),
            taker_asset=order_info.get("taker_asset"),
            hash_lock=hash_lock,
            time_locks=time_locks,
            src_chain_id=escrow_params.get("src_chain_id"),
            dst_chain_id=escrow_params.get("dst_chain_id"),
            src_safety_deposit=escrow_params.get("src_safety_deposit", 0),
            dst_safety_deposit=escrow_params.get("dst_safety_deposit", 0),
            details=OrderDetails.from_mapping(details),
            nonce=secrets.randbelow(UINT_40_MAX + 1) if nonce is None else nonce,
            allow_partial_fills=extra.get("allow_partial_fills", False),
            allow_multiple_fills=extra.get("allow_multiple_fills", False),
        )

    @property
    def auction(self) -> Optional[AuctionDetails]:
        return self.details.auction

    @property
    def whitelist(self) -> Optional[Whitelist]:
        return self.details.whitelist

    @property
    def resolving_start_time(self) -> Optional[int]:
        return self.details.resolving_start_time

    @property
    def auction_start_time(self) -> int:
        return self.auction.start_time if self.auction else 0

    @property
    def auction_end_time(self) -> int:
        return self.auction.end_time if self.auction else 0

    @property
    def deadline(self) -> int:
        return self.auction_end_time

    @property
    def maker_traits(self) -> int:
        """Packed nonce, expiration and fill flags.

        Raises:
            InvalidOrderParams: If the deadline does not fit in 40 bits
        """
        traits = (1 << POST_INTERACTION_CALL_FLAG) | (1 << HAS_EXTENSION_FLAG)
        if not self.allow_partial_fills:
            traits |= 1 << NO_PARTIAL_FILLS_FLAG
        if self.allow_multiple_fills:
            traits |= 1 << ALLOW_MULTIPLE_FILLS_FLAG
        traits |= to_uint(self.deadline, "deadline", UINT_40_MAX) << EXPIRATION_OFFSET
        traits |= self.nonce << NONCE_OFFSET
        return traits

    def is_multiple_fills(self) -> bool:
        return self.allow_multiple_fills

    def get_typed_data(self) -> Dict[str, Any]:
        """EIP-712 typed data to be signed by the maker."""
        from .signing import build_order_typed_data

        return build_order_typed_data(self)

    def get_order_hash(self) -> str:
        """EIP-712 digest of the order as a bytes32 hex string."""
        from .signing import get_order_hash

        return get_order_hash(self)
