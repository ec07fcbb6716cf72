"""Order serialization for storage and transport.

An Order only exposes its hash lock commitment, never the secrets it was
built from, so the serialized form carries the original secret material
next to the public order fields:

- ``hashLock.data`` holds the raw secret (single fill) or raw secrets
  (multiple fills), or the placeholder when none was supplied
- ``originalParams`` duplicates the raw secret material for reconstruction

Only a record written with its secret material can be restored to an
equivalent order.
"""

import json
from typing import Any, Dict, List, Optional, Sequence

from marshmallow import ValidationError

from ..errors import (
    InvalidOrderParams,
    InvalidSecret,
    MalformedTransportData,
    ReconstructionAmbiguous,
)
from ..escrow.hash_lock import HashLock
from ..escrow.utils import PLACEHOLDER_SECRET, to_address
from ..logger import get_logger
from ..order.auction import AuctionDetails
from ..order.order import Order, OrderDetails
from ..order.whitelist import Whitelist
from .fields import is_placeholder
from .schemas import (
    AuctionSchema,
    SerializedOrderSchema,
    TimeLocksSchema,
    WhitelistItemSchema,
)

logger = get_logger(__name__)


def resolve_details(order: Order) -> OrderDetails:
    """Order details with defaults substituted for missing parts.

    Every substitution is logged as a warning, since a defaulted auction
    changes the swap economics of a reconstructed order.
    """
    auction = order.auction
    if auction is None:
        logger.warning("Auction not found in order details, using zero-duration auction")
        auction = AuctionDetails.default()

    whitelist = order.whitelist
    if whitelist is None:
        logger.warning("Whitelist not found in order details, using empty whitelist")
        whitelist = Whitelist()

    resolving_start_time = order.resolving_start_time
    if resolving_start_time is None:
        logger.warning("Resolving start time not found in order details, using 0")
        resolving_start_time = 0

    return OrderDetails(
        auction=auction,
        whitelist=whitelist,
        resolving_start_time=resolving_start_time,
    )


def _check_override(name: str, given, actual):
    if given is not None and given != actual:
        raise InvalidOrderParams(
            f"{name} {given!r} does not match the order's {name} {actual!r}"
        )


def _hash_lock_data(
    order: Order,
    original_secret: Optional[str],
    original_secrets: Optional[Sequence[str]],
) -> Dict[str, Any]:
    if order.allow_multiple_fills and original_secrets:
        leaves = HashLock.get_merkle_leaves(list(original_secrets))
        if HashLock.for_multiple_fills(leaves) != order.hash_lock:
            raise InvalidSecret("Secrets do not match the order hash lock")
        return {"type": "multiple", "data": list(original_secrets)}

    if original_secret:
        if order.allow_multiple_fills or not order.hash_lock.verify_single_fill(
            original_secret
        ):
            raise InvalidSecret("Secret does not match the order hash lock")
        return {"type": "single", "data": original_secret}

    if original_secrets:
        raise InvalidSecret("Secrets list supplied for a single-fill order")

    logger.warning("No original secret material supplied, emitting placeholder hash lock data")
    if order.allow_multiple_fills:
        return {"type": "multiple", "data": [PLACEHOLDER_SECRET]}
    return {"type": "single", "data": PLACEHOLDER_SECRET}


def serialize_order(
    order: Order,
    original_secret: Optional[str] = None,
    original_secrets: Optional[Sequence[str]] = None,
    escrow_factory: Optional[str] = None,
    src_chain_id: Optional[int] = None,
    dst_chain_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Serialize an order to a JSON-compatible dict.

    Args:
        order: Order to serialize
        original_secret: Secret the order was built from (single fill)
        original_secrets: Secrets the order was built from (multiple fills)
        escrow_factory: Optional check against the order's escrow factory
        src_chain_id: Optional check against the order's source chain id
        dst_chain_id: Optional check against the order's destination chain id

    Returns:
        Serialized order with integers encoded as decimal strings

    Raises:
        InvalidSecret: If the secret material does not match the hash lock
        InvalidOrderParams: If an override contradicts the order
    """
    if escrow_factory is not None:
        escrow_factory = to_address(escrow_factory, "escrow_factory")
    _check_override("escrow_factory", escrow_factory, order.escrow_factory)
    _check_override("src_chain_id", src_chain_id, order.src_chain_id)
    _check_override("dst_chain_id", dst_chain_id, order.dst_chain_id)

    hash_lock = _hash_lock_data(order, original_secret, original_secrets)
    details = resolve_details(order)

    record = {
        "salt": order.salt,
        "maker": order.maker,
        "making_amount": order.making_amount,
        "taking_amount": order.taking_amount,
        "maker_asset": order.maker_asset,
        "taker_asset": order.taker_asset,
        "hash_lock": hash_lock,
        "time_locks": order.time_locks,
        "src_chain_id": order.src_chain_id,
        "dst_chain_id": order.dst_chain_id,
        "src_safety_deposit": order.src_safety_deposit,
        "dst_safety_deposit": order.dst_safety_deposit,
        "auction": details.auction,
        "whitelist": details.whitelist,
        "resolving_start_time": details.resolving_start_time,
        "nonce": order.nonce,
        "allow_partial_fills": order.allow_partial_fills,
        "allow_multiple_fills": order.allow_multiple_fills,
        "escrow_factory": order.escrow_factory,
        "original_params": {
            "secret": original_secret,
            "secrets": list(original_secrets) if original_secrets else None,
            "allow_multiple_fills": order.allow_multiple_fills,
        },
    }
    return SerializedOrderSchema().dump(record)


def _check_fill_flags(data: Dict[str, Any]):
    allow_multiple_fills = data["allow_multiple_fills"]
    if data["original_params"]["allow_multiple_fills"] != allow_multiple_fills:
        raise MalformedTransportData(
            "originalParams.allowMultipleFills does not match allowMultipleFills"
        )

    expected_type = "multiple" if allow_multiple_fills else "single"
    if data["hash_lock"]["type"] != expected_type:
        raise MalformedTransportData(
            f"hashLock.type {data['hash_lock']['type']!r} does not match "
            f"allowMultipleFills {allow_multiple_fills}"
        )


def _rebuild_hash_lock(data: Dict[str, Any], allow_best_effort: bool) -> HashLock:
    original = data["original_params"]
    secrets: Optional[List[str]] = original.get("secrets")
    secret: Optional[str] = original.get("secret")
    stored = data["hash_lock"]

    if original["allow_multiple_fills"] and secrets:
        if not is_placeholder(stored["data"]) and stored["data"] != secrets:
            raise MalformedTransportData("hashLock.data does not match originalParams.secrets")
        return HashLock.for_multiple_fills(HashLock.get_merkle_leaves(secrets))

    if secret:
        if not is_placeholder(stored["data"]) and stored["data"] != secret:
            raise MalformedTransportData("hashLock.data does not match originalParams.secret")
        return HashLock.for_single_fill(secret)

    if not allow_best_effort:
        raise ReconstructionAmbiguous(
            "No original secret material in serialized order; "
            "pass allow_best_effort=True to rebuild from hashLock.data"
        )

    logger.warning(
        "Rebuilding %s hash lock from hashLock.data; the order may not match the original",
        stored["type"],
    )
    if stored["type"] == "single":
        return HashLock.for_single_fill(stored["data"])
    return HashLock.for_multiple_fills(HashLock.get_merkle_leaves(stored["data"]))


def deserialize_order(data: Dict[str, Any], allow_best_effort: bool = False) -> Order:
    """Rebuild an order from its serialized form.

    The hash lock is rebuilt from, in order of priority: the original
    secrets (multiple fills), the original secret (single fill), and only
    with ``allow_best_effort`` the ``hashLock.data`` field.

    Args:
        data: Output of serialize_order
        allow_best_effort: Rebuild from hashLock.data when no original
            secret material is present

    Returns:
        Order

    Raises:
        MalformedTransportData: If data is not a valid serialized order or
            its fill flags and hash lock type disagree
        ReconstructionAmbiguous: If there is no original secret material
    """
    if not isinstance(data, dict):
        raise MalformedTransportData(
            f"Serialized order must be an object, got {type(data).__name__}"
        )
    try:
        loaded = SerializedOrderSchema().load(data)
    except ValidationError as e:
        raise MalformedTransportData(f"Invalid serialized order: {e.messages}", e.messages)

    _check_fill_flags(loaded)
    hash_lock = _rebuild_hash_lock(loaded, allow_best_effort)

    return Order.new(
        loaded["escrow_factory"],
        {
            "salt": loaded["salt"],
            "maker": loaded["maker"],
            "making_amount": loaded["making_amount"],
            "taking_amount": loaded["taking_amount"],
            "maker_asset": loaded["maker_asset"],
            "taker_asset": loaded["taker_asset"],
        },
        {
            "hash_lock": hash_lock,
            "time_locks": loaded["time_locks"],
            "src_chain_id": loaded["src_chain_id"],
            "dst_chain_id": loaded["dst_chain_id"],
            "src_safety_deposit": loaded["src_safety_deposit"],
            "dst_safety_deposit": loaded["dst_safety_deposit"],
        },
        OrderDetails(
            auction=loaded["auction"],
            whitelist=Whitelist.of(loaded["whitelist"]),
            resolving_start_time=loaded["resolving_start_time"],
        ),
        {
            "nonce": loaded["nonce"],
            "allow_partial_fills": loaded["allow_partial_fills"],
            "allow_multiple_fills": loaded["allow_multiple_fills"],
        },
    )


def order_to_json(
    order: Order,
    original_secret: Optional[str] = None,
    original_secrets: Optional[Sequence[str]] = None,
    escrow_factory: Optional[str] = None,
    src_chain_id: Optional[int] = None,
    dst_chain_id: Optional[int] = None,
) -> str:
    """Serialize an order to a JSON string (see serialize_order)."""
    return json.dumps(
        serialize_order(
            order,
            original_secret,
            original_secrets,
            escrow_factory,
            src_chain_id,
            dst_chain_id,
        )
    )


def order_from_json(text: str, allow_best_effort: bool = False) -> Order:
    """Rebuild an order from a JSON string (see deserialize_order)."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedTransportData(f"Could not decode serialized order: {e}")
    return deserialize_order(data, allow_best_effort=allow_best_effort)


def export_order_view(order: Order) -> Dict[str, Any]:
    """Inspection view of an order, grouped like the on-chain structures.

    Carries the public hash lock commitment but no secret material, so it
    cannot be turned back into an order.
    """
    details = resolve_details(order)
    return {
        "orderData": {
            "salt": str(order.salt),
            "maker": order.maker,
            "makingAmount": str(order.making_amount),
            "takingAmount": str(order.taking_amount),
            "makerAsset": order.maker_asset,
            "takerAsset": order.taker_asset,
            "deadline": str(order.deadline),
            "auctionStartTime": str(order.auction_start_time),
            "auctionEndTime": str(order.auction_end_time),
            "nonce": str(order.nonce),
            "partialFillAllowed": order.allow_partial_fills,
            "multipleFillsAllowed": order.allow_multiple_fills,
        },
        "extension": {
            "auction": AuctionSchema().dump(details.auction),
            "whitelist": WhitelistItemSchema(many=True).dump(list(details.whitelist)),
            "resolvingStartTime": str(details.resolving_start_time),
        },
        "escrowParams": {
            "hashLock": {
                "type": "multiple" if order.allow_multiple_fills else "single",
                "value": order.hash_lock.value,
            },
            "timeLocks": TimeLocksSchema().dump(order.time_locks),
            "srcChainId": order.src_chain_id,
            "dstChainId": order.dst_chain_id,
            "srcSafetyDeposit": str(order.src_safety_deposit),
            "dstSafetyDeposit": str(order.dst_safety_deposit),
        },
        "escrowFactory": order.escrow_factory,
    }
