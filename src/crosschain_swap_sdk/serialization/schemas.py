from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    post_dump,
    post_load,
    validate,
    validates_schema,
)

from ..escrow.time_locks import TimeLocks
from ..order.auction import AuctionDetails, AuctionPoint
from ..order.whitelist import WhitelistItem
from .fields import Address, BigInteger, SecretData

HASH_LOCK_TYPES = ("single", "multiple")


class BaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class HashLockSchema(BaseSchema):
    type = fields.String(required=True, validate=validate.OneOf(HASH_LOCK_TYPES))
    data = SecretData(required=True)

    @validates_schema
    def validate_data_shape(self, data, **kwargs):
        if data["type"] == "single" and not isinstance(data["data"], str):
            raise ValidationError("single hash lock expects one secret", "data")
        if data["type"] == "multiple" and not isinstance(data["data"], list):
            raise ValidationError("multiple hash lock expects a list of secrets", "data")


class TimeLocksSchema(BaseSchema):
    srcWithdrawal = BigInteger(attribute="src_withdrawal", required=True)
    srcPublicWithdrawal = BigInteger(attribute="src_public_withdrawal", required=True)
    srcCancellation = BigInteger(attribute="src_cancellation", required=True)
    srcPublicCancellation = BigInteger(attribute="src_public_cancellation", required=True)
    dstWithdrawal = BigInteger(attribute="dst_withdrawal", required=True)
    dstPublicWithdrawal = BigInteger(attribute="dst_public_withdrawal", required=True)
    dstCancellation = BigInteger(attribute="dst_cancellation", required=True)
    deployedAt = BigInteger(attribute="deployed_at", load_default=0)

    @post_load
    def make_time_locks(self, data, **kwargs):
        deployed_at = data.pop("deployed_at", 0)
        return TimeLocks.new(**data).with_deployed_at(deployed_at)


class AuctionPointSchema(BaseSchema):
    coefficient = fields.Integer(required=True, strict=True, validate=validate.Range(min=0))
    delay = fields.Integer(required=True, strict=True, validate=validate.Range(min=0))

    @post_load
    def make_point(self, data, **kwargs):
        return AuctionPoint(**data)


class AuctionSchema(BaseSchema):
    initialRateBump = fields.Integer(
        attribute="initial_rate_bump",
        required=True,
        strict=True,
        validate=validate.Range(min=0),
    )
    points = fields.List(fields.Nested(AuctionPointSchema), required=True)
    duration = BigInteger(required=True)
    startTime = BigInteger(attribute="start_time", required=True)

    @post_load
    def make_auction(self, data, **kwargs):
        return AuctionDetails(**data)


class WhitelistItemSchema(BaseSchema):
    address = Address(required=True)
    allowFrom = BigInteger(attribute="allow_from", required=True)

    @post_load
    def make_item(self, data, **kwargs):
        return WhitelistItem(**data)


class OriginalParamsSchema(BaseSchema):
    secret = fields.String(allow_none=True)
    secrets = fields.List(fields.String(), allow_none=True)
    allowMultipleFills = fields.Boolean(attribute="allow_multiple_fills", required=True)

    @post_dump
    def remove_absent_secrets(self, data, **kwargs):
        return {key: value for key, value in data.items() if value is not None}


class SerializedOrderSchema(BaseSchema):
    """Transport representation of an order plus its original secrets."""

    salt = BigInteger(required=True)
    maker = Address(required=True)
    makingAmount = BigInteger(attribute="making_amount", required=True)
    takingAmount = BigInteger(attribute="taking_amount", required=True)
    makerAsset = Address(attribute="maker_asset", required=True)
    takerAsset = Address(attribute="taker_asset", required=True)

    hashLock = fields.Nested(HashLockSchema, attribute="hash_lock", required=True)
    timeLocks = fields.Nested(TimeLocksSchema, attribute="time_locks", required=True)
    srcChainId = fields.Integer(
        attribute="src_chain_id", required=True, strict=True, validate=validate.Range(min=1)
    )
    dstChainId = fields.Integer(
        attribute="dst_chain_id", required=True, strict=True, validate=validate.Range(min=1)
    )
    srcSafetyDeposit = BigInteger(attribute="src_safety_deposit", required=True)
    dstSafetyDeposit = BigInteger(attribute="dst_safety_deposit", required=True)

    auction = fields.Nested(AuctionSchema, required=True)
    whitelist = fields.List(fields.Nested(WhitelistItemSchema), required=True)
    resolvingStartTime = BigInteger(attribute="resolving_start_time", required=True)

    nonce = BigInteger(required=True)
    allowPartialFills = fields.Boolean(attribute="allow_partial_fills", required=True)
    allowMultipleFills = fields.Boolean(attribute="allow_multiple_fills", required=True)

    escrowFactory = Address(attribute="escrow_factory", required=True)

    originalParams = fields.Nested(
        OriginalParamsSchema, attribute="original_params", required=True
    )
