import re

from eth_utils import is_address, to_checksum_address
from marshmallow import ValidationError, fields

from ..escrow.utils import PLACEHOLDER_SECRET, UINT_256_MAX

DECIMAL_PATTERN = re.compile("[0-9]+")


class Address(fields.String):
    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return super()._serialize(to_checksum_address(value), attr, obj, **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        value = super()._deserialize(value, attr, data, **kwargs)

        if not is_address(value):
            raise ValidationError("Invalid Address")

        return to_checksum_address(value)


class BigInteger(fields.String):
    """Unsigned integer transported as a decimal string."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        assert isinstance(value, int)
        value = str(value)
        return super()._serialize(value, attr, obj, **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        value = super()._deserialize(value, attr, data, **kwargs)

        if not DECIMAL_PATTERN.fullmatch(value):
            raise ValidationError("Could not parse Integer")

        int_value = int(value)
        if int_value > UINT_256_MAX:
            raise ValidationError("Integer out of uint256 range")

        return int_value


class SecretData(fields.Field):
    """Raw secret (single fill) or list of raw secrets (multiple fills)."""

    def _serialize(self, value, attr, obj, **kwargs):
        if isinstance(value, (list, tuple)):
            return list(value)
        return value

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str) and value:
            return value
        if (
            isinstance(value, list)
            and value
            and all(isinstance(item, str) and item for item in value)
        ):
            return value
        raise ValidationError(
            f"Expected a secret string or a non-empty list of secret strings, got {value!r}"
        )


def is_placeholder(value) -> bool:
    if isinstance(value, list):
        return value == [PLACEHOLDER_SECRET]
    return value == PLACEHOLDER_SECRET
