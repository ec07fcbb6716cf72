"""Constants and small helpers shared by the escrow and order modules."""

import secrets as _secrets

from eth_utils import is_address, to_checksum_address

from ..errors import InvalidOrderParams

# Zero address
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

UINT_16_MAX = (1 << 16) - 1
UINT_32_MAX = (1 << 32) - 1
UINT_40_MAX = (1 << 40) - 1
UINT_160_MAX = (1 << 160) - 1
UINT_240_MAX = (1 << 240) - 1
UINT_256_MAX = (1 << 256) - 1

# Emitted in place of secret material that was not supplied
PLACEHOLDER_SECRET = "placeholder"


def rand_bigint(max_value: int) -> int:
    """Return a uniformly random integer in ``[0, max_value]``."""
    return _secrets.randbelow(max_value + 1)


def generate_secret() -> str:
    """Generate a fresh 32-byte secret as a ``0x`` hex string."""
    return "0x" + _secrets.token_bytes(32).hex()


def to_uint(value, name: str, max_value: int = UINT_256_MAX) -> int:
    """Validate an unsigned integer field.

    Raises:
        InvalidOrderParams: If value is not an int or is out of range
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOrderParams(f"Invalid {name}: {value!r}. Must be an integer")
    if value < 0 or value > max_value:
        raise InvalidOrderParams(
            f"Invalid {name}: {value}. Must be between 0 and {max_value}"
        )
    return value


def to_address(value, name: str) -> str:
    """Validate an address field and return it checksummed.

    Raises:
        InvalidOrderParams: If value is not a valid address
    """
    if not isinstance(value, str) or not is_address(value):
        raise InvalidOrderParams(f"Invalid {name}: {value!r}")
    return to_checksum_address(value)
