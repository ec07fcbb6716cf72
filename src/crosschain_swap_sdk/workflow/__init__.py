"""Order construction workflow."""

from .builder import (
    DEFAULT_SAFETY_DEPOSIT,
    DEFAULT_TIME_LOCKS,
    CreatedOrder,
    OrderBuilder,
    OrderBuilderConfig,
    ResolvedOrderBuilderConfig,
    SerializationData,
    create_order_with_serialization,
)

__all__ = [
    "OrderBuilder",
    "OrderBuilderConfig",
    "ResolvedOrderBuilderConfig",
    "CreatedOrder",
    "SerializationData",
    "create_order_with_serialization",
    "DEFAULT_SAFETY_DEPOSIT",
    "DEFAULT_TIME_LOCKS",
]
