"""Transport serialization of orders together with their secret material."""

from .schemas import SerializedOrderSchema
from .serializer import (
    deserialize_order,
    export_order_view,
    order_from_json,
    order_to_json,
    resolve_details,
    serialize_order,
)

__all__ = [
    "SerializedOrderSchema",
    "serialize_order",
    "deserialize_order",
    "order_to_json",
    "order_from_json",
    "export_order_view",
    "resolve_details",
]
