"""Resolver whitelist.

Entries keep insertion order and are neither sorted nor deduplicated; when an
address appears more than once the first entry wins.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from ..escrow.utils import to_address, to_uint


@dataclass(frozen=True)
class WhitelistItem:
    """Resolver allowed to fill the order."""

    address: str
    """Resolver address (checksummed)."""

    allow_from: int
    """Earliest timestamp the resolver may fill at."""

    def __post_init__(self):
        object.__setattr__(self, "address", to_address(self.address, "resolver address"))
        to_uint(self.allow_from, "allow from")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WhitelistItem":
        return cls(
            address=data["address"],
            allow_from=data.get("allowFrom", data.get("allow_from", 0)),
        )


@dataclass(frozen=True)
class Whitelist:
    items: Tuple[WhitelistItem, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(_to_item(item) for item in self.items))

    def __iter__(self) -> Iterator[WhitelistItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> WhitelistItem:
        return self.items[index]

    @classmethod
    def of(cls, items: Iterable) -> "Whitelist":
        return cls(tuple(items))

    def find(self, address: str) -> Optional[WhitelistItem]:
        """First entry for ``address``, or None."""
        for item in self.items:
            if item.address.lower() == address.lower():
                return item
        return None

    def is_allowed(self, address: str, time: int) -> bool:
        item = self.find(address)
        return item is not None and time >= item.allow_from


def _to_item(item) -> WhitelistItem:
    if isinstance(item, WhitelistItem):
        return item
    return WhitelistItem.from_dict(item)
