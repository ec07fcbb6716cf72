"""Dutch auction parameters for order pricing.

The rate bump starts at ``initial_rate_bump`` when the auction starts and
decays through the points, each reached ``delay`` seconds after the previous
one, down to zero at ``start_time + duration``.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple

from ..escrow.utils import to_uint

RATE_BUMP_DENOMINATOR = 10_000_000


@dataclass(frozen=True)
class AuctionPoint:
    """Decay checkpoint of the auction curve."""

    coefficient: int
    """Rate bump at this point."""

    delay: int
    """Seconds since the previous point (or the auction start)."""

    def __post_init__(self):
        to_uint(self.coefficient, "auction point coefficient")
        to_uint(self.delay, "auction point delay")


@dataclass(frozen=True)
class AuctionDetails:
    """Dutch auction decay parameters."""

    initial_rate_bump: int
    points: Tuple[AuctionPoint, ...] = field(default_factory=tuple)
    duration: int = 0
    start_time: int = 0

    def __post_init__(self):
        to_uint(self.initial_rate_bump, "initial rate bump")
        to_uint(self.duration, "auction duration")
        to_uint(self.start_time, "auction start time")
        object.__setattr__(
            self, "points", tuple(_to_point(point) for point in self.points)
        )

    @classmethod
    def default(cls) -> "AuctionDetails":
        """Zero-duration auction with no rate bump."""
        return cls(initial_rate_bump=0, points=(), duration=0, start_time=0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AuctionDetails":
        return cls(
            initial_rate_bump=data.get("initialRateBump", data.get("initial_rate_bump", 0)),
            points=tuple(data.get("points") or ()),
            duration=data.get("duration", 0),
            start_time=data.get("startTime", data.get("start_time", 0)),
        )

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration

    def rate_bump_at(self, time: int) -> int:
        """Rate bump at ``time``, interpolated linearly between points."""
        if time <= self.start_time:
            return self.initial_rate_bump
        if time >= self.end_time:
            return 0

        point_time = self.start_time
        rate_bump = self.initial_rate_bump
        for point in self.points:
            next_time = point_time + point.delay
            if time <= next_time:
                return (
                    (time - point_time) * point.coefficient
                    + (next_time - time) * rate_bump
                ) // (next_time - point_time)
            point_time = next_time
            rate_bump = point.coefficient

        return (self.end_time - time) * rate_bump // (self.end_time - point_time)

    def taking_amount_at(self, taking_amount: int, time: int) -> int:
        """Taking amount with the auction bump at ``time`` applied."""
        bump = self.rate_bump_at(time)
        return taking_amount * (RATE_BUMP_DENOMINATOR + bump) // RATE_BUMP_DENOMINATOR


def _to_point(point) -> AuctionPoint:
    if isinstance(point, AuctionPoint):
        return point
    if isinstance(point, Mapping):
        return AuctionPoint(coefficient=point["coefficient"], delay=point["delay"])
    coefficient, delay = point
    return AuctionPoint(coefficient=coefficient, delay=delay)
