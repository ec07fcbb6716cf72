"""Staged escrow deadlines.

Each offset is a duration in seconds counted from escrow deployment. By
convention the stages increase monotonically:

    src: withdrawal < public withdrawal < cancellation < public cancellation
    dst: withdrawal < public withdrawal < cancellation

Packed layout (uint256, 32 bits per field, lowest bits first):
srcWithdrawal, srcPublicWithdrawal, srcCancellation, srcPublicCancellation,
dstWithdrawal, dstPublicWithdrawal, dstCancellation, deployedAt.
"""

from dataclasses import dataclass, replace
from enum import Enum

from ..logger import get_logger
from .utils import UINT_32_MAX, UINT_256_MAX, to_uint

logger = get_logger(__name__)

FIELDS = (
    "src_withdrawal",
    "src_public_withdrawal",
    "src_cancellation",
    "src_public_cancellation",
    "dst_withdrawal",
    "dst_public_withdrawal",
    "dst_cancellation",
)


class SrcStage(Enum):
    FINALITY_LOCK = "finality_lock"
    PRIVATE_WITHDRAWAL = "private_withdrawal"
    PUBLIC_WITHDRAWAL = "public_withdrawal"
    PRIVATE_CANCELLATION = "private_cancellation"
    PUBLIC_CANCELLATION = "public_cancellation"


class DstStage(Enum):
    FINALITY_LOCK = "finality_lock"
    PRIVATE_WITHDRAWAL = "private_withdrawal"
    PUBLIC_WITHDRAWAL = "public_withdrawal"
    PRIVATE_CANCELLATION = "private_cancellation"


@dataclass(frozen=True)
class TimeLocks:
    """Escrow time-lock offsets, in seconds from deployment."""

    src_withdrawal: int
    """Resolver may withdraw on the source chain."""

    src_public_withdrawal: int
    """Anyone may withdraw on the source chain."""

    src_cancellation: int
    """Resolver may cancel on the source chain."""

    src_public_cancellation: int
    """Anyone may cancel on the source chain."""

    dst_withdrawal: int
    """Resolver may withdraw on the destination chain."""

    dst_public_withdrawal: int
    """Anyone may withdraw on the destination chain."""

    dst_cancellation: int
    """Resolver may cancel on the destination chain."""

    deployed_at: int = 0
    """Escrow deployment timestamp, zero until deployed."""

    def __post_init__(self):
        for name in FIELDS + ("deployed_at",):
            to_uint(getattr(self, name), name)

    @classmethod
    def new(
        cls,
        src_withdrawal: int,
        src_public_withdrawal: int,
        src_cancellation: int,
        src_public_cancellation: int,
        dst_withdrawal: int,
        dst_public_withdrawal: int,
        dst_cancellation: int,
    ) -> "TimeLocks":
        """Create a time-lock schedule.

        Any unsigned offsets are accepted; a schedule that is not strictly
        increasing per chain is logged as a warning since it cannot be
        executed as intended by the escrow contracts.

        Raises:
            InvalidOrderParams: If an offset is negative or not an integer
        """
        time_locks = cls(
            src_withdrawal=src_withdrawal,
            src_public_withdrawal=src_public_withdrawal,
            src_cancellation=src_cancellation,
            src_public_cancellation=src_public_cancellation,
            dst_withdrawal=dst_withdrawal,
            dst_public_withdrawal=dst_public_withdrawal,
            dst_cancellation=dst_cancellation,
        )
        if not time_locks.is_monotonic():
            logger.warning("Time locks are not strictly increasing: %s", time_locks)
        return time_locks

    @classmethod
    def from_bigint(cls, value: int) -> "TimeLocks":
        to_uint(value, "time locks")
        parts = [(value >> (32 * i)) & UINT_32_MAX for i in range(8)]
        return cls(*parts)

    def build(self) -> int:
        """Pack the schedule into a uint256.

        Raises:
            InvalidOrderParams: If any offset does not fit in 32 bits
        """
        value = 0
        for i, name in enumerate(FIELDS + ("deployed_at",)):
            value |= to_uint(getattr(self, name), name, UINT_32_MAX) << (32 * i)
        return value & UINT_256_MAX

    def with_deployed_at(self, deployed_at: int) -> "TimeLocks":
        return replace(self, deployed_at=deployed_at)

    def is_monotonic(self) -> bool:
        src = [
            self.src_withdrawal,
            self.src_public_withdrawal,
            self.src_cancellation,
            self.src_public_cancellation,
        ]
        dst = [self.dst_withdrawal, self.dst_public_withdrawal, self.dst_cancellation]
        return all(a < b for a, b in zip(src, src[1:])) and all(
            a < b for a, b in zip(dst, dst[1:])
        )

    def src_stage(self, now: int) -> SrcStage:
        """Source escrow stage at timestamp ``now``.

        Raises:
            ValueError: If the deployment timestamp has not been set
        """
        self._require_deployed()
        elapsed = now - self.deployed_at
        if elapsed < self.src_withdrawal:
            return SrcStage.FINALITY_LOCK
        if elapsed < self.src_public_withdrawal:
            return SrcStage.PRIVATE_WITHDRAWAL
        if elapsed < self.src_cancellation:
            return SrcStage.PUBLIC_WITHDRAWAL
        if elapsed < self.src_public_cancellation:
            return SrcStage.PRIVATE_CANCELLATION
        return SrcStage.PUBLIC_CANCELLATION

    def dst_stage(self, now: int) -> DstStage:
        """Destination escrow stage at timestamp ``now``."""
        self._require_deployed()
        elapsed = now - self.deployed_at
        if elapsed < self.dst_withdrawal:
            return DstStage.FINALITY_LOCK
        if elapsed < self.dst_public_withdrawal:
            return DstStage.PRIVATE_WITHDRAWAL
        if elapsed < self.dst_cancellation:
            return DstStage.PUBLIC_WITHDRAWAL
        return DstStage.PRIVATE_CANCELLATION

    def _require_deployed(self):
        if not self.deployed_at:
            raise ValueError("Escrow deployment timestamp is not set")
