"""Tests for escrow time locks."""

import logging

import pytest

from crosschain_swap_sdk import DstStage, InvalidOrderParams, SrcStage, TimeLocks

from conftest import default_time_locks


class TestTimeLocksPacking:
    """Tests for the packed uint256 layout."""

    def test_build_layout(self):
        """Test that each offset occupies its own 32-bit slot."""
        packed = default_time_locks().build()
        assert packed & 0xFFFFFFFF == 10
        assert (packed >> 32) & 0xFFFFFFFF == 120
        assert (packed >> 64) & 0xFFFFFFFF == 121
        assert (packed >> 96) & 0xFFFFFFFF == 122
        assert (packed >> 128) & 0xFFFFFFFF == 10
        assert (packed >> 160) & 0xFFFFFFFF == 100
        assert (packed >> 192) & 0xFFFFFFFF == 101
        assert packed >> 224 == 0

    def test_deployed_at_slot(self):
        """Test that the deployment timestamp lands in the top slot."""
        packed = default_time_locks().with_deployed_at(1700000000).build()
        assert packed >> 224 == 1700000000

    def test_from_bigint(self):
        """Test unpacking restores the schedule."""
        time_locks = default_time_locks().with_deployed_at(5)
        assert TimeLocks.from_bigint(time_locks.build()) == time_locks

    def test_offset_too_large(self):
        """Test that offsets must fit in 32 bits to be packed."""
        time_locks = TimeLocks.new(1, 2, 3, 2**32, 1, 2, 3)
        with pytest.raises(InvalidOrderParams):
            time_locks.build()

    @pytest.mark.parametrize("value", [-1, 1.5, "10", True])
    def test_invalid_offset(self, value):
        """Test that offsets must be unsigned integers."""
        with pytest.raises(InvalidOrderParams):
            TimeLocks.new(value, 2, 3, 4, 1, 2, 3)


class TestTimeLocksSchedule:
    """Tests for monotonicity and stage lookup."""

    def test_monotonic(self):
        """Test default schedule ordering."""
        assert default_time_locks().is_monotonic()

    def test_non_monotonic_logs_warning(self, caplog):
        """Test that an out-of-order schedule is accepted with a warning."""
        with caplog.at_level(logging.WARNING):
            time_locks = TimeLocks.new(10, 5, 121, 122, 10, 100, 101)

        assert not time_locks.is_monotonic()
        assert "Time locks are not strictly increasing" in caplog.text

    @pytest.mark.parametrize(
        "now,stage",
        [
            (1000, SrcStage.FINALITY_LOCK),
            (1009, SrcStage.FINALITY_LOCK),
            (1010, SrcStage.PRIVATE_WITHDRAWAL),
            (1119, SrcStage.PRIVATE_WITHDRAWAL),
            (1120, SrcStage.PUBLIC_WITHDRAWAL),
            (1121, SrcStage.PRIVATE_CANCELLATION),
            (1122, SrcStage.PUBLIC_CANCELLATION),
            (5000, SrcStage.PUBLIC_CANCELLATION),
        ],
    )
    def test_src_stage(self, now, stage):
        """Test source stages relative to deployment."""
        time_locks = default_time_locks().with_deployed_at(1000)
        assert time_locks.src_stage(now) == stage

    @pytest.mark.parametrize(
        "now,stage",
        [
            (1005, DstStage.FINALITY_LOCK),
            (1010, DstStage.PRIVATE_WITHDRAWAL),
            (1100, DstStage.PUBLIC_WITHDRAWAL),
            (1101, DstStage.PRIVATE_CANCELLATION),
        ],
    )
    def test_dst_stage(self, now, stage):
        """Test destination stages relative to deployment."""
        time_locks = default_time_locks().with_deployed_at(1000)
        assert time_locks.dst_stage(now) == stage

    def test_stage_requires_deployment(self):
        """Test that stages cannot be computed before deployment."""
        with pytest.raises(ValueError, match="deployment timestamp"):
            default_time_locks().src_stage(1000)
