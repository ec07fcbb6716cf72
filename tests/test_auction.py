"""Tests for auction decay and the resolver whitelist."""

import pytest

from crosschain_swap_sdk import (
    AuctionDetails,
    AuctionPoint,
    InvalidOrderParams,
    Whitelist,
    WhitelistItem,
)

from conftest import RESOLVER


@pytest.fixture()
def auction():
    return AuctionDetails(
        initial_rate_bump=1000,
        points=(AuctionPoint(coefficient=500, delay=10),),
        duration=100,
        start_time=1000,
    )


class TestAuctionDetails:
    """Tests for AuctionDetails."""

    @pytest.mark.parametrize(
        "time,bump",
        [
            (900, 1000),
            (1000, 1000),
            (1005, 750),
            (1010, 500),
            (1055, 250),
            (1100, 0),
            (2000, 0),
        ],
    )
    def test_rate_bump_at(self, auction, time, bump):
        """Test piecewise linear decay through the points."""
        assert auction.rate_bump_at(time) == bump

    def test_taking_amount_at(self, auction):
        """Test that the bump is applied over the rate denominator."""
        assert auction.taking_amount_at(10_000_000, 1000) == 10_001_000
        assert auction.taking_amount_at(10_000_000, 1100) == 10_000_000

    def test_end_time(self, auction):
        """Test end time."""
        assert auction.end_time == 1100

    def test_no_points(self):
        """Test decay straight from the initial bump to zero."""
        auction = AuctionDetails(initial_rate_bump=100, duration=100, start_time=0)
        assert auction.rate_bump_at(50) == 50

    def test_default(self):
        """Test the zero-duration default auction."""
        auction = AuctionDetails.default()
        assert auction.initial_rate_bump == 0
        assert auction.points == ()
        assert auction.duration == 0
        assert auction.start_time == 0
        assert auction.rate_bump_at(0) == 0

    def test_from_dict(self):
        """Test parsing camelCase transport keys."""
        auction = AuctionDetails.from_dict(
            {
                "initialRateBump": 1000,
                "points": [{"coefficient": 500, "delay": 10}],
                "duration": 100,
                "startTime": 1000,
            }
        )
        assert auction.points == (AuctionPoint(coefficient=500, delay=10),)
        assert auction.start_time == 1000

    def test_points_from_pairs(self):
        """Test that points can be given as pairs."""
        auction = AuctionDetails(initial_rate_bump=1, points=[(5, 6)])
        assert auction.points == (AuctionPoint(coefficient=5, delay=6),)

    def test_negative_bump(self):
        """Test that negative values are rejected."""
        with pytest.raises(InvalidOrderParams):
            AuctionDetails(initial_rate_bump=-1)


class TestWhitelist:
    """Tests for Whitelist."""

    def test_checksums_addresses(self):
        """Test that entries are stored checksummed."""
        item = WhitelistItem(address=RESOLVER.lower(), allow_from=0)
        assert item.address == RESOLVER

    def test_keeps_order_and_duplicates(self):
        """Test that entries are neither sorted nor deduplicated."""
        other = "0x" + "55" * 20
        whitelist = Whitelist.of(
            [
                {"address": other, "allowFrom": 5},
                WhitelistItem(address=RESOLVER, allow_from=10),
                WhitelistItem(address=RESOLVER, allow_from=20),
            ]
        )
        assert len(whitelist) == 3
        assert whitelist[0].allow_from == 5
        assert [item.allow_from for item in whitelist] == [5, 10, 20]

    def test_first_match_wins(self):
        """Test lookup when an address appears twice."""
        whitelist = Whitelist.of(
            [
                WhitelistItem(address=RESOLVER, allow_from=10),
                WhitelistItem(address=RESOLVER, allow_from=20),
            ]
        )
        assert whitelist.find(RESOLVER.lower()).allow_from == 10
        assert whitelist.is_allowed(RESOLVER, 10)
        assert not whitelist.is_allowed(RESOLVER, 9)

    def test_unknown_resolver(self):
        """Test that unlisted resolvers are not allowed."""
        whitelist = Whitelist.of([WhitelistItem(address=RESOLVER, allow_from=0)])
        assert whitelist.find("0x" + "66" * 20) is None
        assert not whitelist.is_allowed("0x" + "66" * 20, 10**10)

    def test_invalid_address(self):
        """Test that a malformed address is rejected."""
        with pytest.raises(InvalidOrderParams):
            WhitelistItem(address="0x1234", allow_from=0)
