"""
Unit tests for expiry rules.
"""

import pytest

from domain.expiry import is_expired, is_live, iso_extended, iso_millis
from domain.models import LIFETIME_DAYS, KeyRecord


def record(**kwargs):
    defaults = dict(product_key="PK-1", auth_key="A", status="active",
                    activated_at=1, duration_days=30, expires_at=1_000)
    defaults.update(kwargs)
    return KeyRecord(**defaults)


class TestIsExpired:
    """Tests for is_expired."""

    @pytest.mark.parametrize("activated_at", [None, 0, ""])
    def test_never_activated_is_never_expired(self, activated_at):
        """Test that a record without activation ignores expiresAt."""
        assert is_expired(record(activated_at=activated_at, expires_at=0), now=10**13) is False

    def test_lifetime_is_never_expired(self):
        """Test that the lifetime sentinel exempts the record."""
        assert is_expired(record(duration_days=LIFETIME_DAYS, expires_at=0), now=10**13) is False
        assert is_expired(record(duration_days=LIFETIME_DAYS + 5, expires_at=0), now=10**13) is False

    def test_just_below_lifetime_sentinel_expires(self):
        """Test that durationDays one below the sentinel is a normal key."""
        assert is_expired(record(duration_days=LIFETIME_DAYS - 1, expires_at=0), now=1) is True

    def test_expiry_boundary_is_strict(self):
        """Test that now == expiresAt is still valid."""
        assert is_expired(record(expires_at=5_000), now=5_000) is False
        assert is_expired(record(expires_at=5_000), now=5_001) is True

    def test_future_expiry_not_expired(self):
        """Test a record expiring in the future."""
        assert is_expired(record(expires_at=9_000), now=1_000) is False


class TestIsLive:
    """Tests for is_live."""

    def test_expired_status_is_not_live(self):
        """Test that a sticky expired status is not live even if in date."""
        assert is_live(record(status="expired", expires_at=9_000), now=1_000) is False

    def test_active_and_in_date_is_live(self):
        """Test the normal live case."""
        assert is_live(record(expires_at=9_000), now=1_000) is True

    def test_active_but_stale_is_not_live(self):
        """Test that a stale active record is not live."""
        assert is_live(record(expires_at=500), now=1_000) is False


def test_iso_millis_format():
    """Test ISO formatting matches the UTC millisecond Z format."""
    assert iso_millis(0) == "1970-01-01T00:00:00.000Z"
    assert iso_millis(1_700_000_000_123) == "2023-11-14T22:13:20.123Z"


class TestIsoBeyondYear9999:
    """Tests for expiries past the datetime range."""

    def test_far_future_uses_expanded_year(self):
        """Test that a year above 9999 formats instead of raising."""
        assert iso_millis(253_402_300_800_000) == "+010000-01-01T00:00:00.000Z"
        assert iso_millis(300_000_000_000_000).startswith("+011476-")

    def test_largest_javascript_date(self):
        assert iso_millis(8_640_000_000_000_000) == "+275760-09-13T00:00:00.000Z"

    def test_expanded_formatter_agrees_in_range(self):
        """Test the calendar arithmetic against datetime for ordinary values."""
        for epoch_ms in (0, 951_782_400_000, 1_700_000_000_123, 4_102_444_800_000):
            assert iso_extended(epoch_ms) == iso_millis(epoch_ms)
