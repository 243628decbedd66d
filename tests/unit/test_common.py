"""Unit tests for common utils (pure functions only; DB-backed ones need integration)."""
from datetime import datetime, timedelta, timezone
import pytest

from api.utils.common import iso_format


@pytest.mark.unit
class TestIsoFormat:
    def test_appends_z(self):
        dt = datetime(2025, 1, 15, 12, 30, 0)
        result = iso_format(dt)
        assert result.endswith("Z")
        assert "2025" in result and "01" in result

    def test_none(self):
        assert iso_format(None) is None

    def test_aware_values_converted_to_utc(self):
        dt = datetime(2025, 1, 15, 18, 0, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        assert iso_format(dt) == "2025-01-15T12:30:00Z"
