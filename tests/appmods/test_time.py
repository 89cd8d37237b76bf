"""
Tests for time.py.
"""

import pytest

from appmods import time


@pytest.mark.unit
class TestDeltaStr:
    """Test duration rendering."""

    @pytest.mark.parametrize(
        "secs,expected",
        [
            (0.35, "350ms"),
            (2.5, "2.500s"),
            (65, "1m05s"),
            (3720, "1h02m"),
            (-0.35, "-350ms"),
        ],
    )
    def test_delta_str(self, secs, expected):
        assert time.delta_str(secs) == expected

    def test_precise_micros(self):
        assert time.delta_str(0.000250, precise=True) == "250μs"

    def test_ms_to_secs(self):
        assert time.ms_to_secs(2000) == 2.0

    def test_since_is_monotonic(self):
        start_t = time.start()

        assert time.since(start_t) >= 0
