"""Tests for elephas.timestamps module."""

from unittest.mock import patch

import pytest

from elephas import seconds
from elephas.timestamps import DEFAULT_TTL, MILLIS_PER_SECOND, now_millis


class TestSeconds:
    @pytest.mark.parametrize("value, expected", [
        (0, 0),
        (1, 1000),
        (300, 300_000),
        (1.5, 1500),
    ])
    def test_converts_to_millis(self, value, expected):
        assert seconds(value) == expected

    def test_default_ttl_is_one_hour(self):
        assert seconds(3600) == DEFAULT_TTL


class TestNowMillis:
    def test_scales_wall_clock(self):
        with patch("elephas.timestamps.time.time", return_value=12.5):
            assert now_millis() == 12.5 * MILLIS_PER_SECOND
