"""
Pytest configuration for SMAA air quality monitor tests.

Registers custom markers and provides shared fixtures.
"""

import pytest

from smaa_monitor.models import Reading


BASE_TS = 1_700_000_000.0


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def make_reading():
    """Factory fixture building a Reading with sensible defaults."""

    def _make(offset=0, **overrides):
        fields = dict(
            timestamp=BASE_TS + offset,
            pm25=10.0,
            pm10=20.0,
            o3=30.0,
            co=1.0,
            temperature=22.0,
            humidity=60.0,
            noise=45.0,
            battery=90.0,
            online=True,
        )
        fields.update(overrides)
        return Reading(**fields)

    return _make


@pytest.fixture
def make_window(make_reading):
    """Factory fixture: one reading per PM2.5 value, ten minutes apart."""

    def _make(pm25_values, **overrides):
        return [
            make_reading(offset=600 * index, pm25=value, **overrides)
            for index, value in enumerate(pm25_values)
        ]

    return _make
