"""Shared test fixtures for adsb-cpr.

Provides:
- The published even/odd CPR pair as CprFrame objects
- An isolated config directory for every test
"""

import pytest

from adsb_cpr.cpr import CprFrame
from tests.fixtures.known_frames import POSITION_FRAMES


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temporary directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr("adsb_cpr.config.CONFIG_DIR", config_dir)
    monkeypatch.setattr("adsb_cpr.config.CONFIG_FILE", config_dir / "config.yaml")
    return config_dir


@pytest.fixture
def known_pair():
    """Even/odd frames from "The 1090MHz Riddle", even frame newer."""
    _, _, _, _, lat_even, lon_even = POSITION_FRAMES[0]
    _, _, _, _, lat_odd, lon_odd = POSITION_FRAMES[1]
    even = CprFrame(xz=lon_even, yz=lat_even, t=1000.0)
    odd = CprFrame(xz=lon_odd, yz=lat_odd, t=500.0)
    return even, odd
