"""Angle normalization for decoded CPR coordinates.

Zone reconstruction produces raw angles in [0, 360) (and occasionally a bit
beyond). These helpers fold them back into geographic ranges:

- Longitude: (-180, 180]
- Latitude:  [-90, 90], reflecting values that run past a pole

Values already in range are returned unchanged, bit for bit.
"""

from __future__ import annotations

import math


def normalize_longitude(lon_deg: float) -> float:
    """Reduce a longitude modulo 360 into (-180, 180]."""
    # fmod keeps the sign of the dividend, so in-range values pass through exactly
    lon = math.fmod(lon_deg, 360.0)
    if lon > 180.0:
        lon -= 360.0
    elif lon <= -180.0:
        lon += 360.0
    return lon


def normalize_latitude(lat_deg: float) -> float:
    """Reduce a latitude into [-90, 90].

    First brings the angle into [-180, 180], then reflects anything beyond
    a pole back over it (95 -> 85, -100 -> -80). This is geometric
    wrap-around only; no check is made that the result is plausible.
    """
    lat = math.fmod(lat_deg, 360.0)
    if lat > 180.0:
        lat -= 360.0
    elif lat < -180.0:
        lat += 360.0

    if lat > 90.0:
        lat = 180.0 - lat
    elif lat < -90.0:
        lat = -180.0 - lat
    return lat
