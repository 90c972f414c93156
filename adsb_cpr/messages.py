"""Extract CPR position fields from demodulated Mode S frames.

Handles the extended squitter position messages that feed global decode:
- DF17/18 TC 9-18:  Airborne position (barometric altitude)
- DF17/18 TC 20-22: Airborne position (GNSS altitude)

Surface positions (TC 5-8) use a different zone table and are reported as
non-position messages. Other DF17/18 type codes likewise. CRC is not checked.

Output: PositionMessage, the shape consumed by the frame cache.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_112 = re.compile(r"^[0-9A-Fa-f]{28}$")

# Extended squitter downlink formats
_DF_EXTENDED_SQUITTER = frozenset({17, 18})


@dataclass(frozen=True)
class PositionMessage:
    """A demodulated message as seen by the frame cache."""

    icao: str
    is_position_message: bool
    raw_latitude: int | None = None  # 17-bit CPR latitude (YZ)
    raw_longitude: int | None = None  # 17-bit CPR longitude (XZ)
    is_odd_format: bool = False  # Format bit F
    timestamp: float = 0.0  # Seconds
    type_code: int | None = None


def is_airborne_position(tc: int | None) -> bool:
    """True for the airborne position type codes (TC 9-18, 20-22)."""
    if tc is None:
        return False
    return 9 <= tc <= 18 or 20 <= tc <= 22


def parse_message(hex_str: str, timestamp: float = 0.0) -> PositionMessage | None:
    """Parse a 112-bit extended squitter hex string.

    ME field layout for airborne position (56 bits):
    - TC (5 bits): Type code
    - SS (2 bits): Surveillance status
    - SAF (1 bit): Single antenna flag
    - ALT (12 bits): Altitude code
    - T (1 bit): UTC sync flag
    - F (1 bit): CPR format (0=even, 1=odd)
    - LAT_CPR (17 bits): CPR latitude
    - LON_CPR (17 bits): CPR longitude

    Returns None for anything that is not a 28-character DF17/18 frame.
    """
    hex_str = hex_str.strip()
    if not _HEX_112.match(hex_str):
        return None

    raw = bytes.fromhex(hex_str)
    df = raw[0] >> 3
    if df not in _DF_EXTENDED_SQUITTER:
        return None

    icao = raw[1:4].hex().upper()
    bits = int.from_bytes(raw[4:11], "big")
    tc = bits >> 51

    if not is_airborne_position(tc):
        return PositionMessage(
            icao=icao,
            is_position_message=False,
            timestamp=timestamp,
            type_code=tc,
        )

    return PositionMessage(
        icao=icao,
        is_position_message=True,
        raw_latitude=(bits >> 17) & 0x1FFFF,
        raw_longitude=bits & 0x1FFFF,
        is_odd_format=bool((bits >> 34) & 1),
        timestamp=timestamp,
        type_code=tc,
    )
