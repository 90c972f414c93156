"""Compact Position Reporting — global decode of ADS-B airborne positions.

Decodes 17-bit CPR-encoded latitude/longitude into geographic coordinates.

Global decode needs one even and one odd frame received close together in
time (10 seconds airborne). No reference position is needed:
- The latitude zone index j is recovered from both frames.
- Both candidate latitudes must fall in the same NL band, or the pair is
  discarded (the aircraft crossed a band boundary between frames, or the
  input is corrupt).
- Latitude and longitude are then taken from whichever frame is newer.

Key constants:
- NZ = 15 (number of latitude zones per hemisphere for even frames)
- Nb = 17 (bits per coordinate)
- Dlat_even = 360 / (4 * NZ) = 6.0 degrees
- Dlat_odd = 360 / (4 * NZ - 1) = 360/59 ~ 6.1017 degrees

Edge cases: zone boundary crossings, polar regions (NL=1), antimeridian wrapping.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Mapping

from .angles import normalize_latitude, normalize_longitude
from .exceptions import InconsistentPair, MissingFrame, StalePair

logger = logging.getLogger(__name__)

NZ = 15  # Number of latitude zones per hemisphere
NB = 17  # Bits per coordinate
CPR_MAX = 2**NB  # 131072

DLAT_EVEN = 360.0 / (4 * NZ)  # 6.0 degrees
DLAT_ODD = 360.0 / (4 * NZ - 1)  # ~6.1017 degrees

# Maximum time between even/odd frames for global decode (seconds, airborne)
MAX_PAIR_AGE = 10.0

# Number of longitude zones per whole degree of |latitude| (airborne, DO-260B)
NL_TABLE: tuple[int, ...] = (
    59, 59, 59, 59, 59, 59, 59, 59, 59, 59,  # 0-9
    59, 58, 58, 58, 58, 57, 57, 57, 57, 56,  # 10-19
    56, 56, 55, 55, 54, 54, 53, 53, 52, 52,  # 20-29
    51, 51, 50, 50, 49, 49, 48, 47, 47, 46,  # 30-39
    45, 45, 44, 43, 43, 42, 41, 40, 40, 39,  # 40-49
    38, 37, 36, 36, 35, 34, 33, 32, 31, 30,  # 50-59
    29, 29, 28, 27, 26, 25, 24, 23, 22, 21,  # 60-69
    20, 19, 18, 17, 16, 15, 14, 13, 12, 11,  # 70-79
    10, 9, 8, 7, 5, 4, 3, 2, 2, 2,  # 80-89
)


class Parity(IntEnum):
    """CPR format bit F: 0 = even frame, 1 = odd frame."""

    EVEN = 0
    ODD = 1


@dataclass(frozen=True)
class CprFrame:
    """One received position report's encoded fraction-of-zone values."""

    xz: int  # 17-bit encoded longitude
    yz: int  # 17-bit encoded latitude
    t: float  # Receive time in milliseconds

    def __post_init__(self):
        for name in ("xz", "yz"):
            value = getattr(self, name)
            if not 0 <= value < CPR_MAX:
                raise ValueError(f"CPR {name} out of 17-bit range: {value}")


@dataclass(frozen=True)
class Position:
    """A decoded geodetic position in degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class DecodeTrace:
    """Intermediate values of one global decode, for diagnostics.

    Fields past the consistency check stay None when the pair is rejected.
    """

    x0: float
    y0: float
    x1: float
    y1: float
    j: int
    rlat0: float
    rlat1: float
    nl_even: int
    nl_odd: int
    use_odd: bool | None = None
    lat: float | None = None
    nl: int | None = None
    m: int | None = None
    ni: int | None = None
    lon_raw: float | None = None
    lon: float | None = None

    @property
    def consistent(self) -> bool:
        return self.nl_even == self.nl_odd


DiagnosticsSink = Callable[[DecodeTrace], None]


def nl(lat: float) -> int:
    """Number of longitude zones at a given latitude (NL function).

    Ranges from NL=59 at the equator down to 2 just below the poles,
    and NL=1 at the poles themselves.
    """
    lat = abs(lat)
    if lat >= 90.0:
        return 1
    try:
        return NL_TABLE[math.floor(lat)]
    except (IndexError, ValueError):
        return 1


def dlon(lat: float, is_odd: bool) -> float:
    """Longitude zone width in degrees at a latitude for the given format."""
    ni = max(nl(lat) - (1 if is_odd else 0), 1)
    return 360.0 / ni


def _mod(x: float, y: float) -> float:
    """Modulo that always returns non-negative result."""
    return x - y * math.floor(x / y)


def _decode(even: CprFrame, odd: CprFrame) -> tuple[Position | None, DecodeTrace]:
    # Normalize CPR values to [0, 1)
    x0 = even.xz / CPR_MAX
    y0 = even.yz / CPR_MAX
    x1 = odd.xz / CPR_MAX
    y1 = odd.yz / CPR_MAX

    # Latitude zone index
    j = math.floor(59 * y0 - 60 * y1 + 0.5)

    rlat0 = normalize_latitude(DLAT_EVEN * (_mod(j, 60) + y0))
    rlat1 = normalize_latitude(DLAT_ODD * (_mod(j, 59) + y1))

    nl_even = nl(rlat0)
    nl_odd = nl(rlat1)
    if nl_even != nl_odd:
        trace = DecodeTrace(x0, y0, x1, y1, j, rlat0, rlat1, nl_even, nl_odd)
        return None, trace

    # Newest frame governs both latitude and longitude; ties go to odd
    use_odd = odd.t >= even.t
    lat = rlat1 if use_odd else rlat0

    nl_lat = nl(lat)
    m = math.floor(x0 * (nl_lat - 1) - x1 * nl_lat + 0.5)

    if use_odd:
        ni = max(nl_lat - 1, 1)
        lon_raw = (360.0 / ni) * (_mod(m, ni) + x1)
    else:
        ni = max(nl_lat, 1)
        lon_raw = (360.0 / ni) * (_mod(m, ni) + x0)
    lon = normalize_longitude(lon_raw)

    trace = DecodeTrace(
        x0, y0, x1, y1, j, rlat0, rlat1, nl_even, nl_odd,
        use_odd=use_odd, lat=lat, nl=nl_lat, m=m, ni=ni, lon_raw=lon_raw, lon=lon,
    )
    return Position(lat=lat, lon=lon), trace


def global_decode(
    even: CprFrame,
    odd: CprFrame,
    diagnostics: DiagnosticsSink | None = None,
) -> Position | None:
    """Global CPR decode from an even/odd frame pair.

    Args:
        even: Even-format frame
        odd: Odd-format frame
        diagnostics: Optional callable handed the DecodeTrace of this decode

    Returns:
        The decoded Position, or None if the two candidate latitudes
        disagree on NL (zone boundary crossing).
    """
    position, trace = _decode(even, odd)
    if diagnostics is not None:
        diagnostics(trace)
    if position is None:
        logger.debug(
            "Inconsistent CPR pair: rlat0=%.5f (NL %d), rlat1=%.5f (NL %d)",
            trace.rlat0, trace.nl_even, trace.rlat1, trace.nl_odd,
        )
    return position


def decode_pair(
    even: CprFrame | None,
    odd: CprFrame | None,
    max_pair_age: float = MAX_PAIR_AGE,
    diagnostics: DiagnosticsSink | None = None,
) -> Position:
    """Validating wrapper around global_decode.

    Raises:
        MissingFrame: either frame is absent.
        StalePair: the frames are more than max_pair_age seconds apart.
        InconsistentPair: the candidate latitudes disagree on NL.
    """
    if even is None:
        raise MissingFrame(Parity.EVEN)
    if odd is None:
        raise MissingFrame(Parity.ODD)

    age = abs(odd.t - even.t) / 1000.0
    if age > max_pair_age:
        raise StalePair(age, max_pair_age)

    position, trace = _decode(even, odd)
    if diagnostics is not None:
        diagnostics(trace)
    if position is None:
        raise InconsistentPair(trace.nl_even, trace.nl_odd)
    return position


def decode_frames(
    frames: Mapping[str, CprFrame | None],
    max_pair_age: float = MAX_PAIR_AGE,
) -> Position:
    """decode_pair taking {"even": frame, "odd": frame}; missing keys count as absent."""
    return decode_pair(frames.get("even"), frames.get("odd"), max_pair_age=max_pair_age)
