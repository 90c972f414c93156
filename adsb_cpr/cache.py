"""Per-aircraft CPR frame cache.

Each tracked aircraft owns an AircraftCprState holding the latest even and
the latest odd position frame. A new frame overwrites the slot of its
parity; no history is kept. After every write a global decode is attempted
opportunistically. "Not enough data yet" is the normal steady state between
message pairs, so the polling calls return None rather than raising.

Writes and decode snapshots for one aircraft are serialized by that
aircraft's lock. Different aircraft never share a lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from . import cpr
from .cpr import CprFrame, DiagnosticsSink, Parity, Position
from .exceptions import CprError
from .messages import PositionMessage

logger = logging.getLogger(__name__)

# Maximum even/odd separation accepted by the polling decode (seconds)
CACHE_MAX_AGE = 15.0


@dataclass
class AircraftCprState:
    """Latest even and odd CPR frames for a single aircraft."""

    even: CprFrame | None = None
    odd: CprFrame | None = None

    # Timestamp (ms) of the last write to each slot
    even_written_at: float | None = None
    odd_written_at: float | None = None

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def snapshot(self) -> tuple[CprFrame | None, CprFrame | None]:
        """Read both slots at one instant."""
        with self._lock:
            return self.even, self.odd

    @property
    def last_write(self) -> float | None:
        times = [t for t in (self.even_written_at, self.odd_written_at) if t is not None]
        return max(times) if times else None


@dataclass(frozen=True)
class DecodedFix:
    """A decoded position and the receive time (ms) of the frame that completed it."""

    position: Position
    decoded_at: float


def record_position(
    state: AircraftCprState,
    parity: Parity,
    xz: int,
    yz: int,
    timestamp: float,
) -> CprFrame:
    """Store a new frame in the slot for its parity, replacing the previous one."""
    frame = CprFrame(xz=xz, yz=yz, t=timestamp)
    with state._lock:
        if parity == Parity.ODD:
            state.odd = frame
            state.odd_written_at = timestamp
        else:
            state.even = frame
            state.even_written_at = timestamp
    return frame


def try_decode(
    state: AircraftCprState,
    max_age: float = CACHE_MAX_AGE,
    diagnostics: DiagnosticsSink | None = None,
) -> Position | None:
    """Attempt a global decode from the cached pair.

    Returns None when a frame is missing, the pair is stale, or the pair
    is inconsistent.
    """
    even, odd = state.snapshot()
    try:
        return cpr.decode_pair(even, odd, max_pair_age=max_age, diagnostics=diagnostics)
    except CprError as e:
        logger.debug("No CPR position yet: %s", e)
        return None


def record_and_try_decode(
    state: AircraftCprState,
    parity: Parity,
    xz: int,
    yz: int,
    timestamp: float,
    max_age: float = CACHE_MAX_AGE,
) -> Position | None:
    """record_position followed by try_decode."""
    record_position(state, parity, xz, yz, timestamp)
    return try_decode(state, max_age=max_age)


def process_position_message(
    state: AircraftCprState,
    msg: PositionMessage,
    timestamp_ms: float | None = None,
) -> bool:
    """Store the CPR frame carried by a demodulated message.

    Args:
        state: Target aircraft state.
        msg: Demodulated message.
        timestamp_ms: Receive time override in milliseconds. Defaults to
            the message's own timestamp.

    Returns:
        True if the message was a position message and a frame was stored.
    """
    if not msg.is_position_message:
        return False
    if msg.raw_latitude is None or msg.raw_longitude is None:
        return False

    if timestamp_ms is None:
        timestamp_ms = msg.timestamp * 1000.0
    parity = Parity.ODD if msg.is_odd_format else Parity.EVEN
    record_position(state, parity, msg.raw_longitude, msg.raw_latitude, timestamp_ms)
    return True


class FrameCache:
    """CPR frame slots for many aircraft, keyed by ICAO address.

    Feeds each position message into its aircraft's state and tries a
    global decode after every stored frame.
    """

    def __init__(self, max_age: float = CACHE_MAX_AGE):
        """Initialize cache.

        Args:
            max_age: Maximum even/odd separation in seconds for a decode.
        """
        self.max_age = max_age
        self.aircraft: dict[str, AircraftCprState] = {}
        self.positions: dict[str, DecodedFix] = {}
        self._lock = threading.Lock()

        # Receive time (ms) of the newest position message
        self.last_message_at: float | None = None

        # Counters
        self.total_messages = 0
        self.position_messages = 0
        self.position_decodes = 0

    def get(self, icao: str) -> AircraftCprState | None:
        return self.aircraft.get(icao)

    def _get_or_create(self, icao: str) -> AircraftCprState:
        with self._lock:
            state = self.aircraft.get(icao)
            if state is None:
                state = AircraftCprState()
                self.aircraft[icao] = state
            return state

    def process(self, msg: PositionMessage) -> Position | None:
        """Process one demodulated message.

        Returns the freshly decoded position, or None if the message was not
        a position message or no decode is possible yet.
        """
        with self._lock:
            self.total_messages += 1
        if not msg.is_position_message:
            return None

        state = self._get_or_create(msg.icao)
        if not process_position_message(state, msg):
            return None

        received_at = msg.timestamp * 1000.0
        with self._lock:
            self.position_messages += 1
            if self.last_message_at is None or received_at > self.last_message_at:
                self.last_message_at = received_at

        position = try_decode(state, max_age=self.max_age)
        if position is not None:
            with self._lock:
                # Skip aircraft pruned while decoding
                if self.aircraft.get(msg.icao) is state:
                    self.positions[msg.icao] = DecodedFix(position, decoded_at=received_at)
                self.position_decodes += 1
        return position

    def fix_age(self, icao: str, now_ms: float | None = None) -> float | None:
        """Seconds between an aircraft's last fix and now_ms (default: newest message)."""
        fix = self.positions.get(icao)
        if fix is None:
            return None
        if now_ms is None:
            now_ms = self.last_message_at if self.last_message_at is not None else fix.decoded_at
        return (now_ms - fix.decoded_at) / 1000.0

    def prune(self, now_ms: float, max_idle: float = 60.0) -> int:
        """Drop aircraft with no frame written in max_idle seconds. Returns count removed."""
        with self._lock:
            idle = [
                icao for icao, state in self.aircraft.items()
                if state.last_write is None or now_ms - state.last_write > max_idle * 1000.0
            ]
            for icao in idle:
                del self.aircraft[icao]
                self.positions.pop(icao, None)
        return len(idle)
