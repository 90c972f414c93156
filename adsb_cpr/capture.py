"""Read pre-demodulated ADS-B frames from files.

Accepted line formats (one frame per line):
- Plain hex:              8D40621D58C382D690C8AC2863A7
- dump1090 raw:           *8D40621D58C382D690C8AC2863A7;
- Timestamped (seconds):  1700000000.250 8D40621D58C382D690C8AC2863A7

Blank lines and lines starting with '#' are skipped. Lines without a
timestamp receive synthetic timestamps 1 ms apart.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator


@dataclass
class RawFrame:
    """A raw Mode S frame before parsing."""

    hex_str: str
    timestamp: float = 0.0
    source: str = ""


# Pattern for valid Mode S hex: 14 chars (56-bit) or 28 chars (112-bit)
_HEX_PATTERN = re.compile(r"^[0-9A-Fa-f]{14}$|^[0-9A-Fa-f]{28}$")

# dump1090 raw format: *<hex>;
_DUMP1090_PATTERN = re.compile(r"^\*([0-9A-Fa-f]{14}|[0-9A-Fa-f]{28});$")

# Leading receive time in seconds
_TIMESTAMP_PATTERN = re.compile(r"^(\d+(?:\.\d*)?)\s+(\S+)$")


def _clean_hex_line(line: str) -> str | None:
    """Extract a valid Mode S hex string from a line.

    Handles:
    - Plain hex: "8D4840D6202CC371C32CE0576098"
    - dump1090 raw: "*8D4840D6202CC371C32CE0576098;"
    - With leading/trailing whitespace
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    # Try dump1090 format first
    m = _DUMP1090_PATTERN.match(line)
    if m:
        return m.group(1).upper()

    # Try plain hex
    if _HEX_PATTERN.match(line):
        return line.upper()

    return None


def _split_timestamp(line: str) -> tuple[float | None, str]:
    """Separate an optional leading timestamp from the frame text."""
    m = _TIMESTAMP_PATTERN.match(line.strip())
    if m:
        return float(m.group(1)), m.group(2)
    return None, line


class FrameReader:
    """Read pre-demodulated hex frames from a file or iterable.

    Accepts hex strings from tools like rtl_adsb, dump1090 --raw, or
    any source that produces one hex frame per line.
    """

    def __init__(self, source: str | Path | Iterable[str], label: str = ""):
        """Initialize frame reader.

        Args:
            source: File path or iterable of hex strings.
            label: Optional label for the source (used in RawFrame.source).
        """
        self._source = source
        self._label = label or (str(source) if isinstance(source, (str, Path)) else "iterable")

    def __iter__(self) -> Iterator[RawFrame]:
        lines: Iterable[str]
        if isinstance(self._source, (str, Path)):
            path = Path(self._source)
            if not path.exists():
                raise FileNotFoundError(f"Frame file not found: {path}")
            lines = path.read_text().splitlines()
        else:
            lines = self._source

        t0 = time.time()
        for i, line in enumerate(lines):
            ts, text = _split_timestamp(line)
            hex_str = _clean_hex_line(text)
            if hex_str is None:
                continue
            yield RawFrame(
                hex_str=hex_str,
                timestamp=ts if ts is not None else t0 + i * 0.001,  # Synthetic timestamps, 1ms apart
                source=self._label,
            )

    def read_all(self) -> list[RawFrame]:
        """Read all frames into a list."""
        return list(self)
