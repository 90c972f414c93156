"""Errors raised by CPR pair decoding.

All of these are recoverable: the caller decides whether to wait for the
next message. The polling entry points in the frame cache turn them into
"no position yet" instead of raising.
"""

from __future__ import annotations


class CprError(Exception):
    """Base class for CPR decode failures."""


class MissingFrame(CprError):
    """One parity of the even/odd pair has not been received yet."""

    def __init__(self, parity):
        self.parity = parity
        super().__init__(f"No {parity.name.lower()} CPR frame available for global decode")


class StalePair(CprError):
    """Even and odd frames are too far apart in time to describe one position.

    The older frame should be discarded and a fresh pair awaited.
    """

    def __init__(self, age: float, max_age: float):
        self.age = age
        self.max_age = max_age
        super().__init__(f"CPR frame pair too old ({age:.1f}s > {max_age}s)")


class InconsistentPair(CprError):
    """Even and odd candidate latitudes fall in different NL bands.

    Retrying with the same frames cannot succeed; discard both.
    """

    def __init__(self, nl_even: int | None = None, nl_odd: int | None = None):
        self.nl_even = nl_even
        self.nl_odd = nl_odd
        if nl_even is not None and nl_odd is not None:
            detail = f" (NL even={nl_even}, odd={nl_odd})"
        else:
            detail = ""
        super().__init__(f"CPR global decode failed - frames inconsistent{detail}")
