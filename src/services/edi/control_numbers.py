"""
X12 Control Number Sources.

Interchange, group and transaction control numbers must be unique within a
trading-partner relationship. The clock-based source is unique per call
within one process; deployments that run several generator instances
against the same payer should inject a coordinated sequence instead.
"""

from typing import Callable, Optional, Protocol
import itertools
import threading
import time

CONTROL_NUMBER_DIGITS = 9
CONTROL_NUMBER_MODULUS = 10 ** CONTROL_NUMBER_DIGITS


class ControlNumberSource(Protocol):
    """Anything that can hand out 9-digit control numbers."""

    def next_control_number(self) -> str:
        ...


def _format(value: int) -> str:
    return str(value % CONTROL_NUMBER_MODULUS).zfill(CONTROL_NUMBER_DIGITS)


class ClockControlNumberSource:
    """
    Control numbers derived from a monotonically increasing clock.

    The tick is wall-clock time in tenths of a second, which keeps nine
    digits from wrapping for about three years. When two calls land on the
    same tick, or the clock steps backwards, the later call is bumped past
    the last issued tick, so values are strictly increasing for the
    lifetime of the source.
    """

    TICK_NS = 100_000_000

    def __init__(self, clock_ns: Optional[Callable[[], int]] = None):
        self._clock_ns = clock_ns or time.time_ns
        self._last_tick = -1
        self._lock = threading.Lock()

    def next_control_number(self) -> str:
        tick = self._clock_ns() // self.TICK_NS
        with self._lock:
            if tick <= self._last_tick:
                tick = self._last_tick + 1
            self._last_tick = tick
        return _format(tick)


class SequenceControlNumberSource:
    """
    Control numbers from a counter.

    Use one instance per submitter/payer pair, seeded from the last number
    that pair persisted. Zero is never issued; after 999999999 the counter
    wraps to 1.
    """

    def __init__(self, start: int = 1):
        if start < 0:
            raise ValueError("Control number sequence cannot start below zero")
        self._counter = itertools.count(max(start, 1))
        self._lock = threading.Lock()

    def next_control_number(self) -> str:
        with self._lock:
            value = next(self._counter)
            if value % CONTROL_NUMBER_MODULUS == 0:
                value = next(self._counter)
        return _format(value)


def transaction_control_number(control_number: str) -> str:
    """ST02/SE02 value: the first four digits of the interchange control number."""
    return control_number.zfill(CONTROL_NUMBER_DIGITS)[:4]


_default_source: Optional[ClockControlNumberSource] = None


def get_control_number_source() -> ClockControlNumberSource:
    """Get the process-wide clock source."""
    global _default_source

    if _default_source is None:
        _default_source = ClockControlNumberSource()

    return _default_source
