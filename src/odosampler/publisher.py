"""Rate-limited snapshot publishing, decoupled from the tick rate."""

from __future__ import annotations

import logging

from odosampler.config import validate_frequency
from odosampler.interfaces import Transport
from odosampler.models.snapshot import Snapshot

_logger = logging.getLogger(__name__)


class RateLimitedPublisher:
    """Hand at most one snapshot per period to the transport.

    The schedule is only advanced when a tick is due, and always to
    ``now + period``: missed periods are dropped rather than caught up,
    so consecutive emissions are at least one period apart and at most
    one tick interval more than that.
    """

    def __init__(self, frequency: float) -> None:
        self._frequency = validate_frequency(frequency)
        self._next_due: float | None = None
        self._publish_count = 0
        self._skipped_count = 0

    @property
    def frequency(self) -> float:
        return self._frequency

    @frequency.setter
    def frequency(self, value: float) -> None:
        # Takes effect at the next emission; next_due is left alone.
        self._frequency = validate_frequency(value)

    @property
    def period(self) -> float:
        return 1.0 / self._frequency

    @property
    def next_due_time(self) -> float | None:
        """Earliest time the next emission may happen; ``None`` means now."""
        return self._next_due

    @property
    def publish_count(self) -> int:
        return self._publish_count

    @property
    def skipped_count(self) -> int:
        """Due ticks that found no connected transport."""
        return self._skipped_count

    def reset(self) -> None:
        self._next_due = None

    def tick(self, now: float, snapshot: Snapshot, transport: Transport | None) -> bool:
        """Publish *snapshot* if due and connected. Returns whether it was sent."""
        if self._next_due is not None and now < self._next_due:
            return False
        self._next_due = now + self.period

        if transport is None or not transport.is_connected:
            self._skipped_count += 1
            _logger.debug("Snapshot due at t=%s but transport is not connected", now)
            return False

        transport.publish(snapshot)
        self._publish_count += 1
        return True
