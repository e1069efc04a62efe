from __future__ import annotations

"""
reflection.treasury.throttle
============================

Rate limiter for treasury liquify triggers.

A burst of taxed transfers inside one logical step would otherwise each ask
the treasury to liquify, chaining expensive conversions and nesting calls
without bound. The throttle lets a trigger through only when

    now > last_liquify_timestamp + min_interval

and records `now` as the new timestamp when it does. It is a best-effort
limiter, not a lock: triggers inside the same interval collapse into one.
The read-then-write runs under a lock so two callers can never both observe
the old timestamp.
"""

import logging
import threading

from .. import metrics
from .state import TreasuryConfig

log = logging.getLogger(__name__)

MIN_INTERVAL_SECONDS = 1


class LiquifyThrottle:
    def __init__(self, config: TreasuryConfig, min_interval: int = MIN_INTERVAL_SECONDS) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self.config = config
        self.min_interval = int(min_interval)
        self._lock = threading.Lock()

    @property
    def last(self) -> int:
        return self.config.last_liquify_timestamp

    def allows(self, now: int) -> bool:
        """Would a trigger at `now` fire? Does not record anything."""
        return int(now) > self.config.last_liquify_timestamp + self.min_interval

    def should_trigger(self, now: int) -> bool:
        with self._lock:
            fired = self.allows(now)
            if fired:
                self.config.last_liquify_timestamp = int(now)
        metrics.record_throttle(fired)
        if not fired:
            log.debug("liquify trigger suppressed at t=%d (last=%d)", now, self.last)
        return fired


__all__ = ["LiquifyThrottle", "MIN_INTERVAL_SECONDS"]
