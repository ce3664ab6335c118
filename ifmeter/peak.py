"""Peak tracker: running maximum of instantaneous per-adapter rates."""

from __future__ import annotations

import logging

from ifmeter.delta import common_adapters, compute_delta
from ifmeter.models import Peaks, RateSample, Snapshot

logger = logging.getLogger(__name__)


class PeakTracker:
    """Accumulates peak rx/tx rates from a caller-driven stream of snapshots.

    The tracker has no notion of a sampling period; each on_sample() call
    measures the interval since the previous call, whatever its length.

    Usage:
        tracker = PeakTracker(start_snapshot, start_time)
        while waiting:
            tracker.on_sample(sampler.take(), clock())
        peaks = tracker.peaks()
    """

    def __init__(self, initial: Snapshot, initial_time: float):
        self._last_snapshot = initial
        self._last_time = initial_time
        self._peak_rx: dict[str, float] = {}
        self._peak_tx: dict[str, float] = {}
        self.ticks = 0

    def on_sample(self, snapshot: Snapshot, now: float) -> list[RateSample]:
        """Feed the next snapshot; return the interval rates it produced.

        Raises CounterRollover as soon as a counter is seen going backwards.
        """
        interval = now - self._last_time
        rates: list[RateSample] = []
        stalled = interval <= 0
        if stalled:
            logger.debug("Clock did not advance (%.6fs), skipping rate update", interval)

        # Counters are checked on every tick, rates only when time has passed.
        for adapter_id in common_adapters(self._last_snapshot, snapshot):
            rx_delta, tx_delta = compute_delta(
                self._last_snapshot[adapter_id], snapshot[adapter_id]
            )
            if stalled:
                continue
            rx_rate = rx_delta / interval
            tx_rate = tx_delta / interval
            self._update(self._peak_rx, adapter_id, rx_rate)
            self._update(self._peak_tx, adapter_id, tx_rate)
            rates.append(RateSample(adapter_id, rx_rate, tx_rate, observed_at=now))
        if not stalled:
            self.ticks += 1

        self._last_snapshot = snapshot
        self._last_time = now
        return rates

    def peaks(self) -> Peaks:
        return Peaks(rx=dict(self._peak_rx), tx=dict(self._peak_tx))

    @staticmethod
    def _update(table: dict[str, float], adapter_id: str, rate: float) -> None:
        current = table.get(adapter_id)
        if current is None or rate > current:
            table[adapter_id] = rate
