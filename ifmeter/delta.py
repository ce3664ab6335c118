"""Delta engine: counter deltas, average rates, and report construction."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ifmeter.errors import CounterRollover
from ifmeter.models import AdapterSample, ReportRow, Snapshot

logger = logging.getLogger(__name__)


def compute_delta(start: AdapterSample, end: AdapterSample) -> tuple[int, int]:
    """Return (rx_delta, tx_delta) between two samples of the same adapter.

    Raises:
        ValueError: the samples belong to different adapters.
        CounterRollover: either counter decreased.
    """
    if start.adapter_id != end.adapter_id:
        raise ValueError(
            f"Cannot diff samples of different adapters: {start.adapter_id!r} vs {end.adapter_id!r}"
        )
    rx_delta = end.rx_bytes - start.rx_bytes
    if rx_delta < 0:
        raise CounterRollover(start.adapter_id, "rx", start.rx_bytes, end.rx_bytes)
    tx_delta = end.tx_bytes - start.tx_bytes
    if tx_delta < 0:
        raise CounterRollover(start.adapter_id, "tx", start.tx_bytes, end.tx_bytes)
    return rx_delta, tx_delta


def compute_avg_rate(delta: float, duration_seconds: float) -> float | None:
    """Bytes/sec over the duration, or None when the duration is not positive."""
    if duration_seconds <= 0:
        return None
    return delta / duration_seconds


def common_adapters(first: Snapshot, second: Snapshot) -> list[str]:
    """Adapter ids present in both snapshots, sorted."""
    return sorted(first.keys() & second.keys())


def build_report(
    start: Snapshot,
    end: Snapshot,
    peak_rx: Mapping[str, float],
    peak_tx: Mapping[str, float],
    duration_seconds: float,
    descriptions: Mapping[str, str] | None = None,
) -> list[ReportRow]:
    """Build one report row per adapter seen at both ends of a measurement.

    A rollover on any adapter aborts the whole report; a partial table
    would misrepresent the totals.
    """
    descriptions = descriptions or {}
    rows: list[ReportRow] = []
    for adapter_id in common_adapters(start, end):
        rx_delta, tx_delta = compute_delta(start[adapter_id], end[adapter_id])
        rows.append(
            ReportRow(
                adapter_id=adapter_id,
                description=descriptions.get(adapter_id, ""),
                rx_bytes=rx_delta,
                tx_bytes=tx_delta,
                total_bytes=rx_delta + tx_delta,
                avg_rx_rate=compute_avg_rate(rx_delta, duration_seconds),
                avg_tx_rate=compute_avg_rate(tx_delta, duration_seconds),
                peak_rx_rate=peak_rx.get(adapter_id),
                peak_tx_rate=peak_tx.get(adapter_id),
            )
        )

    skipped = start.keys() ^ end.keys()
    if skipped:
        logger.debug("Adapters not present at both ends, excluded: %s", ", ".join(sorted(skipped)))
    return rows
