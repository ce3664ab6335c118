"""Background correction: subtract an idle run's average rates."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from ifmeter.models import ReportRow


def _minus(rate: float | None, background: float) -> float | None:
    if rate is None:
        return None
    return rate - background


def _first_by_adapter(rows: Iterable[ReportRow]) -> dict[str, ReportRow]:
    index: dict[str, ReportRow] = {}
    for row in rows:
        index.setdefault(row.adapter_id, row)
    return index


def subtract(report: list[ReportRow], background: list[ReportRow]) -> list[ReportRow]:
    """Return report rows with the background average rates taken off.

    Both average and peak rates are reduced by the background *average*
    rate. Byte totals are untouched and results may be negative.
    Adapters missing from the background run get a correction of 0.
    """
    bg_index = _first_by_adapter(background)
    corrected: list[ReportRow] = []
    for row in report:
        bg = bg_index.get(row.adapter_id)
        bg_rx = (bg.avg_rx_rate or 0.0) if bg else 0.0
        bg_tx = (bg.avg_tx_rate or 0.0) if bg else 0.0
        corrected.append(
            dataclasses.replace(
                row,
                avg_rx_rate=_minus(row.avg_rx_rate, bg_rx),
                avg_tx_rate=_minus(row.avg_tx_rate, bg_tx),
                peak_rx_rate=_minus(row.peak_rx_rate, bg_rx),
                peak_tx_rate=_minus(row.peak_tx_rate, bg_tx),
                bg_rx_rate=bg_rx,
                bg_tx_rate=bg_tx,
            )
        )
    return corrected
