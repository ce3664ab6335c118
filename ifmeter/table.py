"""Plain-text table rendering for measurement reports."""

from __future__ import annotations

from ifmeter.base import format_rate, format_size
from ifmeter.models import ReportRow

BASE_COLUMNS = [
    "Adapter", "Description", "Received", "Sent", "Total",
    "Avg ↓", "Avg ↑", "Peak ↓", "Peak ↑",
]
BACKGROUND_COLUMNS = ["Bg ↓", "Bg ↑"]


def row_cells(row: ReportRow, with_background: bool = False) -> list[str]:
    """Format one report row into display strings, in column order."""
    cells = [
        row.adapter_id,
        row.description,
        format_size(row.rx_bytes),
        format_size(row.tx_bytes),
        format_size(row.total_bytes),
        format_rate(row.avg_rx_rate),
        format_rate(row.avg_tx_rate),
        format_rate(row.peak_rx_rate),
        format_rate(row.peak_tx_rate),
    ]
    if with_background:
        cells += [format_rate(row.bg_rx_rate), format_rate(row.bg_tx_rate)]
    return cells


def render_report(rows: list[ReportRow], title: str = "", duration: float | None = None) -> str:
    """Render rows as an aligned text table.

    Background columns appear only when some row was background-corrected.
    Text columns are left-aligned, numbers right-aligned.
    """
    with_background = any(r.background_corrected for r in rows)
    header = BASE_COLUMNS + (BACKGROUND_COLUMNS if with_background else [])
    body = [row_cells(r, with_background) for r in rows]

    widths = [len(h) for h in header]
    for cells in body:
        widths = [max(w, len(c)) for w, c in zip(widths, cells)]

    def fmt(cells: list[str]) -> str:
        out = []
        for i, (cell, width) in enumerate(zip(cells, widths)):
            out.append(cell.ljust(width) if i < 2 else cell.rjust(width))
        return "  ".join(out).rstrip()

    lines = []
    if title:
        heading = title if duration is None else f"{title}  ({duration:.1f}s)"
        lines.append(heading)
    lines.append(fmt(header))
    lines.append("  ".join("-" * w for w in widths))
    if body:
        lines.extend(fmt(cells) for cells in body)
    else:
        lines.append("(no adapters present at both start and end)")
    return "\n".join(lines)
