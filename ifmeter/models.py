"""Data models for counter samples and measurement reports."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AdapterSample:
    """Cumulative byte counters of one adapter at one instant."""

    adapter_id: str
    rx_bytes: int
    tx_bytes: int
    taken_at: float  # monotonic clock, seconds


# adapter_id → sample, all read in one pass
Snapshot = dict[str, AdapterSample]


@dataclass(frozen=True)
class RateSample:
    """Instantaneous rate of one adapter over one polling interval."""

    adapter_id: str
    rx_rate: float
    tx_rate: float
    observed_at: float


@dataclass
class Peaks:
    """Per-adapter maximum instantaneous rates, bytes/sec."""

    rx: dict[str, float] = field(default_factory=dict)
    tx: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ReportRow:
    """One adapter's line in a measurement report.

    Rates are bytes/sec; None means the rate is unavailable (zero-length
    measurement, or no polling interval was observed for a peak).
    """

    adapter_id: str
    description: str
    rx_bytes: int
    tx_bytes: int
    total_bytes: int
    avg_rx_rate: float | None
    avg_tx_rate: float | None
    peak_rx_rate: float | None
    peak_tx_rate: float | None
    bg_rx_rate: float | None = None  # set by background correction
    bg_tx_rate: float | None = None

    @property
    def background_corrected(self) -> bool:
        return self.bg_rx_rate is not None or self.bg_tx_rate is not None
