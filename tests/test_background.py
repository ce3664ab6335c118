"""Tests for ifmeter.background.subtract."""

from ifmeter.background import subtract
from ifmeter.models import ReportRow


def _row(adapter_id, avg_rx=None, avg_tx=None, peak_rx=None, peak_tx=None,
         rx_bytes=1000, tx_bytes=500):
    return ReportRow(
        adapter_id=adapter_id,
        description="",
        rx_bytes=rx_bytes,
        tx_bytes=tx_bytes,
        total_bytes=rx_bytes + tx_bytes,
        avg_rx_rate=avg_rx,
        avg_tx_rate=avg_tx,
        peak_rx_rate=peak_rx,
        peak_tx_rate=peak_tx,
    )


class TestSubtract:
    """Background correction of average and peak rates."""

    def test_linear_subtraction(self):
        """Corrected avg == avg - background avg for matching adapters."""
        report = [_row("A", avg_rx=500.0, avg_tx=300.0, peak_rx=900.0, peak_tx=400.0)]
        background = [_row("A", avg_rx=100.0, avg_tx=50.0, peak_rx=9999.0, peak_tx=9999.0)]

        row = subtract(report, background)[0]

        assert row.avg_rx_rate == 400.0
        assert row.avg_tx_rate == 250.0
        assert row.bg_rx_rate == 100.0
        assert row.bg_tx_rate == 50.0

    def test_peak_corrected_by_background_average(self):
        """Peak subtracts the background *average*, never its peak."""
        report = [_row("A", avg_rx=10.0, avg_tx=10.0, peak_rx=900.0, peak_tx=400.0)]
        background = [_row("A", avg_rx=100.0, avg_tx=50.0, peak_rx=800.0, peak_tx=350.0)]

        row = subtract(report, background)[0]

        assert row.peak_rx_rate == 800.0
        assert row.peak_tx_rate == 350.0

    def test_unavailable_rates_stay_unavailable(self):
        """None is never turned into a number by subtraction."""
        report = [_row("A", avg_rx=None, avg_tx=None, peak_rx=None, peak_tx=None)]
        background = [_row("A", avg_rx=100.0, avg_tx=50.0)]

        row = subtract(report, background)[0]

        assert row.avg_rx_rate is None
        assert row.avg_tx_rate is None
        assert row.peak_rx_rate is None
        assert row.peak_tx_rate is None
        assert row.bg_rx_rate == 100.0

    def test_missing_background_adapter_means_zero(self):
        """Adapters absent from the background run are not corrected."""
        report = [_row("A", avg_rx=500.0, avg_tx=300.0, peak_rx=600.0, peak_tx=350.0)]

        row = subtract(report, [_row("B", avg_rx=100.0, avg_tx=100.0)])[0]

        assert row.avg_rx_rate == 500.0
        assert row.peak_tx_rate == 350.0
        assert row.bg_rx_rate == 0.0
        assert row.bg_tx_rate == 0.0

    def test_unavailable_background_average_counts_as_zero(self):
        report = [_row("A", avg_rx=500.0, avg_tx=300.0)]
        background = [_row("A", avg_rx=None, avg_tx=None)]

        row = subtract(report, background)[0]

        assert row.avg_rx_rate == 500.0
        assert row.bg_rx_rate == 0.0

    def test_negative_results_not_clamped(self):
        """A rate below the background average goes negative."""
        report = [_row("A", avg_rx=20.0, avg_tx=0.0, peak_rx=80.0, peak_tx=0.0)]
        background = [_row("A", avg_rx=100.0, avg_tx=5.0)]

        row = subtract(report, background)[0]

        assert row.avg_rx_rate == -80.0
        assert row.peak_rx_rate == -20.0
        assert row.avg_tx_rate == -5.0

    def test_first_duplicate_background_row_wins(self):
        report = [_row("A", avg_rx=500.0, avg_tx=500.0)]
        background = [_row("A", avg_rx=100.0, avg_tx=100.0), _row("A", avg_rx=300.0, avg_tx=300.0)]

        row = subtract(report, background)[0]

        assert row.bg_rx_rate == 100.0

    def test_byte_totals_untouched(self):
        """Only rates change; byte deltas and totals are preserved."""
        original = _row("A", avg_rx=500.0, avg_tx=300.0, rx_bytes=5000, tx_bytes=3000)

        row = subtract([original], [_row("A", avg_rx=100.0, avg_tx=100.0)])[0]

        assert (row.rx_bytes, row.tx_bytes, row.total_bytes) == (5000, 3000, 8000)

    def test_inputs_not_modified(self):
        """Rows are copied; the stored background and report stay intact."""
        report = [_row("A", avg_rx=500.0, avg_tx=300.0)]
        background = [_row("A", avg_rx=100.0, avg_tx=100.0)]

        subtract(report, background)

        assert report[0].avg_rx_rate == 500.0
        assert report[0].bg_rx_rate is None
        assert background[0].avg_rx_rate == 100.0
