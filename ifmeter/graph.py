"""LiveGraph: plotext chart of aggregate rates while a measurement runs.

Handles: deque management, rate-limited redraws, ANSI cursor-home
double-buffering, and unit auto-scaling. Fed with the RateSamples the
PeakTracker produces on every tick.
"""

from __future__ import annotations

import math
import sys
import time
from collections import deque
from typing import TextIO

import plotext as plt

from ifmeter.base import format_rate, pick_unit
from ifmeter.models import RateSample


class LiveGraph:
    """Rolling ↓/↑ chart summed over all measured adapters."""

    def __init__(self, interval_s: float, window_seconds: float = 60.0,
                 title: str = "Net", stream: TextIO | None = None):
        self.interval_s = max(0.1, interval_s)
        self.window_seconds = max(self.interval_s * 4, window_seconds)
        self.max_points = max(2, int(self.window_seconds / self.interval_s))
        self.xs = [i * self.interval_s - self.window_seconds for i in range(self.max_points)]
        self.title = title
        self._stream = stream if stream is not None else sys.stdout

        self.dl = deque([0.0] * self.max_points, maxlen=self.max_points)
        self.ul = deque([0.0] * self.max_points, maxlen=self.max_points)
        self._last_draw = 0.0

    def push(self, rates: list[RateSample]) -> None:
        """Append one tick. Ticks without rates (clock stalled) are dropped."""
        if not rates:
            return
        self.dl.append(sum(r.rx_rate for r in rates))
        self.ul.append(sum(r.tx_rate for r in rates))

    def begin(self) -> None:
        self._stream.write("\033[2J\033[?25l")  # clear, hide cursor
        self._stream.flush()

    def end(self) -> None:
        self._stream.write("\033[?25h\n")  # show cursor
        self._stream.flush()

    def draw(self, hint: str = "") -> None:
        now = time.monotonic()
        if now - self._last_draw < 0.05:
            return
        self._last_draw = now

        peak = max(max(self.dl), max(self.ul), 1.0)
        unit_label, divisor = pick_unit(peak)
        dl_scaled = [v / divisor for v in self.dl]
        ul_scaled = [v / divisor for v in self.ul]
        y_max = math.ceil(max(max(dl_scaled), max(ul_scaled), 0.01) * 1.15)

        plt.clf()
        plt.theme("clear")
        plt.plotsize(None, None)
        plt.plot(self.xs, dl_scaled, label=f"↓ {format_rate(self.dl[-1])}",
                 color="green", marker="braille")
        plt.plot(self.xs, ul_scaled, label=f"↑ {format_rate(self.ul[-1])}",
                 color="yellow", marker="braille")
        plt.frame(False)
        plt.xticks([])
        plt.yticks([])
        plt.ylim(0, y_max)
        plt.xlim(-self.window_seconds, 0)
        plt.grid(False, False)

        title_parts = [self.title, unit_label]
        if hint:
            title_parts.append(f"({hint})")
        plt.text("  ".join(title_parts), x=-self.window_seconds / 2, y=y_max * 0.9,
                 color="default", alignment="center")

        self._stream.write("\033[H" + plt.build().rstrip() + "\033[J")
        self._stream.flush()
