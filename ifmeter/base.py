"""BaseSampler: shared counter-reading front end for all samplers.

Handles: adapter filtering (--interface, --exclude, loopback), timestamping
each snapshot from a single clock read, and unit auto-scaling helpers used
by the table and graph.

Subclasses implement: name, default_title, add_args(), setup(), read_counters().
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace
from collections.abc import Callable

from ifmeter.models import AdapterSample, Snapshot

# ---- unit scaling ----

RATE_UNITS = [("B/s", 1), ("KB/s", 1024), ("MB/s", 1024**2), ("GB/s", 1024**3)]
SIZE_UNITS = [("B", 1), ("KB", 1024), ("MB", 1024**2), ("GB", 1024**3)]

UNAVAILABLE = "n/a"


def pick_unit(max_val: float, units: list[tuple[str, int]] | None = None) -> tuple[str, int]:
    """Choose the best unit so the peak value is readable."""
    if units is None:
        units = RATE_UNITS
    for name, divisor in reversed(units):
        if abs(max_val) >= divisor:
            return name, divisor
    return units[0]


def format_rate(bps: float | None, units: list[tuple[str, int]] | None = None) -> str:
    """Format a value into a human-readable string with auto-scaled units.

    None renders as "n/a"; negative values keep their sign.
    """
    if bps is None:
        return UNAVAILABLE
    if units is None:
        units = RATE_UNITS
    name, divisor = pick_unit(bps, units)
    if divisor == 1:
        return f"{bps:.0f} {name}"
    return f"{bps / divisor:.1f} {name}"


def format_size(num_bytes: int) -> str:
    return format_rate(num_bytes, SIZE_UNITS)


# ---- base sampler ----

def add_filter_args(parser: ArgumentParser) -> None:
    """Adapter selection flags shared by every sampler."""
    parser.add_argument("--interface", default=None,
                        help="Measure a single adapter (e.g. enp0s31f6)")
    parser.add_argument("--exclude", default="",
                        help="Comma-separated adapters to skip (e.g. virbr0,tailscale0)")
    parser.add_argument("--include-loopback", action="store_true",
                        help="Also measure the loopback adapter")


class BaseSampler(ABC):
    """Abstract base for all counter sources.

    Lifecycle:
        1. __init__() reads the filter flags, calls setup()
        2. descriptions() is read once at startup
        3. take() is called for every snapshot
        4. cleanup() is called on exit
    """

    name: str = ""                # e.g. "proc", used by registry & --sampler
    default_title: str = ""       # e.g. "/proc/net/dev", shown by --list
    loopback_names: frozenset[str] = frozenset({"lo"})

    def __init__(self, args: Namespace | None = None,
                 clock: Callable[[], float] = time.monotonic):
        args = args if args is not None else Namespace()
        self.clock = clock
        self._interface = getattr(args, "interface", None)
        exclude = getattr(args, "exclude", "") or ""
        self._excludes = set(x.strip() for x in exclude.split(",") if x.strip())
        self._include_loopback = getattr(args, "include_loopback", False)

        self.setup(args)

    # ---- subclass interface ----

    @classmethod
    def add_args(cls, parser: ArgumentParser) -> None:
        """Override to add sampler-specific CLI flags."""

    def setup(self, args: Namespace) -> None:
        """Called once from __init__ with the parsed flags."""

    @abstractmethod
    def read_counters(self) -> dict[str, tuple[int, int]]:
        """Return {adapter_id: (rx_bytes, tx_bytes)} for every adapter."""

    def read_descriptions(self) -> dict[str, str]:
        """Override to supply display names for adapters."""
        return {}

    def cleanup(self) -> None:
        """Called on exit. Override to release resources."""

    # ---- public API ----

    def wants(self, adapter_id: str) -> bool:
        """True if the adapter passes the --interface/--exclude/loopback filters."""
        if self._interface:
            return adapter_id == self._interface
        if adapter_id in self._excludes:
            return False
        if not self._include_loopback and adapter_id in self.loopback_names:
            return False
        return True

    def take(self) -> Snapshot:
        """Read all adapters once and stamp them with the same instant."""
        counters = self.read_counters()
        now = self.clock()
        return {
            adapter_id: AdapterSample(adapter_id, rx, tx, now)
            for adapter_id, (rx, tx) in counters.items()
            if self.wants(adapter_id)
        }

    def descriptions(self) -> dict[str, str]:
        return {k: v for k, v in self.read_descriptions().items() if self.wants(k)}

    # ---- availability check ----

    @classmethod
    def is_available(cls) -> bool:
        """Return True if this sampler can run on the current system."""
        return True
